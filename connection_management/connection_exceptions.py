"""
Connection Management Exceptions

Exceptions raised while resolving stores and service clients of a cluster.
"""

from backup_verify_exceptions import BackupVerifyError


class ConnectionError(BackupVerifyError):
    """Base exception for all cluster connection errors."""
    pass


class StoreNotFoundError(ConnectionError):
    """
    Raised when a store id is not part of the cluster.

    Routing contexts name the leader store of a region; if that store is not
    listed by the cluster the topology changed under the harness.
    """

    def __init__(self, store_id: int, known_stores=None):
        super().__init__(
            f"Store {store_id} is not part of the cluster",
            {"store_id": store_id, "known_stores": list(known_stores or [])}
        )
        self.store_id = store_id


class EmptyClusterError(ConnectionError):
    """Raised when a cluster reports no stores at all."""
    pass
