"""
Cluster Connection Manager

Wraps a long-lived cluster handle and caches the per-store service clients
so that every component of one verification run shares them.
"""

import logging
from typing import Dict, List, Tuple

from .cluster import BackupClient, Cluster, ImportSstClient, KvClient
from .connection_exceptions import EmptyClusterError, StoreNotFoundError
from .models import RpcContext

logger = logging.getLogger(__name__)


class ClusterConnection:
    """
    Shared access point to one cluster.

    The cluster handle and its clients are acquired once and reused for the
    life of a run. The connection is read-only: it never changes topology and
    holds no state besides the client caches.

    Example:
        ```python
        connection = ClusterConnection(cluster)

        context, kv_client = connection.kv_client_for_key(b"key_0")
        response = kv_client.kv_prewrite(request)

        for store_id, client in connection.backup_clients():
            for frame in client.backup(backup_request):
                ...
        ```
    """

    def __init__(self, cluster: Cluster, name: str = "cluster"):
        """
        Initialize the connection.

        Args:
            cluster: External cluster handle
            name: Label used in log messages
        """
        self._cluster = cluster
        self.name = name
        self._kv_clients: Dict[int, KvClient] = {}
        self._backup_clients: Dict[int, BackupClient] = {}
        self._import_clients: Dict[int, ImportSstClient] = {}
        logger.debug(f"ClusterConnection '{name}' initialized")

    @property
    def cluster(self) -> Cluster:
        """Underlying cluster handle."""
        return self._cluster

    def get_ts(self) -> int:
        """Fetch a fresh logical timestamp from the cluster."""
        return self._cluster.get_ts()

    def get_stores(self) -> List[int]:
        """
        List the stores of the cluster.

        Raises:
            EmptyClusterError: If the cluster reports no store
        """
        stores = list(self._cluster.get_stores())
        if not stores:
            raise EmptyClusterError(f"Cluster '{self.name}' has no stores")
        return stores

    def new_rpc_context(self, key: bytes) -> RpcContext:
        """Route a key to its region and leader peer."""
        context = self._cluster.new_rpc_context(key)
        logger.debug(
            f"[{self.name}] key {key[:16]!r} routed to region {context.region_id} "
            f"on store {context.store_id}"
        )
        return context

    def _check_store(self, store_id: int) -> None:
        stores = self.get_stores()
        if store_id not in stores:
            raise StoreNotFoundError(store_id, stores)

    def kv_client(self, store_id: int) -> KvClient:
        """Get the transactional KV client of a store."""
        if store_id not in self._kv_clients:
            self._check_store(store_id)
            self._kv_clients[store_id] = self._cluster.get_kv_client(store_id)
        return self._kv_clients[store_id]

    def backup_client(self, store_id: int) -> BackupClient:
        """Get the backup client of a store."""
        if store_id not in self._backup_clients:
            self._check_store(store_id)
            self._backup_clients[store_id] = self._cluster.get_backup_client(store_id)
        return self._backup_clients[store_id]

    def import_client(self, store_id: int) -> ImportSstClient:
        """Get the SST import client of a store."""
        if store_id not in self._import_clients:
            self._check_store(store_id)
            self._import_clients[store_id] = self._cluster.get_import_client(store_id)
        return self._import_clients[store_id]

    def kv_client_for_key(self, key: bytes) -> Tuple[RpcContext, KvClient]:
        """
        Resolve the routing context of a key and the KV client serving it.

        Args:
            key: Key whose region leader should receive the request

        Returns:
            Tuple of (routing context, KV client of the leader store)
        """
        context = self.new_rpc_context(key)
        return context, self.kv_client(context.store_id)

    def backup_clients(self) -> List[Tuple[int, BackupClient]]:
        """Backup clients of every store, in cluster order."""
        return [(store_id, self.backup_client(store_id)) for store_id in self.get_stores()]

    def import_clients(self) -> List[Tuple[int, ImportSstClient]]:
        """Import clients of every store, in cluster order."""
        return [(store_id, self.import_client(store_id)) for store_id in self.get_stores()]
