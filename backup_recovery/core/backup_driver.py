"""
Backup Driver

Fans a backup request out to every store of a cluster and drains each
store's streamed response into a flat list.
"""

import logging
from pathlib import Path
from typing import List, Union

from connection_management import Cluster, ClusterConnection
from ..exceptions import BackupRecoveryError, BackupStreamError
from ..models.entities import BackupRequest, BackupResponse, ColumnFamily, StorageBackend
from .local_backend import make_local_backend

logger = logging.getLogger(__name__)


class BackupDriver:
    """
    Runs a backup against every store of one cluster.

    Every store is asked, not only region leaders: non-leader stores are
    expected to answer with empty frames, so the aggregate may contain frames
    without files. Streams are drained eagerly, one store after the other;
    the end of a store's stream is the only terminal condition.

    Example:
        ```python
        driver = BackupDriver(cluster)
        responses = driver.run_backup(
            start_key=b"",
            end_key=b"\\xff",
            begin_ts=0,
            backup_ts=cluster.get_ts(),
            destination=run_dir
        )
        files = collect_files(responses)
        ```
    """

    def __init__(self, cluster: Union[Cluster, ClusterConnection]):
        """
        Initialize the driver.

        Args:
            cluster: Cluster handle or shared connection to it
        """
        self._connection = cluster if isinstance(cluster, ClusterConnection) else ClusterConnection(cluster)

    @property
    def connection(self) -> ClusterConnection:
        return self._connection

    def build_request(
        self,
        start_key: bytes,
        end_key: bytes,
        begin_ts: int,
        backup_ts: int,
        destination: Union[str, Path, StorageBackend],
        cf: str = ColumnFamily.WRITE.value,
        is_raw_kv: bool = False
    ) -> BackupRequest:
        """Build the request every store receives."""
        if begin_ts > backup_ts:
            raise ValueError(f"begin_ts {begin_ts} is after backup_ts {backup_ts}")
        backend = destination if isinstance(destination, StorageBackend) else make_local_backend(destination)
        return BackupRequest(
            start_key=start_key,
            end_key=end_key,
            start_version=begin_ts,
            end_version=backup_ts,
            cf=cf,
            storage_backend=backend,
            is_raw_kv=is_raw_kv,
        )

    def run_backup(
        self,
        start_key: bytes,
        end_key: bytes,
        begin_ts: int,
        backup_ts: int,
        destination: Union[str, Path, StorageBackend],
        cf: str = ColumnFamily.WRITE.value,
        is_raw_kv: bool = False
    ) -> List[BackupResponse]:
        """
        Back up [start_key, end_key) at versions [begin_ts, backup_ts].

        Args:
            start_key: Inclusive start of the key range
            end_key: Exclusive end of the key range
            begin_ts: Lowest version exported
            backup_ts: Highest version exported
            destination: Run directory or storage backend descriptor
            cf: Column family named in the request
            is_raw_kv: Whether the data is raw (non-transactional) KV

        Returns:
            Every frame received, in store order then stream order

        Raises:
            BackupStreamError: If a stream fails or a frame carries an error
        """
        request = self.build_request(start_key, end_key, begin_ts, backup_ts, destination, cf, is_raw_kv)
        responses: List[BackupResponse] = []

        logger.info(
            f"Starting backup of [{start_key!r}, {end_key!r}) at [{begin_ts}, {backup_ts}] "
            f"to {request.storage_backend.path}"
        )

        for store_id, client in self._connection.backup_clients():
            frames = self._drain(store_id, client.backup, request)
            logger.debug(
                f"Store {store_id} returned {len(frames)} frame(s), "
                f"{sum(len(f.files) for f in frames)} file(s)"
            )
            responses.extend(frames)

        logger.info(
            f"Backup finished: {len(responses)} frame(s), "
            f"{sum(len(r.files) for r in responses)} file(s)"
        )
        return responses

    def _drain(self, store_id: int, backup_call, request: BackupRequest) -> List[BackupResponse]:
        frames: List[BackupResponse] = []
        try:
            for frame in backup_call(request):
                if frame.error is not None:
                    logger.error(f"Store {store_id} returned backup error: {frame.error.message}")
                    raise BackupStreamError(
                        f"Backup frame carries an error: {frame.error.message}",
                        store_id,
                        {"response": frame},
                    )
                frames.append(frame)
        except BackupRecoveryError:
            raise
        except Exception as e:
            logger.error(f"Backup stream of store {store_id} failed: {e}")
            raise BackupStreamError(f"Backup stream failed: {e}", store_id) from e
        return frames


def non_empty_responses(responses: List[BackupResponse]) -> List[BackupResponse]:
    """Frames that carry at least one file."""
    return [r for r in responses if r.files]
