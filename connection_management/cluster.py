"""
Cluster Handle Contract

The storage cluster is an external collaborator reached only through its
request/response contracts. These protocols describe the surface the harness
consumes; any object providing the methods (a gRPC-backed handle, an
in-process test cluster) can be passed where a Cluster is expected.
"""

from typing import Iterator, List, Protocol, TYPE_CHECKING

from .models import RpcContext

if TYPE_CHECKING:
    from txn_operations.models.entities import (
        PrewriteRequest,
        PrewriteResponse,
        CommitRequest,
        CommitResponse,
    )
    from backup_recovery.models.entities import (
        BackupRequest,
        BackupResponse,
        DownloadRequest,
        DownloadResponse,
        MultiIngestRequest,
        IngestResponse,
    )


class KvClient(Protocol):
    """Transactional KV service of one store."""

    def kv_prewrite(self, request: "PrewriteRequest") -> "PrewriteResponse":
        ...

    def kv_commit(self, request: "CommitRequest") -> "CommitResponse":
        ...


class BackupClient(Protocol):
    """Backup service of one store; responses are streamed."""

    def backup(self, request: "BackupRequest") -> Iterator["BackupResponse"]:
        ...


class ImportSstClient(Protocol):
    """SST import service of one store."""

    def download(self, request: "DownloadRequest") -> "DownloadResponse":
        ...

    def multi_ingest(self, request: "MultiIngestRequest") -> "IngestResponse":
        ...


class Cluster(Protocol):
    """
    Long-lived handle to a running cluster.

    Methods:
        get_ts: Fetch a fresh, strictly increasing logical timestamp
        get_stores: List every store id in the cluster
        new_rpc_context: Route a key to its region and leader peer
        get_kv_client / get_backup_client / get_import_client:
            Service clients bound to a store
    """

    def get_ts(self) -> int:
        ...

    def get_stores(self) -> List[int]:
        ...

    def new_rpc_context(self, key: bytes) -> RpcContext:
        ...

    def get_kv_client(self, store_id: int) -> KvClient:
        ...

    def get_backup_client(self, store_id: int) -> BackupClient:
        ...

    def get_import_client(self, store_id: int) -> ImportSstClient:
        ...
