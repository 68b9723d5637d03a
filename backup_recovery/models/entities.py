"""
Backup Recovery Entities

Request/response records of the backup and SST import services, and the
outcome of a full backup round trip.

These models use Pydantic for validation. Records exchanged with the cluster
are immutable; two files are equal when every field is equal.
"""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from connection_management.models import RegionEpoch, RpcContext


class ColumnFamily(str, Enum):
    """
    Column families exported by a transactional backup.

    Families:
        DEFAULT: Values of large writes, keyed by (key, start_ts)
        WRITE: Commit records, keyed by (key, commit_ts)
    """
    DEFAULT = "default"
    WRITE = "write"


class ChecksumAlgorithm(str, Enum):
    """
    Supported checksum algorithms.

    Algorithms:
        CRC32: IEEE CRC-32, the checksum the import service validates
        SHA256: SHA-256, the digest the backup service records per file
    """
    CRC32 = "CRC32"
    SHA256 = "SHA256"


class StorageBackendType(str, Enum):
    """
    Storage backend kinds a backup can be written to.

    Types:
        LOCAL: Directory on the local file system of every store
    """
    LOCAL = "LOCAL"


class StorageBackend(BaseModel):
    """
    Descriptor of where exported files are persisted.

    Attributes:
        backend_type: Kind of backend
        path: Root directory of a local backend
    """
    model_config = ConfigDict(frozen=True)

    backend_type: StorageBackendType = Field(default=StorageBackendType.LOCAL)
    path: str = Field(..., min_length=1, description="Root directory of the backend")


class KeyRange(BaseModel):
    """Half-open key range [start, end); an empty end means unbounded."""
    model_config = ConfigDict(frozen=True)

    start: bytes = Field(default=b"")
    end: bytes = Field(default=b"")


class RpcErrorInfo(BaseModel):
    """Error carried inside a response body."""
    model_config = ConfigDict(frozen=True)

    message: str = Field(default="")


class BackupRequest(BaseModel):
    """
    Backup request sent to every store.

    Attributes:
        start_key / end_key: Key range [start_key, end_key) to export
        start_version / end_version: Version range [begin_ts, backup_ts]
        cf: Column family named by the request
        storage_backend: Destination of the exported files
        is_raw_kv: False for transactional (MVCC) data
    """
    model_config = ConfigDict(frozen=True)

    start_key: bytes = Field(default=b"")
    end_key: bytes = Field(default=b"")
    start_version: int = Field(default=0, ge=0)
    end_version: int = Field(..., ge=0)
    cf: str = Field(default=ColumnFamily.WRITE.value)
    storage_backend: StorageBackend
    is_raw_kv: bool = Field(default=False)


class BackupFile(BaseModel):
    """
    One exported SST file.

    The name follows the backup service's naming scheme (see
    BackupFileName); cipher_iv is drawn fresh for every encryption.
    """
    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1)
    sha256: bytes = Field(default=b"")
    start_key: bytes = Field(default=b"")
    end_key: bytes = Field(default=b"")
    start_version: int = Field(default=0, ge=0)
    end_version: int = Field(default=0, ge=0)
    crc64xor: int = Field(default=0, ge=0)
    total_kvs: int = Field(default=0, ge=0)
    total_bytes: int = Field(default=0, ge=0)
    cf: str = Field(default="")
    size: int = Field(default=0, ge=0)
    cipher_iv: bytes = Field(default=b"")


class BackupResponse(BaseModel):
    """One frame of a store's backup stream."""
    model_config = ConfigDict(frozen=True)

    start_key: bytes = Field(default=b"")
    end_key: bytes = Field(default=b"")
    files: List[BackupFile] = Field(default_factory=list)
    error: Optional[RpcErrorInfo] = None

    @property
    def has_files(self) -> bool:
        return bool(self.files)


class SstMeta(BaseModel):
    """
    Import metadata of one SST file.

    Derived from the file's content and the target region; it has no
    identity before an import attempt and is discarded after ingest.
    """
    model_config = ConfigDict(frozen=True)

    uuid: bytes = Field(..., min_length=16, max_length=16)
    range: KeyRange = Field(default_factory=KeyRange)
    crc32: int = Field(..., ge=0)
    length: int = Field(..., ge=0)
    cf_name: str = Field(..., min_length=1)
    region_id: int = Field(..., ge=0)
    region_epoch: RegionEpoch = Field(default_factory=RegionEpoch)


class DownloadRequest(BaseModel):
    """Stage one backup file on a store as an importable SST."""
    model_config = ConfigDict(frozen=True)

    storage_backend: StorageBackend
    name: str = Field(..., min_length=1)
    sst: SstMeta


class DownloadResponse(BaseModel):
    """Download acknowledgement."""
    model_config = ConfigDict(frozen=True)

    range: Optional[KeyRange] = None
    is_empty: bool = False
    error: Optional[RpcErrorInfo] = None


class MultiIngestRequest(BaseModel):
    """Atomically ingest several staged SSTs into one region."""
    model_config = ConfigDict(frozen=True)

    context: RpcContext
    ssts: List[SstMeta] = Field(default_factory=list)


class IngestResponse(BaseModel):
    """Ingest acknowledgement."""
    model_config = ConfigDict(frozen=True)

    error: Optional[RpcErrorInfo] = None

    @property
    def has_error(self) -> bool:
        return self.error is not None


class RoundTripResult(BaseModel):
    """
    Outcome of a backup -> reimport -> backup round trip.

    Attributes:
        storage_path: Directory holding the first (reimported) backup
        backup_ts: Version both compared backups were taken at
        source_file_count: Files exported from the source cluster
        target_file_count: Files exported from the target cluster
        ingested_sst_count: SSTs ingested into the target cluster
        transaction_count: Transactions written by the workload
    """
    storage_path: str
    backup_ts: int = Field(..., ge=0)
    source_file_count: int = Field(default=0, ge=0)
    target_file_count: int = Field(default=0, ge=0)
    ingested_sst_count: int = Field(default=0, ge=0)
    transaction_count: int = Field(default=0, ge=0)
    equivalent: bool = False
