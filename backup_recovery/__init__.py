"""
Backup Recovery Module

Proves backup correctness under a download-and-reingest round trip:
- Backup fan-out to every store of a cluster
- Reconstruction of SST import metadata from exported files, staging and
  atomic ingest into a second cluster
- Structural comparison of two backups, tolerating file-name timestamps and
  requiring freshly drawn encryption IVs
- A file name schema isolating the backup service's naming scheme
- Local storage backend and unique run directories

Typical usage:

    from backup_recovery import (
        BackupVerifyConfig,
        RoundTripVerifier,
        BackupMismatchError
    )

    verifier = RoundTripVerifier(config=BackupVerifyConfig(storage_root="/tmp/verify"))
    try:
        result = verifier.run(source_cluster, target_cluster)
    except BackupMismatchError as e:
        print(f"Backups differ: {e}")
"""

# Configuration
from .config import BackupVerifyConfig

# Core
from .core import (
    BackupDriver,
    non_empty_responses,
    BackupComparator,
    collect_files,
    assert_same_file_name,
    assert_same_files,
    assert_leader_only,
    LocalStorageBackend,
    create_storage,
    make_local_backend,
    make_unique_dir,
    RoundTripVerifier,
    SstReimportDriver
)

# Models
from .models.entities import (
    ColumnFamily,
    ChecksumAlgorithm,
    StorageBackendType,
    StorageBackend,
    KeyRange,
    RpcErrorInfo,
    BackupRequest,
    BackupFile,
    BackupResponse,
    SstMeta,
    DownloadRequest,
    DownloadResponse,
    MultiIngestRequest,
    IngestResponse,
    RoundTripResult
)
from .models.file_name import BackupFileName, name_to_cf

# Exceptions
from .exceptions import (
    BackupRecoveryError,
    BackupStreamError,
    LeaderInvariantError,
    StorageReadError,
    ChecksumMismatchError,
    UnknownColumnFamilyError,
    FileNameError,
    SstDownloadError,
    IngestError,
    BackupMismatchError,
    VerificationFailedError
)

# Utilities
from .utils import ChecksumCalculator

__all__ = [
    # Configuration
    'BackupVerifyConfig',

    # Core
    'BackupDriver',
    'non_empty_responses',
    'BackupComparator',
    'collect_files',
    'assert_same_file_name',
    'assert_same_files',
    'assert_leader_only',
    'LocalStorageBackend',
    'create_storage',
    'make_local_backend',
    'make_unique_dir',
    'RoundTripVerifier',
    'SstReimportDriver',

    # Enums
    'ColumnFamily',
    'ChecksumAlgorithm',
    'StorageBackendType',

    # Messages
    'StorageBackend',
    'KeyRange',
    'RpcErrorInfo',
    'BackupRequest',
    'BackupFile',
    'BackupResponse',
    'SstMeta',
    'DownloadRequest',
    'DownloadResponse',
    'MultiIngestRequest',
    'IngestResponse',
    'RoundTripResult',

    # File name schema
    'BackupFileName',
    'name_to_cf',

    # Exceptions
    'BackupRecoveryError',
    'BackupStreamError',
    'LeaderInvariantError',
    'StorageReadError',
    'ChecksumMismatchError',
    'UnknownColumnFamilyError',
    'FileNameError',
    'SstDownloadError',
    'IngestError',
    'BackupMismatchError',
    'VerificationFailedError',

    # Utilities
    'ChecksumCalculator'
]
