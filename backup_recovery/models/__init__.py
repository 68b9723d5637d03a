"""
Backup Recovery Models

Exports the backup/import message records and the file name schema.
"""

from .entities import (
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

from .file_name import (
    BackupFileName,
    name_to_cf,
    NAME_DELIMITER,
    TOKEN_COUNT,
    TIMESTAMP_INDEX
)

__all__ = [
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
    'NAME_DELIMITER',
    'TOKEN_COUNT',
    'TIMESTAMP_INDEX'
]
