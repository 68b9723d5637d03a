"""
Backup Recovery Exceptions

Defines the fatal conditions of the backup, reimport and comparison steps.
None of them is retried: they indicate an environment problem or a violation
of the backup/import service contracts that retries cannot fix.
"""

from typing import Any, Dict, List, Optional

from backup_verify_exceptions import BackupVerifyError


class BackupRecoveryError(BackupVerifyError):
    """
    Base exception for all backup, reimport and comparison errors.

    Attributes:
        message: Human-readable error message
        context: Offending response/value and other diagnostic fields

    Example:
        ```python
        try:
            driver.reimport(responses, backend)
        except BackupRecoveryError as e:
            logger.error(f"Reimport failed: {e.message}")
            logger.error(f"Context: {e.context}")
        ```
    """
    pass


class BackupStreamError(BackupRecoveryError):
    """
    A store's backup stream failed or returned an error frame.

    Additional Attributes:
        store_id: Store whose stream failed
    """

    def __init__(self, message: str, store_id: int, context: Optional[Dict[str, Any]] = None):
        context = dict(context or {})
        context["store_id"] = store_id
        super().__init__(message, context)
        self.store_id = store_id


class LeaderInvariantError(BackupRecoveryError):
    """
    Files of one region were exported by more than one store.

    Only the leader of a region is expected to export it; non-leader stores
    return empty frames.

    Additional Attributes:
        region_stores: Offending region ids mapped to the stores that exported them
    """

    def __init__(self, region_stores: Dict[str, List[str]]):
        super().__init__(
            "Regions exported by more than one store",
            {"region_stores": region_stores}
        )
        self.region_stores = region_stores


class StorageReadError(BackupRecoveryError):
    """
    A backup file could not be read from the storage backend.

    Additional Attributes:
        name: File name that was requested
        storage_path: Root of the storage backend
    """

    def __init__(self, name: str, storage_path: str, reason: str = ""):
        super().__init__(
            f"Failed to read backup file '{name}'" + (f": {reason}" if reason else ""),
            {"name": name, "storage_path": storage_path}
        )
        self.name = name
        self.storage_path = storage_path


class ChecksumMismatchError(BackupRecoveryError):
    """
    A backup file's content does not match the digest recorded by the backup.

    Additional Attributes:
        name: Offending file name
        expected: Hex digest recorded in the backup response
        actual: Hex digest of the content read from storage
    """

    def __init__(self, name: str, expected: str, actual: str):
        super().__init__(
            f"SHA-256 of backup file '{name}' does not match the backup response",
            {"name": name, "expected": expected, "actual": actual}
        )
        self.name = name
        self.expected = expected
        self.actual = actual


class UnknownColumnFamilyError(BackupRecoveryError):
    """
    A file name does not name exactly one known column family.

    Additional Attributes:
        name: Offending file name
        found: Column family tokens found in the name
    """

    def __init__(self, name: str, found: Optional[List[str]] = None):
        super().__init__(
            f"Cannot derive column family from file name '{name}'",
            {"name": name, "found": list(found or [])}
        )
        self.name = name
        self.found = list(found or [])


class FileNameError(BackupRecoveryError):
    """
    A file name does not follow the backup naming scheme.

    Raised for a token count other than six or a non-numeric timestamp
    token, so such names are flagged instead of silently compared.
    """

    def __init__(self, name: str, reason: str):
        super().__init__(f"Malformed backup file name '{name}': {reason}", {"name": name})
        self.name = name
        self.reason = reason


class SstDownloadError(BackupRecoveryError):
    """
    Staging a backup file on a store failed.

    Additional Attributes:
        store_id: Store the download was sent to
        name: Backup file being staged
    """

    def __init__(self, message: str, store_id: int, name: str, context: Optional[Dict[str, Any]] = None):
        context = dict(context or {})
        context.update({"store_id": store_id, "name": name})
        super().__init__(message, context)
        self.store_id = store_id
        self.name = name


class IngestError(BackupRecoveryError):
    """
    The multi-ingest request failed or its response carried an error.

    Additional Attributes:
        store_id: Store the ingest was sent to
        response: Offending ingest response, if one was received
    """

    def __init__(self, message: str, store_id: int, response: Any = None):
        super().__init__(message, {"store_id": store_id, "response": response})
        self.store_id = store_id
        self.response = response


class BackupMismatchError(BackupRecoveryError):
    """
    Two backups that should be equivalent are not.

    Additional Attributes:
        index: Position (after sorting) of the mismatching file pair, if any
        left / right: Offending values
    """

    def __init__(
        self,
        message: str,
        index: Optional[int] = None,
        left: Any = None,
        right: Any = None,
        context: Optional[Dict[str, Any]] = None
    ):
        context = dict(context or {})
        if index is not None:
            context["index"] = index
        context.update({"left": left, "right": right})
        super().__init__(message, context)
        self.index = index
        self.left = left
        self.right = right


class VerificationFailedError(BackupRecoveryError):
    """A round-trip precondition or expectation did not hold."""
    pass
