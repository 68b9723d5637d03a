"""
Backup Verify Exceptions

This module defines the root exceptions for the backup_verify package.
Every fatal condition of the harness derives from AssertionError so that a
failed verification is reported as a failed check, carrying the offending
response or value for diagnosis.
"""

from typing import Any, Dict, Optional


class BackupVerifyError(AssertionError):
    """
    Base exception for all backup verification errors.

    Attributes:
        message: Human-readable error message
        context: Offending response/value and other diagnostic fields

    Example:
        ```python
        try:
            verifier.run(source, target, tmp_dir)
        except BackupVerifyError as e:
            logger.error(f"Verification failed: {e.message}")
            logger.error(f"Context: {e.context}")
        ```
    """

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)

    def __str__(self) -> str:
        parts = [self.message]
        if self.context:
            parts.append(f"Context: {self.context}")
        return " | ".join(parts)


class ConfigurationError(BackupVerifyError):
    """Raised when configuration is invalid or missing"""
    pass


class RpcTransportError(BackupVerifyError):
    """
    Raised by cluster clients when an RPC cannot be delivered.

    Transport failures are never retried: they indicate an environment
    problem rather than a transient logical condition.
    """

    def __init__(self, message: str, store_id: Optional[int] = None, method: Optional[str] = None):
        context = {}
        if store_id is not None:
            context["store_id"] = store_id
        if method:
            context["method"] = method
        super().__init__(message, context)
        self.store_id = store_id
        self.method = method
