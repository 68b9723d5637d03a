"""
Transaction Operations Exceptions

Exception hierarchy for the transactional write path. Retryable logical
errors never escape as exceptions: they are retried under the bounded
policy, and only exhaustion is promoted to one of the errors below.
"""

from typing import Any, Dict, Optional

from backup_verify_exceptions import BackupVerifyError


class TxnOperationError(BackupVerifyError):
    """Base exception for all write path errors."""
    pass


class RetryExhaustedError(TxnOperationError):
    """
    Raised when a request still fails after the retry budget is spent.

    Attributes:
        operation: Name of the retried operation
        attempts: Number of attempts made
        last_response: Response of the final attempt

    Example:
        ```python
        try:
            driver.must_kv_prewrite(mutations, primary_key, start_ts)
        except RetryExhaustedError as e:
            logger.error(f"{e.operation} failed after {e.attempts} attempts")
            logger.error(f"Last response: {e.last_response}")
        ```
    """

    def __init__(
        self,
        message: str,
        operation: str,
        attempts: int,
        last_response: Any = None,
        context: Optional[Dict[str, Any]] = None
    ):
        context = dict(context or {})
        context.update({
            "operation": operation,
            "attempts": attempts,
            "last_response": last_response,
        })
        super().__init__(message, context)
        self.operation = operation
        self.attempts = attempts
        self.last_response = last_response


class PrewriteError(RetryExhaustedError):
    """Prewrite kept reporting a region error or per-key errors."""
    pass


class CommitError(RetryExhaustedError):
    """Commit kept reporting a region error or a key error."""
    pass


class InvalidTimestampError(TxnOperationError):
    """Raised when a commit timestamp does not follow its start timestamp."""

    def __init__(self, start_ts: int, commit_ts: int):
        super().__init__(
            f"commit_ts {commit_ts} must be greater than start_ts {start_ts}",
            {"start_ts": start_ts, "commit_ts": commit_ts}
        )
        self.start_ts = start_ts
        self.commit_ts = commit_ts
