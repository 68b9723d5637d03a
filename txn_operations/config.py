"""
Transaction Operations Configuration

Tunable parameters of the transactional write path: the bounded retry policy
applied to prewrite/commit and the shape of the write workload.
"""

from dataclasses import dataclass
from typing import Any, Callable, Optional, TypeVar
import logging

from config import VerifySettings
from .utils.retry import retry_request

logger = logging.getLogger(__name__)

T = TypeVar('T')


@dataclass
class RetryPolicy:
    """
    Retry-until-predicate-or-exhausted policy.

    A request is repeated until its response satisfies the caller's
    predicate, or until both budgets are spent: the attempt budget
    (max_attempts, counting the first attempt) and the wall-clock budget
    (timeout_seconds since the first attempt). Attempts are spaced by a fixed
    delay; there is no backoff or jitter.

    Attributes:
        delay_seconds: Fixed delay between attempts
        max_attempts: Attempt budget, initial request included
        timeout_seconds: Wall-clock budget

    Example:
        ```python
        policy = RetryPolicy(delay_seconds=0.0, max_attempts=3, timeout_seconds=0.0)
        response = policy.run(lambda: client.kv_commit(request), lambda r: r.succeeded)
        ```
    """

    delay_seconds: float = 0.2
    max_attempts: int = 11
    timeout_seconds: float = 3.0

    def __post_init__(self):
        """Validate configuration after initialization."""
        self.validate()

    def validate(self) -> None:
        """
        Validate policy parameters.

        Raises:
            ValueError: If any parameter is out of range
        """
        if self.delay_seconds < 0:
            raise ValueError("delay_seconds cannot be negative")
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        if self.timeout_seconds < 0:
            raise ValueError("timeout_seconds cannot be negative")
        if self.timeout_seconds > 60:
            logger.warning(f"Long retry timeout ({self.timeout_seconds}s) may hide a stuck cluster")

    @classmethod
    def from_settings(cls, settings: VerifySettings) -> 'RetryPolicy':
        """Build the policy from loaded settings."""
        return cls(
            delay_seconds=settings.retry.delay_seconds,
            max_attempts=settings.retry.max_attempts,
            timeout_seconds=settings.retry.timeout_seconds,
        )

    def run(
        self,
        op: Callable[[], T],
        is_done: Callable[[T], bool],
        sleep: Optional[Callable[[float], Any]] = None,
        operation_name: str = "request"
    ) -> T:
        """Run op under this policy; see retry_request."""
        return retry_request(
            op,
            is_done,
            max_attempts=self.max_attempts,
            timeout=self.timeout_seconds,
            delay=self.delay_seconds,
            sleep=sleep,
            operation_name=operation_name,
        )


@dataclass
class WorkloadConfig:
    """
    Shape of the write workload.

    Attributes:
        batches_per_pass: Target number of transactions per pass
        max_batch_size: Upper bound on keys per transaction
        key_prefix: Prefix of generated keys (suffixed with the key index)
        value_prefix: Prefix of generated values (suffixed with the key index)
        value_repeat: Times the value text is repeated
    """

    batches_per_pass: int = 50
    max_batch_size: int = 1024
    key_prefix: str = "key_"
    value_prefix: str = "value_"
    value_repeat: int = 50

    def __post_init__(self):
        """Validate configuration after initialization."""
        self.validate()

    def validate(self) -> None:
        """
        Validate workload parameters.

        Raises:
            ValueError: If any parameter is out of range
        """
        if self.batches_per_pass < 1:
            raise ValueError("batches_per_pass must be at least 1")
        if self.max_batch_size < 1:
            raise ValueError("max_batch_size must be at least 1")
        if not self.key_prefix:
            raise ValueError("key_prefix cannot be empty")
        if self.value_repeat < 1:
            raise ValueError("value_repeat must be at least 1")

    @classmethod
    def from_settings(cls, settings: VerifySettings) -> 'WorkloadConfig':
        """Build the workload shape from loaded settings."""
        return cls(
            batches_per_pass=settings.workload.batches_per_pass,
            max_batch_size=settings.workload.max_batch_size,
            key_prefix=settings.workload.key_prefix,
            value_prefix=settings.workload.value_prefix,
            value_repeat=settings.workload.value_repeat,
        )

    def batch_size(self, key_count: int) -> int:
        """Keys per transaction for a pass of key_count keys."""
        return min(max(key_count // self.batches_per_pass, 1), self.max_batch_size)
