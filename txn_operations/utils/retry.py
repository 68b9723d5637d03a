"""
Retry Utilities for the Transactional Write Path

Repeats a request until its response satisfies a predicate. Unlike
exception-driven retries, the request itself succeeds at the transport level
and the response carries the retryable condition (region error, per-key
lock or write conflict), so retries are decided on the returned value.
"""

import logging
import time
from typing import Any, Callable, Optional, TypeVar

from tenacity import (
    RetryCallState,
    Retrying,
    retry_if_result,
    stop_after_attempt,
    stop_after_delay,
    wait_fixed,
)

logger = logging.getLogger(__name__)

T = TypeVar('T')


def _return_last_response(retry_state: RetryCallState) -> Any:
    return retry_state.outcome.result()


def retry_request(
    op: Callable[[], T],
    is_done: Callable[[T], bool],
    max_attempts: int,
    timeout: float,
    delay: float,
    sleep: Optional[Callable[[float], Any]] = None,
    operation_name: str = "request"
) -> T:
    """
    Call op until is_done(response) holds or the retry budget is spent.

    The loop keeps going while either budget remains: fewer than
    max_attempts calls were made, or less than timeout seconds elapsed since
    the first call. Calls are spaced by a fixed delay.

    Args:
        op: Zero-argument callable issuing the request
        is_done: Predicate telling whether a response needs no retry
        max_attempts: Attempt budget, counting the first call
        timeout: Wall-clock budget in seconds
        delay: Fixed delay between calls in seconds
        sleep: Sleep function (time.sleep by default), injectable for tests
        operation_name: Name used in log messages

    Returns:
        The last response received, whether or not it satisfies is_done.
        Callers decide what an unsatisfied final response means.

    Raises:
        Any exception raised by op, immediately and without retry

    Example:
        ```python
        responses = iter([busy, busy, ok])
        last = retry_request(
            lambda: next(responses),
            lambda r: r.succeeded,
            max_attempts=5,
            timeout=0.0,
            delay=0.0
        )
        assert last is ok
        ```
    """
    if max_attempts < 1:
        raise ValueError("max_attempts must be at least 1")

    def _log_retry(retry_state: RetryCallState) -> None:
        logger.warning(
            f"{operation_name} attempt {retry_state.attempt_number} not done: "
            f"{retry_state.outcome.result()!r}. Retrying in {delay:.2f}s..."
        )

    retrying = Retrying(
        retry=retry_if_result(lambda response: not is_done(response)),
        stop=stop_after_attempt(max_attempts) & stop_after_delay(timeout),
        wait=wait_fixed(delay),
        sleep=sleep or time.sleep,
        before_sleep=_log_retry,
        retry_error_callback=_return_last_response,
        reraise=True,
    )
    return retrying(op)
