"""
Tests for the bounded retry loop of the write path.
"""

import time

import pytest

from txn_operations import RetryPolicy, retry_request


def _sequence(*responses):
    calls = []
    it = iter(responses)

    def op():
        value = next(it)
        calls.append(value)
        return value

    return op, calls


def test_returns_first_satisfying_response(sleeper):
    op, calls = _sequence("busy", "busy", "ok", "never")
    result = retry_request(op, lambda r: r == "ok", max_attempts=5, timeout=0.0, delay=0.2, sleep=sleeper)

    assert result == "ok"
    assert calls == ["busy", "busy", "ok"]
    assert sleeper.delays == [0.2, 0.2]


def test_no_retry_when_first_response_is_done(sleeper):
    op, calls = _sequence("ok")
    assert retry_request(op, lambda r: r == "ok", max_attempts=3, timeout=0.0, delay=0.2, sleep=sleeper) == "ok"
    assert len(calls) == 1
    assert sleeper.delays == []


def test_returns_last_response_when_attempts_exhausted(sleeper):
    op, calls = _sequence(*["busy-%d" % i for i in range(10)])
    result = retry_request(op, lambda r: False, max_attempts=4, timeout=0.0, delay=0.0, sleep=sleeper)

    assert result == "busy-3"
    assert len(calls) == 4


def test_single_attempt_budget(sleeper):
    op, calls = _sequence("busy", "ok")
    result = retry_request(op, lambda r: r == "ok", max_attempts=1, timeout=0.0, delay=0.0, sleep=sleeper)

    assert result == "busy"
    assert len(calls) == 1


def test_attempt_budget_does_not_stop_while_time_remains(sleeper):
    """Retrying continues past max_attempts until the timeout is also spent."""
    op, calls = _sequence("busy", "busy", "busy", "ok")
    result = retry_request(op, lambda r: r == "ok", max_attempts=1, timeout=60.0, delay=0.0, sleep=sleeper)

    assert result == "ok"
    assert len(calls) == 4


def test_stops_once_timeout_passes_after_attempts_spent():
    """Past max_attempts, retrying continues until the timeout has elapsed."""
    calls = []

    def op():
        calls.append(time.monotonic())
        return "busy-%d" % len(calls)

    started = time.monotonic()
    result = retry_request(op, lambda r: False, max_attempts=2, timeout=0.3, delay=0.05)
    elapsed = time.monotonic() - started

    assert len(calls) > 2
    assert result == "busy-%d" % len(calls)
    assert elapsed >= 0.3
    assert elapsed < 5.0


def test_exceptions_propagate_without_retry(sleeper):
    calls = []

    def op():
        calls.append(1)
        raise RuntimeError("transport down")

    with pytest.raises(RuntimeError, match="transport down"):
        retry_request(op, lambda r: True, max_attempts=5, timeout=0.0, delay=0.0, sleep=sleeper)
    assert len(calls) == 1


def test_invalid_attempt_budget():
    with pytest.raises(ValueError):
        retry_request(lambda: "ok", lambda r: True, max_attempts=0, timeout=0.0, delay=0.0)


def test_policy_defaults():
    policy = RetryPolicy()
    assert policy.delay_seconds == 0.2
    assert policy.max_attempts == 11
    assert policy.timeout_seconds == 3.0


@pytest.mark.parametrize("kwargs", [
    {"delay_seconds": -1.0},
    {"max_attempts": 0},
    {"timeout_seconds": -0.5},
])
def test_policy_rejects_invalid_values(kwargs):
    with pytest.raises(ValueError):
        RetryPolicy(**kwargs)


def test_policy_run_uses_its_budget(sleeper):
    policy = RetryPolicy(delay_seconds=0.5, max_attempts=3, timeout_seconds=0.0)
    op, calls = _sequence("a", "b", "c", "d")

    assert policy.run(op, lambda r: False, sleep=sleeper) == "c"
    assert sleeper.delays == [0.5, 0.5]
