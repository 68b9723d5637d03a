"""
Tests for the transactional prewrite/commit driver.
"""

import time

import pytest

from backup_verify_exceptions import RpcTransportError
from txn_operations import (
    CommitError,
    InvalidTimestampError,
    KeyErrorKind,
    PrewriteError,
    RetryExhaustedError,
    RetryPolicy,
    TxnDriver,
    put_mutation,
)


def _mutations(count=3):
    return [put_mutation(f"key_{i}", f"value_{i}") for i in range(count)]


def test_prewrite_then_commit_applies_writes(driver, cluster):
    mutations = _mutations()
    start_ts = cluster.get_ts()

    driver.must_kv_prewrite(mutations, mutations[0].key, start_ts)
    assert set(cluster.locks) == {m.key for m in mutations}

    commit_ts = cluster.get_ts()
    driver.must_kv_commit([m.key for m in mutations], start_ts, commit_ts)

    assert cluster.locks == {}
    assert cluster.committed_versions(b"key_1") == [commit_ts]
    assert cluster.value_at(b"key_1", commit_ts) == b"value_1"


def test_prewrite_request_fields(driver, cluster):
    mutations = _mutations()
    start_ts = cluster.get_ts()
    seen = []
    client = driver.connection.kv_client(1)
    original = client.kv_prewrite

    def spy(request):
        seen.append(request)
        return original(request)

    client.kv_prewrite = spy
    driver.must_kv_prewrite(mutations, mutations[0].key, start_ts)

    request = seen[0]
    assert request.primary_lock == b"key_0"
    assert request.start_version == start_ts
    assert request.lock_ttl == start_ts + 1
    assert request.context.store_id == cluster.leader_store


def test_prewrite_retries_region_errors(driver, cluster, sleeper):
    cluster.prewrite_region_errors = 2
    mutations = _mutations()

    driver.must_kv_prewrite(mutations, mutations[0].key, cluster.get_ts())

    assert cluster.calls["kv_prewrite"] == 3
    assert len(sleeper.delays) == 2


def test_prewrite_retries_key_errors(driver, cluster):
    cluster.prewrite_key_errors = 1
    mutations = _mutations()

    response = driver.must_kv_prewrite(mutations, mutations[0].key, cluster.get_ts())

    assert response.succeeded
    assert cluster.calls["kv_prewrite"] == 2


def test_prewrite_region_error_exhaustion(driver, cluster):
    cluster.prewrite_region_errors = 100
    mutations = _mutations()

    with pytest.raises(PrewriteError) as exc_info:
        driver.must_kv_prewrite(mutations, mutations[0].key, cluster.get_ts())

    error = exc_info.value
    assert error.attempts == 5
    assert error.last_response.has_region_error
    assert cluster.calls["kv_prewrite"] == 5


def test_prewrite_write_conflict_exhaustion(driver, cluster):
    mutations = _mutations(1)
    stale_ts = cluster.get_ts()
    start_ts = cluster.get_ts()
    driver.must_kv_prewrite(mutations, mutations[0].key, start_ts)
    driver.must_kv_commit([mutations[0].key], start_ts, cluster.get_ts())

    with pytest.raises(PrewriteError) as exc_info:
        driver.must_kv_prewrite(mutations, mutations[0].key, stale_ts)
    assert exc_info.value.last_response.errors[0].kind == KeyErrorKind.WRITE_CONFLICT


def test_commit_retries_then_succeeds(driver, cluster):
    mutations = _mutations()
    start_ts = cluster.get_ts()
    driver.must_kv_prewrite(mutations, mutations[0].key, start_ts)
    cluster.commit_region_errors = 1
    cluster.commit_key_errors = 1

    driver.must_kv_commit([m.key for m in mutations], start_ts, cluster.get_ts())

    assert cluster.calls["kv_commit"] == 3
    assert cluster.locks == {}


def test_commit_without_prewrite_exhausts(driver, cluster):
    start_ts = cluster.get_ts()

    with pytest.raises(CommitError) as exc_info:
        driver.must_kv_commit([b"key_0"], start_ts, cluster.get_ts())

    assert exc_info.value.last_response.error.kind == KeyErrorKind.TXN_LOCK_NOT_FOUND
    assert isinstance(exc_info.value, RetryExhaustedError)
    assert isinstance(exc_info.value, AssertionError)


@pytest.mark.parametrize("start_ts, commit_ts", [(10, 10), (10, 9)])
def test_commit_requires_later_timestamp(driver, cluster, start_ts, commit_ts):
    with pytest.raises(InvalidTimestampError):
        driver.must_kv_commit([b"key_0"], start_ts, commit_ts)
    assert cluster.calls["kv_commit"] == 0


def test_commit_requires_keys(driver):
    with pytest.raises(ValueError):
        driver.must_kv_commit([], 1, 2)


def test_transport_errors_are_not_retried(driver, cluster):
    cluster.transport_failures.add("kv_prewrite")
    mutations = _mutations()

    with pytest.raises(RpcTransportError):
        driver.must_kv_prewrite(mutations, mutations[0].key, cluster.get_ts())
    assert cluster.calls["kv_prewrite"] == 1


def test_driver_accepts_raw_cluster(cluster, fast_policy):
    driver = TxnDriver(cluster, fast_policy)
    mutations = _mutations(1)
    start_ts = cluster.get_ts()

    driver.must_kv_prewrite(mutations, mutations[0].key, start_ts)
    driver.must_kv_commit([mutations[0].key], start_ts, cluster.get_ts())

    assert driver.policy is fast_policy
    assert len(cluster.committed_versions(b"key_0")) == 1


def test_prewrite_fails_once_timeout_runs_out(cluster):
    policy = RetryPolicy(delay_seconds=0.05, max_attempts=2, timeout_seconds=0.3)
    driver = TxnDriver(cluster, policy)
    cluster.prewrite_region_errors = 10_000
    mutations = _mutations()

    started = time.monotonic()
    with pytest.raises(PrewriteError) as exc_info:
        driver.must_kv_prewrite(mutations, mutations[0].key, cluster.get_ts())

    assert time.monotonic() - started >= 0.3
    assert exc_info.value.attempts > 2
    assert exc_info.value.attempts == cluster.calls["kv_prewrite"]
