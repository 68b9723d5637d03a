"""
Tests for the multi-version write workload.
"""

import pytest

from txn_operations import (
    PrewriteError,
    Transaction,
    WorkloadConfig,
    WriteWorkloadGenerator,
    put_mutation,
)


def test_every_key_gets_one_version_per_pass(driver, cluster):
    generator = WriteWorkloadGenerator(driver)
    result = generator.generate(key_count=200, version_count=3)

    assert result.version_count == 3
    assert result.batch_size == 4
    assert result.transaction_count == 150
    assert result.mutation_count == 600
    for i in (0, 57, 199):
        versions = cluster.committed_versions(f"key_{i}".encode())
        assert len(versions) == 3
        assert versions == sorted(versions)
    assert b"key_200" not in cluster.commit_index


def test_versions_are_ordered_by_pass(driver, cluster):
    WriteWorkloadGenerator(driver).generate(key_count=60, version_count=2)

    first_pass_last = cluster.committed_versions(b"key_59")[0]
    second_pass_first = cluster.committed_versions(b"key_0")[1]
    assert first_pass_last < second_pass_first


def test_values_follow_the_value_pattern(driver, cluster):
    generator = WriteWorkloadGenerator(driver)
    generator.generate(key_count=10, version_count=1)

    commit_ts = cluster.committed_versions(b"key_7")[0]
    assert cluster.value_at(b"key_7", commit_ts) == b"value_7" * 50
    assert generator.key(7) == "key_7"
    assert generator.value(3) == "value_3" * 50


def test_timestamps_are_monotonic(driver):
    result = WriteWorkloadGenerator(driver).generate(key_count=100, version_count=2)

    assert result.first_start_ts < result.last_commit_ts


@pytest.mark.parametrize("key_count, expected", [
    (3000, 60),
    (10, 1),
    (0, 1),
    (1_000_000, 1024),
])
def test_batch_size(key_count, expected):
    assert WorkloadConfig().batch_size(key_count) == expected


def test_custom_shape(driver, cluster):
    config = WorkloadConfig(batches_per_pass=2, key_prefix="k", value_prefix="v", value_repeat=1)
    result = WriteWorkloadGenerator(driver, config).generate(key_count=10, version_count=1)

    assert result.batch_size == 5
    assert result.transaction_count == 2
    commit_ts = cluster.committed_versions(b"k3")[0]
    assert cluster.value_at(b"k3", commit_ts) == b"v3"


def test_zero_keys_writes_nothing(driver, cluster):
    result = WriteWorkloadGenerator(driver).generate(key_count=0, version_count=3)

    assert result.transaction_count == 0
    assert cluster.calls["kv_prewrite"] == 0


def test_negative_counts_rejected(driver):
    with pytest.raises(ValueError):
        WriteWorkloadGenerator(driver).generate(key_count=-1, version_count=1)


def test_failing_batch_aborts_workload(driver, cluster):
    cluster.prewrite_region_errors = 1000

    with pytest.raises(PrewriteError):
        WriteWorkloadGenerator(driver).generate(key_count=10, version_count=1)
    assert cluster.calls["kv_commit"] == 0


def test_transaction_invariants():
    mutation = put_mutation("key_0", "value_0")
    with pytest.raises(ValueError):
        Transaction(start_ts=5, commit_ts=5, primary_key=b"key_0", mutations=[mutation])
    with pytest.raises(ValueError):
        Transaction(start_ts=5, commit_ts=6, primary_key=b"key_1", mutations=[mutation])
    assert Transaction(start_ts=5, commit_ts=6, primary_key=b"key_0", mutations=[mutation]).keys == [b"key_0"]
