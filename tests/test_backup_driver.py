"""
Tests for the backup fan-out driver.
"""

import pytest

from backup_recovery import (
    BackupDriver,
    BackupStreamError,
    ColumnFamily,
    make_local_backend,
    non_empty_responses,
    collect_files,
)
from backup_verify_exceptions import RpcTransportError
from txn_operations import WriteWorkloadGenerator


@pytest.mark.parametrize("start_key, end_key", [
    (b"", b""),
    (b"", b"\xff"),
    (b"key_", b""),
    (b"key_", b"key_z"),
    (b"\x00", b"\x01"),
    (b"key_7", b"key_7\x00"),
])
def test_empty_cluster_exports_no_file(cluster, tmp_path, start_key, end_key):
    responses = BackupDriver(cluster).run_backup(start_key, end_key, 0, cluster.get_ts(), tmp_path)

    assert collect_files(responses) == []
    assert non_empty_responses(responses) == []
    assert cluster.calls["backup"] == 3


def test_every_store_is_asked(cluster, driver, tmp_path):
    WriteWorkloadGenerator(driver).generate(key_count=100, version_count=2)

    responses = BackupDriver(cluster).run_backup(b"", b"\xff", 0, cluster.get_ts(), tmp_path)

    assert cluster.calls["backup"] == 3
    assert len(non_empty_responses(responses)) == 1
    files = collect_files(responses)
    assert {f.cf for f in files} == {ColumnFamily.DEFAULT.value, ColumnFamily.WRITE.value}
    for backup_file in files:
        assert (tmp_path / backup_file.name).is_file()
        assert backup_file.name.startswith(f"{cluster.leader_store}_{cluster.region_id}_")


def test_key_range_bounds_exported_keys(cluster, driver, tmp_path):
    WriteWorkloadGenerator(driver).generate(key_count=20, version_count=2)
    backup = BackupDriver(cluster)
    backup_ts = cluster.get_ts()

    outside = backup.run_backup(b"\x00", b"\x01", 0, backup_ts, tmp_path / "outside")
    single = collect_files(backup.run_backup(b"key_7", b"key_7\x00", 0, backup_ts, tmp_path / "single"))

    assert collect_files(outside) == []
    assert sum(f.total_kvs for f in single if f.cf == "write") == 2
    assert {f.start_key for f in single} == {b"key_7"}


def test_request_fields(cluster, tmp_path):
    request = BackupDriver(cluster).build_request(b"a", b"z", 3, 9, tmp_path, cf="default")

    assert request.start_key == b"a"
    assert request.end_key == b"z"
    assert request.start_version == 3
    assert request.end_version == 9
    assert request.cf == "default"
    assert request.is_raw_kv is False
    assert request.storage_backend == make_local_backend(tmp_path)


def test_begin_after_backup_ts_rejected(cluster, tmp_path):
    with pytest.raises(ValueError):
        BackupDriver(cluster).build_request(b"", b"\xff", 10, 9, tmp_path)


def test_versions_after_backup_ts_are_excluded(cluster, driver, tmp_path):
    generator = WriteWorkloadGenerator(driver)
    generator.generate(key_count=10, version_count=1)
    backup_ts = cluster.get_ts()
    generator.generate(key_count=10, version_count=1)

    files = collect_files(BackupDriver(cluster).run_backup(b"", b"\xff", 0, backup_ts, tmp_path))

    assert sum(f.total_kvs for f in files if f.cf == "write") == 10


def test_error_frame_is_fatal(cluster, tmp_path):
    cluster.backup_error = "disk full"

    with pytest.raises(BackupStreamError, match="disk full") as exc_info:
        BackupDriver(cluster).run_backup(b"", b"\xff", 0, cluster.get_ts(), tmp_path)
    assert exc_info.value.store_id == 1


def test_stream_failure_is_wrapped(cluster, tmp_path):
    cluster.transport_failures.add("backup")

    with pytest.raises(BackupStreamError) as exc_info:
        BackupDriver(cluster).run_backup(b"", b"\xff", 0, cluster.get_ts(), tmp_path)
    assert isinstance(exc_info.value.__cause__, RpcTransportError)
