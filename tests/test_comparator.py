"""
Tests for structural comparison of two backups.
"""

import pytest

from backup_recovery import (
    BackupComparator,
    BackupFile,
    BackupMismatchError,
    BackupResponse,
    FileNameError,
    LeaderInvariantError,
    assert_leader_only,
    assert_same_files,
    collect_files,
)

HASH_A = "a" * 64
HASH_B = "b" * 64


def make_file(start_key=b"key_0", cf="write", key_hash=HASH_A, ts=1000, store=1, region=1, iv=b"\x01" * 16, **kwargs):
    fields = dict(
        name=f"{store}_{region}_1_{key_hash}_{ts}_{cf}.sst",
        sha256=b"\x11" * 32,
        start_key=start_key,
        end_key=start_key + b"\x00",
        start_version=0,
        end_version=42,
        crc64xor=7,
        total_kvs=3,
        total_bytes=120,
        cf=cf,
        size=512,
        cipher_iv=iv,
    )
    fields.update(kwargs)
    return BackupFile(**fields)


def test_equivalent_backups_pass():
    first = [make_file(), make_file(start_key=b"key_9", key_hash=HASH_B, cf="default")]
    second = [
        make_file(start_key=b"key_9", key_hash=HASH_B, cf="default", ts=2000, iv=b"\x02" * 16),
        make_file(ts=2001, iv=b"\x03" * 16),
    ]
    assert_same_files(first, second)


def test_empty_backups_are_equivalent():
    assert_same_files([], [])


def test_same_start_key_sorted_by_column_family():
    first = [make_file(cf="write"), make_file(cf="default")]
    second = [
        make_file(cf="default", ts=5, iv=b"\x07" * 16),
        make_file(cf="write", ts=6, iv=b"\x08" * 16),
    ]
    assert_same_files(first, second)


def test_same_start_key_and_cf_paired_by_end_key():
    """Files sharing start key and column family pair up regardless of stream order."""
    short = dict(start_key=b"key_0", end_key=b"key_1", key_hash=HASH_A)
    long = dict(start_key=b"key_0", end_key=b"key_9", key_hash=HASH_B)
    first = [make_file(**short), make_file(**long)]
    second = [
        make_file(ts=2000, iv=b"\x02" * 16, **long),
        make_file(ts=2001, iv=b"\x03" * 16, **short),
    ]
    assert_same_files(first, second)


def test_same_range_paired_by_name_without_timestamp():
    first = [make_file(key_hash=HASH_A), make_file(key_hash=HASH_B)]
    second = [
        make_file(key_hash=HASH_B, ts=2000, iv=b"\x02" * 16),
        make_file(key_hash=HASH_A, ts=1, iv=b"\x03" * 16),
    ]
    assert_same_files(first, second)


def test_length_mismatch():
    with pytest.raises(BackupMismatchError, match="files"):
        assert_same_files([make_file()], [])


def test_identical_iv_is_rejected():
    with pytest.raises(BackupMismatchError, match="cipher_iv") as exc_info:
        assert_same_files([make_file()], [make_file(ts=2000)])
    assert exc_info.value.index == 0


@pytest.mark.parametrize("field, value", [
    ("sha256", b"\x22" * 32),
    ("size", 513),
    ("total_kvs", 4),
    ("crc64xor", 8),
    ("end_version", 43),
])
def test_field_difference_is_reported(field, value):
    changed = make_file(ts=2000, iv=b"\x02" * 16, **{field: value})
    with pytest.raises(BackupMismatchError) as exc_info:
        assert_same_files([make_file()], [changed])
    assert exc_info.value.context["fields"] == [field]


def test_name_difference_outside_timestamp_is_rejected():
    with pytest.raises(BackupMismatchError):
        assert_same_files([make_file()], [make_file(store=2, ts=2000, iv=b"\x02" * 16)])


def test_malformed_name_fails_comparison():
    bad = make_file(name="1_1_write.sst", iv=b"\x02" * 16)
    with pytest.raises(FileNameError):
        assert_same_files([make_file()], [bad])


def test_collect_files_flattens_frames():
    frames = [
        BackupResponse(files=[make_file()]),
        BackupResponse(),
        BackupResponse(files=[make_file(start_key=b"key_5", key_hash=HASH_B)]),
    ]
    files = collect_files(frames)
    assert [f.start_key for f in files] == [b"key_0", b"key_5"]


def test_leader_only_accepts_one_store_per_region():
    frames = [
        BackupResponse(files=[make_file(store=1, region=1), make_file(store=1, region=1, cf="default")]),
        BackupResponse(files=[make_file(store=2, region=2, key_hash=HASH_B)]),
        BackupResponse(),
    ]
    assert_leader_only(frames)


def test_leader_only_rejects_region_exported_twice():
    frames = [
        BackupResponse(files=[make_file(store=1, region=1)]),
        BackupResponse(files=[make_file(store=2, region=1)]),
    ]
    with pytest.raises(LeaderInvariantError) as exc_info:
        BackupComparator().assert_leader_only(frames)
    assert exc_info.value.region_stores == {"1": ["1", "2"]}


def test_mismatch_is_an_assertion_error():
    with pytest.raises(AssertionError):
        assert_same_files([make_file()], [])
