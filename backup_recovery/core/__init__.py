"""
Backup Recovery Core

Backup fan-out, SST reimport, result comparison, local storage and the
round trip orchestration.
"""

from .backup_driver import BackupDriver, non_empty_responses
from .comparator import (
    BackupComparator,
    collect_files,
    assert_same_file_name,
    assert_same_files,
    assert_leader_only
)
from .local_backend import LocalStorageBackend, create_storage, make_local_backend, make_unique_dir
from .manager import RoundTripVerifier
from .reimport import SstReimportDriver

__all__ = [
    'BackupDriver',
    'non_empty_responses',
    'BackupComparator',
    'collect_files',
    'assert_same_file_name',
    'assert_same_files',
    'assert_leader_only',
    'LocalStorageBackend',
    'create_storage',
    'make_local_backend',
    'make_unique_dir',
    'RoundTripVerifier',
    'SstReimportDriver'
]
