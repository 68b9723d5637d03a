"""
Backup Result Comparator

Proves that two backups of logically identical data are structurally
equivalent while tolerating their intended differences: the export time
embedded in file names and the freshly drawn encryption IVs.
"""

import logging
from collections import defaultdict
from typing import Dict, List, Sequence, Set

from ..exceptions import BackupMismatchError, LeaderInvariantError
from ..models.entities import BackupFile, BackupResponse
from ..models.file_name import BackupFileName, TIMESTAMP_INDEX

logger = logging.getLogger(__name__)

MASKED_FIELDS = ("name", "cipher_iv")


def collect_files(responses: Sequence[BackupResponse]) -> List[BackupFile]:
    """Flatten the files of every frame, keeping frame order."""
    files: List[BackupFile] = []
    for response in responses:
        files.extend(response.files)
    return files


def _sort_key(backup_file: BackupFile):
    parsed = BackupFileName.parse(backup_file.name)
    return (backup_file.start_key, backup_file.cf, backup_file.end_key, parsed.without_timestamp())


def _mask(backup_file: BackupFile) -> BackupFile:
    return backup_file.model_copy(update={"name": "", "cipher_iv": b""})


class BackupComparator:
    """
    Structural comparison of two backup file sets.

    Files are put in a canonical order (start key, column family, end key,
    then the name without its timestamp) before being paired, because a
    distributed backup may return them in any order. Each pair must
    then satisfy:

    - names equal token by token, except the timestamp token
    - cipher_iv values different (IVs are drawn per encryption)
    - every other field equal

    Example:
        ```python
        comparator = BackupComparator()
        comparator.assert_equivalent(collect_files(first), collect_files(second))
        ```
    """

    def assert_same_file_name(self, name_a: str, name_b: str) -> None:
        """
        Require two names to differ at most in their timestamp token.

        Raises:
            FileNameError: If either name does not follow the naming scheme
            BackupMismatchError: If any other token differs
        """
        parsed_a = BackupFileName.parse(name_a)
        parsed_b = BackupFileName.parse(name_b)
        differing = parsed_a.differing_tokens(parsed_b)
        if differing:
            raise BackupMismatchError(
                "File names differ outside the timestamp token",
                left=name_a,
                right=name_b,
                context={"token_indexes": differing, "timestamp_index": TIMESTAMP_INDEX},
            )

    def assert_equivalent(self, files_a: Sequence[BackupFile], files_b: Sequence[BackupFile]) -> None:
        """
        Require two file sets to be equivalent.

        Args:
            files_a: Files of the first backup
            files_b: Files of the second backup

        Raises:
            BackupMismatchError: On the first mismatch found
            FileNameError: If a name does not follow the naming scheme
        """
        if len(files_a) != len(files_b):
            raise BackupMismatchError(
                f"Backups have {len(files_a)} and {len(files_b)} files",
                left=[f.name for f in files_a],
                right=[f.name for f in files_b],
            )

        sorted_a = sorted(files_a, key=_sort_key)
        sorted_b = sorted(files_b, key=_sort_key)

        for index, (file_a, file_b) in enumerate(zip(sorted_a, sorted_b)):
            self.assert_same_file_name(file_a.name, file_b.name)

            if file_a.cipher_iv == file_b.cipher_iv:
                raise BackupMismatchError(
                    "cipher_iv is identical in both backups",
                    index=index,
                    left=file_a,
                    right=file_b,
                )

            masked_a = _mask(file_a)
            masked_b = _mask(file_b)
            if masked_a != masked_b:
                fields = [
                    name for name in BackupFile.model_fields
                    if name not in MASKED_FIELDS and getattr(masked_a, name) != getattr(masked_b, name)
                ]
                raise BackupMismatchError(
                    f"Files differ in {', '.join(fields)}",
                    index=index,
                    left=file_a,
                    right=file_b,
                    context={"fields": fields},
                )

        logger.info(f"{len(sorted_a)} file pair(s) are equivalent")

    def assert_leader_only(self, responses: Sequence[BackupResponse]) -> None:
        """
        Require every region to be exported by a single store.

        The exporting store and region are read from each file name.

        Raises:
            LeaderInvariantError: If a region has files from several stores
            FileNameError: If a name does not follow the naming scheme
        """
        region_stores: Dict[str, Set[str]] = defaultdict(set)
        for backup_file in collect_files(responses):
            parsed = BackupFileName.parse(backup_file.name)
            region_stores[parsed.region_id].add(parsed.store_id)

        offending = {
            region: sorted(stores)
            for region, stores in region_stores.items()
            if len(stores) > 1
        }
        if offending:
            logger.error(f"Regions exported by several stores: {offending}")
            raise LeaderInvariantError(offending)
        logger.debug(f"{len(region_stores)} region(s) exported by a single store each")


_default_comparator = BackupComparator()


def assert_same_file_name(name_a: str, name_b: str) -> None:
    _default_comparator.assert_same_file_name(name_a, name_b)


def assert_same_files(files_a: Sequence[BackupFile], files_b: Sequence[BackupFile]) -> None:
    _default_comparator.assert_equivalent(files_a, files_b)


def assert_leader_only(responses: Sequence[BackupResponse]) -> None:
    _default_comparator.assert_leader_only(responses)
