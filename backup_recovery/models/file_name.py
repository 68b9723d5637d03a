"""
Backup File Name Schema

The backup service names every exported file

    {store_id}_{region_id}_{epoch_version}_{key_hash}_{timestamp_ms}_{cf}.sst

e.g. 2_1_1_e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855_1609407693105_write.sst

The millisecond timestamp is the only field that differs between two backups
of identical data. All knowledge of the scheme lives here so comparison logic
never splits names by hand.
"""

from dataclasses import dataclass
from typing import List, Tuple

from ..exceptions import FileNameError, UnknownColumnFamilyError
from .entities import ColumnFamily

NAME_DELIMITER = "_"
TOKEN_COUNT = 6
TIMESTAMP_INDEX = 4
SST_EXTENSION = ".sst"


def name_to_cf(name: str) -> ColumnFamily:
    """
    Extract the column family from a file name.

    Exactly one of the known column family tokens must appear in the name.

    Raises:
        UnknownColumnFamilyError: If no known token, or more than one, appears
    """
    found = [cf for cf in ColumnFamily if cf.value in name]
    if len(found) != 1:
        raise UnknownColumnFamilyError(name, [cf.value for cf in found])
    return found[0]


@dataclass(frozen=True)
class BackupFileName:
    """
    Parsed backup file name.

    Attributes:
        store_id: Store that exported the file
        region_id: Region the file was exported from
        epoch_version: Region epoch version at export time
        key_hash: Hash of the exported key range
        timestamp_ms: Local export time in milliseconds
        suffix: Final token, column family plus extension

    Example:
        ```python
        parsed = BackupFileName.parse(f.name)
        parsed.cf            # ColumnFamily.WRITE
        parsed.timestamp_ms  # 1609407693105
        assert parsed.format() == f.name
        ```
    """

    store_id: str
    region_id: str
    epoch_version: str
    key_hash: str
    timestamp_ms: int
    suffix: str

    @classmethod
    def parse(cls, name: str) -> "BackupFileName":
        """
        Parse a file name.

        Raises:
            FileNameError: If the name does not have exactly six tokens or
                           its timestamp token is not a decimal number
        """
        tokens = name.split(NAME_DELIMITER)
        if len(tokens) != TOKEN_COUNT:
            raise FileNameError(
                name, f"expected {TOKEN_COUNT} '{NAME_DELIMITER}'-delimited tokens, got {len(tokens)}"
            )
        timestamp = tokens[TIMESTAMP_INDEX]
        if not (timestamp.isascii() and timestamp.isdigit()):
            raise FileNameError(name, f"timestamp token {timestamp!r} is not numeric")
        if not tokens[-1]:
            raise FileNameError(name, "empty column family token")
        return cls(
            store_id=tokens[0],
            region_id=tokens[1],
            epoch_version=tokens[2],
            key_hash=tokens[3],
            timestamp_ms=int(timestamp),
            suffix=tokens[5],
        )

    @classmethod
    def build(
        cls,
        store_id: int,
        region_id: int,
        epoch_version: int,
        key_hash: str,
        timestamp_ms: int,
        cf: ColumnFamily
    ) -> "BackupFileName":
        return cls(
            store_id=str(store_id),
            region_id=str(region_id),
            epoch_version=str(epoch_version),
            key_hash=key_hash,
            timestamp_ms=timestamp_ms,
            suffix=f"{cf.value}{SST_EXTENSION}",
        )

    @property
    def tokens(self) -> List[str]:
        return [
            self.store_id,
            self.region_id,
            self.epoch_version,
            self.key_hash,
            str(self.timestamp_ms),
            self.suffix,
        ]

    @property
    def cf(self) -> ColumnFamily:
        return name_to_cf(self.suffix)

    def format(self) -> str:
        return NAME_DELIMITER.join(self.tokens)

    def without_timestamp(self) -> Tuple[str, ...]:
        """Tokens that must match between equivalent backups."""
        return tuple(t for i, t in enumerate(self.tokens) if i != TIMESTAMP_INDEX)

    def differing_tokens(self, other: "BackupFileName") -> List[int]:
        """Indexes of tokens that differ from other, timestamp excluded."""
        return [
            i for i, (a, b) in enumerate(zip(self.tokens, other.tokens))
            if i != TIMESTAMP_INDEX and a != b
        ]

    def __str__(self) -> str:
        return self.format()
