"""
Backup Recovery Configuration

Configuration of the backup round trip: which key range and column family
are exported, where run directories are created and which checks run on the
exported file sets.
"""

from dataclasses import dataclass
from pathlib import Path
import logging

from config import VerifySettings
from .models.entities import ColumnFamily

logger = logging.getLogger(__name__)


@dataclass
class BackupVerifyConfig:
    """
    Configuration for backup verification.

    Range Settings:
        start_key: Inclusive start of the exported key range
        end_key: Exclusive end of the exported key range
        cf: Column family named in backup requests

    Storage Settings:
        storage_root: Base directory under which unique run directories are created

    Check Settings:
        check_leader_only: Require every region to be exported by a single store
        require_empty_initial_backup: Require the backup taken before the
            workload to contain no file

    Workload Settings:
        key_count: Keys written per pass by the round trip workload
        version_count: Passes (versions per key) written by the round trip workload

    Example:
        ```python
        config = BackupVerifyConfig(storage_root="/tmp/verify", key_count=100)
        verifier = RoundTripVerifier(config=config)
        ```
    """

    # Range Settings
    start_key: bytes = b""
    end_key: bytes = b"\xff"
    cf: str = ColumnFamily.WRITE.value

    # Storage Settings
    storage_root: str = "./backup_verify_runs"

    # Check Settings
    check_leader_only: bool = True
    require_empty_initial_backup: bool = True

    # Workload Settings
    key_count: int = 3000
    version_count: int = 3

    def __post_init__(self):
        """Validate configuration after initialization."""
        self.validate()

    def validate(self) -> None:
        """
        Validate configuration parameters.

        Raises:
            ValueError: If any configuration parameter is invalid
        """
        if self.end_key and self.start_key >= self.end_key:
            raise ValueError("start_key must sort before end_key")
        if self.cf not in {cf.value for cf in ColumnFamily}:
            raise ValueError(f"Unknown column family: {self.cf}")
        if not self.storage_root:
            raise ValueError("storage_root must be set")
        if self.key_count < 1:
            raise ValueError("key_count must be positive")
        if self.version_count < 1:
            raise ValueError("version_count must be positive")
        if self.key_count * self.version_count > 1_000_000:
            logger.warning(
                f"Large workload ({self.key_count} keys x {self.version_count} versions) "
                f"may take a long time"
            )

    @classmethod
    def from_settings(cls, settings: VerifySettings) -> 'BackupVerifyConfig':
        """Build the configuration from loaded settings."""
        return cls(
            start_key=settings.backup.start_key,
            end_key=settings.backup.end_key,
            cf=settings.backup.cf,
            storage_root=settings.backup.storage_root,
            key_count=settings.workload.key_count,
            version_count=settings.workload.version_count,
        )

    def get_storage_root(self) -> Path:
        """Storage root as a Path object."""
        return Path(self.storage_root)

    def __repr__(self) -> str:
        return (
            f"BackupVerifyConfig("
            f"range=[{self.start_key!r}, {self.end_key!r}), "
            f"cf={self.cf}, "
            f"storage_root={self.storage_root}, "
            f"workload={self.key_count}x{self.version_count}"
            f")"
        )
