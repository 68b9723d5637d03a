"""
Pydantic Settings for Backup Verification

This module provides strongly-typed configuration settings using Pydantic,
with support for environment variables and YAML configuration files.
"""

from typing import Optional, Union
from pathlib import Path
import logging
import os

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic_yaml import to_yaml_file, to_yaml_str

from backup_verify_exceptions import ConfigurationError

logger = logging.getLogger(__name__)


class RetrySettings(BaseModel):
    """
    Retry settings for the transactional write path.

    Prewrite and commit are repeated until the response carries no region
    error and no per-key error, or until both the attempt budget and the
    wall-clock budget are spent. The delay between attempts is fixed.
    """
    delay_seconds: float = Field(0.2, ge=0,
                                 description="Fixed delay between two attempts of the same request")
    max_attempts: int = Field(11, ge=1,
                              description="Attempt budget, counting the initial request")
    timeout_seconds: float = Field(3.0, ge=0,
                                   description="Wall-clock budget measured from the first attempt")


class WorkloadSettings(BaseModel):
    """
    Write workload settings.

    Each pass writes every key once; key_count keys are split into batches of
    max(key_count // batches_per_pass, 1) keys, capped at max_batch_size.
    """
    key_count: int = Field(3000, ge=1, description="Number of sequential keys written per pass")
    version_count: int = Field(3, ge=1, description="Number of passes, i.e. committed versions per key")
    batches_per_pass: int = Field(50, ge=1, description="Target number of batches per pass")
    max_batch_size: int = Field(1024, ge=1, description="Upper bound on keys per transaction")
    key_prefix: str = Field("key_", description="Prefix of generated keys")
    value_prefix: str = Field("value_", description="Prefix of generated values")
    value_repeat: int = Field(50, ge=1, description="Times the value text is repeated")


class BackupSettings(BaseModel):
    """
    Backup and comparison settings.

    Keys are given as hex strings so that arbitrary bytes survive YAML and
    environment variables.
    """
    start_key_hex: str = Field("", description="Inclusive start of the backed up key range (hex)")
    end_key_hex: str = Field("ff", description="Exclusive end of the backed up key range (hex)")
    cf: str = Field("write", description="Column family named in the backup request")
    storage_root: str = Field("./backup_verify_runs",
                              description="Base directory under which unique run directories are created")
    sst_max_size: int = Field(64 * 1024, gt=0,
                              description="Size cap of a single backup file in bytes (set on the cluster)")

    @field_validator("start_key_hex", "end_key_hex")
    @classmethod
    def validate_hex(cls, v: str) -> str:
        bytes.fromhex(v)
        return v

    @property
    def start_key(self) -> bytes:
        return bytes.fromhex(self.start_key_hex)

    @property
    def end_key(self) -> bytes:
        return bytes.fromhex(self.end_key_hex)


class MonitoringSettings(BaseModel):
    """Logging settings."""
    log_level: str = Field("INFO", description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)")
    log_format: str = Field("%(asctime)s %(levelname)s %(name)s: %(message)s",
                            description="Format string handed to logging.basicConfig")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Unknown log level: {v}")
        return level


class VerifySettings(BaseSettings):
    """
    Main settings class that consolidates all configuration categories.

    Usage:
        # Load from environment variables and defaults
        settings = VerifySettings()

        # Override through the environment
        #   BACKUP_VERIFY_RETRY__MAX_ATTEMPTS=20
        #   BACKUP_VERIFY_WORKLOAD__KEY_COUNT=100

        # Load from YAML file
        settings = VerifySettings.from_yaml('verify.yaml')

        # Access nested settings
        delay = settings.retry.delay_seconds
        key_count = settings.workload.key_count
    """
    model_config = SettingsConfigDict(
        env_prefix="BACKUP_VERIFY_",
        env_nested_delimiter="__",
        case_sensitive=False,
    )

    retry: RetrySettings = Field(default_factory=RetrySettings,
                                 description="Retry policy of prewrite/commit")
    workload: WorkloadSettings = Field(default_factory=WorkloadSettings,
                                       description="Write workload shape")
    backup: BackupSettings = Field(default_factory=BackupSettings,
                                   description="Backup range, storage and comparison settings")
    monitoring: MonitoringSettings = Field(default_factory=MonitoringSettings,
                                           description="Logging configuration")

    @classmethod
    def from_yaml(cls, yaml_file: Union[str, Path]) -> "VerifySettings":
        """Load settings from YAML file"""
        with open(yaml_file, 'r') as f:
            data = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            raise ConfigurationError(
                f"Configuration file must hold a mapping, got {type(data).__name__}",
                {"path": str(yaml_file)}
            )
        return cls(**data)

    def to_yaml(self, yaml_file: Optional[Union[str, Path]] = None) -> str:
        """
        Serialize settings to YAML.

        Args:
            yaml_file: When given, the YAML document is also written there

        Returns:
            The YAML document as a string
        """
        if yaml_file is not None:
            to_yaml_file(Path(yaml_file), self)
        return to_yaml_str(self)


def load_settings(config_path: Optional[str] = None) -> VerifySettings:
    """
    Load settings from file and/or environment variables.

    Args:
        config_path: Path to YAML configuration file. If None or the file
                     doesn't exist, falls back to environment variables and
                     default values.

    Returns:
        VerifySettings object with loaded configuration

    Raises:
        ConfigurationError: If the file or the environment holds invalid settings
    """
    try:
        if config_path and os.path.exists(config_path):
            return VerifySettings.from_yaml(config_path)
        return VerifySettings()
    except (ValidationError, yaml.YAMLError) as e:
        logger.error(f"Invalid configuration in {config_path or 'environment'}: {e}")
        raise ConfigurationError(
            "Invalid configuration",
            {"path": config_path, "error": str(e)}
        ) from e


def configure_logging(settings: Optional[VerifySettings] = None) -> None:
    """
    Configure root logging from the monitoring settings.

    Args:
        settings: Settings to read; defaults are loaded when None
    """
    settings = settings or load_settings()
    logging.basicConfig(
        level=getattr(logging, settings.monitoring.log_level),
        format=settings.monitoring.log_format,
    )
