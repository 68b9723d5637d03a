"""
Configuration Module

Centralized configuration for the backup verification harness:
- Retry policy of the transactional write path
- Write workload shape
- Backup key range, storage root and file-name comparison settings
- Logging configuration

Settings load from environment variables (BACKUP_VERIFY_ prefix, "__" as
nested delimiter) or YAML files, validated with Pydantic.
"""

from .settings import (
    VerifySettings,
    RetrySettings,
    WorkloadSettings,
    BackupSettings,
    MonitoringSettings,
    load_settings,
    configure_logging
)

__all__ = [
    'VerifySettings',
    'RetrySettings',
    'WorkloadSettings',
    'BackupSettings',
    'MonitoringSettings',
    'load_settings',
    'configure_logging',
]
