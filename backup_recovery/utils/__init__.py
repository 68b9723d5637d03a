"""
Backup Recovery Utilities

Exports the checksum helper used to derive SST import metadata.
"""

from .checksum import ChecksumCalculator

__all__ = [
    'ChecksumCalculator'
]
