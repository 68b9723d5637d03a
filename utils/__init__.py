"""
Utilities Module

Shared helpers used across the verification packages:
- Injectable identifier sources for run directories and SST uuids
"""

from .identifiers import (
    IdentifierSource,
    RandomIdentifierSource,
    SeededIdentifierSource,
    default_identifier_source
)

__all__ = [
    'IdentifierSource',
    'RandomIdentifierSource',
    'SeededIdentifierSource',
    'default_identifier_source',
]
