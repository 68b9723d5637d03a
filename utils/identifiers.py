"""
Identifier Sources

Unique run directories and SST identifiers are the only randomness the
harness itself introduces. Both come from an IdentifierSource so tests can
swap the random source for a seeded one.
"""

import logging
import random
import uuid
from typing import Optional, Protocol

logger = logging.getLogger(__name__)


class IdentifierSource(Protocol):
    """Produces fresh identifiers for one verification run."""

    def new_uuid(self) -> bytes:
        """16-byte identifier for an SST import attempt."""
        ...

    def new_dir_suffix(self) -> str:
        """16-hex-digit suffix for a unique run directory."""
        ...


class RandomIdentifierSource:
    """Identifier source backed by uuid4 and the process-wide RNG."""

    def new_uuid(self) -> bytes:
        return uuid.uuid4().bytes

    def new_dir_suffix(self) -> str:
        return f"{random.getrandbits(64):016x}"


class SeededIdentifierSource:
    """
    Deterministic identifier source.

    Two sources built with the same seed yield the same sequence of
    identifiers, which makes directory names and SST uuids reproducible.

    Example:
        ```python
        ids = SeededIdentifierSource(seed=7)
        ids.new_dir_suffix()  # same value on every run
        ```
    """

    def __init__(self, seed: Optional[int] = 0):
        self._rng = random.Random(seed)

    def new_uuid(self) -> bytes:
        return uuid.UUID(int=self._rng.getrandbits(128), version=4).bytes

    def new_dir_suffix(self) -> str:
        return f"{self._rng.getrandbits(64):016x}"


_default_source: IdentifierSource = RandomIdentifierSource()


def default_identifier_source() -> IdentifierSource:
    """Process-wide random identifier source."""
    return _default_source
