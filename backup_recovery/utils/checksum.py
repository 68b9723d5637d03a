"""
Checksum Calculation Utilities

Checksums of backup file content. The import service validates an SST
against the CRC-32 and length recorded in its import metadata, so the CRC-32
computed here must match the service's (IEEE polynomial).
"""

import hashlib
import logging
import zlib
from typing import Union

from ..models.entities import ChecksumAlgorithm

logger = logging.getLogger(__name__)


class ChecksumCalculator:
    """
    Calculate and verify checksums of in-memory file content.

    Supported algorithms:
        - CRC32: 32-bit IEEE CRC, returned as an unsigned int
        - SHA256: Hex digest

    Example:
        ```python
        calculator = ChecksumCalculator(ChecksumAlgorithm.CRC32)
        crc = calculator.calculate_data_checksum(content)

        assert calculator.verify_data_checksum(content, crc)
        ```
    """

    def __init__(self, algorithm: ChecksumAlgorithm = ChecksumAlgorithm.CRC32):
        """
        Initialize checksum calculator with specified algorithm.

        Args:
            algorithm: Algorithm to use for checksum calculation
        """
        self.algorithm = algorithm
        logger.debug(f"ChecksumCalculator initialized with {algorithm.value}")

    @staticmethod
    def crc32(data: bytes) -> int:
        """Unsigned IEEE CRC-32 of data."""
        return zlib.crc32(data) & 0xFFFFFFFF

    @staticmethod
    def sha256(data: bytes) -> str:
        """Hex SHA-256 digest of data."""
        return hashlib.sha256(data).hexdigest()

    def calculate_data_checksum(self, data: bytes) -> Union[int, str]:
        """
        Calculate checksum for in-memory data.

        Args:
            data: Bytes to calculate checksum for

        Returns:
            int for CRC32, hexadecimal string for SHA256

        Raises:
            ValueError: If the algorithm is not supported
        """
        if self.algorithm == ChecksumAlgorithm.CRC32:
            checksum = self.crc32(data)
        elif self.algorithm == ChecksumAlgorithm.SHA256:
            checksum = self.sha256(data)
        else:
            raise ValueError(f"Unsupported checksum algorithm: {self.algorithm}")
        logger.debug(f"Calculated {self.algorithm.value} for {len(data)} bytes: {checksum}")
        return checksum

    def verify_data_checksum(self, data: bytes, expected_checksum: Union[int, str]) -> bool:
        """
        Verify data's checksum against an expected value.

        Args:
            data: Bytes to verify
            expected_checksum: Expected checksum value

        Returns:
            True if checksums match, False otherwise
        """
        actual_checksum = self.calculate_data_checksum(data)
        if isinstance(actual_checksum, str) and isinstance(expected_checksum, str):
            matches = actual_checksum.lower() == expected_checksum.lower()
        else:
            matches = actual_checksum == expected_checksum

        if not matches:
            logger.warning(
                f"Data checksum mismatch: expected {expected_checksum}, got {actual_checksum}"
            )
        return matches
