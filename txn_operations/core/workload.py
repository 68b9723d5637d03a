"""
Write Workload Generator

Populates a cluster with several committed versions of the same keys so that
a backup has to export MVCC history, not only the latest values.
"""

import logging
from typing import List, Optional

from ..config import WorkloadConfig
from ..models.entities import Mutation, Transaction, WorkloadResult, put_mutation
from .driver import TxnDriver

logger = logging.getLogger(__name__)


class WriteWorkloadGenerator:
    """
    Writes version_count passes over key_count sequential keys.

    Every pass splits the keys into fixed-size batches and writes each batch
    as one transaction: fresh start timestamp, prewrite, fresh commit
    timestamp, commit. Batches run one after another, so every key gets
    exactly one new version per pass and versions are ordered by pass.

    Example:
        ```python
        driver = TxnDriver(cluster)
        generator = WriteWorkloadGenerator(driver)
        result = generator.generate(key_count=3000, version_count=3)
        print(f"{result.transaction_count} transactions committed")
        ```
    """

    def __init__(self, driver: TxnDriver, config: Optional[WorkloadConfig] = None):
        """
        Initialize the generator.

        Args:
            driver: Transactional driver bound to the target cluster
            config: Workload shape (defaults to 50 batches per pass, at most 1024 keys)
        """
        self._driver = driver
        self._config = config or WorkloadConfig()

    def key(self, index: int) -> str:
        return f"{self._config.key_prefix}{index}"

    def value(self, index: int) -> str:
        return f"{self._config.value_prefix}{index}" * self._config.value_repeat

    def _build_batch(self, start: int, limit: int) -> List[Mutation]:
        return [put_mutation(self.key(i), self.value(i)) for i in range(start, limit)]

    def generate(self, key_count: int, version_count: int) -> WorkloadResult:
        """
        Run the workload.

        Args:
            key_count: Sequential keys written per pass
            version_count: Number of passes

        Returns:
            WorkloadResult summarizing the committed transactions

        Raises:
            ValueError: If key_count or version_count is negative
            PrewriteError / CommitError: If a batch cannot be written
        """
        if key_count < 0 or version_count < 0:
            raise ValueError("key_count and version_count cannot be negative")

        connection = self._driver.connection
        batch_size = self._config.batch_size(key_count)
        result = WorkloadResult(key_count=key_count, version_count=0, batch_size=batch_size)

        logger.info(
            f"Writing {version_count} version(s) of {key_count} keys "
            f"in batches of {batch_size}"
        )

        for version in range(version_count):
            start = 0
            while start < key_count:
                limit = min(key_count, start + batch_size)
                mutations = self._build_batch(start, limit)
                primary_key = mutations[0].key

                start_ts = connection.get_ts()
                self._driver.must_kv_prewrite(mutations, primary_key, start_ts)

                commit_ts = connection.get_ts()
                txn = Transaction(
                    start_ts=start_ts,
                    commit_ts=commit_ts,
                    primary_key=primary_key,
                    mutations=mutations,
                )
                self._driver.must_kv_commit(txn.keys, txn.start_ts, txn.commit_ts)

                if result.first_start_ts is None:
                    result.first_start_ts = start_ts
                result.last_commit_ts = commit_ts
                result.transaction_count += 1
                start = limit

            result.version_count = version + 1
            logger.debug(f"Pass {version + 1}/{version_count} committed")

        logger.info(
            f"Workload done: {result.transaction_count} transactions, "
            f"{result.mutation_count} mutations"
        )
        return result
