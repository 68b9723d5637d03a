"""
Round Trip Verifier

Main orchestration of the verification: write a multi-version workload into
a source cluster, back it up, re-ingest the backup into a target cluster,
back the target up at the same version and prove both backups equivalent.
"""

import logging
from pathlib import Path
from typing import Optional, Union

from connection_management import Cluster, ClusterConnection
from txn_operations import RetryPolicy, TxnDriver, WorkloadConfig, WriteWorkloadGenerator
from utils.identifiers import IdentifierSource, default_identifier_source
from ..config import BackupVerifyConfig
from ..exceptions import VerificationFailedError
from ..models.entities import RoundTripResult
from .backup_driver import BackupDriver, non_empty_responses
from .comparator import BackupComparator, collect_files
from .local_backend import make_local_backend, make_unique_dir
from .reimport import SstReimportDriver

logger = logging.getLogger(__name__)


class RoundTripVerifier:
    """
    Runs backup -> reimport -> backup and compares the two backups.

    Steps:
        1. Back up the empty source cluster; no file may be returned
        2. Write key_count keys x version_count versions
        3. Back up the source cluster at backup_ts; at least one frame
           must carry files
        4. Re-ingest those files into the target cluster
        5. Back up the target cluster at the same backup_ts
        6. Check the leader-only property of both backups and compare them

    Example:
        ```python
        verifier = RoundTripVerifier(config=BackupVerifyConfig(storage_root=tmp_dir))
        result = verifier.run(source_cluster, target_cluster)
        assert result.equivalent
        ```
    """

    def __init__(
        self,
        config: Optional[BackupVerifyConfig] = None,
        retry_policy: Optional[RetryPolicy] = None,
        workload_config: Optional[WorkloadConfig] = None,
        ids: Optional[IdentifierSource] = None,
        comparator: Optional[BackupComparator] = None
    ):
        """
        Initialize the verifier.

        Args:
            config: Range, storage and check settings
            retry_policy: Retry policy of the write path
            workload_config: Shape of the write workload
            ids: Source of run directory names and SST uuids
            comparator: Comparator used on the two backups
        """
        self._config = config or BackupVerifyConfig()
        self._retry_policy = retry_policy or RetryPolicy()
        self._workload_config = workload_config or WorkloadConfig()
        self._ids = ids or default_identifier_source()
        self._comparator = comparator or BackupComparator()
        logger.info(f"RoundTripVerifier initialized with {self._config!r}")

    def _backup(self, driver: BackupDriver, backup_ts: int, destination: Path):
        return driver.run_backup(
            start_key=self._config.start_key,
            end_key=self._config.end_key,
            begin_ts=0,
            backup_ts=backup_ts,
            destination=destination,
            cf=self._config.cf,
        )

    def run(
        self,
        source: Union[Cluster, ClusterConnection],
        target: Union[Cluster, ClusterConnection],
        base_dir: Optional[Union[str, Path]] = None
    ) -> RoundTripResult:
        """
        Run the whole round trip.

        Args:
            source: Cluster the workload is written to
            target: Empty cluster the backup is re-ingested into
            base_dir: Parent of the run directories; config.storage_root by default

        Returns:
            RoundTripResult describing the verified round trip

        Raises:
            VerificationFailedError: If a step's expectation does not hold
            BackupMismatchError: If the two backups are not equivalent
            Any error of the write, backup or reimport steps
        """
        base = Path(base_dir) if base_dir is not None else self._config.get_storage_root()
        source_conn = source if isinstance(source, ClusterConnection) else ClusterConnection(source, "source")
        target_conn = target if isinstance(target, ClusterConnection) else ClusterConnection(target, "target")
        source_backup = BackupDriver(source_conn)
        target_backup = BackupDriver(target_conn)

        storage_path = make_unique_dir(base, self._ids)

        # An empty keyspace exports nothing.
        initial = self._backup(source_backup, source_conn.get_ts(), make_unique_dir(base, self._ids))
        initial_files = collect_files(initial)
        if self._config.require_empty_initial_backup and initial_files:
            raise VerificationFailedError(
                f"Backup of an empty cluster returned {len(initial_files)} file(s)",
                {"files": [f.name for f in initial_files]},
            )

        workload = WriteWorkloadGenerator(
            TxnDriver(source_conn, self._retry_policy),
            self._workload_config,
        ).generate(self._config.key_count, self._config.version_count)

        backup_ts = source_conn.get_ts()
        first = self._backup(source_backup, backup_ts, storage_path)
        if not non_empty_responses(first):
            raise VerificationFailedError(
                "Backup after the workload returned no file",
                {"responses": first},
            )

        reimport = SstReimportDriver(target_conn, self._ids)
        reimport.reimport(first, make_local_backend(storage_path))

        second = self._backup(target_backup, backup_ts, make_unique_dir(base, self._ids))

        if self._config.check_leader_only:
            self._comparator.assert_leader_only(first)
            self._comparator.assert_leader_only(second)

        first_files = collect_files(first)
        second_files = collect_files(second)
        self._comparator.assert_equivalent(first_files, second_files)

        result = RoundTripResult(
            storage_path=str(storage_path),
            backup_ts=backup_ts,
            source_file_count=len(first_files),
            target_file_count=len(second_files),
            ingested_sst_count=len(first_files),
            transaction_count=workload.transaction_count,
            equivalent=True,
        )
        logger.info(
            f"Round trip verified: {result.source_file_count} file(s) at {backup_ts}, "
            f"{result.transaction_count} transaction(s)"
        )
        return result
