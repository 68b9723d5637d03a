"""
Transactional RPC Driver

Drives the two phases of a transaction against the store currently serving
the relevant key's region: prewrite stages locks and tentative writes, commit
finalizes them at a commit timestamp. Both phases are retried while the
response carries a region error or per-key errors.
"""

import logging
from typing import Any, Callable, Optional, Sequence, Union

from connection_management import Cluster, ClusterConnection
from ..config import RetryPolicy
from ..models.entities import (
    CommitRequest,
    CommitResponse,
    Mutation,
    PrewriteRequest,
    PrewriteResponse,
)
from ..txn_ops_exceptions import CommitError, InvalidTimestampError, PrewriteError

logger = logging.getLogger(__name__)


class TxnDriver:
    """
    Issues prewrite and commit requests with bounded retry.

    Exhausting the retry budget is fatal: the driver is a correctness check,
    not a production client, so there is no soft failure on the write path.
    Transport errors raised by the KV client propagate unchanged.

    Example:
        ```python
        driver = TxnDriver(cluster, RetryPolicy(delay_seconds=0.2))

        start_ts = cluster.get_ts()
        driver.must_kv_prewrite(mutations, mutations[0].key, start_ts)
        driver.must_kv_commit([m.key for m in mutations], start_ts, cluster.get_ts())
        ```
    """

    def __init__(
        self,
        cluster: Union[Cluster, ClusterConnection],
        policy: Optional[RetryPolicy] = None,
        sleep: Optional[Callable[[float], Any]] = None
    ):
        """
        Initialize the driver.

        Args:
            cluster: Cluster handle or shared connection to it
            policy: Retry policy (defaults: 0.2s delay, 11 attempts, 3s timeout)
            sleep: Sleep function used between attempts, injectable for tests
        """
        self._connection = cluster if isinstance(cluster, ClusterConnection) else ClusterConnection(cluster)
        self._policy = policy or RetryPolicy()
        self._sleep = sleep

    @property
    def connection(self) -> ClusterConnection:
        return self._connection

    @property
    def policy(self) -> RetryPolicy:
        return self._policy

    def must_kv_prewrite(
        self,
        mutations: Sequence[Mutation],
        primary_key: bytes,
        start_ts: int
    ) -> PrewriteResponse:
        """
        Prewrite mutations at start_ts, retrying until accepted.

        Args:
            mutations: Mutations of one transaction
            primary_key: Primary lock of the transaction
            start_ts: Start timestamp of the transaction

        Returns:
            The accepted prewrite response

        Raises:
            PrewriteError: If the response still carries a region error or
                           per-key errors once the retry budget is spent
        """
        context, client = self._connection.kv_client_for_key(primary_key)
        request = PrewriteRequest(
            context=context,
            mutations=list(mutations),
            primary_lock=primary_key,
            start_version=start_ts,
            lock_ttl=start_ts + 1,
        )
        attempts = 0

        def _prewrite() -> PrewriteResponse:
            nonlocal attempts
            attempts += 1
            return client.kv_prewrite(request)

        response = self._policy.run(
            _prewrite, lambda r: r.succeeded, sleep=self._sleep, operation_name="kv_prewrite"
        )

        if response.has_region_error:
            logger.error(f"Prewrite at {start_ts} failed with region error: {response.region_error}")
            raise PrewriteError(
                "Prewrite still reports a region error",
                operation="kv_prewrite",
                attempts=attempts,
                last_response=response,
                context={"region_error": response.region_error, "start_ts": start_ts},
            )
        if response.errors:
            logger.error(f"Prewrite at {start_ts} failed with {len(response.errors)} key errors")
            raise PrewriteError(
                "Prewrite still reports key errors",
                operation="kv_prewrite",
                attempts=attempts,
                last_response=response,
                context={"errors": response.errors, "start_ts": start_ts},
            )

        logger.debug(f"Prewrote {len(request.mutations)} mutations at {start_ts} in {attempts} attempt(s)")
        return response

    def must_kv_commit(
        self,
        keys: Sequence[bytes],
        start_ts: int,
        commit_ts: int
    ) -> CommitResponse:
        """
        Commit prewritten keys at commit_ts, retrying until accepted.

        Args:
            keys: Keys prewritten at start_ts; the first one routes the request
            start_ts: Start timestamp of the transaction
            commit_ts: Commit timestamp, strictly greater than start_ts

        Returns:
            The accepted commit response

        Raises:
            InvalidTimestampError: If commit_ts <= start_ts
            ValueError: If keys is empty
            CommitError: If the response still carries a region error or a
                         key error once the retry budget is spent
        """
        if commit_ts <= start_ts:
            raise InvalidTimestampError(start_ts, commit_ts)
        if not keys:
            raise ValueError("commit needs at least one key")

        context, client = self._connection.kv_client_for_key(keys[0])
        request = CommitRequest(
            context=context,
            keys=list(keys),
            start_version=start_ts,
            commit_version=commit_ts,
        )
        attempts = 0

        def _commit() -> CommitResponse:
            nonlocal attempts
            attempts += 1
            return client.kv_commit(request)

        response = self._policy.run(
            _commit, lambda r: r.succeeded, sleep=self._sleep, operation_name="kv_commit"
        )

        if response.has_region_error:
            logger.error(f"Commit {start_ts}->{commit_ts} failed with region error: {response.region_error}")
            raise CommitError(
                "Commit still reports a region error",
                operation="kv_commit",
                attempts=attempts,
                last_response=response,
                context={"region_error": response.region_error, "start_ts": start_ts},
            )
        if response.has_error:
            logger.error(f"Commit {start_ts}->{commit_ts} failed: {response.error}")
            raise CommitError(
                "Commit still reports a key error",
                operation="kv_commit",
                attempts=attempts,
                last_response=response,
                context={"error": response.error, "start_ts": start_ts},
            )

        logger.debug(f"Committed {len(request.keys)} keys {start_ts}->{commit_ts} in {attempts} attempt(s)")
        return response
