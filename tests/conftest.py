"""
Shared fixtures: in-memory clusters, a zero-delay retry policy and a
recording sleep function.
"""

import pytest

from config import configure_logging
from connection_management import ClusterConnection
from txn_operations import RetryPolicy, TxnDriver
from utils.identifiers import SeededIdentifierSource
from tests.fake_cluster import FakeCluster

configure_logging()


class RecordingSleep:
    """Sleep replacement that records requested delays without waiting."""

    def __init__(self):
        self.delays = []

    def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)


@pytest.fixture
def sleeper():
    return RecordingSleep()


@pytest.fixture
def fast_policy():
    return RetryPolicy(delay_seconds=0.0, max_attempts=5, timeout_seconds=0.0)


@pytest.fixture
def cluster():
    return FakeCluster(store_ids=[1, 2, 3], leader_store=1)


@pytest.fixture
def target_cluster():
    return FakeCluster(store_ids=[1, 2, 3], leader_store=1)


@pytest.fixture
def connection(cluster):
    return ClusterConnection(cluster, "source")


@pytest.fixture
def driver(connection, fast_policy, sleeper):
    return TxnDriver(connection, fast_policy, sleep=sleeper)


@pytest.fixture
def ids():
    return SeededIdentifierSource(seed=42)
