"""
Tests for the shared cluster connection.
"""

import pytest

from connection_management import (
    ClusterConnection,
    EmptyClusterError,
    StoreNotFoundError,
)
from tests.fake_cluster import FakeCluster


def test_clients_are_cached(connection):
    assert connection.kv_client(1) is connection.kv_client(1)
    assert connection.backup_client(2) is connection.backup_client(2)
    assert connection.import_client(3) is connection.import_client(3)


def test_unknown_store(connection):
    with pytest.raises(StoreNotFoundError) as exc_info:
        connection.kv_client(9)
    assert exc_info.value.store_id == 9
    assert exc_info.value.context["known_stores"] == [1, 2, 3]


def test_empty_cluster():
    with pytest.raises(EmptyClusterError):
        ClusterConnection(_empty()).get_stores()


def _empty():
    cluster = FakeCluster()
    cluster.store_ids = []
    return cluster


def test_key_routed_to_leader(cluster):
    cluster.leader_store = 2
    context, client = ClusterConnection(cluster).kv_client_for_key(b"key_0")

    assert context.store_id == 2
    assert context.region_id == cluster.region_id
    assert client.store_id == 2


def test_clients_listed_in_cluster_order(connection):
    assert [store for store, _ in connection.backup_clients()] == [1, 2, 3]
    assert [store for store, _ in connection.import_clients()] == [1, 2, 3]


def test_timestamps_increase(connection):
    first = connection.get_ts()
    assert connection.get_ts() > first
