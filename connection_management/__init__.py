"""
Connection Management Module

Access to the external storage cluster for the verification harness:
- Protocols describing the consumed RPC surface (KV, backup, SST import)
- Routing models (region, epoch, leader peer)
- A shared ClusterConnection caching per-store service clients
"""

from .cluster import Cluster, KvClient, BackupClient, ImportSstClient
from .connection_manager import ClusterConnection
from .models import RegionEpoch, Peer, RpcContext
from .connection_exceptions import (
    ConnectionError,
    StoreNotFoundError,
    EmptyClusterError
)

__all__ = [
    'Cluster',
    'KvClient',
    'BackupClient',
    'ImportSstClient',
    'ClusterConnection',
    'RegionEpoch',
    'Peer',
    'RpcContext',
    'ConnectionError',
    'StoreNotFoundError',
    'EmptyClusterError',
]
