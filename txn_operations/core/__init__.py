"""
Transaction Operations Core

Transactional RPC driver and the write workload built on it.
"""

from .driver import TxnDriver
from .workload import WriteWorkloadGenerator

__all__ = [
    'TxnDriver',
    'WriteWorkloadGenerator'
]
