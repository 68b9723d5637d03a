"""
Transaction Operations Module

Drives the two-phase transactional write path of the cluster under test:
- Prewrite/commit with a bounded, predicate-driven retry policy
- A generic retry helper independent of any request type
- A write workload producing several committed versions per key

Typical usage:

    from txn_operations import TxnDriver, RetryPolicy, WriteWorkloadGenerator

    driver = TxnDriver(cluster, RetryPolicy(delay_seconds=0.2, max_attempts=11))
    WriteWorkloadGenerator(driver).generate(key_count=3000, version_count=3)
"""

from .config import RetryPolicy, WorkloadConfig
from .core import TxnDriver, WriteWorkloadGenerator
from .models.entities import (
    MutationOp,
    Mutation,
    put_mutation,
    Transaction,
    RegionError,
    KeyErrorKind,
    TxnKeyError,
    PrewriteRequest,
    PrewriteResponse,
    CommitRequest,
    CommitResponse,
    WorkloadResult
)
from .txn_ops_exceptions import (
    TxnOperationError,
    RetryExhaustedError,
    PrewriteError,
    CommitError,
    InvalidTimestampError
)
from .utils.retry import retry_request

__all__ = [
    'RetryPolicy',
    'WorkloadConfig',
    'TxnDriver',
    'WriteWorkloadGenerator',
    'MutationOp',
    'Mutation',
    'put_mutation',
    'Transaction',
    'RegionError',
    'KeyErrorKind',
    'TxnKeyError',
    'PrewriteRequest',
    'PrewriteResponse',
    'CommitRequest',
    'CommitResponse',
    'WorkloadResult',
    'TxnOperationError',
    'RetryExhaustedError',
    'PrewriteError',
    'CommitError',
    'InvalidTimestampError',
    'retry_request',
]
