"""
Transaction Models

Exports the request/response and value records of the write path.
"""

from .entities import (
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

__all__ = [
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
]
