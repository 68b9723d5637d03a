"""
Transaction Entities

Request/response records of the two-phase transactional write path and the
value records the write workload builds from them.

These models use Pydantic for validation; all of them are immutable.
"""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from connection_management.models import RpcContext


class MutationOp(str, Enum):
    """
    Kind of change a mutation applies.

    Ops:
        PUT: Write a value
        DEL: Delete the key
        LOCK: Lock the key without changing it
    """
    PUT = "PUT"
    DEL = "DEL"
    LOCK = "LOCK"


class Mutation(BaseModel):
    """A single key change staged by prewrite."""
    model_config = ConfigDict(frozen=True)

    op: MutationOp = Field(default=MutationOp.PUT, description="Kind of change")
    key: bytes = Field(..., min_length=1, description="Key being changed")
    value: bytes = Field(default=b"", description="New value (PUT only)")


def put_mutation(key: str, value: str) -> Mutation:
    """Build a PUT mutation from text key and value."""
    return Mutation(op=MutationOp.PUT, key=key.encode(), value=value.encode())


class Transaction(BaseModel):
    """
    One batch written through prewrite then commit.

    Attributes:
        start_ts: Timestamp the prewrite is issued at
        commit_ts: Timestamp the batch is committed at (None until committed)
        primary_key: Primary lock shared by every mutation of the batch
        mutations: Ordered mutations of the batch

    Invariants:
        - commit_ts > start_ts once set
        - primary_key is one of the mutated keys
    """
    model_config = ConfigDict(frozen=True)

    start_ts: int = Field(..., ge=0)
    commit_ts: Optional[int] = Field(default=None, ge=0)
    primary_key: bytes = Field(..., min_length=1)
    mutations: List[Mutation] = Field(..., min_length=1)

    @model_validator(mode="after")
    def check_invariants(self) -> "Transaction":
        if self.commit_ts is not None and self.commit_ts <= self.start_ts:
            raise ValueError(
                f"commit_ts ({self.commit_ts}) must be greater than start_ts ({self.start_ts})"
            )
        if self.primary_key not in {m.key for m in self.mutations}:
            raise ValueError("primary_key must be one of the mutated keys")
        return self

    @property
    def keys(self) -> List[bytes]:
        return [m.key for m in self.mutations]


class RegionError(BaseModel):
    """
    Region-level routing error (not leader, epoch mismatch, server busy...).

    Always retryable: the region is expected to settle.
    """
    model_config = ConfigDict(frozen=True)

    message: str = Field(default="", description="Error text reported by the store")
    kind: str = Field(default="not_leader", description="Error category")


class KeyErrorKind(str, Enum):
    """Category of a per-key transactional error."""
    LOCKED = "LOCKED"
    WRITE_CONFLICT = "WRITE_CONFLICT"
    RETRYABLE = "RETRYABLE"
    ABORT = "ABORT"
    TXN_LOCK_NOT_FOUND = "TXN_LOCK_NOT_FOUND"


class TxnKeyError(BaseModel):
    """Per-key error reported by prewrite or commit."""
    model_config = ConfigDict(frozen=True)

    key: bytes = Field(default=b"", description="Key the error is about")
    kind: KeyErrorKind = Field(default=KeyErrorKind.RETRYABLE)
    message: str = Field(default="")


class PrewriteRequest(BaseModel):
    """KvPrewrite request."""
    model_config = ConfigDict(frozen=True)

    context: RpcContext
    mutations: List[Mutation] = Field(..., min_length=1)
    primary_lock: bytes = Field(..., min_length=1)
    start_version: int = Field(..., ge=0)
    lock_ttl: int = Field(..., ge=0)


class PrewriteResponse(BaseModel):
    """KvPrewrite response."""
    model_config = ConfigDict(frozen=True)

    region_error: Optional[RegionError] = None
    errors: List[TxnKeyError] = Field(default_factory=list)

    @property
    def has_region_error(self) -> bool:
        return self.region_error is not None

    @property
    def succeeded(self) -> bool:
        """No region error and no per-key error."""
        return not self.has_region_error and not self.errors


class CommitRequest(BaseModel):
    """KvCommit request."""
    model_config = ConfigDict(frozen=True)

    context: RpcContext
    keys: List[bytes] = Field(..., min_length=1)
    start_version: int = Field(..., ge=0)
    commit_version: int = Field(..., ge=0)


class CommitResponse(BaseModel):
    """KvCommit response."""
    model_config = ConfigDict(frozen=True)

    region_error: Optional[RegionError] = None
    error: Optional[TxnKeyError] = None

    @property
    def has_region_error(self) -> bool:
        return self.region_error is not None

    @property
    def has_error(self) -> bool:
        return self.error is not None

    @property
    def succeeded(self) -> bool:
        """No region error and no key error."""
        return not self.has_region_error and not self.has_error


class WorkloadResult(BaseModel):
    """
    Outcome of a write workload.

    Attributes:
        key_count: Keys written per pass
        version_count: Passes completed (committed versions per key)
        batch_size: Keys per transaction
        transaction_count: Transactions committed
        first_start_ts: Start timestamp of the first transaction
        last_commit_ts: Commit timestamp of the last transaction
    """
    key_count: int = Field(..., ge=0)
    version_count: int = Field(..., ge=0)
    batch_size: int = Field(..., ge=1)
    transaction_count: int = Field(default=0, ge=0)
    first_start_ts: Optional[int] = None
    last_commit_ts: Optional[int] = None

    @property
    def mutation_count(self) -> int:
        return self.key_count * self.version_count
