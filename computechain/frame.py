"""Runtime primitives shared by the pallets: origins, hashes, weights and chain state."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any, Hashable

U64_MAX = 2**64 - 1
HASH_LEN = 32


class DispatchError(Exception):
    """Base class of every error a dispatchable call raises."""


class BadOrigin(DispatchError):
    """The call came from an origin it does not accept."""


class _OriginKind(enum.Enum):
    ROOT = "root"
    SIGNED = "signed"
    NONE = "none"


@dataclass(frozen=True)
class Origin:
    """Who a call is dispatched as: root, a signed account, or nobody."""

    kind: _OriginKind
    account: Hashable | None = None

    @classmethod
    def root(cls) -> Origin:
        return cls(_OriginKind.ROOT)

    @classmethod
    def signed(cls, account: Hashable) -> Origin:
        return cls(_OriginKind.SIGNED, account)

    @classmethod
    def none(cls) -> Origin:
        return cls(_OriginKind.NONE)

    @property
    def is_root(self) -> bool:
        return self.kind is _OriginKind.ROOT

    @property
    def is_signed(self) -> bool:
        return self.kind is _OriginKind.SIGNED


def ensure_signed(origin: Origin) -> Hashable:
    """Return the signing account, or raise BadOrigin."""
    if not origin.is_signed:
        raise BadOrigin("expected a signed origin")
    return origin.account


def ensure_root(origin: Origin) -> None:
    """Raise BadOrigin unless the origin is root."""
    if not origin.is_root:
        raise BadOrigin("expected the root origin")


def repeat_byte(byte: int) -> bytes:
    """A 32-byte hash made of one repeated byte."""
    if not 0 <= byte <= 0xFF:
        raise ValueError(f"byte out of range: {byte}")
    return bytes([byte]) * HASH_LEN


def from_low_u64_be(value: int) -> bytes:
    """A 32-byte hash whose last eight bytes hold ``value`` big-endian."""
    if not 0 <= value <= U64_MAX:
        raise ValueError(f"value out of u64 range: {value}")
    return bytes(HASH_LEN - 8) + value.to_bytes(8, "big")


def _sat64(value: int) -> int:
    return min(value, U64_MAX)


@dataclass(frozen=True)
class Weight:
    """Execution cost: computation time and proof size."""

    ref_time: int = 0
    proof_size: int = 0

    @classmethod
    def from_parts(cls, ref_time: int, proof_size: int) -> Weight:
        return cls(ref_time, proof_size)

    def saturating_add(self, other: Weight) -> Weight:
        return Weight(
            _sat64(self.ref_time + other.ref_time),
            _sat64(self.proof_size + other.proof_size),
        )


@dataclass(frozen=True)
class DbWeight:
    """Cost of one storage read and one storage write."""

    read: int = 0
    write: int = 0

    def reads(self, count: int) -> Weight:
        return Weight(_sat64(self.read * count), 0)

    def writes(self, count: int) -> Weight:
        return Weight(_sat64(self.write * count), 0)

    def reads_writes(self, reads: int, writes: int) -> Weight:
        return Weight(_sat64(_sat64(self.read * reads) + _sat64(self.write * writes)), 0)


@dataclass
class Chain:
    """Block number, storage cost table and event log shared by pallets."""

    block_number: int = 0
    db_weight: DbWeight = field(default_factory=DbWeight)
    events: list[Any] = field(default_factory=list)

    def set_block_number(self, number: int) -> None:
        if number < 0:
            raise ValueError("block number cannot be negative")
        self.block_number = number

    def deposit_event(self, event: Any) -> None:
        self.events.append(event)

    def last_event(self) -> Any | None:
        return self.events[-1] if self.events else None