"""Customer-nonce anti-replay window, pruned a bounded amount per block."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from computechain.frame import (
    Chain,
    DbWeight,
    DispatchError,
    Origin,
    Weight,
    ensure_root,
)

REPLAY_WINDOW_BLOCKS = 14_400
PRUNE_BATCH_PER_BLOCK = 64
PRUNE_SCAN_LIMIT_PER_BLOCK = 256


@dataclass(frozen=True)
class NonceRecorded:
    nonce: bytes


@dataclass(frozen=True)
class NoncesPruned:
    count: int


class NonceVaultError(DispatchError):
    """Errors raised by the nonce vault."""


class Replay(NonceVaultError):
    """The nonce was already recorded inside the replay window."""


@dataclass(frozen=True)
class NonceVaultWeights:
    """Call weights; storage access is priced when a DbWeight is given."""

    db_weight: DbWeight | None = None

    def record_nonce(self) -> Weight:
        base = Weight.from_parts(30_000_000, 2048)
        if self.db_weight is None:
            return base
        return base.saturating_add(self.db_weight.reads(1)).saturating_add(
            self.db_weight.writes(1)
        )


def _elapsed(now: int, then: int) -> int:
    return max(now - then, 0)


class NonceVault:
    """Nonces mapped to the block they were recorded in."""

    def __init__(
        self,
        chain: Chain,
        *,
        gateway_origin: Callable[[Origin], object] = ensure_root,
        weights: NonceVaultWeights | None = None,
    ) -> None:
        self.chain = chain
        self.gateway_origin = gateway_origin
        self.weights = weights or NonceVaultWeights()
        self.nonces: dict[bytes, int] = {}

    def on_initialize(self, now: int) -> Weight:
        """Evict expired nonces, bounded by the batch and scan limits."""
        scanned = 0
        expired: list[bytes] = []
        for nonce, recorded_at in self.nonces.items():
            if len(expired) >= PRUNE_BATCH_PER_BLOCK or scanned >= PRUNE_SCAN_LIMIT_PER_BLOCK:
                break
            scanned += 1
            if _elapsed(now, recorded_at) >= REPLAY_WINDOW_BLOCKS:
                expired.append(nonce)
        for nonce in expired:
            del self.nonces[nonce]
        if expired:
            self.chain.deposit_event(NoncesPruned(count=len(expired)))
        return self.chain.db_weight.reads_writes(scanned + 1, len(expired))

    def record_nonce(self, origin: Origin, nonce: bytes) -> None:
        """Record a nonce at the current block. Gateway only."""
        self.gateway_origin(origin)
        now = self.chain.block_number
        recorded_at = self.nonces.get(nonce)
        if recorded_at is not None and _elapsed(now, recorded_at) < REPLAY_WINDOW_BLOCKS:
            raise Replay(nonce.hex())
        self.nonces[nonce] = now
        self.chain.deposit_event(NonceRecorded(nonce=nonce))

    def check_nonce(self, nonce: bytes) -> bool:
        """True if the nonce is unseen or its window has passed."""
        recorded_at = self.nonces.get(nonce)
        if recorded_at is None:
            return True
        return _elapsed(self.chain.block_number, recorded_at) >= REPLAY_WINDOW_BLOCKS