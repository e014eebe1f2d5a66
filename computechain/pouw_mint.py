"""Proof-of-useful-work transcripts and the reward lane that is off until enabled."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Hashable

from computechain import frame

U128_MAX = 2**128 - 1


@dataclass
class CupowTranscript:
    operator: Hashable
    transcript_hash: bytes
    submitted_at: int


@dataclass(frozen=True)
class TranscriptSubmitted:
    operator: Hashable
    hash: bytes


@dataclass(frozen=True)
class PouwRewardEmitted:
    operator: Hashable
    amount: int


class PouwError(frame.DispatchError):
    """Errors raised by the PoUW mint."""


class Disabled(PouwError):
    """The reward lane is not enabled."""


class DuplicateTranscript(PouwError):
    """A transcript with this hash is already stored."""


@dataclass(frozen=True)
class PouwWeights:
    """Call weights; storage access is priced when a DbWeight is given."""

    db_weight: frame.DbWeight | None = None

    def submit_cupow_transcript(self) -> frame.Weight:
        weight = frame.Weight.from_parts(40_000_000, 4096)
        if self.db_weight is not None:
            weight = weight.saturating_add(self.db_weight.reads_writes(1, 1))
        return weight

    def emit_pouw_reward(self) -> frame.Weight:
        weight = frame.Weight.from_parts(20_000_000, 1024)
        if self.db_weight is not None:
            weight = weight.saturating_add(self.db_weight.reads(1))
        return weight


class PouwMint:
    """Stores transcripts by hash; emits rewards only once enabled."""

    def __init__(
        self,
        chain: frame.Chain,
        *,
        reward_origin: Callable[[frame.Origin], object] = frame.ensure_root,
        weights: PouwWeights | None = None,
        enabled: bool = False,
    ) -> None:
        self.chain = chain
        self.reward_origin = reward_origin
        self.weights = weights or PouwWeights()
        self.enabled = enabled
        self.transcripts: dict[bytes, CupowTranscript] = {}

    def submit_cupow_transcript(self, origin: frame.Origin, transcript_hash: bytes) -> None:
        """Store a transcript for the signer; each hash is accepted once."""
        who = frame.ensure_signed(origin)
        if transcript_hash in self.transcripts:
            raise DuplicateTranscript(transcript_hash.hex())
        self.transcripts[transcript_hash] = CupowTranscript(
            operator=who,
            transcript_hash=transcript_hash,
            submitted_at=self.chain.block_number,
        )
        self.chain.deposit_event(TranscriptSubmitted(operator=who, hash=transcript_hash))

    def emit_pouw_reward(self, origin: frame.Origin, operator: Hashable, amount: int) -> None:
        """Emit a reward event. Reward origin only, and only while enabled."""
        self.reward_origin(origin)
        if not 0 <= amount <= U128_MAX:
            raise ValueError(f"amount out of u128 range: {amount}")
        if not self.enabled:
            raise Disabled()
        self.chain.deposit_event(PouwRewardEmitted(operator=operator, amount=amount))