"""Operator registration, reserved stake, heartbeat liveness and slashing."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Hashable

from computechain.balances import Balances, InsufficientBalance
from computechain.frame import (
    Chain,
    DbWeight,
    DispatchError,
    Origin,
    Weight,
    ensure_root,
    ensure_signed,
)

U16_MAX = 2**16 - 1
U32_MAX = 2**32 - 1
U64_MAX = 2**64 - 1
U128_MAX = 2**128 - 1
BPS_DENOMINATOR = 10_000


@dataclass
class Operator:
    stake: int
    last_heartbeat_epoch: int
    current_attestation_hash: bytes
    registered_at: int
    frozen: bool = False
    pending_freezes: int = 0


@dataclass(frozen=True)
class Registered:
    who: Hashable
    stake: int


@dataclass(frozen=True)
class Unregistered:
    who: Hashable


@dataclass(frozen=True)
class Heartbeat:
    who: Hashable
    epoch: int


@dataclass(frozen=True)
class Slashed:
    who: Hashable
    amount: int
    reason_code: int


class OperatorStakeError(DispatchError):
    """Errors raised by the operator stake pallet."""


class AlreadyRegistered(OperatorStakeError):
    """The account is already a registered operator."""


class NotRegistered(OperatorStakeError):
    """The account is not a registered operator."""


class InsufficientStake(OperatorStakeError):
    """The offered stake is below the minimum."""


class Frozen(OperatorStakeError):
    """The operator is frozen while a slash is pending."""


class HeartbeatEpochStale(OperatorStakeError):
    """The heartbeat epoch is older than the last one seen."""


class HeartbeatEpochTooFarAhead(OperatorStakeError):
    """The heartbeat epoch jumps further ahead than allowed."""


class ReserveFailed(OperatorStakeError):
    """The stake could not be reserved from the free balance."""


def _check_range(name: str, value: int, upper: int) -> int:
    if not 0 <= value <= upper:
        raise ValueError(f"{name} out of range: {value}")
    return value


@dataclass(frozen=True)
class OperatorStakeWeights:
    """Call weights; storage access is priced when a DbWeight is given."""

    db_weight: DbWeight | None = None

    def _price(self, ref_time: int, proof_size: int, reads: int, writes: int) -> Weight:
        base = Weight.from_parts(ref_time, proof_size)
        if self.db_weight is None:
            return base
        return base.saturating_add(self.db_weight.reads(reads)).saturating_add(
            self.db_weight.writes(writes)
        )

    def register(self) -> Weight:
        return self._price(40_000_000, 4096, 3, 3)

    def unregister(self) -> Weight:
        return self._price(30_000_000, 2048, 2, 2)

    def heartbeat(self) -> Weight:
        return self._price(20_000_000, 1024, 1, 1)

    def slash(self) -> Weight:
        return self._price(40_000_000, 4096, 3, 3)


class OperatorStake:
    """Registered operators keyed by account, with their stake held in reserve."""

    def __init__(
        self,
        chain: Chain,
        balances: Balances,
        *,
        min_stake: int,
        max_heartbeat_epoch_advance: int,
        slash_origin: Callable[[Origin], object] = ensure_root,
        weights: OperatorStakeWeights | None = None,
    ) -> None:
        self.chain = chain
        self.balances = balances
        self.min_stake = min_stake
        self.max_heartbeat_epoch_advance = max_heartbeat_epoch_advance
        self.slash_origin = slash_origin
        self.weights = weights or OperatorStakeWeights()
        self.operators: dict[Hashable, Operator] = {}
        self.total_stake = 0

    def _operator(self, who: Hashable) -> Operator:
        try:
            return self.operators[who]
        except KeyError:
            raise NotRegistered(repr(who)) from None

    def _reduce_total(self, amount: int) -> None:
        self.total_stake = max(self.total_stake - amount, 0)

    def register(self, origin: Origin, stake: int, attestation_hash: bytes) -> None:
        """Register the signer as an operator, reserving ``stake``."""
        who = ensure_signed(origin)
        _check_range("stake", stake, U128_MAX)
        if who in self.operators:
            raise AlreadyRegistered(repr(who))
        if stake < self.min_stake:
            raise InsufficientStake(f"{stake} < {self.min_stake}")
        try:
            self.balances.reserve(who, stake)
        except InsufficientBalance as exc:
            raise ReserveFailed(repr(who)) from exc
        self.operators[who] = Operator(
            stake=stake,
            last_heartbeat_epoch=0,
            current_attestation_hash=attestation_hash,
            registered_at=self.chain.block_number,
        )
        self.total_stake = min(self.total_stake + stake, U128_MAX)
        self.chain.deposit_event(Registered(who=who, stake=stake))

    def unregister(self, origin: Origin) -> None:
        """Leave the operator set and release the reserved stake."""
        who = ensure_signed(origin)
        op = self._operator(who)
        if op.frozen:
            raise Frozen(repr(who))
        del self.operators[who]
        self.balances.unreserve(who, op.stake)
        self._reduce_total(op.stake)
        self.chain.deposit_event(Unregistered(who=who))

    def heartbeat(
        self,
        origin: Origin,
        epoch_number: int,
        capabilities_summary_hash: bytes,
        attestation_report_hash: bytes,
    ) -> None:
        """Record liveness for an epoch; epochs never go back or jump too far."""
        who = ensure_signed(origin)
        _check_range("epoch_number", epoch_number, U64_MAX)
        op = self._operator(who)
        if op.frozen:
            raise Frozen(repr(who))
        if epoch_number < op.last_heartbeat_epoch:
            raise HeartbeatEpochStale(f"{epoch_number} < {op.last_heartbeat_epoch}")
        if epoch_number - op.last_heartbeat_epoch > self.max_heartbeat_epoch_advance:
            raise HeartbeatEpochTooFarAhead(str(epoch_number))
        op.last_heartbeat_epoch = epoch_number
        self.chain.deposit_event(Heartbeat(who=who, epoch=epoch_number))

    def slash(self, origin: Origin, who: Hashable, amount: int, reason_code: int) -> None:
        """Burn up to ``amount`` of an operator's stake. Slash origin only."""
        self.slash_origin(origin)
        _check_range("amount", amount, U128_MAX)
        _check_range("reason_code", reason_code, U16_MAX)
        op = self._operator(who)
        take = min(amount, op.stake)
        self.balances.slash_reserved(who, take)
        op.stake -= take
        self._reduce_total(take)
        self.chain.deposit_event(Slashed(who=who, amount=amount, reason_code=reason_code))

    def freeze_operator(self, who: Hashable) -> None:
        """Add a pending freeze; a frozen operator cannot heartbeat or leave."""
        op = self._operator(who)
        op.pending_freezes = min(op.pending_freezes + 1, U32_MAX)
        op.frozen = op.pending_freezes > 0

    def unfreeze_operator(self, who: Hashable) -> None:
        """Release one pending freeze."""
        op = self._operator(who)
        op.pending_freezes = max(op.pending_freezes - 1, 0)
        op.frozen = op.pending_freezes > 0

    def slash_operator_by_bps(self, who: Hashable, severity_bps: int, reason_code: int) -> None:
        """Slash a share of stake in basis points and release one pending freeze."""
        _check_range("severity_bps", severity_bps, U16_MAX)
        _check_range("reason_code", reason_code, U16_MAX)
        op = self._operator(who)
        take = min(op.stake * severity_bps, U128_MAX) // BPS_DENOMINATOR
        self.balances.slash_reserved(who, take)
        op.stake -= take
        op.pending_freezes = max(op.pending_freezes - 1, 0)
        op.frozen = op.pending_freezes > 0
        self._reduce_total(take)
        self.chain.deposit_event(Slashed(who=who, amount=take, reason_code=reason_code))