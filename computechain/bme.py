"""Burn-mint equilibrium: gateways record burns, operators are minted against them."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Hashable, Iterable

from computechain.frame import Chain, DbWeight, DispatchError, Origin, Weight, ensure_root

U128_MAX = 2**128 - 1
U32_MAX = 2**32 - 1
BPS_DENOMINATOR = 10_000


@dataclass(frozen=True)
class BurnSubmitted:
    amount: int
    batch_id: bytes


@dataclass(frozen=True)
class Minted:
    operator: Hashable
    amount: int


@dataclass(frozen=True)
class ElasticitySet:
    elasticity_bps: int


class BmeError(DispatchError):
    """Errors raised by the burn-mint pallet."""


class ZeroBurn(BmeError):
    """A burn must be for a positive amount."""


class DuplicateBurnBatch(BmeError):
    """This burn batch id was already accepted."""


class MintExceedsHeadroom(BmeError):
    """The mint would exceed burn times elasticity."""


class ArithmeticOverflow(BmeError):
    """An amount left the 128-bit range."""


def _check_amount(amount: int) -> int:
    if not 0 <= amount <= U128_MAX:
        raise ValueError(f"amount out of u128 range: {amount}")
    return amount


def _sat128(value: int) -> int:
    return min(value, U128_MAX)


@dataclass(frozen=True)
class BmeWeights:
    """Call weights; storage access is priced when a DbWeight is given."""

    db_weight: DbWeight | None = None

    def _price(self, ref_time: int, proof_size: int, reads: int, writes: int) -> Weight:
        base = Weight.from_parts(ref_time, proof_size)
        if self.db_weight is None:
            return base
        return base.saturating_add(self.db_weight.reads(reads)).saturating_add(
            self.db_weight.writes(writes)
        )

    def submit_burn(self) -> Weight:
        return self._price(30_000_000, 2048, 1, 1)

    def mint_to_operator(self) -> Weight:
        return self._price(40_000_000, 4096, 4, 2)

    def set_elasticity(self) -> Weight:
        return self._price(20_000_000, 1024, 0, 1)


class BurnMintEquilibrium:
    """Tracks cumulative burn and mint; mints are capped by burn × elasticity."""

    def __init__(
        self,
        chain: Chain,
        *,
        gateway_origin: Callable[[Origin], object] = ensure_root,
        mint_origin: Callable[[Origin], object] = ensure_root,
        governance_origin: Callable[[Origin], object] = ensure_root,
        weights: BmeWeights | None = None,
        elasticity_bps: int = 0,
    ) -> None:
        self.chain = chain
        self.gateway_origin = gateway_origin
        self.mint_origin = mint_origin
        self.governance_origin = governance_origin
        self.weights = weights or BmeWeights()
        self.cumulative_burn = 0
        self.cumulative_mint = 0
        self.elasticity = elasticity_bps
        self.processed_burn_batches: set[bytes] = set()
        self._balances: dict[Hashable, int] = {}

    def submit_burn(self, origin: Origin, batch_id: bytes, amount: int) -> None:
        """Record a gateway burn batch. Each batch id is accepted once."""
        self.gateway_origin(origin)
        _check_amount(amount)
        if amount == 0:
            raise ZeroBurn()
        if batch_id in self.processed_burn_batches:
            raise DuplicateBurnBatch(batch_id.hex())
        self.processed_burn_batches.add(batch_id)
        self.cumulative_burn = _sat128(self.cumulative_burn + amount)
        self.chain.deposit_event(BurnSubmitted(amount=amount, batch_id=batch_id))

    def mint_to_operator(self, origin: Origin, operator: Hashable, amount: int) -> None:
        """Mint to one operator within the headroom left by cumulative burn."""
        self.mint_origin(origin)
        _check_amount(amount)
        self._check_mint_headroom(amount)
        self._credit(operator, amount)

    def set_elasticity(self, origin: Origin, elasticity_bps: int) -> None:
        self.governance_origin(origin)
        if not 0 <= elasticity_bps <= U32_MAX:
            raise ValueError(f"elasticity out of u32 range: {elasticity_bps}")
        self.elasticity = elasticity_bps
        self.chain.deposit_event(ElasticitySet(elasticity_bps=elasticity_bps))

    def mint_batch(self, caller: Hashable, summaries: Iterable[tuple[Hashable, int]]) -> None:
        """Mint to several operators at once; all or nothing against the headroom."""
        entries = [(operator, _check_amount(amount)) for operator, amount in summaries]
        total = 0
        for _, amount in entries:
            total += amount
            if total > U128_MAX:
                raise ArithmeticOverflow("batch total overflows")
        self._check_mint_headroom(total)
        for operator, amount in entries:
            self._credit(operator, amount)

    def operator_balance(self, operator: Hashable) -> int:
        return self._balances.get(operator, 0)

    def _credit(self, operator: Hashable, amount: int) -> None:
        self._balances[operator] = _sat128(self._balances.get(operator, 0) + amount)
        self.cumulative_mint = _sat128(self.cumulative_mint + amount)
        self.chain.deposit_event(Minted(operator=operator, amount=amount))

    def _check_mint_headroom(self, additional: int) -> None:
        elasticity = max(self.elasticity, 1)
        product = self.cumulative_burn * elasticity
        if product > U128_MAX:
            raise ArithmeticOverflow("burn cap overflows")
        cap = product // BPS_DENOMINATOR
        new_total = self.cumulative_mint + additional
        if new_total > U128_MAX:
            raise ArithmeticOverflow("mint total overflows")
        if new_total > cap:
            raise MintExceedsHeadroom(f"{new_total} > {cap}")