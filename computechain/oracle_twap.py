"""Price oracle: a bounded window of recent samples and their median."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from typing import Callable

from computechain import frame

TWAP_WINDOW = 240
U64_MAX = 2**64 - 1


@dataclass(frozen=True)
class PriceSubmitted:
    price: int


@dataclass(frozen=True)
class TwapUpdated:
    twap: int


class OracleError(frame.DispatchError):
    """Errors raised by the price oracle."""


class InvalidPrice(OracleError):
    """Prices must be positive."""


class SubmissionRateLimited(OracleError):
    """Only one price may be submitted per block."""


@dataclass(frozen=True)
class OracleWeights:
    """Call weights; storage access is priced when a DbWeight is given."""

    db_weight: frame.DbWeight | None = None

    def submit_price(self) -> frame.Weight:
        # Covers a sort over at most TWAP_WINDOW samples.
        weight = frame.Weight.from_parts(80_000_000, 8192)
        if self.db_weight is not None:
            weight = weight.saturating_add(self.db_weight.reads_writes(2, 2))
        return weight


class TwapOracle:
    """Keeps the last TWAP_WINDOW prices, in micro-USD, and their median."""

    def __init__(
        self,
        chain: frame.Chain,
        *,
        reporter_origin: Callable[[frame.Origin], object] = frame.ensure_root,
        weights: OracleWeights | None = None,
    ) -> None:
        self.chain = chain
        self.reporter_origin = reporter_origin
        self.weights = weights or OracleWeights()
        self.samples: deque[int] = deque(maxlen=TWAP_WINDOW)
        self.last_submission_block = 0
        self._twap = 0

    def submit_price(self, origin: frame.Origin, price: int) -> None:
        """Add a price sample, at most one per block, and recompute the median."""
        self.reporter_origin(origin)
        if price > U64_MAX:
            raise ValueError(f"price out of u64 range: {price}")
        if price <= 0:
            raise InvalidPrice(str(price))
        now = self.chain.block_number
        if now <= self.last_submission_block:
            raise SubmissionRateLimited(f"block {now}")
        self.last_submission_block = now
        self.samples.append(price)
        self._twap = sorted(self.samples)[len(self.samples) // 2]
        self.chain.deposit_event(PriceSubmitted(price=price))
        self.chain.deposit_event(TwapUpdated(twap=self._twap))

    def current_twap(self) -> int:
        return self._twap