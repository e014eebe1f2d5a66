import pytest

from computechain.frame import BadOrigin, Chain, DbWeight, Origin, Weight
from computechain.oracle_twap import (
    TWAP_WINDOW,
    InvalidPrice,
    OracleWeights,
    PriceSubmitted,
    SubmissionRateLimited,
    TwapOracle,
    TwapUpdated,
)


@pytest.fixture
def oracle():
    return TwapOracle(Chain(block_number=1))


def test_submit_updates_twap_median(oracle):
    oracle.submit_price(Origin.root(), 1_000_000)
    assert oracle.current_twap() == 1_000_000
    oracle.chain.set_block_number(2)
    oracle.submit_price(Origin.root(), 2_000_000)
    assert oracle.current_twap() == 2_000_000
    oracle.chain.set_block_number(3)
    oracle.submit_price(Origin.root(), 500_000)
    assert oracle.current_twap() == 1_000_000


def test_empty_oracle_returns_zero(oracle):
    assert oracle.current_twap() == 0


def test_signed_origin_rejected(oracle):
    with pytest.raises(BadOrigin):
        oracle.submit_price(Origin.signed(1), 1_000_000)
    assert list(oracle.samples) == []


def test_zero_price_rejected(oracle):
    with pytest.raises(InvalidPrice):
        oracle.submit_price(Origin.root(), 0)


def test_one_submission_per_block(oracle):
    oracle.submit_price(Origin.root(), 10)
    with pytest.raises(SubmissionRateLimited):
        oracle.submit_price(Origin.root(), 20)
    assert list(oracle.samples) == [10]


def test_submission_at_genesis_block_is_rate_limited():
    oracle = TwapOracle(Chain(block_number=0))
    with pytest.raises(SubmissionRateLimited):
        oracle.submit_price(Origin.root(), 10)


def test_events_emitted(oracle):
    oracle.submit_price(Origin.root(), 7)
    assert oracle.chain.events == [PriceSubmitted(price=7), TwapUpdated(twap=7)]


def test_window_drops_oldest(oracle):
    for block in range(1, TWAP_WINDOW + 2):
        oracle.chain.set_block_number(block)
        oracle.submit_price(Origin.root(), block)
    assert len(oracle.samples) == TWAP_WINDOW
    assert oracle.samples[0] == 2
    assert oracle.samples[-1] == TWAP_WINDOW + 1


def test_weights():
    assert OracleWeights().submit_price() == Weight(80_000_000, 8192)
    assert OracleWeights(DbWeight(read=1, write=10)).submit_price() == Weight(80_000_022, 8192)