import pytest

from computechain.frame import (
    BadOrigin,
    Chain,
    DbWeight,
    DispatchError,
    Origin,
    Weight,
    ensure_root,
    ensure_signed,
    from_low_u64_be,
    repeat_byte,
)

U64_MAX = 2**64 - 1


def test_ensure_signed_returns_account():
    assert ensure_signed(Origin.signed(7)) == 7


@pytest.mark.parametrize("origin", [Origin.root(), Origin.none()])
def test_ensure_signed_rejects_unsigned(origin):
    with pytest.raises(BadOrigin):
        ensure_signed(origin)


def test_ensure_root_accepts_root_only():
    assert ensure_root(Origin.root()) is None
    with pytest.raises(BadOrigin):
        ensure_root(Origin.signed(1))
    with pytest.raises(BadOrigin):
        ensure_root(Origin.none())


def test_bad_origin_is_dispatch_error():
    with pytest.raises(DispatchError):
        ensure_root(Origin.signed(1))


def test_origin_flags():
    assert Origin.root().is_root
    assert not Origin.root().is_signed
    assert Origin.signed(3).is_signed
    assert Origin.signed(3).account == 3


def test_repeat_byte_is_a_full_hash_of_one_byte():
    h = repeat_byte(9)
    assert len(h) == 32
    assert set(h) == {9}


@pytest.mark.parametrize("byte", [-1, 256])
def test_repeat_byte_rejects_out_of_range(byte):
    with pytest.raises(ValueError):
        repeat_byte(byte)


@pytest.mark.parametrize("value", [0, 1, 266, U64_MAX])
def test_from_low_u64_be_round_trips(value):
    h = from_low_u64_be(value)
    assert len(h) == len(repeat_byte(0))
    assert int.from_bytes(h, "big") == value


def test_from_low_u64_be_distinct_values_give_distinct_hashes():
    hashes = {from_low_u64_be(i) for i in range(300)}
    assert len(hashes) == 300


def test_from_low_u64_be_rejects_overflow():
    with pytest.raises(ValueError):
        from_low_u64_be(U64_MAX + 1)


def test_weight_saturating_add_sums_components():
    a = Weight.from_parts(10, 20)
    b = Weight.from_parts(5, 7)
    total = a.saturating_add(b)
    assert total.ref_time == a.ref_time + b.ref_time
    assert total.proof_size == a.proof_size + b.proof_size


def test_weight_saturating_add_caps_at_u64():
    w = Weight.from_parts(U64_MAX, 0).saturating_add(Weight.from_parts(1, 1))
    assert w == Weight.from_parts(U64_MAX, 1)


def test_db_weight_reads_scale_linearly():
    db = DbWeight(read=25, write=100)
    assert db.reads(3) == db.reads(1).saturating_add(db.reads(1)).saturating_add(db.reads(1))
    assert db.reads(4).proof_size == 0


def test_db_weight_reads_writes_combines_both():
    db = DbWeight(read=25, write=100)
    assert db.reads_writes(2, 3) == db.reads(2).saturating_add(db.writes(3))


def test_default_db_weight_is_free():
    db = DbWeight()
    assert db.reads_writes(10, 10) == Weight()


def test_chain_block_number_and_events():
    chain = Chain()
    chain.set_block_number(5)
    assert chain.block_number == 5
    assert chain.last_event() is None
    chain.deposit_event("first")
    chain.deposit_event("second")
    assert chain.last_event() == "second"
    assert chain.events == ["first", "second"]


def test_chain_rejects_negative_block():
    with pytest.raises(ValueError):
        Chain().set_block_number(-1)