import pytest

from computechain.frame import BadOrigin, Chain, DbWeight, Origin, Weight, repeat_byte
from computechain.model_registry import (
    AdapterRegistered,
    AlreadyRegistered,
    BaseModelRegistered,
    Deprecated,
    IdCollision,
    ModelRegistry,
    ModelRegistryWeights,
    NotOwner,
    UnknownModel,
)


@pytest.fixture
def registry():
    return ModelRegistry(Chain(block_number=1))


def test_register_base_model_works(registry):
    mid = repeat_byte(1)
    registry.register_base_model(Origin.signed(1), mid, repeat_byte(2))
    assert mid in registry.base_models
    model = registry.base_models[mid]
    assert (model.owner, model.manifest_hash, model.registered_at, model.deprecated) == (
        1,
        repeat_byte(2),
        1,
        False,
    )
    assert registry.chain.last_event() == BaseModelRegistered(id=mid, owner=1)


def test_duplicate_registration_fails(registry):
    mid = repeat_byte(3)
    manifest = repeat_byte(4)
    registry.register_base_model(Origin.signed(1), mid, manifest)
    events_before = list(registry.chain.events)
    with pytest.raises(AlreadyRegistered):
        registry.register_base_model(Origin.signed(1), mid, manifest)
    assert registry.chain.events == events_before


def test_register_adapter_against_unknown_fails(registry):
    aid = repeat_byte(5)
    bid = repeat_byte(6)
    with pytest.raises(UnknownModel):
        registry.register_adapter(Origin.signed(1), aid, bid, repeat_byte(7))
    assert aid not in registry.adapters


def test_id_collision_between_base_and_adapter_rejected(registry):
    mid = repeat_byte(8)
    registry.register_base_model(Origin.signed(1), mid, repeat_byte(9))
    bid = repeat_byte(10)
    registry.register_base_model(Origin.signed(2), bid, repeat_byte(11))
    with pytest.raises(IdCollision):
        registry.register_adapter(Origin.signed(3), mid, bid, repeat_byte(12))
    assert mid not in registry.adapters


def test_base_model_cannot_take_adapter_id(registry):
    bid = repeat_byte(1)
    aid = repeat_byte(2)
    registry.register_base_model(Origin.signed(1), bid, repeat_byte(3))
    registry.register_adapter(Origin.signed(1), aid, bid, repeat_byte(4))
    assert registry.chain.last_event() == AdapterRegistered(id=aid, base_model_id=bid, owner=1)
    with pytest.raises(IdCollision):
        registry.register_base_model(Origin.signed(2), aid, repeat_byte(5))
    with pytest.raises(AlreadyRegistered):
        registry.register_adapter(Origin.signed(2), aid, bid, repeat_byte(5))
    assert aid not in registry.base_models


def test_deprecate_by_owner(registry):
    bid = repeat_byte(1)
    aid = repeat_byte(2)
    registry.register_base_model(Origin.signed(1), bid, repeat_byte(3))
    registry.register_adapter(Origin.signed(4), aid, bid, repeat_byte(5))
    registry.deprecate(Origin.signed(4), aid)
    assert registry.adapters[aid].deprecated is True
    assert registry.base_models[bid].deprecated is False
    assert registry.chain.last_event() == Deprecated(id=aid)
    registry.deprecate(Origin.signed(1), bid)
    assert registry.base_models[bid].deprecated is True


def test_deprecate_rejects_non_owner(registry):
    bid = repeat_byte(1)
    registry.register_base_model(Origin.signed(1), bid, repeat_byte(3))
    with pytest.raises(NotOwner):
        registry.deprecate(Origin.signed(2), bid)
    assert registry.base_models[bid].deprecated is False


def test_deprecate_unknown_id(registry):
    with pytest.raises(UnknownModel):
        registry.deprecate(Origin.signed(1), repeat_byte(9))
    assert registry.chain.events == []


def test_calls_require_signed_origin(registry):
    with pytest.raises(BadOrigin):
        registry.register_base_model(Origin.root(), repeat_byte(1), repeat_byte(2))
    with pytest.raises(BadOrigin):
        registry.deprecate(Origin.none(), repeat_byte(1))
    assert registry.base_models == {}


def test_weights_without_db_cost():
    weights = ModelRegistryWeights()
    assert weights.register_base_model() == Weight.from_parts(40_000_000, 4096)
    assert weights.register_adapter() == Weight.from_parts(40_000_000, 4096)
    assert weights.deprecate() == Weight.from_parts(40_000_000, 4096)


def test_weights_price_storage_access():
    weights = ModelRegistryWeights(DbWeight(read=10, write=1000))
    assert weights.register_base_model() == Weight(40_001_020, 4096)
    assert weights.register_adapter() == Weight(40_001_030, 4096)
    assert weights.deprecate() == Weight(40_002_020, 4096)