"""Content-addressed registry of base models and the LoRA adapters built on them."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Hashable

from computechain import frame

MAX_URL_LEN = 256
MAX_NAME_LEN = 64

_NO_DB_COST = frame.DbWeight(read=0, write=0)


@dataclass
class BaseModel:
    owner: Hashable
    manifest_hash: bytes
    registered_at: int
    deprecated: bool = False


@dataclass
class Adapter:
    owner: Hashable
    base_model_id: bytes
    manifest_hash: bytes
    registered_at: int
    deprecated: bool = False


@dataclass(frozen=True)
class BaseModelRegistered:
    id: bytes
    owner: Hashable


@dataclass(frozen=True)
class AdapterRegistered:
    id: bytes
    base_model_id: bytes
    owner: Hashable


@dataclass(frozen=True)
class Deprecated:
    id: bytes


class ModelRegistryError(frame.DispatchError):
    """Errors raised by the model registry."""


class AlreadyRegistered(ModelRegistryError):
    """An artifact of this kind is already registered at this id."""


class UnknownModel(ModelRegistryError):
    """No base model (or, for deprecation, no artifact) exists at this id."""


class UnknownAdapter(ModelRegistryError):
    """No adapter exists at this id."""


class NotOwner(ModelRegistryError):
    """The caller does not own the artifact."""


class IdCollision(ModelRegistryError):
    """The id is already taken by an artifact of the other kind."""


@dataclass(frozen=True)
class ModelRegistryWeights:
    """Call weights; storage access is priced when a DbWeight is given."""

    db_weight: frame.DbWeight | None = None

    def _registry_op(self, reads: int, writes: int) -> frame.Weight:
        storage = (self.db_weight or _NO_DB_COST).reads_writes(reads, writes)
        return frame.Weight.from_parts(40_000_000, 4096).saturating_add(storage)

    def register_base_model(self) -> frame.Weight:
        return self._registry_op(2, 1)

    def register_adapter(self) -> frame.Weight:
        return self._registry_op(3, 1)

    def deprecate(self) -> frame.Weight:
        return self._registry_op(2, 2)


class ModelRegistry:
    """Base models and adapters keyed by content hash; ids are unique across both."""

    def __init__(
        self, chain: frame.Chain, *, weights: ModelRegistryWeights | None = None
    ) -> None:
        self.chain = chain
        self.weights = weights or ModelRegistryWeights()
        self.base_models: dict[bytes, BaseModel] = {}
        self.adapters: dict[bytes, Adapter] = {}

    def register_base_model(
        self, origin: frame.Origin, model_id: bytes, manifest_hash: bytes
    ) -> None:
        """Register a base model owned by the signer."""
        who = frame.ensure_signed(origin)
        if model_id in self.base_models:
            raise AlreadyRegistered(model_id.hex())
        if model_id in self.adapters:
            raise IdCollision(model_id.hex())
        self.base_models[model_id] = BaseModel(
            owner=who,
            manifest_hash=manifest_hash,
            registered_at=self.chain.block_number,
        )
        self.chain.deposit_event(BaseModelRegistered(id=model_id, owner=who))

    def register_adapter(
        self,
        origin: frame.Origin,
        adapter_id: bytes,
        base_model_id: bytes,
        manifest_hash: bytes,
    ) -> None:
        """Register an adapter against an existing base model."""
        who = frame.ensure_signed(origin)
        if base_model_id not in self.base_models:
            raise UnknownModel(base_model_id.hex())
        if adapter_id in self.adapters:
            raise AlreadyRegistered(adapter_id.hex())
        if adapter_id in self.base_models:
            raise IdCollision(adapter_id.hex())
        self.adapters[adapter_id] = Adapter(
            owner=who,
            base_model_id=base_model_id,
            manifest_hash=manifest_hash,
            registered_at=self.chain.block_number,
        )
        self.chain.deposit_event(
            AdapterRegistered(id=adapter_id, base_model_id=base_model_id, owner=who)
        )

    def deprecate(self, origin: frame.Origin, artifact_id: bytes) -> None:
        """Mark whatever artifact sits at this id deprecated. Owner only."""
        who = frame.ensure_signed(origin)
        candidates = (self.base_models.get(artifact_id), self.adapters.get(artifact_id))
        found = [artifact for artifact in candidates if artifact is not None]
        if any(artifact.owner != who for artifact in found):
            raise NotOwner(str(who))
        if not found:
            raise UnknownModel(artifact_id.hex())
        for artifact in found:
            artifact.deprecated = True
        self.chain.deposit_event(Deprecated(id=artifact_id))