"""On-chain TEE attestation summaries and a per-kind certificate revocation list."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Callable, Hashable

from computechain import frame

_NO_DB_COST = frame.DbWeight(read=0, write=0)


class CrlKind(enum.Enum):
    FIRMWARE_HASH = "firmware_hash"
    DEVICE_CERT = "device_cert"
    MODEL_HASH = "model_hash"
    VENDOR_PKI_CHAIN = "vendor_pki_chain"


class Vendor(enum.IntFlag):
    """Bit flags of the attestation vendors covered by a report."""

    NVIDIA = 0x1
    INTEL_TDX = 0x2
    AMD_SEV = 0x4
    RIM = 0x8


@dataclass
class OnChainAttestation:
    operator: Hashable
    report_hash: bytes
    gpu_uuid: bytes
    vendor_set: int
    measured_vm_bundle: bytes
    expires_at: int
    revoked: bool = False


@dataclass(frozen=True)
class AttestationSubmitted:
    operator: Hashable
    report_hash: bytes


@dataclass(frozen=True)
class AttestationRevoked:
    report_hash: bytes


@dataclass(frozen=True)
class CrlAdded:
    kind: CrlKind
    target: bytes


class AttestationError(frame.DispatchError):
    """Errors raised by the attestation registry."""


class AlreadySubmitted(AttestationError):
    """A report with this hash is already stored."""


class UnknownReport(AttestationError):
    """No report is stored under this hash."""


@dataclass(frozen=True)
class AttestationWeights:
    """Call weights; storage access is priced when a DbWeight is given."""

    db_weight: frame.DbWeight | None = None

    def _cost(self, ref_time: int, proof_size: int, reads: int, writes: int) -> frame.Weight:
        storage = (self.db_weight or _NO_DB_COST).reads_writes(reads, writes)
        return frame.Weight.from_parts(ref_time, proof_size).saturating_add(storage)

    def submit(self) -> frame.Weight:
        return self._cost(40_000_000, 4096, 1, 1)

    def revoke(self) -> frame.Weight:
        return self._cost(30_000_000, 2048, 1, 1)

    def add_to_crl(self) -> frame.Weight:
        return self._cost(30_000_000, 2048, 0, 1)


class AttestationRegistry:
    """Attestations keyed by report hash, plus CRL entries keyed by (kind, target)."""

    def __init__(
        self,
        chain: frame.Chain,
        *,
        admin_origin: Callable[[frame.Origin], object] = frame.ensure_root,
        weights: AttestationWeights | None = None,
    ) -> None:
        self.chain = chain
        self.admin_origin = admin_origin
        self.weights = weights or AttestationWeights()
        self.attestations: dict[bytes, OnChainAttestation] = {}
        self.crl: dict[tuple[CrlKind, bytes], int] = {}

    def submit(
        self,
        origin: frame.Origin,
        report_hash: bytes,
        gpu_uuid: bytes,
        vendor_set: int,
        measured_vm_bundle: bytes,
        expires_at: int,
    ) -> None:
        """Store an attestation summary for the signing operator."""
        who = frame.ensure_signed(origin)
        if not 0 <= int(vendor_set) <= 0xFF:
            raise ValueError(f"vendor_set out of u8 range: {vendor_set}")
        if report_hash in self.attestations:
            raise AlreadySubmitted(report_hash.hex())
        self.attestations[report_hash] = OnChainAttestation(
            operator=who,
            report_hash=report_hash,
            gpu_uuid=gpu_uuid,
            vendor_set=int(vendor_set),
            measured_vm_bundle=measured_vm_bundle,
            expires_at=expires_at,
        )
        self.chain.deposit_event(AttestationSubmitted(operator=who, report_hash=report_hash))

    def revoke(self, origin: frame.Origin, report_hash: bytes) -> None:
        """Mark a stored attestation revoked. Admin only."""
        self.admin_origin(origin)
        attestation = self.attestations.get(report_hash)
        if attestation is None:
            raise UnknownReport(report_hash.hex())
        attestation.revoked = True
        self.chain.deposit_event(AttestationRevoked(report_hash=report_hash))

    def add_to_crl(self, origin: frame.Origin, kind: CrlKind, target: bytes) -> None:
        """Add a revocation-list entry at the current block. Admin only."""
        self.admin_origin(origin)
        self.crl[(kind, target)] = self.chain.block_number
        self.chain.deposit_event(CrlAdded(kind=kind, target=target))

    def is_revoked(self, kind: CrlKind, target: bytes) -> bool:
        return (kind, target) in self.crl