"""Per-job state anchor for inference jobs: submit, assign, finalize, dispute."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Callable, Hashable

from computechain import frame

_NO_DB_COST = frame.DbWeight(read=0, write=0)


class JobState(enum.Enum):
    SUBMITTED = "submitted"
    ASSIGNED = "assigned"
    FINALIZED = "finalized"
    DISPUTED = "disputed"


_OPEN_STATES = frozenset({JobState.SUBMITTED, JobState.ASSIGNED})


@dataclass
class Job:
    customer: Hashable
    gateway: Hashable
    model_id: bytes
    adapter_id: bytes | None
    state: JobState
    assigned_operator: Hashable | None
    created_at: int


@dataclass(frozen=True)
class JobSubmitted:
    job_id: bytes
    customer: Hashable


@dataclass(frozen=True)
class JobAssigned:
    job_id: bytes
    operator: Hashable


@dataclass(frozen=True)
class JobFinalized:
    job_id: bytes


@dataclass(frozen=True)
class JobDisputed:
    job_id: bytes


class JobMarketError(frame.DispatchError):
    """Errors raised by the job market."""


class AlreadyExists(JobMarketError):
    """A job with this id is already stored."""


class UnknownJob(JobMarketError):
    """No job is stored under this id."""


class BadState(JobMarketError):
    """The job is not in a state that allows this transition."""


class NotAuthorized(JobMarketError):
    """Only the job's customer or gateway may do this."""


@dataclass(frozen=True)
class JobMarketWeights:
    """Call weights; storage access is priced when a DbWeight is given."""

    db_weight: frame.DbWeight | None = None

    def _one_read_one_write(self, ref_time: int, proof_size: int) -> frame.Weight:
        storage = (self.db_weight or _NO_DB_COST).reads_writes(1, 1)
        return frame.Weight.from_parts(ref_time, proof_size).saturating_add(storage)

    def submit_job(self) -> frame.Weight:
        return self._one_read_one_write(40_000_000, 4096)

    def assign(self) -> frame.Weight:
        return self._one_read_one_write(30_000_000, 2048)

    def finalize(self) -> frame.Weight:
        return self._one_read_one_write(30_000_000, 2048)

    def dispute(self) -> frame.Weight:
        return self._one_read_one_write(30_000_000, 2048)


class JobMarket:
    """Jobs keyed by id, moving Submitted → Assigned → Finalized, or to Disputed."""

    def __init__(
        self,
        chain: frame.Chain,
        *,
        gateway_origin: Callable[[frame.Origin], object] = frame.ensure_root,
        weights: JobMarketWeights | None = None,
    ) -> None:
        self.chain = chain
        self.gateway_origin = gateway_origin
        self.weights = weights or JobMarketWeights()
        self.jobs: dict[bytes, Job] = {}

    def _job_in(self, job_id: bytes, allowed: frozenset[JobState], action: str) -> Job:
        job = self.jobs.get(job_id)
        if job is None:
            raise UnknownJob(job_id.hex())
        if job.state not in allowed:
            raise BadState(f"cannot {action} a job in state {job.state.value}")
        return job

    def submit_job(
        self,
        origin: frame.Origin,
        job_id: bytes,
        gateway: Hashable,
        model_id: bytes,
        adapter_id: bytes | None,
    ) -> None:
        """Open a job for the signing customer."""
        who = frame.ensure_signed(origin)
        if job_id in self.jobs:
            raise AlreadyExists(job_id.hex())
        self.jobs[job_id] = Job(
            customer=who,
            gateway=gateway,
            model_id=model_id,
            adapter_id=adapter_id,
            state=JobState.SUBMITTED,
            assigned_operator=None,
            created_at=self.chain.block_number,
        )
        self.chain.deposit_event(JobSubmitted(job_id=job_id, customer=who))

    def assign(self, origin: frame.Origin, job_id: bytes, operator: Hashable) -> None:
        """Assign a submitted job to an operator. Gateway only."""
        self.gateway_origin(origin)
        job = self._job_in(job_id, frozenset({JobState.SUBMITTED}), "assign")
        job.state = JobState.ASSIGNED
        job.assigned_operator = operator
        self.chain.deposit_event(JobAssigned(job_id=job_id, operator=operator))

    def finalize(self, origin: frame.Origin, job_id: bytes) -> None:
        """Finalize an assigned job. Gateway only."""
        self.gateway_origin(origin)
        job = self._job_in(job_id, frozenset({JobState.ASSIGNED}), "finalize")
        job.state = JobState.FINALIZED
        self.chain.deposit_event(JobFinalized(job_id=job_id))

    def dispute(self, origin: frame.Origin, job_id: bytes) -> None:
        """Dispute an open job; only its customer or gateway may do so."""
        who = frame.ensure_signed(origin)
        job = self._job_in(job_id, _OPEN_STATES, "dispute")
        if who not in (job.customer, job.gateway):
            raise NotAuthorized(str(who))
        job.state = JobState.DISPUTED
        self.chain.deposit_event(JobDisputed(job_id=job_id))