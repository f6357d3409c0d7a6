import re
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum

from datavalidator.evaluation.models import ValidationReport


class JobStatus(str, Enum):
    ACCEPTED = "accepted"
    RUNNING = "running"
    SUCCEEDED = "succeeded"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (JobStatus.SUCCEEDED, JobStatus.FAILED)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class JobRecord:
    """Stored state of one validation job.

    ``report`` is set only on ``succeeded`` records, ``error_message`` only
    on ``failed`` ones.
    """

    job_id: str
    status: JobStatus
    updated_at: datetime = field(default_factory=_utcnow)
    report: ValidationReport | None = None
    error_message: str | None = None

    @classmethod
    def accepted(cls, job_id: str) -> "JobRecord":
        return cls(job_id=job_id, status=JobStatus.ACCEPTED)

    @classmethod
    def running(cls, job_id: str) -> "JobRecord":
        return cls(job_id=job_id, status=JobStatus.RUNNING)

    @classmethod
    def succeeded(cls, job_id: str, report: ValidationReport) -> "JobRecord":
        return cls(job_id=job_id, status=JobStatus.SUCCEEDED, report=report)

    @classmethod
    def failed(cls, job_id: str, error_message: str) -> "JobRecord":
        return cls(job_id=job_id, status=JobStatus.FAILED, error_message=error_message)


_JOB_ID = re.compile(r"^[A-Za-z0-9._-]+$")


def is_valid_job_id(job_id: str) -> bool:
    """Job ids name files and scratch folders, so they must be a single plain path segment."""
    return bool(_JOB_ID.match(job_id)) and job_id not in (".", "..")
