from abc import ABC, abstractmethod

from datavalidator.database.models import JobRecord


class JobStorage(ABC):
    """Contract for job record stores.

    Writes are last-writer-wins per job id; writes for different ids
    must not contend.
    """

    @abstractmethod
    def get(self, job_id: str) -> JobRecord | None:
        """Return the stored record, or None if the job is unknown."""

    @abstractmethod
    def put(self, record: JobRecord) -> None:
        """Store ``record``, replacing any record with the same job id."""
