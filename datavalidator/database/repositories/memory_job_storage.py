import threading

from datavalidator.database.models import JobRecord
from datavalidator.database.repositories.base import JobStorage


class InMemoryJobStorage(JobStorage):
    """Process-local store; records are lost on exit."""

    def __init__(self) -> None:
        self._records: dict[str, JobRecord] = {}
        self._lock = threading.Lock()

    def get(self, job_id: str) -> JobRecord | None:
        with self._lock:
            return self._records.get(job_id)

    def put(self, record: JobRecord) -> None:
        with self._lock:
            self._records[record.job_id] = record
