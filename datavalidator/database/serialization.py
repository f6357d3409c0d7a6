from datetime import datetime
from typing import Any

from datavalidator.database.models import JobRecord, JobStatus
from datavalidator.evaluation.serialization import ReportSerializer


class JobRecordSerializer:
    """Converts job records to and from JSON-ready dicts."""

    def __init__(self, report_serializer: ReportSerializer | None = None) -> None:
        self._reports = report_serializer or ReportSerializer()

    def to_dict(self, record: JobRecord) -> dict[str, Any]:
        return {
            "jobId": record.job_id,
            "status": record.status.value,
            "updatedAt": record.updated_at.isoformat(),
            "report": self._reports.to_dict(record.report) if record.report else None,
            "errorMessage": record.error_message,
        }

    def from_dict(self, payload: dict[str, Any]) -> JobRecord:
        report = payload.get("report")
        return JobRecord(
            job_id=payload["jobId"],
            status=JobStatus(payload["status"]),
            updated_at=datetime.fromisoformat(payload["updatedAt"]),
            report=self._reports.from_dict(report) if report else None,
            error_message=payload.get("errorMessage"),
        )
