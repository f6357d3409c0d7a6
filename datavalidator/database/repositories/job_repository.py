from typing import Any

from psycopg.rows import dict_row
from psycopg.types.json import Jsonb

from datavalidator.database.connection import get_connection
from datavalidator.database.models import JobRecord, JobStatus
from datavalidator.database.repositories.base import JobStorage
from datavalidator.evaluation.serialization import ReportSerializer

CREATE_TABLE_SQL = """
CREATE TABLE IF NOT EXISTS validation_jobs (
    job_id TEXT PRIMARY KEY,
    status TEXT NOT NULL,
    report JSONB,
    error_message TEXT,
    updated_at TIMESTAMPTZ NOT NULL
)
"""


class PostgresJobStorage(JobStorage):
    """Database operations for the validation_jobs table."""

    def __init__(self, report_serializer: ReportSerializer | None = None) -> None:
        self._reports = report_serializer or ReportSerializer()

    def ensure_schema(self) -> None:
        """Create the validation_jobs table if it does not exist."""
        with get_connection() as conn:
            conn.execute(CREATE_TABLE_SQL)
            conn.commit()

    def get(self, job_id: str) -> JobRecord | None:
        with get_connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(
                    """
                    SELECT job_id, status, report, error_message, updated_at
                    FROM validation_jobs
                    WHERE job_id = %s
                    """,
                    (job_id,),
                )
                row = cur.fetchone()

        if row is None:
            return None
        return self._to_record(row)

    def put(self, record: JobRecord) -> None:
        report = self._reports.to_dict(record.report) if record.report else None
        with get_connection() as conn:
            conn.execute(
                """
                INSERT INTO validation_jobs (job_id, status, report, error_message, updated_at)
                VALUES (%s, %s, %s, %s, %s)
                ON CONFLICT (job_id) DO UPDATE
                SET status = EXCLUDED.status,
                    report = EXCLUDED.report,
                    error_message = EXCLUDED.error_message,
                    updated_at = EXCLUDED.updated_at
                """,
                (
                    record.job_id,
                    record.status.value,
                    Jsonb(report) if report is not None else None,
                    record.error_message,
                    record.updated_at,
                ),
            )
            conn.commit()

    def _to_record(self, row: dict[str, Any]) -> JobRecord:
        report = row["report"]
        return JobRecord(
            job_id=row["job_id"],
            status=JobStatus(row["status"]),
            updated_at=row["updated_at"],
            report=self._reports.from_dict(report) if report else None,
            error_message=row["error_message"],
        )
