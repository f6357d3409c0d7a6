import shutil
from pathlib import Path

from datavalidator.config.settings import Settings
from datavalidator.database.models import JobRecord, JobStatus
from datavalidator.database.repositories.base import JobStorage
from datavalidator.logging.logger import Log
from datavalidator.processor.exceptions import JobCancelledError
from datavalidator.processor.processor import Processor
from datavalidator.worker.models import JobExecution


class JobRunner:
    """Run one job, catch exceptions, and record its terminal state."""

    def __init__(
        self,
        processor: Processor,
        storage: JobStorage,
        settings: Settings,
    ) -> None:
        self._processor = processor
        self._storage = storage
        self._settings = settings

    def run(self, execution: JobExecution) -> JobRecord | None:
        """Execute a single job with error handling.

        Returns the stored record once the job is terminal.
        """
        job_id = execution.job_id
        if not self.transition(execution, JobRecord.running(job_id)):
            Log.info(f"Job {job_id} already terminated, not starting")
            return self._storage.get(job_id)

        Log.info(f"Running job {job_id} on {execution.data_file.source_file_name}")
        try:
            work_dir = self._work_dir(job_id)
        except ValueError as exc:
            Log.error(f"Job {job_id} failed: {exc}")
            self.transition(execution, JobRecord.failed(job_id, describe_failure(exc)))
            return self._storage.get(job_id)

        try:
            self._prepare_work_dir(work_dir)
            report = self._processor.process(
                job_id, execution.data_file, work_dir, execution.cancel_event
            )
            record = JobRecord.succeeded(job_id, report)
            Log.info(f"Job {job_id} completed with {report.issue_count} issue(s)")
        except JobCancelledError as exc:
            Log.warning(f"Job {job_id} cancelled")
            record = JobRecord.failed(job_id, describe_failure(exc))
        except Exception as exc:
            Log.error(f"Job {job_id} failed: {exc}")
            record = JobRecord.failed(job_id, describe_failure(exc))
        finally:
            self._cleanup(work_dir)

        self.transition(execution, record)
        return self._storage.get(job_id)

    def transition(self, execution: JobExecution, record: JobRecord) -> bool:
        """Store ``record`` unless the job already reached a terminal state.

        A success recorded after cancellation is stored as a cancellation
        failure instead.

        Returns:
            True if the record was stored.
        """
        with execution.lock:
            current = self._storage.get(execution.job_id)
            if current is not None and current.status.is_terminal:
                return False
            if record.status is JobStatus.SUCCEEDED and execution.cancel_event.is_set():
                record = JobRecord.failed(
                    execution.job_id,
                    describe_failure(JobCancelledError(f"Job {execution.job_id} was cancelled")),
                )
            self._storage.put(record)
            return True

    def _work_dir(self, job_id: str) -> Path:
        """Scratch folder of a job, a direct child of ``working_dir`` owned by that job only."""
        root = Path(self._settings.working_dir).resolve()
        resolved = (root / job_id).resolve()
        results_dir = Path(self._settings.job_result_storage_dir).resolve()
        if (
            resolved.parent != root
            or resolved == results_dir
            or resolved in results_dir.parents
        ):
            raise ValueError(f"Job id {job_id!r} does not name a scratch folder of its own")
        return Path(self._settings.working_dir) / job_id

    @staticmethod
    def _prepare_work_dir(work_dir: Path) -> None:
        if work_dir.exists():
            shutil.rmtree(work_dir)
        work_dir.mkdir(parents=True)

    def _cleanup(self, work_dir: Path) -> None:
        if not self._settings.cleanup_working_dir:
            return
        try:
            shutil.rmtree(work_dir, ignore_errors=False)
        except FileNotFoundError:
            pass
        except OSError as exc:
            Log.warning(f"Could not remove {work_dir}: {exc}")


def describe_failure(exc: BaseException) -> str:
    return f"{type(exc).__name__}: {exc}"
