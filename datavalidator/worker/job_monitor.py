import threading
import uuid
from concurrent.futures import Future, ThreadPoolExecutor
from concurrent.futures import wait as wait_futures
from functools import partial

from datavalidator.config.settings import Settings
from datavalidator.database.models import JobRecord, is_valid_job_id
from datavalidator.database.repositories.base import JobStorage
from datavalidator.logging.logger import Log
from datavalidator.processor.exceptions import JobCancelledError
from datavalidator.source.models import DataFile
from datavalidator.worker.exceptions import (
    DuplicateJobError,
    InvalidJobIdError,
    MonitorClosedError,
)
from datavalidator.worker.job_runner import JobRunner, describe_failure
from datavalidator.worker.models import JobExecution


class JobMonitor:
    """Accepts jobs and runs each one in its own execution context.

    The monitor only routes job ids to executions and the job storage.
    Pipeline work happens on the executor's threads; a failing job is
    recorded as ``failed`` and never reaches the caller of ``submit``.
    """

    def __init__(
        self,
        job_runner: JobRunner,
        storage: JobStorage,
        settings: Settings,
    ) -> None:
        self._job_runner = job_runner
        self._storage = storage
        self._executor = ThreadPoolExecutor(
            max_workers=max(1, settings.max_parallel_jobs), thread_name_prefix="job"
        )
        self._executions: dict[str, JobExecution] = {}
        self._lock = threading.Lock()
        self._closed = False

    def submit(self, data_file: DataFile, job_id: str | None = None) -> str:
        """Accept a job and start it asynchronously.

        Raises:
            InvalidJobIdError: if ``job_id`` is not a single plain path segment.
            DuplicateJobError: if ``job_id`` is accepted or running.
            MonitorClosedError: after ``shutdown``.
        """
        job_id = job_id or str(uuid.uuid4())
        if not is_valid_job_id(job_id):
            raise InvalidJobIdError(
                f"Job id {job_id!r} may only use letters, digits, '.', '_' and '-'"
            )
        with self._lock:
            if self._closed:
                raise MonitorClosedError("JobMonitor is shut down")
            existing = self._executions.get(job_id)
            if existing is not None and not _is_done(existing):
                raise DuplicateJobError(f"Job {job_id} is already in progress")
            current = self._storage.get(job_id)
            if current is not None and not current.status.is_terminal:
                raise DuplicateJobError(f"Job {job_id} is already {current.status.value}")

            execution = JobExecution(job_id=job_id, data_file=data_file)
            self._storage.put(JobRecord.accepted(job_id))
            execution.future = self._executor.submit(self._job_runner.run, execution)
            self._executions[job_id] = execution

        execution.future.add_done_callback(partial(self._on_done, execution))
        Log.info(f"Accepted job {job_id} for {data_file.source_file_name}")
        return job_id

    def status(self, job_id: str) -> JobRecord | None:
        """Current record of a job, or None if it is unknown."""
        return self._storage.get(job_id)

    def wait(self, job_id: str, timeout: float | None = None) -> JobRecord | None:
        """Block the calling thread until the job terminates or ``timeout`` expires."""
        with self._lock:
            execution = self._executions.get(job_id)
        if execution is not None and execution.future is not None:
            wait_futures([execution.future], timeout=timeout)
        return self._storage.get(job_id)

    def cancel(self, job_id: str) -> bool:
        """Ask a job to stop.

        A job that has not started is failed immediately. A running job is
        failed when its pipeline next checks for cancellation.

        Returns:
            False if the job is unknown or already terminated.
        """
        with self._lock:
            execution = self._executions.get(job_id)
        if execution is None or _is_done(execution):
            return False

        execution.cancel_event.set()
        if execution.future.cancel():
            self._job_runner.transition(
                execution,
                JobRecord.failed(
                    job_id, describe_failure(JobCancelledError(f"Job {job_id} was cancelled"))
                ),
            )
        Log.info(f"Cancellation requested for job {job_id}")
        return True

    def shutdown(self, wait: bool = True, cancel_running: bool = False) -> None:
        """Stop accepting jobs and release the executor."""
        with self._lock:
            self._closed = True
            job_ids = list(self._executions)
        if cancel_running:
            for job_id in job_ids:
                self.cancel(job_id)
        self._executor.shutdown(wait=wait)
        Log.info("JobMonitor shut down")

    def _on_done(self, execution: JobExecution, future: "Future[JobRecord | None]") -> None:
        with self._lock:
            current = self._executions.get(execution.job_id)
            if current is execution:
                del self._executions[execution.job_id]
        if future.cancelled():
            return
        exc = future.exception()
        if exc is None:
            return
        if current is not None and current is not execution:
            # The id was resubmitted; its record belongs to the newer execution
            Log.error(f"Superseded run of job {execution.job_id} crashed: {describe_failure(exc)}")
            return
        # The runner could not record the outcome itself, usually a storage fault
        Log.error(f"Job {execution.job_id} crashed: {describe_failure(exc)}")
        try:
            self._job_runner.transition(
                execution, JobRecord.failed(execution.job_id, describe_failure(exc))
            )
        except Exception as store_exc:
            Log.error(f"Could not record failure of job {execution.job_id}: {store_exc}")


def _is_done(execution: JobExecution) -> bool:
    return execution.future is None or execution.future.done()
