class WorkerError(Exception):
    """Base exception for job orchestration errors."""


class DuplicateJobError(WorkerError):
    """Raised when a job id is submitted while a job with that id is accepted or running."""


class MonitorClosedError(WorkerError):
    """Raised when a job is submitted after the monitor was shut down."""


class InvalidJobIdError(WorkerError):
    """Raised when a job id cannot be used as a single path segment."""
