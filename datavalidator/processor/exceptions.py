class ProcessorError(Exception):
    """Base exception for pipeline execution errors."""


class JobCancelledError(ProcessorError):
    """Raised when a job is cancelled while its pipeline is running."""
