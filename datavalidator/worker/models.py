import threading
from concurrent.futures import Future
from dataclasses import dataclass, field

from datavalidator.database.models import JobRecord
from datavalidator.source.models import DataFile


@dataclass
class JobExecution:
    """Execution context of one job.

    ``lock`` serializes status transitions of this job only; jobs never
    share a lock.
    """

    job_id: str
    data_file: DataFile
    cancel_event: threading.Event = field(default_factory=threading.Event)
    lock: threading.Lock = field(default_factory=threading.Lock)
    future: "Future[JobRecord | None] | None" = None
