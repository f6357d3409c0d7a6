from pathlib import Path

from datavalidator.config.settings import Settings
from datavalidator.database.repositories.base import JobStorage
from datavalidator.database.repositories.file_job_storage import FileJobStorage
from datavalidator.database.repositories.job_repository import PostgresJobStorage
from datavalidator.database.repositories.memory_job_storage import InMemoryJobStorage


class JobStorageFactory:
    """Creates the job storage selected by ``job_storage``."""

    STORAGES: tuple[str, ...] = ("memory", "file", "postgres")

    @classmethod
    def create(cls, settings: Settings) -> JobStorage:
        """Create the storage. ``postgres`` expects ``init_pool`` to have run."""
        kind = settings.job_storage.lower()
        if kind == "memory":
            return InMemoryJobStorage()
        if kind == "file":
            return FileJobStorage(Path(settings.job_result_storage_dir))
        if kind == "postgres":
            storage = PostgresJobStorage()
            storage.ensure_schema()
            return storage
        raise ValueError(f"Unknown job storage '{kind}'. Choose from: {list(cls.STORAGES)}")
