import json
import os
import threading
from pathlib import Path

from datavalidator.database.models import JobRecord, is_valid_job_id
from datavalidator.database.repositories.base import JobStorage
from datavalidator.database.serialization import JobRecordSerializer


class FileJobStorage(JobStorage):
    """Stores one JSON document per job under ``root``.

    Each write goes to a temporary file replaced atomically, so readers
    never see a partially written record.
    """

    def __init__(self, root: Path, serializer: JobRecordSerializer | None = None) -> None:
        self._root = root
        self._serializer = serializer or JobRecordSerializer()
        self._root.mkdir(parents=True, exist_ok=True)

    def get(self, job_id: str) -> JobRecord | None:
        path = self._path(job_id)
        try:
            payload = json.loads(path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return None
        return self._serializer.from_dict(payload)

    def put(self, record: JobRecord) -> None:
        path = self._path(record.job_id)
        tmp_path = path.with_name(f".{path.name}.{threading.get_ident()}.tmp")
        tmp_path.write_text(
            json.dumps(self._serializer.to_dict(record), ensure_ascii=False),
            encoding="utf-8",
        )
        os.replace(tmp_path, path)

    def _path(self, job_id: str) -> Path:
        if not is_valid_job_id(job_id):
            raise ValueError(f"Job id {job_id!r} cannot be used as a file name")
        return self._root / f"{job_id}.json"