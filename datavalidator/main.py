import argparse
import json
import sys
from collections.abc import Sequence
from pathlib import Path

from datavalidator.config.settings import Settings
from datavalidator.database.connection import close_pool, init_pool
from datavalidator.database.factory import JobStorageFactory
from datavalidator.database.models import JobStatus
from datavalidator.database.serialization import JobRecordSerializer
from datavalidator.logging.logger import Log
from datavalidator.processor.processor import build_processor
from datavalidator.source.file_format import detect_file_format, sniff_media_type
from datavalidator.source.models import DataFile, FileFormat
from datavalidator.worker.job_monitor import JobMonitor
from datavalidator.worker.job_runner import JobRunner

EXIT_SUCCEEDED = 0
EXIT_FAILED = 1


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="datavalidator", description="Validate a Darwin Core resource."
    )
    parser.add_argument("file", type=Path, help="archive, tabular file or spreadsheet")
    parser.add_argument(
        "--format",
        choices=[f.value for f in FileFormat],
        help="declared format; detected from the file when omitted",
    )
    parser.add_argument("--media-type", help="media type declared for the file")
    parser.add_argument("--job-id", help="job id to use instead of a generated one")
    parser.add_argument("--split-size", type=int, help="maximum data lines per chunk")
    return parser.parse_args(argv)


def build_data_file(path: Path, file_format: str | None, media_type: str | None) -> DataFile:
    sniffed = sniff_media_type(path)
    resolved = FileFormat(file_format) if file_format else detect_file_format(path, media_type)
    return DataFile.create(
        file_path=path,
        source_file_name=path.name,
        file_format=resolved,
        received_as_media_type=media_type,
        media_type=sniffed,
    )


def main(argv: Sequence[str] | None = None) -> int:
    """Entry point: settings -> dependencies -> submit -> wait -> print the job record."""
    args = parse_args(argv)
    overrides = {"file_split_size": args.split_size} if args.split_size else {}
    settings = Settings(**overrides)
    # stdout carries the JSON record
    Log.configure(settings.log_level, stream=sys.stderr)

    if not args.file.exists():
        Log.error(f"{args.file} does not exist")
        return EXIT_FAILED

    uses_database = settings.job_storage.lower() == "postgres"
    if uses_database:
        init_pool(settings)
    try:
        storage = JobStorageFactory.create(settings)
        processor = build_processor(settings)
        monitor = JobMonitor(JobRunner(processor, storage, settings), storage, settings)
        try:
            data_file = build_data_file(args.file, args.format, args.media_type)
            job_id = monitor.submit(data_file, job_id=args.job_id)
            record = monitor.wait(job_id)
        finally:
            monitor.shutdown()
    finally:
        if uses_database:
            close_pool()

    if record is None:
        Log.error("Job record not found after completion")
        return EXIT_FAILED
    json.dump(JobRecordSerializer().to_dict(record), sys.stdout, indent=2, ensure_ascii=False)
    sys.stdout.write("\n")
    return EXIT_SUCCEEDED if record.status is JobStatus.SUCCEEDED else EXIT_FAILED


if __name__ == "__main__":
    sys.exit(main())
