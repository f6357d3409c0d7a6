"""Media types and file format detection for submitted resources."""

import zipfile
from pathlib import Path

from datavalidator.source.models import FileFormat

APPLICATION_ZIP = "application/zip"
TEXT_CSV = "text/csv"
TEXT_TSV = "text/tab-separated-values"
TEXT_PLAIN = "text/plain"
APPLICATION_OFFICE_SPREADSHEET = (
    "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
)
APPLICATION_EXCEL = "application/vnd.ms-excel"
APPLICATION_OPEN_DOC_SPREADSHEET = "application/vnd.oasis.opendocument.spreadsheet"

SPREADSHEET_MEDIA_TYPES = frozenset(
    {
        APPLICATION_OFFICE_SPREADSHEET,
        APPLICATION_EXCEL,
        APPLICATION_OPEN_DOC_SPREADSHEET,
    }
)

_SPREADSHEET_EXTENSIONS = {
    ".xlsx": APPLICATION_OFFICE_SPREADSHEET,
    ".xls": APPLICATION_EXCEL,
    ".ods": APPLICATION_OPEN_DOC_SPREADSHEET,
}
_TEXT_EXTENSIONS = {
    ".csv": TEXT_CSV,
    ".tsv": TEXT_TSV,
    ".tab": TEXT_TSV,
}


def sniff_media_type(path: Path) -> str:
    """Best-effort media type of a file based on its extension and magic bytes.

    Spreadsheet extensions win over the zip signature since xlsx and ods
    files are zip containers too.
    """
    path = Path(path)
    if path.is_dir():
        return APPLICATION_ZIP
    suffix = path.suffix.lower()
    if suffix in _SPREADSHEET_EXTENSIONS:
        return _SPREADSHEET_EXTENSIONS[suffix]
    if zipfile.is_zipfile(path):
        return APPLICATION_ZIP
    return _TEXT_EXTENSIONS.get(suffix, TEXT_PLAIN)


def detect_file_format(path: Path, media_type: str | None = None) -> FileFormat:
    """Decide how a resource must be normalized.

    Args:
        path: Uploaded file or extracted archive folder.
        media_type: Media type declared by the client, if any.
    """
    path = Path(path)
    if path.is_dir():
        return FileFormat.ARCHIVE
    declared = (media_type or "").lower()
    if declared in SPREADSHEET_MEDIA_TYPES:
        return FileFormat.SPREADSHEET
    sniffed = sniff_media_type(path)
    if sniffed in SPREADSHEET_MEDIA_TYPES:
        return FileFormat.SPREADSHEET
    if sniffed == APPLICATION_ZIP:
        return FileFormat.ARCHIVE
    return FileFormat.TABULAR
