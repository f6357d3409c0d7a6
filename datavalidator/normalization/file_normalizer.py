"""Stage submitted resources in a working folder and rewrite their data files.

Rewritten files are UTF-8, use ``\\n`` line endings, carry no byte order
mark and no trailing blank lines. Running the rewrite twice from the same
source produces byte-identical files.
"""

import codecs
import os
import shutil
import zipfile
from collections.abc import Iterable, Mapping
from pathlib import Path

from datavalidator.logging.logger import Log
from datavalidator.source.exceptions import NotFoundError, UnsupportedDataFileError
from datavalidator.source.meta_descriptor import META_FILE_NAME

_IGNORED_PREFIXES = (".", "__MACOSX")


def stage_resource(source: Path, destination: Path, file_name: str) -> Path:
    """Extract or copy a resource into ``destination``.

    Zip files are extracted, folders are copied, any other file is copied
    as ``destination/file_name``.

    Returns:
        The folder holding the resource (unwrapped when an archive's only
        entry is a folder).

    Raises:
        NotFoundError: if ``source`` does not exist.
        UnsupportedDataFileError: if a zip file is corrupt or unsafe.
    """
    source = Path(source)
    if not source.exists():
        raise NotFoundError(f"Data file not found: {source}")
    destination.mkdir(parents=True, exist_ok=True)

    if source.is_dir():
        shutil.copytree(source, destination, dirs_exist_ok=True)
    elif zipfile.is_zipfile(source):
        _extract_zip(source, destination)
    else:
        shutil.copyfile(source, destination / Path(file_name).name)
        return destination
    return _unwrap(destination)


def list_data_files(folder: Path) -> list[Path]:
    """Regular, non-XML, non-hidden files directly inside ``folder``."""
    return sorted(
        p
        for p in folder.iterdir()
        if p.is_file()
        and not p.name.startswith(_IGNORED_PREFIXES)
        and p.suffix.lower() != ".xml"
    )


def resolve_location(folder: Path, location: str) -> Path:
    """Path of a file declared relative to ``folder``.

    Raises:
        UnsupportedDataFileError: if the location resolves outside ``folder``.
    """
    root = folder.resolve()
    path = (root / location).resolve()
    if root not in path.parents:
        raise UnsupportedDataFileError(f"Location '{location}' points outside the data file")
    return path


def normalize_files(
    folder: Path,
    locations: Iterable[str],
    charsets_by_location: Mapping[str, str],
    default_charset: str,
) -> dict[str, int]:
    """Rewrite every data file in place and count its lines.

    Returns:
        Mapping of location (relative to ``folder``) to line count.

    Raises:
        NotFoundError: if a location has no backing file.
        UnsupportedDataFileError: if a location points outside ``folder`` or a
            file cannot be decoded.
    """
    line_counts: dict[str, int] = {}
    for location in locations:
        path = resolve_location(folder, location)
        if not path.is_file():
            raise NotFoundError(f"File declared as '{location}' not found")
        charset = charsets_by_location.get(location) or default_charset
        line_counts[location] = rewrite_text_file(path, charset)
        Log.debug(f"Normalized {location}: {line_counts[location]} lines ({charset})")
    return line_counts


def rewrite_text_file(path: Path, charset: str) -> int:
    """Re-encode ``path`` as UTF-8 with ``\\n`` line endings.

    Returns:
        Number of lines written.
    """
    encoding = _reading_codec(charset)
    tmp_path = path.with_name(path.name + ".normalizing")
    lines = 0
    pending_blank: list[str] = []
    try:
        with (
            path.open("r", encoding=encoding, newline=None) as reader,
            tmp_path.open("w", encoding="utf-8", newline="\n") as writer,
        ):
            for raw_line in reader:
                line = raw_line.rstrip("\n")
                if not line.strip():
                    pending_blank.append(line)
                    continue
                for blank in pending_blank:
                    writer.write(blank + "\n")
                lines += len(pending_blank)
                pending_blank.clear()
                writer.write(line + "\n")
                lines += 1
    except UnicodeDecodeError as exc:
        tmp_path.unlink(missing_ok=True)
        raise UnsupportedDataFileError(
            f"{path.name} can not be read as {charset}: {exc.reason}"
        ) from exc
    os.replace(tmp_path, path)
    return lines


def _reading_codec(charset: str) -> str:
    try:
        name = codecs.lookup(charset).name
    except LookupError as exc:
        raise UnsupportedDataFileError(f"Unsupported character encoding '{charset}'") from exc
    return "utf-8-sig" if name == "utf-8" else name


def _extract_zip(source: Path, destination: Path) -> None:
    root = destination.resolve()
    try:
        with zipfile.ZipFile(source) as archive:
            for member in archive.infolist():
                target = (destination / member.filename).resolve()
                if target != root and root not in target.parents:
                    raise UnsupportedDataFileError(
                        f"Archive entry '{member.filename}' escapes the archive folder"
                    )
            archive.extractall(destination)
    except zipfile.BadZipFile as exc:
        raise UnsupportedDataFileError(f"Corrupt archive: {exc}") from exc


def _unwrap(folder: Path) -> Path:
    if (folder / META_FILE_NAME).exists():
        return folder
    entries = [p for p in folder.iterdir() if not p.name.startswith(_IGNORED_PREFIXES)]
    if len(entries) == 1 and entries[0].is_dir():
        return entries[0]
    return folder
