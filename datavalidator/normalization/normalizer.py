"""Normalization of archives, single tabular files and spreadsheets."""

import csv
from pathlib import Path

from datavalidator.logging.logger import Log
from datavalidator.normalization.base import BaseNormalizer
from datavalidator.normalization.file_normalizer import (
    list_data_files,
    normalize_files,
    resolve_location,
    stage_resource,
)
from datavalidator.normalization.spreadsheet import BaseSpreadsheetConverter
from datavalidator.source.exceptions import NotFoundError, UnsupportedDataFileError
from datavalidator.source.file_format import sniff_media_type
from datavalidator.source.meta_descriptor import (
    DEFAULT_METADATA_FILE_NAME,
    META_FILE_NAME,
    ArchiveDescriptor,
    ArchiveFileDescriptor,
    read_meta_descriptor,
)
from datavalidator.source.models import (
    DataFile,
    DwcDataFile,
    DwcFileType,
    FileFormat,
    RowTypeKey,
    TabularDataFile,
    TermIndex,
)
from datavalidator.terms import vocabulary
from datavalidator.terms.models import TermDictionary

_CANDIDATE_DELIMITERS = ("\t", ",", ";", "|")
_QUOTE_CHAR = '"'
_NORMALIZED_ENCODING = "utf-8"


class DwcNormalizer(BaseNormalizer):
    """Normalizes any supported resource into a DwcDataFile.

    Spreadsheets are converted to a single CSV file first. Archives and
    tabular files are staged in the destination folder, their data files
    rewritten as UTF-8, then read back as a star schema.
    """

    def __init__(
        self,
        *,
        term_dictionary: TermDictionary,
        spreadsheet_converter: BaseSpreadsheetConverter,
        default_charset: str = "utf-8",
    ) -> None:
        self._terms = term_dictionary
        self._spreadsheet_converter = spreadsheet_converter
        self._default_charset = default_charset

    def normalize(self, data_file: DataFile, destination: Path) -> DwcDataFile:
        destination.mkdir(parents=True, exist_ok=True)
        if data_file.file_format.is_tabular_based:
            dwc_data_file = self._normalize_tabular_based(data_file, destination)
        else:
            dwc_data_file = self._normalize_spreadsheet(data_file, destination)
        Log.info(
            f"Normalized {data_file.source_file_name}: core {dwc_data_file.core.row_type} "
            f"({dwc_data_file.core.data_line_count} data lines), "
            f"{len(dwc_data_file.extensions)} extensions"
        )
        return dwc_data_file

    def _normalize_spreadsheet(self, data_file: DataFile, destination: Path) -> DwcDataFile:
        if not data_file.file_path.exists():
            raise NotFoundError(f"Data file not found: {data_file.file_path}")
        media_type = data_file.media_type or sniff_media_type(data_file.file_path)
        stem = Path(data_file.source_file_name).stem or "spreadsheet"
        result = self._spreadsheet_converter.convert(
            data_file.file_path, destination / f"{stem}.csv", media_type
        )
        if result.num_of_lines <= 0:
            Log.warning(f"No line written while converting {data_file.source_file_name}")
            raise UnsupportedDataFileError(
                f"{media_type} conversion returned no content (no line)"
            )
        core = self._single_file_part(result.path, data_file.source_file_name, result.num_of_lines)
        return self._assemble(data_file, destination, [core], metadata_file_path=None)

    def _normalize_tabular_based(self, data_file: DataFile, destination: Path) -> DwcDataFile:
        root = stage_resource(data_file.file_path, destination, data_file.source_file_name)
        preview = self._preview(root)

        if preview is not None:
            locations = [f.location for f in preview.files]
            charsets = {f.location: f.encoding for f in preview.files if f.encoding}
        elif (root / META_FILE_NAME).exists():
            # Unusable descriptor, reported when the archive is opened below
            locations = [p.name for p in list_data_files(root)]
            charsets = {}
        else:
            locations = [p.name for p in self._single_data_file(root, data_file)]
            charsets = {}
        line_counts = normalize_files(root, locations, charsets, self._default_charset)

        descriptor = self._open(root)
        if descriptor is None:
            (location,) = locations
            core = self._single_file_part(
                root / location,
                self._single_file_source_name(data_file, location),
                line_counts[location],
            )
            metadata = root / DEFAULT_METADATA_FILE_NAME
            return self._assemble(
                data_file, root, [core], metadata if metadata.exists() else None
            )

        parts = []
        if descriptor.core is not None:
            source_name = (
                Path(descriptor.core.location).name
                if data_file.file_format is FileFormat.ARCHIVE
                else data_file.source_file_name
            )
            parts.append(self._archive_part(root, descriptor.core, source_name, line_counts))
        for extension in descriptor.extensions:
            parts.append(
                self._archive_part(root, extension, Path(extension.location).name, line_counts)
            )
        metadata = self._metadata_path(root, descriptor, data_file)
        return self._assemble(data_file, root, parts, metadata)

    @staticmethod
    def _preview(root: Path) -> ArchiveDescriptor | None:
        # Only used to pick up declared charsets before rewriting
        try:
            return read_meta_descriptor(root)
        except (FileNotFoundError, UnsupportedDataFileError) as exc:
            Log.debug(f"Skipping charset preview of {root.name}: {exc}")
            return None

    @staticmethod
    def _open(root: Path) -> ArchiveDescriptor | None:
        try:
            return read_meta_descriptor(root)
        except FileNotFoundError:
            return None

    @staticmethod
    def _single_data_file(root: Path, data_file: DataFile) -> list[Path]:
        data_files = list_data_files(root)
        if len(data_files) != 1:
            raise UnsupportedDataFileError(
                f"{data_file.source_file_name} has no meta.xml and "
                f"{len(data_files)} data files, expected exactly 1"
            )
        return data_files

    @staticmethod
    def _single_file_source_name(data_file: DataFile, location: str) -> str:
        if data_file.file_format is FileFormat.ARCHIVE:
            return location
        return data_file.source_file_name

    @staticmethod
    def _metadata_path(
        root: Path, descriptor: ArchiveDescriptor, data_file: DataFile
    ) -> Path | None:
        if descriptor.metadata:
            resolve_location(root, descriptor.metadata)
            return root / descriptor.metadata
        default = root / DEFAULT_METADATA_FILE_NAME
        # An archive is expected to carry its metadata document
        if data_file.file_format is FileFormat.ARCHIVE or default.exists():
            return default
        return None

    def _archive_part(
        self,
        root: Path,
        descriptor: ArchiveFileDescriptor,
        source_file_name: str,
        line_counts: dict[str, int],
    ) -> TabularDataFile:
        resolve_location(root, descriptor.location)
        path = root / descriptor.location
        if not path.exists():
            raise NotFoundError(f"File declared as '{descriptor.location}' not found")
        Log.info(f"Creating DwC based tabular data file from {descriptor.location}")

        columns = self._archive_columns(descriptor)
        delimiter = descriptor.fields_terminated_by
        if len(delimiter) != 1:
            raise UnsupportedDataFileError(
                f"Unsupported field delimiter {delimiter!r} for {descriptor.location}"
            )
        total_lines = line_counts[descriptor.location]
        if len(columns) > 1 and total_lines > 0:
            self._verify_delimiter(path, delimiter, descriptor.location)

        line_offset = min(descriptor.ignore_header_lines, total_lines)
        record_identifier = None
        if descriptor.id_index is not None:
            record_identifier = TermIndex(descriptor.id_index, columns[descriptor.id_index])
        file_type = DwcFileType.CORE if descriptor.is_core else DwcFileType.EXTENSION
        return TabularDataFile(
            file_path=path,
            source_file_name=source_file_name,
            row_type_key=RowTypeKey(descriptor.row_type, file_type),
            columns=tuple(columns),
            total_lines=total_lines,
            data_line_count=total_lines - line_offset,
            line_offset=line_offset,
            character_encoding=_NORMALIZED_ENCODING,
            delimiter=delimiter,
            quote_char=descriptor.fields_enclosed_by,
            record_identifier=record_identifier,
            default_values=descriptor.default_values,
        )

    @staticmethod
    def _archive_columns(descriptor: ArchiveFileDescriptor) -> list[str]:
        indexes = [f.index for f in descriptor.fields if f.index is not None]
        if descriptor.id_index is not None:
            indexes.append(descriptor.id_index)
        if not indexes:
            raise UnsupportedDataFileError(f"{descriptor.location} declares no column")

        columns = [""] * (max(indexes) + 1)
        for field in descriptor.fields:
            if field.index is not None and not columns[field.index]:
                columns[field.index] = field.term
        if descriptor.id_index is not None and not columns[descriptor.id_index]:
            columns[descriptor.id_index] = (
                vocabulary.DEFAULT_ID_TERM
                if descriptor.is_core
                else vocabulary.DEFAULT_CORE_ID_TERM
            )
        if any(not column for column in columns):
            raise UnsupportedDataFileError(f"A column has no header in {descriptor.location}")
        return columns

    @staticmethod
    def _verify_delimiter(path: Path, delimiter: str, location: str) -> None:
        with path.open("r", encoding=_NORMALIZED_ENCODING) as reader:
            first_line = reader.readline()
        if delimiter not in first_line:
            raise UnsupportedDataFileError(
                f"Declared field delimiter {delimiter!r} not found in {location}"
            )

    def _single_file_part(
        self, path: Path, source_file_name: str, total_lines: int
    ) -> TabularDataFile:
        with path.open("r", encoding=_NORMALIZED_ENCODING) as reader:
            header_line = reader.readline().rstrip("\n")
        if not header_line:
            raise UnsupportedDataFileError(f"{source_file_name} has no header line")

        delimiter = self._detect_delimiter(header_line, source_file_name)
        headers = next(csv.reader([header_line], delimiter=delimiter, quotechar=_QUOTE_CHAR))
        if any(not h.strip() for h in headers):
            raise UnsupportedDataFileError(f"A column has no header in {source_file_name}")
        columns = tuple(self._terms.resolve_term(h) for h in headers)

        row_type = self._infer_row_type(columns)
        definition = self._terms.get(row_type)
        record_identifier = None
        if definition is not None and definition.identifier_term in columns:
            record_identifier = TermIndex(
                columns.index(definition.identifier_term), definition.identifier_term
            )
        return TabularDataFile(
            file_path=path,
            source_file_name=source_file_name,
            row_type_key=RowTypeKey(row_type, DwcFileType.CORE),
            columns=columns,
            total_lines=total_lines,
            data_line_count=total_lines - 1,
            line_offset=1,
            character_encoding=_NORMALIZED_ENCODING,
            delimiter=delimiter,
            quote_char=_QUOTE_CHAR,
            record_identifier=record_identifier,
        )

    @staticmethod
    def _detect_delimiter(header_line: str, source_file_name: str) -> str:
        counts = {d: header_line.count(d) for d in _CANDIDATE_DELIMITERS}
        delimiter = max(_CANDIDATE_DELIMITERS, key=lambda d: counts[d])
        if counts[delimiter] == 0:
            raise UnsupportedDataFileError(
                f"Unable to detect field delimiter of {source_file_name}"
            )
        return delimiter

    @staticmethod
    def _infer_row_type(columns: tuple[str, ...]) -> str:
        if vocabulary.TAXON_ID in columns and vocabulary.OCCURRENCE_ID not in columns:
            return vocabulary.TAXON
        if vocabulary.EVENT_ID in columns and vocabulary.OCCURRENCE_ID not in columns:
            return vocabulary.EVENT
        return vocabulary.OCCURRENCE

    @staticmethod
    def _assemble(
        data_file: DataFile,
        archive_path: Path,
        parts: list[TabularDataFile],
        metadata_file_path: Path | None,
    ) -> DwcDataFile:
        cores = [p for p in parts if p.dwc_file_type is DwcFileType.CORE]
        extensions = [p for p in parts if p.dwc_file_type is DwcFileType.EXTENSION]
        if len(cores) != 1:
            Log.warning(f"DataFile should have exactly 1 core: {data_file.source_file_name}")
            raise UnsupportedDataFileError(
                f"DataFile should have exactly 1 core. Found {len(cores)}"
            )
        seen = {cores[0].row_type}
        for extension in extensions:
            if extension.row_type in seen:
                raise UnsupportedDataFileError(
                    f"Row type {extension.row_type} is declared more than once"
                )
            seen.add(extension.row_type)
        return DwcDataFile(
            data_file=data_file,
            archive_path=archive_path,
            core=cores[0],
            extensions=tuple(extensions),
            metadata_file_path=metadata_file_path,
        )
