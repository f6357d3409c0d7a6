import uuid
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from types import MappingProxyType


class FileFormat(str, Enum):
    """Declared format of a submitted resource."""

    ARCHIVE = "archive"
    TABULAR = "tabular"
    SPREADSHEET = "spreadsheet"

    @property
    def is_tabular_based(self) -> bool:
        return self in (FileFormat.ARCHIVE, FileFormat.TABULAR)


class DwcFileType(str, Enum):
    """Role of a file inside a Darwin Core resource."""

    META_DESCRIPTOR = "meta_descriptor"
    METADATA = "metadata"
    CORE = "core"
    EXTENSION = "extension"


@dataclass(frozen=True)
class DataFile:
    """A submitted resource, as received from the transport layer."""

    key: str
    file_path: Path
    source_file_name: str
    file_format: FileFormat
    received_as_media_type: str | None = None
    media_type: str | None = None

    @classmethod
    def create(
        cls,
        file_path: Path,
        source_file_name: str,
        file_format: FileFormat,
        received_as_media_type: str | None = None,
        media_type: str | None = None,
        key: str | None = None,
    ) -> "DataFile":
        """Build a DataFile, assigning a random key when none is given."""
        return cls(
            key=key or str(uuid.uuid4()),
            file_path=Path(file_path),
            source_file_name=source_file_name,
            file_format=file_format,
            received_as_media_type=received_as_media_type,
            media_type=media_type,
        )


@dataclass(frozen=True)
class RowTypeKey:
    row_type: str
    dwc_file_type: DwcFileType


@dataclass(frozen=True)
class TermIndex:
    """Column holding the record identifier (``id`` or ``coreid``)."""

    index: int
    term: str


@dataclass(frozen=True)
class TabularDataFile:
    """One tabular part of a resource, or a line-bounded chunk of one.

    ``line_offset`` counts the physical lines preceding the first data line
    (ignored header lines for a whole part, header plus preceding chunks for
    a chunk). Data line ``n`` (1-based) of this object is therefore source
    line ``line_offset + n``.
    """

    file_path: Path
    source_file_name: str
    row_type_key: RowTypeKey
    columns: tuple[str, ...]
    total_lines: int
    data_line_count: int
    line_offset: int = 0
    character_encoding: str = "utf-8"
    delimiter: str = ","
    quote_char: str | None = None
    record_identifier: TermIndex | None = None
    default_values: Mapping[str, str] | None = field(default=None, compare=False)

    def __post_init__(self) -> None:
        if self.line_offset < 0 or self.data_line_count < 0:
            raise ValueError(
                f"{self.source_file_name}: line offset and data line count must not be negative"
            )
        if self.data_line_count != self.total_lines - self.line_offset:
            raise ValueError(
                f"{self.source_file_name}: data line count {self.data_line_count} does not match "
                f"total lines {self.total_lines} minus offset {self.line_offset}"
            )
        object.__setattr__(self, "columns", tuple(self.columns))
        if self.default_values is not None:
            object.__setattr__(
                self, "default_values", MappingProxyType(dict(self.default_values))
            )

    @property
    def row_type(self) -> str:
        return self.row_type_key.row_type

    @property
    def dwc_file_type(self) -> DwcFileType:
        return self.row_type_key.dwc_file_type

    @property
    def first_data_line(self) -> int:
        """Source line number of the first data line."""
        return self.line_offset + 1

    def with_lines(self, line_offset: int, data_line_count: int) -> "TabularDataFile":
        """Return a copy covering ``data_line_count`` lines after ``line_offset``."""
        return TabularDataFile(
            file_path=self.file_path,
            source_file_name=self.source_file_name,
            row_type_key=self.row_type_key,
            columns=self.columns,
            total_lines=line_offset + data_line_count,
            data_line_count=data_line_count,
            line_offset=line_offset,
            character_encoding=self.character_encoding,
            delimiter=self.delimiter,
            quote_char=self.quote_char,
            record_identifier=self.record_identifier,
            default_values=self.default_values,
        )


@dataclass(frozen=True)
class DwcDataFile:
    """A normalized resource organized as a star schema.

    Exactly one core part and any number of extensions. Row types are
    unique across core and extensions; the normalizer rejects
    resources that repeat one.
    """

    data_file: DataFile
    archive_path: Path
    core: TabularDataFile
    extensions: tuple[TabularDataFile, ...] = ()
    metadata_file_path: Path | None = None
    _by_row_type: Mapping[str, TabularDataFile] = field(
        init=False, repr=False, compare=False
    )

    def __post_init__(self) -> None:
        if self.core is None or self.core.dwc_file_type is not DwcFileType.CORE:
            raise ValueError("DwcDataFile requires exactly one core part")
        object.__setattr__(self, "extensions", tuple(self.extensions))
        by_row_type = {self.core.row_type: self.core}
        for extension in self.extensions:
            if extension.row_type in by_row_type:
                raise ValueError(f"Row type {extension.row_type} is declared more than once")
            by_row_type[extension.row_type] = extension
        object.__setattr__(self, "_by_row_type", MappingProxyType(by_row_type))

    @property
    def tabular_data_files(self) -> list[TabularDataFile]:
        """Core first, then extensions in declaration order."""
        return [self.core, *self.extensions]

    def get_by_row_type(self, row_type: str) -> TabularDataFile | None:
        return self._by_row_type.get(row_type)
