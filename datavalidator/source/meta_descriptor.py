"""Reader for the ``meta.xml`` descriptor of a Darwin Core Archive."""

from dataclasses import dataclass
from pathlib import Path

from lxml import etree

from datavalidator.source.exceptions import UnsupportedDataFileError

META_FILE_NAME = "meta.xml"
DEFAULT_METADATA_FILE_NAME = "eml.xml"

_ESCAPES = {"\\t": "\t", "\\n": "\n", "\\r": "\r", "\\\\": "\\"}


@dataclass(frozen=True)
class FieldDescriptor:
    term: str
    index: int | None = None
    default: str | None = None


@dataclass(frozen=True)
class ArchiveFileDescriptor:
    """A ``<core>`` or ``<extension>`` element of meta.xml."""

    row_type: str
    location: str
    is_core: bool
    encoding: str | None = None
    fields_terminated_by: str = ","
    fields_enclosed_by: str | None = None
    ignore_header_lines: int = 0
    id_index: int | None = None
    fields: tuple[FieldDescriptor, ...] = ()

    @property
    def default_values(self) -> dict[str, str] | None:
        defaults = {
            f.term: f.default
            for f in self.fields
            if f.index is None and f.default is not None
        }
        return defaults or None


@dataclass(frozen=True)
class ArchiveDescriptor:
    core: ArchiveFileDescriptor | None
    extensions: tuple[ArchiveFileDescriptor, ...] = ()
    metadata: str | None = None

    @property
    def files(self) -> list[ArchiveFileDescriptor]:
        return ([self.core] if self.core else []) + list(self.extensions)


def unescape_delimiter(value: str | None, default: str) -> str:
    """Turn meta.xml escapes such as a literal ``\\t`` into the character."""
    if value is None:
        return default
    return _ESCAPES.get(value, value)


def read_meta_descriptor(folder: Path) -> ArchiveDescriptor:
    """Parse ``folder/meta.xml``.

    Raises:
        FileNotFoundError: if meta.xml is absent.
        UnsupportedDataFileError: if meta.xml is not well-formed or declares
            more than one core.
    """
    meta_file = Path(folder) / META_FILE_NAME
    try:
        root = etree.parse(str(meta_file)).getroot()
    except OSError:
        if not meta_file.exists():
            raise FileNotFoundError(f"{META_FILE_NAME} not found in {folder}") from None
        raise
    except etree.XMLSyntaxError as exc:
        raise UnsupportedDataFileError(f"{META_FILE_NAME} is not well-formed: {exc}") from exc

    cores: list[ArchiveFileDescriptor] = []
    extensions: list[ArchiveFileDescriptor] = []
    for element in root:
        if not isinstance(element.tag, str):
            continue
        tag = etree.QName(element).localname
        if tag == "core":
            cores.append(_build_file(element, is_core=True))
        elif tag == "extension":
            extensions.append(_build_file(element, is_core=False))

    if len(cores) > 1:
        raise UnsupportedDataFileError(
            f"DataFile should have exactly 1 core. Found {len(cores)}"
        )
    return ArchiveDescriptor(
        core=cores[0] if cores else None,
        extensions=tuple(extensions),
        metadata=root.get("metadata") or None,
    )


def _build_file(element: etree._Element, is_core: bool) -> ArchiveFileDescriptor:
    row_type = element.get("rowType")
    if not row_type:
        raise UnsupportedDataFileError(f"{META_FILE_NAME}: rowType is required")

    location = None
    id_index = None
    fields: list[FieldDescriptor] = []
    for child in element.iter():
        if not isinstance(child.tag, str) or child is element:
            continue
        tag = etree.QName(child).localname
        if tag == "location" and location is None and child.text:
            location = child.text.strip()
        elif tag in ("id", "coreid"):
            id_index = _parse_int(child.get("index"), f"{tag} index")
        elif tag == "field":
            term = (child.get("term") or "").strip()
            if not term:
                raise UnsupportedDataFileError(f"{META_FILE_NAME}: field without term")
            fields.append(
                FieldDescriptor(
                    term=term,
                    index=_parse_int(child.get("index"), f"index of {term}"),
                    default=child.get("default"),
                )
            )
    if not location:
        raise UnsupportedDataFileError(f"{META_FILE_NAME}: no location declared for {row_type}")

    return ArchiveFileDescriptor(
        row_type=row_type,
        location=location,
        is_core=is_core,
        encoding=element.get("encoding") or None,
        fields_terminated_by=unescape_delimiter(element.get("fieldsTerminatedBy"), ","),
        fields_enclosed_by=unescape_delimiter(element.get("fieldsEnclosedBy"), "\"") or None,
        ignore_header_lines=_parse_int(element.get("ignoreHeaderLines"), "ignoreHeaderLines") or 0,
        id_index=id_index,
        fields=tuple(fields),
    )


def _parse_int(value: str | None, what: str) -> int | None:
    if value is None or not value.strip():
        return None
    try:
        parsed = int(value)
    except ValueError as exc:
        raise UnsupportedDataFileError(f"{META_FILE_NAME}: invalid {what} '{value}'") from exc
    if parsed < 0:
        raise UnsupportedDataFileError(f"{META_FILE_NAME}: negative {what} '{value}'")
    return parsed
