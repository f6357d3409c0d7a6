import threading
from pathlib import Path
from typing import ClassVar

from lxml import etree

from datavalidator.logging.logger import Log
from datavalidator.schema.base import DWC_META_XML, GBIF_EML, BaseSchemaValidator
from datavalidator.schema.exceptions import (
    SchemaLoadError,
    SchemaViolationError,
    UnknownSchemaError,
)

_DEFAULT_SCHEMA_DIR = Path(__file__).parent / "schemas"


class LxmlSchemaValidator(BaseSchemaValidator):
    """Validates XML documents with lxml against bundled XSD files.

    Schemas are compiled on first use and shared across threads; lxml
    schema objects are not re-entrant, so each validation holds a lock.
    """

    SCHEMA_FILES: ClassVar[dict[str, str]] = {
        DWC_META_XML: "tdwg_dwc_text.xsd",
        GBIF_EML: "gbif_eml.xsd",
    }

    def __init__(self, schema_dir: Path | None = None) -> None:
        self._schema_dir = schema_dir if schema_dir is not None else _DEFAULT_SCHEMA_DIR
        self._schemas: dict[str, etree.XMLSchema] = {}
        self._lock = threading.Lock()

    def validate(self, schema_name: str, source: Path) -> None:
        with self._lock:
            schema = self._get_schema(schema_name)
            try:
                document = etree.parse(str(source))
            except etree.XMLSyntaxError as exc:
                raise SchemaViolationError(f"{Path(source).name} is not well-formed: {exc}") from exc
            if not schema.validate(document):
                error = schema.error_log.last_error
                raise SchemaViolationError(
                    f"line {error.line}: {error.message}" if error else "schema validation failed"
                )

    def _get_schema(self, schema_name: str) -> etree.XMLSchema:
        schema = self._schemas.get(schema_name)
        if schema is not None:
            return schema
        file_name = self.SCHEMA_FILES.get(schema_name)
        if file_name is None:
            raise UnknownSchemaError(
                f"Unknown schema '{schema_name}'. Choose from: {list(self.SCHEMA_FILES)}"
            )
        try:
            schema = etree.XMLSchema(etree.parse(str(self._schema_dir / file_name)))
        except (OSError, etree.XMLSyntaxError, etree.XMLSchemaParseError) as exc:
            raise SchemaLoadError(f"Failed to load schema {schema_name}: {exc}") from exc
        self._schemas[schema_name] = schema
        Log.debug(f"Compiled XML schema {schema_name} from {file_name}")
        return schema
