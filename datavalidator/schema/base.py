from abc import ABC, abstractmethod
from pathlib import Path

DWC_META_XML = "dwc_meta_xml"
GBIF_EML = "gbif_eml"


class BaseSchemaValidator(ABC):
    """Contract for XML schema validation adapters."""

    @abstractmethod
    def validate(self, schema_name: str, source: Path) -> None:
        """Validate an XML document against a named schema.

        Raises:
            SchemaViolationError: with a human readable message when the
                document is not well-formed or violates the schema.
            UnknownSchemaError: if ``schema_name`` is not registered.
            SchemaLoadError: if the registered schema file is unusable.
            OSError: if ``source`` cannot be read.
        """
