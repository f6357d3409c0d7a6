from pathlib import Path

from datavalidator.config.settings import Settings
from datavalidator.schema.base import BaseSchemaValidator
from datavalidator.schema.lxml_adapter import LxmlSchemaValidator


class SchemaValidatorFactory:
    """Creates the schema validator, using ``schema_dir`` when configured."""

    @classmethod
    def create(cls, settings: Settings) -> BaseSchemaValidator:
        schema_dir = Path(settings.schema_dir) if settings.schema_dir else None
        return LxmlSchemaValidator(schema_dir=schema_dir)
