class SchemaValidationError(Exception):
    """Base exception for XML schema validation."""


class SchemaViolationError(SchemaValidationError):
    """Raised when a document does not conform to its schema."""


class UnknownSchemaError(SchemaValidationError):
    """Raised when no schema is registered under the requested name."""


class SchemaLoadError(SchemaValidationError):
    """Raised when a registered schema file cannot be read or compiled."""
