from dataclasses import dataclass, field
from enum import Enum

from datavalidator.source.models import DwcFileType


class EvaluationCategory(str, Enum):
    RESOURCE_STRUCTURE = "resource_structure"
    METADATA_CONTENT = "metadata_content"
    RESOURCE_INTEGRITY = "resource_integrity"
    OCC_INTERPRETATION_BASED = "occ_interpretation_based"


class EvaluationType(str, Enum):
    """Taxonomy of validation findings."""

    DWCA_UNREADABLE = "DWCA_UNREADABLE"
    DWCA_META_XML_NOT_FOUND = "DWCA_META_XML_NOT_FOUND"
    DWCA_META_XML_SCHEMA = "DWCA_META_XML_SCHEMA"
    EML_NOT_FOUND = "EML_NOT_FOUND"
    EML_GBIF_SCHEMA = "EML_GBIF_SCHEMA"
    UNKNOWN_ROWTYPE = "UNKNOWN_ROWTYPE"
    REQUIRED_TERM_MISSING = "REQUIRED_TERM_MISSING"
    UNKNOWN_TERM = "UNKNOWN_TERM"
    UNHANDLED_ERROR = "UNHANDLED_ERROR"

    COLUMN_MISMATCH = "COLUMN_MISMATCH"
    RECORD_IDENTIFIER_NOT_FOUND = "RECORD_IDENTIFIER_NOT_FOUND"
    RECORD_NOT_UNIQUELY_IDENTIFIED = "RECORD_NOT_UNIQUELY_IDENTIFIED"
    RECORD_REFERENTIAL_INTEGRITY_VIOLATION = "RECORD_REFERENTIAL_INTEGRITY_VIOLATION"

    BASIS_OF_RECORD_INVALID = "BASIS_OF_RECORD_INVALID"
    COORDINATE_INVALID = "COORDINATE_INVALID"
    COORDINATE_OUT_OF_RANGE = "COORDINATE_OUT_OF_RANGE"
    ZERO_COORDINATE = "ZERO_COORDINATE"
    RECORDED_DATE_INVALID = "RECORDED_DATE_INVALID"
    RECORDED_DATE_UNLIKELY = "RECORDED_DATE_UNLIKELY"
    INDIVIDUAL_COUNT_INVALID = "INDIVIDUAL_COUNT_INVALID"

    @property
    def category(self) -> EvaluationCategory:
        return _CATEGORIES[self]


_CATEGORIES: dict[EvaluationType, EvaluationCategory] = {
    EvaluationType.DWCA_UNREADABLE: EvaluationCategory.RESOURCE_STRUCTURE,
    EvaluationType.DWCA_META_XML_NOT_FOUND: EvaluationCategory.RESOURCE_STRUCTURE,
    EvaluationType.DWCA_META_XML_SCHEMA: EvaluationCategory.RESOURCE_STRUCTURE,
    EvaluationType.EML_NOT_FOUND: EvaluationCategory.METADATA_CONTENT,
    EvaluationType.EML_GBIF_SCHEMA: EvaluationCategory.METADATA_CONTENT,
    EvaluationType.UNKNOWN_ROWTYPE: EvaluationCategory.RESOURCE_STRUCTURE,
    EvaluationType.REQUIRED_TERM_MISSING: EvaluationCategory.RESOURCE_STRUCTURE,
    EvaluationType.UNKNOWN_TERM: EvaluationCategory.RESOURCE_STRUCTURE,
    EvaluationType.UNHANDLED_ERROR: EvaluationCategory.RESOURCE_STRUCTURE,
    EvaluationType.COLUMN_MISMATCH: EvaluationCategory.RESOURCE_INTEGRITY,
    EvaluationType.RECORD_IDENTIFIER_NOT_FOUND: EvaluationCategory.RESOURCE_INTEGRITY,
    EvaluationType.RECORD_NOT_UNIQUELY_IDENTIFIED: EvaluationCategory.RESOURCE_INTEGRITY,
    EvaluationType.RECORD_REFERENTIAL_INTEGRITY_VIOLATION: EvaluationCategory.RESOURCE_INTEGRITY,
    EvaluationType.BASIS_OF_RECORD_INVALID: EvaluationCategory.OCC_INTERPRETATION_BASED,
    EvaluationType.COORDINATE_INVALID: EvaluationCategory.OCC_INTERPRETATION_BASED,
    EvaluationType.COORDINATE_OUT_OF_RANGE: EvaluationCategory.OCC_INTERPRETATION_BASED,
    EvaluationType.ZERO_COORDINATE: EvaluationCategory.OCC_INTERPRETATION_BASED,
    EvaluationType.RECORDED_DATE_INVALID: EvaluationCategory.OCC_INTERPRETATION_BASED,
    EvaluationType.RECORDED_DATE_UNLIKELY: EvaluationCategory.OCC_INTERPRETATION_BASED,
    EvaluationType.INDIVIDUAL_COUNT_INVALID: EvaluationCategory.OCC_INTERPRETATION_BASED,
}


@dataclass(frozen=True)
class TermWithinRowType:
    """Related data pointing at a row type, and optionally one of its terms."""

    row_type: str
    term: str | None = None


@dataclass(frozen=True)
class ValidationIssue:
    evaluation_type: EvaluationType
    related_data: TermWithinRowType | None = None
    message: str | None = None
    line_number: int | None = None


@dataclass(frozen=True)
class ValidationResultElement:
    """Issues found on one element of a resource.

    For an archive an element is the meta descriptor, the metadata
    document, or one core or extension file.
    """

    file_name: str
    file_type: DwcFileType
    issues: tuple[ValidationIssue, ...] = ()
    row_type: str | None = None
    number_of_lines: int | None = None

    @classmethod
    def on_exception(
        cls,
        file_name: str,
        file_type: DwcFileType,
        evaluation_type: EvaluationType,
        message: str | None,
    ) -> "ValidationResultElement":
        return cls(
            file_name=file_name,
            file_type=file_type,
            issues=(ValidationIssue(evaluation_type, message=message),),
        )


@dataclass
class ValidationReport:
    """Merged result of one job, grouped per resource element."""

    data_file_key: str
    source_file_name: str
    file_format: str
    results: list[ValidationResultElement] = field(default_factory=list)

    @property
    def issue_count(self) -> int:
        return sum(len(r.issues) for r in self.results)
