from typing import Any

from datavalidator.evaluation.models import (
    EvaluationType,
    TermWithinRowType,
    ValidationIssue,
    ValidationReport,
    ValidationResultElement,
)
from datavalidator.source.models import DwcFileType


class ReportSerializer:
    """Converts a ValidationReport to and from a JSON-serializable structure."""

    def to_dict(self, report: ValidationReport) -> dict[str, Any]:
        """Transform a report into a JSONB-ready dict.

        Returns:
            Dict with the resource identity, the issue count and one entry
            per result element.
        """
        return {
            "dataFileKey": report.data_file_key,
            "sourceFileName": report.source_file_name,
            "fileFormat": report.file_format,
            "issueCount": report.issue_count,
            "results": [self._element_to_dict(e) for e in report.results],
        }

    def from_dict(self, payload: dict[str, Any]) -> ValidationReport:
        return ValidationReport(
            data_file_key=payload["dataFileKey"],
            source_file_name=payload["sourceFileName"],
            file_format=payload["fileFormat"],
            results=[self._element_from_dict(e) for e in payload.get("results", [])],
        )

    def _element_to_dict(self, element: ValidationResultElement) -> dict[str, Any]:
        return {
            "fileName": element.file_name,
            "fileType": element.file_type.value,
            "rowType": element.row_type,
            "numberOfLines": element.number_of_lines,
            "issues": [self._issue_to_dict(i) for i in element.issues],
        }

    def _issue_to_dict(self, issue: ValidationIssue) -> dict[str, Any]:
        related = issue.related_data
        return {
            "issue": issue.evaluation_type.value,
            "issueCategory": issue.evaluation_type.category.value,
            "relatedData": (
                {"rowType": related.row_type, "term": related.term} if related else None
            ),
            "message": issue.message,
            "lineNumber": issue.line_number,
        }

    def _element_from_dict(self, payload: dict[str, Any]) -> ValidationResultElement:
        return ValidationResultElement(
            file_name=payload["fileName"],
            file_type=DwcFileType(payload["fileType"]),
            row_type=payload.get("rowType"),
            number_of_lines=payload.get("numberOfLines"),
            issues=tuple(self._issue_from_dict(i) for i in payload.get("issues", [])),
        )

    def _issue_from_dict(self, payload: dict[str, Any]) -> ValidationIssue:
        related = payload.get("relatedData")
        return ValidationIssue(
            evaluation_type=EvaluationType(payload["issue"]),
            related_data=(
                TermWithinRowType(related["rowType"], related.get("term")) if related else None
            ),
            message=payload.get("message"),
            line_number=payload.get("lineNumber"),
        )
