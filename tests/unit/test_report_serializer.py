import json

from datavalidator.evaluation.models import (
    EvaluationType,
    TermWithinRowType,
    ValidationIssue,
    ValidationReport,
    ValidationResultElement,
)
from datavalidator.evaluation.serialization import ReportSerializer
from datavalidator.source.models import DwcFileType
from datavalidator.terms import vocabulary


def _make_report() -> ValidationReport:
    return ValidationReport(
        data_file_key="k1",
        source_file_name="dwca.zip",
        file_format="archive",
        results=[
            ValidationResultElement(
                file_name="occurrence.txt",
                file_type=DwcFileType.CORE,
                row_type=vocabulary.OCCURRENCE,
                number_of_lines=10,
                issues=(
                    ValidationIssue(
                        EvaluationType.REQUIRED_TERM_MISSING,
                        TermWithinRowType(vocabulary.OCCURRENCE, vocabulary.OCCURRENCE_ID),
                    ),
                    ValidationIssue(EvaluationType.COLUMN_MISMATCH, message="3 != 4", line_number=7),
                ),
            )
        ],
    )


class TestReportSerializer:
    def test_to_dict_is_json_ready(self) -> None:
        payload = ReportSerializer().to_dict(_make_report())

        json.dumps(payload)
        assert payload["issueCount"] == 2
        issue = payload["results"][0]["issues"][1]
        assert issue == {
            "issue": "COLUMN_MISMATCH",
            "issueCategory": "resource_integrity",
            "relatedData": None,
            "message": "3 != 4",
            "lineNumber": 7,
        }

    def test_related_data(self) -> None:
        payload = ReportSerializer().to_dict(_make_report())

        related = payload["results"][0]["issues"][0]["relatedData"]
        assert related == {"rowType": vocabulary.OCCURRENCE, "term": vocabulary.OCCURRENCE_ID}

    def test_from_dict_restores_report(self) -> None:
        serializer = ReportSerializer()
        report = _make_report()

        assert serializer.from_dict(serializer.to_dict(report)) == report
