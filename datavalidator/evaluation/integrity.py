from datavalidator.evaluation.base import ResourceEvaluator
from datavalidator.evaluation.models import (
    EvaluationType,
    TermWithinRowType,
    ValidationIssue,
    ValidationResultElement,
)
from datavalidator.source.models import DwcDataFile, TabularDataFile, TermIndex
from datavalidator.source.reader import read_records


class ReferentialIntegrityEvaluator(ResourceEvaluator):
    """Checks core identifiers are unique and extension rows point at a core record.

    Needs every core identifier at once, so it runs on the whole resource
    rather than per chunk. At most ``max_samples`` issues are reported per
    file and type.
    """

    def __init__(self, max_samples: int = 50) -> None:
        self._max_samples = max_samples

    def evaluate(self, dwc_data_file: DwcDataFile) -> list[ValidationResultElement]:
        core = dwc_data_file.core
        identifier = core.record_identifier
        if identifier is None:
            return []

        results: list[ValidationResultElement] = []
        core_ids, duplicates = self._collect_core_ids(core, identifier)
        if duplicates:
            results.append(self._result(core, duplicates))

        for extension in dwc_data_file.extensions:
            violations = self._check_extension(extension, core_ids)
            if violations:
                results.append(self._result(extension, violations))
        return results

    def _collect_core_ids(
        self, core: TabularDataFile, identifier: TermIndex
    ) -> tuple[set[str], list[ValidationIssue]]:
        first_seen: dict[str, int] = {}
        duplicates: list[ValidationIssue] = []
        for record in read_records(core):
            value = record.get(identifier.term)
            if not value:
                continue
            if value not in first_seen:
                first_seen[value] = record.line_number
            elif len(duplicates) < self._max_samples:
                duplicates.append(
                    ValidationIssue(
                        EvaluationType.RECORD_NOT_UNIQUELY_IDENTIFIED,
                        related_data=TermWithinRowType(core.row_type, identifier.term),
                        message=f"'{value}' already used on line {first_seen[value]}",
                        line_number=record.line_number,
                    )
                )
        return set(first_seen), duplicates

    def _check_extension(
        self, extension: TabularDataFile, core_ids: set[str]
    ) -> list[ValidationIssue]:
        identifier = extension.record_identifier
        if identifier is None:
            return []
        violations: list[ValidationIssue] = []
        for record in read_records(extension):
            value = record.get(identifier.term)
            if not value or value in core_ids:
                continue
            violations.append(
                ValidationIssue(
                    EvaluationType.RECORD_REFERENTIAL_INTEGRITY_VIOLATION,
                    related_data=TermWithinRowType(extension.row_type, identifier.term),
                    message=f"Core record '{value}' not found",
                    line_number=record.line_number,
                )
            )
            if len(violations) >= self._max_samples:
                break
        return violations

    @staticmethod
    def _result(
        part: TabularDataFile, issues: list[ValidationIssue]
    ) -> ValidationResultElement:
        return ValidationResultElement(
            file_name=part.source_file_name,
            file_type=part.dwc_file_type,
            row_type=part.row_type,
            issues=tuple(issues),
        )
