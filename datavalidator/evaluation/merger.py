from collections.abc import Sequence

from datavalidator.evaluation.models import (
    ValidationIssue,
    ValidationReport,
    ValidationResultElement,
)
from datavalidator.source.models import DwcDataFile, DwcFileType, TabularDataFile

_PART_FILE_TYPES = (DwcFileType.CORE, DwcFileType.EXTENSION)


class ResultMerger:
    """Folds structural and per-chunk results into one report.

    Report order: meta descriptor and metadata elements first, then one
    element per tabular part (core, then extensions). Issues of a part are
    concatenated in chunk order; issues without a line number are reported
    once even when every chunk raised them, and come before line issues,
    which are kept in ascending source line order.
    """

    def merge(
        self,
        dwc_data_file: DwcDataFile,
        structural_results: Sequence[ValidationResultElement],
        part_results: Sequence[Sequence[ValidationResultElement]],
    ) -> ValidationReport:
        parts = dwc_data_file.tabular_data_files
        if len(part_results) != len(parts):
            raise ValueError(
                f"Expected results for {len(parts)} parts, got {len(part_results)}"
            )

        results = [r for r in structural_results if r.file_type not in _PART_FILE_TYPES]
        for part, chunk_elements in zip(parts, part_results):
            resource_elements = [
                r
                for r in structural_results
                if r.file_type in _PART_FILE_TYPES and r.row_type == part.row_type
            ]
            results.append(self._merge_part(part, [*chunk_elements, *resource_elements]))

        data_file = dwc_data_file.data_file
        return ValidationReport(
            data_file_key=data_file.key,
            source_file_name=data_file.source_file_name,
            file_format=data_file.file_format.value,
            results=results,
        )

    def _merge_part(
        self, part: TabularDataFile, elements: Sequence[ValidationResultElement]
    ) -> ValidationResultElement:
        issues: list[ValidationIssue] = []
        seen: set[ValidationIssue] = set()
        for element in elements:
            for issue in element.issues:
                if issue.line_number is None:
                    if issue in seen:
                        continue
                    seen.add(issue)
                issues.append(issue)

        # sorted() is stable, so chunk order breaks ties
        issues = sorted(issues, key=_line_key)
        return ValidationResultElement(
            file_name=part.source_file_name,
            file_type=part.dwc_file_type,
            row_type=part.row_type,
            number_of_lines=part.data_line_count,
            issues=tuple(issues),
        )


def _line_key(issue: ValidationIssue) -> tuple[int, int]:
    if issue.line_number is None:
        return (0, 0)
    return (1, issue.line_number)
