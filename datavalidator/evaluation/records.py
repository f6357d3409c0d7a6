from datavalidator.evaluation.base import ChunkEvaluator
from datavalidator.evaluation.models import (
    EvaluationType,
    TermWithinRowType,
    ValidationIssue,
    ValidationResultElement,
)
from datavalidator.source.models import TabularDataFile
from datavalidator.source.reader import read_records


class RecordStructureEvaluator(ChunkEvaluator):
    """Reports lines whose shape does not match the declared columns."""

    def evaluate(self, chunk: TabularDataFile) -> list[ValidationResultElement]:
        expected = len(chunk.columns)
        identifier = chunk.record_identifier
        issues: list[ValidationIssue] = []
        for record in read_records(chunk):
            if len(record.values) != expected:
                issues.append(
                    ValidationIssue(
                        EvaluationType.COLUMN_MISMATCH,
                        message=f"Expected {expected} columns, found {len(record.values)}",
                        line_number=record.line_number,
                    )
                )
            elif identifier is not None and not record.values[identifier.index].strip():
                issues.append(
                    ValidationIssue(
                        EvaluationType.RECORD_IDENTIFIER_NOT_FOUND,
                        related_data=TermWithinRowType(chunk.row_type, identifier.term),
                        line_number=record.line_number,
                    )
                )
        return self.result_for(chunk, issues)
