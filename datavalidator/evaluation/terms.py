from datavalidator.evaluation.base import ChunkEvaluator
from datavalidator.evaluation.models import (
    EvaluationType,
    TermWithinRowType,
    ValidationIssue,
    ValidationResultElement,
)
from datavalidator.source.models import TabularDataFile
from datavalidator.terms.models import TermDictionary
from datavalidator.terms.vocabulary import IDENTIFIER_PLACEHOLDERS


class TermEvaluator(ChunkEvaluator):
    """Compares the columns of a part with the terms registered for its row type.

    An unregistered row type yields a single UNKNOWN_ROWTYPE issue and no
    term level issue.
    """

    def __init__(self, term_dictionary: TermDictionary) -> None:
        self._terms = term_dictionary

    def evaluate(self, chunk: TabularDataFile) -> list[ValidationResultElement]:
        definition = self._terms.get(chunk.row_type)
        if definition is None:
            issue = ValidationIssue(
                EvaluationType.UNKNOWN_ROWTYPE, TermWithinRowType(chunk.row_type)
            )
            return self.result_for(chunk, [issue])

        declared = list(dict.fromkeys([*chunk.columns, *(chunk.default_values or {})]))
        issues = [
            ValidationIssue(
                EvaluationType.REQUIRED_TERM_MISSING,
                TermWithinRowType(chunk.row_type, term.qualified_name),
            )
            for term in definition.required_terms
            if term.qualified_name not in declared
        ]
        issues.extend(
            ValidationIssue(
                EvaluationType.UNKNOWN_TERM, TermWithinRowType(chunk.row_type, column)
            )
            for column in declared
            if column not in IDENTIFIER_PLACEHOLDERS and not definition.has_term(column)
        )
        return self.result_for(chunk, issues)
