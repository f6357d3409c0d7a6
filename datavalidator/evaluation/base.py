from abc import ABC, abstractmethod
from dataclasses import dataclass, field

from datavalidator.evaluation.models import ValidationIssue, ValidationResultElement
from datavalidator.source.models import DwcDataFile, TabularDataFile


class ResourceEvaluator(ABC):
    """Evaluates a whole normalized resource, once per job."""

    @abstractmethod
    def evaluate(self, dwc_data_file: DwcDataFile) -> list[ValidationResultElement]:
        """Return the result elements describing problems found, if any.

        Data problems are reported as issues. Only infrastructure faults
        (I/O, unusable schema files) are raised.
        """


class ChunkEvaluator(ABC):
    """Evaluates one chunk of a tabular part; chunks may be evaluated concurrently."""

    @abstractmethod
    def evaluate(self, chunk: TabularDataFile) -> list[ValidationResultElement]:
        """Return the result elements describing problems found, if any.

        Issues carrying a line number use source line numbers.
        """

    @staticmethod
    def result_for(
        chunk: TabularDataFile, issues: list[ValidationIssue]
    ) -> list[ValidationResultElement]:
        if not issues:
            return []
        return [
            ValidationResultElement(
                file_name=chunk.source_file_name,
                file_type=chunk.dwc_file_type,
                row_type=chunk.row_type,
                issues=tuple(issues),
            )
        ]


@dataclass(frozen=True)
class EvaluatorRegistry:
    """Evaluators run by the pipeline, in reporting order."""

    resource_evaluators: tuple[ResourceEvaluator, ...] = field(default_factory=tuple)
    chunk_evaluators: tuple[ChunkEvaluator, ...] = field(default_factory=tuple)
