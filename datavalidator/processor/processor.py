import threading
from collections.abc import Sequence
from pathlib import Path

from datavalidator.config.settings import Settings
from datavalidator.evaluation.factory import EvaluatorFactory
from datavalidator.evaluation.merger import ResultMerger
from datavalidator.evaluation.models import ValidationReport
from datavalidator.logging.logger import Log
from datavalidator.normalization.factory import NormalizerFactory
from datavalidator.processor.pipeline import PipelineContext, PipelineStep
from datavalidator.processor.steps import (
    EvaluateChunksStep,
    EvaluateResourceStep,
    MergeResultsStep,
    NormalizeStep,
    SplitStep,
)
from datavalidator.schema.base import BaseSchemaValidator
from datavalidator.schema.factory import SchemaValidatorFactory
from datavalidator.source.models import DataFile
from datavalidator.terms.loader import load_term_dictionary
from datavalidator.terms.models import TermDictionary


class Processor:
    """Runs the validation pipeline for one resource.

    Pipeline: normalize -> split -> evaluate resource -> evaluate chunks -> merge.
    Cancellation is checked before every step.
    """

    def __init__(self, steps: Sequence[PipelineStep]) -> None:
        self._steps = list(steps)

    def process(
        self,
        job_id: str,
        data_file: DataFile,
        work_dir: Path,
        cancel_event: threading.Event | None = None,
    ) -> ValidationReport:
        """Validate ``data_file`` using ``work_dir`` as scratch space.

        Raises:
            JobCancelledError: if ``cancel_event`` is set before the report is built.
            UnsupportedDataFileError, NotFoundError, OSError: from normalization.
        """
        Log.info(f"Processing {data_file.source_file_name}", job_id=job_id)
        context = PipelineContext(job_id=job_id, data_file=data_file, work_dir=work_dir)
        if cancel_event is not None:
            context.cancel_event = cancel_event

        for step in self._steps:
            context.raise_if_cancelled()
            context = step.run(context)
        context.raise_if_cancelled()

        if context.report is None:
            raise RuntimeError(f"Pipeline for job {job_id} finished without a report")
        return context.report


def build_processor(
    settings: Settings,
    term_dictionary: TermDictionary | None = None,
    schema_validator: BaseSchemaValidator | None = None,
) -> Processor:
    """Build a Processor with all required adapters."""
    if term_dictionary is None:
        definitions_dir = (
            Path(settings.term_definitions_dir) if settings.term_definitions_dir else None
        )
        term_dictionary = load_term_dictionary(definitions_dir)
    if schema_validator is None:
        schema_validator = SchemaValidatorFactory.create(settings)

    normalizer = NormalizerFactory.create(settings, term_dictionary)
    evaluators = EvaluatorFactory.create(settings, term_dictionary, schema_validator)
    return Processor(
        steps=[
            NormalizeStep(normalizer),
            SplitStep(settings.file_split_size),
            EvaluateResourceStep(evaluators.resource_evaluators),
            EvaluateChunksStep(evaluators.chunk_evaluators, settings.max_parallel_chunks),
            MergeResultsStep(ResultMerger()),
        ]
    )
