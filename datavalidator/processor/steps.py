from collections.abc import Sequence
from concurrent.futures import Future, ThreadPoolExecutor, as_completed

from datavalidator.evaluation.base import ChunkEvaluator, ResourceEvaluator
from datavalidator.evaluation.merger import ResultMerger
from datavalidator.evaluation.models import (
    EvaluationType,
    ValidationIssue,
    ValidationResultElement,
)
from datavalidator.logging.logger import Log
from datavalidator.normalization.base import BaseNormalizer
from datavalidator.processor.pipeline import PipelineContext, PipelineStep
from datavalidator.schema.exceptions import SchemaLoadError, UnknownSchemaError
from datavalidator.source.models import DwcDataFile, TabularDataFile
from datavalidator.source.splitter import split

# Faults that abort the job instead of being reported as UNHANDLED_ERROR
INFRASTRUCTURE_ERRORS: tuple[type[Exception], ...] = (
    OSError,
    SchemaLoadError,
    UnknownSchemaError,
)


class NormalizeStep(PipelineStep):
    def __init__(self, normalizer: BaseNormalizer) -> None:
        self._normalizer = normalizer

    def run(self, context: PipelineContext) -> PipelineContext:
        context.work_dir.mkdir(parents=True, exist_ok=True)
        dwc_data_file = self._normalizer.normalize(context.data_file, context.work_dir)
        context.dwc_data_file = dwc_data_file
        Log.info(
            f"Normalized {context.data_file.source_file_name}: "
            f"{len(dwc_data_file.extensions)} extension(s)",
            job_id=context.job_id,
        )
        return context


class SplitStep(PipelineStep):
    def __init__(self, max_lines_per_chunk: int) -> None:
        self._max_lines_per_chunk = max_lines_per_chunk

    def run(self, context: PipelineContext) -> PipelineContext:
        dwc_data_file = _require_dwc_data_file(context, "splitting")
        context.chunks = [
            split(part, self._max_lines_per_chunk)
            for part in dwc_data_file.tabular_data_files
        ]
        Log.info(
            f"Split {len(context.chunks)} part(s) into "
            f"{sum(len(c) for c in context.chunks)} chunk(s)",
            job_id=context.job_id,
        )
        return context


class EvaluateResourceStep(PipelineStep):
    """Runs whole-resource evaluators once, in registry order."""

    def __init__(self, evaluators: Sequence[ResourceEvaluator]) -> None:
        self._evaluators = list(evaluators)

    def run(self, context: PipelineContext) -> PipelineContext:
        dwc_data_file = _require_dwc_data_file(context, "resource evaluation")
        results: list[ValidationResultElement] = []
        for evaluator in self._evaluators:
            context.raise_if_cancelled()
            results.extend(self._evaluate(evaluator, dwc_data_file))
        context.structural_results = results
        Log.info(
            f"Resource evaluation produced {sum(len(r.issues) for r in results)} issue(s)",
            job_id=context.job_id,
        )
        return context

    @staticmethod
    def _evaluate(
        evaluator: ResourceEvaluator, dwc_data_file: DwcDataFile
    ) -> list[ValidationResultElement]:
        try:
            return evaluator.evaluate(dwc_data_file)
        except INFRASTRUCTURE_ERRORS:
            raise
        except Exception as exc:
            Log.exception(f"{type(evaluator).__name__} failed on {dwc_data_file.core.source_file_name}")
            return [_unhandled_error(dwc_data_file.core, evaluator, exc)]


class EvaluateChunksStep(PipelineStep):
    """Runs chunk evaluators over every chunk, ``max_workers`` chunks at a time.

    Results are stored by part and chunk index, so the order in which
    chunks complete does not affect the report.
    """

    def __init__(self, evaluators: Sequence[ChunkEvaluator], max_workers: int) -> None:
        self._evaluators = list(evaluators)
        self._max_workers = max(1, max_workers)

    def run(self, context: PipelineContext) -> PipelineContext:
        _require_dwc_data_file(context, "chunk evaluation")
        results: list[list[list[ValidationResultElement]]] = [
            [[] for _ in part_chunks] for part_chunks in context.chunks
        ]

        with ThreadPoolExecutor(
            max_workers=self._max_workers, thread_name_prefix=f"job-{context.job_id}"
        ) as executor:
            futures: dict[Future[list[ValidationResultElement]], tuple[int, int]] = {
                executor.submit(self._evaluate_chunk, chunk): (part_index, chunk_index)
                for part_index, part_chunks in enumerate(context.chunks)
                for chunk_index, chunk in enumerate(part_chunks)
            }
            try:
                for future in as_completed(futures):
                    part_index, chunk_index = futures[future]
                    results[part_index][chunk_index] = future.result()
                    Log.debug(
                        f"Evaluated chunk {chunk_index} of part {part_index}",
                        job_id=context.job_id,
                    )
                    context.raise_if_cancelled()
            except BaseException:
                for pending in futures:
                    pending.cancel()
                raise

        context.part_results = [
            [element for chunk_result in part for element in chunk_result] for part in results
        ]
        Log.info(
            f"Evaluated {len(futures)} chunk(s) with {len(self._evaluators)} evaluator(s)",
            job_id=context.job_id,
        )
        return context

    def _evaluate_chunk(self, chunk: TabularDataFile) -> list[ValidationResultElement]:
        results: list[ValidationResultElement] = []
        for evaluator in self._evaluators:
            try:
                results.extend(evaluator.evaluate(chunk))
            except INFRASTRUCTURE_ERRORS:
                raise
            except Exception as exc:
                Log.exception(
                    f"{type(evaluator).__name__} failed on {chunk.source_file_name} "
                    f"from line {chunk.first_data_line}"
                )
                results.append(_unhandled_error(chunk, evaluator, exc))
        return results


class MergeResultsStep(PipelineStep):
    def __init__(self, merger: ResultMerger) -> None:
        self._merger = merger

    def run(self, context: PipelineContext) -> PipelineContext:
        dwc_data_file = _require_dwc_data_file(context, "merging")
        context.report = self._merger.merge(
            dwc_data_file, context.structural_results, context.part_results
        )
        Log.info(
            f"Merged report with {context.report.issue_count} issue(s)",
            job_id=context.job_id,
        )
        return context


def _require_dwc_data_file(context: PipelineContext, stage: str) -> DwcDataFile:
    if context.dwc_data_file is None:
        raise ValueError(f"PipelineContext.dwc_data_file must be set before {stage}")
    return context.dwc_data_file


def _unhandled_error(
    part: TabularDataFile, evaluator: object, exc: Exception
) -> ValidationResultElement:
    return ValidationResultElement(
        file_name=part.source_file_name,
        file_type=part.dwc_file_type,
        row_type=part.row_type,
        issues=(
            ValidationIssue(
                EvaluationType.UNHANDLED_ERROR,
                message=f"{type(evaluator).__name__}: {exc}",
            ),
        ),
    )
