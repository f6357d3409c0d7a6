import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path

from datavalidator.evaluation.models import ValidationReport, ValidationResultElement
from datavalidator.processor.exceptions import JobCancelledError
from datavalidator.source.models import DataFile, DwcDataFile, TabularDataFile


@dataclass(slots=True)
class PipelineContext:
    job_id: str
    data_file: DataFile
    work_dir: Path
    cancel_event: threading.Event = field(default_factory=threading.Event)
    dwc_data_file: DwcDataFile | None = None
    # chunks[i] holds the chunks of tabular part i, in source order
    chunks: list[list[TabularDataFile]] = field(default_factory=list)
    structural_results: list[ValidationResultElement] = field(default_factory=list)
    part_results: list[list[ValidationResultElement]] = field(default_factory=list)
    report: ValidationReport | None = None

    def raise_if_cancelled(self) -> None:
        if self.cancel_event.is_set():
            raise JobCancelledError(f"Job {self.job_id} was cancelled")


class PipelineStep(ABC):
    @abstractmethod
    def run(self, context: PipelineContext) -> PipelineContext:
        raise NotImplementedError
