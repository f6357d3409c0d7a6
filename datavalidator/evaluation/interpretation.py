"""Per-record interpretation remarks and their evaluation types."""

import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import ClassVar

from datavalidator.evaluation.base import ChunkEvaluator
from datavalidator.evaluation.models import (
    EvaluationType,
    TermWithinRowType,
    ValidationIssue,
    ValidationResultElement,
)
from datavalidator.source.models import TabularDataFile
from datavalidator.source.reader import Record, read_records
from datavalidator.terms import vocabulary


class InterpretationRemark(str, Enum):
    """Remarks an interpreter can raise on a single record."""

    BASIS_OF_RECORD_INVALID = "BASIS_OF_RECORD_INVALID"
    COORDINATE_INVALID = "COORDINATE_INVALID"
    COORDINATE_OUT_OF_RANGE = "COORDINATE_OUT_OF_RANGE"
    ZERO_COORDINATE = "ZERO_COORDINATE"
    RECORDED_DATE_INVALID = "RECORDED_DATE_INVALID"
    RECORDED_DATE_UNLIKELY = "RECORDED_DATE_UNLIKELY"
    INDIVIDUAL_COUNT_INVALID = "INDIVIDUAL_COUNT_INVALID"


INTERPRETATION_REMARK_MAPPING: dict[InterpretationRemark, EvaluationType] = {
    InterpretationRemark.BASIS_OF_RECORD_INVALID: EvaluationType.BASIS_OF_RECORD_INVALID,
    InterpretationRemark.COORDINATE_INVALID: EvaluationType.COORDINATE_INVALID,
    InterpretationRemark.COORDINATE_OUT_OF_RANGE: EvaluationType.COORDINATE_OUT_OF_RANGE,
    InterpretationRemark.ZERO_COORDINATE: EvaluationType.ZERO_COORDINATE,
    InterpretationRemark.RECORDED_DATE_INVALID: EvaluationType.RECORDED_DATE_INVALID,
    InterpretationRemark.RECORDED_DATE_UNLIKELY: EvaluationType.RECORDED_DATE_UNLIKELY,
    InterpretationRemark.INDIVIDUAL_COUNT_INVALID: EvaluationType.INDIVIDUAL_COUNT_INVALID,
}


@dataclass(frozen=True)
class RemarkOnTerm:
    remark: InterpretationRemark
    term: str


class BaseRecordInterpreter(ABC):
    """Contract for record interpretation adapters."""

    row_types: ClassVar[frozenset[str]] = frozenset()

    def supports(self, row_type: str) -> bool:
        return row_type in self.row_types

    @abstractmethod
    def interpret(self, record: Record) -> list[RemarkOnTerm]:
        """Return the remarks raised by one record. Never raises on bad data."""


_BASIS_OF_RECORD = frozenset(
    {
        "preservedspecimen",
        "fossilspecimen",
        "livingspecimen",
        "humanobservation",
        "machineobservation",
        "materialsample",
        "materialcitation",
        "materialentity",
        "observation",
        "occurrence",
        "literature",
        "unknown",
    }
)
_ISO_DATE = re.compile(r"^(\d{4})(?:-(\d{1,2})(?:-(\d{1,2}))?)?(?:[T ].*)?$")
_EARLIEST_LIKELY_YEAR = 1600

DECIMAL_LATITUDE = vocabulary.DWC_NS + "decimalLatitude"
DECIMAL_LONGITUDE = vocabulary.DWC_NS + "decimalLongitude"
BASIS_OF_RECORD = vocabulary.DWC_NS + "basisOfRecord"
EVENT_DATE = vocabulary.DWC_NS + "eventDate"
INDIVIDUAL_COUNT = vocabulary.DWC_NS + "individualCount"


class OccurrenceInterpreter(BaseRecordInterpreter):
    """Light interpretation of occurrence and event records."""

    row_types: ClassVar[frozenset[str]] = frozenset({vocabulary.OCCURRENCE, vocabulary.EVENT})

    def __init__(self, today: date | None = None) -> None:
        self._today = today

    def interpret(self, record: Record) -> list[RemarkOnTerm]:
        remarks: list[RemarkOnTerm] = []
        remarks.extend(self._basis_of_record(record))
        remarks.extend(self._coordinates(record))
        remarks.extend(self._event_date(record))
        remarks.extend(self._individual_count(record))
        return remarks

    @staticmethod
    def _basis_of_record(record: Record) -> list[RemarkOnTerm]:
        value = record.get(BASIS_OF_RECORD)
        if not value:
            return []
        normalized = re.sub(r"[^a-z]", "", value.lower())
        if normalized in _BASIS_OF_RECORD:
            return []
        return [RemarkOnTerm(InterpretationRemark.BASIS_OF_RECORD_INVALID, BASIS_OF_RECORD)]

    @staticmethod
    def _coordinates(record: Record) -> list[RemarkOnTerm]:
        raw_lat = (record.get(DECIMAL_LATITUDE) or "").strip()
        raw_lng = (record.get(DECIMAL_LONGITUDE) or "").strip()
        if not raw_lat and not raw_lng:
            return []
        try:
            lat, lng = float(raw_lat), float(raw_lng)
        except ValueError:
            return [RemarkOnTerm(InterpretationRemark.COORDINATE_INVALID, DECIMAL_LATITUDE)]
        if not (-90 <= lat <= 90 and -180 <= lng <= 180):
            return [RemarkOnTerm(InterpretationRemark.COORDINATE_OUT_OF_RANGE, DECIMAL_LATITUDE)]
        if lat == 0 and lng == 0:
            return [RemarkOnTerm(InterpretationRemark.ZERO_COORDINATE, DECIMAL_LATITUDE)]
        return []

    def _event_date(self, record: Record) -> list[RemarkOnTerm]:
        value = (record.get(EVENT_DATE) or "").strip()
        if not value:
            return []
        # Intervals are judged on their start
        match = _ISO_DATE.match(value.split("/", 1)[0])
        if match is None:
            return [RemarkOnTerm(InterpretationRemark.RECORDED_DATE_INVALID, EVENT_DATE)]
        year, month, day = (int(g) if g else 1 for g in match.groups())
        try:
            parsed = date(year, month, day)
        except ValueError:
            return [RemarkOnTerm(InterpretationRemark.RECORDED_DATE_INVALID, EVENT_DATE)]
        today = self._today or date.today()
        if parsed.year < _EARLIEST_LIKELY_YEAR or parsed > today:
            return [RemarkOnTerm(InterpretationRemark.RECORDED_DATE_UNLIKELY, EVENT_DATE)]
        return []

    @staticmethod
    def _individual_count(record: Record) -> list[RemarkOnTerm]:
        value = (record.get(INDIVIDUAL_COUNT) or "").strip()
        if not value:
            return []
        if value.isdigit():
            return []
        return [RemarkOnTerm(InterpretationRemark.INDIVIDUAL_COUNT_INVALID, INDIVIDUAL_COUNT)]


class InterpretationRemarkEvaluator(ChunkEvaluator):
    """Runs the first interpreter supporting a chunk's row type over every record."""

    def __init__(self, interpreters: list[BaseRecordInterpreter]) -> None:
        self._interpreters = list(interpreters)

    def evaluate(self, chunk: TabularDataFile) -> list[ValidationResultElement]:
        interpreter = next(
            (i for i in self._interpreters if i.supports(chunk.row_type)), None
        )
        if interpreter is None:
            return []

        issues: list[ValidationIssue] = []
        for record in read_records(chunk):
            for remark in interpreter.interpret(record):
                issues.append(
                    ValidationIssue(
                        INTERPRETATION_REMARK_MAPPING[remark.remark],
                        related_data=TermWithinRowType(chunk.row_type, remark.term),
                        line_number=record.line_number,
                    )
                )
        return self.result_for(chunk, issues)
