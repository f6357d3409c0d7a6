from datetime import date
from pathlib import Path

from datavalidator.evaluation.interpretation import (
    INTERPRETATION_REMARK_MAPPING,
    BaseRecordInterpreter,
    InterpretationRemark,
    InterpretationRemarkEvaluator,
    OccurrenceInterpreter,
    RemarkOnTerm,
)
from datavalidator.evaluation.models import EvaluationType
from datavalidator.evaluation.records import RecordStructureEvaluator
from datavalidator.source.models import DwcFileType, RowTypeKey, TabularDataFile, TermIndex
from datavalidator.source.reader import Record
from datavalidator.terms import vocabulary

LAT = vocabulary.DWC_NS + "decimalLatitude"
LNG = vocabulary.DWC_NS + "decimalLongitude"
BASIS = vocabulary.DWC_NS + "basisOfRecord"
EVENT_DATE = vocabulary.DWC_NS + "eventDate"
COUNT = vocabulary.DWC_NS + "individualCount"


def _write_chunk(
    tmp_path: Path,
    header: list[str],
    rows: list[str],
    row_type: str = vocabulary.OCCURRENCE,
    line_offset: int = 1,
    data_lines: int | None = None,
) -> TabularDataFile:
    path = tmp_path / "occurrence.txt"
    path.write_text("\n".join(["\t".join(header), *rows]) + "\n", encoding="utf-8")
    count = len(rows) if data_lines is None else data_lines
    return TabularDataFile(
        file_path=path,
        source_file_name=path.name,
        row_type_key=RowTypeKey(row_type, DwcFileType.CORE),
        columns=tuple(header),
        total_lines=line_offset + count,
        data_line_count=count,
        line_offset=line_offset,
        delimiter="\t",
        record_identifier=TermIndex(0, vocabulary.OCCURRENCE_ID),
    )


def _record(**values: str) -> Record:
    columns = tuple(values)
    return Record(2, tuple(values.values()), columns)


class TestRecordStructureEvaluator:
    def test_well_formed(self, tmp_path: Path) -> None:
        chunk = _write_chunk(tmp_path, [vocabulary.OCCURRENCE_ID, BASIS], ["o1\tx", "o2\ty"])

        assert RecordStructureEvaluator().evaluate(chunk) == []

    def test_column_mismatch_with_line_number(self, tmp_path: Path) -> None:
        chunk = _write_chunk(
            tmp_path, [vocabulary.OCCURRENCE_ID, BASIS], ["o1\tx", "o2", "o3\ty\tz"]
        )

        (result,) = RecordStructureEvaluator().evaluate(chunk)

        assert [(i.evaluation_type, i.line_number) for i in result.issues] == [
            (EvaluationType.COLUMN_MISMATCH, 3),
            (EvaluationType.COLUMN_MISMATCH, 4),
        ]

    def test_empty_identifier(self, tmp_path: Path) -> None:
        chunk = _write_chunk(tmp_path, [vocabulary.OCCURRENCE_ID, BASIS], ["o1\tx", "\ty"])

        (result,) = RecordStructureEvaluator().evaluate(chunk)

        (issue,) = result.issues
        assert issue.evaluation_type is EvaluationType.RECORD_IDENTIFIER_NOT_FOUND
        assert issue.line_number == 3

    def test_reads_only_its_chunk(self, tmp_path: Path) -> None:
        rows = ["o1\tx", "o2", "o3\tx", "o4"]
        # second half of the file: data lines 3-4, source lines 4-5
        chunk = _write_chunk(
            tmp_path, [vocabulary.OCCURRENCE_ID, BASIS], rows, line_offset=3, data_lines=2
        )

        (result,) = RecordStructureEvaluator().evaluate(chunk)

        assert [i.line_number for i in result.issues] == [5]


class TestOccurrenceInterpreter:
    def test_clean_record(self) -> None:
        interpreter = OccurrenceInterpreter(today=date(2024, 1, 1))
        record = _record(**{BASIS: "PreservedSpecimen", LAT: "55.6", LNG: "12.5", EVENT_DATE: "2020-05-01"})

        assert interpreter.interpret(record) == []

    def test_basis_of_record(self) -> None:
        remarks = OccurrenceInterpreter().interpret(_record(**{BASIS: "photo"}))
        assert remarks == [RemarkOnTerm(InterpretationRemark.BASIS_OF_RECORD_INVALID, BASIS)]

    def test_basis_of_record_is_lenient_on_format(self) -> None:
        assert OccurrenceInterpreter().interpret(_record(**{BASIS: "human observation"})) == []

    def test_coordinate_not_numeric(self) -> None:
        remarks = OccurrenceInterpreter().interpret(_record(**{LAT: "north", LNG: "12"}))
        assert [r.remark for r in remarks] == [InterpretationRemark.COORDINATE_INVALID]

    def test_coordinate_out_of_range(self) -> None:
        remarks = OccurrenceInterpreter().interpret(_record(**{LAT: "95", LNG: "12"}))
        assert [r.remark for r in remarks] == [InterpretationRemark.COORDINATE_OUT_OF_RANGE]

    def test_zero_coordinate(self) -> None:
        remarks = OccurrenceInterpreter().interpret(_record(**{LAT: "0", LNG: "0.0"}))
        assert [r.remark for r in remarks] == [InterpretationRemark.ZERO_COORDINATE]

    def test_invalid_date(self) -> None:
        remarks = OccurrenceInterpreter().interpret(_record(**{EVENT_DATE: "2020-13-45"}))
        assert [r.remark for r in remarks] == [InterpretationRemark.RECORDED_DATE_INVALID]

    def test_future_date_unlikely(self) -> None:
        interpreter = OccurrenceInterpreter(today=date(2024, 1, 1))
        remarks = interpreter.interpret(_record(**{EVENT_DATE: "2030-01-01"}))
        assert [r.remark for r in remarks] == [InterpretationRemark.RECORDED_DATE_UNLIKELY]

    def test_date_interval_uses_start(self) -> None:
        interpreter = OccurrenceInterpreter(today=date(2024, 1, 1))
        assert interpreter.interpret(_record(**{EVENT_DATE: "2019-05/2019-06"})) == []

    def test_individual_count(self) -> None:
        remarks = OccurrenceInterpreter().interpret(_record(**{COUNT: "a few"}))
        assert [r.remark for r in remarks] == [InterpretationRemark.INDIVIDUAL_COUNT_INVALID]


class TestInterpretationRemarkEvaluator:
    def test_mapping_covers_every_remark(self) -> None:
        assert INTERPRETATION_REMARK_MAPPING
        assert set(INTERPRETATION_REMARK_MAPPING) == set(InterpretationRemark)

    def test_reports_remarks_with_line_numbers(self, tmp_path: Path) -> None:
        chunk = _write_chunk(
            tmp_path,
            [vocabulary.OCCURRENCE_ID, BASIS],
            ["o1\tPreservedSpecimen", "o2\tphoto"],
        )

        (result,) = InterpretationRemarkEvaluator([OccurrenceInterpreter()]).evaluate(chunk)

        (issue,) = result.issues
        assert issue.evaluation_type is EvaluationType.BASIS_OF_RECORD_INVALID
        assert issue.line_number == 3
        assert issue.related_data is not None
        assert issue.related_data.term == BASIS

    def test_unsupported_row_type_skipped(self, tmp_path: Path) -> None:
        chunk = _write_chunk(
            tmp_path, [vocabulary.TAXON_ID, BASIS], ["t1\tphoto"], row_type=vocabulary.TAXON
        )

        assert InterpretationRemarkEvaluator([OccurrenceInterpreter()]).evaluate(chunk) == []

    def test_uses_first_supporting_interpreter(self, tmp_path: Path) -> None:
        class TaxonInterpreter(BaseRecordInterpreter):
            row_types = frozenset({vocabulary.TAXON})

            def interpret(self, record: Record) -> list[RemarkOnTerm]:
                return [RemarkOnTerm(InterpretationRemark.ZERO_COORDINATE, LAT)]

        chunk = _write_chunk(tmp_path, [vocabulary.TAXON_ID], ["t1", "t2"], row_type=vocabulary.TAXON)

        (result,) = InterpretationRemarkEvaluator(
            [OccurrenceInterpreter(), TaxonInterpreter()]
        ).evaluate(chunk)

        assert [i.line_number for i in result.issues] == [2, 3]
