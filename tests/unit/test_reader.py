from pathlib import Path

from datavalidator.source.models import DwcFileType, RowTypeKey, TabularDataFile
from datavalidator.source.reader import Record, read_records
from datavalidator.terms import vocabulary


def _make_part(path: Path, line_offset: int, data_lines: int, **kwargs: object) -> TabularDataFile:
    return TabularDataFile(
        file_path=path,
        source_file_name=path.name,
        row_type_key=RowTypeKey(vocabulary.OCCURRENCE, DwcFileType.CORE),
        columns=("id", "name", "country"),
        total_lines=line_offset + data_lines,
        data_line_count=data_lines,
        line_offset=line_offset,
        **kwargs,  # type: ignore[arg-type]
    )


class TestReadRecords:
    def test_uses_source_line_numbers(self, tmp_path: Path) -> None:
        path = tmp_path / "data.csv"
        path.write_text("id,name,country\n1,a,DK\n2,b,SE\n3,c,NO\n", encoding="utf-8")

        records = list(read_records(_make_part(path, 2, 2)))

        assert [r.line_number for r in records] == [3, 4]
        assert records[0].values == ("2", "b", "SE")

    def test_quoted_values(self, tmp_path: Path) -> None:
        path = tmp_path / "data.csv"
        path.write_text('id,name,country\n1,"Puma, concolor",DK\n', encoding="utf-8")

        (record,) = read_records(_make_part(path, 1, 1, quote_char='"'))

        assert record.values == ("1", "Puma, concolor", "DK")

    def test_quotes_kept_without_quote_char(self, tmp_path: Path) -> None:
        path = tmp_path / "data.txt"
        path.write_text('id\tname\tcountry\n1\t"x"\tDK\n', encoding="utf-8")

        (record,) = read_records(_make_part(path, 1, 1, delimiter="\t"))

        assert record.values == ("1", '"x"', "DK")

    def test_empty_line_has_no_values(self, tmp_path: Path) -> None:
        path = tmp_path / "data.csv"
        path.write_text("id,name,country\n\n", encoding="utf-8")

        (record,) = read_records(_make_part(path, 1, 1))

        assert record.values == ()


class TestRecordGet:
    def test_value(self) -> None:
        record = Record(1, ("1", "a"), ("id", "name"))
        assert record.get("name") == "a"

    def test_default_for_empty_cell(self) -> None:
        record = Record(1, ("1", ""), ("id", "country"), {"country": "DK"})
        assert record.get("country") == "DK"

    def test_default_for_absent_column(self) -> None:
        record = Record(1, ("1",), ("id",), {"country": "DK"})
        assert record.get("country") == "DK"

    def test_missing_without_default(self) -> None:
        record = Record(1, ("1",), ("id", "name"))
        assert record.get("name") is None
