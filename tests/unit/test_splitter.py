from pathlib import Path

import pytest

from datavalidator.source.models import DwcFileType, RowTypeKey, TabularDataFile
from datavalidator.source.splitter import split
from datavalidator.terms import vocabulary


def _make_part(data_lines: int, line_offset: int = 1) -> TabularDataFile:
    return TabularDataFile(
        file_path=Path("/tmp/occurrence.txt"),
        source_file_name="occurrence.txt",
        row_type_key=RowTypeKey(vocabulary.OCCURRENCE, DwcFileType.CORE),
        columns=("a", "b"),
        total_lines=data_lines + line_offset,
        data_line_count=data_lines,
        line_offset=line_offset,
        delimiter="\t",
        default_values={"c": "x"},
    )


class TestSplit:
    def test_small_part_is_returned_unchanged(self) -> None:
        part = _make_part(10)

        assert split(part, 10) == [part]

    def test_two_chunks(self) -> None:
        chunks = split(_make_part(10_050), 10_000)

        assert [c.data_line_count for c in chunks] == [10_000, 50]
        assert [c.first_data_line for c in chunks] == [2, 10_002]

    @pytest.mark.parametrize(
        ("data_lines", "size", "offset"),
        [(7, 3, 0), (100, 10, 1), (101, 10, 3), (1, 1, 2)],
    )
    def test_chunk_accounting(self, data_lines: int, size: int, offset: int) -> None:
        part = _make_part(data_lines, offset)

        chunks = split(part, size)

        assert sum(c.data_line_count for c in chunks) == part.data_line_count
        for k, chunk in enumerate(chunks):
            assert chunk.first_data_line == part.line_offset + k * size + 1
            assert chunk.data_line_count == chunk.total_lines - chunk.line_offset

    def test_chunks_keep_part_attributes(self) -> None:
        part = _make_part(25)

        for chunk in split(part, 10):
            assert chunk.file_path == part.file_path
            assert chunk.row_type_key == part.row_type_key
            assert chunk.columns == part.columns
            assert chunk.delimiter == part.delimiter
            assert chunk.default_values == part.default_values

    def test_parent_not_mutated(self) -> None:
        part = _make_part(25)

        split(part, 10)

        assert (part.line_offset, part.data_line_count) == (1, 25)

    def test_empty_part(self) -> None:
        part = _make_part(0)
        assert split(part, 10) == [part]

    def test_invalid_size(self) -> None:
        with pytest.raises(ValueError):
            split(_make_part(5), 0)
