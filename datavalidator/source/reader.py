import csv
from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from itertools import islice

from datavalidator.source.models import TabularDataFile


@dataclass(frozen=True)
class Record:
    """One data line of a tabular part, as parsed."""

    line_number: int
    values: tuple[str, ...]
    columns: tuple[str, ...]
    defaults: Mapping[str, str] = field(default_factory=dict)

    def get(self, term: str) -> str | None:
        """Value of ``term``; the declared default when the cell is absent or empty."""
        value = None
        if term in self.columns:
            index = self.columns.index(term)
            if index < len(self.values):
                value = self.values[index]
        if not value:
            return self.defaults.get(term, value)
        return value


def read_records(tabular_data_file: TabularDataFile) -> Iterator[Record]:
    """Yield the data lines covered by ``tabular_data_file`` with source line numbers.

    Records are parsed one physical line at a time, so quoted values
    cannot span lines.
    """
    defaults = dict(tabular_data_file.default_values or {})
    dialect = _dialect(tabular_data_file)
    start = tabular_data_file.line_offset
    stop = start + tabular_data_file.data_line_count
    with tabular_data_file.file_path.open(
        "r", encoding=tabular_data_file.character_encoding, newline=""
    ) as reader:
        for line_number, line in enumerate(islice(reader, start, stop), start=start + 1):
            yield Record(
                line_number=line_number,
                values=_parse_line(line.rstrip("\r\n"), dialect),
                columns=tabular_data_file.columns,
                defaults=defaults,
            )


def _dialect(tabular_data_file: TabularDataFile) -> dict[str, object]:
    if tabular_data_file.quote_char:
        return {"delimiter": tabular_data_file.delimiter, "quotechar": tabular_data_file.quote_char}
    return {"delimiter": tabular_data_file.delimiter, "quoting": csv.QUOTE_NONE}


def _parse_line(line: str, dialect: dict[str, object]) -> tuple[str, ...]:
    if not line:
        return ()
    return tuple(next(csv.reader([line], **dialect)))
