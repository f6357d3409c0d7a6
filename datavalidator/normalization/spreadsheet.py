from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class SpreadsheetConversionResult:
    path: Path
    num_of_lines: int


class BaseSpreadsheetConverter(ABC):
    """Contract for spreadsheet to CSV converters."""

    @abstractmethod
    def convert(
        self, source: Path, target: Path, media_type: str
    ) -> SpreadsheetConversionResult:
        """Convert the first sheet of ``source`` into a CSV file at ``target``.

        Args:
            source: Spreadsheet file.
            target: Path of the CSV file to write.
            media_type: Spreadsheet media type, used to pick a reader.

        Returns:
            SpreadsheetConversionResult with the number of lines written,
            header included. Zero when the sheet holds no data.

        Raises:
            UnsupportedDataFileError: if the media type is not handled or the
                spreadsheet cannot be read.
        """
