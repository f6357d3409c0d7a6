from pathlib import Path
from typing import ClassVar

import pandas as pd

from datavalidator.normalization.spreadsheet import (
    BaseSpreadsheetConverter,
    SpreadsheetConversionResult,
)
from datavalidator.source.exceptions import UnsupportedDataFileError
from datavalidator.source.file_format import (
    APPLICATION_EXCEL,
    APPLICATION_OFFICE_SPREADSHEET,
    APPLICATION_OPEN_DOC_SPREADSHEET,
)


class PandasSpreadsheetConverter(BaseSpreadsheetConverter):
    """Converts xlsx, xls and ods spreadsheets to CSV using pandas."""

    ENGINES: ClassVar[dict[str, str]] = {
        APPLICATION_OFFICE_SPREADSHEET: "openpyxl",
        APPLICATION_EXCEL: "xlrd",
        APPLICATION_OPEN_DOC_SPREADSHEET: "odf",
    }

    def convert(
        self, source: Path, target: Path, media_type: str
    ) -> SpreadsheetConversionResult:
        engine = self.ENGINES.get(media_type.lower())
        if engine is None:
            raise UnsupportedDataFileError(f"{media_type} can not be converted")
        try:
            frame = pd.read_excel(
                source,
                sheet_name=0,
                engine=engine,
                dtype=str,
                keep_default_na=False,
            )
        except Exception as exc:
            raise UnsupportedDataFileError(
                f"{media_type} conversion failed: {exc}"
            ) from exc

        frame.columns = [self._header(column) for column in frame.columns]
        frame = frame[~(frame == "").all(axis=1)]
        if frame.empty:
            return SpreadsheetConversionResult(path=target, num_of_lines=0)

        frame.to_csv(target, index=False, encoding="utf-8", lineterminator="\n")
        return SpreadsheetConversionResult(path=target, num_of_lines=len(frame) + 1)

    @staticmethod
    def _header(column: object) -> str:
        # pandas names blank header cells "Unnamed: <n>"
        name = str(column).strip()
        return "" if name.startswith("Unnamed:") else name
