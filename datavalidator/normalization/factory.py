from datavalidator.config.settings import Settings
from datavalidator.normalization.base import BaseNormalizer
from datavalidator.normalization.normalizer import DwcNormalizer
from datavalidator.normalization.pandas_spreadsheet_adapter import PandasSpreadsheetConverter
from datavalidator.terms.models import TermDictionary


class NormalizerFactory:
    """Creates the configured normalizer."""

    @classmethod
    def create(cls, settings: Settings, term_dictionary: TermDictionary) -> BaseNormalizer:
        return DwcNormalizer(
            term_dictionary=term_dictionary,
            spreadsheet_converter=PandasSpreadsheetConverter(),
            default_charset=settings.default_charset,
        )
