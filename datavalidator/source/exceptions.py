class DataFileError(Exception):
    """Base exception for problems preparing a submitted data file."""


class UnsupportedDataFileError(DataFileError):
    """Raised when a data file is structurally unusable.

    Covers missing or duplicated core parts, empty column headers,
    undetectable delimiters and spreadsheets that cannot be converted.
    """


class NotFoundError(DataFileError):
    """Raised when a part declared by the resource has no backing file."""
