class TermDictionaryError(Exception):
    """Raised when row type definitions cannot be loaded."""
