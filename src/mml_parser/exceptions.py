"""
Exception hierarchy for the MML printout parser.
"""


class MMLParserError(Exception):
    """Base class for all parser errors."""
    pass


class MalformedBannerError(MMLParserError):
    """Command banner has no parsable ``LST <NAME>:`` entity type."""
    pass


class MalformedHeaderError(MMLParserError):
    """Header line yields no column names."""
    pass


class ColumnSliceError(MMLParserError):
    """Data line is too short for the column offsets of its entity type."""
    pass


class UnwritableOutputError(MMLParserError):
    """Output directory or stream cannot be created or written."""
    pass


class UnreadableInputError(MMLParserError):
    """Source file cannot be opened or decoded."""
    pass


class FileProcessingError(MMLParserError):
    """Exception raised when a file fails to process in fail-fast mode."""
    pass
