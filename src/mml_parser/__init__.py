"""
MML printout parser package.

Converts Huawei MML "LST" command printouts into one CSV file per
managed object type.
"""

__version__ = "1.0.0"

from mml_parser.classifier import classify_line
from mml_parser.columns import build_column_model, slice_fields
from mml_parser.config_models import ParserConfig, SlicePolicy
from mml_parser.context import RunContext
from mml_parser.csv_encoding import to_csv_value
from mml_parser.csv_writer import OutputRouter
from mml_parser.exceptions import (
    ColumnSliceError,
    FileProcessingError,
    MalformedBannerError,
    MalformedHeaderError,
    MMLParserError,
    UnreadableInputError,
    UnwritableOutputError,
)
from mml_parser.models import ColumnModel, ColumnSpec, LineCategory, ParserState, ParsingStats, Record

__all__ = [
    "ParserConfig",
    "SlicePolicy",
    "RunContext",
    "OutputRouter",
    "ColumnModel",
    "ColumnSpec",
    "LineCategory",
    "ParserState",
    "ParsingStats",
    "Record",
    "classify_line",
    "build_column_model",
    "slice_fields",
    "to_csv_value",
    "MMLParserError",
    "MalformedBannerError",
    "MalformedHeaderError",
    "ColumnSliceError",
    "UnwritableOutputError",
    "UnreadableInputError",
    "FileProcessingError",
]
