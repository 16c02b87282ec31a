"""
Line classification for MML printouts.

Each line category has its own predicate so the rules can be tested in
isolation. ``classify_line`` applies them in priority order; the first
match wins.
"""

import re
from typing import Optional

from mml_parser.exceptions import MalformedBannerError
from mml_parser.models import ClassifiedLine, LineCategory, ParserState

COMMAND_BANNER_MARKER = "MML Command"
NE_MARKER = "NE :"
REPORT_MARKER = "Report :"
FOOTER_MARKER = "Number of results"
SUCCESS_RETCODE = "RETCODE = 0  Execution succeeded."

_ENTITY_TYPE_RE = re.compile(r"LST ([^:]+):")
_TIMESTAMP_RE = re.compile(r"\s+(\S+\s\S+)$")
_DELIMITER_RE = re.compile(r"^-{5,}\s*$")


def is_blank(line: str) -> bool:
    return line == ""


def is_footer(line: str) -> bool:
    """Footer lines look like ``(Number of results = 12)``."""
    text = line[1:] if line.startswith("(") else line
    return text.startswith(FOOTER_MARKER)


def is_command_banner(line: str) -> bool:
    return line.startswith(COMMAND_BANNER_MARKER)


def is_ne_identity(line: str) -> bool:
    return line.startswith(NE_MARKER)


def is_report_timestamp(line: str) -> bool:
    return line.startswith(REPORT_MARKER)


def is_success_return_code(line: str) -> bool:
    return line.startswith(SUCCESS_RETCODE)


def is_section_delimiter(line: str, return_code: Optional[int]) -> bool:
    """A line of nothing but dashes opens a section after a successful command."""
    return return_code == 0 and _DELIMITER_RE.match(line) is not None


def is_header_line(state: ParserState) -> bool:
    return state == ParserState.HEADER_PENDING


def is_data_line(state: ParserState) -> bool:
    return state == ParserState.IN_DATA


def extract_entity_type(line: str) -> str:
    """Extract ``<NAME>`` from ``LST <NAME>:``.

    Raises:
        MalformedBannerError: If the banner carries no LST command name
    """
    match = _ENTITY_TYPE_RE.search(line)
    if match is None:
        raise MalformedBannerError(f"No 'LST <NAME>:' command in banner: {line.strip()!r}")
    return match.group(1)


def extract_ne(line: str) -> str:
    """Everything after the first colon, trimmed."""
    return line.split(":", 1)[1].strip()


def extract_timestamp(line: str) -> Optional[str]:
    """Trailing ``<date> <time>`` pair of a report line, or None."""
    match = _TIMESTAMP_RE.search(line.rstrip())
    return match.group(1) if match else None


def classify_line(line: str, state: ParserState, return_code: Optional[int]) -> ClassifiedLine:
    """Classify a raw line (trailing newline already removed).

    Args:
        line: Raw line text
        state: Current parser state
        return_code: Last return code seen, None if unset

    Returns:
        ClassifiedLine with the category and any captured value

    Raises:
        MalformedBannerError: For a command banner without an entity type
    """
    if is_blank(line):
        return ClassifiedLine(LineCategory.BLANK, line)
    if is_footer(line):
        return ClassifiedLine(LineCategory.FOOTER, line)
    if is_command_banner(line):
        return ClassifiedLine(LineCategory.COMMAND_BANNER, line, extract_entity_type(line))
    if is_ne_identity(line):
        return ClassifiedLine(LineCategory.NE_IDENTITY, line, extract_ne(line))
    if is_report_timestamp(line):
        return ClassifiedLine(LineCategory.REPORT_TIMESTAMP, line, extract_timestamp(line))
    if is_success_return_code(line):
        return ClassifiedLine(LineCategory.RETURN_CODE, line, 0)
    if is_section_delimiter(line, return_code):
        return ClassifiedLine(LineCategory.SECTION_DELIMITER, line)
    if is_header_line(state):
        return ClassifiedLine(LineCategory.HEADER_LINE, line)
    if is_data_line(state):
        return ClassifiedLine(LineCategory.DATA_LINE, line)
    return ClassifiedLine(LineCategory.UNRECOGNIZED, line)
