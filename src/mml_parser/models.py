"""
Data models and structures for the MML printout parser.
"""

import time
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional


class LineCategory(Enum):
    """Categories a raw printout line can be classified into."""
    BLANK = "blank"
    FOOTER = "footer"
    COMMAND_BANNER = "command_banner"
    NE_IDENTITY = "ne_identity"
    REPORT_TIMESTAMP = "report_timestamp"
    RETURN_CODE = "return_code"
    SECTION_DELIMITER = "section_delimiter"
    HEADER_LINE = "header_line"
    DATA_LINE = "data_line"
    UNRECOGNIZED = "unrecognized"


class ParserState(Enum):
    """States of the per-file parser."""
    AWAITING_BLOCK = "awaiting_block"
    HEADER_PENDING = "header_pending"
    IN_DATA = "in_data"


@dataclass
class ClassifiedLine:
    """Result of classifying one line.

    ``value`` carries the captured substring for banner, NE, timestamp
    and return-code lines (entity type name, NE id, timestamp, code).
    """
    category: LineCategory
    line: str
    value: Optional[object] = None


@dataclass(frozen=True)
class ColumnSpec:
    """One column of a fixed-width block.

    ``width`` is None for the last column, which runs to end of line.
    """
    name: str
    start: int
    width: Optional[int] = None

    @property
    def end(self) -> Optional[int]:
        return None if self.width is None else self.start + self.width


@dataclass
class ColumnModel:
    """Ordered columns derived from the first header seen for an entity type."""
    entity_type: str
    columns: List[ColumnSpec] = field(default_factory=list)

    @property
    def names(self) -> List[str]:
        return [c.name for c in self.columns]

    def __len__(self) -> int:
        return len(self.columns)


@dataclass
class ReportContext:
    """Metadata accumulated while traversing one printout file."""
    entity_type: Optional[str] = None
    ne: Optional[str] = None
    timestamp: Optional[str] = None
    return_code: Optional[int] = None  # None = unset, distinct from 0
    state: ParserState = ParserState.AWAITING_BLOCK
    skip_block: bool = False  # set when the current block's banner was malformed

    @property
    def in_data_section(self) -> bool:
        return self.state in (ParserState.HEADER_PENDING, ParserState.IN_DATA)

    @property
    def header_consumed(self) -> bool:
        return self.state == ParserState.IN_DATA

    def end_block(self) -> None:
        """Reset the per-block fields after a footer."""
        self.return_code = None
        self.state = ParserState.AWAITING_BLOCK
        self.skip_block = False


@dataclass
class Record:
    """One data row, already CSV-encoded, tagged with its entity type."""
    entity_type: str
    values: List[str]

    def to_line(self) -> str:
        return ",".join(self.values)


@dataclass
class ParsingStats:
    """Parsing statistics per entity type."""
    total_rows: int = 0
    success_rows: int = 0
    skipped_rows: int = 0  # Data lines dropped (disabled type, malformed block)
    blocks: int = 0
    file_parse_failures: int = 0
    start_time: float = field(default_factory=time.time)
    end_time: Optional[float] = None

    @property
    def duration(self) -> float:
        """Get parsing duration in seconds."""
        end = self.end_time or time.time()
        return end - self.start_time
