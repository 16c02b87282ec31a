"""
Base parser class with common functionality.

This module provides the per-file plumbing shared by line-oriented
printout parsers: opening and decoding the source, feeding it line by
line, progress logging and stats bookkeeping.
"""

import logging
import time
from pathlib import Path
from typing import Iterable, Iterator, Optional

from mml_parser.context import RunContext
from mml_parser.exceptions import UnreadableInputError

logger = logging.getLogger(__name__)


class BaseParser:
    """Base class for line-oriented printout parsers.

    Subclasses implement ``process_line``; ``parse`` drives it over every
    line of the file.
    """

    def __init__(self, file_path: Path, ctx: RunContext):
        """Initialize parser for one file.

        Args:
            file_path: Path to input file
            ctx: Run-scoped context shared with the other files of the run
        """
        self.file_path = file_path
        self.ctx = ctx
        self.config = ctx.config
        self.progress_interval = ctx.config.progress_interval
        self.lines_read = 0

    def iter_lines(self) -> Iterator[str]:
        """Yield the file's lines without their line terminators.

        Raises:
            UnreadableInputError: If the file cannot be opened or decoded
        """
        try:
            with open(self.file_path, "r", encoding=self.config.input_encoding,
                      errors=self.config.encoding_errors.value) as f:
                for line in f:
                    yield line.rstrip("\r\n")
        except UnicodeDecodeError as e:
            raise UnreadableInputError(f"Cannot decode {self.file_path} as {self.config.input_encoding}: {e}") from e
        except OSError as e:
            raise UnreadableInputError(f"Cannot read {self.file_path}: {e}") from e

    def parse(self, lines: Optional[Iterable[str]] = None) -> int:
        """Process every line of the file (or the given lines) in order.

        Returns:
            Number of lines processed
        """
        for line in (self.iter_lines() if lines is None else lines):
            self.lines_read += 1
            self.log_progress()
            self.process_line(line)
        self.finalize_stats()
        return self.lines_read

    def process_line(self, line: str) -> None:
        raise NotImplementedError

    def log_progress(self) -> None:
        """Log parsing progress at intervals."""
        if self.progress_interval > 0 and self.lines_read % self.progress_interval == 0:
            logger.info(f"[{self.file_path.name}] Processed {self.lines_read:,} lines")

    def finalize_stats(self) -> None:
        """Stamp the end time on every entity type's stats."""
        now = time.time()
        for pstats in self.ctx.record_stats.values():
            pstats.end_time = now
