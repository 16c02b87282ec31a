"""
State machine that turns MML "LST" printouts into per-entity-type records.

One ``PrintoutParser`` handles one file; everything that must outlive the
file (column models, output streams, stats) lives on the ``RunContext``.

States:
    AWAITING_BLOCK -> HEADER_PENDING   on a section delimiter after RETCODE 0
    HEADER_PENDING -> IN_DATA          on the header line
    IN_DATA        -> AWAITING_BLOCK   on the result-count footer
"""

import logging
from pathlib import Path

from mml_parser.classifier import classify_line
from mml_parser.columns import slice_fields
from mml_parser.context import RunContext
from mml_parser.csv_encoding import encode_row
from mml_parser.exceptions import MalformedBannerError, MalformedHeaderError
from mml_parser.models import ClassifiedLine, LineCategory, ParserState, Record, ReportContext
from mml_parser.observability import EventType
from mml_parser.parsers.base_parser import BaseParser

logger = logging.getLogger(__name__)


class PrintoutParser(BaseParser):
    """Parses one printout file into records routed by entity type."""

    def __init__(self, file_path: Path, ctx: RunContext):
        super().__init__(file_path, ctx)
        self.report = ReportContext()
        self.records_written = 0
        self._handlers = {
            LineCategory.BLANK: self._ignore,
            LineCategory.UNRECOGNIZED: self._ignore,
            LineCategory.FOOTER: self._on_footer,
            LineCategory.COMMAND_BANNER: self._on_banner,
            LineCategory.NE_IDENTITY: self._on_ne,
            LineCategory.REPORT_TIMESTAMP: self._on_timestamp,
            LineCategory.RETURN_CODE: self._on_return_code,
            LineCategory.SECTION_DELIMITER: self._on_delimiter,
            LineCategory.HEADER_LINE: self._on_header,
            LineCategory.DATA_LINE: self._on_data,
        }

    @property
    def state(self) -> ParserState:
        return self.report.state

    def process_line(self, line: str) -> None:
        try:
            classified = classify_line(line, self.report.state, self.report.return_code)
        except MalformedBannerError as e:
            self._skip_block(str(e))
            return
        self._handlers[classified.category](classified)

    def _skip_block(self, reason: str) -> None:
        """Drop the rest of the current block, up to its footer."""
        logger.warning(f"{self.file_path.name} line {self.lines_read}: {reason}; skipping block")
        self.report.entity_type = None
        self.report.skip_block = True
        self.ctx.observability.emit_event(
            EventType.LINE_SKIPPED, file_path=self.file_path,
            details={"line": self.lines_read, "reason": reason}
        )

    def _ignore(self, classified: ClassifiedLine) -> None:
        pass

    def _on_banner(self, classified: ClassifiedLine) -> None:
        self.report.entity_type = classified.value
        self.ctx.file_entity_types.add(classified.value)
        self.report.skip_block = False

    def _on_ne(self, classified: ClassifiedLine) -> None:
        self.report.ne = classified.value

    def _on_timestamp(self, classified: ClassifiedLine) -> None:
        self.report.timestamp = classified.value

    def _on_return_code(self, classified: ClassifiedLine) -> None:
        self.report.return_code = classified.value

    def _on_delimiter(self, classified: ClassifiedLine) -> None:
        self.report.state = ParserState.HEADER_PENDING

    def _on_header(self, classified: ClassifiedLine) -> None:
        self.report.state = ParserState.IN_DATA
        entity_type = self.report.entity_type

        if self.report.skip_block:
            return
        if entity_type is None:
            self._skip_block("Column header without a preceding LST command")
            return
        if entity_type in self.ctx.disabled_entity_types:
            return

        try:
            self.ctx.column_model_for(entity_type, classified.line)
        except MalformedHeaderError as e:
            logger.error(f"{self.file_path.name} line {self.lines_read}: {e}; ignoring {entity_type} for this run")
            self.ctx.disabled_entity_types.add(entity_type)
            return

        self.ctx.stats_for(entity_type).blocks += 1
        self.ctx.observability.emit_event(EventType.BLOCK_START, file_path=self.file_path, entity_type=entity_type)

    def _on_data(self, classified: ClassifiedLine) -> None:
        entity_type = self.report.entity_type
        if self.report.skip_block or entity_type is None:
            return

        pstats = self.ctx.stats_for(entity_type)
        pstats.total_rows += 1
        model = self.ctx.column_models.get(entity_type)
        if model is None:
            pstats.skipped_rows += 1
            return

        values = slice_fields(classified.line, model, self.config.slice_policy)
        record = Record(
            entity_type=entity_type,
            values=encode_row([self.report.timestamp, self.report.ne] + values),
        )
        if self.ctx.router is not None:
            self.ctx.router.write_record(record)

        pstats.success_rows += 1
        self.records_written += 1
        self.ctx.observability.counter("rows_written", tags={"entity_type": entity_type})

    def _on_footer(self, classified: ClassifiedLine) -> None:
        entity_type = self.report.entity_type
        if self.report.state == ParserState.IN_DATA and entity_type in self.ctx.column_models:
            self.ctx.observability.emit_event(
                EventType.BLOCK_COMPLETE, file_path=self.file_path, entity_type=entity_type
            )
        self.report.end_block()


def parse_printout(file_path: Path, ctx: RunContext) -> int:
    """Parse one printout file into the run's output streams.

    Returns:
        Number of records produced

    Raises:
        UnreadableInputError: If the file cannot be read
        ColumnSliceError: On a short data line under the strict slice policy
        UnwritableOutputError: If an output stream cannot be written
    """
    parser = PrintoutParser(file_path, ctx)
    parser.parse()
    return parser.records_written
