"""
Output router: one CSV stream per entity type.
"""

import logging
from pathlib import Path
from typing import Dict, List, Optional, TextIO, Tuple

from mml_parser.exceptions import UnwritableOutputError
from mml_parser.models import Record

logger = logging.getLogger(__name__)


class OutputRouter:
    """Owns the open CSV stream of every entity type seen in a run.

    A stream is opened on the first header of its entity type, receives
    its header row once, and stays open until ``close``. Lines are written
    in text mode so the platform line terminator is used.

    Args:
        out_dir: Output directory for CSV files
        encoding: Output file encoding
        flush_every: Flush to disk every N rows (0 = flush on close only, None = flush every row).
                     Default: 1000 for production performance.
    """

    def __init__(self, out_dir: Path, encoding: str = "utf-8", flush_every: Optional[int] = 1000):
        self.out_dir = out_dir
        self.encoding = encoding
        self.flush_every = flush_every  # None=every row, 0=on close only, N=every N rows
        self._streams: Dict[str, Tuple[TextIO, Path]] = {}
        self._row_counts: Dict[str, int] = {}
        self._paths: List[Path] = []
        self._closed = False

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit - ensures files are closed."""
        self.close()
        return False  # Don't suppress exceptions

    def open_stream(self, entity_type: str, header: str) -> bool:
        """Open the entity type's stream and write its header.

        Returns:
            True if a stream was created, False if it already existed

        Raises:
            UnwritableOutputError: If the file cannot be created or written
        """
        if self._closed:
            raise RuntimeError("OutputRouter is closed")
        if entity_type in self._streams:
            return False

        path = self.out_dir / f"{entity_type}.csv"
        fp = None
        try:
            fp = path.open("w", encoding=self.encoding)
            fp.write(header + "\n")
            fp.flush()
        except OSError as e:
            if fp is not None:
                fp.close()
            raise UnwritableOutputError(f"Cannot create {path}: {e}") from e

        self._streams[entity_type] = (fp, path)
        self._row_counts[entity_type] = 0
        self._paths.append(path)
        logger.debug(f"Opened output stream {path}")
        return True

    def write_record(self, record: Record) -> None:
        """Append one record to its entity type's stream."""
        if self._closed:
            raise RuntimeError("OutputRouter is closed")
        if record.entity_type not in self._streams:
            raise KeyError(f"No output stream open for '{record.entity_type}'")

        fp, path = self._streams[record.entity_type]
        try:
            fp.write(record.to_line() + "\n")
        except OSError as e:
            raise UnwritableOutputError(f"Cannot write to {path}: {e}") from e

        count = self._row_counts[record.entity_type] + 1
        self._row_counts[record.entity_type] = count

        should_flush = (
            self.flush_every is None or
            (self.flush_every > 0 and count % self.flush_every == 0)
        )
        if should_flush:
            fp.flush()

    def close(self) -> None:
        """Flush and close every stream in order of creation."""
        if self._closed:
            return

        errors = []
        for entity_type, (fp, _) in list(self._streams.items()):
            try:
                if not fp.closed:
                    fp.flush()
                    fp.close()
            except OSError as e:
                errors.append(f"Error closing {entity_type}.csv: {e}")

        self._closed = True
        self._streams.clear()

        if errors:
            logger.warning(f"Errors during OutputRouter.close(): {'; '.join(errors)}")

    @property
    def entity_types(self) -> List[str]:
        """Entity types with an open stream, in creation order."""
        return list(self._streams.keys())

    @property
    def paths(self) -> List[Path]:
        """Every file created during the run, in creation order."""
        return list(self._paths)

    def get_row_count(self, entity_type: str) -> int:
        """Get row count for an entity type."""
        return self._row_counts.get(entity_type, 0)
