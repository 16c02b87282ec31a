"""
Column model construction and fixed-width field slicing.

Column boundaries are inferred from the header line alone: names are
separated by runs of two or more whitespace characters and each name's
offset in the header is reused as the slice start for every data line of
the block. This relies on the console printing column-aligned text.
"""

import logging
import re
from typing import List

from mml_parser.config_models import SlicePolicy
from mml_parser.csv_encoding import to_csv_value
from mml_parser.exceptions import ColumnSliceError, MalformedHeaderError
from mml_parser.models import ColumnModel, ColumnSpec

logger = logging.getLogger(__name__)

_HEADER_SPLIT_RE = re.compile(r"\s{2,}")

# Printout columns are separated by one pad character the header token does
# not account for; non-terminal widths are the token length minus one.
WIDTH_ADJUSTMENT = 1


def build_column_model(entity_type: str, header_line: str) -> ColumnModel:
    """Derive the column model of an entity type from its header line.

    Args:
        entity_type: Entity type the header belongs to
        header_line: Raw (untrimmed) header text

    Returns:
        ColumnModel with one ColumnSpec per header token, left to right

    Raises:
        MalformedHeaderError: If the header holds no column names
    """
    tokens = [t.strip() for t in _HEADER_SPLIT_RE.split(header_line.strip())]
    tokens = [t for t in tokens if t]
    if not tokens:
        raise MalformedHeaderError(f"Header for '{entity_type}' has no column names")

    columns: List[ColumnSpec] = []
    cursor = 0
    for i, name in enumerate(tokens):
        start = header_line.find(name, cursor)
        if start < 0:
            # Only reachable when a token was mangled by the split itself.
            start = header_line.find(name)
        first = header_line.find(name)
        if first != start:
            logger.warning(
                f"Header of {entity_type}: column '{name}' first occurs at offset {first}, "
                f"using offset {start} after column '{tokens[i - 1]}'"
            )
        is_last = i == len(tokens) - 1
        width = None if is_last else len(name) - WIDTH_ADJUSTMENT
        columns.append(ColumnSpec(name=name, start=start, width=width))
        cursor = start + len(name)

    logger.debug(f"Column model for {entity_type}: {[(c.name, c.start, c.width) for c in columns]}")
    return ColumnModel(entity_type=entity_type, columns=columns)


def csv_header(model: ColumnModel) -> str:
    """Header row of an entity type's CSV file."""
    return ",".join(["DateTime", "NE"] + [to_csv_value(n) for n in model.names])


def slice_fields(line: str, model: ColumnModel, policy: SlicePolicy = SlicePolicy.CLIP) -> List[str]:
    """Cut a data line into trimmed field values using the column model.

    With ``SlicePolicy.CLIP`` a column that starts past the end of the line
    yields an empty value and a column cut short by the line end yields what
    is there. With ``SlicePolicy.STRICT`` either case raises.

    Raises:
        ColumnSliceError: Line too short for a column under the strict policy
    """
    values = []
    length = len(line)
    for col in model.columns:
        end = col.end
        if policy == SlicePolicy.STRICT:
            needed = col.start if end is None else end
            if needed > length:
                raise ColumnSliceError(
                    f"Line of length {length} too short for column '{col.name}' "
                    f"of {model.entity_type} (needs {needed})"
                )
        if col.start >= length:
            values.append("")
            continue
        raw = line[col.start:] if end is None else line[col.start:end]
        values.append(raw.strip())
    return values
