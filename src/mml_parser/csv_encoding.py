"""
CSV field encoding for printout values.

Values are quoted by hand rather than through the ``csv`` module because a
leading and trailing double quote left by the console must be stripped
before any quoting decision is made.
"""

from typing import Iterable, List, Optional


def to_csv_value(value: Optional[str]) -> str:
    """Encode a single field value.

    - one leading and one trailing ``"`` are stripped
    - values containing ``"`` have quotes doubled and are wrapped
    - values containing ``,`` are wrapped
    - anything else is returned unchanged

    Examples:
        >>> to_csv_value('a,b')
        '"a,b"'
        >>> to_csv_value('a"b')
        '"a""b"'
        >>> to_csv_value('"x"')
        'x'
    """
    if value is None:
        return ""

    s = value
    if s.startswith('"'):
        s = s[1:]
    if s.endswith('"'):
        s = s[:-1]

    if '"' in s:
        return '"' + s.replace('"', '""') + '"'
    if "," in s:
        return '"' + s + '"'
    return s


def encode_row(values: Iterable[Optional[str]]) -> List[str]:
    """Encode every value of a row."""
    return [to_csv_value(v) for v in values]
