"""
Validation functions for configuration and the output directory.
"""

import codecs
import os
import re
from pathlib import Path
from typing import List

from mml_parser.exceptions import UnwritableOutputError


def validate_config(config: dict) -> List[str]:
    """Check configuration values the pydantic models cannot check.

    Returns:
        List of validation errors (empty if valid)
    """
    errors = []

    file_mask = config.get("file_mask")
    if file_mask is not None:
        if not isinstance(file_mask, str):
            errors.append(f"file_mask must be a string regex pattern, got {type(file_mask).__name__}")
        else:
            try:
                re.compile(file_mask)
            except re.error as e:
                errors.append(f"Invalid file_mask regex pattern '{file_mask}': {e}")

    encodings = [("input_encoding", config.get("input_encoding"))]
    output = config.get("output")
    if isinstance(output, dict):
        encodings.append(("output.encoding", output.get("encoding")))

    for key, encoding in encodings:
        if encoding is None or not isinstance(encoding, str):
            continue
        try:
            codecs.lookup(encoding)
        except LookupError:
            errors.append(f"Unknown encoding for '{key}': {encoding}")

    return errors


def validate_output_dir(out_dir: Path) -> Path:
    """Make sure the output directory exists and is writable.

    The directory is created if missing.

    Raises:
        UnwritableOutputError: If the path is not a writable directory
    """
    if out_dir.exists() and not out_dir.is_dir():
        raise UnwritableOutputError(f"Output path is not a directory: {out_dir}")
    try:
        out_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise UnwritableOutputError(f"Cannot create output directory {out_dir}: {e}") from e
    if not os.access(out_dir, os.W_OK | os.X_OK):
        raise UnwritableOutputError(f"Cannot write to output directory: {out_dir}")
    return out_dir
