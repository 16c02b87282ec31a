"""
Utility functions for the MML printout parser.
"""

from typing import List


def format_elapsed(seconds: float) -> str:
    """Render a duration as ``1 hours 2 minutes 3 seconds 45 milliseconds``.

    Units above the first non-zero one are omitted; milliseconds are always
    shown.
    """
    total_ms = int(round(seconds * 1000))
    hours, rem = divmod(total_ms, 3_600_000)
    minutes, rem = divmod(rem, 60_000)
    secs, msecs = divmod(rem, 1000)

    parts: List[str] = []
    if hours:
        parts.append(f"{hours} hours")
    if hours or minutes:
        parts.append(f"{minutes} minutes")
    if hours or minutes or secs:
        parts.append(f"{secs} seconds")
    parts.append(f"{msecs} milliseconds")
    return " ".join(parts)


def execution_time_message(seconds: float) -> str:
    """Closing line printed at the end of a run."""
    return f"Parsing completed. Total time: {format_elapsed(seconds)}"
