"""
MML printout parser: Huawei "LST" printouts to per-object CSV files.

Backwards-compatibility wrapper for existing scripts.

Recommended usage:
  - Command line: mml-parser --out ./output printout.txt
  - Python module: python -m mml_parser.cli --out ./output printout.txt
  - Programmatic: from mml_parser.orchestrator import parse_files
"""

import sys

from mml_parser.cli import main
from mml_parser.orchestrator import parse_files

__all__ = ['main', 'parse_files']

if __name__ == "__main__":
    sys.exit(main())
