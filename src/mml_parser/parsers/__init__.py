"""
Parser modules for MML printouts.
"""

from mml_parser.parsers.printout_parser import PrintoutParser, parse_printout

__all__ = [
    "PrintoutParser",
    "parse_printout",
]
