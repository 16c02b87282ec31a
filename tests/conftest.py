"""Pytest configuration and shared fixtures."""

import shutil
import tempfile
from pathlib import Path
from typing import List, Sequence

import pytest

from mml_parser.config_models import ParserConfig
from mml_parser.context import RunContext
from mml_parser.csv_writer import OutputRouter

CELL_HEADER = ["Cell ID", "Cell Name", "Max TX Power"]
CELL_STARTS = [1, 10, 21]


def make_row(values: Sequence[str], starts: Sequence[int]) -> str:
    """Lay values out at fixed offsets, like the console does."""
    line = ""
    for value, start in zip(values, starts):
        line = line.ljust(start) + value
    return line


def make_block(
    entity_type: str = "UCELL",
    ne: str = "BSC01",
    timestamp: str = "2017-01-01 10:00:00",
    header: Sequence[str] = tuple(CELL_HEADER),
    rows: Sequence[Sequence[str]] = (),
    starts: Sequence[int] = tuple(CELL_STARTS),
    succeeded: bool = True,
) -> List[str]:
    """Build the lines of one printout block."""
    lines = [
        f"MML Command-----LST {entity_type}:;",
        f"NE : {ne}",
        f"Report : +++    {ne}        {timestamp}",
        "O&M    #12345",
        f"%%LST {entity_type}:;%%",
    ]
    if succeeded:
        lines.append("RETCODE = 0  Execution succeeded.")
    else:
        lines.append("RETCODE = 1  Execution failed.")
    lines += [
        "",
        "List Basic Information",
        "----------------------",
        make_row(header, starts),
    ]
    lines += [make_row(r, starts) for r in rows]
    lines += [
        f"(Number of results = {len(rows)})",
        "",
        "---    END",
        "",
    ]
    return lines


@pytest.fixture
def temp_output_dir():
    """Create temporary output directory for tests."""
    temp_dir = tempfile.mkdtemp()
    yield Path(temp_dir)
    # Cleanup
    shutil.rmtree(temp_dir, ignore_errors=True)


@pytest.fixture
def run_context(temp_output_dir):
    """Run context writing into the temporary output directory."""
    router = OutputRouter(temp_output_dir, flush_every=None)
    ctx = RunContext(config=ParserConfig(), router=router)
    yield ctx
    router.close()


@pytest.fixture
def sample_printout_file(tmp_path) -> Path:
    """Create a printout with one UCELL block of two rows."""
    lines = make_block(rows=[["1", "CELLA", "430"], ["2", "CELLB", "400"]])
    printout = tmp_path / "printout_bsc01.txt"
    printout.write_text("\n".join(lines))
    return printout


@pytest.fixture
def multi_block_printout_file(tmp_path) -> Path:
    """Create a printout holding UCELL, UNODEB and another UCELL block."""
    nodeb_header = ["NodeB Name", "NodeB ID"]
    nodeb_starts = [0, 14]
    lines = (
        make_block(rows=[["1", "CELLA", "430"]])
        + make_block(entity_type="UNODEB", header=nodeb_header, starts=nodeb_starts,
                     rows=[["NODEB_A", "101"], ["NODEB_B", "102"]])
        + make_block(rows=[["2", "CELLB", "400"]])
    )
    printout = tmp_path / "printout_multi.txt"
    printout.write_text("\n".join(lines))
    return printout
