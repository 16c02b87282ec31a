"""Tests for the per-entity-type output router."""

import os

import pytest

from mml_parser.csv_writer import OutputRouter
from mml_parser.exceptions import UnwritableOutputError
from mml_parser.models import Record


def test_header_written_once(temp_output_dir):
    with OutputRouter(temp_output_dir) as router:
        assert router.open_stream("UCELL", "DateTime,NE,Cell ID") is True
        assert router.open_stream("UCELL", "DateTime,NE,Cell ID") is False
        router.write_record(Record("UCELL", ["2017-01-01 10:00:00", "BSC01", "1"]))

    lines = (temp_output_dir / "UCELL.csv").read_text().splitlines()
    assert lines == ["DateTime,NE,Cell ID", "2017-01-01 10:00:00,BSC01,1"]


def test_one_file_per_entity_type(temp_output_dir):
    with OutputRouter(temp_output_dir) as router:
        router.open_stream("UCELL", "DateTime,NE,A")
        router.open_stream("UNODEB", "DateTime,NE,B")
        router.write_record(Record("UNODEB", ["t", "ne", "b1"]))
        router.write_record(Record("UCELL", ["t", "ne", "a1"]))
        router.write_record(Record("UNODEB", ["t", "ne", "b2"]))
        assert router.get_row_count("UNODEB") == 2
        assert router.entity_types == ["UCELL", "UNODEB"]

    assert (temp_output_dir / "UNODEB.csv").read_text().splitlines()[1:] == ["t,ne,b1", "t,ne,b2"]
    assert router.paths == [temp_output_dir / "UCELL.csv", temp_output_dir / "UNODEB.csv"]


def test_rows_use_platform_line_terminator(temp_output_dir):
    with OutputRouter(temp_output_dir) as router:
        router.open_stream("UCELL", "DateTime,NE,A")
        router.write_record(Record("UCELL", ["t", "ne", "a"]))

    raw = (temp_output_dir / "UCELL.csv").read_bytes()
    assert raw == f"DateTime,NE,A{os.linesep}t,ne,a{os.linesep}".encode()


def test_write_without_stream(temp_output_dir):
    with OutputRouter(temp_output_dir) as router:
        with pytest.raises(KeyError):
            router.write_record(Record("UCELL", ["t"]))


def test_closed_router_rejects_writes(temp_output_dir):
    router = OutputRouter(temp_output_dir)
    router.open_stream("UCELL", "DateTime,NE,A")
    router.close()
    router.close()  # second close is a no-op
    with pytest.raises(RuntimeError):
        router.open_stream("UNODEB", "DateTime,NE,B")


def test_flush_on_close_only(temp_output_dir):
    router = OutputRouter(temp_output_dir, flush_every=0)
    router.open_stream("UCELL", "DateTime,NE,A")
    router.write_record(Record("UCELL", ["t", "ne", "a"]))
    router.close()
    assert (temp_output_dir / "UCELL.csv").read_text().splitlines() == ["DateTime,NE,A", "t,ne,a"]


def test_unwritable_stream(tmp_path):
    missing_dir = tmp_path / "does_not_exist"
    router = OutputRouter(missing_dir)
    with pytest.raises(UnwritableOutputError):
        router.open_stream("UCELL", "DateTime,NE,A")
