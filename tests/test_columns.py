"""Tests for column model construction and fixed-width slicing."""

import logging

import pytest

from conftest import CELL_HEADER, CELL_STARTS, make_row
from mml_parser.columns import build_column_model, csv_header, slice_fields
from mml_parser.config_models import SlicePolicy
from mml_parser.exceptions import ColumnSliceError, MalformedHeaderError


@pytest.fixture
def cell_model():
    return build_column_model("UCELL", make_row(CELL_HEADER, CELL_STARTS))


class TestBuildColumnModel:

    def test_names_in_header_order(self, cell_model):
        assert cell_model.names == CELL_HEADER

    def test_offsets_follow_header(self, cell_model):
        assert [c.start for c in cell_model.columns] == CELL_STARTS

    def test_offsets_strictly_increase(self):
        # "Cell" also occurs inside the first name
        model = build_column_model("X", "Cell Name  Cell")
        assert [c.start for c in model.columns] == [0, 11]

    def test_shifted_offset_is_logged(self, caplog):
        with caplog.at_level(logging.WARNING):
            build_column_model("X", "Cell Name  Cell")
        assert "column 'Cell' first occurs at offset 0, using offset 11" in caplog.text

    def test_ordinary_header_logs_nothing(self, caplog):
        with caplog.at_level(logging.WARNING):
            build_column_model("UCELL", make_row(CELL_HEADER, CELL_STARTS))
        assert caplog.records == []

    def test_widths_are_token_length_minus_one(self, cell_model):
        assert cell_model.columns[0].width == len("Cell ID") - 1
        assert cell_model.columns[1].width == len("Cell Name") - 1

    def test_last_column_is_open_ended(self, cell_model):
        assert cell_model.columns[-1].width is None
        assert cell_model.columns[-1].end is None

    def test_single_spaces_stay_inside_a_name(self):
        model = build_column_model("X", "Local Cell ID  Cell Name")
        assert model.names == ["Local Cell ID", "Cell Name"]

    def test_whitespace_only_header(self):
        with pytest.raises(MalformedHeaderError):
            build_column_model("X", "     ")

    def test_csv_header(self, cell_model):
        assert csv_header(cell_model) == "DateTime,NE,Cell ID,Cell Name,Max TX Power"


class TestSliceFields:

    def test_full_row(self, cell_model):
        line = make_row(["1", "CELLA", "430"], CELL_STARTS)
        assert slice_fields(line, cell_model) == ["1", "CELLA", "430"]

    def test_last_column_takes_rest_of_line(self, cell_model):
        line = make_row(["1", "CELLA", "430 dBm  (max)"], CELL_STARTS)
        assert slice_fields(line, cell_model)[-1] == "430 dBm  (max)"

    def test_value_longer_than_width_is_cut(self, cell_model):
        # "Cell Name" gives a width of 8
        line = make_row(["1", "CELL_ALPHA", "430"], CELL_STARTS)
        assert slice_fields(line, cell_model)[1] == "CELL_ALP"

    def test_short_line_clips_to_empty(self, cell_model):
        line = make_row(["1"], CELL_STARTS)
        assert slice_fields(line, cell_model) == ["1", "", ""]

    def test_short_line_strict_raises(self, cell_model):
        line = make_row(["1"], CELL_STARTS)
        with pytest.raises(ColumnSliceError):
            slice_fields(line, cell_model, SlicePolicy.STRICT)

    def test_full_row_strict(self, cell_model):
        line = make_row(["1", "CELLA", "430"], CELL_STARTS)
        assert slice_fields(line, cell_model, SlicePolicy.STRICT) == ["1", "CELLA", "430"]
