"""
Tests for the G1000 renderer.
"""

from datetime import datetime, timedelta, timezone

import pytest

from tracklog.models.raw import RawPoint
from tracklog.models.track import AirframeInfo, TrackLog
from tracklog.services.g1000 import (
    COLUMN_ROW,
    UNIT_ROW,
    default_filename,
    format_coordinate,
    render_header,
    render_row,
    render_tracklog,
)
from tracklog.services.synthesizer import synthesize


T0 = datetime(2023, 5, 1, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def airframe():
    return AirframeInfo(ident="n12345", model="c172s")


@pytest.fixture
def track():
    raw = [
        RawPoint(-70.0, 40.0, 100, T0),
        RawPoint(-70.01, 40.01, 200, T0 + timedelta(seconds=60)),
        RawPoint(-70.02, 40.02, 300, T0 + timedelta(seconds=120)),
    ]
    return synthesize(raw, source="leg1")


class TestHeader:
    """Tests for the header block."""

    def test_airframe_line(self, airframe):
        """Ident and model are upper-cased."""
        first = render_header(airframe).splitlines()[0]
        assert first == (
            '#airframe_info, log_version="1.00", airframe_name="C172S", '
            'unit_software_part_number="000-A0000-0A", unit_software_version="9.00", '
            'system_software_part_number="000-A0000-00", system_id="N12345", mode=NORMAL,'
        )

    def test_unit_and_column_rows(self, airframe):
        lines = render_header(airframe).splitlines()
        assert lines[1] == UNIT_ROW
        assert lines[2] == COLUMN_ROW
        assert len(lines) == 3

    def test_column_rows_align(self):
        """Unit and column-name rows describe the same columns."""
        assert len(UNIT_ROW.split(",")) == len(COLUMN_ROW.split(","))
        assert COLUMN_ROW.split(",")[:6] == ["  Lcl Date", " Lcl Time", " UTCOfst", " AtvWpt",
                                             "     Latitude", "    Longitude"]


class TestRenderRow:
    """Tests for data lines."""

    def test_field_layout(self, track):
        fields = render_row(track.points[2]).split(",")

        assert len(fields) == 40
        assert fields[0] == "2023-05-01"
        assert fields[1] == " 12:02:00"
        assert fields[2] == "  -00:00"
        assert fields[3] == " " * 7
        assert fields[4] == "40.02".ljust(13)
        assert fields[5] == "-70.02".ljust(13)
        assert fields[8] == "     984"
        assert fields[11].strip() == str(track.points[2].speed_kt)
        assert fields[13] == "      0"
        assert fields[14] == "      0"
        assert fields[39].strip() == str(track.points[2].heading_deg)

    def test_field_widths_constant(self, track):
        """Every row has the same width per column."""
        widths = [[len(f) for f in render_row(p).split(",")] for p in track.points]
        assert widths[0] == widths[1] == widths[2]
        assert widths[0][:3] == [10, 9, 8]
        assert widths[0][39] == 7

    def test_blank_columns(self, track):
        fields = render_row(track.points[0]).split(",")
        populated = {0, 1, 2, 4, 5, 8, 11, 13, 14, 39}
        for i, field in enumerate(fields):
            if i not in populated:
                assert field.strip() == "", f"column {i} should be blank"

    def test_undefined_motion_renders_blank(self):
        """A single-point track renders without 'undefined' placeholders."""
        single = synthesize([RawPoint(-70.0, 40.0, 100, T0)])
        row = render_row(single.points[0])
        fields = row.split(",")

        assert "undefined" not in row
        assert "None" not in row
        assert fields[11] == " " * 7
        assert fields[39] == " " * 7


class TestRenderTracklog:
    """Tests for complete files."""

    def test_three_data_lines(self, airframe, track):
        text = render_tracklog(TrackLog(airframe=airframe, tracks=[track]))
        lines = text.splitlines()

        assert len(lines) == 3 + 3
        assert text.endswith("\n")
        assert all(line.startswith("2023-05-01") for line in lines[3:])

    def test_tracks_concatenated_in_order(self, airframe, track):
        later = synthesize([
            RawPoint(-60.0, 10.0, 0, T0 + timedelta(days=1)),
            RawPoint(-60.01, 10.0, 0, T0 + timedelta(days=1, seconds=60)),
        ], source="leg2")
        lines = render_tracklog(TrackLog(airframe=airframe, tracks=[later, track])).splitlines()

        assert len(lines) == 3 + 5
        assert lines[3].startswith("2023-05-02")
        assert lines[5].startswith("2023-05-01")


class TestFilename:
    """Tests for the default output filename."""

    def test_ident_and_start(self, airframe):
        assert default_filename(airframe, T0) == "N12345-2023-05-01-12:00.csv"

    def test_start_converted_to_utc(self, airframe):
        start = datetime(2023, 5, 1, 23, 15, tzinfo=timezone(timedelta(hours=-5)))
        assert default_filename(airframe, start) == "N12345-2023-05-02-04:15.csv"


class TestFormatCoordinate:

    @pytest.mark.parametrize(
        "value, expected",
        [(-70.0, "-70"), (40.01, "40.01"), (42.364213, "42.364213"), (0.0, "0"), (-0.5, "-0.5")],
    )
    def test_shortest_form(self, value, expected):
        assert format_coordinate(value) == expected
