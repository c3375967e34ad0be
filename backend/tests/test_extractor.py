"""
Tests for the point extractor.
"""

from datetime import datetime, timezone

import pytest

from tracklog.errors import FeedShapeError
from tracklog.models.raw import Feed, FeedFeature, RawPoint
from tracklog.services.extractor import extract, parse_timestamp


def _markers():
    return [
        FeedFeature(name="KBOS", coordinates=[[-71.005, 42.364, 0.0]]),
        FeedFeature(name="KJFK", coordinates=[[-73.778, 40.641, 0.0]]),
    ]


def _feed(coordinates, times, name="N12345"):
    return Feed(
        name=name,
        features=_markers() + [FeedFeature(name=name, coordinates=coordinates, times=times)],
        source=f"{name}.kml",
    )


@pytest.fixture
def sample_feed():
    """Three-point trajectory, one minute apart."""
    return _feed(
        [[-70.0, 40.0, 100], [-70.01, 40.01, 200], [-70.02, 40.02, 300]],
        ["2023-05-01T12:00:00Z", "2023-05-01T12:01:00Z", "2023-05-01T12:02:00Z"],
    )


class TestExtract:
    """Tests for extract()."""

    def test_pairs_coordinates_with_times(self, sample_feed):
        """Every coordinate is matched to its timestamp in order."""
        extraction = extract(sample_feed)

        assert len(extraction.points) == 3
        assert not extraction.insufficient
        assert extraction.feature_name == "N12345"
        assert extraction.source == "N12345.kml"

        first = extraction.points[0]
        assert first.longitude == -70.0
        assert first.latitude == 40.0
        assert first.altitude_m == 100
        assert first.timestamp == datetime(2023, 5, 1, 12, 0, tzinfo=timezone.utc)

    def test_altitude_converted_to_feet(self, sample_feed):
        """Altitudes come out in whole feet."""
        extraction = extract(sample_feed)
        assert [p.altitude_ft for p in extraction.points] == [328, 656, 984]

    def test_feature_index_out_of_range(self, sample_feed):
        with pytest.raises(FeedShapeError, match="no trajectory at index 5"):
            extract(sample_feed, feature_index=5)

    def test_missing_trajectory_feature(self):
        """A feed with only the airport markers has no trajectory."""
        feed = Feed(name="short", features=_markers())
        with pytest.raises(FeedShapeError):
            extract(feed)

    def test_missing_times(self):
        feed = _feed([[-70.0, 40.0, 100], [-70.01, 40.01, 200]], None)
        with pytest.raises(FeedShapeError, match="no timestamps"):
            extract(feed)

    def test_missing_coordinates(self):
        feed = _feed(None, ["2023-05-01T12:00:00Z"])
        with pytest.raises(FeedShapeError, match="no coordinates"):
            extract(feed)

    def test_length_mismatch(self):
        """Coordinate and time arrays must line up."""
        feed = _feed(
            [[-70.0, 40.0, 100], [-70.01, 40.01, 200]],
            ["2023-05-01T12:00:00Z"],
        )
        with pytest.raises(FeedShapeError, match="2 coordinates but 1 timestamps"):
            extract(feed)

    def test_bad_timestamp(self):
        feed = _feed(
            [[-70.0, 40.0, 100], [-70.01, 40.01, 200]],
            ["2023-05-01T12:00:00Z", "yesterday"],
        )
        with pytest.raises(FeedShapeError, match="not ISO-8601"):
            extract(feed)

    def test_non_numeric_coordinate(self):
        feed = _feed(
            [[-70.0, 40.0, 100], ["west", 40.01, 200]],
            ["2023-05-01T12:00:00Z", "2023-05-01T12:01:00Z"],
        )
        with pytest.raises(FeedShapeError, match="not numeric"):
            extract(feed)

    @pytest.mark.parametrize(
        "coordinate",
        [
            [float("inf"), 40.01, 200],
            [-70.01, float("-inf"), 200],
            [-70.01, 40.01, float("inf")],
            [float("nan"), 40.01, 200],
            ["Infinity", 40.01, 200],
        ],
    )
    def test_non_finite_coordinate(self, coordinate):
        """Infinite or NaN values are rejected before any distance is computed."""
        feed = _feed(
            [[-70.0, 40.0, 100], coordinate],
            ["2023-05-01T12:00:00Z", "2023-05-01T12:01:00Z"],
        )
        with pytest.raises(FeedShapeError, match="Coordinate 1 is not finite"):
            extract(feed)

    def test_short_coordinate(self):
        feed = _feed(
            [[-70.0], [-70.01, 40.01, 200]],
            ["2023-05-01T12:00:00Z", "2023-05-01T12:01:00Z"],
        )
        with pytest.raises(FeedShapeError):
            extract(feed)

    def test_missing_altitude_defaults_to_zero(self):
        feed = _feed(
            [[-70.0, 40.0], [-70.01, 40.01]],
            ["2023-05-01T12:00:00Z", "2023-05-01T12:01:00Z"],
        )
        extraction = extract(feed)
        assert [p.altitude_m for p in extraction.points] == [0.0, 0.0]

    @pytest.mark.parametrize("count", [0, 1])
    def test_insufficient_points_is_not_an_error(self, count):
        """Zero or one point yields a result flagged as insufficient."""
        coords = [[-70.0, 40.0, 100]][:count]
        times = ["2023-05-01T12:00:00Z"][:count]
        extraction = extract(_feed(coords, times))

        assert extraction.insufficient
        assert len(extraction.points) == count

    def test_custom_feature_index(self, sample_feed):
        """The airport markers can be selected explicitly."""
        sample_feed.features[0].times = ["2023-05-01T11:00:00Z"]
        extraction = extract(sample_feed, feature_index=0)
        assert extraction.feature_name == "KBOS"
        assert extraction.insufficient


class TestRawPoint:
    """Tests for RawPoint unit conversion."""

    @pytest.mark.parametrize(
        "meters, feet",
        [(0, 0), (1000, 3281), (304.8, 1000), (3048, 10000), (-10, -33)],
    )
    def test_reference_altitudes(self, meters, feet):
        point = RawPoint(longitude=0.0, latitude=0.0, altitude_m=meters,
                         timestamp=datetime(2023, 1, 1, tzinfo=timezone.utc))
        assert point.altitude_ft == feet


class TestParseTimestamp:
    """Tests for ISO-8601 parsing."""

    def test_zulu(self):
        assert parse_timestamp("2023-05-01T12:00:00Z") == datetime(2023, 5, 1, 12, tzinfo=timezone.utc)

    def test_offset_normalized_to_utc(self):
        ts = parse_timestamp("2023-05-01T08:00:00-04:00")
        assert ts == datetime(2023, 5, 1, 12, tzinfo=timezone.utc)
        assert ts.tzinfo == timezone.utc

    def test_naive_is_utc(self):
        assert parse_timestamp("2023-05-01T12:00:00") == datetime(2023, 5, 1, 12, tzinfo=timezone.utc)

    def test_milliseconds(self):
        ts = parse_timestamp("2022-06-09T15:42:34.310Z")
        assert ts.microsecond == 310000
