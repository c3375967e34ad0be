"""
Point extractor.

Selects the trajectory feature of a decoded feed and pairs every coordinate
with its timestamp. Flight-tracker exports list the origin and destination
markers first, so the trajectory is the third feature by default.
"""

import logging
import math
import os
from dataclasses import dataclass, field
from datetime import datetime

from tracklog.errors import FeedShapeError
from tracklog.models.raw import Feed, RawPoint
from tracklog.models.track import to_utc


logger = logging.getLogger(__name__)


TRAJECTORY_FEATURE_INDEX = int(os.getenv("TRACKLOG_FEATURE_INDEX", "2"))
MIN_TRACK_POINTS = 2


@dataclass
class PointExtraction:
    """Points pulled from one feed; `insufficient` marks sources to skip."""

    source: str
    feature_name: str
    points: list[RawPoint] = field(default_factory=list)

    @property
    def insufficient(self) -> bool:
        return len(self.points) < MIN_TRACK_POINTS


def extract(feed: Feed, feature_index: int = TRAJECTORY_FEATURE_INDEX) -> PointExtraction:
    """
    Extract the trajectory points of a feed.

    Raises:
        FeedShapeError: feature index out of range, coordinate/time arrays
            missing or of different length, or undecodable values.
    """
    source = feed.source or feed.name
    if feature_index < 0 or feature_index >= len(feed.features):
        raise FeedShapeError(
            f"Feed has {len(feed.features)} features, no trajectory at index {feature_index}",
            source=source,
        )

    feature = feed.features[feature_index]
    coordinates = feature.coordinates
    times = feature.times

    if coordinates is None:
        raise FeedShapeError(f"Feature '{feature.name}' has no coordinates", source=source)
    if times is None:
        raise FeedShapeError(f"Feature '{feature.name}' has no timestamps", source=source)
    if len(coordinates) != len(times):
        raise FeedShapeError(
            f"Feature '{feature.name}' has {len(coordinates)} coordinates "
            f"but {len(times)} timestamps",
            source=source,
        )

    points = [
        _decode_point(coord, when, i, source)
        for i, (coord, when) in enumerate(zip(coordinates, times))
    ]

    extraction = PointExtraction(source=source, feature_name=feature.name, points=points)
    if extraction.insufficient:
        logger.warning(f"Insufficient data in {source}: {len(points)} point(s)")
    else:
        logger.debug(f"Extracted {len(points)} points from {source}")
    return extraction


def parse_timestamp(text: str) -> datetime:
    """Parse an ISO-8601 timestamp, assuming UTC when no offset is given."""
    cleaned = text.strip().replace("Z", "+00:00")
    return to_utc(datetime.fromisoformat(cleaned))


def _decode_point(coord, when, index: int, source: str) -> RawPoint:
    if not isinstance(coord, (list, tuple)) or len(coord) < 2:
        raise FeedShapeError(f"Coordinate {index} is not a [lon, lat, alt] triple: {coord!r}", source=source)

    try:
        lon = float(coord[0])
        lat = float(coord[1])
        alt = float(coord[2]) if len(coord) > 2 else 0.0
    except (TypeError, ValueError) as e:
        raise FeedShapeError(f"Coordinate {index} is not numeric: {coord!r}", source=source) from e

    if not all(math.isfinite(v) for v in (lon, lat, alt)):
        raise FeedShapeError(f"Coordinate {index} is not finite: {coord!r}", source=source)

    try:
        timestamp = parse_timestamp(str(when))
    except ValueError as e:
        raise FeedShapeError(f"Timestamp {index} is not ISO-8601: {when!r}", source=source) from e

    return RawPoint(longitude=lon, latitude=lat, altitude_m=alt, timestamp=timestamp)
