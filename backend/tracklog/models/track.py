"""
Track log data model.

Every source feed is reduced to a Track with:
- timestamps unique to the second, in source order
- altitude in feet
- derived ground speed (kt) and heading (deg true)
- UTC date/time strings ready for the G1000 layout
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional

from tracklog.models.raw import RawPoint


UTC_OFFSET = "-00:00"
DATE_FORMAT = "%Y-%m-%d"
TIME_FORMAT = "%H:%M:%S"


def to_utc(value: datetime) -> datetime:
    """Normalize a datetime to UTC, treating naive values as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


@dataclass(frozen=True)
class TrackPoint:
    """A single G1000 sample."""

    latitude: float
    longitude: float
    altitude_ft: int
    timestamp: datetime
    date: str
    time: str
    utc_offset: str = UTC_OFFSET
    pitch: str = "0"
    bank: str = "0"
    speed_kt: Optional[int] = None
    heading_deg: Optional[int] = None

    @classmethod
    def from_raw(cls, raw: RawPoint) -> "TrackPoint":
        ts = to_utc(raw.timestamp)
        return cls(
            latitude=raw.latitude,
            longitude=raw.longitude,
            altitude_ft=raw.altitude_ft,
            timestamp=ts,
            date=ts.strftime(DATE_FORMAT),
            time=ts.strftime(TIME_FORMAT),
        )

    @property
    def has_motion(self) -> bool:
        return self.speed_kt is not None and self.heading_deg is not None


@dataclass(frozen=True)
class Track:
    """
    Deduplicated, motion-annotated points of one source feed.

    Points are kept in source order; no two share a timestamp second.
    """

    source: str
    points: tuple[TrackPoint, ...]
    duplicates_removed: int = 0

    def __len__(self) -> int:
        return len(self.points)

    @property
    def start(self) -> Optional[datetime]:
        if not self.points:
            return None
        return self.points[0].timestamp

    @property
    def end(self) -> Optional[datetime]:
        if not self.points:
            return None
        return self.points[-1].timestamp


def canonical_start(tracks) -> Optional[datetime]:
    """First point of the first non-empty track; names the output file."""
    for track in tracks:
        if track.points:
            return track.start
    return None


@dataclass(frozen=True)
class AirframeInfo:
    """Aircraft identification written into the track log header."""

    ident: str
    model: str

    @property
    def system_id(self) -> str:
        return self.ident.upper()

    @property
    def airframe_name(self) -> str:
        return self.model.upper()


@dataclass(frozen=True)
class SkippedSource:
    """A source left out of the track log, with the reason."""

    source: str
    reason: str


@dataclass
class TrackLog:
    """All tracks of one conversion, concatenated in source order."""

    airframe: AirframeInfo
    tracks: list[Track] = field(default_factory=list)
    skipped: list[SkippedSource] = field(default_factory=list)

    @property
    def start(self) -> Optional[datetime]:
        return canonical_start(self.tracks)

    @property
    def rows(self) -> list[TrackPoint]:
        return [point for track in self.tracks for point in track.points]

    @property
    def row_count(self) -> int:
        return sum(len(track) for track in self.tracks)


@dataclass
class TrackSummary:
    """Lightweight summary of a track for listing."""

    source: str
    point_count: int
    duplicates_removed: int
    start: Optional[str]
    end: Optional[str]

    @classmethod
    def from_track(cls, track: Track) -> "TrackSummary":
        return cls(
            source=track.source,
            point_count=len(track),
            duplicates_removed=track.duplicates_removed,
            start=track.start.isoformat() if track.start else None,
            end=track.end.isoformat() if track.end else None,
        )
