"""
Track synthesizer.

Turns extracted raw points into Tracks: drops repeated timestamps, derives
ground speed and heading from consecutive positions, and backfills the first
sample. Multi-source conversions synthesize each source independently.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, replace
from datetime import datetime
from functools import reduce
from typing import Iterable, Optional, Sequence

from tracklog.models.raw import RawPoint
from tracklog.models.track import SkippedSource, Track, TrackPoint, to_utc
from tracklog.services.extractor import PointExtraction
from tracklog.utils.coordinates import ground_speed_kt, haversine_distance_nm, initial_bearing


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _MotionState:
    """Fold accumulator: the previous sample and the points built so far."""

    previous: TrackPoint
    points: tuple[TrackPoint, ...] = ()


def synthesize(points: Sequence[RawPoint], source: str = "") -> Track:
    """
    Build a Track from raw points of a single source.
    """
    unique = deduplicate(points)
    removed = len(points) - len(unique)
    if removed:
        logger.info(f"Dropped {removed} duplicate timestamp(s) from {source or 'track'}")

    samples = [TrackPoint.from_raw(p) for p in unique]
    samples = backfill_first(derive_motion(samples))

    return Track(source=source, points=tuple(samples), duplicates_removed=removed)


def synthesize_sources(
    extractions: Iterable[PointExtraction],
) -> tuple[list[Track], list[SkippedSource]]:
    """
    Synthesize one Track per extraction, in the order supplied.

    Sources with fewer than two points are skipped, not failed. Motion is
    never derived across a source boundary.
    """
    tracks: list[Track] = []
    skipped: list[SkippedSource] = []

    for extraction in extractions:
        if extraction.insufficient:
            reason = f"insufficient data ({len(extraction.points)} point(s))"
            logger.warning(f"Skipping {extraction.source}: {reason}")
            skipped.append(SkippedSource(source=extraction.source, reason=reason))
            continue
        track = synthesize(extraction.points, source=extraction.source)
        logger.info(f"Synthesized {len(track)} points from {extraction.source}")
        tracks.append(track)

    return tracks, skipped


def deduplicate(points: Sequence[RawPoint]) -> list[RawPoint]:
    """
    Stable filter keeping the first point of every timestamp second.
    """
    seen: set[datetime] = set()
    unique: list[RawPoint] = []
    for point in points:
        key = to_utc(point.timestamp).replace(microsecond=0)
        if key in seen:
            continue
        seen.add(key)
        unique.append(point)
    return unique


def derive_motion(samples: Sequence[TrackPoint]) -> list[TrackPoint]:
    """
    Annotate each sample with speed/heading relative to its predecessor.

    The first sample is compared with itself, so it starts out undefined.
    """
    if not samples:
        return []

    state = reduce(_motion_step, samples, _MotionState(previous=samples[0]))
    return list(state.points)


def backfill_first(samples: list[TrackPoint]) -> list[TrackPoint]:
    """Copy undefined speed/heading of the first sample from the second."""
    if len(samples) < 2:
        return samples

    first, second = samples[0], samples[1]
    speed = first.speed_kt if first.speed_kt is not None else second.speed_kt
    heading = first.heading_deg if first.heading_deg is not None else second.heading_deg
    return [replace(first, speed_kt=speed, heading_deg=heading)] + samples[1:]


def _motion_step(state: _MotionState, current: TrackPoint) -> _MotionState:
    previous = state.previous
    distance_nm = haversine_distance_nm(
        previous.latitude, previous.longitude, current.latitude, current.longitude
    )

    if distance_nm == 0:
        annotated = replace(current, speed_kt=None, heading_deg=None)
    else:
        elapsed_ms = (current.timestamp - previous.timestamp).total_seconds() * 1000
        heading = math.floor(initial_bearing(
            previous.latitude, previous.longitude, current.latitude, current.longitude
        ))
        if elapsed_ms > 0:
            speed: Optional[int] = math.floor(ground_speed_kt(distance_nm, elapsed_ms))
        else:
            logger.warning(
                f"Non-increasing time at {current.date} {current.time} "
                f"({elapsed_ms:.0f} ms over {distance_nm:.3f} nm); speed left undefined"
            )
            speed = None
        annotated = replace(current, speed_kt=speed, heading_deg=heading)

    return _MotionState(previous=current, points=state.points + (annotated,))
