"""
Raw flight-track model (source-format, unnormalized).

Feed adapters decode source documents into Feed/FeedFeature; the point
extractor turns the trajectory feature into RawPoint samples before synthesis.
"""

import math
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional


FEET_PER_METER = 3.280839895


@dataclass
class FeedFeature:
    """One named geometric feature of a feed (origin, destination, trajectory)."""

    name: str
    coordinates: Optional[list[list[float]]]  # [lon, lat, altitude_m]
    times: Optional[list[str]] = None          # ISO-8601, parallel to coordinates


@dataclass
class Feed:
    """A decoded flight-track document."""

    name: str
    features: list[FeedFeature] = field(default_factory=list)
    source: str = ""


@dataclass(frozen=True)
class RawPoint:
    """A single decoded coordinate/time pair."""

    longitude: float
    latitude: float
    altitude_m: float
    timestamp: datetime  # timezone-aware, UTC

    @property
    def altitude_ft(self) -> int:
        # Halves round up
        return math.floor(self.altitude_m * FEET_PER_METER + 0.5)
