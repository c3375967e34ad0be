"""
Exceptions raised by the track log pipeline.
"""

from pathlib import Path
from typing import Optional


class TrackLogError(Exception):
    """Base class for all conversion failures."""


class FeedFetchError(TrackLogError):
    """A feed could not be fetched, read, or decoded."""

    def __init__(self, message: str, source: Optional[str] = None):
        super().__init__(message)
        self.source = source


class FeedShapeError(TrackLogError):
    """A decoded feed does not have the expected feature/array layout."""

    def __init__(self, message: str, source: Optional[str] = None):
        super().__init__(message)
        self.source = source


class NoTrackDataError(TrackLogError):
    """Every source was skipped, so there is nothing to write."""


class TrackLogWriteError(TrackLogError):
    """The output directory or file could not be written."""

    def __init__(self, message: str, path: Path):
        super().__init__(f"{message}: {path}")
        self.path = path
