"""
Conversion pipeline: feed sources -> track log.

Each source is loaded, extracted and synthesized on its own, in the order
given. Feed errors either abort the whole conversion or skip the source,
depending on the configured policy.
"""

from __future__ import annotations

import logging
import os
from functools import partial
from pathlib import Path
from typing import Callable, Iterable, Optional, Sequence

from tracklog.errors import FeedFetchError, FeedShapeError, NoTrackDataError
from tracklog.models.raw import Feed
from tracklog.models.track import AirframeInfo, SkippedSource, TrackLog
from tracklog.services.extractor import TRAJECTORY_FEATURE_INDEX, PointExtraction, extract
from tracklog.services.feed_loader import FETCH_TIMEOUT_S, load_feed
from tracklog.services.synthesizer import synthesize_sources
from tracklog.services.writer import write_tracklog


logger = logging.getLogger(__name__)


FEED_ERROR_POLICIES = ("abort", "skip")
ON_FEED_ERROR = os.getenv("TRACKLOG_ON_FEED_ERROR", "abort")

FeedLoader = Callable[[str], Feed]


def build_tracklog(
    feeds: Iterable[Feed],
    airframe: AirframeInfo,
    feature_index: int = TRAJECTORY_FEATURE_INDEX,
    on_feed_error: str = ON_FEED_ERROR,
) -> TrackLog:
    """
    Build a track log from already-decoded feeds.
    """
    _check_policy(on_feed_error)

    extractions: list[PointExtraction] = []
    skipped: list[SkippedSource] = []
    for feed in feeds:
        try:
            extractions.append(extract(feed, feature_index))
        except FeedShapeError as e:
            if on_feed_error == "abort":
                raise
            skipped.append(_skip(feed.source or feed.name, e))

    return _assemble(airframe, extractions, skipped)


def convert_sources(
    sources: Sequence[str],
    airframe: AirframeInfo,
    feature_index: int = TRAJECTORY_FEATURE_INDEX,
    on_feed_error: str = ON_FEED_ERROR,
    timeout: float = FETCH_TIMEOUT_S,
    loader: Optional[FeedLoader] = None,
) -> TrackLog:
    """
    Load every source (URL or file path) and build a track log.

    Raises:
        FeedFetchError / FeedShapeError: under the "abort" policy
        NoTrackDataError: every source was skipped
    """
    _check_policy(on_feed_error)
    if loader is None:
        loader = partial(load_feed, timeout=timeout)

    extractions: list[PointExtraction] = []
    skipped: list[SkippedSource] = []
    for source in sources:
        try:
            extractions.append(extract(loader(source), feature_index))
        except (FeedFetchError, FeedShapeError) as e:
            if on_feed_error == "abort":
                raise
            skipped.append(_skip(source, e))

    return _assemble(airframe, extractions, skipped)


def convert(
    sources: Sequence[str],
    ident: str,
    model: str,
    output: Optional[Path] = None,
    output_dir: Optional[Path] = None,
    feature_index: int = TRAJECTORY_FEATURE_INDEX,
    on_feed_error: str = ON_FEED_ERROR,
    timeout: float = FETCH_TIMEOUT_S,
    loader: Optional[FeedLoader] = None,
) -> tuple[TrackLog, Path]:
    """
    Convert sources and write the G1000 file.

    Returns:
        Tuple of (TrackLog, written path)
    """
    tracklog = convert_sources(
        sources,
        AirframeInfo(ident=ident, model=model),
        feature_index=feature_index,
        on_feed_error=on_feed_error,
        timeout=timeout,
        loader=loader,
    )
    path = write_tracklog(tracklog, output=output, output_dir=output_dir)
    return tracklog, path


def _assemble(
    airframe: AirframeInfo,
    extractions: list[PointExtraction],
    skipped: list[SkippedSource],
) -> TrackLog:
    tracks, insufficient = synthesize_sources(extractions)
    tracklog = TrackLog(airframe=airframe, tracks=tracks, skipped=skipped + insufficient)

    if not tracks:
        raise NoTrackDataError(
            f"No usable track data: all {len(tracklog.skipped)} source(s) were skipped"
        )

    logger.info(
        f"Track log for {airframe.system_id}: {tracklog.row_count} rows "
        f"from {len(tracks)} source(s), {len(tracklog.skipped)} skipped"
    )
    return tracklog


def _skip(source: str, error: Exception) -> SkippedSource:
    logger.warning(f"Skipping {source}: {error}")
    return SkippedSource(source=source, reason=str(error))


def _check_policy(on_feed_error: str) -> None:
    if on_feed_error not in FEED_ERROR_POLICIES:
        raise ValueError(
            f"Unknown feed error policy: {on_feed_error!r} (expected one of {FEED_ERROR_POLICIES})"
        )
