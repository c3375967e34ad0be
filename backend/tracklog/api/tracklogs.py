"""
API routes for track log conversion.
"""

import logging

from fastapi import APIRouter, HTTPException, Response

from tracklog.api.schemas import (
    FeedSourceRequest,
    SkippedSourceResponse,
    TrackLogRequest,
    TrackLogResponse,
    TrackSummaryResponse,
)
from tracklog.errors import FeedFetchError, FeedShapeError, NoTrackDataError
from tracklog.models.raw import Feed
from tracklog.models.track import AirframeInfo, TrackLog, TrackSummary
from tracklog.services import converter
from tracklog.services.feed_loader import feed_from_geojson, load_feed
from tracklog.services.g1000 import default_filename, render_tracklog


logger = logging.getLogger(__name__)


router = APIRouter(prefix="/tracklogs", tags=["tracklogs"])


def _source_keys(sources: list[FeedSourceRequest]) -> list[str]:
    """Unique label per source; inline feeds get their name or position."""
    keys: list[str] = []
    for i, source in enumerate(sources):
        key = source.url if source.url is not None else (source.name or f"feed-{i}")
        while key in keys:
            key = f"{key}#{i}"
        keys.append(key)
    return keys


def _build_tracklog(request: TrackLogRequest) -> TrackLog:
    """Run the conversion, mapping pipeline errors to HTTP errors."""
    keys = _source_keys(request.sources)
    by_key = dict(zip(keys, request.sources))

    def loader(key: str) -> Feed:
        source = by_key[key]
        if source.feed is not None:
            return feed_from_geojson(source.feed, source=key)
        return load_feed(source.url)

    try:
        return converter.convert_sources(
            keys,
            AirframeInfo(ident=request.ident, model=request.model),
            feature_index=request.feature_index,
            on_feed_error=request.on_feed_error or converter.ON_FEED_ERROR,
            loader=loader,
        )
    except FeedFetchError as e:
        logger.warning(f"Feed fetch failed: {e}")
        raise HTTPException(status_code=502, detail=str(e))
    except (FeedShapeError, NoTrackDataError) as e:
        raise HTTPException(status_code=422, detail=str(e))


@router.post("", response_model=TrackLogResponse)
def create_tracklog(request: TrackLogRequest):
    """
    Convert one or more feeds into a G1000 track log.

    Sources are processed in order; their rows are concatenated and the
    first usable source names the file.
    """
    tracklog = _build_tracklog(request)

    return TrackLogResponse(
        filename=default_filename(tracklog.airframe, tracklog.start),
        ident=tracklog.airframe.system_id,
        model=tracklog.airframe.airframe_name,
        start=tracklog.start.isoformat(),
        row_count=tracklog.row_count,
        tracks=[
            TrackSummaryResponse(**vars(TrackSummary.from_track(t)))
            for t in tracklog.tracks
        ],
        skipped=[
            SkippedSourceResponse(source=s.source, reason=s.reason)
            for s in tracklog.skipped
        ],
        csv=render_tracklog(tracklog),
    )


@router.post("/csv")
def download_tracklog(request: TrackLogRequest):
    """
    Convert feeds and return the track log as a CSV attachment.
    """
    tracklog = _build_tracklog(request)
    filename = default_filename(tracklog.airframe, tracklog.start)

    return Response(
        content=render_tracklog(tracklog),
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
