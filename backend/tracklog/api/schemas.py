"""
API schemas (Pydantic models) for request/response validation.
"""

from typing import Any, Literal, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from tracklog.services.extractor import TRAJECTORY_FEATURE_INDEX
from tracklog.services.feed_loader import is_url


# ============================================================================
# Conversion Schemas
# ============================================================================

class FeedSourceRequest(BaseModel):
    """A single feed: either an http(s) URL to fetch or an inline GeoJSON document."""
    url: Optional[str] = None
    feed: Optional[dict[str, Any]] = None
    name: Optional[str] = None

    @field_validator("url")
    @classmethod
    def _remote_only(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and not is_url(value):
            raise ValueError("url must be an http or https URL")
        return value

    @model_validator(mode="after")
    def _exactly_one(self) -> "FeedSourceRequest":
        if (self.url is None) == (self.feed is None):
            raise ValueError("Provide exactly one of 'url' or 'feed'")
        return self


class TrackLogRequest(BaseModel):
    """Conversion request: airframe identification plus ordered sources."""
    ident: str = Field(..., min_length=1, description="Aircraft registration, e.g. N12345")
    model: str = Field(..., min_length=1, description="Aircraft model, e.g. C172")
    sources: list[FeedSourceRequest] = Field(..., min_length=1)
    feature_index: int = Field(TRAJECTORY_FEATURE_INDEX, ge=0)
    on_feed_error: Optional[Literal["abort", "skip"]] = Field(
        None, description="Defaults to the server's configured policy"
    )


class TrackSummaryResponse(BaseModel):
    """Summary of one synthesized track."""
    source: str
    point_count: int
    duplicates_removed: int
    start: Optional[str] = None
    end: Optional[str] = None


class SkippedSourceResponse(BaseModel):
    """A source left out of the track log."""
    source: str
    reason: str


class TrackLogResponse(BaseModel):
    """Converted track log with its rendered CSV."""
    filename: str
    ident: str
    model: str
    start: str
    row_count: int
    tracks: list[TrackSummaryResponse]
    skipped: list[SkippedSourceResponse]
    csv: str
