from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator

from src.common.types import (
    ContentHash,
    IsoTimestamp,
    ValidUrl,
    as_field_value,
    to_content_hash,
    to_iso_timestamp,
    to_valid_url,
)
from src.modules.scraper.schemas import Article


class TrackingEntry(BaseModel):
    """Last-seen metadata for one content hash."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    content_hash: ContentHash = Field(alias="contentHash")
    last_seen: IsoTimestamp = Field(alias="lastSeen")
    link: ValidUrl

    @field_validator("content_hash")
    @classmethod
    def _require_content_hash(cls, value: str) -> ContentHash:
        return as_field_value(to_content_hash, value)

    @field_validator("last_seen")
    @classmethod
    def _require_iso_timestamp(cls, value: str) -> IsoTimestamp:
        return as_field_value(to_iso_timestamp, value)

    @field_validator("link")
    @classmethod
    def _require_absolute_link(cls, value: str) -> ValidUrl:
        return as_field_value(to_valid_url, value)


TrackingStore = dict[str, TrackingEntry]

tracking_store_adapter = TypeAdapter(TrackingStore)


class ReconcileResult(BaseModel):
    """Classified articles plus the tracking store for the next run."""

    new: list[Article]
    updated: list[Article]
    unchanged_count: int
    next_tracking: TrackingStore
