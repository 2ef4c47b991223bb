from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from src.common.types import ContentHash, ValidUrl, as_field_value, to_content_hash, to_valid_url


class ArticlePreview(BaseModel):
    """Article data available from the listing page alone."""

    model_config = ConfigDict(frozen=True)

    title: str = Field(min_length=1)
    link: ValidUrl
    description: str
    date: datetime

    @field_validator("link")
    @classmethod
    def _require_absolute_link(cls, value: str) -> ValidUrl:
        return as_field_value(to_valid_url, value)


class Article(ArticlePreview):
    """Preview enriched with its detail-page content and content hash."""

    id: ContentHash
    content: str

    @field_validator("id")
    @classmethod
    def _require_content_hash(cls, value: str) -> ContentHash:
        return as_field_value(to_content_hash, value)
