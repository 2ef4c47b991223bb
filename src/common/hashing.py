"""Content-addressed article identifiers."""

import hashlib
from datetime import date, datetime

from src.common.types import ContentHash, unsafe_content_hash


def calendar_day(value: date) -> str:
    if isinstance(value, datetime):
        value = value.date()
    return value.isoformat()


def generate_article_id(content: str, published: date) -> ContentHash:
    """MD5 of ``"<YYYY-MM-DD>|<content>"``; time of day does not participate."""
    hash_input = f"{calendar_day(published)}|{content}"
    return unsafe_content_hash(hashlib.md5(hash_input.encode("utf-8")).hexdigest())
