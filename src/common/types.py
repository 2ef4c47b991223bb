"""Validated string types.

Each type is only obtained through its ``to_*`` factory, which raises
``TypeError`` on invalid input. ``unsafe_content_hash`` skips validation and
exists for digests that were just computed.
"""

import re
from collections.abc import Callable
from datetime import datetime, timezone
from typing import NewType, TypeVar

from src.common.links import is_valid_url

ContentHash = NewType("ContentHash", str)
ValidUrl = NewType("ValidUrl", str)
IsoTimestamp = NewType("IsoTimestamp", str)

T = TypeVar("T")

_CONTENT_HASH_RE = re.compile(r"^[a-f0-9]{32}$")


def is_content_hash(value: str) -> bool:
    return bool(_CONTENT_HASH_RE.match(value))


def is_iso_timestamp(value: str) -> bool:
    if "T" not in value:
        return False
    try:
        datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return False
    return True


def to_content_hash(value: str) -> ContentHash:
    if not is_content_hash(value):
        raise TypeError(f"Invalid content hash: {value!r}")
    return ContentHash(value)


def to_valid_url(value: str) -> ValidUrl:
    if not is_valid_url(value):
        raise TypeError(f"Invalid URL: {value!r}")
    return ValidUrl(value)


def to_iso_timestamp(value: str) -> IsoTimestamp:
    if not is_iso_timestamp(value):
        raise TypeError(f"Invalid ISO-8601 timestamp: {value!r}")
    return IsoTimestamp(value)


def unsafe_content_hash(value: str) -> ContentHash:
    return ContentHash(value)


def as_field_value(factory: Callable[[str], T], value: str) -> T:
    """Run a ``to_*`` factory inside a pydantic validator.

    pydantic only reports ``ValueError``, so the factory's ``TypeError`` is
    re-raised as one.
    """
    try:
        return factory(value)
    except TypeError as exc:
        raise ValueError(str(exc)) from exc


def format_timestamp(moment: datetime) -> IsoTimestamp:
    """UTC timestamp with millisecond precision and a trailing ``Z``."""
    utc = moment.astimezone(timezone.utc)
    return IsoTimestamp(utc.isoformat(timespec="milliseconds").replace("+00:00", "Z"))
