"""German date parsing.

Handles relative phrases ("vor 2 Stunden", "gestern", "heute") and absolute
dates ("15. Januar 2024", "15.01.2024", "2024-01-15"). Relative phrases always
take precedence over absolute dates found in the same text.
"""

import logging
import re
from datetime import datetime, timedelta, timezone, tzinfo
from zoneinfo import ZoneInfo

logger = logging.getLogger(__name__)

DEFAULT_TIMEZONE = ZoneInfo("Europe/Berlin")

GERMAN_MONTHS = {
    "januar": 1,
    "februar": 2,
    "märz": 3,
    "maerz": 3,
    "april": 4,
    "mai": 5,
    "juni": 6,
    "juli": 7,
    "august": 8,
    "september": 9,
    "oktober": 10,
    "november": 11,
    "dezember": 12,
}

_RELATIVE_PATTERNS = (
    (re.compile(r"vor\s+(\d+)\s+Stunden?", re.IGNORECASE), "hours"),
    (re.compile(r"vor\s+(\d+)\s+Minuten?", re.IGNORECASE), "minutes"),
    (re.compile(r"vor\s+(\d+)\s+Tag(?:en)?", re.IGNORECASE), "days"),
)
_YESTERDAY_RE = re.compile(r"gestern", re.IGNORECASE)
_TODAY_RE = re.compile(r"heute", re.IGNORECASE)

_MONTH_NAME_RE = re.compile(r"(\d{1,2})\.\s+([a-zäöüß]+)\s+(\d{4})", re.IGNORECASE)
_NUMERIC_RE = re.compile(r"(\d{1,2})\.(\d{1,2})\.(\d{4})")
_ISO_RE = re.compile(r"(\d{4})-(\d{2})-(\d{2})")


def parse_german_date(
    text: str,
    reference: datetime | None = None,
    tz: tzinfo = DEFAULT_TIMEZONE,
) -> datetime:
    """Parse ``text`` into an aware datetime.

    Never raises: unparseable input falls back to ``reference`` (the current
    time when not given) and a warning is logged.
    """
    now = reference if reference is not None else datetime.now(tz)
    trimmed = (text or "").strip()

    relative = _parse_relative(trimmed, now)
    if relative is not None:
        return relative

    absolute = _parse_absolute(trimmed, tz)
    if absolute is not None:
        return absolute

    logger.warning("Could not parse date %r, using current date", trimmed)
    return now


def _parse_relative(text: str, reference: datetime) -> datetime | None:
    for pattern, unit in _RELATIVE_PATTERNS:
        match = pattern.search(text)
        if match:
            return _elapsed_before(reference, timedelta(**{unit: int(match.group(1))}))

    if _YESTERDAY_RE.search(text):
        return _elapsed_before(reference, timedelta(days=1))
    if _TODAY_RE.search(text):
        return reference
    return None


def _elapsed_before(reference: datetime, delta: timedelta) -> datetime:
    """Subtract real elapsed time, so DST changes do not shift the result."""
    if reference.tzinfo is None:
        return reference - delta
    return (reference.astimezone(timezone.utc) - delta).astimezone(reference.tzinfo)


def _parse_absolute(text: str, tz: tzinfo) -> datetime | None:
    match = _MONTH_NAME_RE.search(text)
    if match:
        day, month_name, year = match.groups()
        month = GERMAN_MONTHS.get(month_name.lower())
        if month is not None:
            parsed = _build_date(int(year), month, int(day), tz)
            if parsed is not None:
                return parsed

    match = _NUMERIC_RE.search(text)
    if match:
        day, month, year = match.groups()
        parsed = _build_date(int(year), int(month), int(day), tz)
        if parsed is not None:
            return parsed

    match = _ISO_RE.search(text)
    if match:
        year, month, day = match.groups()
        return _build_date(int(year), int(month), int(day), tz)

    return None


def _build_date(year: int, month: int, day: int, tz: tzinfo) -> datetime | None:
    try:
        return datetime(year, month, day, tzinfo=tz)
    except ValueError:
        logger.debug("Ignoring impossible date %04d-%02d-%02d", year, month, day)
        return None
