"""Calendar-day bucketing of commit timestamps."""

from datetime import date, datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Any

from gitqa.config import UNKNOWN_BUCKET

# git log's default --date format, e.g. "Thu May 1 10:00:00 2025 +0200"
GIT_DEFAULT_DATE_FORMAT = "%a %b %d %H:%M:%S %Y %z"

# Formats fromisoformat() rejects before Python 3.11: git's --date=iso
# ("2025-05-01 10:00:00 +0200"), offsets without a colon, and fractional
# seconds that are not 3 or 6 digits
DATE_FORMATS = (
    GIT_DEFAULT_DATE_FORMAT,
    "%Y-%m-%d %H:%M:%S %z",
    "%Y-%m-%d %H:%M:%S.%f %z",
    "%Y-%m-%dT%H:%M:%S%z",
    "%Y-%m-%dT%H:%M:%S.%f%z",
    "%Y-%m-%dT%H:%M:%S.%f",
)


def _parse_string(value: str) -> datetime | date | None:
    text = value.strip()
    if not text:
        return None

    iso_text = text[:-1] + "+00:00" if text.endswith(("Z", "z")) else text
    try:
        return datetime.fromisoformat(iso_text)
    except ValueError:
        pass

    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(iso_text, fmt)
        except ValueError:
            continue

    try:
        return parsedate_to_datetime(text)
    except (TypeError, ValueError, IndexError):
        return None


def parse_timestamp(timestamp: Any) -> datetime | date | None:
    """Parse a commit timestamp.

    Args:
        timestamp: datetime, date, ISO-8601 / RFC-2822 / git default
            string, or epoch seconds

    Returns:
        Parsed value, or None when it cannot be interpreted
    """
    if isinstance(timestamp, (datetime, date)):
        return timestamp
    if isinstance(timestamp, bool):
        return None
    if isinstance(timestamp, (int, float)):
        try:
            return datetime.fromtimestamp(timestamp, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None
    if isinstance(timestamp, str):
        return _parse_string(timestamp)
    return None


def bucket_day(timestamp: Any) -> str:
    """Normalize a timestamp into a ``YYYY-MM-DD`` day bucket.

    Timezone-aware values are converted to UTC first. Unparseable input
    lands in the ``"unknown"`` bucket.
    """
    parsed = parse_timestamp(timestamp)
    if parsed is None:
        return UNKNOWN_BUCKET

    if isinstance(parsed, datetime):
        if parsed.tzinfo is not None:
            parsed = parsed.astimezone(timezone.utc)
        parsed = parsed.date()

    return f"{parsed.year:04d}-{parsed.month:02d}-{parsed.day:02d}"
