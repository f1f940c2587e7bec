"""General utility helpers shared across modules."""

from __future__ import annotations

from datetime import datetime, timezone
import math
from typing import Any


def parse_iso_datetime(value: Any) -> datetime | None:
    """Parse an ISO 8601 timestamp, accepting a trailing ``Z`` for UTC.

    ``datetime`` instances are returned unchanged; anything unparsable yields
    ``None``.
    """

    if isinstance(value, datetime):
        return value
    if not isinstance(value, str):
        return None
    text = value.strip()
    if not text:
        return None
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        return None


def to_utc_aware(value: datetime) -> datetime:
    """Return ``value`` as a UTC-aware datetime (naive values are taken as UTC)."""

    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves rounded towards +infinity."""

    return int(math.floor(value + 0.5))


def format_time(seconds: float | None) -> str:
    """Format seconds as ``m:ss`` or ``h:mm:ss`` (``--:--`` when missing)."""

    if not seconds:
        return "--:--"
    total = int(round(seconds))
    hours, remainder = divmod(total, 3600)
    mins, sec = divmod(remainder, 60)
    if hours > 0:
        return f"{hours}:{mins:02d}:{sec:02d}"
    return f"{mins}:{sec:02d}"


def format_distance(meters: float | None) -> str:
    """Format metres as kilometres with one decimal place."""

    if not meters:
        return "0 km"
    return f"{meters / 1000.0:.1f} km"


def format_time_delta(seconds: float | None) -> str:
    """Format a signed time difference such as ``+0:42`` or ``-1:05``."""

    if seconds is None:
        return "--:--"
    if seconds == 0:
        return "±0:00"
    sign = "+" if seconds > 0 else "-"
    return sign + format_time(abs(seconds))
