"""Rounding and timestamp helpers shared by the engine modules."""

from __future__ import annotations

import math
from datetime import datetime, timezone


def round_half_up(value: float) -> int:
    """Round to the nearest integer, ties upward (unlike ``round(4.5) == 4``)."""
    return math.floor(value + 0.5)


def clamp(value: int, lower: int, upper: int) -> int:
    return max(lower, min(upper, value))


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def parse_timestamp(value: str | datetime) -> datetime:
    """Parse an ISO-8601 timestamp; naive values are treated as UTC."""
    if isinstance(value, datetime):
        parsed = value
    else:
        text = value.strip()
        if text.endswith(("Z", "z")):
            text = f"{text[:-1]}+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError as exc:
            raise ValueError(f"Invalid timestamp: {value!r}") from exc

    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed


def minutes_between(start: datetime, end: datetime) -> float:
    return (end - start).total_seconds() / 60.0
