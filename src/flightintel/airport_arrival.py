"""Recommended airport arrival time."""

from __future__ import annotations

import math
from datetime import datetime, timedelta

from .connection_risk import is_likely_international
from .helpers import parse_timestamp
from .schemas import AirportArrivalResult

DOMESTIC_BUFFER_HOURS = 2
INTERNATIONAL_BUFFER_HOURS = 3
DELAY_ADJUSTMENT_THRESHOLD = 20


def get_recommended_arrival(
    departure_time: str | datetime,
    origin: str,
    destination: str,
    current_delay_minutes: int = 0,
) -> AirportArrivalResult:
    """Departure minus a 2h/3h buffer, pushed back by half of any delay over 20 min.

    Differing first letters of the two IATA codes count as international.
    The heuristic is rough and kept deliberately; ``JFK``/``LAX`` classifies
    as international.

    Raises ``ValueError`` when ``departure_time`` is not a parseable ISO-8601
    timestamp.
    """
    departure = parse_timestamp(departure_time)
    international = is_likely_international(origin, destination)
    buffer_hours = INTERNATIONAL_BUFFER_HOURS if international else DOMESTIC_BUFFER_HOURS

    recommended = departure - timedelta(hours=buffer_hours)
    if current_delay_minutes > DELAY_ADJUSTMENT_THRESHOLD:
        recommended += timedelta(minutes=math.floor(current_delay_minutes * 0.5))

    return AirportArrivalResult(
        recommended_time=recommended,
        buffer_hours=buffer_hours,
        label="International" if international else "Domestic",
    )


def format_recommended_time(result: AirportArrivalResult) -> str:
    time = result.recommended_time.strftime("%I:%M %p")
    return f"{time} ({result.label} buffer: {result.buffer_hours}h)"
