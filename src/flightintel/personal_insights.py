"""Personal travel pattern mining over a user's flight history.

Needs at least three flights; fewer gives unreliable patterns. Miners run
in a fixed order and the first four insights that qualify are surfaced.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Callable, Sequence
from types import MappingProxyType

from .helpers import round_half_up
from .schemas import HistoricalFlight, TravelInsight

MIN_HISTORY = 3
MAX_INSIGHTS = 4
SIGNIFICANT_DELAY_MINUTES = 15

DAYS = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")

ON_TIME_NOTES = MappingProxyType(
    {
        "morning": "12% more on-time on average",
        "evening": "18% more delay-prone historically",
    }
)


def _top(counts: Counter) -> tuple[object, int] | None:
    # max() keeps the first key among ties, i.e. the first seen in history
    if not counts:
        return None
    return max(counts.items(), key=lambda item: item[1])


def _route_frequency(flights: Sequence[HistoricalFlight]) -> TravelInsight | None:
    top = _top(Counter(f"{f.departure_airport} → {f.arrival_airport}" for f in flights))
    if top is None or top[1] < 2:
        return None
    route, count = top
    return TravelInsight(
        type="route_frequency",
        title="Frequent Route",
        description=f"You've flown {route} {count} times. We'll optimize alerts for this route.",
        emoji="✈️",
        confidence="high" if count >= 3 else "medium",
    )


def _day_preference(flights: Sequence[HistoricalFlight]) -> TravelInsight | None:
    top = _top(Counter(f.scheduled_departure.weekday() for f in flights))
    if top is None or top[1] < 2:
        return None
    weekday, count = top
    day_name = DAYS[weekday]
    framing = "quieter with fewer delays" if weekday >= 5 else "busier, consider early departures"
    return TravelInsight(
        type="timing_preference",
        title="Travel Pattern",
        description=f"You usually fly on {day_name}s. {day_name} flights tend to be {framing}.",
        emoji="📅",
        confidence="high" if count >= 3 else "medium",
    )


def _time_bucket(hour: int) -> str:
    if hour < 12:
        return "morning"
    if hour < 17:
        return "afternoon"
    if hour < 21:
        return "evening"
    return "night"


def _time_preference(flights: Sequence[HistoricalFlight]) -> TravelInsight | None:
    buckets = Counter({"morning": 0, "afternoon": 0, "evening": 0, "night": 0})
    buckets.update(_time_bucket(f.scheduled_departure.hour) for f in flights)
    bucket, count = _top(buckets)
    if count < 2:
        return None
    note = ON_TIME_NOTES.get(bucket, "average on-time rate")
    return TravelInsight(
        type="timing_preference",
        title="Time Preference",
        description=(
            f"You prefer {bucket} departures. "
            f"{bucket.capitalize()} flights typically have {note}."
        ),
        emoji="🕐",
        confidence="medium",
    )


def _airline_loyalty(flights: Sequence[HistoricalFlight]) -> TravelInsight | None:
    counts = Counter(f.airline_code for f in flights)
    if len(counts) < 2:
        return None
    top = _top(counts)
    if top is None or top[1] < 2:
        return None
    code, count = top

    name = None
    for flight in flights:
        if flight.airline_code == code and flight.airline_name:
            name = flight.airline_name
    pct = round_half_up(count / len(flights) * 100)
    return TravelInsight(
        type="airline_loyalty",
        title="Airline Preference",
        description=(
            f"{pct}% of your flights are with {name or code}. "
            "Pattern data is improving your predictions."
        ),
        emoji="🏷️",
        confidence="high" if count >= 3 else "medium",
    )


def _delay_pattern(flights: Sequence[HistoricalFlight]) -> TravelInsight | None:
    delayed = [f for f in flights if f.departure_delay_minutes > SIGNIFICANT_DELAY_MINUTES]
    if len(delayed) < 2:
        return None

    average = round_half_up(sum(f.departure_delay_minutes for f in delayed) / len(delayed))
    description = f"You've experienced {len(delayed)} significant delays (avg {average} min)."
    worst = _top(Counter(f.airline_code for f in delayed))
    if worst is not None and worst[1] >= 2:
        description += f" Most were on {worst[0]}."
    return TravelInsight(
        type="delay_pattern",
        title="Delay History",
        description=description,
        emoji="⏱️",
        confidence="high" if len(delayed) >= 3 else "medium",
    )


def _airport_familiarity(flights: Sequence[HistoricalFlight]) -> TravelInsight | None:
    counts: Counter = Counter()
    for flight in flights:
        counts[flight.departure_airport] += 1
        counts[flight.arrival_airport] += 1
    top = _top(counts)
    if top is None or top[1] < 3:
        return None
    airport, count = top
    return TravelInsight(
        type="airport_familiarity",
        title="Home Airport",
        description=(
            f"{airport} is your most used airport ({count} flights). "
            "Intelligence prioritized for this hub."
        ),
        emoji="🏠",
        confidence="high",
    )


MINERS: tuple[Callable[[Sequence[HistoricalFlight]], TravelInsight | None], ...] = (
    _route_frequency,
    _day_preference,
    _time_preference,
    _airline_loyalty,
    _delay_pattern,
    _airport_familiarity,
)


def generate_travel_insights(flights: Sequence[HistoricalFlight]) -> list[TravelInsight]:
    """Return up to four insights; empty below three flights."""
    if len(flights) < MIN_HISTORY:
        return []

    insights: list[TravelInsight] = []
    for miner in MINERS:
        insight = miner(flights)
        if insight is not None:
            insights.append(insight)
    return insights[:MAX_INSIGHTS]
