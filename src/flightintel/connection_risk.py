"""Connection risk scoring for layovers and multi-leg journeys.

Connections are scored against per-airport minimum connection times (MCT),
then adjusted for hub complexity, terminal changes, self-transfers and
inbound delays. All functions are pure.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Sequence
from types import MappingProxyType

from .helpers import minutes_between, round_half_up
from .schemas import (
    ConnectionAnalysis,
    ConnectionLeg,
    ConnectionRiskLevel,
    ConnectionRiskResult,
    JourneyConnectionReport,
)

# airport -> (domestic MCT, international MCT) in minutes
MINIMUM_CONNECTION_TIMES = MappingProxyType(
    {
        "JFK": (60, 90), "LAX": (60, 90), "ORD": (60, 75), "ATL": (45, 75),
        "DFW": (50, 75), "DEN": (45, 75), "SFO": (60, 90), "MIA": (50, 90),
        "EWR": (60, 90), "IAH": (50, 90), "BOS": (50, 75), "SEA": (45, 75),
        "LHR": (60, 90), "CDG": (60, 90), "FRA": (45, 60), "AMS": (40, 50),
        "IST": (60, 90), "FCO": (50, 75), "MAD": (45, 60), "BCN": (45, 60),
        "MUC": (30, 45), "ZRH": (30, 40), "LGW": (45, 60), "VIE": (30, 45),
        "DXB": (60, 90), "DOH": (45, 60), "AUH": (45, 60),
        "HKG": (45, 60), "SIN": (45, 60), "NRT": (60, 90), "HND": (45, 75),
        "ICN": (45, 60), "BKK": (45, 60), "PEK": (60, 90), "PVG": (60, 90),
        "DEL": (45, 75), "BOM": (45, 75), "KUL": (45, 60),
        "JNB": (45, 60), "CPT": (40, 60), "NBO": (45, 60), "ACC": (30, 45),
        "LOS": (45, 60), "ADD": (40, 60), "CAI": (45, 60), "CMN": (40, 60),
        "DSS": (30, 45), "ABJ": (30, 45),
        "GRU": (60, 90), "BOG": (45, 60), "SCL": (45, 60), "EZE": (45, 75),
        "LIM": (45, 60),
        "SYD": (45, 60), "MEL": (40, 60), "AKL": (40, 60),
    }
)
DEFAULT_MCT = (45, 60)

LARGE_AIRPORTS = frozenset(
    {
        "JFK", "LHR", "CDG", "LAX", "ORD", "DXB", "ATL", "PEK",
        "HKG", "IST", "SIN", "FRA", "AMS", "GRU", "NRT", "DFW",
        "DEN", "EWR", "MIA", "SFO", "PVG",
    }
)

SEVERITY = MappingProxyType({"low": 0, "medium": 1, "high": 2, "critical": 3})

HUMAN_STATUS = MappingProxyType(
    {
        "low": "Connection looks good",
        "medium": "Tight connection",
        "high": "Connection at risk",
        "critical": "Connection likely missed",
    }
)

_DURATION_RE = re.compile(r"(\d+)h\s*(\d+)?m?")


def minimum_connection_time(airport: str, international: bool) -> int:
    domestic, intl = MINIMUM_CONNECTION_TIMES.get(airport.upper(), DEFAULT_MCT)
    return intl if international else domestic


def is_likely_international(origin: str, destination: str) -> bool:
    if len(origin) != 3 or len(destination) != 3:
        return True
    return origin[0].upper() != destination[0].upper()


def connection_level(score: int) -> ConnectionRiskLevel:
    if score >= 75:
        return "critical"
    if score >= 50:
        return "high"
    if score >= 30:
        return "medium"
    return "low"


def _base_score(margin: int, mct: int) -> tuple[int, str]:
    if margin < 0:
        return 90, f"{abs(margin)} min under minimum connection time ({mct} min MCT)"
    if margin < 15:
        return 70, f"Only {margin} min buffer above {mct} min MCT"
    if margin < 30:
        return 45, f"{margin} min buffer above MCT"
    if margin < 45:
        return 25, f"Adequate {margin} min buffer"
    return 10, f"Comfortable {margin} min buffer"


def _explain(level: ConnectionRiskLevel, score: int, minutes: int, airport: str) -> str:
    if level == "critical":
        return (
            f"Very likely to miss your connection at {airport} ({score}% risk). "
            "Talk to your airline now."
        )
    if level == "high":
        return (
            f"Your connection at {airport} is at risk ({score}% risk). "
            "Move quickly once you land."
        )
    if level == "medium":
        return f"Tight but doable: {minutes} min to make your next flight at {airport}."
    return f"Connection looks safe. {minutes} min layover at {airport}."


def analyze_connection(
    arriving: ConnectionLeg,
    departing: ConnectionLeg,
    arriving_leg_index: int = 0,
    departing_leg_index: int = 1,
) -> ConnectionAnalysis:
    """Score the connection between two consecutive legs (0-100)."""
    arrival_time = arriving.estimated_arrival or arriving.scheduled_arrival
    departure_time = departing.estimated_departure or departing.scheduled_departure
    minutes = round_half_up(minutes_between(arrival_time, departure_time))

    airport = arriving.arrival_airport.upper()
    international = is_likely_international(arriving.departure_airport, departing.arrival_airport)
    mct = minimum_connection_time(airport, international)
    score, headline = _base_score(minutes - mct, mct)
    factors = [headline]

    if airport in LARGE_AIRPORTS:
        score = min(100, score + 10)
        factors.append(f"Large / complex airport ({airport})")

    terminal_change = bool(
        arriving.arrival_terminal
        and departing.departure_terminal
        and arriving.arrival_terminal != departing.departure_terminal
    )
    if terminal_change:
        score = min(100, score + 15)
        factors.append(
            f"Terminal change: T{arriving.arrival_terminal} → T{departing.departure_terminal}"
        )

    self_transfer = arriving.airline_code.upper() != departing.airline_code.upper()
    if self_transfer:
        score = min(100, score + 20)
        factors.append(f"Self-transfer ({arriving.airline_code} → {departing.airline_code})")

    if arriving.arrival_delay_minutes > 15:
        score = min(100, score + min(20, round_half_up(arriving.arrival_delay_minutes / 3)))
        factors.append(f"Inbound delayed {arriving.arrival_delay_minutes} min")

    score = max(0, min(100, score))
    level = connection_level(score)

    return ConnectionAnalysis(
        connection_airport=airport,
        minutes_to_next_flight=minutes,
        minimum_connection_time=mct,
        risk_score=score,
        risk_level=level,
        human_status=HUMAN_STATUS[level],
        human_explanation=_explain(level, score, minutes, airport),
        terminal_change=terminal_change,
        arriving_terminal=arriving.arrival_terminal,
        departing_terminal=departing.departure_terminal,
        self_transfer=self_transfer,
        factors=factors,
        arriving_leg_index=arriving_leg_index,
        departing_leg_index=departing_leg_index,
    )


def worst_risk_level(connections: Iterable[ConnectionAnalysis]) -> ConnectionRiskLevel:
    worst: ConnectionRiskLevel = "low"
    for connection in connections:
        if SEVERITY[connection.risk_level] > SEVERITY[worst]:
            worst = connection.risk_level
    return worst


def summarize_connections(
    connections: Sequence[ConnectionAnalysis],
    leg_count: int | None = None,
) -> JourneyConnectionReport:
    """Aggregate per-connection analyses into a journey-level report."""
    legs = leg_count if leg_count is not None else len(connections) + 1
    worst = worst_risk_level(connections)
    return JourneyConnectionReport(
        is_multi_leg=legs >= 2,
        connection_count=len(connections),
        connections=list(connections),
        worst_risk_level=worst,
        overall_human_status=HUMAN_STATUS[worst],
    )


def _leg_position(leg: ConnectionLeg, position: int) -> int:
    return leg.leg_index if leg.leg_index is not None else position


def analyze_journey(legs: Sequence[ConnectionLeg]) -> JourneyConnectionReport:
    """Analyze every connection of an itinerary, ordered by scheduled departure."""
    if len(legs) < 2:
        return summarize_connections([], leg_count=len(legs))

    ordered = sorted(enumerate(legs), key=lambda item: item[1].scheduled_departure)
    connections: list[ConnectionAnalysis] = []
    for position in range(len(ordered) - 1):
        arriving_pos, arriving = ordered[position]
        departing_pos, departing = ordered[position + 1]
        if arriving.arrival_airport.upper() != departing.departure_airport.upper():
            continue
        connections.append(
            analyze_connection(
                arriving,
                departing,
                arriving_leg_index=_leg_position(arriving, arriving_pos),
                departing_leg_index=_leg_position(departing, departing_pos),
            )
        )
    return summarize_connections(connections, leg_count=len(legs))


def _classify_layover(
    minutes: float, scores: tuple[int, int, int]
) -> tuple[int, ConnectionRiskLevel]:
    high, medium, low = scores
    if minutes < 45:
        return high, "high"
    if minutes < 75:
        return medium, "medium"
    return low, "low"


def get_connection_risk(layover_minutes: int) -> ConnectionRiskResult:
    """Classify a raw layover: high under 45 min, tight under 75, else safe."""
    score, level = _classify_layover(layover_minutes, (80, 45, 10))
    return ConnectionRiskResult(
        score=score,
        level=level,
        label=level.upper(),
        minutes_buffer=layover_minutes,
        effective_minutes=layover_minutes,
        explanation=f"{layover_minutes} min layover",
        factors=[],
    )


def parse_duration_minutes(duration: str) -> int | None:
    match = _DURATION_RE.search(duration)
    if not match:
        return None
    return int(match.group(1)) * 60 + int(match.group(2) or 0)


def estimate_connection_risk_from_stops(stops: int, duration: str) -> ConnectionRiskResult | None:
    """Estimate layover risk for a search offer from stop count and total duration."""
    if stops <= 0:
        return None
    total = parse_duration_minutes(duration)
    if total is None:
        return None

    average_layover = (total - total / (stops + 1)) / stops
    score, level = _classify_layover(average_layover, (75, 45, 15))
    rounded = round_half_up(average_layover)
    return ConnectionRiskResult(
        score=score,
        level=level,
        label=level.upper(),
        minutes_buffer=rounded - 60,
        effective_minutes=rounded,
        explanation=f"~{rounded} min layover per stop",
        factors=[f"{stops} stop(s), ~{rounded} min per layover"],
    )
