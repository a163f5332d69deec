"""Deterministic departure delay scoring."""

from __future__ import annotations

import logging
from types import MappingProxyType

from .helpers import clamp, round_half_up
from .schemas import (
    Confidence,
    DelayFactor,
    DelayPrediction,
    FlightFacts,
    RiskLevel,
    SearchOffer,
    TrackedFlight,
)

logger = logging.getLogger(__name__)

BASELINE_PROBABILITY = 10
MIN_PROBABILITY = 5
MAX_PROBABILITY = 95
DEFAULT_CONGESTION = 0.3
NO_SIGNAL_REASON = "No significant delay signals"

# Congestion index in [0, 1] per departure airport.
AIRPORT_CONGESTION = MappingProxyType(
    {
        # North America
        "ATL": 0.55, "ORD": 0.70, "LAX": 0.60, "DFW": 0.50, "DEN": 0.50,
        "JFK": 0.65, "EWR": 0.80, "LGA": 0.80, "SFO": 0.70, "BOS": 0.60,
        "MIA": 0.50, "IAH": 0.50, "SEA": 0.40, "PHL": 0.55, "YYZ": 0.55,
        "MEX": 0.60,
        # Europe
        "LHR": 0.75, "LGW": 0.55, "CDG": 0.60, "FRA": 0.55, "AMS": 0.50,
        "IST": 0.55, "MAD": 0.40, "FCO": 0.45,
        # Middle East and Asia
        "DXB": 0.60, "DOH": 0.35, "SIN": 0.30, "HKG": 0.45, "HND": 0.50,
        "PEK": 0.60, "PVG": 0.60, "DEL": 0.60, "BOM": 0.65,
        # Africa, South America, Oceania
        "LOS": 0.55, "ACC": 0.35, "JNB": 0.35, "GRU": 0.55, "SYD": 0.40,
    }
)

# (upper bound hour exclusive, multiplier, label)
TIME_OF_DAY_STEPS = (
    (7, 0.6, "night"),
    (10, 0.8, "morning"),
    (14, 1.0, "midday"),
    (17, 1.15, "afternoon"),
    (20, 1.3, "evening"),
    (24, 1.1, "late evening"),
)


def route_hash(origin: str, destination: str) -> int:
    """32-bit signed polynomial hash of ``ORIGIN-DEST``, absolute value."""
    key = f"{origin.upper()}-{destination.upper()}"
    value = 0
    for char in key:
        value = (value * 31 + ord(char)) & 0xFFFFFFFF
    if value >= 0x80000000:
        value -= 0x100000000
    return abs(value)


def route_delay_rate(origin: str, destination: str) -> float:
    """Stand-in historical delay rate for a route, 0.00 to 0.39."""
    return (route_hash(origin, destination) % 40) / 100


def airport_congestion(airport: str) -> float:
    return AIRPORT_CONGESTION.get(airport.upper(), DEFAULT_CONGESTION)


def time_of_day_multiplier(hour: int) -> tuple[float, str]:
    for upper, multiplier, label in TIME_OF_DAY_STEPS:
        if hour < upper:
            return multiplier, label
    return TIME_OF_DAY_STEPS[-1][1], TIME_OF_DAY_STEPS[-1][2]


def level_for_probability(probability: int) -> RiskLevel:
    if probability >= 50:
        return "high"
    if probability >= 30:
        return "medium"
    return "low"


def _delay_factor(delay: int) -> DelayFactor | None:
    if delay > 60:
        return DelayFactor(label=f"Already delayed {delay}min", impact=40)
    if delay > 30:
        return DelayFactor(label=f"Already delayed {delay}min", impact=35)
    if delay > 15:
        return DelayFactor(label=f"Running {delay}min late", impact=20)
    if delay > 0:
        return DelayFactor(label=f"Minor delay of {delay}min", impact=8)
    return None


def _congestion_factor(airport: str) -> DelayFactor | None:
    code = airport.upper()
    index = airport_congestion(code)
    if index >= 0.7:
        return DelayFactor(label=f"{code} is heavily congested", impact=20)
    if index >= 0.5:
        return DelayFactor(label=f"{code} has moderate congestion", impact=12)
    if index >= 0.35:
        return DelayFactor(label=f"{code} sees some congestion", impact=5)
    return None


def _time_of_day_factor(hour: int) -> DelayFactor | None:
    multiplier, label = time_of_day_multiplier(hour)
    if multiplier > 1.1:
        impact = round_half_up((multiplier - 1) * 15)
        return DelayFactor(label=f"{label.capitalize()} departures run later", impact=impact)
    if multiplier < 0.8:
        return DelayFactor(
            label=f"{label.capitalize()} departure, fewer cascading delays", impact=-5
        )
    return None


def _route_factor(origin: str, destination: str) -> DelayFactor | None:
    rate = route_delay_rate(origin, destination)
    if rate > 0.3:
        return DelayFactor(label="Route has elevated delay history", impact=10)
    if rate > 0.2:
        return DelayFactor(label="Route has moderate delay history", impact=5)
    return None


def _confidence(flight: FlightFacts) -> Confidence:
    if flight.departure_delay_minutes > 0 or flight.flight_status == "active":
        return "high"
    if flight.estimated_departure is not None:
        return "medium"
    return "low"


def _assemble(points: int, factors: list[DelayFactor], confidence: Confidence) -> DelayPrediction:
    probability = clamp(points, MIN_PROBABILITY, MAX_PROBABILITY)
    ranked = sorted(factors, key=lambda factor: abs(factor.impact), reverse=True)
    return DelayPrediction(
        probability=probability,
        level=level_for_probability(probability),
        confidence=confidence,
        factors=ranked,
        reason=ranked[0].label if ranked else NO_SIGNAL_REASON,
    )


def _score_factors(flight: FlightFacts) -> list[DelayFactor]:
    candidates = (
        _delay_factor(flight.departure_delay_minutes),
        _congestion_factor(flight.departure_airport),
        _time_of_day_factor(flight.scheduled_departure.hour),
        _route_factor(flight.departure_airport, flight.arrival_airport),
    )
    return [factor for factor in candidates if factor is not None]


def predict_departure_delay(flight: FlightFacts) -> DelayPrediction:
    """Additive point model from baseline 10, clamped to [5, 95]."""
    factors = _score_factors(flight)
    points = BASELINE_PROBABILITY + sum(factor.impact for factor in factors)
    prediction = _assemble(points, factors, _confidence(flight))
    logger.debug(
        "Delay prediction %s-%s: raw=%s probability=%s level=%s",
        flight.departure_airport,
        flight.arrival_airport,
        points,
        prediction.probability,
        prediction.level,
    )
    return prediction


def predict_offer_delay(offer: SearchOffer) -> DelayPrediction:
    """Delay prediction for a search result; adds a stop-count penalty."""
    facts = FlightFacts(
        departure_airport=offer.origin,
        arrival_airport=offer.destination,
        scheduled_departure=offer.departure_time,
        flight_status="scheduled",
    )
    factors = _score_factors(facts)
    if offer.stops > 0:
        penalty = min(15, offer.stops * 8)
        noun = "stop" if offer.stops == 1 else "stops"
        factors.append(
            DelayFactor(label=f"{offer.stops} {noun} add delay exposure", impact=penalty)
        )

    points = BASELINE_PROBABILITY + sum(factor.impact for factor in factors)
    return _assemble(points, factors, _confidence(facts))


def predict_tracked_delay(flight: TrackedFlight) -> DelayPrediction:
    """Delay prediction for a tracked flight using its real-time fields."""
    return predict_departure_delay(
        FlightFacts(
            departure_airport=flight.departure_airport,
            arrival_airport=flight.arrival_airport,
            scheduled_departure=flight.scheduled_departure,
            estimated_departure=flight.estimated_departure,
            departure_delay_minutes=flight.departure_delay_minutes,
            flight_status=flight.flight_status,
        )
    )
