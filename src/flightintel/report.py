"""Aggregates the deterministic models into one canonical intelligence report."""

from __future__ import annotations

import logging
from datetime import datetime

from .airport_arrival import get_recommended_arrival
from .delay_risk import predict_departure_delay
from .helpers import minutes_between, parse_timestamp, round_half_up, utcnow
from .schemas import (
    ConnectionRiskLevel,
    FlightFacts,
    FlightIntelligenceReport,
    MonitoringLevel,
    ReportFlight,
    RiskLevel,
)

logger = logging.getLogger(__name__)

DELAY_WEIGHT = 0.4
CONNECTION_WEIGHT = 0.4
GATE_WEIGHT = 0.2
GATE_CHANGE_BASELINE = 10


def compute_gate_change_risk(has_gate: bool, hours_until_departure: float) -> int:
    """Unassigned gates get riskier as departure approaches."""
    if has_gate:
        return GATE_CHANGE_BASELINE
    if hours_until_departure < 2:
        return 50
    if hours_until_departure < 4:
        return 30
    if hours_until_departure < 8:
        return 20
    return GATE_CHANGE_BASELINE


def check_in_recommendation(hours_until_departure: float) -> str:
    if hours_until_departure > 24:
        return f"Online check-in opens in ~{round_half_up(hours_until_departure - 24)} hours"
    if hours_until_departure > 0:
        return "Check-in is open, check in now if you haven't"
    return "Check-in closed"


def compute_overall_risk(
    delay_probability: int,
    gate_change_risk: int,
    connection_risk_score: int | None = None,
) -> int:
    """Weighted composite; a missing connection term is omitted, not renormalised."""
    score = delay_probability * DELAY_WEIGHT
    if connection_risk_score is not None:
        score += connection_risk_score * CONNECTION_WEIGHT
    score += gate_change_risk * GATE_WEIGHT
    return round_half_up(min(100.0, score))


def classify_monitoring_level(
    overall_risk_score: int,
    delay_level: RiskLevel,
    connection_level: ConnectionRiskLevel | None = None,
) -> MonitoringLevel:
    if (
        overall_risk_score >= 50
        or delay_level == "high"
        or connection_level in ("high", "critical")
    ):
        return "high"
    if overall_risk_score >= 25 or delay_level == "medium" or connection_level == "medium":
        return "medium"
    return "low"


def generate_intelligence_report(
    flight: ReportFlight,
    now: datetime | None = None,
) -> FlightIntelligenceReport:
    """Build the canonical report for one flight at time ``now``."""
    now = parse_timestamp(now or utcnow())
    departure = parse_timestamp(flight.effective_departure)
    hours_until_departure = max(0.0, minutes_between(now, departure) / 60.0)

    prediction = predict_departure_delay(
        FlightFacts(
            departure_airport=flight.departure_airport,
            arrival_airport=flight.arrival_airport,
            scheduled_departure=flight.scheduled_departure,
            estimated_departure=flight.estimated_departure,
            departure_delay_minutes=flight.departure_delay_minutes,
            flight_status=flight.flight_status,
        )
    )
    arrival = get_recommended_arrival(
        departure,
        flight.departure_airport,
        flight.arrival_airport,
        flight.departure_delay_minutes,
    )
    minutes_until_arrival = round_half_up(minutes_between(now, arrival.recommended_time))

    gate_change_risk = compute_gate_change_risk(bool(flight.departure_gate), hours_until_departure)

    reasoning = [factor.label for factor in prediction.factors]
    if flight.connection_risk_level in ("high", "critical"):
        reasoning.append(f"Connection risk is {flight.connection_risk_level}")
    if gate_change_risk >= 30:
        reasoning.append("Gate not yet assigned, may change")
    if flight.departure_delay_minutes > 15:
        reasoning.append(f"Currently delayed {flight.departure_delay_minutes} minutes")

    overall = compute_overall_risk(
        prediction.probability,
        gate_change_risk,
        flight.connection_risk_score,
    )
    monitoring = classify_monitoring_level(overall, prediction.level, flight.connection_risk_level)

    flight_number = f"{flight.airline_code}{flight.flight_number}"
    logger.debug(
        "Report %s: delay=%s overall=%s monitoring=%s",
        flight_number,
        prediction.probability,
        overall,
        monitoring,
    )

    return FlightIntelligenceReport(
        delay_probability=prediction.probability,
        delay_level=prediction.level,
        connection_risk_score=flight.connection_risk_score,
        connection_risk_level=flight.connection_risk_level,
        gate_change_risk=gate_change_risk,
        recommended_arrival_time=arrival.recommended_time,
        recommended_arrival_label=arrival.label,
        check_in_recommendation=check_in_recommendation(hours_until_departure),
        monitoring_level=monitoring,
        overall_risk_score=overall,
        reasoning_factors=reasoning,
        flight_number=flight_number,
        route=f"{flight.departure_airport} → {flight.arrival_airport}",
        departure_time=departure,
        status=flight.flight_status,
        current_delay_minutes=flight.departure_delay_minutes,
        hours_until_departure=round_half_up(hours_until_departure * 10) / 10,
        minutes_until_recommended_arrival=minutes_until_arrival,
    )
