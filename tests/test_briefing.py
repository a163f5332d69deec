"""Briefing contract and status line tests."""

import json
from datetime import datetime, timezone

import pytest

from flightintel.briefing import (
    BriefingError,
    build_briefing_request,
    build_user_profile,
    derive_status_line,
    parse_agent_briefing,
)
from flightintel.connection_risk import summarize_connections
from flightintel.report import generate_intelligence_report
from flightintel.schemas import ReportFlight


def _utc(hour: int, minute: int = 0) -> datetime:
    return datetime(2025, 6, 1, hour, minute, tzinfo=timezone.utc)


def _report(now: datetime = _utc(6), **overrides):
    data = {
        "airline_code": "BA",
        "flight_number": "117",
        "departure_airport": "JFK",
        "arrival_airport": "LAX",
        "scheduled_departure": _utc(12),
        "departure_gate": "B22",
        "flight_status": "scheduled",
    }
    data.update(overrides)
    return generate_intelligence_report(ReportFlight(**data), now=now)


def test_frequent_traveler_threshold() -> None:
    assert build_user_profile("deep", 6).frequent_traveler is True
    assert build_user_profile("deep", 5).frequent_traveler is False
    assert build_user_profile("minimal", 3, frequent_threshold=2).frequent_traveler is True


def test_briefing_request_uses_camel_case_contract() -> None:
    profile = build_user_profile("balanced", 8, "friendly")
    payload = build_briefing_request(_report(), profile)

    assert payload["report"]["delayProbability"] == 22
    assert payload["report"]["monitoringLevel"] == "low"
    assert payload["report"]["connectionRiskScore"] is None
    assert payload["profile"] == {"mode": "balanced", "frequentTraveler": True, "preferredTone": "friendly"}
    assert "journey" not in payload
    json.dumps(payload)


def test_briefing_request_includes_multi_leg_journey_only() -> None:
    profile = build_user_profile("deep", 1)

    single = build_briefing_request(_report(), profile, summarize_connections([], leg_count=1))
    assert "journey" not in single

    multi = build_briefing_request(_report(), profile, summarize_connections([], leg_count=2))
    assert multi["journey"]["isMultiLeg"] is True
    assert multi["journey"]["worstRiskLevel"] == "low"


def test_parse_agent_briefing() -> None:
    briefing = parse_agent_briefing(
        json.dumps(
            {
                "statusLine": "Leave in 42 minutes.",
                "explanation": "Traffic is light.",
                "keyWarnings": ["Gate may change"],
                "actions": ["Check in online"],
                "confidence": "high",
            }
        )
    )
    assert briefing.status_line == "Leave in 42 minutes."
    assert briefing.key_warnings == ["Gate may change"]


def test_parse_agent_briefing_rejects_invalid_payloads() -> None:
    with pytest.raises(BriefingError):
        parse_agent_briefing("not json")

    too_many_warnings = {
        "statusLine": "Monitor closely.",
        "explanation": "x",
        "keyWarnings": ["a", "b", "c", "d"],
        "actions": [],
        "confidence": "low",
    }
    with pytest.raises(BriefingError):
        parse_agent_briefing(json.dumps(too_many_warnings))


def test_status_line_flight_state_takes_priority() -> None:
    assert derive_status_line(_report(flight_status="cancelled")).line == "Flight cancelled."
    active = derive_status_line(_report(flight_status="active"))
    assert active.line == "In flight."
    assert active.explanation == "BA117 is currently airborne."
    assert derive_status_line(_report(flight_status="landed")).tone == "muted"


def test_status_line_departure_countdown() -> None:
    leave_now = derive_status_line(_report(now=_utc(10, 30)))
    assert leave_now.line == "Leave now."
    assert leave_now.tone == "critical"

    assert derive_status_line(_report(now=_utc(8))).line == "Leave in 60 min."


def test_status_line_risk_fallbacks() -> None:
    assert derive_status_line(_report(departure_delay_minutes=45)).line == "Delayed 45 min."

    at_risk = _report(connection_risk_score=80, connection_risk_level="critical")
    assert derive_status_line(at_risk).line == "Monitor closely."

    some = _report(connection_risk_score=40, connection_risk_level="medium")
    assert derive_status_line(some).line == "Some concerns."

    clear = derive_status_line(_report())
    assert clear.line == "You're clear."
    assert clear.tone == "ok"
