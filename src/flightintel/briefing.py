"""Briefing service contract and the deterministic status-line fallback."""

from __future__ import annotations

import json
from typing import Any

from pydantic import ValidationError

from .schemas import (
    AgentBriefing,
    FlightIntelligenceReport,
    IntelligenceMode,
    JourneyConnectionReport,
    StatusLine,
    Tone,
    UserIntelligenceProfile,
)


class BriefingError(RuntimeError):
    """Raised when a briefing response is invalid."""


def build_user_profile(
    mode: IntelligenceMode,
    tracked_flight_count: int,
    preferred_tone: Tone | None = None,
    frequent_threshold: int = 5,
) -> UserIntelligenceProfile:
    return UserIntelligenceProfile(
        mode=mode,
        frequent_traveler=tracked_flight_count > frequent_threshold,
        preferred_tone=preferred_tone,
    )


def build_briefing_request(
    report: FlightIntelligenceReport,
    profile: UserIntelligenceProfile,
    journey: JourneyConnectionReport | None = None,
) -> dict[str, Any]:
    """JSON-safe payload for the external briefing endpoint."""
    payload: dict[str, Any] = {
        "report": report.model_dump(mode="json", by_alias=True),
        "profile": profile.model_dump(mode="json", by_alias=True, exclude_none=True),
    }
    if journey is not None and journey.is_multi_leg:
        payload["journey"] = journey.model_dump(mode="json", by_alias=True)
    return payload


def parse_agent_briefing(raw_text: str) -> AgentBriefing:
    """Validate a briefing service response body."""
    try:
        parsed = json.loads(raw_text)
        return AgentBriefing.model_validate(parsed)
    except (json.JSONDecodeError, ValidationError, TypeError) as exc:
        raise BriefingError(f"Invalid briefing response: {exc}") from exc


def derive_status_line(report: FlightIntelligenceReport) -> StatusLine:
    """Headline shown when no briefing is available. First match wins."""
    flight = report.flight_number
    minutes = report.minutes_until_recommended_arrival

    if report.status == "cancelled":
        return StatusLine(
            line="Flight cancelled.",
            explanation="Contact your airline for rebooking.",
            tone="critical",
        )
    if report.status == "active":
        return StatusLine(
            line="In flight.", explanation=f"{flight} is currently airborne.", tone="ok"
        )
    if report.status == "landed":
        return StatusLine(line="Arrived.", explanation=f"{flight} has landed.", tone="muted")
    if minutes <= 0 and report.hours_until_departure > 0:
        return StatusLine(
            line="Leave now.",
            explanation="You should already be heading to the airport.",
            tone="critical",
        )
    if 0 < minutes <= 60:
        return StatusLine(
            line=f"Leave in {minutes} min.",
            explanation="Head to the airport soon.",
            tone="warning",
        )
    if report.current_delay_minutes > 30:
        return StatusLine(
            line=f"Delayed {report.current_delay_minutes} min.",
            explanation="Significant delays detected. Monitor closely.",
            tone="critical",
        )
    if report.monitoring_level == "high":
        return StatusLine(
            line="Monitor closely.",
            explanation="Elevated risk factors detected.",
            tone="warning",
        )
    if report.monitoring_level == "medium":
        return StatusLine(
            line="Some concerns.",
            explanation="Minor risk factors detected. We're watching.",
            tone="warning",
        )
    return StatusLine(
        line="You're clear.",
        explanation="All systems normal. We're monitoring your flight.",
        tone="ok",
    )
