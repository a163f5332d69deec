"""Data schemas for the flight intelligence engine."""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from .helpers import parse_timestamp


FlightStatus = Literal["scheduled", "active", "landed", "cancelled", "diverted", "unknown"]
RiskLevel = Literal["low", "medium", "high"]
ConnectionRiskLevel = Literal["low", "medium", "high", "critical"]
Confidence = Literal["low", "medium", "high"]
MonitoringLevel = Literal["low", "medium", "high"]
InsightType = Literal[
    "route_frequency",
    "timing_preference",
    "airline_loyalty",
    "delay_pattern",
    "airport_familiarity",
]
IntelligenceMode = Literal["minimal", "balanced", "deep"]
Tone = Literal["professional", "friendly", "casual"]
StatusTone = Literal["critical", "warning", "ok", "muted"]


class Record(BaseModel):
    """Immutable value record; accepts snake_case or camelCase keys."""

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        alias_generator=to_camel,
    )

    @field_validator("*", mode="after")
    @classmethod
    def naive_timestamps_are_utc(cls, value: object) -> object:
        if isinstance(value, datetime):
            return parse_timestamp(value)
        return value


class FlightFacts(Record):
    """Flight facts consumed by the delay model."""

    departure_airport: str
    arrival_airport: str
    scheduled_departure: datetime
    estimated_departure: datetime | None = None
    departure_delay_minutes: int = Field(default=0, ge=0)
    flight_status: FlightStatus = "unknown"

    @property
    def effective_departure(self) -> datetime:
        return self.estimated_departure or self.scheduled_departure


class ReportFlight(FlightFacts):
    """Flight facts plus identity, gate and caller-supplied connection risk."""

    airline_code: str
    flight_number: str
    departure_gate: str | None = None
    connection_risk_score: int | None = Field(default=None, ge=0, le=100)
    connection_risk_level: ConnectionRiskLevel | None = None


class SearchOffer(Record):
    """Search result offer; route information only."""

    origin: str
    destination: str
    stops: int = Field(default=0, ge=0)
    departure_time: datetime
    duration: str | None = None


class TrackedFlight(Record):
    """Flight record as supplied by the tracking API."""

    id: str | None = None
    airline_code: str
    airline_name: str | None = None
    flight_number: str
    departure_airport: str
    arrival_airport: str
    departure_terminal: str | None = None
    arrival_terminal: str | None = None
    departure_gate: str | None = None
    scheduled_departure: datetime
    scheduled_arrival: datetime
    estimated_departure: datetime | None = None
    estimated_arrival: datetime | None = None
    departure_delay_minutes: int = Field(default=0, ge=0)
    arrival_delay_minutes: int = Field(default=0, ge=0)
    flight_status: FlightStatus = "unknown"
    leg_index: int | None = None


class DelayFactor(Record):
    label: str
    impact: int


class DelayPrediction(Record):
    """Departure delay probability with ranked contributing factors."""

    probability: int = Field(ge=5, le=95)
    level: RiskLevel
    confidence: Confidence
    factors: list[DelayFactor]
    reason: str


class ConnectionLeg(Record):
    """One leg of an itinerary as seen by the connection model."""

    departure_airport: str
    arrival_airport: str
    airline_code: str
    departure_terminal: str | None = None
    arrival_terminal: str | None = None
    scheduled_departure: datetime
    scheduled_arrival: datetime
    estimated_departure: datetime | None = None
    estimated_arrival: datetime | None = None
    departure_delay_minutes: int = Field(default=0, ge=0)
    arrival_delay_minutes: int = Field(default=0, ge=0)
    flight_status: FlightStatus = "unknown"
    leg_index: int | None = None


class ConnectionAnalysis(Record):
    """Risk assessment for a single connection between two legs."""

    connection_airport: str
    minutes_to_next_flight: int
    minimum_connection_time: int
    risk_score: int = Field(ge=0, le=100)
    risk_level: ConnectionRiskLevel
    human_status: str
    human_explanation: str
    terminal_change: bool
    arriving_terminal: str | None = None
    departing_terminal: str | None = None
    self_transfer: bool
    factors: list[str]
    arriving_leg_index: int
    departing_leg_index: int


class JourneyConnectionReport(Record):
    is_multi_leg: bool
    connection_count: int
    connections: list[ConnectionAnalysis]
    worst_risk_level: ConnectionRiskLevel
    overall_human_status: str


class ConnectionRiskResult(Record):
    """Layover classification used by the search surface."""

    score: int = Field(ge=0, le=100)
    level: ConnectionRiskLevel
    label: str
    minutes_buffer: int
    effective_minutes: int
    explanation: str
    factors: list[str]


class AirportArrivalResult(Record):
    recommended_time: datetime
    buffer_hours: int
    label: Literal["Domestic", "International"]


class HistoricalFlight(Record):
    """Past flight used to mine personal travel patterns."""

    departure_airport: str
    arrival_airport: str
    airline_code: str
    airline_name: str | None = None
    scheduled_departure: datetime
    departure_delay_minutes: int = Field(default=0, ge=0)
    arrival_delay_minutes: int = Field(default=0, ge=0)
    flight_status: FlightStatus = "unknown"


class TravelInsight(Record):
    type: InsightType
    title: str
    description: str
    emoji: str
    confidence: Confidence


class FlightIntelligenceReport(Record):
    """Canonical deterministic report handed to UI and briefing consumers."""

    delay_probability: int = Field(ge=5, le=95)
    delay_level: RiskLevel
    connection_risk_score: int | None = Field(default=None, ge=0, le=100)
    connection_risk_level: ConnectionRiskLevel | None = None
    gate_change_risk: int = Field(ge=0, le=100)

    recommended_arrival_time: datetime
    recommended_arrival_label: Literal["Domestic", "International"]
    check_in_recommendation: str

    monitoring_level: MonitoringLevel
    overall_risk_score: int = Field(ge=0, le=100)
    reasoning_factors: list[str]

    flight_number: str
    route: str
    departure_time: datetime
    status: FlightStatus
    current_delay_minutes: int = Field(ge=0)

    hours_until_departure: float = Field(ge=0.0)
    minutes_until_recommended_arrival: int


class UserIntelligenceProfile(Record):
    mode: IntelligenceMode = "balanced"
    frequent_traveler: bool = False
    preferred_tone: Tone | None = None


class AgentBriefing(Record):
    """Strictly validated briefing returned by the external briefing service."""

    status_line: str = Field(min_length=1)
    explanation: str
    key_warnings: list[str] = Field(default_factory=list, max_length=3)
    actions: list[str] = Field(default_factory=list, max_length=2)
    confidence: Confidence


class StatusLine(Record):
    line: str
    explanation: str
    tone: StatusTone
