"""Command line tests."""

import json
from pathlib import Path

import pytest

from flightintel.main import run

FLIGHT = {
    "airlineCode": "BA",
    "flightNumber": "117",
    "departureAirport": "JFK",
    "arrivalAirport": "LAX",
    "scheduledDeparture": "2025-06-01T12:00:00Z",
    "departureGate": "B22",
    "departureDelayMinutes": 0,
    "flightStatus": "scheduled",
}


@pytest.fixture(autouse=True)
def _isolated(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.chdir(tmp_path)
    for name in ("FLIGHTINTEL_LOG_LEVEL", "INTELLIGENCE_MODE", "PREFERRED_TONE", "FREQUENT_TRAVELER_THRESHOLD"):
        monkeypatch.delenv(name, raising=False)


def _write(tmp_path: Path, payload: object) -> str:
    path = tmp_path / "input.json"
    path.write_text(json.dumps(payload), encoding="utf-8")
    return str(path)


def test_report_command(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    code = run(["report", "--input", _write(tmp_path, FLIGHT), "--now", "2025-06-01T06:00:00Z"])

    assert code == 0
    output = json.loads(capsys.readouterr().out)
    assert output["delayProbability"] == 22
    assert output["overallRiskScore"] == 11
    assert output["monitoringLevel"] == "low"
    assert output["minutesUntilRecommendedArrival"] == 180


def test_briefing_request_flag(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    code = run(
        [
            "report",
            "--input",
            _write(tmp_path, FLIGHT),
            "--now",
            "2025-06-01T06:00:00Z",
            "--briefing-request",
            "--tracked-flights",
            "9",
        ]
    )

    assert code == 0
    output = json.loads(capsys.readouterr().out)
    assert output["profile"] == {"mode": "balanced", "frequentTraveler": True, "preferredTone": "professional"}
    assert output["report"]["flightNumber"] == "BA117"


def test_status_command(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    code = run(["status", "--input", _write(tmp_path, FLIGHT), "--now", "2025-06-01T08:00:00Z"])

    assert code == 0
    assert json.loads(capsys.readouterr().out)["line"] == "Leave in 60 min."


def test_insights_command(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    history = [
        {"departureAirport": "ACC", "arrivalAirport": "LHR", "airlineCode": "BA", "scheduledDeparture": when}
        for when in ("2025-06-02T08:00:00Z", "2025-06-09T08:00:00Z", "2025-06-16T08:00:00Z")
    ]
    code = run(["insights", "--input", _write(tmp_path, history)])

    assert code == 0
    output = json.loads(capsys.readouterr().out)
    assert len(output) == 4
    assert output[0]["type"] == "route_frequency"


def test_connections_command(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    legs = [
        {
            "departureAirport": "ACC",
            "arrivalAirport": "LHR",
            "airlineCode": "BA",
            "scheduledDeparture": "2025-06-02T04:00:00Z",
            "scheduledArrival": "2025-06-02T10:00:00Z",
        },
        {
            "departureAirport": "LHR",
            "arrivalAirport": "JFK",
            "airlineCode": "BA",
            "scheduledDeparture": "2025-06-02T12:00:00Z",
            "scheduledArrival": "2025-06-02T20:00:00Z",
        },
    ]
    code = run(["connections", "--input", _write(tmp_path, legs)])

    assert code == 0
    output = json.loads(capsys.readouterr().out)
    assert output["isMultiLeg"] is True
    assert output["worstRiskLevel"] == "medium"


def test_invalid_input_exits_with_error(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    broken = dict(FLIGHT, scheduledDeparture="sometime tomorrow")

    assert run(["report", "--input", _write(tmp_path, broken)]) == 1
    assert capsys.readouterr().out == ""


def test_missing_file_exits_with_error(tmp_path: Path) -> None:
    assert run(["delay", "--input", str(tmp_path / "missing.json")]) == 1
