"""CLI entrypoint for the flight intelligence engine."""

from __future__ import annotations

import argparse
import json
import logging
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from dotenv import load_dotenv
from pydantic import BaseModel, TypeAdapter, ValidationError

from .airport_arrival import get_recommended_arrival
from .briefing import build_briefing_request, build_user_profile, derive_status_line
from .config import Settings
from .connection_risk import analyze_journey
from .delay_risk import predict_departure_delay, predict_offer_delay
from .helpers import parse_timestamp
from .personal_insights import generate_travel_insights
from .report import generate_intelligence_report
from .schemas import ConnectionLeg, FlightFacts, HistoricalFlight, ReportFlight, SearchOffer

logger = logging.getLogger(__name__)

_COMMANDS = ("report", "delay", "offer", "arrival", "connections", "insights", "status")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Deterministic flight intelligence")
    parser.add_argument("command", choices=_COMMANDS, help="Computation to run")
    parser.add_argument("--input", required=True, help="Path to a JSON input file")
    parser.add_argument("--now", default=None, help="ISO timestamp used as the current time")
    parser.add_argument(
        "--log-level",
        default=None,
        type=str.upper,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Override FLIGHTINTEL_LOG_LEVEL",
    )
    parser.add_argument(
        "--briefing-request",
        action="store_true",
        help="With 'report': print the briefing service payload instead of the bare report",
    )
    parser.add_argument(
        "--tracked-flights",
        type=int,
        default=0,
        help="Number of flights the user tracks (frequent traveler flag)",
    )
    return parser


def _load_json(path: str) -> Any:
    return json.loads(Path(path).read_text(encoding="utf-8"))


def _dump(result: BaseModel | list[BaseModel] | dict[str, Any]) -> str:
    if isinstance(result, BaseModel):
        return result.model_dump_json(indent=2, by_alias=True)
    if isinstance(result, list):
        items = [item.model_dump(mode="json", by_alias=True) for item in result]
        return json.dumps(items, indent=2, ensure_ascii=False)
    return json.dumps(result, indent=2, ensure_ascii=False)


def execute(command: str, payload: Any, settings: Settings, args: argparse.Namespace) -> Any:
    """Validate ``payload`` for ``command`` and run the matching engine function."""
    now = parse_timestamp(args.now) if args.now else None

    if command == "delay":
        return predict_departure_delay(FlightFacts.model_validate(payload))
    if command == "offer":
        return predict_offer_delay(SearchOffer.model_validate(payload))
    if command == "arrival":
        facts = FlightFacts.model_validate(payload)
        return get_recommended_arrival(
            facts.effective_departure,
            facts.departure_airport,
            facts.arrival_airport,
            facts.departure_delay_minutes,
        )
    if command == "connections":
        legs = TypeAdapter(list[ConnectionLeg]).validate_python(payload)
        return analyze_journey(legs)
    if command == "insights":
        history = TypeAdapter(list[HistoricalFlight]).validate_python(payload)
        return generate_travel_insights(history)

    report = generate_intelligence_report(ReportFlight.model_validate(payload), now=now)
    if command == "status":
        return derive_status_line(report)
    if args.briefing_request:
        profile = build_user_profile(
            settings.intelligence_mode,
            args.tracked_flights,
            settings.preferred_tone,
            frequent_threshold=settings.frequent_traveler_threshold,
        )
        return build_briefing_request(report, profile)
    return report


def run(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    load_dotenv(Path.cwd() / ".env")

    try:
        settings = Settings.from_env()
    except ValueError as exc:
        logging.basicConfig(level=logging.WARNING)
        logger.error("Invalid configuration: %s", exc)
        return 1

    logging.basicConfig(
        level=args.log_level or settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logger.debug("Settings: %s", settings.snapshot())

    try:
        payload = _load_json(args.input)
        result = execute(args.command, payload, settings, args)
    except ValidationError as exc:
        logger.error("Input rejected: %s", exc)
        return 1
    except (OSError, ValueError) as exc:
        logger.error("%s", exc)
        return 1

    print(_dump(result))
    return 0


def main() -> None:
    raise SystemExit(run())


if __name__ == "__main__":
    main()
