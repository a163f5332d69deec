"""Configuration helpers."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass

_MODES = {"minimal", "balanced", "deep"}
_TONES = {"professional", "friendly", "casual"}


@dataclass(frozen=True)
class Settings:
    """Runtime settings loaded from environment variables."""

    log_level: str
    intelligence_mode: str
    preferred_tone: str
    frequent_traveler_threshold: int

    def snapshot(self) -> dict[str, object]:
        """Return a log-friendly view of the active settings."""
        return {
            "FLIGHTINTEL_LOG_LEVEL": self.log_level,
            "INTELLIGENCE_MODE": self.intelligence_mode,
            "PREFERRED_TONE": self.preferred_tone,
            "FREQUENT_TRAVELER_THRESHOLD": self.frequent_traveler_threshold,
        }

    @classmethod
    def from_env(cls) -> "Settings":
        log_level = os.getenv("FLIGHTINTEL_LOG_LEVEL", "WARNING").strip().upper() or "WARNING"
        intelligence_mode = os.getenv("INTELLIGENCE_MODE", "balanced").strip().lower() or "balanced"
        preferred_tone = (
            os.getenv("PREFERRED_TONE", "professional").strip().lower() or "professional"
        )
        threshold_raw = os.getenv("FREQUENT_TRAVELER_THRESHOLD", "5").strip() or "5"

        if not isinstance(logging.getLevelName(log_level), int):
            raise ValueError(f"FLIGHTINTEL_LOG_LEVEL '{log_level}' is not a known logging level.")
        if intelligence_mode not in _MODES:
            raise ValueError("INTELLIGENCE_MODE must be one of 'minimal', 'balanced' or 'deep'.")
        if preferred_tone not in _TONES:
            raise ValueError(
                "PREFERRED_TONE must be one of 'professional', 'friendly' or 'casual'."
            )
        try:
            frequent_traveler_threshold = int(threshold_raw)
        except ValueError as exc:
            raise ValueError("FREQUENT_TRAVELER_THRESHOLD must be an integer.") from exc
        if frequent_traveler_threshold < 1:
            raise ValueError("FREQUENT_TRAVELER_THRESHOLD must be at least 1.")

        return cls(
            log_level=log_level,
            intelligence_mode=intelligence_mode,
            preferred_tone=preferred_tone,
            frequent_traveler_threshold=frequent_traveler_threshold,
        )
