"""Settings tests."""

import pytest

from flightintel.config import Settings

_VARS = (
    "FLIGHTINTEL_LOG_LEVEL",
    "INTELLIGENCE_MODE",
    "PREFERRED_TONE",
    "FREQUENT_TRAVELER_THRESHOLD",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in _VARS:
        monkeypatch.delenv(name, raising=False)


def test_defaults() -> None:
    settings = Settings.from_env()

    assert settings.log_level == "WARNING"
    assert settings.intelligence_mode == "balanced"
    assert settings.preferred_tone == "professional"
    assert settings.frequent_traveler_threshold == 5


def test_values_are_normalised(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("FLIGHTINTEL_LOG_LEVEL", "debug")
    monkeypatch.setenv("INTELLIGENCE_MODE", " Deep ")
    monkeypatch.setenv("FREQUENT_TRAVELER_THRESHOLD", "8")

    settings = Settings.from_env()

    assert settings.log_level == "DEBUG"
    assert settings.intelligence_mode == "deep"
    assert settings.snapshot()["FREQUENT_TRAVELER_THRESHOLD"] == 8


@pytest.mark.parametrize(
    ("name", "value"),
    [
        ("FLIGHTINTEL_LOG_LEVEL", "chatty"),
        ("INTELLIGENCE_MODE", "verbose"),
        ("PREFERRED_TONE", "sarcastic"),
        ("FREQUENT_TRAVELER_THRESHOLD", "many"),
        ("FREQUENT_TRAVELER_THRESHOLD", "0"),
    ],
)
def test_invalid_values_raise(monkeypatch: pytest.MonkeyPatch, name: str, value: str) -> None:
    monkeypatch.setenv(name, value)
    with pytest.raises(ValueError, match=name):
        Settings.from_env()
