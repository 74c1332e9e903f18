from __future__ import annotations

import pytest

from paper_engine.runtime.telemetry import Telemetry, normalize_level


def test_from_env_defaults_to_environment_level(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    monkeypatch.setenv("PAPER_ENGINE_LOG_LEVEL", "debug")
    monkeypatch.setenv("PAPER_ENGINE_DISABLE_CONSOLE", "1")

    assert Telemetry.from_env().level == "DEBUG"
    assert Telemetry.from_env(level="warn").level == "WARNING"


def test_set_level_keeps_preset_config() -> None:
    telemetry = Telemetry.from_preset("development")
    config = telemetry._config
    telemetry.get_logger("paper")

    telemetry.set_level("warn")

    assert telemetry._config is config
    assert telemetry.level == "WARNING"
    assert telemetry._loggers == {}


def test_normalize_level() -> None:
    assert normalize_level(" warn ") == "WARNING"
    assert normalize_level("debug") == "DEBUG"
    with pytest.raises(ValueError):
        normalize_level("verbose")
