from __future__ import annotations

from datetime import timedelta
from pathlib import Path

import pytest

from api_responsiveness.config import (
    Config,
    ConfigError,
    Thresholds,
    env_path,
    parse_duration,
    validate_config,
)


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("50ms", timedelta(milliseconds=50)),
        ("0.5s", timedelta(milliseconds=500)),
        ("250us", timedelta(microseconds=250)),
        ("250µs", timedelta(microseconds=250)),
        ("1m", timedelta(minutes=1)),
        ("  2s ", timedelta(seconds=2)),
    ],
)
def test_parse_duration(value: str, expected: timedelta) -> None:
    assert parse_duration(value) == expected


@pytest.mark.parametrize("value", ["50", "-5ms", "5h", "fast"])
def test_parse_duration_rejects_invalid(value: str) -> None:
    with pytest.raises(ConfigError):
        parse_duration(value)


def test_env_path(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("P", "")
    assert env_path("P") is None
    monkeypatch.setenv("P", "/tmp/base.json")
    assert env_path("P") == Path("/tmp/base.json")


def test_validate_config_defaults_are_valid() -> None:
    validate_config(Config(result=Path("r.json"), baseline=Path("b.json")))
    validate_config(Config(result=Path("r.json"), mode="sort"))


@pytest.mark.parametrize(
    "cfg",
    [
        Config(result=Path("r.json")),
        Config(result=Path("r.json"), mode="rank", baseline=Path("b.json")),
        Config(result=Path("r.json"), mode="sort", output="xml"),
        Config(
            result=Path("r.json"),
            baseline=Path("b.json"),
            thresholds=Thresholds(threshold_ratio=-0.1),
        ),
        Config(
            result=Path("r.json"),
            baseline=Path("b.json"),
            thresholds=Thresholds(min_duration=timedelta(milliseconds=-1)),
        ),
        Config(
            result=Path("r.json"),
            baseline=Path("b.json"),
            thresholds=Thresholds(epsilon=float("nan")),
        ),
    ],
)
def test_validate_config_rejects(cfg: Config) -> None:
    with pytest.raises(ConfigError):
        validate_config(cfg)
