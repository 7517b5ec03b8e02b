from __future__ import annotations

import os
import re
from dataclasses import dataclass
from datetime import timedelta
from pathlib import Path
from typing import Final

from .classify import DEFAULT_THRESHOLD_RATIO, MIN_DURATION
from .normalize import EPSILON

_DURATION_RE: Final[re.Pattern[str]] = re.compile(r"^\s*(\d+(?:\.\d+)?)\s*(us|µs|ms|s|m)\s*$")

MODES: Final[tuple[str, ...]] = ("compare", "sort")
OUTPUTS: Final[tuple[str, ...]] = ("text", "json")


class ConfigError(ValueError):
    """Raised when CLI/env configuration values are invalid."""


@dataclass(frozen=True, slots=True)
class Thresholds:
    """
    Regression rule knobs.

    - threshold_ratio: candidate/baseline must exceed 1 + threshold_ratio (strict)
    - min_duration:    candidates at or below this are never flagged
    - epsilon:         p99 values at or below this are not measurements
    """

    threshold_ratio: float = DEFAULT_THRESHOLD_RATIO
    min_duration: timedelta = MIN_DURATION
    epsilon: float = EPSILON


@dataclass(frozen=True, slots=True)
class Config:
    """
    Typed config for one invocation.

    Notes:
    - `result` is the candidate snapshot in compare mode and the only input in sort mode.
    - `fail_on_regression` decides whether bad > 0 turns into a failing outcome.
    """

    result: Path
    baseline: Path | None = None
    mode: str = "compare"
    thresholds: Thresholds = Thresholds()
    fail_on_regression: bool = False
    output: str = "text"


def parse_duration(value: str) -> timedelta:
    """
    Parse durations like "50ms", "0.5s", "250us", "1m".

    Only the units this tool needs are supported.
    """
    m = _DURATION_RE.match(value)
    if not m:
        raise ConfigError(
            f"Invalid duration {value!r}. Expected formats like '50ms', '0.5s', '250us' "
            "(decimals allowed)."
        )

    amount = float(m.group(1))
    unit = m.group(2)

    if unit in {"us", "µs"}:
        return timedelta(microseconds=amount)
    if unit == "ms":
        return timedelta(milliseconds=amount)
    if unit == "s":
        return timedelta(seconds=amount)
    if unit == "m":
        return timedelta(minutes=amount)

    # Should be unreachable due to regex.
    raise ConfigError(f"Unsupported duration unit in {value!r}.")


def env_path(name: str) -> Path | None:
    """
    Read a path-like env var.

    Returns None if unset or empty.
    """
    raw = os.environ.get(name)
    if not raw:
        return None
    return Path(raw)


def validate_thresholds(t: Thresholds) -> None:
    if not (t.threshold_ratio >= 0):
        raise ConfigError(f"threshold_ratio must be >= 0, got {t.threshold_ratio}.")
    if t.min_duration < timedelta(0):
        raise ConfigError(f"min_duration must be >= 0, got {t.min_duration}.")
    if not (t.epsilon >= 0):
        raise ConfigError(f"epsilon must be >= 0, got {t.epsilon}.")


def validate_config(cfg: Config) -> None:
    """
    Validate a Config before any input is read.

    - mode/output must be known values
    - compare mode needs a baseline
    - thresholds must be non-negative
    """
    if cfg.mode not in MODES:
        raise ConfigError(f"Invalid mode: {cfg.mode!r} (expected one of: {', '.join(MODES)})")
    if cfg.output not in OUTPUTS:
        raise ConfigError(
            f"Invalid output: {cfg.output!r} (expected one of: {', '.join(OUTPUTS)})"
        )
    if cfg.mode == "compare" and cfg.baseline is None:
        raise ConfigError("compare mode requires a baseline snapshot (--baseline).")

    validate_thresholds(cfg.thresholds)


__all__ = [
    "MODES",
    "OUTPUTS",
    "Config",
    "ConfigError",
    "Thresholds",
    "env_path",
    "parse_duration",
    "validate_config",
    "validate_thresholds",
]
