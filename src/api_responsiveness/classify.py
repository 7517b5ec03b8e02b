from __future__ import annotations

import enum
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from datetime import timedelta
from typing import Final

from .report import format_baseline_zero_line, format_missing_line, format_regression_line

DEFAULT_THRESHOLD_RATIO: Final[float] = 0.1
MIN_DURATION: Final[timedelta] = timedelta(milliseconds=50)


class Verdict(str, enum.Enum):
    OK = "OK"
    REGRESSED = "REGRESSED"
    MISSING_IN_BASELINE = "MISSING_IN_BASELINE"
    BASELINE_ZERO = "BASELINE_ZERO"


@dataclass(frozen=True, slots=True)
class KeyResult:
    key: str
    verdict: Verdict
    candidate: timedelta
    baseline: timedelta | None = None
    ratio: float | None = None


@dataclass(frozen=True, slots=True)
class ComparisonSummary:
    """
    Verdict counts.

    Only OK (good) and REGRESSED (bad) are counted; keys missing in the
    baseline or with a zero baseline show up in neither.
    """

    good: int = 0
    bad: int = 0

    def ok(self) -> bool:
        return self.bad == 0


@dataclass(frozen=True, slots=True)
class Comparison:
    results: dict[str, KeyResult] = field(default_factory=dict)
    summary: ComparisonSummary = ComparisonSummary()

    @property
    def verdicts(self) -> dict[str, Verdict]:
        return {k: r.verdict for k, r in self.results.items()}


def is_regression(
    *,
    ratio: float,
    candidate: timedelta,
    threshold_ratio: float = DEFAULT_THRESHOLD_RATIO,
    min_duration: timedelta = MIN_DURATION,
) -> bool:
    """
    Strict regression rule: ratio > 1 + threshold and candidate > min_duration.

    Candidates at or under min_duration are treated as noise whatever the ratio.
    """
    return ratio > (1.0 + threshold_ratio) and candidate > min_duration


def classify(
    baseline: Mapping[str, timedelta],
    candidate: Mapping[str, timedelta],
    *,
    threshold_ratio: float = DEFAULT_THRESHOLD_RATIO,
    min_duration: timedelta = MIN_DURATION,
    on_warning: Callable[[str], None] | None = None,
) -> Comparison:
    """
    Compare a candidate run against a baseline, key by key.

    The candidate drives iteration: keys only present in the baseline are
    never visited. Never raises on data problems; those become verdicts and
    warnings passed to `on_warning`.
    """

    def warn(message: str) -> None:
        if on_warning is not None:
            on_warning(message)

    results: dict[str, KeyResult] = {}
    good = 0
    bad = 0

    for key, value in candidate.items():
        base_value = baseline.get(key)
        if base_value is None:
            warn(format_missing_line(key))
            results[key] = KeyResult(key=key, verdict=Verdict.MISSING_IN_BASELINE, candidate=value)
            continue

        if not base_value:
            warn(format_baseline_zero_line(key, result=value))
            results[key] = KeyResult(
                key=key,
                verdict=Verdict.BASELINE_ZERO,
                candidate=value,
                baseline=base_value,
            )
            continue

        ratio = value / base_value
        if is_regression(
            ratio=ratio,
            candidate=value,
            threshold_ratio=threshold_ratio,
            min_duration=min_duration,
        ):
            warn(format_regression_line(key, ratio=ratio, baseline=base_value, result=value))
            verdict = Verdict.REGRESSED
            bad += 1
        else:
            verdict = Verdict.OK
            good += 1

        results[key] = KeyResult(
            key=key,
            verdict=verdict,
            candidate=value,
            baseline=base_value,
            ratio=ratio,
        )

    return Comparison(results=results, summary=ComparisonSummary(good=good, bad=bad))


__all__ = [
    "DEFAULT_THRESHOLD_RATIO",
    "MIN_DURATION",
    "Comparison",
    "ComparisonSummary",
    "KeyResult",
    "Verdict",
    "classify",
    "is_regression",
]
