from __future__ import annotations

import json
from collections.abc import Callable
from dataclasses import dataclass

from .classify import Comparison, classify
from .config import Config, Thresholds, validate_config
from .normalize import normalize
from .parse import Snapshot, load_snapshot
from .rank import rank_by_count
from .report import comparison_payload, format_ranking_line, ranking_payload, report_lines
from .ui import ReportConsole


@dataclass(frozen=True, slots=True)
class OverallOutcome:
    regressions: int = 0
    fail_on_regression: bool = False

    def ok(self) -> bool:
        return not (self.fail_on_regression and self.regressions > 0)


def compare_snapshots(
    baseline: Snapshot,
    candidate: Snapshot,
    thresholds: Thresholds = Thresholds(),
    *,
    on_warning: Callable[[str], None] | None = None,
) -> Comparison:
    """Normalize both snapshots and classify the candidate against the baseline."""
    return classify(
        normalize(baseline.records, epsilon=thresholds.epsilon),
        normalize(candidate.records, epsilon=thresholds.epsilon),
        threshold_ratio=thresholds.threshold_ratio,
        min_duration=thresholds.min_duration,
        on_warning=on_warning,
    )


def run(cfg: Config, *, color: str = "auto") -> OverallOutcome:
    """
    Run one comparison or ranking.

    All inputs are loaded and parsed before anything is printed, so an
    unreadable or malformed snapshot (ParseError) aborts with no partial report.

    The caller (CLI) is responsible for translating failures into exit codes.
    """
    validate_config(cfg)

    ui = ReportConsole(color=color)

    if cfg.mode == "sort":
        snapshot = load_snapshot(cfg.result)
        ranking = rank_by_count(snapshot.records)
        if cfg.output == "json":
            print(json.dumps(ranking_payload(ranking), indent=2))
        else:
            ui.lines(format_ranking_line(count, key) for count, key in ranking)
        return OverallOutcome()

    assert cfg.baseline is not None
    result = load_snapshot(cfg.result)
    baseline = load_snapshot(cfg.baseline)

    if cfg.output == "json":
        # stdout carries the JSON document; warnings go to stderr.
        comparison = compare_snapshots(baseline, result, cfg.thresholds, on_warning=ui.warn)
        print(json.dumps(comparison_payload(comparison), indent=2))
    else:
        comparison = compare_snapshots(baseline, result, cfg.thresholds)
        ui.lines(report_lines(comparison))

    return OverallOutcome(
        regressions=comparison.summary.bad,
        fail_on_regression=cfg.fail_on_regression,
    )


__all__ = [
    "OverallOutcome",
    "compare_snapshots",
    "run",
]
