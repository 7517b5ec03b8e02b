from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer

from .app import run as run_comparator
from .config import (
    Config,
    ConfigError,
    Thresholds,
    env_path,
    parse_duration,
)
from .normalize import EPSILON
from .parse import ParseError

app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    pretty_exceptions_enable=True,
    help="Compare API responsiveness (p99 latency) snapshots and flag regressions.",
)


def _resolve_baseline(baseline: Path | None) -> Path | None:
    if baseline is not None:
        return baseline
    return env_path("API_RESP_BASELINE")


@app.command()
def run(
    result: Annotated[
        Path,
        typer.Argument(
            help="Result snapshot (candidate in compare mode, the listing input in sort mode).",
            dir_okay=False,
        ),
    ],
    baseline: Annotated[
        Path | None,
        typer.Option(
            "--baseline",
            help="Baseline snapshot to compare against (or API_RESP_BASELINE).",
            dir_okay=False,
        ),
    ] = None,
    mode: Annotated[
        str,
        typer.Option(
            "--mode",
            help="compare: flag p99 regressions vs the baseline; sort: list operations by call count.",
            envvar="API_RESP_MODE",
            show_default=True,
        ),
    ] = "compare",
    threshold: Annotated[
        float,
        typer.Option(
            "--threshold",
            help="Failure threshold: flag when result/baseline > 1 + threshold.",
            envvar="API_RESP_THRESHOLD",
        ),
    ] = 0.1,
    min_duration: Annotated[
        str,
        typer.Option(
            "--min-duration",
            help="Noise floor: results at or below this latency are never flagged (e.g. 50ms).",
            envvar="API_RESP_MIN_DURATION",
        ),
    ] = "50ms",
    epsilon: Annotated[
        float,
        typer.Option(
            "--epsilon",
            help="p99 values at or below this are ignored as non-measurements.",
            envvar="API_RESP_EPSILON",
        ),
    ] = EPSILON,
    fail_on_regression: Annotated[
        bool,
        typer.Option(
            "--fail-on-regression/--no-fail-on-regression",
            help="Exit 1 when any operation regressed.",
            envvar="API_RESP_FAIL_ON_REGRESSION",
        ),
    ] = False,
    output: Annotated[
        str,
        typer.Option(
            "--output",
            help="Report format (text|json).",
            envvar="API_RESP_OUTPUT",
            show_default=True,
        ),
    ] = "text",
    color: Annotated[
        str,
        typer.Option(
            "--color",
            help="Color output mode (auto|always|never). Use always when piping to tail.",
            envvar="API_RESP_COLOR",
            show_default=True,
        ),
    ] = "auto",
) -> None:
    """
    Compare a result snapshot against a baseline, or list it by traffic volume.

    Exit codes: 0 ok, 1 unreadable/malformed input or a gated regression,
    2 invalid configuration.
    """
    try:
        color_norm = color.strip().lower()
        if color_norm not in {"auto", "always", "never"}:
            raise ConfigError(
                f"Invalid --color value: {color!r} (expected one of: auto, always, never)"
            )

        cfg = Config(
            result=result,
            baseline=_resolve_baseline(baseline),
            mode=mode.strip().lower(),
            thresholds=Thresholds(
                threshold_ratio=threshold,
                min_duration=parse_duration(min_duration),
                epsilon=epsilon,
            ),
            fail_on_regression=fail_on_regression,
            output=output.strip().lower(),
        )

        outcome = run_comparator(cfg, color=color_norm)
    except ConfigError as e:
        typer.secho(f"CONFIG ERROR: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=2) from e
    except ParseError as e:
        typer.secho(f"ERROR: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1) from e

    if not outcome.ok():
        typer.secho(
            f"FAIL: {outcome.regressions} operation(s) regressed", fg=typer.colors.RED, err=True
        )
        raise typer.Exit(code=1)


def main() -> None:
    """
    Programmatic entrypoint used by `project.scripts`.
    """
    app(prog_name="api-responsiveness")


if __name__ == "__main__":
    main()
