from __future__ import annotations

from collections.abc import Sequence
from datetime import timedelta
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .classify import Comparison, KeyResult

_US_PER_MS = 1_000
_US_PER_S = 1_000_000

_SIMPLE_ESCAPES = {
    "\a": "\\a",
    "\b": "\\b",
    "\f": "\\f",
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
    "\v": "\\v",
    "\\": "\\\\",
    '"': '\\"',
}


def quote_key(key: str) -> str:
    """
    Double-quote a key the way Go's %q does.

    Printable characters pass through; others become \\xNN, \\uNNNN or \\UNNNNNNNN.
    """
    out = []
    for ch in key:
        esc = _SIMPLE_ESCAPES.get(ch)
        if esc is not None:
            out.append(esc)
        elif ch.isprintable():
            out.append(ch)
        elif ord(ch) < 0x80:
            out.append(f"\\x{ord(ch):02x}")
        elif ord(ch) < 0x10000:
            out.append(f"\\u{ord(ch):04x}")
        else:
            out.append(f"\\U{ord(ch):08x}")
    return '"' + "".join(out) + '"'


def format_duration(d: timedelta) -> str:
    """
    Render a duration the way Go's time.Duration prints it.

    Examples: 0s, 250µs, 1.5ms, 50ms, 1.5s, 2m3s, 1h0m0s.
    """
    us = (d.days * 86_400 + d.seconds) * _US_PER_S + d.microseconds
    if us == 0:
        return "0s"

    sign = "-" if us < 0 else ""
    us = abs(us)

    if us < _US_PER_MS:
        return f"{sign}{us}µs"
    if us < _US_PER_S:
        return f"{sign}{_fmt_frac(us, _US_PER_MS)}ms"

    total_s, rem_us = divmod(us, _US_PER_S)
    hours, rest = divmod(total_s, 3600)
    minutes, secs = divmod(rest, 60)
    sec_str = _fmt_frac(secs * _US_PER_S + rem_us, _US_PER_S) + "s"

    if hours:
        return f"{sign}{hours}h{minutes}m{sec_str}"
    if minutes:
        return f"{sign}{minutes}m{sec_str}"
    return sign + sec_str


def _fmt_frac(value: int, unit: int) -> str:
    whole, rem = divmod(value, unit)
    if rem == 0:
        return str(whole)
    digits = len(str(unit)) - 1
    return f"{whole}.{rem:0{digits}d}".rstrip("0")


def format_ok_line(key: str) -> str:
    return f"OK: {quote_key(key)}"


def format_regression_line(
    key: str, *, ratio: float, baseline: timedelta, result: timedelta
) -> str:
    return (
        f"WARNING: {quote_key(key)} took {ratio:.2f}x more time than baseline "
        f"(baseline: {format_duration(baseline)}, result: {format_duration(result)})"
    )


def format_missing_line(key: str) -> str:
    return f"{quote_key(key)} missing in the baseline"


def format_baseline_zero_line(key: str, *, result: timedelta) -> str:
    return f"WARNING: {quote_key(key)} has a zero baseline (result: {format_duration(result)})"


def format_summary_line(*, good: int, bad: int) -> str:
    return f"good: {good}, bad: {bad}"


def format_ranking_line(count: int, key: str) -> str:
    return f"{count} {key}"


def format_result_line(r: KeyResult) -> str:
    # classify imports this module at load time.
    from .classify import Verdict

    if r.verdict is Verdict.MISSING_IN_BASELINE:
        return format_missing_line(r.key)
    if r.verdict is Verdict.BASELINE_ZERO:
        return format_baseline_zero_line(r.key, result=r.candidate)
    if r.verdict is Verdict.REGRESSED:
        assert r.baseline is not None and r.ratio is not None
        return format_regression_line(
            r.key, ratio=r.ratio, baseline=r.baseline, result=r.candidate
        )
    return format_ok_line(r.key)


def report_lines(comparison: Comparison) -> list[str]:
    """One line per visited key, followed by the summary line."""
    lines = [format_result_line(r) for r in comparison.results.values()]
    lines.append(
        format_summary_line(good=comparison.summary.good, bad=comparison.summary.bad)
    )
    return lines


def _ms(d: timedelta | None) -> float | None:
    if d is None:
        return None
    return d / timedelta(milliseconds=1)


def comparison_payload(comparison: Comparison) -> dict[str, object]:
    results = []
    for r in comparison.results.values():
        results.append(
            {
                "key": r.key,
                "verdict": r.verdict.value,
                "baseline_ms": _ms(r.baseline),
                "result_ms": _ms(r.candidate),
                "ratio": r.ratio,
            }
        )
    return {
        "results": results,
        "summary": {"good": comparison.summary.good, "bad": comparison.summary.bad},
    }


def ranking_payload(ranking: Sequence[tuple[int, str]]) -> list[dict[str, object]]:
    return [{"count": count, "key": key} for count, key in ranking]


__all__ = [
    "comparison_payload",
    "format_baseline_zero_line",
    "format_duration",
    "format_missing_line",
    "format_ok_line",
    "format_ranking_line",
    "format_regression_line",
    "format_result_line",
    "format_summary_line",
    "quote_key",
    "ranking_payload",
    "report_lines",
]
