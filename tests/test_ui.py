from __future__ import annotations

import pytest

from api_responsiveness.ui import ReportConsole, console_for_color_mode, style_report_line


def _styles(line: str) -> list[tuple[str, str]]:
    t = style_report_line(line)
    return [(line[s.start : s.end], str(s.style)) for s in t.spans]


def test_style_ok_line() -> None:
    assert _styles('OK: "GET cluster/pods"') == [("OK", "green")]


def test_style_warning_highlights_ratio() -> None:
    line = 'WARNING: "k" took 2.50x more time than baseline (baseline: 1s, result: 2.5s)'
    assert _styles(line) == [("WARNING", "bold yellow"), ("2.50x", "bold red")]


def test_style_missing_line() -> None:
    assert _styles('"k" missing in the baseline') == [('"k" missing in the baseline', "yellow")]


def test_unknown_color_mode() -> None:
    with pytest.raises(ValueError):
        console_for_color_mode("sometimes")


def test_report_console_never_writes_plain_text(capsys: pytest.CaptureFixture[str]) -> None:
    ui = ReportConsole(color="never")
    ui.lines(['OK: "k"', "good: 1, bad: 0"])
    ui.warn('"m" missing in the baseline')

    captured = capsys.readouterr()
    assert captured.out == 'OK: "k"\ngood: 1, bad: 0\n'
    assert captured.err == '"m" missing in the baseline\n'
