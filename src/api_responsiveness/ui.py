from __future__ import annotations

import re
from collections.abc import Iterable
from typing import Final

from rich.console import Console
from rich.text import Text

_RATIO_RE: Final[re.Pattern[str]] = re.compile(r"took (\S+x) more time")


def console_for_color_mode(color: str, *, stderr: bool = False) -> Console:
    mode = color.strip().lower()
    if mode == "always":
        # Emit ANSI color codes even when stdout is not a TTY (useful for piping to `tail`).
        return Console(force_terminal=True, stderr=stderr, soft_wrap=True)
    if mode == "never":
        return Console(no_color=True, color_system=None, stderr=stderr, soft_wrap=True)
    if mode == "auto":
        return Console(stderr=stderr, soft_wrap=True)
    raise ValueError(f"Invalid color mode: {color!r} (expected auto|always|never)")


def style_report_line(line: str) -> Text:
    # Make verdict lines scannable in CI logs.
    t = Text(line)

    if line.startswith("OK: "):
        t.stylize("green", 0, 2)
        return t

    if line.startswith("WARNING: "):
        t.stylize("bold yellow", 0, 7)
        m = _RATIO_RE.search(line)
        if m is not None:
            t.stylize("bold red", m.start(1), m.end(1))
        return t

    if line.endswith(" missing in the baseline"):
        t.stylize("yellow")
        return t

    if line.startswith("good: "):
        t.stylize("bold")
        return t

    return t


class ReportConsole:
    """
    Line-oriented output for the comparator.

    Report lines go to stdout without wrapping or markup interpretation, so the
    plain-text form stays grep-friendly; warnings for machine-readable runs go
    to stderr.
    """

    def __init__(self, *, color: str = "auto") -> None:
        self.console = console_for_color_mode(color)
        self.err_console = console_for_color_mode(color, stderr=True)

    def line(self, message: str) -> None:
        self.console.print(style_report_line(message))

    def lines(self, messages: Iterable[str]) -> None:
        for m in messages:
            self.line(m)

    def warn(self, message: str) -> None:
        self.err_console.print(style_report_line(message))


__all__ = [
    "ReportConsole",
    "console_for_color_mode",
    "style_report_line",
]
