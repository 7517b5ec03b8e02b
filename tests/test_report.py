from __future__ import annotations

from datetime import timedelta

import pytest

from api_responsiveness.classify import classify
from api_responsiveness.report import (
    comparison_payload,
    format_duration,
    format_ok_line,
    format_summary_line,
    quote_key,
    ranking_payload,
    report_lines,
)


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (timedelta(0), "0s"),
        (timedelta(microseconds=250), "250µs"),
        (timedelta(microseconds=1500), "1.5ms"),
        (timedelta(milliseconds=50), "50ms"),
        (timedelta(milliseconds=1500), "1.5s"),
        (timedelta(seconds=2), "2s"),
        (timedelta(minutes=2, seconds=3), "2m3s"),
        (timedelta(hours=1), "1h0m0s"),
        (timedelta(milliseconds=-20), "-20ms"),
    ],
)
def test_format_duration(value: timedelta, expected: str) -> None:
    assert format_duration(value) == expected


def test_keys_are_quoted() -> None:
    assert format_ok_line('GET cluster/"odd"') == 'OK: "GET cluster/\\"odd\\""'


@pytest.mark.parametrize(
    ("key", "expected"),
    [
        ("GET cluster/pods", '"GET cluster/pods"'),
        ("a\tb\nc", '"a\\tb\\nc"'),
        ("back\\slash", '"back\\\\slash"'),
        ("\x01", '"\\x01"'),
        ("\x7f", '"\\x7f"'),
        ("\u0085", '"\\u0085"'),
        ("\u200b", '"\\u200b"'),
        ("\U000e0001", '"\\U000e0001"'),
        ("pods-é", '"pods-é"'),
    ],
)
def test_quote_key_escapes_like_go(key: str, expected: str) -> None:
    assert quote_key(key) == expected


def test_summary_line() -> None:
    assert format_summary_line(good=3, bad=1) == "good: 3, bad: 1"


def test_report_lines_and_payload() -> None:
    c = classify(
        {"a": timedelta(milliseconds=100), "b": timedelta(0)},
        {
            "a": timedelta(milliseconds=100),
            "b": timedelta(milliseconds=70),
            "c": timedelta(milliseconds=60),
        },
    )
    assert report_lines(c) == [
        'OK: "a"',
        'WARNING: "b" has a zero baseline (result: 70ms)',
        '"c" missing in the baseline',
        "good: 1, bad: 0",
    ]

    payload = comparison_payload(c)
    assert payload["summary"] == {"good": 1, "bad": 0}
    assert payload["results"][0] == {
        "key": "a",
        "verdict": "OK",
        "baseline_ms": 100.0,
        "result_ms": 100.0,
        "ratio": 1.0,
    }
    assert payload["results"][2]["baseline_ms"] is None
    assert payload["results"][2]["verdict"] == "MISSING_IN_BASELINE"


def test_ranking_payload() -> None:
    assert ranking_payload([(5, "GET cluster/pods")]) == [
        {"count": 5, "key": "GET cluster/pods"}
    ]
