from __future__ import annotations

import json
import math
import re
from dataclasses import dataclass
from datetime import timedelta
from pathlib import Path
from typing import Final

_COUNT_RE: Final[re.Pattern[str]] = re.compile(r"[+-]?[0-9]+")

# Largest p99 that still fits a timedelta once read as milliseconds.
_MAX_PERC99_MS: Final[float] = timedelta.max / timedelta(milliseconds=1)


class ParseError(RuntimeError):
    """Raised when a snapshot cannot be read or does not have the expected shape."""


@dataclass(frozen=True, slots=True)
class Labels:
    resource: str = ""
    scope: str = ""
    subresource: str = ""
    verb: str = ""
    count: str = ""

    def count_value(self) -> int:
        """
        Parse the occurrence count label.

        Only plain base-10 integers are accepted (optional sign, no whitespace).
        """
        if not _COUNT_RE.fullmatch(self.count):
            raise ParseError(f"cannot convert count: {self.count!r}")
        return int(self.count)


@dataclass(frozen=True, slots=True)
class MeasurementRecord:
    labels: Labels
    perc99: float = 0.0


@dataclass(frozen=True, slots=True)
class Snapshot:
    records: tuple[MeasurementRecord, ...] = ()
    source: str = "<memory>"


def parse_snapshot(text: str, *, source: str = "<memory>") -> Snapshot:
    """
    Parse an APIResponsiveness snapshot.

    Expected shape:
        {"DataItems": [{"Data": {"Perc99": 12.3},
                        "labels": {"Verb": "GET", "Scope": "cluster", ...}}]}

    Missing keys decode to empty values; wrong JSON types are a ParseError.
    """
    try:
        doc = json.loads(text)
    except json.JSONDecodeError as e:
        raise ParseError(f"{source}: invalid JSON: {e}") from e

    if not isinstance(doc, dict):
        raise ParseError(f"{source}: top-level value must be an object")

    items = _json_list(doc, "DataItems", source=source)
    records: list[MeasurementRecord] = []
    for i, item in enumerate(items):
        where = f"{source}: DataItems[{i}]"
        if not isinstance(item, dict):
            raise ParseError(f"{where} must be an object")
        records.append(_parse_item(item, where=where))

    return Snapshot(records=tuple(records), source=source)


def load_snapshot(path: Path) -> Snapshot:
    """Read and parse a snapshot file in one go."""
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ParseError(f"cannot read snapshot {path}: {e}") from e
    return parse_snapshot(text, source=str(path))


def _parse_item(item: dict[str, object], *, where: str) -> MeasurementRecord:
    data = _json_obj(item, "Data", where=where)
    labels = _json_obj(item, "labels", where=where)

    return MeasurementRecord(
        labels=Labels(
            resource=_json_str(labels, "Resource", where=where),
            scope=_json_str(labels, "Scope", where=where),
            subresource=_json_str(labels, "Subresource", where=where),
            verb=_json_str(labels, "Verb", where=where),
            count=_json_str(labels, "Count", where=where),
        ),
        perc99=_perc99(data, where=where),
    )


def _perc99(data: dict[str, object], *, where: str) -> float:
    v = _json_float(data, "Perc99", where=where)
    if v >= _MAX_PERC99_MS:
        raise ParseError(f"{where}: Perc99 {v!r} ms is out of range")
    return v


def _json_obj(parent: dict[str, object], key: str, *, where: str) -> dict[str, object]:
    v = parent.get(key)
    if v is None:
        return {}
    if not isinstance(v, dict):
        raise ParseError(f"{where}: key {key!r} must be an object")
    return v  # type: ignore[return-value]


def _json_list(parent: dict[str, object], key: str, *, source: str) -> list[object]:
    v = parent.get(key)
    if v is None:
        return []
    if not isinstance(v, list):
        raise ParseError(f"{source}: key {key!r} must be a list")
    return v


def _json_str(obj: dict[str, object], key: str, *, where: str) -> str:
    v = obj.get(key)
    if v is None:
        return ""
    if not isinstance(v, str):
        raise ParseError(f"{where}: key {key!r} must be a string, got {type(v).__name__}")
    return v


def _json_float(obj: dict[str, object], key: str, *, where: str) -> float:
    v = obj.get(key)
    if v is None:
        return 0.0
    if isinstance(v, bool):
        raise ParseError(f"{where}: key {key!r} must be a number, got bool")
    if isinstance(v, (int, float)):
        try:
            f = float(v)
        except OverflowError as e:
            raise ParseError(f"{where}: key {key!r} is out of range") from e
        if not math.isfinite(f):
            raise ParseError(f"{where}: key {key!r} must be finite, got {v!r}")
        return f
    raise ParseError(f"{where}: key {key!r} must be a number, got {type(v).__name__}")


__all__ = [
    "Labels",
    "MeasurementRecord",
    "ParseError",
    "Snapshot",
    "load_snapshot",
    "parse_snapshot",
]
