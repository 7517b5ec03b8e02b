from __future__ import annotations

from collections.abc import Iterable

from .normalize import operation_key
from .parse import MeasurementRecord


def rank_by_count(records: Iterable[MeasurementRecord]) -> list[tuple[int, str]]:
    """
    List `(count, operation key)` pairs, busiest first.

    Every record is listed (no measurement filter). Counts are parsed up front,
    so a malformed count raises ParseError before anything is returned.
    Ties keep input order.
    """
    pairs = [(r.labels.count_value(), operation_key(r.labels)) for r in records]
    pairs.sort(key=lambda p: p[0], reverse=True)
    return pairs


__all__ = [
    "rank_by_count",
]
