from __future__ import annotations

import math
from collections.abc import Iterable
from datetime import timedelta
from typing import Final

from .parse import Labels, MeasurementRecord

EPSILON: Final[float] = 0.00001

NormalizedSnapshot = dict[str, timedelta]


def operation_key(labels: Labels) -> str:
    """Canonical key for an API call shape: `<verb> <scope>/<resource>[/<subresource>]`."""
    key = f"{labels.verb} {labels.scope}/{labels.resource}"
    if labels.subresource:
        key = f"{key}/{labels.subresource}"
    return key


def is_measurement(record: MeasurementRecord, epsilon: float = EPSILON) -> bool:
    # Empty scope marks aggregate/synthetic entries, not countable API calls.
    return record.labels.scope != "" and record.perc99 > epsilon


def normalize(
    records: Iterable[MeasurementRecord], *, epsilon: float = EPSILON
) -> NormalizedSnapshot:
    """
    Map records to `{operation key: p99 latency}`.

    Records failing `is_measurement` are dropped silently. Latencies are
    milliseconds truncated to whole milliseconds. When two records share a key
    the later one wins.
    """
    out: NormalizedSnapshot = {}
    for record in records:
        if not is_measurement(record, epsilon):
            continue
        out[operation_key(record.labels)] = timedelta(milliseconds=math.trunc(record.perc99))
    return out


__all__ = [
    "EPSILON",
    "NormalizedSnapshot",
    "is_measurement",
    "normalize",
    "operation_key",
]
