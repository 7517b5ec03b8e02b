"""
api-responsiveness-compare

Compares two API responsiveness snapshots (per-operation p99 latency) and
classifies each operation of the candidate run as OK, REGRESSED or missing in
the baseline.

Library use: `parse_snapshot`/`load_snapshot` -> `normalize` -> `classify`.
"""

from __future__ import annotations

from .classify import Comparison, ComparisonSummary, KeyResult, Verdict, classify
from .normalize import normalize, operation_key
from .parse import Labels, MeasurementRecord, ParseError, Snapshot, load_snapshot, parse_snapshot
from .rank import rank_by_count

__all__ = [
    "Comparison",
    "ComparisonSummary",
    "KeyResult",
    "Labels",
    "MeasurementRecord",
    "ParseError",
    "Snapshot",
    "Verdict",
    "__version__",
    "classify",
    "load_snapshot",
    "normalize",
    "operation_key",
    "parse_snapshot",
    "rank_by_count",
]

# Keep in sync with pyproject.toml.
__version__ = "0.1.0"
