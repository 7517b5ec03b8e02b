from __future__ import annotations

from pathlib import Path

import pytest

from api_responsiveness.parse import Labels, MeasurementRecord, ParseError, load_snapshot
from api_responsiveness.rank import rank_by_count


def _rec(resource: str, count: str) -> MeasurementRecord:
    return MeasurementRecord(
        labels=Labels(resource=resource, scope="cluster", verb="GET", count=count), perc99=1.0
    )


def test_rank_by_count_descending() -> None:
    ranking = rank_by_count([_rec("a", "5"), _rec("b", "50"), _rec("c", "1")])
    assert ranking == [(50, "GET cluster/b"), (5, "GET cluster/a"), (1, "GET cluster/c")]


def test_rank_by_count_ties_keep_input_order() -> None:
    ranking = rank_by_count([_rec("a", "3"), _rec("b", "9"), _rec("c", "3")])
    assert [key for _, key in ranking] == ["GET cluster/b", "GET cluster/a", "GET cluster/c"]


def test_rank_by_count_lists_every_record() -> None:
    snap = load_snapshot(Path(__file__).parent / "fixtures" / "result.json")
    assert rank_by_count(snap.records) == [
        (50, "LIST namespace/pods"),
        (7, "POST namespace/configmaps"),
        (5, "GET cluster/pods"),
        (3, "PATCH namespace/deployments"),
        (2, "WATCH /nodes"),
        (1, "GET namespace/pods/log"),
    ]


def test_rank_by_count_fails_on_malformed_count() -> None:
    snap = load_snapshot(Path(__file__).parent / "fixtures" / "bad_count.json")
    with pytest.raises(ParseError, match="cannot convert count"):
        rank_by_count(snap.records)
