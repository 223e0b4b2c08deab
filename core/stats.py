from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List, Sequence, Tuple

import pandas as pd

from core.records import MaintenanceRecord, has_obstacle, is_pending, is_unfinished


TOP_N = 10
OBSTACLE_TOP_N = 5


@dataclass(frozen=True)
class RankedItem:
    name: str
    count: int


@dataclass(frozen=True)
class AggregateSnapshot:
    total: int = 0
    completed: int = 0
    pending_count: int = 0
    with_obstacles: int = 0
    pending_records: Tuple[MaintenanceRecord, ...] = ()
    top_items: List[RankedItem] = field(default_factory=list)
    top_all_complaints: List[RankedItem] = field(default_factory=list)
    top_unfinished_complaints: List[RankedItem] = field(default_factory=list)
    obstacle_data: List[RankedItem] = field(default_factory=list)


def rank_counts(values: Iterable[str], limit: int) -> List[RankedItem]:
    """Count values and return the ``limit`` most frequent.

    Ties keep first-seen order: the frequency table is built in order of
    appearance and then sorted with a stable sort.
    """
    series = pd.Series(list(values), dtype=object)
    if series.empty:
        return []
    counts = series.groupby(series, sort=False).size()
    counts = counts.sort_values(ascending=False, kind="stable").head(limit)
    return [RankedItem(name=str(name), count=int(count)) for name, count in counts.items()]


def _is_rankable(value: str) -> bool:
    # Literal check only; "0" and "null" are valid categories here.
    return bool(value) and value.strip() != "" and value != "-"


def _complaint_keys(records: Sequence[MaintenanceRecord]) -> List[str]:
    return [r.complaint_type for r in records if _is_rankable(r.complaint_type)]


def aggregate(records: Sequence[MaintenanceRecord]) -> AggregateSnapshot:
    records = list(records)
    if not records:
        return AggregateSnapshot()

    unfinished = [r for r in records if is_unfinished(r)]
    pending = tuple(r for r in records if is_pending(r))
    obstacles = [r.obstacles_main.strip() for r in records]

    return AggregateSnapshot(
        total=len(records),
        completed=len(records) - len(unfinished),
        pending_count=len(pending),
        with_obstacles=sum(1 for r in records if has_obstacle(r)),
        pending_records=pending,
        top_items=rank_counts((r.item_name for r in records if r.item_name), TOP_N),
        top_all_complaints=rank_counts(_complaint_keys(records), TOP_N),
        top_unfinished_complaints=rank_counts(_complaint_keys(unfinished), TOP_N),
        obstacle_data=rank_counts((o for o in obstacles if _is_rankable(o)), OBSTACLE_TOP_N),
    )
