from __future__ import annotations

from dataclasses import asdict
from typing import Any, Dict, List

from core.charts import ranked_bar_chart, to_vega_spec
from core.filters import DashboardFilters
from core.stats import AggregateSnapshot, RankedItem


def _ranking(items: List[RankedItem]) -> List[Dict[str, Any]]:
    return [asdict(i) for i in items]


def obstacle_shares(snapshot: AggregateSnapshot) -> List[Dict[str, Any]]:
    """Obstacle counts as a fraction of all records, for the sidebar bars."""
    denom = snapshot.total or 1
    return [{"name": o.name, "count": o.count, "share": o.count / denom} for o in snapshot.obstacle_data]


def compute_dashboard(filters: DashboardFilters, ctx: Dict[str, Any]) -> Dict[str, Any]:
    snapshot: AggregateSnapshot = ctx.get("snapshot") or AggregateSnapshot()

    payload: Dict[str, Any] = {
        "filters": asdict(filters),
        "last_sync": ctx.get("last_sync"),
        "kpis": {
            "total": snapshot.total,
            "pending": snapshot.pending_count,
            "with_obstacles": snapshot.with_obstacles,
            "completed": snapshot.completed,
        },
        "rankings": {
            "top_items": _ranking(snapshot.top_items),
            "top_all_complaints": _ranking(snapshot.top_all_complaints),
            "top_unfinished_complaints": _ranking(snapshot.top_unfinished_complaints),
            "obstacles": _ranking(snapshot.obstacle_data),
        },
        "obstacle_shares": obstacle_shares(snapshot),
        "pending_preview": [asdict(r) for r in snapshot.pending_records[: filters.preview_limit]],
        "charts": {},
    }
    if snapshot.total == 0:
        return payload

    charts: Dict[str, Any] = {}
    if snapshot.top_items:
        charts["top_items"] = to_vega_spec(ranked_bar_chart(snapshot.top_items, title="Top Item Rusak"))
    if snapshot.top_all_complaints:
        charts["top_all_complaints"] = to_vega_spec(
            ranked_bar_chart(snapshot.top_all_complaints, title="Top 10 Masalah", color="#a5b4fc", highlight_color="#6366f1")
        )
    if snapshot.top_unfinished_complaints:
        charts["top_unfinished_complaints"] = to_vega_spec(
            ranked_bar_chart(
                snapshot.top_unfinished_complaints, title="Belum Selesai", color="#fbbf24", highlight_color="#f59e0b"
            )
        )
    payload["charts"] = charts
    return payload
