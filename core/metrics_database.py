from __future__ import annotations

from dataclasses import asdict
from typing import Any, Dict, List

from core.filters import DashboardFilters
from core.records import MaintenanceRecord, is_empty


def repair_label(record: MaintenanceRecord) -> str:
    return "Pending" if is_empty(record.repair_date) else record.repair_date


def obstacle_label(record: MaintenanceRecord) -> str:
    value = record.obstacles_main
    return value if value and value != "-" else "-"


def compute_database(filters: DashboardFilters, ctx: Dict[str, Any]) -> Dict[str, Any]:
    records: List[MaintenanceRecord] = ctx.get("records", []) or []
    filtered: List[MaintenanceRecord] = ctx.get("filtered_records", records) or []

    rows = []
    for r in filtered:
        row = asdict(r)
        row["repair_label"] = repair_label(r)
        row["obstacle_label"] = obstacle_label(r)
        rows.append(row)

    return {
        "filters": asdict(filters),
        "last_sync": ctx.get("last_sync"),
        "total_count": len(records),
        "row_count": len(rows),
        "rows": rows,
    }
