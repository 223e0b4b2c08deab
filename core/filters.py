from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import List, Optional, Sequence

from core.records import MaintenanceRecord


TABS = ("DASHBOARD", "DATABASE")


@dataclass(frozen=True)
class DashboardFilters:
    query: str = ""
    tab: str = "DASHBOARD"
    preview_limit: int = 4


def normalize_filters(raw: Optional[dict]) -> DashboardFilters:
    raw = raw or {}

    query = raw.get("query")
    query = "" if query is None else str(query)

    tab = str(raw.get("tab") or "DASHBOARD").upper()
    if tab not in TABS:
        tab = "DASHBOARD"

    preview_limit = raw.get("preview_limit", 4)
    try:
        preview_limit = int(preview_limit)
    except Exception:
        preview_limit = 4
    preview_limit = max(1, min(50, preview_limit))

    return DashboardFilters(query=query, tab=tab, preview_limit=preview_limit)


def record_matches(record: MaintenanceRecord, needle: str) -> bool:
    return any(needle in str(v).lower() for v in asdict(record).values())


def filter_records(records: Sequence[MaintenanceRecord], query: str) -> List[MaintenanceRecord]:
    """Case-insensitive search across every field of each record."""
    if not query:
        return list(records)
    needle = query.lower()
    return [r for r in records if record_matches(r, needle)]
