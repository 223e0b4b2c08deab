from __future__ import annotations

from typing import Optional

from pydantic import BaseModel


class DashboardFiltersModel(BaseModel):
    query: str = ""
    tab: str = "DASHBOARD"
    preview_limit: int = 4


class PriorityRequest(BaseModel):
    complaint: str = ""
    item_name: str = ""
    room_name: str = ""


class PriorityResponse(BaseModel):
    priority: str
    reasoning: str


class SyncResponse(BaseModel):
    ok: bool
    record_count: int
    last_sync: Optional[str] = None
    error: Optional[str] = None
