from __future__ import annotations

import logging
import os
import time
from datetime import datetime
from typing import Dict, List, Optional

import requests
from dotenv import load_dotenv

from core.filters import DashboardFilters, filter_records, normalize_filters
from core.parser import parse_csv
from core.records import MaintenanceRecord
from core.stats import AggregateSnapshot, aggregate

load_dotenv()

logger = logging.getLogger(__name__)


# ---------- Source & constants ----------
DEFAULT_SHEET_CSV_URL = (
    "https://docs.google.com/spreadsheets/d/1LAOuNQ3voO8X_y1fZzKj_oKsNZgLnvSnORS2sMa0dNY/export?format=csv&gid=0"
)
SHEET_CSV_URL = os.getenv("MEDFIX_SHEET_CSV_URL", DEFAULT_SHEET_CSV_URL)
CACHE_BUST_PARAM = "t"


def build_fetch_url(base_url: str, now: Optional[float] = None) -> str:
    """Append a millisecond timestamp so the published export is never served from cache."""
    stamp = int((time.time() if now is None else now) * 1000)
    sep = "&" if "?" in base_url else "?"
    return f"{base_url}{sep}{CACHE_BUST_PARAM}={stamp}"


def fetch_sheet_csv(
    url: str = SHEET_CSV_URL,
    *,
    session: Optional[requests.Session] = None,
    timeout: Optional[float] = None,
) -> str:
    getter = session or requests
    response = getter.get(build_fetch_url(url), timeout=timeout)
    response.raise_for_status()
    return response.text


def format_sync_time(moment: datetime) -> str:
    # id-ID renders toLocaleTimeString as HH.MM.SS
    return moment.strftime("%H.%M.%S")


class SheetSync:
    """Owns the record list and replaces it wholesale on each successful sync.

    A failed sync logs the error and keeps the last good records. Overlapping
    syncs are not cancelled; whichever finishes last wins.
    """

    def __init__(self, url: str = SHEET_CSV_URL, *, session: Optional[requests.Session] = None, timeout: Optional[float] = None):
        self.url = url
        self.session = session
        self.timeout = timeout
        self.records: List[MaintenanceRecord] = []
        self.is_syncing = False
        self.last_sync: Optional[str] = None
        self.last_error: Optional[str] = None
        self.initial_attempted = False

    def sync(self) -> bool:
        self.initial_attempted = True
        self.is_syncing = True
        try:
            text = fetch_sheet_csv(self.url, session=self.session, timeout=self.timeout)
            records = parse_csv(text)
            self.records = records
            self.last_sync = format_sync_time(datetime.now())
            self.last_error = None
            logger.info("Synced %d records from sheet", len(records))
            return True
        except Exception as exc:
            logger.exception("Sheet sync failed")
            self.last_error = str(exc)
            return False
        finally:
            self.is_syncing = False

    def ensure_loaded(self) -> None:
        """Run the initial sync once; later fetches only happen through ``sync()``."""
        if not self.initial_attempted:
            self.sync()

    def snapshot(self) -> AggregateSnapshot:
        return aggregate(self.records)

    def search(self, query: str) -> List[MaintenanceRecord]:
        return filter_records(self.records, query)


# ---------------- Public API (Streamlit parity + FastAPI use) ----------------
def load_dashboard_data(sheet_sync: SheetSync) -> Dict[str, object]:
    sheet_sync.ensure_loaded()
    records = list(sheet_sync.records)
    return {
        "records": records,
        "snapshot": aggregate(records),
        "last_sync": sheet_sync.last_sync,
        "last_error": sheet_sync.last_error,
        "is_syncing": sheet_sync.is_syncing,
    }


def prepare_context(filters: dict | DashboardFilters, data_ctx: Dict[str, object]) -> Dict[str, object]:
    filt = filters if isinstance(filters, DashboardFilters) else normalize_filters(filters)
    records: List[MaintenanceRecord] = list(data_ctx.get("records") or [])
    snapshot = data_ctx.get("snapshot")
    if not isinstance(snapshot, AggregateSnapshot):
        snapshot = aggregate(records)
    return {
        "filters": filt,
        "records": records,
        "filtered_records": filter_records(records, filt.query),
        "snapshot": snapshot,
        "last_sync": data_ctx.get("last_sync"),
        "last_error": data_ctx.get("last_error"),
    }
