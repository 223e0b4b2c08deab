from __future__ import annotations

from dataclasses import asdict, dataclass, fields
from enum import Enum
from typing import Iterable, List, Optional

import pandas as pd


NO_ROOM = "Tanpa Ruangan"
EMPTY_TOKENS = {"", "-", "0", "null"}

# Sheet columns A..I, in positional order.
RECORD_COLUMNS = [
    "room_name",
    "item_name",
    "complaint_type",
    "complaint_date",
    "status",
    "repair_date",
    "obstacles_header",
    "obstacles_main",
    "technician_notes",
]


class Priority(str, Enum):
    LOW = "Rendah"
    MEDIUM = "Sedang"
    HIGH = "Tinggi"
    CRITICAL = "Kritis"


@dataclass(frozen=True)
class MaintenanceRecord:
    id: str
    room_name: str = NO_ROOM
    item_name: str = ""
    complaint_type: str = ""
    complaint_date: str = ""
    status: str = ""
    repair_date: str = ""
    obstacles_header: str = ""
    obstacles_main: str = ""
    technician_notes: str = ""


def is_empty(value: Optional[str]) -> bool:
    """Spreadsheet editors mark "not applicable" with blank, '-', '0' or 'null'."""
    return str(value or "").strip().lower() in EMPTY_TOKENS


def is_unfinished(record: MaintenanceRecord) -> bool:
    return is_empty(record.repair_date)


def has_obstacle(record: MaintenanceRecord) -> bool:
    return not is_empty(record.obstacles_main)


def is_pending(record: MaintenanceRecord) -> bool:
    return is_unfinished(record) and not has_obstacle(record)


def record_field_names() -> List[str]:
    return [f.name for f in fields(MaintenanceRecord)]


def records_to_frame(records: Iterable[MaintenanceRecord]) -> pd.DataFrame:
    rows = [asdict(r) for r in records]
    if not rows:
        return pd.DataFrame(columns=record_field_names())
    return pd.DataFrame(rows, columns=record_field_names())
