from __future__ import annotations

from typing import List

from core.records import NO_ROOM, RECORD_COLUMNS, MaintenanceRecord


def split_rows(text: str) -> List[List[str]]:
    """Split CSV text into rows of raw fields.

    Handles quoted fields, ``""`` escapes and ``\\n`` / ``\\r`` / ``\\r\\n`` line
    endings. Unbalanced quotes never raise: whatever is left at the end of the
    text is flushed as the last row.
    """
    rows: List[List[str]] = []
    row: List[str] = []
    field: List[str] = []
    in_quotes = False

    i = 0
    n = len(text)
    while i < n:
        ch = text[i]
        if ch == '"':
            if in_quotes and i + 1 < n and text[i + 1] == '"':
                field.append('"')
                i += 1
            else:
                in_quotes = not in_quotes
        elif ch == "," and not in_quotes:
            row.append("".join(field))
            field = []
        elif ch in "\r\n" and not in_quotes:
            # Blank lines do not produce rows.
            if row or field:
                row.append("".join(field))
                rows.append(row)
                row = []
                field = []
            if ch == "\r" and i + 1 < n and text[i + 1] == "\n":
                i += 1
        else:
            field.append(ch)
        i += 1

    if row or field:
        row.append("".join(field))
        rows.append(row)
    return rows


def _cell(cells: List[str], idx: int) -> str:
    if idx < len(cells):
        return cells[idx].strip()
    return ""


def row_to_record(cells: List[str], sheet_row: int) -> MaintenanceRecord:
    values = {col: _cell(cells, idx) for idx, col in enumerate(RECORD_COLUMNS)}
    values["room_name"] = values["room_name"] or NO_ROOM
    return MaintenanceRecord(id=f"row-{sheet_row}", **values)


def parse_csv(text: str) -> List[MaintenanceRecord]:
    """Parse the sheet export into records.

    The first row is always treated as the header. Rows without an item name
    (column B) are skipped. Ids carry the sheet row number, so they stay the
    same for a row regardless of which rows above it were skipped.
    """
    records: List[MaintenanceRecord] = []
    for position, cells in enumerate(split_rows(text or "")[1:], start=1):
        if not _cell(cells, 1):
            continue
        records.append(row_to_record(cells, sheet_row=position + 1))
    return records
