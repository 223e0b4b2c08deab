from __future__ import annotations

from html import escape
from typing import Any, Dict, Optional


# Sheet text is untrusted: every value goes through escape() before reaching
# an unsafe_allow_html block.
def _e(value: Any) -> str:
    return escape("" if value is None else str(value))


def page_header_html(title: str, subtitle: str) -> str:
    return (
        "<div class='page-head'>"
        f"<div class='page-sub'>{_e(subtitle)}</div>"
        f"<div class='page-title'>{_e(title)}</div>"
        "</div>"
    )


def card_header_html(title: str, badge: Optional[str] = None) -> str:
    badge_html = f"<span class='card-badge'>{_e(badge)}</span>" if badge else ""
    return f"<div class='card-head'><span class='card-title'>{_e(title)}</span>{badge_html}</div>"


def pending_card_html(row: Dict[str, Any]) -> str:
    return (
        "<div class='pending-card'>"
        f"<div class='room'>{_e(row.get('room_name'))}</div>"
        f"<div class='item'>{_e(row.get('item_name'))}</div>"
        f"<div class='complaint'>&quot;{_e(row.get('complaint_type'))}&quot;</div>"
        f"<div class='date'>Pending · {_e(row.get('complaint_date'))}</div>"
        "</div>"
    )
