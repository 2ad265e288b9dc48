"""
Result cards with coverage badges and outbound links.
"""

from __future__ import annotations

from html import escape
from typing import List, Optional

import streamlit as st

from coverage_finder.address import (
    business_category,
    business_phone,
    format_address,
    maps_link,
    search_link,
)
from coverage_finder.models import BusinessRecord, CoverageStatus

BADGE_COLORS = {
    CoverageStatus.FTTH: ("#166534", "#dcfce7"),
    CoverageStatus.FWA: ("#a16207", "#fef9c3"),
    CoverageStatus.NOT_COVERED: ("#b91c1c", "#fee2e2"),
    CoverageStatus.ERROR: ("#374151", "#e5e7eb"),
    CoverageStatus.CHECKING: ("#374151", "#f3f4f6"),
}

_BADGE_STYLE = "display:inline-block;padding:2px 8px;border-radius:9999px;font-size:0.8rem;margin-right:6px"


def badge_html(label: str, fg: str = "#374151", bg: str = "#f3f4f6") -> str:
    return f'<span style="{_BADGE_STYLE};color:{fg};background:{bg}">{escape(label)}</span>'


def coverage_badge_html(status: Optional[CoverageStatus], error: Optional[str] = None) -> str:
    """Badge for a coverage status, or '' when the business has none."""
    if status is None:
        return ""
    fg, bg = BADGE_COLORS[status]
    label = f"📶 {status.value}"
    if status is CoverageStatus.ERROR and error:
        return f'<span title="{escape(error)}">{badge_html(label, fg, bg)}</span>'
    return badge_html(label, fg, bg)


def business_card_html(business: BusinessRecord) -> str:
    name = business.name or "Name not available"
    address = format_address(business.tags)
    phone = business_phone(business.tags)
    info = business_category(business.tags)

    lines = [
        f"<div style='font-weight:600;font-size:1.05rem'>{escape(name)}</div>",
        "<div style='margin:4px 0'>"
        + badge_html(info["category"])
        + coverage_badge_html(business.coverage_status, business.coverage_error)
        + "</div>",
        f"<div>📍 {escape(address or 'Address not available')}</div>",
    ]
    if phone:
        lines.append(f"<div>📞 {escape(phone)}</div>")
    lines.append(
        f"<div style='margin-top:6px'>"
        f"<a href='{escape(search_link(name, address))}' target='_blank' rel='noopener noreferrer'>Google</a>"
        f" · <a href='{escape(maps_link(name, address))}' target='_blank' rel='noopener noreferrer'>Maps</a>"
        f"</div>"
    )
    return "\n".join(lines)


def render_results(container, businesses: List[BusinessRecord]) -> None:
    """Draw all result cards into a container (typically an st.empty placeholder)."""
    with container.container():
        if not businesses:
            st.info("No results. Change the search parameters and try again.")
            return
        st.caption(f"{len(businesses)} businesses found")
        for business in businesses:
            with st.container(border=True):
                st.markdown(business_card_html(business), unsafe_allow_html=True)
