import datetime
from typing import Optional

def format_datetime_for_display(dt: Optional[datetime.datetime]) -> str:
    if dt is None:
        return "N/A"
    return dt.strftime("%Y-%m-%d %I:%M %p")

def format_date_for_display(dt: Optional[datetime.datetime]) -> str:
    if dt is None:
        return "-"
    return dt.strftime("%d %b %Y")

def initials(display_name: str) -> str:
    """Up to two upper-case initials for an avatar, e.g. "Priya Nair" -> "PN"."""
    parts = [p for p in (display_name or "").split() if p]
    if not parts:
        return "?"
    return "".join(p[0] for p in parts[:2]).upper()
