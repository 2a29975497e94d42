"""Formatting helpers shared by cards and screens"""

from datetime import datetime
from typing import Any, Optional

from rich.text import Text

STATUS_STYLES = {
    # bookings
    "requested": "black on yellow",
    "accepted": "white on blue",
    "confirmed": "white on cyan",
    "completed": "white on green",
    "declined": "white on red",
    "cancelled": "white on red",
    # disputes
    "pending": "black on yellow",
    "under_review": "white on blue",
    "resolved": "white on green",
    "dismissed": "white on grey50",
    # users
    "verified": "white on green",
    "unverified": "black on yellow",
    "rejected": "white on red",
    "deactivated": "white on grey50",
    "active": "white on green",
    # reviews
    "approved": "white on green",
    "flagged": "black on yellow",
    "removed": "white on red",
}

PRIORITY_STYLES = {
    "low": "green",
    "medium": "yellow",
    "high": "bold red",
    "urgent": "bold white on red",
}


def parse_datetime(value: Optional[str]) -> Optional[datetime]:
    if not value:
        return None
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None


def format_datetime(value: Optional[str]) -> str:
    parsed = parse_datetime(value)
    if parsed is None:
        return value or "N/A"
    return parsed.strftime("%b %d, %Y %I:%M %p")


def format_date(value: Optional[str]) -> str:
    parsed = parse_datetime(value)
    if parsed is None:
        return value or "N/A"
    return parsed.strftime("%b %d, %Y")


def stars(rating: Any) -> str:
    """Five slots: ★ for each point of rating, ☆ for the rest"""
    try:
        filled = max(0, min(5, int(round(float(rating)))))
    except (TypeError, ValueError):
        filled = 0
    return "★" * filled + "☆" * (5 - filled)


def money(amount: Any) -> str:
    if amount is None or amount == "":
        return "N/A"
    try:
        return f"${float(amount):,.2f}".replace(".00", "")
    except (TypeError, ValueError):
        return str(amount)


def humanize(value: Optional[str]) -> str:
    """'under_review' -> 'Under Review'"""
    if not value:
        return ""
    return value.replace("_", " ").title()


def status_badge(status: Optional[str]) -> Text:
    status = status or "unknown"
    return Text(f" {humanize(status)} ", style=STATUS_STYLES.get(status, "white on grey35"))


def priority_badge(priority: Optional[str]) -> Text:
    priority = priority or "medium"
    return Text(humanize(priority), style=PRIORITY_STYLES.get(priority, ""))


def truncate(value: Optional[str], length: int = 80) -> str:
    value = value or ""
    return value if len(value) <= length else value[:length - 1] + "…"
