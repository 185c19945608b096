"""Date and time formatting utilities."""

from datetime import datetime, timezone
from typing import Optional


def format_date(date: Optional[datetime]) -> str:
    """
    Format a datetime as YYYY-MM-DD HH:MM in local time.

    Args:
        date: Datetime to format, or None

    Returns:
        Formatted date string, "-" when unknown
    """
    if date is None:
        return "-"
    if date.tzinfo is not None:
        date = date.astimezone()
    return date.strftime("%Y-%m-%d %H:%M")


def format_age(date: Optional[datetime], now: Optional[datetime] = None) -> str:
    """
    Format the time elapsed since ``date`` compactly, e.g. ``3d`` or ``5h``.

    Args:
        date: Point in time, or None
        now: Reference time (defaults to now)

    Returns:
        Age string, "-" when unknown
    """
    if date is None:
        return "-"
    if date.tzinfo is None:
        date = date.replace(tzinfo=timezone.utc)
    now = now or datetime.now(timezone.utc)

    seconds = max(int((now - date).total_seconds()), 0)
    if seconds >= 86400:
        return f"{seconds // 86400}d"
    if seconds >= 3600:
        return f"{seconds // 3600}h"
    if seconds >= 60:
        return f"{seconds // 60}m"
    return "now"
