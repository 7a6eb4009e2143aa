"""Timestamp formatting utilities."""

from datetime import date, datetime
from typing import Optional


def now() -> str:
    """Current local time as YYYYMMDD_HHMMSS (used for log directory names)."""
    return datetime.now().strftime("%Y%m%d_%H%M%S")


def yymmdd(when: Optional[date] = None) -> str:
    """
    Format a date as a six-digit YYMMDD stamp.

    Args:
        when: Date to format (default: today)

    Examples:
        yymmdd(date(2026, 2, 15))
        # "260215"
    """
    when = when or datetime.now().date()
    return when.strftime("%y%m%d")
