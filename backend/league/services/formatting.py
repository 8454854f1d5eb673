"""Display helpers for money and percentages."""
from typing import Optional

UNAVAILABLE = "--"


def format_currency(value: float, decimals: int = 2) -> str:
    """USD with thousands separators, e.g. -$1,234.50."""
    sign = "-" if value < 0 else ""
    return f"{sign}${abs(value):,.{decimals}f}"


def format_percent(value: float, decimals: int = 2) -> str:
    """Signed percent, e.g. +12.50%."""
    sign = "+" if value >= 0 else ""
    return f"{sign}{value:.{decimals}f}%"


def format_percent_safe(value: Optional[float], decimals: int = 2) -> str:
    """Like format_percent, but "--" when the percent is unavailable."""
    if value is None:
        return UNAVAILABLE
    return format_percent(value, decimals)
