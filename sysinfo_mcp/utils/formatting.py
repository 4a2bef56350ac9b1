"""Unit conversion helpers shared by the tool handlers.

All sizes use binary units (1 GB = 1024**3 bytes) to stay consistent with the
values reported by psutil.
"""

from __future__ import annotations

from typing import Optional, Union

BYTES_PER_MB = 1024 * 1024
BYTES_PER_GB = 1024 * 1024 * 1024

Number = Union[int, float]


def bytes_to_gb(value: Number) -> float:
    return float(value) / BYTES_PER_GB


def format_gb(value: Number, decimals: int = 2) -> str:
    """Format a byte count as a ``"<x> GB"`` string."""
    return f"{bytes_to_gb(value):.{decimals}f} GB"


def format_mb(value: Number, decimals: int = 1) -> str:
    """Format a byte count as a ``"<x> MB"`` string."""
    return f"{float(value) / BYTES_PER_MB:.{decimals}f} MB"


def parse_gb(text: str) -> int:
    """Parse a string produced by :func:`format_gb` back into bytes.

    The result is only as precise as the string it came from.
    """
    number = text.strip()
    if number.upper().endswith("GB"):
        number = number[:-2]
    return int(round(float(number) * BYTES_PER_GB))


def format_percent(value: Number, decimals: int = 1) -> str:
    return f"{float(value):.{decimals}f}%"


def ratio_percent(part: Number, whole: Number, decimals: int = 1) -> str:
    """Format ``part / whole`` as a percentage string (``"0.0%"`` for an empty whole)."""
    if not whole:
        return format_percent(0, decimals)
    return format_percent(float(part) / float(whole) * 100, decimals)


def format_uptime(seconds: Number, with_minutes: bool = True) -> str:
    """Format a duration as ``"<d>d <h>h <m>m"`` or ``"<d>d <h>h"``."""
    total = max(0, int(seconds))
    days, rem = divmod(total, 86400)
    hours, rem = divmod(rem, 3600)
    minutes = rem // 60
    if with_minutes:
        return f"{days}d {hours}h {minutes}m"
    return f"{days}d {hours}h"


def format_temperature(celsius: Optional[Number]) -> str:
    if not celsius:
        return "Not available"
    return f"{celsius}°C"


def or_na(value: Optional[str]) -> str:
    """Return ``value`` or ``"N/A"`` when it is empty."""
    return value if value else "N/A"


__all__ = [
    "BYTES_PER_GB",
    "BYTES_PER_MB",
    "bytes_to_gb",
    "format_gb",
    "format_mb",
    "parse_gb",
    "format_percent",
    "ratio_percent",
    "format_uptime",
    "format_temperature",
    "or_na",
]
