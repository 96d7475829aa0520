"""
Formatting helpers for pin and page size labels.
"""
from __future__ import annotations


def format_offset(value: float) -> str:
    """
    Format a pixel offset with thousands separators, truncated to int.

    Example:
        >>> format_offset(12345.7)
        '12,345'
    """
    return f"{int(value):,}"
