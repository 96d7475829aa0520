"""
Module: detection

Purpose:
    Find vertical offsets inside the strip that sit on a colour or
    complexity boundary ("good break positions").

Key Functions:
    - detect_breaks(): Main entry point
    - classify_rows(): Per-row complexity and leading colour of one image

Dependencies:
    - numpy: Row scans
    - PIL: Pixel access
"""

from .breaks import detect_breaks, classify_rows, RowScan

__all__ = [
    "detect_breaks",
    "classify_rows",
    "RowScan",
]
