"""
Core Models Package

Immutable data models for the virtual strip and the pages cut from it.
Derived structures (strip, pages) are rebuilt from scratch rather than
mutated in place.
"""

from .strip import SourceImage, ScaledImage, Strip, round_half_up
from .pages import Page, PageSize, derive_pages

__all__ = [
    "SourceImage",
    "ScaledImage",
    "Strip",
    "round_half_up",
    "Page",
    "PageSize",
    "derive_pages",
]
