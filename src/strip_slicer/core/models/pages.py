"""
Module: pages

Purpose:
    Pages are never stored; they are derived on demand from the pin
    list. This module turns pins into page intervals and size reports.

Key Classes:
    - Page: One [top, bottom) interval of the strip
    - PageSize: Page plus tolerance flag for display

Key Functions:
    - derive_pages(): Pins -> pages

Dependencies:
    - dataclasses (std)

Used By:
    - layout.pins.PinSet: Page sizes after every edit
    - output.exporter: Export batching
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable


@dataclass(frozen=True)
class Page:
    """
    A page interval of the strip.

    Attributes:
        index: 0-based position in the page list
        top: First strip row (inclusive)
        bottom: End row (exclusive)
    """

    index: int
    top: int
    bottom: int

    @property
    def height(self) -> int:
        return self.bottom - self.top

    @property
    def is_empty(self) -> bool:
        """Degenerate page (zero height), skipped on export."""
        return self.bottom == self.top


@dataclass(frozen=True)
class PageSize:
    """
    Page plus display flags.

    Attributes:
        page: The page interval
        width: Strip width
        out_of_tolerance: Height differs from the target by at least
            the warn difference
    """

    page: Page
    width: int
    out_of_tolerance: bool

    @property
    def height(self) -> int:
        return self.page.height

    @property
    def label(self) -> str:
        """Dimensions label, e.g. "800x3500"."""
        return f"{self.width}x{self.height}"


def derive_pages(pins: Iterable[int], strip_height: int) -> list[Page]:
    """
    Derive page intervals from pins.

    Every boundary in pins + [strip_height] closes one page starting at
    the previous boundary (0 for the first). Degenerate pages are kept
    here; export decides whether to skip them.

    Args:
        pins: Ascending pin offsets
        strip_height: Total strip height

    Returns:
        Pages in order; heights sum to strip_height

    Example:
        >>> [p.height for p in derive_pages([100, 250], 400)]
        [100, 150, 150]
    """
    pages = []
    top = 0
    for index, bottom in enumerate([*pins, strip_height]):
        pages.append(Page(index=index, top=top, bottom=bottom))
        top = bottom
    return pages
