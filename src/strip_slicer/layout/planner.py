"""
Module: layout.planner

Purpose:
    Compute the initial pin list for a strip from the target page size,
    tolerance, header/footer counts and (optionally) break positions.

Key Functions:
    - plan_pins(): Main planning function
    - nearest_break(): Closest break position, ties to the lower one
    - boundary_pins(): Pins at every inter-image boundary

Algorithm:
    1. Header pins: first header_count image boundaries; the body
       starts at the last of them.
    2. Footer pins: last footer_count image boundaries; the body ends
       at the first of them.
    3. Body pins: step by page_size from the body start while the
       position stays within the body. With smart breaks, a candidate
       within warn_difference of a break is moved onto that break.
    4. Tail merge: if the last body page is shorter than
       page_size - warn_difference and merging it with the page before
       stays within page_size + warn_difference, drop the last body pin.
    5. Return header + body + footer pins, unsorted.

Dependencies:
    - bisect (std)
    - strip_slicer.config: SlicerConfig

Used By:
    - strip_slicer.session: Initial layout and "reset to spacing"
"""

from __future__ import annotations

import logging
from bisect import bisect_left
from typing import List, Optional, Sequence

from strip_slicer.config import SlicerConfig
from strip_slicer.core.models import Strip

logger = logging.getLogger(__name__)


def nearest_break(breaks: Sequence[int], position: int) -> Optional[int]:
    """
    Find the break closest to position.

    Args:
        breaks: Ascending break positions
        position: Strip offset

    Returns:
        The nearest break; on equal distance the lower one. None if
        breaks is empty.

    Example:
        >>> nearest_break([100, 200], 150)
        100
        >>> nearest_break([100, 200], 151)
        200
    """
    idx = bisect_left(breaks, position)
    after = breaks[idx] if idx < len(breaks) else None
    if after == position:
        return after
    before = breaks[idx - 1] if idx > 0 else None

    if before is None:
        return after
    if after is None:
        return before
    if position - before <= after - position:
        return before
    return after


def boundary_pins(strip: Strip) -> List[int]:
    """Pins at every boundary between consecutive source images."""
    return list(strip.image_boundaries)


def plan_pins(
    strip: Strip,
    breaks: Sequence[int],
    config: SlicerConfig,
) -> List[int]:
    """
    Plan the initial pins for a strip.

    Args:
        strip: Strip being paginated
        breaks: Ascending break positions (see detection.detect_breaks)
        config: Page size, tolerance, header/footer counts, smart breaks

    Returns:
        Header, body and footer pins concatenated. Not deduplicated or
        range-checked; pass through PinSet.from_offsets.

    Example:
        >>> plan_pins(strip_10200, (), SlicerConfig(smart_breaks=False))
        [3500, 7000]
    """
    boundaries = strip.image_boundaries

    header_pins = boundaries[:config.header_count]
    cursor = header_pins[-1] if header_pins else 0

    footer_pins = boundaries[len(boundaries) - config.footer_count:] if config.footer_count else []
    footer_height = strip.height - footer_pins[0] if footer_pins else 0
    logger.debug(f"added footer: {footer_pins}, {footer_height} px")

    body_end = strip.height - footer_height
    body_pins: List[int] = []
    previous = cursor
    pos = cursor + config.page_size
    while pos <= body_end:
        if config.smart_breaks:
            nearest = nearest_break(breaks, pos)
            # A snap that fails to get past the previous pin would stall the walk
            if (
                nearest is not None
                and abs(pos - nearest) <= config.warn_difference
                and nearest > previous
            ):
                pos = nearest
        body_pins.append(pos)
        previous = pos
        pos += config.page_size

    if len(body_pins) >= 2:
        logger.debug(f"pages before merge check: {body_pins}")
        last_height = body_end - body_pins[-1]
        second_to_last_height = body_pins[-1] - body_pins[-2]
        if last_height < config.min_page_size:
            logger.debug(
                f"Last page too small: {last_height}, attempting merge with {second_to_last_height}"
            )
            if second_to_last_height + last_height <= config.max_page_size:
                body_pins.pop()
                logger.debug("last page merged")

    pins = [*header_pins, *body_pins, *footer_pins]
    logger.info(f"Planned {len(pins)} pins for {strip.height}px strip")
    return pins
