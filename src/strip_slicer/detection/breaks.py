"""
Module: detection.breaks

Purpose:
    Scan every source image's pixel rows and report the strip offsets
    where a monochromatic band starts or ends, or where two flat
    regions of different colours meet. Pagination prefers cutting at
    these offsets because no artwork crosses them.

Key Functions:
    - detect_breaks(): Strip -> ascending break offsets
    - classify_rows(): Complexity and leading colour for each row

Algorithm:
    A row is "complex" if any pixel's RGB differs from its first pixel,
    otherwise "monochromatic". Walking rows top to bottom across all
    images, a row is a break when:
    1. Its complexity differs from the previous row's, or
    2. It is monochromatic and its colour differs from the previous row's.
    The state before the first row is (complex, black), so a strip that
    starts with a flat band reports y = 0.

    Rows are read from the un-resampled source pixels; each source row
    is mapped to strip coordinates through the image's scale.

Dependencies:
    - numpy: Vectorised row comparison
    - PIL: Pixel data

Used By:
    - strip_slicer.session: Recomputed from scratch on every load
    - layout.planner: Smart breaks
    - layout.pins: Snapping
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Tuple

import numpy as np

from strip_slicer.core.models import ScaledImage, Strip

logger = logging.getLogger(__name__)

BLACK = np.zeros(3, dtype=np.uint8)


@dataclass(frozen=True)
class RowScan:
    """
    Row classification for one source image.

    Attributes:
        complex: Bool array, one entry per source row
        colors: (rows, 3) uint8 array of each row's leading RGB
    """

    complex: np.ndarray
    colors: np.ndarray

    @property
    def row_count(self) -> int:
        return int(self.complex.shape[0])


def classify_rows(scaled: ScaledImage, strip_width: int) -> RowScan:
    """
    Classify every unscaled row of an image.

    Alpha is ignored. Only the first min(strip_width, native_width)
    pixels of each row are compared.

    Args:
        scaled: Image to scan
        strip_width: Width of the strip

    Returns:
        RowScan with complexity flags and leading colours
    """
    image = scaled.source.image
    if image.mode != "RGB":
        image = image.convert("RGB")
    pixels = np.asarray(image, dtype=np.uint8)

    span = min(strip_width, pixels.shape[1])
    leading = pixels[:, 0, :]
    complex_rows = (pixels[:, 1:span, :] != leading[:, np.newaxis, :]).any(axis=(1, 2))
    return RowScan(complex=complex_rows, colors=leading.copy())


def detect_breaks(strip: Strip) -> Tuple[int, ...]:
    """
    Find good break positions in the strip.

    Deterministic and pure: the result depends only on the strip.

    Args:
        strip: Strip to scan

    Returns:
        Strictly ascending strip offsets in [0, strip.height]

    Example:
        >>> strip = build_strip([SourceImage(Image.new("RGB", (50, 400), "white"))])
        >>> detect_breaks(strip)
        (0,)
    """
    positions: List[int] = []
    prev_complex = True
    prev_color = BLACK

    for scaled in strip:
        scan = classify_rows(scaled, strip.width)
        if scan.row_count == 0:
            continue

        before_complex = np.concatenate(([prev_complex], scan.complex[:-1]))
        before_color = np.concatenate((prev_color[np.newaxis, :], scan.colors[:-1]))

        flipped = scan.complex != before_complex
        seam = ~scan.complex & (scan.colors != before_color).any(axis=1)
        rows = np.flatnonzero(flipped | seam)

        ys = scaled.offset_y + np.floor(rows * scaled.scale + 0.5).astype(np.int64)
        for y in ys.tolist():
            # Downscaled rows can collapse onto the same strip offset
            if not positions or y > positions[-1]:
                positions.append(y)

        prev_complex = bool(scan.complex[-1])
        prev_color = scan.colors[-1]

    logger.info(f"Found {len(positions)} break positions in {strip.height}px strip")
    return tuple(positions)
