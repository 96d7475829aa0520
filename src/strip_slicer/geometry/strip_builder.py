"""
Module: geometry.strip_builder

Purpose:
    Compute the strip width, per-image scale and vertical offsets.
    Pure transform over already-decoded images.

Key Functions:
    - build_strip(): SourceImages -> Strip
    - best_width(): Most frequent native width, ties to first seen
    - scaled_size(): Scaled (width, height, scale) for one image

Dependencies:
    - strip_slicer.core.models: Strip types
    - strip_slicer.errors: EmptyInputError

Used By:
    - strip_slicer.session: Rebuilds the strip on every load
"""

from __future__ import annotations

import logging
from typing import Dict, Sequence, Tuple

from strip_slicer.core.models import ScaledImage, SourceImage, Strip, round_half_up
from strip_slicer.errors import EmptyInputError

logger = logging.getLogger(__name__)


def best_width(images: Sequence[SourceImage]) -> int:
    """
    Pick the strip width by majority vote over native widths.

    Ties are broken in favour of the width seen first.

    Example:
        >>> best_width([img_800, img_720, img_720, img_800])
        800
    """
    counts: Dict[int, int] = {}
    max_count = 0
    width = 0
    for image in images:
        w = image.native_width
        counts[w] = counts.get(w, 0) + 1
        # Strictly greater: an equal count later on never displaces the leader
        if counts[w] > max_count:
            max_count = counts[w]
            width = w
    return width


def scaled_size(image: SourceImage, strip_width: int) -> Tuple[int, int, float]:
    """
    Scaled dimensions of an image inside a strip of the given width.

    Returns:
        (width, height, scale) with height = round(native_height * scale)
    """
    scale = strip_width / image.native_width
    return strip_width, round_half_up(image.native_height * scale), scale


def build_strip(images: Sequence[SourceImage]) -> Strip:
    """
    Build a Strip from decoded source images.

    Every image is scaled, including those already at the strip width,
    so uniform and mixed-width batches share one code path.

    Args:
        images: Source images in upload order

    Returns:
        Strip with contiguous image offsets

    Raises:
        EmptyInputError: If images is empty

    Example:
        >>> strip = build_strip([SourceImage(Image.new("RGB", (800, 1200)))])
        >>> (strip.width, strip.height)
        (800, 1200)
    """
    if not images:
        raise EmptyInputError("No images to build a strip from")

    width = best_width(images)
    scaled = []
    offset = 0
    for image in images:
        w, h, scale = scaled_size(image, width)
        scaled.append(ScaledImage(source=image, width=w, height=h, scale=scale, offset_y=offset))
        if scale != 1:
            logger.debug(
                f"Scaling {image.name or 'image'} from {image.native_width}x{image.native_height} "
                f"to {w}x{h}"
            )
        offset += h

    strip = Strip(images=tuple(scaled), width=width, height=offset)
    logger.info(f"loaded {len(strip)} images, total {strip.height}px")
    return strip
