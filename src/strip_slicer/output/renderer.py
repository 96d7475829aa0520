"""
Module: output.renderer

Purpose:
    Render a vertical crop [y1, y2) of the virtual strip. Only the
    source images overlapping the interval are resized and pasted; the
    whole strip is never materialised as one buffer.

Key Functions:
    - render_slice(): Main rendering function
    - encode_png(): Encode a rendered slice

Dependencies:
    - PIL: Canvas allocation, resampling, pasting, PNG encoding
    - strip_slicer.core.models: Strip, ScaledImage

Used By:
    - output.exporter: One render per exported page
"""

from __future__ import annotations

import io
import logging

from PIL import Image

from strip_slicer.core.models import ScaledImage, Strip
from strip_slicer.errors import RenderSurfaceError

logger = logging.getLogger(__name__)

RESAMPLE_FILTER = Image.Resampling.LANCZOS


def render_slice(strip: Strip, y1: int, y2: int) -> Image.Image:
    """
    Composite rows [y1, y2) of the strip into a new image.

    Each overlapping image is drawn at vertical offset
    (offset_y - y1); Pillow clips whatever falls outside the canvas.

    Args:
        strip: Strip to render from
        y1: First strip row (inclusive)
        y2: End strip row (exclusive)

    Returns:
        Image of size (strip.width, y2 - y1). RGBA if any contributing
        source image carries alpha, RGB otherwise.

    Raises:
        ValueError: Unless 0 <= y1 < y2 <= strip.height
        RenderSurfaceError: If the canvas cannot be allocated or drawn

    Example:
        >>> page = render_slice(strip, 0, 3500)
        >>> page.size
        (800, 3500)
    """
    if not 0 <= y1 < y2 <= strip.height:
        raise ValueError(f"Invalid slice [{y1}, {y2}) for strip of height {strip.height}")

    logger.debug(f"render_slice({y1}, {y2})")
    contributing = list(strip.images_between(y1, y2))
    mode = "RGBA" if any(s.source.image.mode == "RGBA" for s in contributing) else "RGB"

    try:
        canvas = Image.new(mode, (strip.width, y2 - y1))
        for scaled in contributing:
            canvas.paste(_scaled_pixels(scaled, mode), (0, scaled.offset_y - y1))
    except (MemoryError, OSError, ValueError) as e:
        raise RenderSurfaceError(
            f"Could not render {strip.width}x{y2 - y1} slice: {e}"
        ) from e

    return canvas


def _scaled_pixels(scaled: ScaledImage, mode: str) -> Image.Image:
    """Source image resized to its strip size, in the canvas mode."""
    image = scaled.source.image
    if image.mode != mode:
        image = image.convert(mode)
    if image.size != (scaled.width, scaled.height):
        image = image.resize((scaled.width, scaled.height), RESAMPLE_FILTER)
    return image


def encode_png(image: Image.Image) -> bytes:
    """
    Encode an image as PNG.

    Raises:
        RenderSurfaceError: If encoding fails
    """
    buf = io.BytesIO()
    try:
        image.save(buf, format="PNG")
    except (OSError, ValueError) as e:
        raise RenderSurfaceError(f"Could not encode slice as PNG: {e}") from e
    return buf.getvalue()
