"""
Module: strip

Purpose:
    Provides the SourceImage, ScaledImage and Strip dataclasses - the
    geometry of a set of images stacked vertically at a common width.

Key Classes:
    - SourceImage: Decoded image plus its native size
    - ScaledImage: Source image placed inside the strip
    - Strip: Ordered scaled images with overall width and height

Dependencies:
    - PIL.Image: Pixel data
    - dataclasses (std)

Used By:
    - geometry.strip_builder: Builds Strip instances
    - detection.breaks: Reads pixel rows per image
    - output.renderer: Composites slices
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterator, Optional

from PIL import Image


def round_half_up(value: float) -> int:
    """
    Round to the nearest integer, halves going up.

    Example:
        >>> round_half_up(2.5)
        3
        >>> round(2.5)  # banker's rounding, not used for strip geometry
        2
    """
    return int(math.floor(value + 0.5))


@dataclass(frozen=True)
class SourceImage:
    """
    Immutable handle to decoded pixel data.

    Attributes:
        image: Decoded PIL image
        name: File name or label, used in error messages
    """

    image: Image.Image
    name: str = ""

    @property
    def native_width(self) -> int:
        return self.image.width

    @property
    def native_height(self) -> int:
        return self.image.height


@dataclass(frozen=True)
class ScaledImage:
    """
    A source image positioned inside the strip.

    The image occupies rows [offset_y, offset_y + height) of the strip.

    Attributes:
        source: The underlying SourceImage
        width: Scaled width (always the strip width)
        height: Scaled height, round(native_height * scale)
        scale: strip width / native width
        offset_y: Vertical position of the image's top row in the strip
    """

    source: SourceImage
    width: int
    height: int
    scale: float
    offset_y: int

    @property
    def bottom(self) -> int:
        """First strip row below this image (exclusive end)."""
        return self.offset_y + self.height

    def overlaps(self, y1: int, y2: int) -> bool:
        """True if this image shares at least one row with [y1, y2)."""
        return self.offset_y < y2 and y1 < self.bottom

    def strip_y(self, source_row: int) -> int:
        """Map an unscaled source row to a strip-absolute Y."""
        return self.offset_y + round_half_up(source_row * self.scale)


@dataclass(frozen=True)
class Strip:
    """
    Full virtual strip: scaled images stacked top to bottom.

    Recreated wholesale whenever the image set changes.

    Invariants:
        - images[0].offset_y == 0
        - images[i].offset_y == images[i-1].bottom
        - height == images[-1].bottom

    Attributes:
        images: Scaled images in upload order
        width: Common width (majority native width)
        height: Sum of scaled heights
    """

    images: tuple[ScaledImage, ...]
    width: int
    height: int

    def __post_init__(self) -> None:
        """Validate contiguity on construction."""
        expected = 0
        for scaled in self.images:
            if scaled.offset_y != expected:
                raise ValueError(
                    f"Image {scaled.source.name!r} starts at {scaled.offset_y}, expected {expected}"
                )
            expected = scaled.bottom
        if expected != self.height:
            raise ValueError(f"Strip height {self.height} does not match images ({expected})")

    def __iter__(self) -> Iterator[ScaledImage]:
        return iter(self.images)

    def __len__(self) -> int:
        return len(self.images)

    @property
    def image_boundaries(self) -> list[int]:
        """
        Offsets between consecutive images.

        The final boundary at the strip end is excluded.

        Example:
            >>> strip.image_boundaries  # three images of height 100
            [100, 200]
        """
        return [scaled.bottom for scaled in self.images[:-1]]

    def images_between(self, y1: int, y2: int) -> Iterator[ScaledImage]:
        """Yield images overlapping [y1, y2), in order."""
        for scaled in self.images:
            if scaled.bottom <= y1:
                continue
            if scaled.offset_y >= y2:
                break
            yield scaled

    def image_at(self, y: int) -> Optional[ScaledImage]:
        """Image covering strip row y, or None if y is outside the strip."""
        for scaled in self.images_between(y, y + 1):
            return scaled
        return None
