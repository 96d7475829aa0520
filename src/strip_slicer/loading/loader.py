"""
Module: loading.loader

Purpose:
    Decode image files with Pillow. A failure on any file aborts the
    whole batch with a DecodeError naming that file.

Key Functions:
    - load_image(): Decode one file into a SourceImage
    - load_images(): Decode files in order

Dependencies:
    - PIL: Image decoding
    - strip_slicer.errors: DecodeError

Used By:
    - strip_slicer.session.SlicerSession.load_files
    - strip_slicer.cli
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, List

from PIL import Image, UnidentifiedImageError

from strip_slicer.core.models import SourceImage
from strip_slicer.errors import DecodeError

logger = logging.getLogger(__name__)


def load_image(path: Path) -> SourceImage:
    """
    Decode an image file fully into memory.

    Args:
        path: Image file path

    Returns:
        SourceImage holding an RGB or RGBA copy of the pixel data

    Raises:
        DecodeError: If the file is missing or not a decodable image
    """
    try:
        with Image.open(path) as img:
            img.load()
            # Keep alpha where present; everything else is compared as RGB
            mode = "RGBA" if "A" in img.getbands() or "transparency" in img.info else "RGB"
            decoded = img.convert(mode)
    except (OSError, UnidentifiedImageError, Image.DecompressionBombError) as e:
        raise DecodeError(path.name, str(e)) from e

    return SourceImage(image=decoded, name=path.name)


def load_images(paths: Iterable[Path]) -> List[SourceImage]:
    """
    Decode a batch of image files in order.

    Args:
        paths: Image files in strip order

    Returns:
        Decoded SourceImages

    Raises:
        DecodeError: On the first file that fails; nothing is returned
    """
    images = []
    for path in paths:
        images.append(load_image(Path(path)))
    logger.debug(f"Decoded {len(images)} image files")
    return images
