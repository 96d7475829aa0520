"""
Module: output.exporter

Purpose:
    Export every page of the strip as a PNG. The producer is a lazy,
    restartable sequence of named slices; the sinks decide where the
    bytes go (a directory of files or a ZIP archive).

Key Classes:
    - ExportedSlice: One encoded page
    - SliceExport: Lazy, re-iterable producer of ExportedSlices

Key Functions:
    - iter_slices(): Build a SliceExport for a strip and its pins
    - slice_name(): "<prefix><NN>.png"
    - write_slices_dir(): Directory sink
    - write_slices_zip(): Archive sink

Dependencies:
    - zipfile (std)
    - output.renderer: render_slice, encode_png

Used By:
    - strip_slicer.session.SlicerSession.export
    - strip_slicer.cli
"""

from __future__ import annotations

import logging
import zipfile
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterable, Iterator, List, Optional

from strip_slicer.config import DEFAULT_FILENAME_PREFIX
from strip_slicer.core.models import Page, Strip, derive_pages

from .renderer import encode_png, render_slice

logger = logging.getLogger(__name__)

DEFAULT_ARCHIVE_NAME = "compiled.zip"

ProgressCallback = Callable[[int, int], None]


def slice_name(number: int, prefix: str = DEFAULT_FILENAME_PREFIX) -> str:
    """
    File name for a 1-based page number.

    Example:
        >>> slice_name(3)
        'page_03.png'
        >>> slice_name(12, "ch1_")
        'ch1_12.png'
    """
    return f"{prefix or DEFAULT_FILENAME_PREFIX}{number:02d}.png"


@dataclass(frozen=True)
class ExportedSlice:
    """
    An encoded page ready for delivery.

    Attributes:
        name: Output file name
        top: First strip row (inclusive)
        bottom: End strip row (exclusive)
        data: PNG bytes
    """

    name: str
    top: int
    bottom: int
    data: bytes

    @property
    def height(self) -> int:
        return self.bottom - self.top


class SliceExport:
    """
    Lazy producer of ExportedSlices for every non-empty page.

    Pages are rendered one at a time as the sequence is iterated;
    iterating again starts over. Zero-height pages are skipped and do
    not consume a page number.

    Example:
        >>> export = iter_slices(strip, [3500, 7000])
        >>> [s.name for s in export]
        ['page_01.png', 'page_02.png', 'page_03.png']
    """

    def __init__(
        self,
        strip: Strip,
        pins: Iterable[int],
        prefix: str = DEFAULT_FILENAME_PREFIX,
    ) -> None:
        self.strip = strip
        self.prefix = prefix or DEFAULT_FILENAME_PREFIX
        self._pages = [p for p in derive_pages(list(pins), strip.height) if not p.is_empty]

    @property
    def pages(self) -> List[Page]:
        """Non-empty pages that will be exported, in order."""
        return list(self._pages)

    def __len__(self) -> int:
        return len(self._pages)

    def __iter__(self) -> Iterator[ExportedSlice]:
        for number, page in enumerate(self._pages, start=1):
            name = slice_name(number, self.prefix)
            logger.debug(f"Rendering {name} rows [{page.top}, {page.bottom})")
            image = render_slice(self.strip, page.top, page.bottom)
            yield ExportedSlice(name=name, top=page.top, bottom=page.bottom, data=encode_png(image))


def iter_slices(
    strip: Strip,
    pins: Iterable[int],
    prefix: str = DEFAULT_FILENAME_PREFIX,
) -> SliceExport:
    """
    Export producer for a strip cut at pins.

    Args:
        strip: Strip to slice
        pins: Ascending pin offsets (a PinSet or plain ints)
        prefix: File name prefix; empty falls back to "page_"

    Returns:
        SliceExport, rendered lazily on iteration
    """
    return SliceExport(strip, pins, prefix)


def write_slices_dir(
    slices: Iterable[ExportedSlice],
    output_dir: Path,
    *,
    progress: Optional[ProgressCallback] = None,
) -> List[Path]:
    """
    Write each slice to its own file.

    Args:
        slices: Slices to write (typically a SliceExport)
        output_dir: Destination directory, created if missing
        progress: Called with (written, total) after each file when the
            total is known

    Returns:
        Paths written, in page order

    Raises:
        IOError: If output_dir is not writable
    """
    output_dir.mkdir(parents=True, exist_ok=True)
    total = len(slices) if hasattr(slices, "__len__") else 0
    written = []
    for item in slices:
        path = output_dir / item.name
        path.write_bytes(item.data)
        written.append(path)
        if progress is not None:
            progress(len(written), total)

    logger.info(f"Wrote {len(written)} slices to {output_dir}")
    return written


def write_slices_zip(
    slices: Iterable[ExportedSlice],
    output_path: Path,
    *,
    progress: Optional[ProgressCallback] = None,
) -> Path:
    """
    Add each slice to a ZIP archive.

    PNG data is already compressed, so entries are stored.

    Args:
        slices: Slices to archive
        output_path: Path for .zip file (will append .zip if missing)
        progress: Called with (written, total) after each entry

    Returns:
        Path to created ZIP file

    Raises:
        IOError: If output path is not writable
    """
    if output_path.suffix != ".zip":
        output_path = output_path.with_suffix(".zip")

    output_path.parent.mkdir(parents=True, exist_ok=True)

    logger.info(f"Creating ZIP export at {output_path}")

    total = len(slices) if hasattr(slices, "__len__") else 0
    count = 0
    with zipfile.ZipFile(output_path, "w", zipfile.ZIP_STORED) as zf:
        for item in slices:
            zf.writestr(item.name, item.data)
            count += 1
            if progress is not None:
                progress(count, total)

    logger.info(f"Archived {count} slices")
    return output_path
