"""
Module: output

Purpose:
    Turn strip intervals back into raster images and deliver them.

Key Functions:
    - render_slice(): Composite [y1, y2) of the strip into one image
    - encode_png(): PIL image -> PNG bytes
    - iter_slices(): Lazy (name, png) producer for every page
    - write_slices_dir(): Sink writing each slice to a directory
    - write_slices_zip(): Sink adding each slice to a ZIP archive

Dependencies:
    - PIL: Compositing and PNG encoding
    - zipfile (std)
"""

from .renderer import render_slice, encode_png
from .exporter import (
    DEFAULT_ARCHIVE_NAME,
    ExportedSlice,
    SliceExport,
    iter_slices,
    slice_name,
    write_slices_dir,
    write_slices_zip,
)

__all__ = [
    "DEFAULT_ARCHIVE_NAME",
    "render_slice",
    "encode_png",
    "ExportedSlice",
    "SliceExport",
    "iter_slices",
    "slice_name",
    "write_slices_dir",
    "write_slices_zip",
]
