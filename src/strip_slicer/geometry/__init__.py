"""
Module: geometry

Purpose:
    Stack independently sized source images into one virtual strip at
    a common width.

Key Functions:
    - build_strip(): Main entry point
    - best_width(): Majority vote over native widths
    - scaled_size(): Per-image scaled dimensions

Dependencies:
    - strip_slicer.core.models: SourceImage, ScaledImage, Strip

Used By:
    - strip_slicer.session
"""

from .strip_builder import build_strip, best_width, scaled_size

__all__ = [
    "build_strip",
    "best_width",
    "scaled_size",
]
