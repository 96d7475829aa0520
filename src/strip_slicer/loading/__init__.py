"""
Module: loading

Purpose:
    Decode image files into SourceImages for strip building.

Key Functions:
    - load_image(): Decode a single file
    - load_images(): Decode a batch (all or nothing)
"""

from .loader import load_image, load_images

__all__ = [
    "load_image",
    "load_images",
]
