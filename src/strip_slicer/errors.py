"""
Module: errors

Purpose:
    Exception taxonomy shared by every stage of the slicer. Fatal
    conditions are exceptions; rejected pin edits are plain values
    (see layout.pins.RejectedEdit) and never raised.

Key Classes:
    - SlicerError: Base class for all slicer exceptions
    - DecodeError: A source image could not be decoded
    - EmptyInputError: No images were supplied
    - RenderSurfaceError: Output raster could not be allocated or drawn
    - ConfigError: Configuration file is unreadable or invalid

Used By:
    - loading.loader, geometry.strip_builder, output.renderer, config,
      session, cli
"""

from __future__ import annotations

from typing import Optional


class SlicerError(Exception):
    """Base class for slicer failures."""
    pass


class DecodeError(SlicerError):
    """
    A source image failed to load.

    Fatal to the whole batch: the caller discards partial state and
    returns to "no strip loaded".

    Attributes:
        name: File name of the failing image
    """

    def __init__(self, name: str, reason: Optional[str] = None) -> None:
        self.name = name
        self.reason = reason
        message = f"Error loading {name}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class EmptyInputError(SlicerError):
    """No images were supplied; callers treat this as the empty state."""
    pass


class RenderSurfaceError(SlicerError):
    """The output raster surface could not be created or drawn on."""
    pass


class ConfigError(SlicerError):
    """Configuration could not be read or failed validation."""
    pass
