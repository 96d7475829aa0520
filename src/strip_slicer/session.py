"""
Module: session

Purpose:
    Explicit context object holding the state of one slicing job: the
    current strip, its break positions, the pin set and a debug log.
    The owning application creates it and routes every load, edit and
    export through it; the components themselves stay stateless.

Key Classes:
    - SlicerSession: Load → detect → plan → edit → export

Pipeline:
    1. load()/load_files(): build strip, detect breaks, plan pins
    2. add_pin()/delete_pin()/snap_pin()/...: replace the PinSet
    3. page_sizes(): size report after every edit
    4. export(): lazy (name, png) producer

Error policy:
    Loading failures (decode, geometry, detection, planning) reset the
    session to the empty state and re-raise. Rejected edits never
    raise; they come back inside the EditResult and leave state as is.

Dependencies:
    - strip_slicer.geometry, detection, layout, output, loading

Used By:
    - strip_slicer.cli
"""

from __future__ import annotations

import logging
import weakref
from pathlib import Path
from typing import Callable, ContextManager, Iterable, List, Optional, Sequence, Tuple

from strip_slicer.config import PIN_STEP, SlicerConfig
from strip_slicer.core.models import PageSize, SourceImage, Strip
from strip_slicer.detection import detect_breaks
from strip_slicer.errors import DecodeError, EmptyInputError
from strip_slicer.geometry import build_strip
from strip_slicer.layout import (
    EditResult,
    PinSet,
    SnapDirection,
    boundary_pins,
    plan_pins,
)
from strip_slicer.loading import load_images
from strip_slicer.output import SliceExport, iter_slices
from strip_slicer.utils.logging_utils import attach_buffer_handler, capture_for, detach_buffer_handler

logger = logging.getLogger(__name__)


class SlicerSession:
    """
    State for one loaded image set.

    Attributes:
        config: Current configuration
        strip: Current strip, None when nothing is loaded
        breaks: Break positions of the current strip
        pins: Current pin set

    Example:
        >>> session = SlicerSession(SlicerConfig(page_size=2000))
        >>> session.load_files([Path("ep1_01.png"), Path("ep1_02.png")])
        >>> session.snap_pin(0, SnapDirection.AFTER).accepted
        True
        >>> write_slices_zip(session.export(), Path("out/compiled.zip"))
    """

    def __init__(self, config: Optional[SlicerConfig] = None, *, capture_log: bool = True) -> None:
        self.config = config or SlicerConfig()
        self.strip: Optional[Strip] = None
        self.breaks: Tuple[int, ...] = ()
        self.pins: PinSet = PinSet.empty()
        # Records are tagged with this key rather than self so the logger
        # never keeps the session alive
        self._log_owner = object()
        self._log_handler = None
        self._log_finalizer = None
        if capture_log:
            self._log_handler = attach_buffer_handler(owner=self._log_owner)
            self._log_finalizer = weakref.finalize(self, detach_buffer_handler, self._log_handler)

    # ─────────────────────────────────────────────────────────────────────────
    # Lifecycle
    # ─────────────────────────────────────────────────────────────────────────

    def close(self) -> None:
        """Stop capturing log lines."""
        if self._log_finalizer is not None:
            self._log_finalizer()
            self._log_finalizer = None
            self._log_handler = None

    def _capturing(self) -> ContextManager[None]:
        return capture_for(self._log_owner)

    def __enter__(self) -> SlicerSession:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    @property
    def log_lines(self) -> List[str]:
        """Captured debug log, oldest first."""
        if self._log_handler is None:
            return []
        return self._log_handler.snapshot()

    @property
    def is_loaded(self) -> bool:
        return self.strip is not None

    @property
    def strip_width(self) -> int:
        return self.strip.width if self.strip else 0

    @property
    def strip_height(self) -> int:
        return self.strip.height if self.strip else 0

    # ─────────────────────────────────────────────────────────────────────────
    # Loading
    # ─────────────────────────────────────────────────────────────────────────

    def reset(self) -> None:
        """Return to the "no strip loaded" state."""
        self.strip = None
        self.breaks = ()
        self.pins = PinSet.empty()

    def load(self, images: Sequence[SourceImage]) -> None:
        """
        Replace the current strip with one built from images.

        Breaks and pins are recomputed from scratch. An empty image list
        leaves the session empty.

        Raises:
            Any error from geometry, detection or planning, after the
            session has been reset
        """
        with self._capturing():
            self._load(images)

    def _load(self, images: Sequence[SourceImage]) -> None:
        self.reset()
        try:
            strip = build_strip(images)
        except EmptyInputError:
            logger.info("No images loaded")
            return

        try:
            breaks = detect_breaks(strip)
            pins = PinSet.from_offsets(plan_pins(strip, breaks, self.config), strip.height)
        except Exception:
            logger.exception("Failed to prepare strip")
            self.reset()
            raise

        self.strip = strip
        self.breaks = breaks
        self.pins = pins
        logger.info(f"pins: {list(pins)}")

    def load_files(self, paths: Iterable[Path]) -> None:
        """
        Decode files and load them.

        Raises:
            DecodeError: If any file fails; the session is left empty
        """
        with self._capturing():
            self.reset()
            try:
                images = load_images(paths)
            except DecodeError as e:
                logger.error(f"Loading error: {e}")
                raise
            self._load(images)

    def update_config(self, config: SlicerConfig) -> None:
        """Swap configuration; pins are kept until the next reset_to_spacing()."""
        self.config = config

    # ─────────────────────────────────────────────────────────────────────────
    # Layout resets
    # ─────────────────────────────────────────────────────────────────────────

    def reset_to_spacing(self) -> PinSet:
        """Re-plan pins from the current configuration."""
        if self.strip is not None:
            with self._capturing():
                planned = plan_pins(self.strip, self.breaks, self.config)
                self.pins = PinSet.from_offsets(planned, self.strip.height)
        return self.pins

    def reset_to_breaks(self) -> PinSet:
        """One page per source image."""
        if self.strip is not None:
            with self._capturing():
                self.pins = PinSet.from_offsets(boundary_pins(self.strip), self.strip.height)
        return self.pins

    def set_pins(self, offsets: Iterable[int]) -> PinSet:
        """Replace the pins with arbitrary offsets, normalised to the invariants."""
        self.pins = PinSet.from_offsets(offsets, self.strip_height)
        return self.pins

    # ─────────────────────────────────────────────────────────────────────────
    # Pin edits
    # ─────────────────────────────────────────────────────────────────────────

    def add_pin(self, offset: int) -> EditResult:
        return self._apply(lambda pins: pins.add(offset))

    def add_adjacent_pin(self, index: int, direction: SnapDirection, step: int = PIN_STEP) -> EditResult:
        return self._apply(lambda pins: pins.add_adjacent(index, direction, step))

    def delete_pin(self, index: int) -> EditResult:
        return self._apply(lambda pins: pins.delete(index))

    def move_pin(self, index: int, offset: int) -> EditResult:
        return self._apply(lambda pins: pins.move(index, offset))

    def snap_pin(self, index: int, direction: SnapDirection) -> EditResult:
        return self._apply(lambda pins: pins.snap(index, direction, self.breaks, self.strip_width))

    def _apply(self, edit: Callable[[PinSet], EditResult]) -> EditResult:
        with self._capturing():
            result = edit(self.pins)
        if result.accepted:
            self.pins = result.pins
        return result

    # ─────────────────────────────────────────────────────────────────────────
    # Outputs
    # ─────────────────────────────────────────────────────────────────────────

    def page_sizes(self) -> List[PageSize]:
        """Per-page sizes for display; empty when nothing is loaded."""
        if self.strip is None:
            return []
        return self.pins.page_sizes(self.config, self.strip.width)

    def export(self, prefix: Optional[str] = None) -> SliceExport:
        """
        Lazy producer of encoded pages for the current pins.

        Rendering happens while the caller iterates, outside the session,
        so render records go to the normal logging handlers only.

        Raises:
            EmptyInputError: If nothing is loaded
        """
        if self.strip is None:
            raise EmptyInputError("No strip loaded")
        return iter_slices(self.strip, self.pins, prefix or self.config.filename_prefix)
