"""
Module: layout.pins

Purpose:
    The editable set of cut positions. A PinSet is an immutable value:
    every edit returns a new PinSet (or the unchanged one plus a
    rejection), so a reader iterating the old set is never disturbed.

Key Classes:
    - PinSet: Ascending, unique pins strictly inside (0, strip_height)
    - EditResult: New pin set plus optional rejection
    - RejectedEdit: Why an edit was refused
    - SnapDirection: BEFORE (towards 0) or AFTER (towards the strip end)

Invariants:
    - offsets strictly ascending, no duplicates
    - 0 < offset < strip_height for every pin
    - The implicit boundaries 0 and strip_height are never stored
    - An empty PinSet means a single page

Dependencies:
    - bisect (std)
    - strip_slicer.core.models: Page, PageSize, derive_pages

Used By:
    - strip_slicer.session: All pin edits
    - output.exporter: Page list for export
"""

from __future__ import annotations

import logging
from bisect import bisect_left, bisect_right
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Iterator, List, Optional, Sequence

from strip_slicer.config import PIN_STEP, SlicerConfig
from strip_slicer.core.models import Page, PageSize, derive_pages

logger = logging.getLogger(__name__)


class SnapDirection(Enum):
    """Direction of a snap or adjacent add, as a sign along the strip."""

    BEFORE = -1
    AFTER = 1


@dataclass(frozen=True)
class RejectedEdit:
    """
    A pin edit that violated an invariant or guard.

    Rejections are reported, never raised; the pin set is unchanged.

    Attributes:
        operation: Name of the edit ("add", "delete", "move", "snap")
        reason: Human-readable explanation
    """

    operation: str
    reason: str

    def __str__(self) -> str:
        return f"{self.operation} rejected: {self.reason}"


@dataclass(frozen=True)
class EditResult:
    """
    Outcome of a pin edit.

    Attributes:
        pins: Resulting pin set (the unchanged one when rejected)
        rejection: None on success
    """

    pins: PinSet
    rejection: Optional[RejectedEdit] = None

    @property
    def accepted(self) -> bool:
        return self.rejection is None


@dataclass(frozen=True)
class PinSet:
    """
    Ordered pin offsets for one strip (immutable).

    Use PinSet.from_offsets() for arbitrary input such as planner
    output; the constructor itself only accepts values that already
    satisfy the invariants.

    Attributes:
        offsets: Ascending pin offsets
        strip_height: Height of the strip the pins belong to

    Example:
        >>> pins = PinSet.from_offsets([7000, 3500, 3500, 0], strip_height=10200)
        >>> pins.offsets
        (3500, 7000)
        >>> pins.add(5000).pins.offsets
        (3500, 5000, 7000)
    """

    offsets: tuple[int, ...]
    strip_height: int

    def __post_init__(self) -> None:
        """Validate invariants on construction."""
        if self.strip_height < 0:
            raise ValueError(f"strip_height must be >= 0: {self.strip_height}")
        previous = 0
        for offset in self.offsets:
            if offset <= previous:
                raise ValueError(f"Pins must be strictly ascending and > 0: {self.offsets}")
            previous = offset
        if self.offsets and self.offsets[-1] >= self.strip_height:
            raise ValueError(
                f"Pin {self.offsets[-1]} is not inside strip of height {self.strip_height}"
            )

    # ─────────────────────────────────────────────────────────────────────────
    # Construction
    # ─────────────────────────────────────────────────────────────────────────

    @classmethod
    def from_offsets(cls, offsets: Iterable[int], strip_height: int) -> PinSet:
        """Sort, deduplicate and drop offsets outside (0, strip_height)."""
        values = sorted({int(o) for o in offsets if 0 < o < strip_height})
        return cls(offsets=tuple(values), strip_height=strip_height)

    @classmethod
    def empty(cls, strip_height: int = 0) -> PinSet:
        return cls(offsets=(), strip_height=strip_height)

    # ─────────────────────────────────────────────────────────────────────────
    # Container protocol
    # ─────────────────────────────────────────────────────────────────────────

    def __len__(self) -> int:
        return len(self.offsets)

    def __iter__(self) -> Iterator[int]:
        return iter(self.offsets)

    def __getitem__(self, index: int) -> int:
        return self.offsets[index]

    def __contains__(self, offset: object) -> bool:
        return offset in self.offsets

    # ─────────────────────────────────────────────────────────────────────────
    # Edits
    # ─────────────────────────────────────────────────────────────────────────

    def add(self, offset: int) -> EditResult:
        """
        Add a pin.

        Rejected if offset is outside (0, strip_height) or already present.
        """
        if offset <= 0 or offset >= self.strip_height:
            return self._reject("add", f"{offset} is outside (0, {self.strip_height})")
        if offset in self.offsets:
            return self._reject("add", f"pin {offset} already exists")
        return self._accept([*self.offsets, offset])

    def add_adjacent(
        self,
        index: int,
        direction: SnapDirection,
        step: int = PIN_STEP,
    ) -> EditResult:
        """Add a pin step pixels before or after the pin at index."""
        if not self._valid_index(index):
            return self._reject("add", f"no pin at index {index}")
        return self.add(self.offsets[index] + direction.value * step)

    def delete(self, index: int) -> EditResult:
        """
        Remove the pin at index.

        Rejected for an out-of-range index, and when only one pin is
        left: the page list always keeps an explicit boundary once one
        exists.
        """
        if not self._valid_index(index):
            return self._reject("delete", f"no pin at index {index}")
        if len(self.offsets) == 1:
            return self._reject("delete", "the last pin cannot be deleted")
        remaining = self.offsets[:index] + self.offsets[index + 1:]
        return self._accept(remaining)

    def move(self, index: int, offset: int) -> EditResult:
        """
        Move the pin at index to offset and re-sort.

        Moving onto another pin's value merges the two.
        """
        if not self._valid_index(index):
            return self._reject("move", f"no pin at index {index}")
        if offset <= 0 or offset >= self.strip_height:
            return self._reject("move", f"{offset} is outside (0, {self.strip_height})")
        others = self.offsets[:index] + self.offsets[index + 1:]
        return self._accept([*others, offset])

    def snap(
        self,
        index: int,
        direction: SnapDirection,
        breaks: Sequence[int],
        strip_width: int,
    ) -> EditResult:
        """
        Move a pin to the nearest break strictly on one side of it.

        Rejected when there is no break on that side, or the break is
        more than 2 * strip_width pixels away (a jump of exactly
        2 * strip_width is allowed).

        Args:
            index: Pin to move
            direction: BEFORE (towards 0) or AFTER (towards strip end)
            breaks: Ascending break positions
            strip_width: Strip width, sets the maximum jump

        Returns:
            EditResult with exactly one pin moved, or a rejection
        """
        if not self._valid_index(index):
            return self._reject("snap", f"no pin at index {index}")

        pos = self.offsets[index]
        if direction is SnapDirection.BEFORE:
            idx = bisect_left(breaks, pos)
            candidate = breaks[idx - 1] if idx > 0 else None
        else:
            idx = bisect_right(breaks, pos)
            candidate = breaks[idx] if idx < len(breaks) else None

        if candidate is None:
            return self._reject("snap", f"no break {direction.name.lower()} {pos}")

        max_jump = 2 * strip_width
        if abs(candidate - pos) > max_jump:
            return self._reject(
                "snap", f"no moving pin: too big jump ({pos} -> {candidate}, max {max_jump})"
            )

        logger.debug(f"move pin {index} ({direction.name.lower()}) from {pos} to {candidate}")
        result = self.move(index, candidate)
        if not result.accepted:
            return self._reject("snap", result.rejection.reason)
        return result

    # ─────────────────────────────────────────────────────────────────────────
    # Derived pages
    # ─────────────────────────────────────────────────────────────────────────

    def pages(self) -> List[Page]:
        """Page intervals defined by the pins; heights sum to strip_height."""
        return derive_pages(self.offsets, self.strip_height)

    def page_sizes(self, config: SlicerConfig, strip_width: int) -> List[PageSize]:
        """Page sizes for display, flagging pages outside the tolerance band."""
        return [
            PageSize(
                page=page,
                width=strip_width,
                out_of_tolerance=config.is_out_of_tolerance(page.height),
            )
            for page in self.pages()
        ]

    # ─────────────────────────────────────────────────────────────────────────
    # Helpers
    # ─────────────────────────────────────────────────────────────────────────

    def _valid_index(self, index: int) -> bool:
        return 0 <= index < len(self.offsets)

    def _accept(self, offsets: Iterable[int]) -> EditResult:
        pins = PinSet.from_offsets(offsets, self.strip_height)
        logger.debug(f"pins: {list(pins.offsets)}")
        return EditResult(pins=pins)

    def _reject(self, operation: str, reason: str) -> EditResult:
        rejection = RejectedEdit(operation=operation, reason=reason)
        logger.info(str(rejection))
        return EditResult(pins=self, rejection=rejection)
