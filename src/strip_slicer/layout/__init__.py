"""
Module: layout

Purpose:
    Page layout for the strip: initial pin planning and the editable
    pin set that defines the pages.

Key Functions:
    - plan_pins(): Initial pins from configuration and break positions
    - boundary_pins(): One page per source image
    - nearest_break(): Closest break to an offset

Key Classes:
    - PinSet: Immutable, invariant-preserving pin collection
    - EditResult / RejectedEdit: Outcome of a pin edit
    - SnapDirection: Before/after direction for snapping

Dependencies:
    - strip_slicer.core.models: Strip, Page, PageSize
    - strip_slicer.config: SlicerConfig

Used By:
    - strip_slicer.session
"""

from .planner import plan_pins, boundary_pins, nearest_break
from .pins import PinSet, EditResult, RejectedEdit, SnapDirection

__all__ = [
    # Planning
    "plan_pins",
    "boundary_pins",
    "nearest_break",
    # Pins
    "PinSet",
    "EditResult",
    "RejectedEdit",
    "SnapDirection",
]
