"""Small helpers shared by the session and the CLI."""

from .formatting import format_offset
from .logging_utils import (
    BufferLogHandler,
    OwnerFilter,
    attach_buffer_handler,
    capture_for,
    detach_buffer_handler,
)

__all__ = [
    "format_offset",
    "BufferLogHandler",
    "OwnerFilter",
    "attach_buffer_handler",
    "capture_for",
    "detach_buffer_handler",
]
