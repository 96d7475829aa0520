"""
Logging utilities for collecting slicer log lines into an in-memory
buffer, so a front end can show what the slicer did.

Several buffers may share one logger. Each buffer only keeps records
emitted while its owner is active (see capture_for), so two sessions
never see each other's lines.
"""
from __future__ import annotations

import logging
import threading
from collections import deque
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Deque, Dict, Iterator, List, Optional, Tuple

# Lines kept per buffer; older lines are dropped
DEFAULT_BUFFER_LINES = 1000

# Owner whose buffer receives records in the current thread/task
_active_owner: ContextVar[Optional[object]] = ContextVar("strip_slicer_log_owner", default=None)

# logger name -> (level before the first attach, attached buffer count)
_saved_levels: Dict[Optional[str], Tuple[int, int]] = {}
_levels_lock = threading.Lock()


class OwnerFilter(logging.Filter):
    """Pass records only while `owner` is the active capture owner."""

    def __init__(self, owner: object):
        super().__init__()
        self.owner = owner

    def filter(self, record: logging.LogRecord) -> bool:
        return _active_owner.get() is self.owner


class BufferLogHandler(logging.Handler):
    """
    A logging handler that appends formatted records to a bounded buffer.

    Used by SlicerSession to keep a debug log of loads, plans and edits.
    """

    def __init__(self, level: int = logging.DEBUG, max_lines: int = DEFAULT_BUFFER_LINES):
        super().__init__(level)
        self.lines: Deque[str] = deque(maxlen=max_lines)
        self.setFormatter(logging.Formatter("%(message)s"))

    def emit(self, record: logging.LogRecord) -> None:
        try:
            self.lines.append(self.format(record))
        except Exception:
            self.handleError(record)

    def text(self) -> str:
        """Buffer contents joined with newlines."""
        return "\n".join(self.lines)

    def snapshot(self) -> List[str]:
        return list(self.lines)

    def clear(self) -> None:
        self.lines.clear()


@contextmanager
def capture_for(owner: Optional[object]) -> Iterator[None]:
    """Route records emitted inside the block to buffers filtered on `owner`."""
    token = _active_owner.set(owner)
    try:
        yield
    finally:
        _active_owner.reset(token)


def attach_buffer_handler(
    logger_name: Optional[str] = "strip_slicer",
    level: int = logging.DEBUG,
    owner: Optional[object] = None,
) -> BufferLogHandler:
    """
    Attach a BufferLogHandler to the specified logger (or root logger if None).

    The logger's level is lowered to `level` if it would otherwise
    filter records out before they reach the handler. The original level
    comes back when the last buffer on that logger is detached.

    Args:
        logger_name: Name of logger to attach to. None = root logger.
        level: Minimum level captured.
        owner: If given, only records emitted inside capture_for(owner)
            reach this buffer.

    Returns:
        The attached handler (for later removal).
    """
    logger = logging.getLogger(logger_name)
    handler = BufferLogHandler(level)
    if owner is not None:
        handler.addFilter(OwnerFilter(owner))

    with _levels_lock:
        original, count = _saved_levels.get(logger_name, (logger.level, 0))
        _saved_levels[logger_name] = (original, count + 1)
        logger.addHandler(handler)
        if logger.getEffectiveLevel() > level:
            logger.setLevel(level)
    return handler


def detach_buffer_handler(handler: BufferLogHandler, logger_name: Optional[str] = "strip_slicer") -> None:
    """
    Remove a BufferLogHandler from the specified logger.

    Detaching a handler that is not attached does nothing.

    Args:
        handler: The handler to remove.
        logger_name: Name of logger to detach from. None = root logger.
    """
    logger = logging.getLogger(logger_name)
    with _levels_lock:
        if handler not in logger.handlers:
            return
        logger.removeHandler(handler)
        original, count = _saved_levels.get(logger_name, (logger.level, 1))
        if count <= 1:
            _saved_levels.pop(logger_name, None)
            logger.setLevel(original)
        else:
            _saved_levels[logger_name] = (original, count - 1)
