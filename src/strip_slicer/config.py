"""
Module: config

Purpose:
    Configuration for pagination and export. One immutable struct,
    validated once on construction, replaces scattered form-field reads.

Key Classes:
    - SlicerConfig: Immutable slicer configuration

Key Functions:
    - load_config(): Read a SlicerConfig from a JSON file

Dependencies:
    - dataclasses (std)
    - json (std)

Used By:
    - layout.planner: page size, tolerance, header/footer counts
    - output.exporter: filename prefix
    - session, cli
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Mapping

from strip_slicer.errors import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 3500
DEFAULT_WARN_DIFFERENCE = 1000
DEFAULT_FILENAME_PREFIX = "page_"

# How many pixels away from an existing pin new adjacent pins are added
PIN_STEP = 100


@dataclass(frozen=True)
class SlicerConfig:
    """
    Configuration for pagination and export (immutable).

    Attributes:
        page_size: Target page height in strip pixels
        warn_difference: Allowed deviation from page_size before a page
            is flagged, and maximum distance for smart-break snapping
        header_count: Leading source images whose boundaries are forced pins
        footer_count: Trailing source images whose boundaries are forced pins
        smart_breaks: Snap size-driven pins to nearby break positions
        filename_prefix: Prefix for exported slice names

    Example:
        >>> config = SlicerConfig(page_size=2000, header_count=1)
        >>> config.min_page_size
        1000
    """

    page_size: int = DEFAULT_PAGE_SIZE
    warn_difference: int = DEFAULT_WARN_DIFFERENCE
    header_count: int = 0
    footer_count: int = 0
    smart_breaks: bool = True
    filename_prefix: str = DEFAULT_FILENAME_PREFIX

    def __post_init__(self) -> None:
        """Validate configuration on construction."""
        for name in ("page_size", "warn_difference", "header_count", "footer_count"):
            value = getattr(self, name)
            # bool is an int subclass; True would pass as 1
            if isinstance(value, bool) or not isinstance(value, int):
                raise TypeError(f"{name} must be an integer: {value!r}")
        if not isinstance(self.smart_breaks, bool):
            raise TypeError(f"smart_breaks must be a boolean: {self.smart_breaks!r}")
        if self.filename_prefix and not isinstance(self.filename_prefix, str):
            raise TypeError(f"filename_prefix must be a string: {self.filename_prefix!r}")

        if self.page_size <= 0:
            raise ValueError(f"page_size must be positive: {self.page_size}")
        if self.warn_difference < 0:
            raise ValueError(f"warn_difference must be non-negative: {self.warn_difference}")
        if self.header_count < 0:
            raise ValueError(f"header_count must be non-negative: {self.header_count}")
        if self.footer_count < 0:
            raise ValueError(f"footer_count must be non-negative: {self.footer_count}")
        if not self.filename_prefix:
            object.__setattr__(self, "filename_prefix", DEFAULT_FILENAME_PREFIX)

    @property
    def min_page_size(self) -> int:
        """Smallest page height that is not flagged as too short."""
        return self.page_size - self.warn_difference

    @property
    def max_page_size(self) -> int:
        """Largest page height that is not flagged as too tall."""
        return self.page_size + self.warn_difference

    def is_out_of_tolerance(self, height: int) -> bool:
        """True when a page height deviates from page_size by warn_difference or more."""
        return abs(height - self.page_size) >= self.warn_difference

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> SlicerConfig:
        """
        Build a config from a mapping, ignoring unknown keys.

        Raises:
            TypeError: If a known value has the wrong type
            ValueError: If a known value fails validation
        """
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            logger.debug(f"Ignoring unknown config keys: {unknown}")
        return cls(**{k: v for k, v in data.items() if k in known})

    def to_dict(self) -> dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


def load_config(path: Path) -> SlicerConfig:
    """
    Load a SlicerConfig from a JSON file.

    Args:
        path: JSON file containing a flat object of config fields

    Returns:
        Validated SlicerConfig

    Raises:
        ConfigError: If the file is unreadable, malformed or invalid
    """
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise ConfigError(f"Failed to read config {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise ConfigError(f"Config file {path} is corrupted: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a JSON object")

    try:
        config = SlicerConfig.from_dict(data)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"Invalid config in {path}: {e}") from e

    logger.info(f"Loaded config from {path}")
    return config
