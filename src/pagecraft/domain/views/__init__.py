"""Domain primitives for template view helpers."""

from __future__ import annotations

from .helpers import create_summary, format_date, nav_active
from .value_objects import (
    HelpersConfig,
    HelpersConfigError,
    InvalidDateError,
    MissingContextError,
    RenderContext,
    ViewHelperError,
)

__all__ = [
    "HelpersConfig",
    "HelpersConfigError",
    "InvalidDateError",
    "MissingContextError",
    "RenderContext",
    "ViewHelperError",
    "create_summary",
    "format_date",
    "nav_active",
]
