"""Value objects for the view helpers bounded context."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Mapping, Optional

from .constants import (
    DEFAULT_ACTIVE_MARKER,
    DEFAULT_PAGE_EXTENSION,
    DEFAULT_PARAGRAPH_DELIMITER,
    remediation_for,
)
from .schema import iter_schema_errors

DEFAULT_VERSION = 1


class ViewHelperError(Exception):
    """Base class for errors surfaced by view helpers."""

    default_code = "VIEW_ERROR"

    def __init__(self, message: str, *, code: str | None = None, remediation: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code
        self.remediation = remediation if remediation is not None else remediation_for(self.code)

    def to_dict(self) -> Dict[str, Optional[str]]:
        return {"code": self.code, "message": self.message, "remediation": self.remediation}


class InvalidDateError(ViewHelperError, ValueError):
    """Raised when a value cannot be interpreted as a calendar date."""

    default_code = "VIEW_INVALID_DATE"


class MissingContextError(ViewHelperError, LookupError):
    """Raised when a helper needs the current page but none was supplied."""

    default_code = "VIEW_MISSING_CONTEXT"


class HelpersConfigError(ViewHelperError, ValueError):
    """Raised when helpers configuration is invalid."""

    default_code = "VIEW_CONFIG_INVALID"


@dataclass(frozen=True)
class RenderContext:
    """Per-render state supplied by the hosting framework."""

    path: str

    def __post_init__(self) -> None:
        if not isinstance(self.path, str):
            raise TypeError(f"RenderContext.path must be a string, got {type(self.path).__name__}")

    @classmethod
    def coerce(cls, value: "RenderContext | str | None") -> "RenderContext":
        if value is None:
            raise MissingContextError("Current page is not available in the render context")
        if isinstance(value, RenderContext):
            return value
        if isinstance(value, str):
            return cls(path=value)
        raise TypeError(f"Current page must be a RenderContext or path string, got {type(value).__name__}")


@dataclass(frozen=True)
class HelpersConfig:
    """Tunable constants used by the helpers facade."""

    active_marker: str = DEFAULT_ACTIVE_MARKER
    page_extension: str = DEFAULT_PAGE_EXTENSION
    summary_delimiter: str = DEFAULT_PARAGRAPH_DELIMITER
    version: int = DEFAULT_VERSION

    @classmethod
    def from_dict(cls, data: object, *, config_path: Path) -> "HelpersConfig":
        """Build config from a raw mapping validated against the helpers schema."""

        first_error = next(iter_schema_errors(data), None)
        if first_error is not None:
            location, message = first_error
            raise HelpersConfigError(f"{config_path}: {location}: {message}")

        nav: Mapping[str, str] = data.get("nav", {})  # type: ignore[union-attr]
        summary: Mapping[str, str] = data.get("summary", {})  # type: ignore[union-attr]
        return cls(
            active_marker=nav.get("active_marker", DEFAULT_ACTIVE_MARKER),
            page_extension=nav.get("page_extension", DEFAULT_PAGE_EXTENSION),
            summary_delimiter=summary.get("delimiter", DEFAULT_PARAGRAPH_DELIMITER),
            version=data.get("version", DEFAULT_VERSION),  # type: ignore[union-attr]
        )

    @classmethod
    def default(cls) -> "HelpersConfig":
        return cls()

    def as_dict(self) -> Dict[str, object]:
        return {
            "version": self.version,
            "nav": {"active_marker": self.active_marker, "page_extension": self.page_extension},
            "summary": {"delimiter": self.summary_delimiter},
        }
