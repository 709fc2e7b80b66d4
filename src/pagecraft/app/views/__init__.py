"""Application services for template view helpers."""

from .service import ViewHelpers

__all__ = ["ViewHelpers"]
