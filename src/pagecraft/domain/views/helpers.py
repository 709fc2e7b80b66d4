"""Pure presentation helpers invoked by templates."""

from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Union

from .constants import (
    DEFAULT_ACTIVE_MARKER,
    DEFAULT_PAGE_EXTENSION,
    DEFAULT_PARAGRAPH_DELIMITER,
    MONTH_ABBREVIATIONS,
)
from .value_objects import InvalidDateError, RenderContext

DateLike = Union[date, datetime, str]


def format_date(value: DateLike) -> str:
    """Render a calendar date as ``"May 3, 2024"``.

    Accepts ``date``/``datetime`` instances or ISO 8601 strings in any form
    ``datetime.fromisoformat`` reads on Python 3.11+ (``2024-05-03``,
    ``20240503``, ``2024-05-03T08:15:00Z`` ...). Calendar fields are taken
    as-is; timezone information on a ``datetime`` is ignored.
    """

    moment = _coerce_date(value)
    month = MONTH_ABBREVIATIONS[moment.month - 1]
    return f"{month} {moment.day}, {moment.year:04d}"


def create_summary(text: str, *, delimiter: str = DEFAULT_PARAGRAPH_DELIMITER) -> str:
    """Return the first paragraph of ``text`` verbatim."""

    if not isinstance(text, str):
        raise TypeError(f"Summary source must be a string, got {type(text).__name__}")
    if not delimiter:
        raise ValueError("Paragraph delimiter must not be empty")
    return text.split(delimiter, 1)[0]


def nav_active(
    page: str,
    current_page: Union[RenderContext, str, None],
    *,
    marker: str = DEFAULT_ACTIVE_MARKER,
    extension: str = DEFAULT_PAGE_EXTENSION,
) -> Optional[str]:
    """Return ``marker`` when ``page`` is the page being rendered, else ``None``."""

    if not isinstance(page, str):
        raise TypeError(f"Page key must be a string, got {type(page).__name__}")
    context = RenderContext.coerce(current_page)
    return marker if context.path == f"{page}{extension}" else None


def _coerce_date(value: object) -> date:
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        candidate = value.strip()
        try:
            return datetime.fromisoformat(candidate)
        except ValueError as exc:
            raise InvalidDateError(f"'{value}' is not a valid ISO 8601 date") from exc
    raise InvalidDateError(f"Cannot format value of type {type(value).__name__} as a date")
