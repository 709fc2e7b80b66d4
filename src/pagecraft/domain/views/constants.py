"""Constants for the view helpers domain."""

from __future__ import annotations

MONTH_ABBREVIATIONS = (
    "Jan",
    "Feb",
    "Mar",
    "Apr",
    "May",
    "Jun",
    "Jul",
    "Aug",
    "Sep",
    "Oct",
    "Nov",
    "Dec",
)

DEFAULT_ACTIVE_MARKER = "active"
DEFAULT_PAGE_EXTENSION = ".html"
DEFAULT_PARAGRAPH_DELIMITER = "\n\n"

ERROR_REMEDIATIONS = {
    "VIEW_INVALID_DATE": "Pass a datetime.date/datetime or an ISO 8601 string such as 2024-05-03.",
    "VIEW_MISSING_CONTEXT": "Provide the current page (RenderContext or path) when rendering navigation links.",
    "VIEW_CONFIG_INVALID": "Update .pagecraft/config/helpers.yaml to match the helpers schema.",
}


def remediation_for(code: str) -> str | None:
    """Return default remediation text for a given error code."""

    return ERROR_REMEDIATIONS.get(code)
