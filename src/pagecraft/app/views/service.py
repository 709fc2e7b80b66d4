"""Template-facing facade binding helpers to one render."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Callable, Dict, Optional, Union

from pagecraft.domain.views import helpers
from pagecraft.domain.views.helpers import DateLike
from pagecraft.domain.views.value_objects import HelpersConfig, RenderContext
from pagecraft.utils.helpers_config import load_helpers_config


@dataclass(frozen=True)
class ViewHelpers:
    """Helpers bound to the current page and the project configuration.

    The hosting framework creates one instance per rendered page (or derives
    one with :meth:`with_context`) and exposes :meth:`filters` to its template
    engine. Instances are immutable and safe to share between threads.
    """

    context: Optional[RenderContext] = None
    config: HelpersConfig = field(default_factory=HelpersConfig.default)

    @classmethod
    def for_project(
        cls,
        project_root: Path,
        *,
        current_page: Union[RenderContext, str, None] = None,
        config_path: Path | None = None,
    ) -> "ViewHelpers":
        config, _ = load_helpers_config(project_root, config_path)
        context = RenderContext.coerce(current_page) if current_page is not None else None
        return cls(context=context, config=config)

    def with_context(self, current_page: Union[RenderContext, str]) -> "ViewHelpers":
        return replace(self, context=RenderContext.coerce(current_page))

    def format_date(self, value: DateLike) -> str:
        return helpers.format_date(value)

    def create_summary(self, text: str) -> str:
        return helpers.create_summary(text, delimiter=self.config.summary_delimiter)

    def nav_active(self, page: str) -> Optional[str]:
        return helpers.nav_active(
            page,
            self.context,
            marker=self.config.active_marker,
            extension=self.config.page_extension,
        )

    def filters(self) -> Dict[str, Callable[..., Optional[str]]]:
        """Return helpers keyed by the names templates use."""

        return {
            "format_date": self.format_date,
            "create_summary": self.create_summary,
            "nav_active": self.nav_active,
        }
