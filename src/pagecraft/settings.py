"""Runtime settings for the pagecraft CLI."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class RuntimeSettings:
    log_dir: Path

    @property
    def telemetry_log(self) -> Path:
        return self.log_dir / "telemetry.jsonl"


def _default_home_dir() -> Path:
    override = os.environ.get("PAGECRAFT_HOME")
    if override:
        return Path(override).expanduser()
    return Path.home() / ".pagecraft"


def load_settings() -> RuntimeSettings:
    return RuntimeSettings(log_dir=_default_home_dir() / "logs")


SETTINGS = load_settings()
