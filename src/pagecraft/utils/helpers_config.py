"""Loading of project-level helpers configuration."""

from __future__ import annotations

from pathlib import Path
from typing import Dict, Tuple

import yaml

from pagecraft.domain.views.value_objects import HelpersConfig, HelpersConfigError

DEFAULT_CONFIG_RELATIVE = Path(".pagecraft/config/helpers.yaml")

_CONFIG_CACHE: Dict[Path, tuple[int, int, HelpersConfig]] = {}


def load_helpers_config(project_root: Path, path: Path | None = None) -> Tuple[HelpersConfig, Path]:
    """Load configuration from disk, falling back to defaults when absent."""

    config_path = (path or (project_root / DEFAULT_CONFIG_RELATIVE)).resolve()
    if not config_path.exists():
        return HelpersConfig.default(), config_path

    stat = config_path.stat()
    cached = _CONFIG_CACHE.get(config_path)
    if cached and cached[0] == stat.st_mtime_ns and cached[1] == stat.st_size:
        return cached[2], config_path

    try:
        raw = yaml.safe_load(config_path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        raise HelpersConfigError(f"Cannot parse {config_path}: {exc}") from exc
    config = HelpersConfig.from_dict(raw, config_path=config_path)
    _CONFIG_CACHE[config_path] = (stat.st_mtime_ns, stat.st_size, config)
    return config, config_path


def clear_cache() -> None:
    _CONFIG_CACHE.clear()
