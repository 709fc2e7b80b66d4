"""Usage events for view helper invocations (opt-out).

Each CLI invocation appends ``start`` and ``success``/``error`` records to
``<log_dir>/telemetry.jsonl``. A record names the helper that ran and the kind
of input it received; input values themselves are never stored.
"""

from __future__ import annotations

import json
import os
import time
from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Dict, Iterable, Iterator, Optional

from jsonschema import Draft202012Validator

from pagecraft.resources import load_schema
from pagecraft.settings import RuntimeSettings

COMMAND_HELPERS = {
    "date": "format_date",
    "summary": "create_summary",
    "nav": "nav_active",
}

_DISABLE_VALUES = {"0", "false", "no", "off"}


@dataclass(frozen=True)
class ViewEvent:
    """One step of a helper invocation."""

    command: str
    status: str  # "start" | "success" | "error"
    input_kind: Optional[str] = None
    duration_ms: Optional[float] = None
    error_code: Optional[str] = None

    def to_record(self) -> Dict[str, Any]:
        record: Dict[str, Any] = {
            "ts": time.time(),
            "event": f"view.{self.command}",
            "helper": COMMAND_HELPERS.get(self.command),
            "status": self.status,
            "level": "error" if self.status == "error" else "info",
        }
        if self.input_kind:
            record["inputKind"] = self.input_kind
        if self.duration_ms is not None:
            record["durationMs"] = round(self.duration_ms, 3)
        if self.error_code:
            record["errorCode"] = self.error_code
        return record


def telemetry_enabled() -> bool:
    return os.getenv("PAGECRAFT_TELEMETRY", "1").lower() not in _DISABLE_VALUES


def record_view_event(settings: RuntimeSettings, event: ViewEvent) -> None:
    """Validate and append ``event`` unless telemetry is disabled."""

    if not telemetry_enabled():
        return
    record = event.to_record()
    _validator().validate(record)
    log_path = settings.telemetry_log
    log_path.parent.mkdir(parents=True, exist_ok=True)
    with log_path.open("a", encoding="utf-8") as fh:
        fh.write(json.dumps(record, ensure_ascii=False) + "\n")


def iter_events(settings: RuntimeSettings) -> Iterator[Dict[str, Any]]:
    log_path = settings.telemetry_log
    if not log_path.exists():
        return
    with log_path.open("r", encoding="utf-8") as fh:
        for line in fh:
            line = line.strip()
            if not line:
                continue
            try:
                yield json.loads(line)
            except json.JSONDecodeError:
                continue


def summarize(events: Iterable[Dict[str, Any]]) -> Dict[str, Any]:
    """Aggregate records per helper, status and error code."""

    total = 0
    by_helper: Dict[str, int] = {}
    by_status: Dict[str, int] = {}
    errors: Dict[str, int] = {}
    durations: Dict[str, list[float]] = {}
    for evt in events:
        total += 1
        helper = evt.get("helper", "unknown")
        by_helper[helper] = by_helper.get(helper, 0) + 1
        status = evt.get("status", "unknown")
        by_status[status] = by_status.get(status, 0) + 1
        if evt.get("errorCode"):
            errors[evt["errorCode"]] = errors.get(evt["errorCode"], 0) + 1
        if isinstance(evt.get("durationMs"), (int, float)):
            durations.setdefault(helper, []).append(float(evt["durationMs"]))
    return {
        "total": total,
        "by_helper": by_helper,
        "by_status": by_status,
        "errors": errors,
        "mean_duration_ms": {helper: round(sum(values) / len(values), 3) for helper, values in durations.items()},
    }


def clear(settings: RuntimeSettings) -> None:
    log_path = settings.telemetry_log
    if log_path.exists():
        log_path.unlink()


@lru_cache(maxsize=1)
def _validator() -> Draft202012Validator:
    return Draft202012Validator(load_schema("telemetry.schema.json"))
