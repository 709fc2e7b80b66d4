#!/usr/bin/env python3
"""Entry point for the pagecraft CLI."""

from __future__ import annotations

import argparse
import json
import os
import sys
import time
from collections import deque
from pathlib import Path
from textwrap import dedent
from typing import Any, Callable, Dict

from pagecraft import __version__
from pagecraft.app.views import ViewHelpers
from pagecraft.domain.views.value_objects import HelpersConfigError, ViewHelperError
from pagecraft.settings import SETTINGS
from pagecraft.utils.helpers_config import load_helpers_config
from pagecraft.utils.telemetry import ViewEvent, record_view_event
from pagecraft.utils.telemetry import clear as telemetry_clear
from pagecraft.utils.telemetry import iter_events as telemetry_iter
from pagecraft.utils.telemetry import summarize as telemetry_summarize

HELP_OVERVIEW = dedent(
    """
    Template helpers for static sites.

    Commands:
      - pagecraft date 2024-05-03                    -> May 3, 2024
      - pagecraft summary --file post.md             -> first paragraph
      - pagecraft nav about --current about.html     -> active
      - pagecraft config show                        -> effective helpers config
    """
)


def _default_project_path(path_arg: str | None) -> Path:
    if path_arg:
        return Path(path_arg).expanduser().resolve()
    return Path(os.getcwd())


def _run_view_command(
    args: argparse.Namespace,
    command: str,
    action: Callable[[ViewHelpers], Dict[str, Any]],
    *,
    input_kind: str,
    uses_config: bool = True,
) -> int:
    as_json = getattr(args, "json", False)
    record_view_event(SETTINGS, ViewEvent(command, "start", input_kind=input_kind))
    start = time.perf_counter()

    try:
        if uses_config:
            view = ViewHelpers.for_project(_default_project_path(getattr(args, "path", None)))
        else:
            view = ViewHelpers()
        payload = action(view)
    except ViewHelperError as exc:
        duration = (time.perf_counter() - start) * 1000
        record_view_event(
            SETTINGS,
            ViewEvent(command, "error", input_kind=input_kind, duration_ms=duration, error_code=exc.code),
        )
        if as_json:
            print(json.dumps({"status": "error", **exc.to_dict()}, ensure_ascii=False, indent=2))
        print(f"{command} failed: {exc.message}", file=sys.stderr)
        if exc.remediation:
            print(f"  remediation: {exc.remediation}", file=sys.stderr)
        return 1
    except Exception as exc:  # pragma: no cover - propagate unexpected issues
        duration = (time.perf_counter() - start) * 1000
        record_view_event(
            SETTINGS,
            ViewEvent(command, "error", input_kind=input_kind, duration_ms=duration, error_code=type(exc).__name__),
        )
        raise

    if as_json:
        print(json.dumps({"status": "ok", **payload}, ensure_ascii=False, indent=2))
    elif payload.get("result") is not None:
        print(payload["result"])

    duration = (time.perf_counter() - start) * 1000
    record_view_event(SETTINGS, ViewEvent(command, "success", input_kind=input_kind, duration_ms=duration))
    return 0


def _date_cmd(args: argparse.Namespace) -> int:
    return _run_view_command(
        args,
        "date",
        lambda view: {"input": args.value, "result": view.format_date(args.value)},
        input_kind="iso-string",
        uses_config=False,
    )


def _summary_source_kind(args: argparse.Namespace) -> str:
    if args.text is not None:
        return "text"
    return "file" if args.file else "stdin"


def _read_summary_source(args: argparse.Namespace) -> str:
    if args.text is not None:
        return args.text
    if args.file:
        return Path(args.file).read_text(encoding="utf-8")
    return sys.stdin.read()


def _summary_cmd(args: argparse.Namespace) -> int:
    try:
        text = _read_summary_source(args)
    except (OSError, UnicodeDecodeError) as exc:
        print(f"summary failed: {exc}", file=sys.stderr)
        return 1
    return _run_view_command(
        args,
        "summary",
        lambda view: {"result": view.create_summary(text)},
        input_kind=_summary_source_kind(args),
    )


def _nav_cmd(args: argparse.Namespace) -> int:
    def action(view: ViewHelpers) -> Dict[str, Any]:
        marker = view.with_context(args.current).nav_active(args.page)
        return {"page": args.page, "current": args.current, "active": marker is not None, "result": marker}

    return _run_view_command(args, "nav", action, input_kind="path")


def _config_cmd(args: argparse.Namespace) -> int:
    project_path = _default_project_path(getattr(args, "path", None))
    try:
        config, config_path = load_helpers_config(project_path)
    except HelpersConfigError as exc:
        print(json.dumps({"status": "error", **exc.to_dict()}, ensure_ascii=False, indent=2))
        return 1
    payload = {
        "status": "ok",
        "source": str(config_path) if config_path.exists() else "<default>",
        "config": config.as_dict(),
    }
    print(json.dumps(payload, ensure_ascii=False, indent=2))
    return 0


def _telemetry_cmd(args: argparse.Namespace) -> int:
    if args.telemetry_command == "report":
        recent = getattr(args, "recent", 0)
        if recent and recent > 0:
            events = list(deque(telemetry_iter(SETTINGS), maxlen=recent))
        else:
            events = list(telemetry_iter(SETTINGS))
        print(json.dumps(telemetry_summarize(events), indent=2, ensure_ascii=False))
        return 0
    if args.telemetry_command == "clear":
        telemetry_clear(SETTINGS)
        print("Telemetry log cleared")
        return 0
    if args.telemetry_command == "tail":
        for evt in deque(telemetry_iter(SETTINGS), maxlen=args.limit):
            print(json.dumps(evt, ensure_ascii=False))
        return 0
    print("Unsupported telemetry command", file=sys.stderr)
    return 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pagecraft",
        description=HELP_OVERVIEW,
        formatter_class=argparse.RawTextHelpFormatter,
    )
    parser.add_argument("--version", action="version", version=f"pagecraft {__version__}")

    sub = parser.add_subparsers(dest="command", required=True)

    date_cmd = sub.add_parser("date", help="Format a calendar date for display")
    date_cmd.add_argument("value", help="ISO 8601 date, e.g. 2024-05-03")
    date_cmd.add_argument("--json", action="store_true", help="Emit JSON output")
    date_cmd.set_defaults(func=_date_cmd)

    summary_cmd = sub.add_parser("summary", help="Print the first paragraph of a text")
    source = summary_cmd.add_mutually_exclusive_group()
    source.add_argument("--text", help="Inline text to summarise")
    source.add_argument("--file", help="Read text from file (default: stdin)")
    summary_cmd.add_argument("--path", help="Project path (default: current directory)")
    summary_cmd.add_argument("--json", action="store_true", help="Emit JSON output")
    summary_cmd.set_defaults(func=_summary_cmd)

    nav_cmd = sub.add_parser("nav", help="Check whether a navigation link is active")
    nav_cmd.add_argument("page", help="Page key, e.g. about")
    nav_cmd.add_argument("--current", required=True, help="Path of the page being rendered, e.g. about.html")
    nav_cmd.add_argument("--path", help="Project path (default: current directory)")
    nav_cmd.add_argument("--json", action="store_true", help="Emit JSON output")
    nav_cmd.set_defaults(func=_nav_cmd)

    config_cmd = sub.add_parser("config", help="Inspect helpers configuration")
    config_sub = config_cmd.add_subparsers(dest="config_command", required=True)
    config_show = config_sub.add_parser("show", help="Print effective configuration as JSON")
    config_show.add_argument("--path", help="Project path (default: current directory)")
    config_show.set_defaults(func=_config_cmd)

    telemetry_cmd = sub.add_parser("telemetry", help="Inspect local telemetry logs")
    telemetry_sub = telemetry_cmd.add_subparsers(dest="telemetry_command", required=True)
    telemetry_report = telemetry_sub.add_parser("report", help="Print aggregated telemetry stats")
    telemetry_report.add_argument("--recent", type=int, default=0, help="Limit aggregation to the last N telemetry events")
    telemetry_report.set_defaults(func=_telemetry_cmd)
    telemetry_clear_cmd = telemetry_sub.add_parser("clear", help="Remove telemetry log file")
    telemetry_clear_cmd.set_defaults(func=_telemetry_cmd)
    telemetry_tail = telemetry_sub.add_parser("tail", help="Print last N telemetry events")
    telemetry_tail.add_argument("--limit", type=int, default=20, help="Number of events to print")
    telemetry_tail.set_defaults(func=_telemetry_cmd)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
