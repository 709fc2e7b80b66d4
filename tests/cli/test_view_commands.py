from __future__ import annotations

import io
import json
from pathlib import Path

import pytest

from pagecraft import __version__
from pagecraft.cli import main as cli_main
from pagecraft.settings import RuntimeSettings
from pagecraft.utils import helpers_config
from pagecraft.utils.telemetry import iter_events


@pytest.fixture()
def runtime_settings(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> RuntimeSettings:
    log_dir = tmp_path / "runtime" / "logs"
    log_dir.mkdir(parents=True, exist_ok=True)
    settings = RuntimeSettings(log_dir=log_dir)
    monkeypatch.setattr(cli_main, "SETTINGS", settings, raising=False)
    monkeypatch.delenv("PAGECRAFT_TELEMETRY", raising=False)
    helpers_config.clear_cache()
    return settings


@pytest.fixture()
def project(tmp_path: Path) -> Path:
    project_path = tmp_path / "site"
    project_path.mkdir()
    return project_path


def _write_config(project_path: Path, body: str) -> None:
    config = project_path / ".pagecraft" / "config" / "helpers.yaml"
    config.parent.mkdir(parents=True, exist_ok=True)
    config.write_text(body, encoding="utf-8")


def test_date_command_prints_display_date(runtime_settings: RuntimeSettings, project: Path, capsys: pytest.CaptureFixture[str]) -> None:
    exit_code = cli_main.main(["date", "2024-05-03"])

    assert exit_code == 0
    assert capsys.readouterr().out == "May 3, 2024\n"
    statuses = [evt["status"] for evt in iter_events(runtime_settings)]
    assert statuses == ["start", "success"]


def test_date_command_reports_invalid_date(runtime_settings: RuntimeSettings, project: Path, capsys: pytest.CaptureFixture[str]) -> None:
    exit_code = cli_main.main(["date", "2023-02-30", "--json"])

    captured = capsys.readouterr()
    assert exit_code == 1
    payload = json.loads(captured.out)
    assert payload["status"] == "error"
    assert payload["code"] == "VIEW_INVALID_DATE"
    assert "date failed" in captured.err
    events = list(iter_events(runtime_settings))
    assert events[-1]["status"] == "error"
    assert events[-1]["level"] == "error"
    assert events[-1]["errorCode"] == "VIEW_INVALID_DATE"
    assert events[-1]["helper"] == "format_date"


def test_summary_command_from_text(runtime_settings: RuntimeSettings, project: Path, capsys: pytest.CaptureFixture[str]) -> None:
    exit_code = cli_main.main(["summary", "--text", "Hello\n\nWorld", "--path", str(project)])

    assert exit_code == 0
    assert capsys.readouterr().out == "Hello\n"


def test_summary_command_from_file_as_json(runtime_settings: RuntimeSettings, project: Path, capsys: pytest.CaptureFixture[str]) -> None:
    post = project / "post.md"
    post.write_text("Line one\nline two\n\nSecond paragraph\n", encoding="utf-8")

    exit_code = cli_main.main(["summary", "--file", str(post), "--path", str(project), "--json"])

    assert exit_code == 0
    payload = json.loads(capsys.readouterr().out)
    assert payload == {"status": "ok", "result": "Line one\nline two"}


def test_summary_command_reads_stdin(
    runtime_settings: RuntimeSettings,
    project: Path,
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
) -> None:
    monkeypatch.setattr("sys.stdin", io.StringIO("From stdin\n\nignored"))

    exit_code = cli_main.main(["summary", "--path", str(project)])

    assert exit_code == 0
    assert capsys.readouterr().out == "From stdin\n"


def test_summary_command_missing_file(runtime_settings: RuntimeSettings, project: Path, capsys: pytest.CaptureFixture[str]) -> None:
    exit_code = cli_main.main(["summary", "--file", str(project / "absent.md"), "--path", str(project)])

    assert exit_code == 1
    assert "summary failed" in capsys.readouterr().err


def test_summary_command_rejects_undecodable_file(
    runtime_settings: RuntimeSettings, project: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    post = project / "post.md"
    post.write_bytes(b"caf\xe9\n\nrest")

    exit_code = cli_main.main(["summary", "--file", str(post), "--path", str(project)])

    captured = capsys.readouterr()
    assert exit_code == 1
    assert captured.out == ""
    assert "summary failed" in captured.err


def test_summary_command_rejects_undecodable_stdin(
    runtime_settings: RuntimeSettings,
    project: Path,
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
) -> None:
    monkeypatch.setattr("sys.stdin", io.TextIOWrapper(io.BytesIO(b"caf\xe9\n\nrest"), encoding="utf-8"))

    exit_code = cli_main.main(["summary", "--path", str(project)])

    assert exit_code == 1
    assert "summary failed" in capsys.readouterr().err


def test_summary_command_records_input_kind(runtime_settings: RuntimeSettings, project: Path) -> None:
    post = project / "post.md"
    post.write_text("Intro\n\nBody", encoding="utf-8")

    cli_main.main(["summary", "--file", str(post), "--path", str(project)])

    events = list(iter_events(runtime_settings))
    assert {evt["inputKind"] for evt in events} == {"file"}
    assert {evt["helper"] for evt in events} == {"create_summary"}


def test_date_command_ignores_broken_project_config(
    runtime_settings: RuntimeSettings,
    project: Path,
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
) -> None:
    _write_config(project, "version: 9\n")
    monkeypatch.chdir(project)

    exit_code = cli_main.main(["date", "2024-05-03"])

    assert exit_code == 0
    assert capsys.readouterr().out == "May 3, 2024\n"


def test_nav_command_active(runtime_settings: RuntimeSettings, project: Path, capsys: pytest.CaptureFixture[str]) -> None:
    exit_code = cli_main.main(["nav", "about", "--current", "about.html", "--path", str(project)])

    assert exit_code == 0
    assert capsys.readouterr().out == "active\n"


def test_nav_command_inactive_prints_nothing(runtime_settings: RuntimeSettings, project: Path, capsys: pytest.CaptureFixture[str]) -> None:
    exit_code = cli_main.main(["nav", "about", "--current", "contact.html", "--path", str(project)])

    assert exit_code == 0
    assert capsys.readouterr().out == ""


def test_nav_command_json_uses_project_config(runtime_settings: RuntimeSettings, project: Path, capsys: pytest.CaptureFixture[str]) -> None:
    _write_config(project, "nav:\n  active_marker: is-current\n  page_extension: .htm\n")

    exit_code = cli_main.main(["nav", "blog", "--current", "blog.htm", "--path", str(project), "--json"])

    assert exit_code == 0
    payload = json.loads(capsys.readouterr().out)
    assert payload["active"] is True
    assert payload["result"] == "is-current"


def test_invalid_config_fails_view_commands(runtime_settings: RuntimeSettings, project: Path, capsys: pytest.CaptureFixture[str]) -> None:
    _write_config(project, "version: 9\n")

    exit_code = cli_main.main(["nav", "about", "--current", "about.html", "--path", str(project)])

    captured = capsys.readouterr()
    assert exit_code == 1
    assert "nav failed" in captured.err
    assert "remediation" in captured.err


def test_config_show_defaults(runtime_settings: RuntimeSettings, project: Path, capsys: pytest.CaptureFixture[str]) -> None:
    exit_code = cli_main.main(["config", "show", "--path", str(project)])

    assert exit_code == 0
    payload = json.loads(capsys.readouterr().out)
    assert payload["source"] == "<default>"
    assert payload["config"] == {
        "version": 1,
        "nav": {"active_marker": "active", "page_extension": ".html"},
        "summary": {"delimiter": "\n\n"},
    }


def test_config_show_invalid(runtime_settings: RuntimeSettings, project: Path, capsys: pytest.CaptureFixture[str]) -> None:
    _write_config(project, "summary:\n  delimiter: ''\n")

    exit_code = cli_main.main(["config", "show", "--path", str(project)])

    assert exit_code == 1
    payload = json.loads(capsys.readouterr().out)
    assert payload["code"] == "VIEW_CONFIG_INVALID"


def test_telemetry_report_and_clear(runtime_settings: RuntimeSettings, project: Path, capsys: pytest.CaptureFixture[str]) -> None:
    cli_main.main(["date", "1999-12-25"])
    cli_main.main(["nav", "about", "--current", "about.html", "--path", str(project)])
    capsys.readouterr()

    assert cli_main.main(["telemetry", "report"]) == 0
    report = json.loads(capsys.readouterr().out)
    assert report["total"] == 4
    assert report["by_helper"] == {"format_date": 2, "nav_active": 2}
    assert report["by_status"] == {"start": 2, "success": 2}

    assert cli_main.main(["telemetry", "report", "--recent", "1"]) == 0
    assert json.loads(capsys.readouterr().out)["total"] == 1

    assert cli_main.main(["telemetry", "tail", "--limit", "1"]) == 0
    tail = [json.loads(line) for line in capsys.readouterr().out.splitlines()]
    assert tail[0]["event"] == "view.nav"

    assert cli_main.main(["telemetry", "clear"]) == 0
    assert not runtime_settings.telemetry_log.exists()


def test_version_flag(capsys: pytest.CaptureFixture[str]) -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli_main.main(["--version"])

    assert excinfo.value.code == 0
    assert __version__ in capsys.readouterr().out
