from __future__ import annotations

import json
from pathlib import Path

from typer.testing import CliRunner

import termfolio.cli
from termfolio.errors import CellFetchError


def _combined_output(result) -> str:
    try:
        return result.stdout + result.stderr
    except Exception:
        return result.stdout


def _stub_fetcher(payloads):
    async def _fetch(url: str) -> dict:
        payload = payloads[url]
        if isinstance(payload, Exception):
            raise payload
        return payload

    return lambda settings: _fetch


def test_run_prints_echo_and_output(monkeypatch, isolated_env):
    runner = CliRunner()

    result = runner.invoke(termfolio.cli.app, ["run", "whoami"])

    assert result.exit_code == 0
    assert "PS C:\\Users\\siddharth> whoami" in result.stdout
    assert "siddharth@portfolio" in result.stdout


def test_unknown_first_token_is_implicit_run(monkeypatch, isolated_env):
    runner = CliRunner()

    result = runner.invoke(termfolio.cli.app, ["sudo"])

    assert result.exit_code == 0
    assert "Command not found: sudo. Type 'help' for available commands." in result.stdout


def test_run_awaits_async_cells(monkeypatch, isolated_env):
    monkeypatch.setattr(
        termfolio.cli,
        "_build_fetcher",
        _stub_fetcher({"https://v2.jokeapi.dev/joke/Any": {"type": "single", "joke": "Stubbed joke."}}),
    )
    runner = CliRunner()

    result = runner.invoke(termfolio.cli.app, ["run", "joke"])

    assert result.exit_code == 0
    assert "Stubbed joke." in result.stdout
    assert "Fetching a joke" not in result.stdout


def test_run_reports_cell_failure_inline(monkeypatch, isolated_env):
    monkeypatch.setattr(
        termfolio.cli,
        "_build_fetcher",
        _stub_fetcher({"https://api.waifu.pics/sfw/waifu": CellFetchError("offline")}),
    )
    runner = CliRunner()

    result = runner.invoke(termfolio.cli.app, ["run", "waifu"])

    assert result.exit_code == 0
    assert "Failed to fetch waifu image" in result.stdout


def test_run_with_theme_uses_theme_prompt(monkeypatch, isolated_env):
    runner = CliRunner()

    result = runner.invoke(termfolio.cli.app, ["run", "date", "--theme", "ubuntu"])

    assert result.exit_code == 0
    assert "siddharth@ubuntu:~$ date" in result.stdout


def test_unknown_theme_exits_with_usage_error(monkeypatch, isolated_env):
    runner = CliRunner()

    result = runner.invoke(termfolio.cli.app, ["run", "help", "--theme", "solarized"])

    assert result.exit_code == 2
    assert "unknown theme" in _combined_output(result)


def test_invalid_config_exits_with_usage_error(monkeypatch, isolated_env):
    (isolated_env["config_root"] / "config.toml").write_text("[broken", encoding="utf-8")
    runner = CliRunner()

    result = runner.invoke(termfolio.cli.app, ["run", "help"])

    assert result.exit_code == 2
    assert "invalid config file" in _combined_output(result)


def test_commands_and_themes_listings(monkeypatch, tmp_path: Path):
    monkeypatch.chdir(tmp_path)
    runner = CliRunner()

    commands = runner.invoke(termfolio.cli.app, ["commands"])
    themes = runner.invoke(termfolio.cli.app, ["themes"])

    assert commands.exit_code == 0
    assert commands.stdout.splitlines()[0].startswith("help")
    assert "Tell a random joke" in commands.stdout
    assert themes.exit_code == 0
    assert [line.split()[0] for line in themes.stdout.splitlines()] == [
        "powershell",
        "matrix",
        "ubuntu",
        "dracula",
        "cmd",
    ]


def test_no_subcommand_starts_desktop(monkeypatch, tmp_path: Path):
    monkeypatch.chdir(tmp_path)
    captured = {}

    def fake_start(settings) -> int:
        captured["theme"] = settings.theme
        return 0

    monkeypatch.setattr(termfolio.cli, "start_tui", fake_start)
    runner = CliRunner()

    result = runner.invoke(termfolio.cli.app, ["--theme", "dracula"])

    assert result.exit_code == 0
    assert captured["theme"] == "dracula"


def test_desktop_command_uses_config_theme(monkeypatch, isolated_env):
    (isolated_env["config_root"] / "config.toml").write_text('[terminal]\ntheme = "cmd"\n', encoding="utf-8")
    captured = {}

    def fake_start(settings) -> int:
        captured["theme"] = settings.theme
        return 0

    monkeypatch.setattr(termfolio.cli, "start_tui", fake_start)
    runner = CliRunner()

    result = runner.invoke(termfolio.cli.app, ["desktop"])

    assert result.exit_code == 0
    assert captured["theme"] == "cmd"


def test_init_then_init_again_requires_force(monkeypatch, tmp_path: Path):
    monkeypatch.chdir(tmp_path)
    runner = CliRunner()

    first = runner.invoke(termfolio.cli.app, ["init"])
    second = runner.invoke(termfolio.cli.app, ["init"])
    forced = runner.invoke(termfolio.cli.app, ["init", "--force"])

    assert first.exit_code == 0
    assert (tmp_path / ".termfolio" / "config.toml").is_file()
    assert second.exit_code == 2
    assert "already exists" in _combined_output(second)
    assert forced.exit_code == 0


def test_run_writes_debug_log(monkeypatch, isolated_env):
    runner = CliRunner()

    result = runner.invoke(termfolio.cli.app, ["run", "nope"])

    assert result.exit_code == 0
    log_file = isolated_env["config_root"] / "logs" / "debug.log.jsonl"
    assert log_file.is_file()
    assert "command.unknown" in log_file.read_text(encoding="utf-8")


def test_run_without_init_leaves_no_config_dir_and_init_succeeds(monkeypatch, tmp_path: Path):
    monkeypatch.chdir(tmp_path)
    runner = CliRunner()

    first = runner.invoke(termfolio.cli.app, ["run", "whoami"])
    init = runner.invoke(termfolio.cli.app, ["init"])

    assert first.exit_code == 0
    assert init.exit_code == 0, _combined_output(init)
    assert (tmp_path / ".termfolio" / "config.toml").is_file()


def test_run_without_init_writes_nothing(monkeypatch, tmp_path: Path):
    monkeypatch.chdir(tmp_path)
    runner = CliRunner()

    result = runner.invoke(termfolio.cli.app, ["run", "nope"])

    assert result.exit_code == 0
    assert not (tmp_path / ".termfolio").exists()


def test_doctor_reports_config_and_debug_log(monkeypatch, isolated_env):
    runner = CliRunner()
    runner.invoke(termfolio.cli.app, ["run", "whoami"])

    text = runner.invoke(termfolio.cli.app, ["doctor"])
    report = runner.invoke(termfolio.cli.app, ["doctor", "--format", "json"])

    assert text.exit_code == 0
    assert "config_initialized=True" in text.stdout
    assert "logs_enabled=True" in text.stdout
    assert report.exit_code == 0
    payload = json.loads(report.stdout)
    assert payload["theme"] == "powershell"
    assert payload["commands"] == 13
    assert payload["logs_total_size_bytes"] > 0


def test_doctor_without_init_reports_logs_disabled(monkeypatch, tmp_path: Path):
    monkeypatch.chdir(tmp_path)
    runner = CliRunner()

    result = runner.invoke(termfolio.cli.app, ["doctor", "--format", "json"])

    assert result.exit_code == 0
    payload = json.loads(result.stdout)
    assert payload["config_initialized"] is False
    assert payload["logs_enabled"] is False
    assert not (tmp_path / ".termfolio").exists()


def test_doctor_rejects_unknown_format(monkeypatch, isolated_env):
    runner = CliRunner()

    result = runner.invoke(termfolio.cli.app, ["doctor", "--format", "yaml"])

    assert result.exit_code == 2
    assert "Unsupported format" in _combined_output(result)
