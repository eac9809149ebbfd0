"""Tests for the CLI entry point."""

import pytest

from athena_tool import __version__
from athena_tool.cli.main import app


@pytest.mark.unit
class TestCliHelp:
    def test_help_flag(self, runner):
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        assert "Athena Tool" in result.stdout
        for command in ("query", "named-queries", "test-connection", "serve", "config"):
            assert command in result.stdout

    def test_no_args_shows_help(self, runner):
        result = runner.invoke(app, [])
        assert result.exit_code == 0 or result.exit_code == 2
        assert "Athena Tool" in result.stdout or "Usage" in result.stdout


@pytest.mark.unit
class TestCliVersion:
    def test_version_flag(self, runner):
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert f"athena-tool {__version__}" in result.stdout

    def test_version_short_flag(self, runner):
        result = runner.invoke(app, ["-V"])
        assert result.exit_code == 0
        assert f"athena-tool {__version__}" in result.stdout


@pytest.mark.unit
class TestCliVerbose:
    def test_verbose_flag_accepted(self, runner):
        result = runner.invoke(app, ["--help", "--verbose"])
        assert result.exit_code == 0


@pytest.mark.unit
class TestUnknownCommand:
    def test_unknown_command_fails(self, runner):
        result = runner.invoke(app, ["nonexistent-command"])
        assert result.exit_code != 0


@pytest.mark.unit
class TestServeCommand:
    def test_serve_runs_uvicorn(self, runner, monkeypatch):
        calls = []
        monkeypatch.setattr(
            "athena_tool.cli.commands.serve.uvicorn.run",
            lambda app, **kwargs: calls.append((app, kwargs)),
        )
        result = runner.invoke(app, ["serve", "--port", "8080"])
        assert result.exit_code == 0
        assert calls[0][1]["port"] == 8080
        assert calls[0][1]["host"] == "127.0.0.1"
        assert calls[0][0].state.config.workgroup == "lean_demo_wg"
