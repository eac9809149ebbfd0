"""Shared test fixtures for Athena Tool."""

from pathlib import Path
from tempfile import TemporaryDirectory

import pytest
from typer.testing import CliRunner

from athena_tool.cli.main import app
from tests.fakes import FakeClock


@pytest.fixture
def runner():
    """Typer CLI test runner."""
    return CliRunner()


@pytest.fixture
def cli_runner(runner):
    """Invoke the CLI app with the given arguments."""

    def invoke(*args: str, **kwargs):
        return runner.invoke(app, list(args), **kwargs)

    return invoke


@pytest.fixture
def temp_dir():
    """Temporary directory for test files."""
    with TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture(autouse=True)
def isolated_environment(request, monkeypatch, tmp_path):
    """Keep the user's AWS and athena-tool settings out of unit tests."""
    if request.node.get_closest_marker("integration"):
        return
    for var in (
        "AWS_REGION",
        "AWS_DEFAULT_REGION",
        "AWS_PROFILE",
        "ATHENA_WORKGROUP",
        "ATHENA_DATABASE",
        "ATHENA_OUTPUT_LOCATION",
        "ATHENA_TOOL_PROFILE",
        "ATHENA_TOOL_SENTRY_DSN",
    ):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.setattr(
        "athena_tool.core.config.DEFAULT_CONFIG_PATH", tmp_path / "missing.toml"
    )
