"""Shared CLI plumbing for command modules.

Holds the per-invocation CliState built by the app callback, config and
orchestrator construction, and result output. Pure formatting helpers
live in cli.helpers.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from athena_tool.cli.output import get_formatter, resolve_format, write_output
from athena_tool.core.config import load_config, resolve_config
from athena_tool.core.orchestrator import build_orchestrator

if TYPE_CHECKING:
    from pathlib import Path

    import typer

    from athena_tool.cli.output import OutputFormat
    from athena_tool.core.config import ResolvedConfig
    from athena_tool.core.models import ResultSet
    from athena_tool.core.orchestrator import QueryOrchestrator


@dataclass
class CliState:
    """Global options from the app callback, shared with every command."""

    verbose: bool = False
    profile: str | None = None
    config_file: Path | None = None
    # Connection flags given on the command line, keyed by config field.
    overrides: dict[str, Any] = field(default_factory=dict)
    format: str | None = None
    compact: bool = False
    width: int = 40
    no_header: bool = False


def cli_state(ctx: typer.Context) -> CliState:
    return ctx.ensure_object(CliState)


def get_config(ctx: typer.Context, timeout: float | None = None) -> ResolvedConfig:
    state = cli_state(ctx)
    overrides = dict(state.overrides)
    if timeout is not None:
        overrides["timeout"] = timeout
    return resolve_config(
        load_config(state.config_file), profile_name=state.profile, **overrides
    )


def get_orchestrator(
    ctx: typer.Context, timeout: float | None = None
) -> QueryOrchestrator:
    return build_orchestrator(get_config(ctx, timeout=timeout))


def output_result(ctx: typer.Context, result: ResultSet) -> None:
    """Write a result in the chosen format; --format beats the config file."""
    state = cli_state(ctx)
    config = get_config(ctx)
    configured = None
    if config.sources.get("default_format", "default") != "default":
        configured = config.default_format

    formatter = get_formatter(
        resolve_format(state.format, configured),
        compact=state.compact,
        width=state.width,
        no_header=state.no_header,
    )
    write_output(formatter, result)


def apply_local_format_options(
    ctx: typer.Context,
    *,
    format: OutputFormat | None = None,
    compact: bool = False,
    width: int | None = None,
) -> None:
    """Let a subcommand's own format flags override the global ones."""
    state = cli_state(ctx)
    if format is not None:
        state.format = format.value
    if compact:
        state.compact = True
    if width is not None:
        state.width = width
