"""Configuration management CLI commands."""

from __future__ import annotations

from typing import TYPE_CHECKING

import typer

from athena_tool.cli.commands._shared import cli_state, get_config
from athena_tool.core.config import DEFAULT_CONFIG_PATH, load_config

if TYPE_CHECKING:
    from collections.abc import Iterable

    from athena_tool.core.config import AthenaProfile, ResolvedConfig

config_app = typer.Typer(help="Configuration management commands")


@config_app.callback(invoke_without_command=True)
def config_callback(ctx: typer.Context) -> None:
    if not ctx.invoked_subcommand:
        typer.echo(ctx.get_help())
        raise typer.Exit()


def _section(title: str, rows: Iterable[tuple[str, str, str]]) -> None:
    typer.echo(title)
    for label, value, source in rows:
        typer.echo(f"  {label}: {value} ({source})")


def _athena_rows(cfg: ResolvedConfig) -> list[tuple[str, str]]:
    return [
        ("region", cfg.region),
        ("workgroup", cfg.workgroup),
        ("database", cfg.database),
        ("catalog", cfg.catalog),
        ("output_location", cfg.output_location or "workgroup default"),
        ("aws_profile", cfg.aws_profile or "not set"),
    ]


def _execution_rows(cfg: ResolvedConfig) -> list[tuple[str, str, str]]:
    """(label, value, source field) for the execution settings."""
    return [
        ("poll_interval", f"{cfg.poll_interval}s", "poll_interval"),
        ("timeout", f"{cfg.timeout}s", "timeout"),
        ("max_attempts", str(cfg.max_attempts), "max_attempts"),
        ("max_query_length", str(cfg.max_query_length), "max_query_length"),
        ("page_size", str(cfg.page_size), "page_size"),
        ("cancel_on_timeout", str(cfg.cancel_on_timeout).lower(), "cancel_on_timeout"),
        ("format", cfg.default_format, "default_format"),
    ]


@config_app.command("show")
def config_show(ctx: typer.Context) -> None:
    """Display resolved configuration with source attribution."""
    cfg = get_config(ctx)

    def source(name: str) -> str:
        return cfg.sources.get(name, "default")

    _section(
        "Athena Settings (resolved):",
        ((name, value, source(name)) for name, value in _athena_rows(cfg)),
    )
    typer.echo("")
    _section(
        "Execution:",
        ((label, value, source(key)) for label, value, key in _execution_rows(cfg)),
    )
    typer.echo("")
    typer.echo(f"Active Profile: {cfg.active_profile or 'none'}")
    typer.echo(f"Config File: {cli_state(ctx).config_file or DEFAULT_CONFIG_PATH}")
    typer.echo(f"Named Queries: {cfg.named_queries_file or 'built-in'}")


def _profile_lines(profile: AthenaProfile) -> list[str]:
    lines = [
        f"region: {profile.region}",
        f"workgroup: {profile.workgroup}",
        f"database: {profile.database}",
    ]
    for optional in ("output_location", "aws_profile"):
        value = getattr(profile, optional)
        if value:
            lines.append(f"{optional}: {value}")
    return lines


@config_app.command("profiles")
def config_profiles(ctx: typer.Context) -> None:
    """List available Athena profiles."""
    state = cli_state(ctx)
    app_config = load_config(state.config_file)

    if not app_config.profiles:
        typer.echo("No profiles configured.")
        typer.echo(f"Add profiles to: {state.config_file or DEFAULT_CONFIG_PATH}")
        return

    active = state.profile or app_config.default_profile
    typer.echo("Available Profiles:")
    typer.echo("")
    for name in sorted(app_config.profiles):
        heading = f"* {name} (active)" if name == active else f"  {name}"
        typer.echo(heading)
        for line in _profile_lines(app_config.profiles[name]):
            typer.echo(f"      {line}")
        typer.echo("")
