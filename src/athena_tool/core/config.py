"""Configuration management for Athena Tool.

Handles TOML config files, environment variables, named profiles,
and configuration precedence resolution.

Precedence order (highest to lowest):
1. CLI flags (--region, --workgroup, etc.)
2. Environment variables (AWS_REGION, ATHENA_WORKGROUP, ...)
3. Named profile (--profile or ATHENA_TOOL_PROFILE env var)
4. Config file defaults
5. Built-in defaults
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any

from pydantic import BaseModel, field_validator

from athena_tool.core.exceptions import ConfigError

DEFAULT_CONFIG_PATH = Path.home() / ".config" / "athena-tool" / "config.toml"

PROFILE_ENV_VAR = "ATHENA_TOOL_PROFILE"

# Later entries override earlier ones that map to the same field.
_ENV_VARS: list[tuple[str, str]] = [
    ("AWS_DEFAULT_REGION", "region"),
    ("AWS_REGION", "region"),
    ("AWS_PROFILE", "aws_profile"),
    ("ATHENA_WORKGROUP", "workgroup"),
    ("ATHENA_DATABASE", "database"),
    ("ATHENA_OUTPUT_LOCATION", "output_location"),
]

_PROFILE_DEFAULTS: dict[str, Any] = {
    "region": "us-west-2",
    "workgroup": "lean_demo_wg",
    "database": "lean_demo_db",
    "catalog": "AwsDataCatalog",
    "output_location": None,
    "aws_profile": None,
}

_FORMATS = ("table", "json", "csv")

_GLOBAL_DEFAULTS: dict[str, Any] = {
    "poll_interval": 1.0,
    "timeout": 30.0,
    "max_attempts": 120,
    "max_query_length": 262144,
    "page_size": 1000,
    "cancel_on_timeout": True,
    "cancel_timeout": 5.0,
    "default_format": "table",
    "named_queries_file": None,
}


def _validate_output_location(v: str | None) -> str | None:
    if v is not None and not v.startswith("s3://"):
        msg = f"Invalid output_location: '{v}'. Must be an s3:// URI"
        raise ValueError(msg)
    return v


class AthenaProfile(BaseModel):
    region: str = "us-west-2"
    workgroup: str = "lean_demo_wg"
    database: str = "lean_demo_db"
    catalog: str = "AwsDataCatalog"
    output_location: str | None = None
    aws_profile: str | None = None

    @field_validator("output_location")
    @classmethod
    def validate_output_location(cls, v: str | None) -> str | None:
        return _validate_output_location(v)


class AppConfig(BaseModel):
    poll_interval: float = 1.0
    timeout: float = 30.0
    max_attempts: int = 120
    max_query_length: int = 262144
    page_size: int = 1000
    cancel_on_timeout: bool = True
    cancel_timeout: float = 5.0
    default_format: str = "table"
    named_queries_file: Path | None = None
    default_profile: str | None = None
    profiles: dict[str, AthenaProfile] = {}

    @field_validator("poll_interval", "timeout", "cancel_timeout")
    @classmethod
    def validate_positive(cls, v: float) -> float:
        if v <= 0:
            msg = f"must be > 0, got {v}"
            raise ValueError(msg)
        return v

    @field_validator("max_attempts", "max_query_length")
    @classmethod
    def validate_at_least_one(cls, v: int) -> int:
        if v < 1:
            msg = f"must be >= 1, got {v}"
            raise ValueError(msg)
        return v

    @field_validator("page_size")
    @classmethod
    def validate_page_size(cls, v: int) -> int:
        if not (1 <= v <= 1000):
            msg = f"Invalid page_size: {v}. Must be 1-1000"
            raise ValueError(msg)
        return v

    @field_validator("default_format")
    @classmethod
    def validate_default_format(cls, v: str) -> str:
        if v not in _FORMATS:
            allowed = ", ".join(_FORMATS)
            msg = f"Invalid default_format: '{v}'. Must be one of: {allowed}"
            raise ValueError(msg)
        return v


class ResolvedConfig(BaseModel):
    region: str = "us-west-2"
    workgroup: str = "lean_demo_wg"
    database: str = "lean_demo_db"
    catalog: str = "AwsDataCatalog"
    output_location: str | None = None
    aws_profile: str | None = None
    poll_interval: float = 1.0
    timeout: float = 30.0
    max_attempts: int = 120
    max_query_length: int = 262144
    page_size: int = 1000
    cancel_on_timeout: bool = True
    cancel_timeout: float = 5.0
    default_format: str = "table"
    named_queries_file: Path | None = None
    active_profile: str | None = None
    sources: dict[str, str] = {}

    @field_validator("output_location")
    @classmethod
    def validate_output_location(cls, v: str | None) -> str | None:
        return _validate_output_location(v)


def load_config(config_path: Path | None = None) -> AppConfig:
    """Load configuration from TOML file.

    Returns default AppConfig if file doesn't exist.
    Raises ConfigError on malformed TOML or invalid config.
    """
    if config_path is None:
        config_path = DEFAULT_CONFIG_PATH

    if not config_path.exists():
        return AppConfig()

    try:
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        msg = f"Malformed TOML in {config_path}: {e}"
        raise ConfigError(msg) from e

    try:
        return AppConfig.model_validate(data)
    except Exception as e:
        msg = f"Invalid configuration in {config_path}: {e}"
        raise ConfigError(msg) from e


def resolve_config(
    config: AppConfig,
    profile_name: str | None = None,
    **cli_overrides: Any,
) -> ResolvedConfig:
    """Resolve configuration using precedence chain.

    CLI > env > profile > config defaults > built-in defaults.
    """
    sources: dict[str, str] = {}
    resolved: dict[str, Any] = {}

    # Layer 1: Built-in defaults
    resolved.update(_PROFILE_DEFAULTS)
    resolved.update(_GLOBAL_DEFAULTS)
    for key in resolved:
        sources[key] = "default"

    # Layer 2: Config file global defaults
    for key in config.model_fields_set:
        if key in _GLOBAL_DEFAULTS:
            resolved[key] = getattr(config, key)
            sources[key] = "config"

    # Layer 3: Named profile
    effective_profile = profile_name
    if not effective_profile:
        effective_profile = os.environ.get(PROFILE_ENV_VAR)
    if not effective_profile:
        effective_profile = config.default_profile

    if effective_profile:
        if effective_profile not in config.profiles:
            available = (
                ", ".join(sorted(config.profiles.keys())) if config.profiles else "none"
            )
            msg = f"Unknown profile: '{effective_profile}'. Available profiles: {available}"
            raise ConfigError(msg)
        profile = config.profiles[effective_profile]
        for key in profile.model_fields_set:
            resolved[key] = getattr(profile, key)
            sources[key] = f"profile: {effective_profile}"

    # Layer 4: Environment variables
    for env_var, field_name in _ENV_VARS:
        value = os.environ.get(env_var)
        if value:
            resolved[field_name] = value
            sources[field_name] = f"env: {env_var}"

    # Layer 5: CLI flags (highest priority)
    cli_to_field = {
        "region": "region",
        "workgroup": "workgroup",
        "database": "database",
        "output_location": "output_location",
        "aws_profile": "aws_profile",
        "timeout": "timeout",
    }
    for cli_name, field_name in cli_to_field.items():
        value = cli_overrides.get(cli_name)
        if value is not None:
            resolved[field_name] = value
            sources[field_name] = f"cli: --{cli_name.replace('_', '-')}"

    resolved["active_profile"] = effective_profile
    resolved["sources"] = sources
    try:
        return ResolvedConfig(**resolved)
    except ValueError as e:
        raise ConfigError(f"Invalid configuration: {e}") from e
