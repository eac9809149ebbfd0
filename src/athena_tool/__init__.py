"""Athena Tool - asynchronous SQL orchestration for AWS Athena."""

from athena_tool.__about__ import __version__

__all__ = ["__version__"]
