"""structlog configuration.

All log output goes to stderr so stdout carries only query results. The
CLI renders human-readable lines; `serve` switches to JSON lines.
"""

import logging
import sys
from typing import Any

import structlog


class _CurrentStderr:
    """Logger factory that looks up sys.stderr on every logger creation.

    typer's CliRunner swaps sys.stderr per invocation, so a handle captured
    at configure() time goes stale between tests.
    """

    def __call__(self, *args: Any) -> structlog.PrintLogger:
        return structlog.PrintLogger(file=sys.stderr)


def setup_logging(verbose: bool = False, json_logs: bool = False) -> None:
    """Configure structlog: DEBUG when verbose, INFO otherwise."""
    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
    ]
    if json_logs:
        processors += [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.DEBUG if verbose else logging.INFO
        ),
        context_class=dict,
        logger_factory=_CurrentStderr(),
        cache_logger_on_first_use=False,
    )


def get_logger(name: str | None = None) -> Any:
    """Return a structlog logger, bound to `name` when given.

    Call inside functions, after setup_logging(), never at import time.
    """
    log = structlog.get_logger()
    return log.bind(logger=name) if name else log
