"""Tests for the exception hierarchy and exit codes."""

import pytest

from athena_tool.core.exceptions import (
    AthenaToolError,
    ConfigError,
    EngineFailureError,
    ErrorKind,
    InvalidRequestError,
    NetworkError,
    NotFoundError,
    QueryCancelledError,
    QueryTimeoutError,
    UnknownStateError,
    error_for_kind,
)
from athena_tool.core.exit_codes import ExitCode


@pytest.mark.unit
class TestExceptionHierarchy:
    @pytest.mark.parametrize(
        ("exc_class", "exit_code", "kind"),
        [
            (InvalidRequestError, ExitCode.INPUT_ERROR, ErrorKind.INVALID_REQUEST),
            (NotFoundError, ExitCode.NOT_FOUND, ErrorKind.NOT_FOUND),
            (EngineFailureError, ExitCode.ENGINE_ERROR, ErrorKind.ENGINE_FAILURE),
            (QueryCancelledError, ExitCode.CANCELLED, ErrorKind.CANCELLED),
            (UnknownStateError, ExitCode.ENGINE_ERROR, ErrorKind.UNKNOWN_STATE),
            (NetworkError, ExitCode.NETWORK_ERROR, ErrorKind.TRANSPORT_ERROR),
            (QueryTimeoutError, ExitCode.TIMEOUT, ErrorKind.TIMED_OUT),
            (ConfigError, ExitCode.CONFIG_ERROR, ErrorKind.INVALID_REQUEST),
        ],
    )
    def test_exit_code_and_kind(self, exc_class, exit_code, kind):
        exc = exc_class("msg")
        assert isinstance(exc, AthenaToolError)
        assert exc.exit_code == exit_code
        assert exc.kind is kind
        assert exc.message == "msg"
        assert str(exc) == "msg"

    def test_timeout_is_network_error(self):
        assert issubclass(QueryTimeoutError, NetworkError)


@pytest.mark.unit
class TestErrorForKind:
    @pytest.mark.parametrize("kind", list(ErrorKind))
    def test_round_trips_kind(self, kind):
        exc = error_for_kind(kind, "boom")
        assert exc.kind is kind
        assert exc.message == "boom"