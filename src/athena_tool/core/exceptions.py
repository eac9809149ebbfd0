"""Exception hierarchy for Athena Tool.

Every exception carries an exit_code for CLI return value mapping and an
ErrorKind that the orchestrator reports to callers in a QueryOutcome.
"""

from enum import StrEnum

from athena_tool.core.exit_codes import ExitCode


class ErrorKind(StrEnum):
    """Stable failure kinds reported to callers."""

    INVALID_REQUEST = "InvalidRequest"
    NOT_FOUND = "NotFound"
    ENGINE_FAILURE = "EngineFailure"
    CANCELLED = "Cancelled"
    TIMED_OUT = "TimedOut"
    TRANSPORT_ERROR = "TransportError"
    UNKNOWN_STATE = "UnknownState"


class AthenaToolError(Exception):
    """Base exception for all Athena Tool errors."""

    exit_code: int = ExitCode.GENERAL_ERROR
    kind: ErrorKind = ErrorKind.TRANSPORT_ERROR

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class InvalidRequestError(AthenaToolError):
    """Empty or oversized SQL, malformed request payload."""

    exit_code: int = ExitCode.INPUT_ERROR
    kind: ErrorKind = ErrorKind.INVALID_REQUEST


class NotFoundError(AthenaToolError):
    """Unknown named-query id."""

    exit_code: int = ExitCode.NOT_FOUND
    kind: ErrorKind = ErrorKind.NOT_FOUND


class EngineFailureError(AthenaToolError):
    """Execution reached FAILED; message is the engine's reason verbatim."""

    exit_code: int = ExitCode.ENGINE_ERROR
    kind: ErrorKind = ErrorKind.ENGINE_FAILURE


class QueryCancelledError(AthenaToolError):
    """Execution reached CANCELLED on the engine side."""

    exit_code: int = ExitCode.CANCELLED
    kind: ErrorKind = ErrorKind.CANCELLED


class UnknownStateError(AthenaToolError):
    """Engine reported a state outside the known set."""

    exit_code: int = ExitCode.ENGINE_ERROR
    kind: ErrorKind = ErrorKind.UNKNOWN_STATE


class NetworkError(AthenaToolError):
    """Connectivity failures, AWS API errors, broken pagination."""

    exit_code: int = ExitCode.NETWORK_ERROR
    kind: ErrorKind = ErrorKind.TRANSPORT_ERROR


class QueryTimeoutError(NetworkError):
    """Local wait budget exceeded; the remote execution state is unknown."""

    exit_code: int = ExitCode.TIMEOUT
    kind: ErrorKind = ErrorKind.TIMED_OUT


class ConfigError(AthenaToolError):
    """Malformed config, missing profile, bad named-query file."""

    exit_code: int = ExitCode.CONFIG_ERROR
    kind: ErrorKind = ErrorKind.INVALID_REQUEST


_ERRORS_BY_KIND: dict[ErrorKind, type[AthenaToolError]] = {
    cls.kind: cls
    for cls in (
        InvalidRequestError,
        NotFoundError,
        EngineFailureError,
        QueryCancelledError,
        UnknownStateError,
        NetworkError,
        QueryTimeoutError,
    )
}


def error_for_kind(kind: ErrorKind, message: str) -> AthenaToolError:
    """Rebuild the exception for a failed QueryOutcome (CLI exit codes)."""
    return _ERRORS_BY_KIND.get(kind, AthenaToolError)(message)
