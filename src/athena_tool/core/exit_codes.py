"""Standard exit codes for Athena Tool.

Exit codes follow Unix conventions; 1-7 keep their conventional meaning
and query-engine outcomes are numbered after them.
"""

from enum import IntEnum


class ExitCode(IntEnum):
    """Exit codes for Athena Tool commands."""

    SUCCESS = 0
    GENERAL_ERROR = 1
    USAGE_ERROR = 2
    INPUT_ERROR = 3
    OUTPUT_ERROR = 4
    NETWORK_ERROR = 5
    TIMEOUT = 6
    CONFIG_ERROR = 7
    NOT_FOUND = 8
    ENGINE_ERROR = 9
    CANCELLED = 10
