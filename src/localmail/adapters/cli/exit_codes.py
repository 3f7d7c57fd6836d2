"""Exit codes for CLI error paths.

Every ``SystemExit`` raised by a command carries one of these values so
scripts wrapping ``localmail`` can tell a rejected message from a broken
configuration.

Contents:
    * :class:`ExitCode` - IntEnum of all exit codes used by this application.
"""

from __future__ import annotations

from enum import IntEnum


class ExitCode(IntEnum):
    """POSIX-conventional exit codes for CLI error paths.

    Values follow sysexits.h and errno conventions where applicable:

    * 0-1: generic success / failure
    * 22: EINVAL (bad address, malformed option value)
    * 69: EX_UNAVAILABLE (the local mail facility rejected the message)
    * 78: EX_CONFIG (invalid ``[mail]`` configuration)

    Example:
        >>> ExitCode.SUCCESS
        <ExitCode.SUCCESS: 0>
        >>> int(ExitCode.MAIL_FAILURE)
        69
    """

    SUCCESS = 0
    GENERAL_ERROR = 1
    INVALID_ARGUMENT = 22
    MAIL_FAILURE = 69
    CONFIG_ERROR = 78


__all__ = ["ExitCode"]
