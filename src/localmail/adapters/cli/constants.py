"""Constants shared by the ``localmail`` commands.

Contents:
    * :data:`CLICK_CONTEXT_SETTINGS` - help flags accepted by every command.
    * :data:`SEND_MAIL_EPILOG` - exit code table printed under ``send-mail --help``.
    * :data:`SEND_MAIL_JOB_ID` - ``job_id`` bound to log records of one send.
    * :data:`TRACEBACK_SUMMARY_LIMIT` / :data:`TRACEBACK_VERBOSE_LIMIT` -
      character limits for tracebacks printed at the CLI boundary.
"""

from __future__ import annotations

from typing import Final

from .exit_codes import ExitCode

CLICK_CONTEXT_SETTINGS: Final[dict[str, list[str]]] = {"help_option_names": ["-h", "--help"]}

SEND_MAIL_EPILOG: Final[str] = (
    f"Exit codes: {int(ExitCode.SUCCESS)} accepted or dry run, "
    f"{int(ExitCode.INVALID_ARGUMENT)} invalid address or option, "
    f"{int(ExitCode.MAIL_FAILURE)} rejected by the mail program, "
    f"{int(ExitCode.CONFIG_ERROR)} invalid [mail] configuration."
)

SEND_MAIL_JOB_ID: Final[str] = "cli-send-mail"

# A rejected message usually fails deep inside subprocess or smtplib; the
# summary keeps the last frames only.
TRACEBACK_SUMMARY_LIMIT: Final[int] = 500
TRACEBACK_VERBOSE_LIMIT: Final[int] = 10_000

__all__ = [
    "CLICK_CONTEXT_SETTINGS",
    "SEND_MAIL_EPILOG",
    "SEND_MAIL_JOB_ID",
    "TRACEBACK_SUMMARY_LIMIT",
    "TRACEBACK_VERBOSE_LIMIT",
]
