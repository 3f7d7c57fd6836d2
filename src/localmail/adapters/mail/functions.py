"""OS mail functions: hand a prepared message to the host's mail facility.

POSIX hosts pipe the message to a ``sendmail``-compatible program; Windows
hosts relay it to a local SMTP server. Both report plain success/failure,
which is all the local transport can learn about a delivery.

Contents:
    * :class:`SendmailMailFunction` - Pipe to the mail program (POSIX).
    * :class:`SmtpRelayMailFunction` - Relay over SMTP (Windows).
    * :func:`build_mail_function` - Pick the implementation for the host.
"""

from __future__ import annotations

import logging
import os
import re
import shlex
import smtplib
import subprocess
from dataclasses import dataclass
from email.parser import HeaderParser
from email.utils import getaddresses

from localmail.domain.message import CRLF

from .config import MailConfig

logger = logging.getLogger(__name__)

_TO_HEADER = re.compile(r"^to:", re.IGNORECASE | re.MULTILINE)
_SUBJECT_HEADER = re.compile(r"^subject:", re.IGNORECASE | re.MULTILINE)


def compose_payload(to: str, subject: str, body: str, headers: str, line_ending: str) -> str:
    r"""Assemble the text handed to the mail facility.

    ``To`` and ``Subject`` lines are written only when the header block does
    not carry them already.

    Example:
        >>> compose_payload("a@example.com", "Hi", "body\n", "From: c@example.com\n\n", "\n")
        'To: a@example.com\nSubject: Hi\nFrom: c@example.com\n\nbody\n'
        >>> compose_payload("a@example.com", "Hi", "x", "To: a@example.com\nSubject: Hi\n\n", "\n")
        'To: a@example.com\nSubject: Hi\n\nx'
    """
    lines: list[str] = []
    if to and not _TO_HEADER.search(headers):
        lines.append(f"To: {to}{line_ending}")
    if not _SUBJECT_HEADER.search(headers):
        lines.append(f"Subject: {subject}{line_ending}")
    header_block = headers.rstrip("\r\n")
    if header_block:
        lines.append(header_block + line_ending)
    lines.append(line_ending)
    lines.append(body)
    return "".join(lines)


@dataclass(frozen=True, slots=True)
class SendmailMailFunction:
    """Deliver by piping the message to a ``sendmail``-compatible program.

    The command line is split like a shell would split it but run without a
    shell, so addresses in the extra params cannot inject commands.

    Attributes:
        sendmail_path: Mail program and its fixed arguments.
        line_ending: Line ending of the prepared header and body blocks.
    """

    sendmail_path: str = "/usr/sbin/sendmail -t -i"
    line_ending: str = "\n"

    def command(self, extra_params: str | None) -> list[str]:
        """Return the argv used for a delivery.

        Example:
            >>> SendmailMailFunction().command("-fbounce@example.com")
            ['/usr/sbin/sendmail', '-t', '-i', '-fbounce@example.com']
        """
        argv = shlex.split(self.sendmail_path)
        if extra_params:
            argv.extend(shlex.split(extra_params))
        return argv

    def __call__(self, to: str, subject: str, body: str, headers: str, extra_params: str | None) -> bool:
        argv = self.command(extra_params)
        payload = compose_payload(to, subject, body, headers, self.line_ending)
        try:
            completed = subprocess.run(
                argv,
                input=payload.encode("utf-8"),
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                check=False,
            )
        except OSError as exc:
            logger.error(
                "Could not run mail program",
                extra={"command": argv[0], "error": str(exc), "error_type": type(exc).__name__},
            )
            return False

        if completed.returncode != 0:
            logger.error(
                "Mail program rejected the message",
                extra={
                    "command": argv[0],
                    "returncode": completed.returncode,
                    "stderr": completed.stderr.decode("utf-8", errors="replace").strip(),
                },
            )
            return False
        return True


def envelope_sender_from_params(extra_params: str | None) -> str | None:
    """Extract the ``-f`` address from sendmail-style extra params.

    Example:
        >>> envelope_sender_from_params("-fbounce@example.com -oi")
        'bounce@example.com'
        >>> envelope_sender_from_params("-oi -f bounce@example.com")
        'bounce@example.com'
        >>> envelope_sender_from_params(None) is None
        True
    """
    if not extra_params:
        return None
    tokens = shlex.split(extra_params)
    for index, token in enumerate(tokens):
        if token == "-f" and index + 1 < len(tokens):
            return tokens[index + 1]
        if token.startswith("-f") and len(token) > 2:
            return token[2:]
    return None


def strip_bcc(headers: str) -> str:
    r"""Remove ``Bcc`` fields (with their folded continuation lines).

    Example:
        >>> strip_bcc("To: a@x.com\r\nBcc: b@y.com,\r\n c@y.com\r\nSubject: Hi\r\n\r\n")
        'To: a@x.com\r\nSubject: Hi\r\n\r\n'
    """
    kept: list[str] = []
    skipping = False
    for line in headers.split(CRLF):
        if line[:1] in (" ", "\t") and line.strip():
            if not skipping:
                kept.append(line)
            continue
        skipping = line.lower().startswith("bcc:")
        if not skipping:
            kept.append(line)
    return CRLF.join(kept)


def collect_recipients(to: str, headers: str) -> list[str]:
    """Envelope recipients from the ``To`` field body plus ``Cc``/``Bcc`` headers.

    Example:
        >>> collect_recipients("A <a@x.com>", "Cc: c@x.com\\r\\nBcc: b@y.com, a@x.com\\r\\n\\r\\n")
        ['a@x.com', 'c@x.com', 'b@y.com']
    """
    parsed = HeaderParser().parsestr(headers)
    fields = [to, *parsed.get_all("Cc", []), *parsed.get_all("Bcc", [])]
    recipients: list[str] = []
    for _name, address in getaddresses([field for field in fields if field]):
        if address and address not in recipients:
            recipients.append(address)
    return recipients


@dataclass(frozen=True, slots=True)
class SmtpRelayMailFunction:
    """Deliver through a local SMTP relay, the way Windows hosts submit mail.

    The prepared data is already dot-stuffed, so it is written verbatim after
    ``DATA`` instead of going through :meth:`smtplib.SMTP.data`, which would
    stuff it a second time.

    Attributes:
        host: Relay host name.
        port: Relay port.
        sendmail_from: Envelope sender used when the extra params carry none.
        timeout: Socket timeout in seconds.
    """

    host: str = "localhost"
    port: int = 25
    sendmail_from: str | None = None
    timeout: float = 30.0

    def __call__(self, to: str, subject: str, body: str, headers: str, extra_params: str | None) -> bool:
        envelope_from = envelope_sender_from_params(extra_params) or self.sendmail_from
        if not envelope_from:
            logger.error("No envelope sender for SMTP relay (set mail.sendmail_from)")
            return False

        recipients = collect_recipients(to, headers)
        if not recipients:
            logger.error("No envelope recipients for SMTP relay")
            return False

        # The body's first line follows the blank separator only once joined.
        if body.startswith("."):
            body = "." + body
        data = compose_payload(to, subject, body, strip_bcc(headers), CRLF)
        if not data.endswith(CRLF):
            data += CRLF

        try:
            with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as smtp:
                return self._relay(smtp, envelope_from, recipients, data)
        except (smtplib.SMTPException, OSError) as exc:
            logger.error(
                "SMTP relay failed",
                extra={"host": self.host, "port": self.port, "error": str(exc), "error_type": type(exc).__name__},
            )
            return False

    def _relay(self, smtp: smtplib.SMTP, envelope_from: str, recipients: list[str], data: str) -> bool:
        smtp.ehlo_or_helo_if_needed()
        code, reply = smtp.mail(envelope_from)
        if code != 250:
            logger.error("Relay refused envelope sender", extra={"code": code, "reply": reply.decode(errors="replace")})
            return False

        accepted = [rcpt for rcpt in recipients if smtp.rcpt(rcpt)[0] in (250, 251)]
        if not accepted:
            logger.error("Relay refused every recipient", extra={"recipients": recipients})
            smtp.rset()
            return False

        code, reply = smtp.docmd("DATA")
        if code != 354:
            logger.error("Relay refused DATA", extra={"code": code, "reply": reply.decode(errors="replace")})
            return False
        smtp.send(data.encode("utf-8") + b"." + CRLF.encode("ascii"))
        code, reply = smtp.getreply()
        if code != 250:
            logger.error("Relay rejected message data", extra={"code": code, "reply": reply.decode(errors="replace")})
            return False
        return True


def describe_delivery(config: MailConfig, line_ending: str | None = None) -> str:
    r"""Name the mail function this host would use, for the ``info`` command.

    Example:
        >>> describe_delivery(MailConfig(), "\n")
        'sendmail pipe: /usr/sbin/sendmail -t -i'
        >>> describe_delivery(MailConfig(smtp_host="relay.local", smtp_port=2525), "\r\n")
        'SMTP relay: relay.local:2525'
    """
    if (os.linesep if line_ending is None else line_ending) == CRLF:
        return f"SMTP relay: {config.smtp_host}:{config.smtp_port}"
    return f"sendmail pipe: {config.sendmail_path}"


def build_mail_function(config: MailConfig) -> SendmailMailFunction | SmtpRelayMailFunction:
    """Pick the OS mail function for this host.

    CRLF hosts (Windows) relay over SMTP; every other host pipes to the mail
    program with its native line ending.
    """
    if os.linesep == CRLF:
        return SmtpRelayMailFunction(
            host=config.smtp_host,
            port=config.smtp_port,
            sendmail_from=config.sendmail_from,
            timeout=config.timeout,
        )
    return SendmailMailFunction(sendmail_path=config.sendmail_path, line_ending=os.linesep)


__all__ = [
    "SendmailMailFunction",
    "SmtpRelayMailFunction",
    "build_mail_function",
    "collect_recipients",
    "compose_payload",
    "describe_delivery",
    "envelope_sender_from_params",
    "strip_bcc",
]
