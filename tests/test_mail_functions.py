"""OS mail function stories: the sendmail pipe and the SMTP relay.

No mail program is ever started and no socket is ever opened;
``subprocess.run`` and ``smtplib.SMTP`` are replaced at the module boundary.
"""

from __future__ import annotations

import smtplib
import subprocess
from dataclasses import dataclass, field
from typing import Any

import pytest

from localmail.adapters.mail import functions
from localmail.adapters.mail.config import MailConfig
from localmail.adapters.mail.functions import (
    SendmailMailFunction,
    SmtpRelayMailFunction,
    build_mail_function,
    collect_recipients,
    compose_payload,
    describe_delivery,
    envelope_sender_from_params,
    strip_bcc,
)

# ======================== compose_payload ========================


@pytest.mark.os_agnostic
def test_compose_payload_prepends_missing_to_and_subject() -> None:
    payload = compose_payload("a@x.com", "Hi", "body\n", "From: f@x.com\n\n", "\n")

    assert payload == "To: a@x.com\nSubject: Hi\nFrom: f@x.com\n\nbody\n"


@pytest.mark.os_agnostic
def test_compose_payload_does_not_duplicate_existing_headers() -> None:
    payload = compose_payload("a@x.com", "Hi", "body", "subject: Hi\nTO: a@x.com\n\n", "\n")

    assert payload.lower().count("subject:") == 1
    assert payload.lower().count("to:") == 1


@pytest.mark.os_agnostic
def test_compose_payload_skips_empty_to() -> None:
    payload = compose_payload("", "Hi", "body", "Bcc: b@x.com\r\n\r\n", "\r\n")

    assert payload == "Subject: Hi\r\nBcc: b@x.com\r\n\r\nbody"


# ======================== sendmail pipe ========================


@dataclass
class FakeRun:
    """Stand-in for ``subprocess.run`` recording argv and stdin."""

    returncode: int = 0
    stderr: bytes = b""
    error: OSError | None = None
    calls: list[dict[str, Any]] = field(default_factory=list)

    def __call__(self, argv: list[str], **kwargs: Any) -> subprocess.CompletedProcess[bytes]:
        self.calls.append({"argv": argv, **kwargs})
        if self.error is not None:
            raise self.error
        return subprocess.CompletedProcess(argv, self.returncode, stdout=b"", stderr=self.stderr)


@pytest.fixture
def fake_run(monkeypatch: pytest.MonkeyPatch) -> FakeRun:
    fake = FakeRun()
    monkeypatch.setattr(functions.subprocess, "run", fake)
    return fake


@pytest.mark.os_agnostic
def test_sendmail_command_splits_like_a_shell() -> None:
    function = SendmailMailFunction(sendmail_path="'/opt/mail tools/sendmail' -t")

    assert function.command("-oi -f 'bounce@x.com'") == ["/opt/mail tools/sendmail", "-t", "-oi", "-f", "bounce@x.com"]


@pytest.mark.os_agnostic
@pytest.mark.parametrize("extra_params", [None, ""])
def test_sendmail_command_without_extra_params(extra_params: str | None) -> None:
    assert SendmailMailFunction().command(extra_params) == ["/usr/sbin/sendmail", "-t", "-i"]


@pytest.mark.os_agnostic
def test_sendmail_pipes_payload_to_program(fake_run: FakeRun) -> None:
    accepted = SendmailMailFunction()("a@x.com", "Hi", "body\n", "From: f@x.com\n\n", "-ff@x.com")

    assert accepted is True
    call = fake_run.calls[0]
    assert call["argv"] == ["/usr/sbin/sendmail", "-t", "-i", "-ff@x.com"]
    assert call["input"] == b"To: a@x.com\nSubject: Hi\nFrom: f@x.com\n\nbody\n"
    assert call["check"] is False
    assert "shell" not in call


@pytest.mark.os_agnostic
def test_sendmail_encodes_payload_as_utf8(fake_run: FakeRun) -> None:
    SendmailMailFunction()("a@x.com", "Hi", "Grüße\n", "\n", None)

    assert "Grüße".encode() in fake_run.calls[0]["input"]


@pytest.mark.os_agnostic
def test_sendmail_nonzero_exit_is_a_rejection(fake_run: FakeRun, caplog: pytest.LogCaptureFixture) -> None:
    fake_run.returncode = 75
    fake_run.stderr = b"queue full\n"

    with caplog.at_level("ERROR", logger=functions.__name__):
        accepted = SendmailMailFunction()("a@x.com", "Hi", "body", "\n", None)

    assert accepted is False
    record = caplog.records[-1]
    assert record.getMessage() == "Mail program rejected the message"
    assert record.returncode == 75  # type: ignore[attr-defined]
    assert record.stderr == "queue full"  # type: ignore[attr-defined]


@pytest.mark.os_agnostic
def test_sendmail_missing_program_is_a_rejection(fake_run: FakeRun, caplog: pytest.LogCaptureFixture) -> None:
    fake_run.error = FileNotFoundError(2, "No such file or directory")

    with caplog.at_level("ERROR", logger=functions.__name__):
        accepted = SendmailMailFunction(sendmail_path="/nonexistent/sendmail")("a@x.com", "Hi", "b", "\n", None)

    assert accepted is False
    assert caplog.records[-1].getMessage() == "Could not run mail program"


# ======================== relay helpers ========================


@pytest.mark.os_agnostic
@pytest.mark.parametrize(
    ("extra_params", "expected"),
    [
        ("-fbounce@x.com", "bounce@x.com"),
        ("-oi -f bounce@x.com", "bounce@x.com"),
        ("-oi", None),
        ("-f", None),
        ("", None),
        (None, None),
    ],
)
def test_envelope_sender_from_params(extra_params: str | None, expected: str | None) -> None:
    assert envelope_sender_from_params(extra_params) == expected


@pytest.mark.os_agnostic
def test_strip_bcc_keeps_other_folded_headers() -> None:
    headers = "To: a@x.com,\r\n b@x.com\r\nBCC: hidden@x.com\r\nSubject: Hi\r\n\r\n"

    assert strip_bcc(headers) == "To: a@x.com,\r\n b@x.com\r\nSubject: Hi\r\n\r\n"


@pytest.mark.os_agnostic
def test_collect_recipients_includes_cc_and_bcc_once() -> None:
    headers = "To: a@x.com\r\nCc: C <c@x.com>\r\nBcc: b@x.com, c@x.com\r\n\r\n"

    assert collect_recipients("a@x.com", headers) == ["a@x.com", "c@x.com", "b@x.com"]


@pytest.mark.os_agnostic
def test_collect_recipients_without_any_address() -> None:
    assert collect_recipients("", "Subject: Hi\r\n\r\n") == []


# ======================== SMTP relay ========================


@dataclass
class FakeSMTP:
    """Scripted stand-in for :class:`smtplib.SMTP`."""

    host: str = ""
    port: int = 0
    timeout: float = 0.0
    mail_code: int = 250
    rcpt_codes: dict[str, int] = field(default_factory=dict)
    data_code: int = 354
    final_code: int = 250
    commands: list[tuple[str, Any]] = field(default_factory=list)
    sent: list[bytes] = field(default_factory=list)

    def __enter__(self) -> FakeSMTP:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.commands.append(("quit", None))

    def ehlo_or_helo_if_needed(self) -> None:
        self.commands.append(("ehlo", None))

    def mail(self, sender: str) -> tuple[int, bytes]:
        self.commands.append(("mail", sender))
        return self.mail_code, b"sender"

    def rcpt(self, recipient: str) -> tuple[int, bytes]:
        self.commands.append(("rcpt", recipient))
        return self.rcpt_codes.get(recipient, 250), b"rcpt"

    def rset(self) -> None:
        self.commands.append(("rset", None))

    def docmd(self, command: str) -> tuple[int, bytes]:
        self.commands.append(("docmd", command))
        return self.data_code, b"go ahead"

    def send(self, data: bytes) -> None:
        self.sent.append(data)

    def getreply(self) -> tuple[int, bytes]:
        return self.final_code, b"queued"


@pytest.fixture
def fake_smtp(monkeypatch: pytest.MonkeyPatch) -> FakeSMTP:
    server = FakeSMTP()

    def _connect(host: str, port: int, timeout: float) -> FakeSMTP:
        server.host, server.port, server.timeout = host, port, timeout
        return server

    monkeypatch.setattr(functions.smtplib, "SMTP", _connect)
    return server


_RELAY_HEADERS = "To: a@x.com\r\nBcc: b@x.com\r\nSubject: Hi\r\n\r\n"


@pytest.mark.os_agnostic
def test_relay_submits_envelope_and_data(fake_smtp: FakeSMTP) -> None:
    relay = SmtpRelayMailFunction(host="relay.local", port=2525, timeout=5.0)

    accepted = relay("a@x.com", "Hi", "line\r\n..dot\r\n", _RELAY_HEADERS, "-fbounce@x.com")

    assert accepted is True
    assert (fake_smtp.host, fake_smtp.port, fake_smtp.timeout) == ("relay.local", 2525, 5.0)
    assert ("mail", "bounce@x.com") in fake_smtp.commands
    assert [arg for cmd, arg in fake_smtp.commands if cmd == "rcpt"] == ["a@x.com", "b@x.com"]
    assert fake_smtp.sent == [b"To: a@x.com\r\nSubject: Hi\r\n\r\nline\r\n..dot\r\n.\r\n"]


@pytest.mark.os_agnostic
def test_relay_stuffs_a_leading_body_dot(fake_smtp: FakeSMTP) -> None:
    SmtpRelayMailFunction()("a@x.com", "Hi", ".starts with dot", "Subject: Hi\r\n\r\n", "-ff@x.com")

    assert fake_smtp.sent[0].endswith(b"\r\n\r\n..starts with dot\r\n.\r\n")


@pytest.mark.os_agnostic
def test_relay_falls_back_to_configured_sender(fake_smtp: FakeSMTP) -> None:
    SmtpRelayMailFunction(sendmail_from="noreply@x.com")("a@x.com", "Hi", "b", _RELAY_HEADERS, None)

    assert ("mail", "noreply@x.com") in fake_smtp.commands


@pytest.mark.os_agnostic
def test_relay_without_envelope_sender_is_a_rejection(fake_smtp: FakeSMTP) -> None:
    assert SmtpRelayMailFunction()("a@x.com", "Hi", "b", _RELAY_HEADERS, None) is False
    assert fake_smtp.commands == []


@pytest.mark.os_agnostic
def test_relay_without_recipients_is_a_rejection(fake_smtp: FakeSMTP) -> None:
    assert SmtpRelayMailFunction()("", "Hi", "b", "Subject: Hi\r\n\r\n", "-ff@x.com") is False
    assert fake_smtp.commands == []


@pytest.mark.os_agnostic
def test_relay_refused_sender(fake_smtp: FakeSMTP) -> None:
    fake_smtp.mail_code = 550

    assert SmtpRelayMailFunction()("a@x.com", "Hi", "b", _RELAY_HEADERS, "-ff@x.com") is False
    assert fake_smtp.sent == []


@pytest.mark.os_agnostic
def test_relay_with_every_recipient_refused_resets(fake_smtp: FakeSMTP) -> None:
    fake_smtp.rcpt_codes = {"a@x.com": 550, "b@x.com": 553}

    assert SmtpRelayMailFunction()("a@x.com", "Hi", "b", _RELAY_HEADERS, "-ff@x.com") is False
    assert ("rset", None) in fake_smtp.commands
    assert fake_smtp.sent == []


@pytest.mark.os_agnostic
def test_relay_with_some_recipients_refused_still_sends(fake_smtp: FakeSMTP) -> None:
    fake_smtp.rcpt_codes = {"b@x.com": 550}

    assert SmtpRelayMailFunction()("a@x.com", "Hi", "b", _RELAY_HEADERS, "-ff@x.com") is True
    assert len(fake_smtp.sent) == 1


@pytest.mark.os_agnostic
@pytest.mark.parametrize(("data_code", "final_code"), [(451, 250), (354, 554)])
def test_relay_data_phase_rejections(fake_smtp: FakeSMTP, data_code: int, final_code: int) -> None:
    fake_smtp.data_code = data_code
    fake_smtp.final_code = final_code

    assert SmtpRelayMailFunction()("a@x.com", "Hi", "b", _RELAY_HEADERS, "-ff@x.com") is False


@pytest.mark.os_agnostic
def test_relay_connection_failure_is_a_rejection(
    monkeypatch: pytest.MonkeyPatch,
    caplog: pytest.LogCaptureFixture,
) -> None:
    def _refuse(*_args: Any, **_kwargs: Any) -> None:
        raise smtplib.SMTPConnectError(421, "busy")

    monkeypatch.setattr(functions.smtplib, "SMTP", _refuse)

    with caplog.at_level("ERROR", logger=functions.__name__):
        accepted = SmtpRelayMailFunction()("a@x.com", "Hi", "b", _RELAY_HEADERS, "-ff@x.com")

    assert accepted is False
    assert caplog.records[-1].getMessage() == "SMTP relay failed"


# ======================== build_mail_function ========================


@pytest.mark.os_agnostic
def test_build_mail_function_pipes_on_lf_hosts(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(functions.os, "linesep", "\n")

    function = build_mail_function(MailConfig(sendmail_path="/usr/lib/sendmail -t"))

    assert function == SendmailMailFunction(sendmail_path="/usr/lib/sendmail -t", line_ending="\n")


@pytest.mark.os_agnostic
def test_build_mail_function_relays_on_crlf_hosts(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(functions.os, "linesep", "\r\n")

    function = build_mail_function(
        MailConfig(smtp_host="mailhub.local", smtp_port=587, sendmail_from="noreply@example.com", timeout=10.0)
    )

    assert function == SmtpRelayMailFunction(
        host="mailhub.local", port=587, sendmail_from="noreply@example.com", timeout=10.0
    )


@pytest.mark.os_agnostic
def test_describe_delivery_follows_the_host_line_ending(monkeypatch: pytest.MonkeyPatch) -> None:
    config = MailConfig(sendmail_path="/usr/lib/sendmail -t", smtp_host="mailhub.local", smtp_port=587)

    monkeypatch.setattr(functions.os, "linesep", "\n")
    assert describe_delivery(config) == "sendmail pipe: /usr/lib/sendmail -t"

    monkeypatch.setattr(functions.os, "linesep", "\r\n")
    assert describe_delivery(config) == "SMTP relay: mailhub.local:587"
