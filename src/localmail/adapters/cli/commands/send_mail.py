"""Send-mail CLI command.

Builds a :class:`~localmail.domain.message.Message` from command-line options
and hands it to :class:`~localmail.adapters.mail.transport.MailTransport`.

Exit codes:
    * 0 - accepted by the local mail facility, or cancelled by ``--dry-run``
    * 22 - invalid address or option value
    * 69 - the local mail facility rejected the message
    * 78 - the ``[mail]`` configuration is invalid
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, NoReturn, cast

import lib_log_rich.runtime
import rich_click as click
from pydantic import ValidationError

from localmail.adapters.events import SimpleEventDispatcher
from localmail.adapters.mail.config import MailConfig
from localmail.adapters.mail.plugins import DryRunPlugin, LoggerPlugin
from localmail.adapters.mail.transport import MailTransport
from localmail.adapters.mail.validation import validate_addresses
from localmail.domain.errors import ConfigurationError, DeliveryError, InvalidRecipientError
from localmail.domain.message import Message

from ..constants import CLICK_CONTEXT_SETTINGS, SEND_MAIL_EPILOG, SEND_MAIL_JOB_ID
from ..context import CLIContext, get_cli_context
from ..exit_codes import ExitCode

logger = logging.getLogger(__name__)


def filter_sentinels(**kwargs: Any) -> dict[str, Any]:
    """Drop unset options (None) so only explicit overrides reach the config.

    Example:
        >>> filter_sentinels(extra_params=None, log_sends=False)
        {'log_sends': False}
    """
    return {k: v for k, v in kwargs.items() if v is not None}


def apply_validated_overrides(base_config: MailConfig, overrides: dict[str, Any]) -> MailConfig:
    """Merge ``overrides`` into ``base_config`` and re-run validation.

    ``model_copy(update=...)`` would skip the validators, so the merged dict
    goes through ``model_validate`` instead.

    Raises:
        ValidationError: When an override is invalid.

    Example:
        >>> apply_validated_overrides(MailConfig(), {"extra_params": "-oi"}).extra_params
        '-oi'
    """
    if not overrides:
        return base_config
    return MailConfig.model_validate({**base_config.model_dump(), **overrides})


def _fail(exc: Exception, log_message: str, user_message: str, exit_code: ExitCode) -> NoReturn:
    """Log ``exc``, report it on stderr, and exit with ``exit_code``."""
    logger.error(log_message, extra={"error": str(exc), "error_type": type(exc).__name__})
    click.echo(f"\nError: {user_message} - {exc}", err=True)
    raise SystemExit(exit_code)


def _read_body(body: str | None, body_file: Path | None) -> str:
    if body is not None and body_file is not None:
        raise click.UsageError("--body and --body-file are mutually exclusive")
    if body_file is not None:
        return body_file.read_text(encoding="utf-8")
    return body or ""


def _resolve_mail_config(cli_ctx: CLIContext, overrides: dict[str, Any]) -> MailConfig:
    """Load ``[mail]`` and apply command-line overrides, exiting on invalid values."""
    try:
        base_config = cli_ctx.mail_config()
    except (ValidationError, ConfigurationError) as exc:
        _fail(exc, "Invalid mail configuration", "Invalid [mail] configuration", ExitCode.CONFIG_ERROR)
    try:
        return apply_validated_overrides(base_config, overrides)
    except ValidationError as exc:
        _fail(exc, "Invalid mail option", "Invalid option value", ExitCode.INVALID_ARGUMENT)


def _deliver(transport: MailTransport, message: Message, failed_recipients: list[str], *, dry_run: bool) -> int:
    """Send ``message``; a rejection raises instead of returning ``0``.

    A dry run is cancelled by its plugin, so its ``0`` is not a rejection.

    Raises:
        DeliveryError: When the local mail facility rejected the message.
    """
    sent = transport.send(message, failed_recipients)
    if sent == 0 and not dry_run:
        raise DeliveryError("the local mail facility rejected the message")
    return sent


def _build_transport(cli_ctx: CLIContext, config: MailConfig, *, dry_run: bool) -> MailTransport:
    """Wire a transport with the host mail function and the requested plugins."""
    mail_function = cli_ctx.services.build_mail_function(config)
    transport = MailTransport(SimpleEventDispatcher(), mail_function).set_extra_params(config.extra_params)
    if config.log_sends:
        transport.register_plugin(LoggerPlugin(), "logger")
    if dry_run:
        transport.register_plugin(DryRunPlugin(), "dry_run")
    return transport


@click.command("send-mail", context_settings=CLICK_CONTEXT_SETTINGS, epilog=SEND_MAIL_EPILOG)
@click.option("--to", "to", multiple=True, required=True, help="Recipient address (repeatable)")
@click.option("--cc", "cc", multiple=True, help="Carbon-copy address (repeatable)")
@click.option("--bcc", "bcc", multiple=True, help="Blind carbon-copy address (repeatable)")
@click.option("--from", "from_address", required=True, help="Author address")
@click.option("--sender", default=None, help="Sender address when it differs from --from")
@click.option("--return-path", default=None, help="Bounce address; used as the envelope sender")
@click.option("--subject", required=True, help="Subject line")
@click.option("--body", default=None, help="Message body")
@click.option(
    "--body-file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="Read the message body from a UTF-8 file",
)
@click.option("--html", is_flag=True, default=False, help="Send the body as text/html")
@click.option("--extra-params", default=None, help="Override mail.extra_params; %s receives the reverse path")
@click.option("--sendmail-path", default=None, help="Override mail.sendmail_path")
@click.option("--dry-run", is_flag=True, default=False, help="Build and announce the message but cancel delivery")
@click.option("--log-sends/--no-log-sends", default=None, help="Override mail.log_sends")
@click.pass_context
def cli_send_mail(
    ctx: click.Context,
    to: tuple[str, ...],
    cc: tuple[str, ...],
    bcc: tuple[str, ...],
    from_address: str,
    sender: str | None,
    return_path: str | None,
    subject: str,
    body: str | None,
    body_file: Path | None,
    html: bool,
    extra_params: str | None,
    sendmail_path: str | None,
    dry_run: bool,
    log_sends: bool | None,
) -> None:
    """Send a message through the host's local mail facility.

    Prints the number of recipients the mail facility accepted.
    """
    cli_ctx = get_cli_context(ctx)
    recipients = [*to, *cc, *bcc]
    extra = {"command": "send-mail", "recipients": recipients, "dry_run": dry_run}
    with lib_log_rich.runtime.bind(job_id=SEND_MAIL_JOB_ID, extra=extra):
        try:
            validate_addresses(recipients)
            validate_addresses(from_address)
            validate_addresses(sender)
            validate_addresses(return_path)
        except InvalidRecipientError as exc:
            _fail(exc, "Invalid address", "Invalid address", ExitCode.INVALID_ARGUMENT)

        overrides = filter_sentinels(extra_params=extra_params, sendmail_path=sendmail_path, log_sends=log_sends)
        config = _resolve_mail_config(cli_ctx, overrides)

        message = Message(
            subject=subject,
            body=_read_body(body, body_file),
            from_=from_address,
            to=list(to),
            cc=list(cc),
            bcc=list(bcc),
            sender=sender,
            return_path=return_path,
            content_type="text/html" if html else "text/plain",
        )
        transport = _build_transport(cli_ctx, config, dry_run=dry_run)

        logger.info("Sending message", extra={"subject": subject})
        failed_recipients: list[str] = []
        try:
            sent = _deliver(transport, message, failed_recipients, dry_run=dry_run)
        except DeliveryError as exc:
            _fail(exc, "Mail delivery failed", "Failed to send message", ExitCode.MAIL_FAILURE)

        if dry_run:
            plugin = cast(DryRunPlugin, transport.plugins["dry_run"])
            click.echo(f"Dry run: {len(plugin.cancelled)} message(s) to {len(recipients)} recipient(s) not sent.")
            return
        click.echo(f"Message accepted for {sent} recipient(s).")


__all__ = ["apply_validated_overrides", "cli_send_mail", "filter_sentinels"]
