"""``info`` command: installation metadata plus the host's delivery route."""

from __future__ import annotations

import logging

import lib_log_rich.runtime
import rich_click as click
from pydantic import ValidationError

from localmail import __init__conf__
from localmail.adapters.mail.functions import describe_delivery
from localmail.domain.errors import ConfigurationError

from ..constants import CLICK_CONTEXT_SETTINGS
from ..context import get_cli_context

logger = logging.getLogger(__name__)


@click.command("info", context_settings=CLICK_CONTEXT_SETTINGS)
@click.pass_context
def cli_info(ctx: click.Context) -> None:
    """Show package metadata and where ``send-mail`` would hand messages."""
    cli_ctx = get_cli_context(ctx)
    with lib_log_rich.runtime.bind(job_id="cli-info", extra={"command": "info"}):
        logger.info("Displaying package information")
        __init__conf__.print_info()
        try:
            route = describe_delivery(cli_ctx.mail_config())
        except (ValidationError, ConfigurationError) as exc:
            logger.warning("Invalid [mail] configuration", extra={"error": str(exc)})
            route = "unavailable (invalid [mail] configuration)"
        click.echo(f"\nMail delivery: {route}")


__all__ = ["cli_info"]
