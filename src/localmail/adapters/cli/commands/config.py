"""``config`` command: show the merged configuration or check ``[mail]``."""

from __future__ import annotations

import logging

import lib_log_rich.runtime
import rich_click as click
from lib_layered_config import Config
from pydantic import ValidationError

from localmail.adapters.config.overrides import apply_overrides
from localmail.domain.enums import OutputFormat
from localmail.domain.errors import ConfigurationError

from ..constants import CLICK_CONTEXT_SETTINGS
from ..context import CLIContext, get_cli_context
from ..exit_codes import ExitCode

logger = logging.getLogger(__name__)


@click.command("config", context_settings=CLICK_CONTEXT_SETTINGS)
@click.option(
    "--format",
    "output_format",
    type=click.Choice([f.value for f in OutputFormat], case_sensitive=False),
    default=OutputFormat.HUMAN.value,
    help="Output format (human-readable or JSON)",
)
@click.option("--section", type=str, default=None, help="Show one section only, e.g. 'mail'")
@click.option("--profile", type=str, default=None, help="Reload configuration from this profile")
@click.option(
    "--check",
    is_flag=True,
    default=False,
    help="Validate the [mail] section instead of printing it (exit 78 when invalid)",
)
@click.pass_context
def cli_config(
    ctx: click.Context, output_format: str, section: str | None, profile: str | None, check: bool
) -> None:
    """Display the merged configuration.

    Precedence: defaults -> app -> host -> user -> dotenv -> env, then ``--set``.
    """
    cli_ctx = get_cli_context(ctx)
    effective_config, effective_profile = _resolve_config(cli_ctx, profile)
    fmt = OutputFormat(output_format.lower())

    extra = {"command": "config", "format": fmt.value, "profile": effective_profile, "check": check}
    with lib_log_rich.runtime.bind(job_id="cli-config", extra=extra):
        if check:
            _check_mail_section(cli_ctx, effective_config)
            return
        logger.info("Displaying configuration", extra={"section": section})
        click.echo()
        try:
            cli_ctx.services.display_config(
                effective_config, output_format=fmt, section=section, profile=effective_profile
            )
        except ValueError as exc:
            click.echo(f"\nError: {exc}", err=True)
            raise SystemExit(ExitCode.INVALID_ARGUMENT) from exc


def _resolve_config(cli_ctx: CLIContext, profile: str | None) -> tuple[Config, str | None]:
    """Return the stored config, or reload it when ``--profile`` is repeated here.

    A reload reapplies the root-level ``--set`` overrides.
    """
    if not profile:
        return cli_ctx.config, cli_ctx.profile
    config = cli_ctx.services.get_config(profile=profile)
    return apply_overrides(config, cli_ctx.set_overrides), profile


def _check_mail_section(cli_ctx: CLIContext, config: Config) -> None:
    try:
        cli_ctx.services.load_mail_config_from_dict(config.as_dict())
    except ConfigurationError as exc:
        logger.error("Invalid mail configuration", extra={"error": str(exc)})
        click.echo(f"Invalid [mail] configuration: {exc}", err=True)
        raise SystemExit(ExitCode.CONFIG_ERROR) from exc
    except ValidationError as exc:
        logger.error("Invalid mail configuration", extra={"errors": exc.error_count()})
        for error in exc.errors():
            location = ".".join(str(part) for part in error["loc"]) or "mail"
            click.echo(f"Invalid [mail] configuration: {location}: {error['msg']}", err=True)
        raise SystemExit(ExitCode.CONFIG_ERROR) from exc
    click.echo("[mail] configuration is valid.")


__all__ = ["cli_config"]
