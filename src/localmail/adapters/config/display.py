"""Display configuration through lib_layered_config's Rich renderer."""

from __future__ import annotations

import lib_log_rich.runtime
from lib_layered_config import Config
from lib_layered_config import OutputFormat as LibOutputFormat
from lib_layered_config import display_config as _lib_display
from rich.console import Console

from localmail.domain.enums import OutputFormat


def require_section(config: Config, section: str) -> None:
    """Reject unknown top-level sections, naming the ones that exist.

    Example:
        >>> require_section(Config({"mail": {}}, {}), "smtp")  # doctest: +IGNORE_EXCEPTION_DETAIL
        Traceback (most recent call last):
        ...
        ValueError: Section 'smtp' not found in configuration (available: mail)
    """
    available = sorted(config.as_dict())
    if section.split(".", 1)[0] not in available:
        listing = ", ".join(available) or "none"
        raise ValueError(f"Section {section!r} not found in configuration (available: {listing})")


def display_config(
    config: Config,
    *,
    output_format: OutputFormat = OutputFormat.HUMAN,
    section: str | None = None,
    console: Console | None = None,
    profile: str | None = None,
) -> None:
    """Render ``config`` (or one section, e.g. ``mail``) to stdout.

    Pending log records are flushed first so they do not interleave with
    the configuration output.

    Raises:
        ValueError: If a section was requested that doesn't exist.
    """
    if section is not None:
        require_section(config, section)

    if lib_log_rich.runtime.is_initialised():
        lib_log_rich.runtime.flush()

    _lib_display(
        config,
        output_format=LibOutputFormat(output_format.value),
        section=section,
        profile=profile,
        console=console,
    )


__all__ = ["display_config", "require_section"]
