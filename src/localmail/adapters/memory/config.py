"""Configuration ports backed by memory.

Nothing here reads files, discovers layers, or starts the lib_log_rich
runtime. Section lookups still fail like the production display does.
"""

from __future__ import annotations

from lib_layered_config import Config

from ...domain.enums import OutputFormat
from ..config.display import require_section


def get_config_in_memory(
    *,
    profile: str | None = None,
    start_dir: str | None = None,
) -> Config:
    """Return a configuration holding an empty ``[mail]`` section.

    ``MailConfig`` fills every missing key with its default, so this
    behaves like a fresh install without a config file.
    """
    return Config({"mail": {}}, {})


def init_logging_in_memory(config: Config) -> None:
    """Keep the standard logging tree untouched (pytest's caplog owns it).

    CLI commands bind lib_log_rich context, which needs the real runtime;
    drive the CLI with the production ``init_logging`` instead.
    """


def display_config_in_memory(
    config: Config,
    *,
    output_format: OutputFormat = OutputFormat.HUMAN,
    section: str | None = None,
    profile: str | None = None,
) -> None:
    """Render nothing, but reject a section that is not in ``config``."""
    if section is not None:
        require_section(config, section)


__all__ = [
    "display_config_in_memory",
    "get_config_in_memory",
    "init_logging_in_memory",
]
