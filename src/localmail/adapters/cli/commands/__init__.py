"""CLI command implementations.

Contents:
    * :func:`.info.cli_info` - Package metadata.
    * :func:`.config.cli_config` - Merged configuration display.
    * :func:`.send_mail.cli_send_mail` - Deliver a message through the local mail facility.
"""

from __future__ import annotations

from .config import cli_config
from .info import cli_info
from .send_mail import cli_send_mail

__all__ = [
    "cli_config",
    "cli_info",
    "cli_send_mail",
]
