"""Mail adapter - delivery through the host's local mail facility.

Structure:
    * :mod:`.config` - Mail configuration model and loader
    * :mod:`.functions` - OS mail functions (sendmail pipe, SMTP relay)
    * :mod:`.transport` - The local mail transport
    * :mod:`.plugins` - Send listeners (logging, dry run)
    * :mod:`.validation` - Address validation

Contents:
    * :class:`.config.MailConfig` - Mail configuration container
    * :func:`.config.load_mail_config_from_dict` - Config dict loader
    * :func:`.functions.build_mail_function` - Host-specific mail function
    * :class:`.transport.MailTransport` - Primary delivery interface
"""

from __future__ import annotations

from .config import MailConfig, load_mail_config_from_dict
from .functions import SendmailMailFunction, SmtpRelayMailFunction, build_mail_function
from .plugins import DryRunPlugin, LoggerPlugin
from .transport import MailTransport

__all__ = [
    "DryRunPlugin",
    "LoggerPlugin",
    "MailConfig",
    "MailTransport",
    "SendmailMailFunction",
    "SmtpRelayMailFunction",
    "build_mail_function",
    "load_mail_config_from_dict",
]
