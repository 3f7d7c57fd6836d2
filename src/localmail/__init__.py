"""Public package surface for localmail.

Routes imports through the architectural layers:
- Domain exports: message model and send events
- Adapter exports: the local mail transport, dispatcher, and plugins
- Composition exports: wired configuration loader
- Metadata: package information
"""

from __future__ import annotations

# Metadata
from .__init__conf__ import print_info

# Adapter exports
from .adapters.events import SimpleEventDispatcher
from .adapters.mail import (
    DryRunPlugin,
    LoggerPlugin,
    MailConfig,
    MailTransport,
    SendmailMailFunction,
    SmtpRelayMailFunction,
)

# Composition exports (wired adapters)
from .composition import get_config

# Domain exports
from .domain.enums import SendResult
from .domain.events import SendEvent
from .domain.message import Message

__all__ = [
    "DryRunPlugin",
    "LoggerPlugin",
    "MailConfig",
    "MailTransport",
    "Message",
    "SendEvent",
    "SendResult",
    "SendmailMailFunction",
    "SimpleEventDispatcher",
    "SmtpRelayMailFunction",
    "get_config",
    "print_info",
]
