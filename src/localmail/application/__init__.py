"""Application layer - port definitions.

Contains the Protocols that define the collaborators of the local transport
and the interfaces for adapter implementations.

Contents:
    * :mod:`.ports` - Protocol definitions for listeners, dispatcher, mail
      function, transports, and adapter functions
"""

from __future__ import annotations

from .ports import (
    BuildMailFunction,
    ConnectionTransport,
    DisplayConfig,
    EventDispatcher,
    EventListener,
    GetConfig,
    InitLogging,
    LoadMailConfigFromDict,
    MailFunction,
    SendListener,
    Transport,
)

__all__ = [
    "BuildMailFunction",
    "ConnectionTransport",
    "DisplayConfig",
    "EventDispatcher",
    "EventListener",
    "GetConfig",
    "InitLogging",
    "LoadMailConfigFromDict",
    "MailFunction",
    "SendListener",
    "Transport",
]
