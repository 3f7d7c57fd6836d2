"""Domain layer - pure business logic with no I/O or framework dependencies.

Contains the message model, send events, and the pure helpers the local
transport composes into a delivery.

Contents:
    * :mod:`.behaviors` - Recipient counting, reverse path, header/body split
    * :mod:`.enums` - Domain enumerations (SendResult, OutputFormat)
    * :mod:`.errors` - Domain exception types
    * :mod:`.events` - Send event handed to listeners
    * :mod:`.message` - Message, Header, HeaderSet
"""

from __future__ import annotations

from .behaviors import (
    DEFAULT_EXTRA_PARAMS,
    count_recipients,
    dot_stuff,
    format_extra_params,
    prepare_for_platform,
    resolve_reverse_path,
    split_headers_and_body,
)
from .enums import OutputFormat, SendResult
from .errors import ConfigurationError, DeliveryError, InvalidRecipientError
from .events import BEFORE_SEND_PERFORMED, SEND_PERFORMED, SendEvent
from .message import Header, HeaderSet, Message, normalize_addresses

__all__ = [
    # Behaviors
    "DEFAULT_EXTRA_PARAMS",
    "count_recipients",
    "dot_stuff",
    "format_extra_params",
    "prepare_for_platform",
    "resolve_reverse_path",
    "split_headers_and_body",
    # Enums
    "OutputFormat",
    "SendResult",
    # Errors
    "ConfigurationError",
    "DeliveryError",
    "InvalidRecipientError",
    # Events
    "BEFORE_SEND_PERFORMED",
    "SEND_PERFORMED",
    "SendEvent",
    # Message
    "Header",
    "HeaderSet",
    "Message",
    "normalize_addresses",
]
