"""Type-safe domain enums for send results and output formats."""

from __future__ import annotations

from enum import Enum


class SendResult(str, Enum):
    """Outcome recorded on a send event.

    Attributes:
        PENDING: Delivery has not been attempted yet.
        SUCCESS: The local mail facility accepted the message.
        TENTATIVE: Accepted with some recipients rejected (unused by the
            local transport, which has no per-recipient detail).
        FAILED: The local mail facility rejected the message.

    Example:
        >>> SendResult.SUCCESS.value
        'success'
        >>> SendResult.FAILED == "failed"
        True
    """

    PENDING = "pending"
    SUCCESS = "success"
    TENTATIVE = "tentative"
    FAILED = "failed"


class OutputFormat(str, Enum):
    """Output format options for configuration display.

    Inherits from str to allow direct string comparison and Click integration.

    Example:
        >>> OutputFormat.HUMAN.value
        'human'
        >>> OutputFormat.JSON == "json"
        True
    """

    HUMAN = "human"
    JSON = "json"


__all__ = [
    "OutputFormat",
    "SendResult",
]
