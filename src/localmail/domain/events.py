"""Send event passed to listeners before and after a delivery attempt."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from .enums import SendResult

if TYPE_CHECKING:
    from .message import Message

#: Hook names understood by send listeners.
BEFORE_SEND_PERFORMED = "before_send_performed"
SEND_PERFORMED = "send_performed"


@dataclass(eq=False)
class SendEvent:
    """Ephemeral value describing one delivery attempt.

    A listener may cancel the event during ``before_send_performed``; the
    transport checks the flag exactly once, before doing any I/O.

    Attributes:
        source: Transport that created the event.
        message: Message being delivered.
        result: Outcome, ``PENDING`` until the attempt finishes.
        failed_recipients: Addresses reported as failed. Holds the caller's
            list object, so anything written to it is visible to the caller.

    Example:
        >>> evt = SendEvent(source=None, message=None)
        >>> evt.bubble_cancelled
        False
        >>> evt.cancel_bubble()
        >>> evt.bubble_cancelled
        True
    """

    source: Any
    message: Message | None
    result: SendResult = SendResult.PENDING
    failed_recipients: list[str] = field(default_factory=list)
    _cancelled: bool = field(default=False, init=False, repr=False)

    def cancel_bubble(self, cancel: bool = True) -> None:
        """Stop the event from reaching further listeners (and cancel delivery)."""
        self._cancelled = cancel

    @property
    def bubble_cancelled(self) -> bool:
        return self._cancelled


__all__ = [
    "BEFORE_SEND_PERFORMED",
    "SEND_PERFORMED",
    "SendEvent",
]
