"""Send listeners that can be registered on a transport.

Contents:
    * :class:`LoggerPlugin` - Log every delivery attempt and its outcome.
    * :class:`DryRunPlugin` - Cancel every delivery before it happens.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from localmail.domain.enums import SendResult

if TYPE_CHECKING:
    from localmail.domain.events import SendEvent
    from localmail.domain.message import Message

logger = logging.getLogger(__name__)


def _recipients(event: SendEvent) -> list[str]:
    message = event.message
    if message is None:
        return []
    return [*message.to, *message.cc, *message.bcc]


class LoggerPlugin:
    """Log delivery attempts through the standard ``logging`` module.

    Args:
        log: Logger to write to; defaults to this module's logger.
    """

    def __init__(self, log: logging.Logger | None = None) -> None:
        self._log = log if log is not None else logger

    def before_send_performed(self, event: SendEvent) -> None:
        subject = event.message.subject if event.message is not None else None
        self._log.info("Sending message", extra={"recipients": _recipients(event), "subject": subject})

    def send_performed(self, event: SendEvent) -> None:
        extra = {"recipients": _recipients(event), "failed_recipients": list(event.failed_recipients)}
        if event.result is SendResult.SUCCESS:
            self._log.info("Message accepted by local mail facility", extra=extra)
        else:
            self._log.warning("Message rejected by local mail facility", extra=extra)


@dataclass
class DryRunPlugin:
    """Cancel every delivery and remember what would have been sent.

    Example:
        >>> from localmail.domain.events import SendEvent
        >>> plugin = DryRunPlugin()
        >>> evt = SendEvent(source=None, message=None)
        >>> plugin.before_send_performed(evt)
        >>> evt.bubble_cancelled
        True
    """

    cancelled: list[Message] = field(default_factory=list)

    def before_send_performed(self, event: SendEvent) -> None:
        if event.message is not None:
            self.cancelled.append(event.message)
        event.cancel_bubble()

    def send_performed(self, event: SendEvent) -> None:
        """Never reached for cancelled sends."""


__all__ = ["DryRunPlugin", "LoggerPlugin"]
