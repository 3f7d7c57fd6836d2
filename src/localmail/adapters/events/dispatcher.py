"""In-process event dispatcher for send notifications."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from localmail.application.ports import SendListener
from localmail.domain.events import SendEvent

if TYPE_CHECKING:
    from localmail.application.ports import EventListener
    from localmail.domain.message import Message

logger = logging.getLogger(__name__)


class SimpleEventDispatcher:
    """Dispatch send events synchronously to bound listeners.

    Listeners are called in binding order. Dispatch stops at the first
    listener that cancels the event.

    Example:
        >>> dispatcher = SimpleEventDispatcher()
        >>> dispatcher.create_send_event(None, None) is None
        True
    """

    def __init__(self) -> None:
        self._listeners: list[EventListener] = []

    @property
    def listeners(self) -> tuple[EventListener, ...]:
        return tuple(self._listeners)

    def bind_event_listener(self, listener: EventListener) -> None:
        """Bind ``listener``; binding the same object twice keeps a single entry."""
        if any(bound is listener for bound in self._listeners):
            return
        self._listeners.append(listener)
        logger.debug("Bound event listener", extra={"listener": type(listener).__name__})

    def create_send_event(self, source: Any, message: Message | None) -> SendEvent | None:
        """Return a new send event, or None when no bound listener handles sends."""
        if not any(isinstance(listener, SendListener) for listener in self._listeners):
            return None
        return SendEvent(source=source, message=message)

    def dispatch_event(self, event: SendEvent, target: str) -> None:
        """Call ``target`` on every listener that implements it.

        Args:
            event: Event to hand to each listener.
            target: Listener method name, e.g. ``"before_send_performed"``.
        """
        for listener in list(self._listeners):
            handler = getattr(listener, target, None)
            if handler is None:
                continue
            handler(event)
            if event.bubble_cancelled:
                logger.debug(
                    "Event cancelled by listener",
                    extra={"listener": type(listener).__name__, "target": target},
                )
                break


__all__ = ["SimpleEventDispatcher"]
