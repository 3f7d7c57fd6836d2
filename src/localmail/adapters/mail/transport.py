"""Local mail transport.

Delivers a :class:`~localmail.domain.message.Message` through the host's
local mail facility instead of speaking SMTP to a remote server. The
transport only extracts routing fields, splits and adapts the serialized
text, calls the OS mail function, and reports the outcome to listeners.

Plugin features that depend on per-recipient SMTP replies cannot work here:
the mail function only says whether the whole message was accepted.
"""

from __future__ import annotations

import logging
import os
from typing import TYPE_CHECKING

from localmail.domain.behaviors import (
    DEFAULT_EXTRA_PARAMS,
    count_recipients,
    format_extra_params,
    prepare_for_platform,
    resolve_reverse_path,
    split_headers_and_body,
)
from localmail.domain.enums import SendResult
from localmail.domain.events import BEFORE_SEND_PERFORMED, SEND_PERFORMED

if TYPE_CHECKING:
    from localmail.application.ports import EventDispatcher, EventListener, MailFunction
    from localmail.domain.events import SendEvent
    from localmail.domain.message import Message

logger = logging.getLogger(__name__)


def _field_body(message: Message, name: str) -> str:
    header = message.headers.get(name)
    return header.field_body if header is not None else ""


class MailTransport:
    """Send messages through the OS mail facility.

    Args:
        event_dispatcher: Shared dispatcher for send notifications.
        mail_function: OS mail submission primitive.
        line_ending: Native line ending of the host. CRLF hosts get
            dot-stuffed text, all others get CRLF replaced by this value.

    Example:
        >>> from localmail.adapters.events import SimpleEventDispatcher
        >>> from localmail.domain.message import Message
        >>> calls = []
        >>> def mail(to, subject, body, headers, extra_params):
        ...     calls.append(extra_params)
        ...     return True
        >>> transport = MailTransport(SimpleEventDispatcher(), mail, line_ending="\\n")
        >>> msg = Message(to="a@x.com", bcc="b@y.com", from_={"c@z.com": "C"}, subject="Hi")
        >>> transport.send(msg)
        2
        >>> calls
        ['-fc@z.com']
    """

    def __init__(
        self,
        event_dispatcher: EventDispatcher,
        mail_function: MailFunction,
        *,
        line_ending: str = os.linesep,
    ) -> None:
        self._event_dispatcher = event_dispatcher
        self._mail_function = mail_function
        self._line_ending = line_ending
        self._extra_params = DEFAULT_EXTRA_PARAMS
        self._plugins: dict[str, EventListener] = {}

    # ---- lifecycle (no connection to manage) ---------------------------

    def is_started(self) -> bool:
        """Not used."""
        return False

    def start(self) -> None:
        """Not used."""

    def stop(self) -> None:
        """Not used."""

    # ---- configuration ---------------------------------------------------

    def set_extra_params(self, params: str) -> MailTransport:
        """Set the extra params passed to the mail program.

        ``%s`` in the template receives the reverse path.
        """
        self._extra_params = params
        return self

    def get_extra_params(self) -> str:
        """Return the extra-params template (``%s`` receives the reverse path)."""
        return self._extra_params

    @property
    def plugins(self) -> dict[str, EventListener]:
        return dict(self._plugins)

    def register_plugin(self, plugin: EventListener, key: str) -> None:
        """Register ``plugin`` under ``key``.

        Registering the same plugin object under the same key again is a
        no-op; otherwise the plugin is bound to the dispatcher and replaces
        whatever was stored under ``key``.
        """
        if self._plugins.get(key) is plugin:
            return
        self._event_dispatcher.bind_event_listener(plugin)
        self._plugins[key] = plugin

    # ---- delivery ------------------------------------------------------

    def send(self, message: Message, failed_recipients: list[str] | None = None) -> int:
        """Send ``message`` and return the number of accepted recipients.

        Args:
            message: Message to deliver.
            failed_recipients: Caller-owned list handed to listeners as the
                failure list. The mail function has no per-recipient detail,
                so this transport never writes to it.

        Returns:
            ``|To| + |Cc| + |Bcc|`` when the mail facility accepted the
            message, ``0`` when it rejected it or a listener cancelled.
        """
        evt = self._event_dispatcher.create_send_event(self, message)
        if evt is not None:
            self._event_dispatcher.dispatch_event(evt, BEFORE_SEND_PERFORMED)
            if evt.bubble_cancelled:
                logger.info("Send cancelled by listener", extra={"subject": message.subject})
                return 0

        count = count_recipients(message)
        to = _field_body(message, "To")
        subject = _field_body(message, "Subject")
        reverse_path = resolve_reverse_path(message)

        headers, body = split_headers_and_body(message.to_string())
        headers, body = prepare_for_platform(headers, body, self._line_ending)

        extra_params = format_extra_params(self._extra_params, reverse_path)
        logger.debug(
            "Handing message to mail function",
            extra={"to": to, "subject": subject, "reverse_path": reverse_path, "extra_params": extra_params},
        )

        if self._mail_function(to, subject, body, headers, extra_params):
            self._finish(evt, SendResult.SUCCESS, failed_recipients)
            return count

        self._finish(evt, SendResult.FAILED, failed_recipients)
        return 0

    def _finish(self, evt: SendEvent | None, result: SendResult, failed_recipients: list[str] | None) -> None:
        if evt is None:
            return
        evt.result = result
        evt.failed_recipients = failed_recipients if failed_recipients is not None else []
        self._event_dispatcher.dispatch_event(evt, SEND_PERFORMED)


__all__ = ["MailTransport"]
