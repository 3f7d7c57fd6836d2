"""Application ports: Protocol definitions for collaborators and adapters.

Two families live here:

* Delivery collaborators consumed by the transport (event listeners, the
  event dispatcher, the OS mail function) and the transport capability sets.
* Callable ports whose ``__call__`` signature matches an adapter function.
  Module-level functions satisfy them via structural subtyping (PEP 544).

System Role:
    Sits between domain and adapters. Infrastructure types (``Config``,
    ``MailConfig``) are imported under ``TYPE_CHECKING`` only so that
    import-linter layer contracts remain satisfied at runtime.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

from ..domain.enums import OutputFormat
from ..domain.events import SendEvent
from ..domain.message import Message

if TYPE_CHECKING:
    from lib_layered_config import Config

    from ..adapters.mail.config import MailConfig


# ---- delivery collaborators ----------------------------------------------


class EventListener(Protocol):
    """Anything that can be bound into an event dispatcher."""


@runtime_checkable
class SendListener(Protocol):
    """Listener notified around each delivery attempt.

    ``before_send_performed`` may call ``event.cancel_bubble()`` to stop
    delivery; ``send_performed`` sees the final ``event.result``.
    """

    def before_send_performed(self, event: SendEvent) -> None: ...

    def send_performed(self, event: SendEvent) -> None: ...


class EventDispatcher(Protocol):
    """Creates send events and distributes them to bound listeners."""

    def create_send_event(self, source: Any, message: Message) -> SendEvent | None: ...

    def dispatch_event(self, event: SendEvent, target: str) -> None: ...

    def bind_event_listener(self, listener: EventListener) -> None: ...


class MailFunction(Protocol):
    """OS-level mail submission primitive.

    Receives the ``To`` field body, the ``Subject`` field body, the body and
    header blocks already adapted to the platform, and the formatted extra
    params (None when there are none). Returns True when the platform
    accepted the message.
    """

    def __call__(self, to: str, subject: str, body: str, headers: str, extra_params: str | None) -> bool: ...


class Transport(Protocol):
    """Capability set shared by every transport: deliver and accept plugins."""

    def send(self, message: Message, failed_recipients: list[str] | None = ...) -> int: ...

    def register_plugin(self, plugin: EventListener, key: str) -> None: ...


class ConnectionTransport(Protocol):
    """Capability set for transports that hold a connection."""

    def is_started(self) -> bool: ...

    def start(self) -> None: ...

    def stop(self) -> None: ...


# ---- adapter function ports ----------------------------------------------


class GetConfig(Protocol):
    """Load layered configuration with application defaults."""

    def __call__(self, *, profile: str | None = ..., start_dir: str | None = ...) -> Config: ...


class DisplayConfig(Protocol):
    """Display the provided configuration in the requested format."""

    def __call__(
        self, config: Config, *, output_format: OutputFormat = ..., section: str | None = ..., profile: str | None = ...
    ) -> None: ...


class LoadMailConfigFromDict(Protocol):
    """Load MailConfig from a configuration dictionary."""

    def __call__(self, config_dict: Mapping[str, Any]) -> MailConfig: ...


class BuildMailFunction(Protocol):
    """Select the OS mail function for the host platform."""

    def __call__(self, config: MailConfig) -> MailFunction: ...


class InitLogging(Protocol):
    """Initialize lib_log_rich runtime with the provided configuration."""

    def __call__(self, config: Config) -> None: ...


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
