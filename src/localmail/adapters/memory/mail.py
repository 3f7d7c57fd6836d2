"""In-memory mail adapters for testing.

Provides a mail function that satisfies the same Protocols as the production
adapters but never touches a mail program or a socket.

Contents:
    * :class:`MailFunctionSpy` - Captures mail function calls for test assertions.
    * :func:`load_mail_config_from_dict_in_memory` - In-memory config loader.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from ...domain.errors import ConfigurationError
from ..mail.config import MailConfig


def _empty_call_list() -> list[dict[str, Any]]:
    """Create an empty typed list for call records."""
    return []


@dataclass
class MailFunctionSpy:
    """Captures OS mail function calls for test assertions.

    Each test should create its own spy to avoid cross-test pollution. The
    spy is itself a mail function and :meth:`build` satisfies the
    BuildMailFunction port, so it can be wired into AppServices directly.

    Attributes:
        calls: One record per mail function call.
        configs: MailConfig objects passed to :meth:`build`.
        should_fail: When True, calls return False to simulate rejection.
        raise_exception: When set, calls raise this exception.

    Example:
        >>> spy = MailFunctionSpy()
        >>> spy("a@example.com", "Hi", "body", "From: c@example.com\\n\\n", "-fc@example.com")
        True
        >>> spy.calls[0]["extra_params"]
        '-fc@example.com'
    """

    calls: list[dict[str, Any]] = field(default_factory=_empty_call_list)
    configs: list[MailConfig] = field(default_factory=list)
    should_fail: bool = False
    raise_exception: Exception | None = None

    def clear(self) -> None:
        """Reset captured data for next test."""
        self.calls.clear()
        self.configs.clear()
        self.raise_exception = None

    def __call__(self, to: str, subject: str, body: str, headers: str, extra_params: str | None) -> bool:
        """Record the call and return success/failure based on spy state."""
        self.calls.append(
            {
                "to": to,
                "subject": subject,
                "body": body,
                "headers": headers,
                "extra_params": extra_params,
            }
        )
        if self.raise_exception is not None:
            raise self.raise_exception
        return not self.should_fail

    def build(self, config: MailConfig) -> MailFunctionSpy:
        """Record ``config`` and return the spy as the host mail function."""
        self.configs.append(config)
        return self


def load_mail_config_from_dict_in_memory(
    config_dict: Mapping[str, Any],
) -> MailConfig:
    """Parse mail config from dict using the real Pydantic model."""
    mail_raw = config_dict.get("mail", {})
    if not isinstance(mail_raw, Mapping):
        raise ConfigurationError(f"[mail] must be a table, got {type(mail_raw).__name__}")
    return MailConfig.model_validate(mail_raw if mail_raw else {})


__all__ = [
    "MailFunctionSpy",
    "load_mail_config_from_dict_in_memory",
]
