"""Mail configuration model and loader.

Provides the MailConfig Pydantic model for validated, immutable settings of
the local mail facility and the loader function that builds it from
configuration dictionaries.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, cast

from btx_lib_mail import validate_email_address, validate_smtp_host
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from localmail.domain.behaviors import DEFAULT_EXTRA_PARAMS, count_param_slots
from localmail.domain.errors import ConfigurationError


class MailConfig(BaseModel):
    """Validated, immutable settings for local mail delivery.

    Example:
        >>> config = MailConfig(extra_params="-f%s -oi")
        >>> config.extra_params
        '-f%s -oi'
        >>> config.sendmail_path
        '/usr/sbin/sendmail -t -i'
    """

    model_config = ConfigDict(frozen=True)

    extra_params: str = DEFAULT_EXTRA_PARAMS
    sendmail_path: str = "/usr/sbin/sendmail -t -i"
    smtp_host: str = "localhost"
    smtp_port: int = Field(default=25, ge=1, le=65535)
    sendmail_from: str | None = None
    timeout: float = 30.0
    log_sends: bool = True

    @field_validator("sendmail_from", mode="before")
    @classmethod
    def _coerce_empty_string_to_none(cls, v: str | None) -> str | None:
        """Coerce empty or whitespace-only strings to None.

        Treats empty strings from config files as "not configured" rather
        than an explicit empty address.
        """
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("extra_params", mode="before")
    @classmethod
    def _coerce_none_extra_params(cls, v: Any) -> Any:
        """A null or missing template means "no extra params" rather than the default."""
        if v is None:
            return ""
        return v

    @model_validator(mode="after")
    def _validate_config(self) -> MailConfig:
        """Validate configuration values.

        Raises:
            ValueError: When configuration values are invalid.

        Example:
            >>> MailConfig(timeout=-5.0)  # doctest: +IGNORE_EXCEPTION_DETAIL
            Traceback (most recent call last):
            ...
            ValidationError: ...
        """
        if self.timeout <= 0:
            raise ValueError(f"timeout must be positive, got {self.timeout}")

        if not self.sendmail_path.strip():
            raise ValueError("sendmail_path must not be empty")

        if count_param_slots(self.extra_params) > 1:
            raise ValueError(f"extra_params must contain at most one %s slot, got {self.extra_params!r}")

        if self.sendmail_from is not None:
            validate_email_address(self.sendmail_from)

        validate_smtp_host(f"{self.smtp_host}:{self.smtp_port}")

        return self


def load_mail_config_from_dict(config_dict: Mapping[str, Any]) -> MailConfig:
    """Load MailConfig from a configuration dictionary.

    Bridges lib_layered_config's dictionary output with the typed MailConfig
    model. Single-parse validation at the boundary.

    Args:
        config_dict: Configuration dictionary typically from lib_layered_config.
            Expected to have a 'mail' section.

    Returns:
        Configured mail settings with defaults for missing values.

    Raises:
        ConfigurationError: When ``mail`` is not a table.
        pydantic.ValidationError: When a ``[mail]`` value is invalid.

    Example:
        >>> config = load_mail_config_from_dict({"mail": {"extra_params": "-f%s -oi"}})
        >>> config.extra_params
        '-f%s -oi'
        >>> load_mail_config_from_dict({}).smtp_port
        25
    """
    mail_section: Any = config_dict.get("mail", {})
    if not isinstance(mail_section, Mapping):
        raise ConfigurationError(f"[mail] must be a table, got {type(mail_section).__name__}")

    mail_raw: dict[str, Any] = dict(cast(Mapping[str, Any], mail_section))
    return MailConfig.model_validate(mail_raw if mail_raw else {})


__all__ = [
    "MailConfig",
    "load_mail_config_from_dict",
]
