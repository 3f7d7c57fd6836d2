"""Domain-specific exceptions for typed error handling at boundaries."""

from __future__ import annotations


class ConfigurationError(Exception):
    """Missing, invalid, or incomplete configuration.

    Raised by the ``[mail]`` loaders when the section is not a table;
    invalid values inside it surface as pydantic ``ValidationError``. The
    CLI maps both to exit status 78.

    Example:
        >>> from localmail.domain.errors import ConfigurationError
        >>> err = ConfigurationError("mail.sendmail_path is empty")
        >>> str(err)
        'mail.sendmail_path is empty'
    """


class DeliveryError(Exception):
    """The local mail facility rejected a message.

    The transport reports rejection through a ``0`` return value;
    ``send-mail`` turns that into this error and exits with status 69.

    Example:
        >>> from localmail.domain.errors import DeliveryError
        >>> err = DeliveryError("sendmail exited with status 75")
        >>> str(err)
        'sendmail exited with status 75'
    """


class InvalidRecipientError(ValueError):
    """Email address validation failure.

    Raised when an address fails RFC 5321/5322 validation. Inherits from
    ValueError so generic ``except ValueError`` handlers still catch it.

    Example:
        >>> from localmail.domain.errors import InvalidRecipientError
        >>> err = InvalidRecipientError("Invalid recipient: not-an-email")
        >>> str(err)
        'Invalid recipient: not-an-email'
        >>> isinstance(err, ValueError)
        True
    """


__all__ = [
    "ConfigurationError",
    "DeliveryError",
    "InvalidRecipientError",
]
