"""Address validation shared between the CLI and test adapters.

Raises domain exceptions (InvalidRecipientError) rather than library-specific
exceptions.
"""

from __future__ import annotations

from collections.abc import Iterable

from btx_lib_mail import validate_email_address

from localmail.domain.errors import InvalidRecipientError


def validate_address(address: str) -> None:
    """Validate a single email address.

    Args:
        address: Email address to validate.

    Raises:
        InvalidRecipientError: When the email address is invalid.

    Example:
        >>> validate_address("valid@example.com")  # no exception
        >>> validate_address("invalid")  # doctest: +IGNORE_EXCEPTION_DETAIL
        Traceback (most recent call last):
        ...
        InvalidRecipientError: Invalid address: invalid
    """
    try:
        validate_email_address(address)
    except ValueError as e:
        raise InvalidRecipientError(f"Invalid address: {address}") from e


def validate_addresses(addresses: str | Iterable[str] | None) -> None:
    """Validate every address in ``addresses``.

    Args:
        addresses: Single address, iterable of addresses (mapping keys work
            too), or None to skip validation.

    Raises:
        InvalidRecipientError: When an address has invalid email format.

    Example:
        >>> validate_addresses(None)
        >>> validate_addresses("test@example.com")
        >>> validate_addresses({"a@example.com": "A", "b@example.com": None})
    """
    if addresses is None:
        return
    address_list = [addresses] if isinstance(addresses, str) else list(addresses)
    for address in address_list:
        validate_address(address)


__all__ = ["validate_address", "validate_addresses"]
