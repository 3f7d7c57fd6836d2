"""Pure delivery helpers with no I/O or framework dependencies.

Each function covers one step the local transport performs between holding a
:class:`~localmail.domain.message.Message` and calling the OS mail facility.
"""

from __future__ import annotations

import re

from .message import CRLF, Message

#: Default extra-params template; ``%s`` receives the reverse path.
DEFAULT_EXTRA_PARAMS = "-f%s"

_HEADER_BOUNDARY = CRLF + CRLF
_PARAM_TOKEN = re.compile(r"%%|%s")


def count_recipients(message: Message) -> int:
    """Return ``|To| + |Cc| + |Bcc|`` without de-duplicating across lists.

    Example:
        >>> msg = Message(to="a@example.com", cc="a@example.com", bcc=["b@example.com"])
        >>> count_recipients(msg)
        3
    """
    return len(message.to) + len(message.cc) + len(message.bcc)


def resolve_reverse_path(message: Message) -> str | None:
    """Pick the address bounces should go to.

    Preference order: Return-Path, then the first Sender address, then the
    first From address.

    Example:
        >>> resolve_reverse_path(Message(from_={"c@example.com": "C"}))
        'c@example.com'
        >>> resolve_reverse_path(Message(from_="c@example.com", sender="s@example.com"))
        's@example.com'
        >>> resolve_reverse_path(Message(from_="c@example.com", return_path="bounce@example.com"))
        'bounce@example.com'
        >>> resolve_reverse_path(Message()) is None
        True
    """
    if message.return_path:
        return message.return_path
    if message.sender:
        return next(iter(message.sender))
    if message.from_:
        return next(iter(message.from_))
    return None


def split_headers_and_body(text: str) -> tuple[str, str]:
    """Split serialized message text at the first blank line.

    The header block keeps the blank separator line, so ``headers + body``
    reproduces ``text``. Text without a blank line is all headers; a CRLF is
    appended so the block still ends with a line break.

    Example:
        >>> split_headers_and_body("A: 1\\r\\nB: 2\\r\\n\\r\\nbody\\r\\n")
        ('A: 1\\r\\nB: 2\\r\\n\\r\\n', 'body\\r\\n')
        >>> split_headers_and_body("A: 1")
        ('A: 1\\r\\n', '')
    """
    end = text.find(_HEADER_BOUNDARY)
    if end == -1:
        return text + CRLF, ""
    cut = end + len(_HEADER_BOUNDARY)
    return text[:cut], text[cut:]


def dot_stuff(text: str) -> str:
    r"""Escape lines starting with ``.`` for SMTP transparency.

    Example:
        >>> dot_stuff("a\r\n.b\r\n..c")
        'a\r\n..b\r\n...c'
    """
    return text.replace(CRLF + ".", CRLF + "..")


def prepare_for_platform(headers: str, body: str, line_ending: str) -> tuple[str, str]:
    r"""Adapt CRLF text to the host's mail facility.

    A non-CRLF host pipes the message to a local mail program, which expects
    native line endings. A CRLF host relays over SMTP, so lines are
    dot-stuffed instead.

    Example:
        >>> prepare_for_platform("A: 1\r\n\r\n", "x\r\n.y\r\n", "\n")
        ('A: 1\n\n', 'x\n.y\n')
        >>> prepare_for_platform("A: 1\r\n\r\n", "x\r\n.y\r\n", "\r\n")
        ('A: 1\r\n\r\n', 'x\r\n..y\r\n')
    """
    if line_ending != CRLF:
        return headers.replace(CRLF, line_ending), body.replace(CRLF, line_ending)
    return dot_stuff(headers), dot_stuff(body)


def count_param_slots(template: str) -> int:
    """Count the ``%s`` slots in an extra-params template; ``%%`` is a literal ``%``.

    Example:
        >>> count_param_slots("-f%s")
        1
        >>> count_param_slots("-oX%%s")
        0
        >>> count_param_slots("-oX%%%s")
        1
    """
    return sum(1 for match in _PARAM_TOKEN.finditer(template) if match.group() == "%s")


def format_extra_params(template: str, reverse_path: str | None) -> str | None:
    """Substitute the reverse path into the extra-params template.

    ``%%`` stands for a literal ``%``; every other ``%`` is copied as is.
    A template with a ``%s`` slot yields None when there is no reverse path,
    since a bare ``-f`` would swallow the next argument of the mail program.

    Example:
        >>> format_extra_params("-f%s", "bounce@example.com")
        '-fbounce@example.com'
        >>> format_extra_params("-oi", None)
        '-oi'
        >>> format_extra_params("-oX%%s", None)
        '-oX%s'
        >>> format_extra_params("-f%s", None) is None
        True
    """
    if count_param_slots(template) and reverse_path is None:
        return None
    return _PARAM_TOKEN.sub(lambda match: "%" if match.group() == "%%" else reverse_path or "", template)


__all__ = [
    "DEFAULT_EXTRA_PARAMS",
    "count_param_slots",
    "count_recipients",
    "dot_stuff",
    "format_extra_params",
    "prepare_for_platform",
    "resolve_reverse_path",
    "split_headers_and_body",
]
