"""In-memory email message consumed by the transports.

The message keeps addresses as ordered ``address -> display name`` mappings
(the shape transports need for counting recipients and choosing a reverse
path) and serializes to CRLF-terminated RFC 5322 text through the standard
library ``email`` package.
"""

from __future__ import annotations

import email.policy
from collections.abc import Iterator, Mapping, Sequence
from dataclasses import dataclass
from email.header import Header as _EncodedHeader
from email.message import EmailMessage
from email.utils import formataddr, formatdate, make_msgid

CRLF = "\r\n"

AddressMap = dict[str, "str | None"]
"""Ordered mapping of address to optional display name."""

AddressInput = str | Sequence[str] | Mapping[str, "str | None"] | None
"""Anything accepted where a set of addresses is expected."""


def normalize_addresses(value: AddressInput) -> AddressMap:
    """Coerce a single address, a sequence, or a mapping into an AddressMap.

    Blank entries are dropped; the first occurrence of an address wins.

    Example:
        >>> normalize_addresses("a@example.com")
        {'a@example.com': None}
        >>> normalize_addresses(["a@example.com", "b@example.com", "a@example.com"])
        {'a@example.com': None, 'b@example.com': None}
        >>> normalize_addresses({"c@example.com": "C"})
        {'c@example.com': 'C'}
        >>> normalize_addresses(None)
        {}
    """
    if value is None:
        return {}
    if isinstance(value, str):
        value = [value]
    result: AddressMap = {}
    if isinstance(value, Mapping):
        for address, name in value.items():
            if address.strip() and address.strip() not in result:
                result[address.strip()] = name or None
        return result
    for address in value:
        if address.strip() and address.strip() not in result:
            result[address.strip()] = None
    return result


def _format_address_list(addresses: Mapping[str, str | None]) -> str:
    return ", ".join(formataddr((name or "", address), charset="utf-8") for address, name in addresses.items())


def _encode_text(value: str) -> str:
    """RFC 2047-encode ``value`` on a single line.

    Field bodies must stay unfolded: the mail function receives the subject
    as an argument, and ``policy.SMTP`` folds when serializing.

    Example:
        >>> "\\n" in _encode_text("Einladung zur Jahreshauptversammlung des Vereins für Heimatgeschichte")
        False
    """
    if value.isascii():
        return value
    return _EncodedHeader(value, charset="utf-8").encode(maxlinelen=0)


@dataclass(frozen=True, slots=True)
class Header:
    """A single header field.

    Example:
        >>> Header("Subject", "Hello").to_string()
        'Subject: Hello\\r\\n'
    """

    name: str
    field_body: str

    def to_string(self) -> str:
        return f"{self.name}: {self.field_body}{CRLF}"


class HeaderSet:
    """Ordered, case-insensitive collection of headers.

    Example:
        >>> headers = HeaderSet([Header("To", "a@example.com")])
        >>> headers.get("to").field_body
        'a@example.com'
        >>> headers.get("Cc") is None
        True
    """

    def __init__(self, headers: Sequence[Header] = ()) -> None:
        self._headers: list[Header] = list(headers)

    def get(self, name: str) -> Header | None:
        """Return the first header called ``name`` (any case), or None."""
        wanted = name.lower()
        for header in self._headers:
            if header.name.lower() == wanted:
                return header
        return None

    def has(self, name: str) -> bool:
        return self.get(name) is not None

    def names(self) -> list[str]:
        return [header.name for header in self._headers]

    def __iter__(self) -> Iterator[Header]:
        return iter(self._headers)

    def __len__(self) -> int:
        return len(self._headers)


class Message:
    """A composed email ready for delivery.

    Date and Message-ID are fixed at construction so that repeated calls to
    :meth:`to_string` produce identical text.

    Example:
        >>> msg = Message(
        ...     subject="Hi",
        ...     body="Hello",
        ...     from_={"c@example.com": "C"},
        ...     to="a@example.com",
        ...     bcc=["b@example.com"],
        ... )
        >>> msg.headers.get("To").field_body
        'a@example.com'
        >>> msg.headers.get("From").field_body
        'C <c@example.com>'
        >>> "\\r\\n\\r\\nHello" in msg.to_string()
        True
    """

    def __init__(
        self,
        *,
        subject: str = "",
        body: str = "",
        from_: AddressInput = None,
        to: AddressInput = None,
        cc: AddressInput = None,
        bcc: AddressInput = None,
        sender: AddressInput = None,
        return_path: str | None = None,
        content_type: str = "text/plain",
        charset: str = "utf-8",
        message_id: str | None = None,
        date: str | None = None,
    ) -> None:
        self.subject = subject
        self.body = body
        self.from_ = from_
        self.to = to
        self.cc = cc
        self.bcc = bcc
        self.sender = sender
        self.return_path = return_path
        self.content_type = content_type
        self.charset = charset
        self.message_id = message_id or make_msgid()
        self.date = date or formatdate(localtime=True)
        self._extra_headers: list[Header] = []

    # ---- address fields ----------------------------------------------

    @property
    def to(self) -> AddressMap:
        return self._to

    @to.setter
    def to(self, value: AddressInput) -> None:
        self._to = normalize_addresses(value)

    @property
    def cc(self) -> AddressMap:
        return self._cc

    @cc.setter
    def cc(self, value: AddressInput) -> None:
        self._cc = normalize_addresses(value)

    @property
    def bcc(self) -> AddressMap:
        return self._bcc

    @bcc.setter
    def bcc(self, value: AddressInput) -> None:
        self._bcc = normalize_addresses(value)

    @property
    def from_(self) -> AddressMap:
        return self._from

    @from_.setter
    def from_(self, value: AddressInput) -> None:
        self._from = normalize_addresses(value)

    @property
    def sender(self) -> AddressMap:
        return self._sender

    @sender.setter
    def sender(self, value: AddressInput) -> None:
        self._sender = normalize_addresses(value)

    @property
    def return_path(self) -> str | None:
        return self._return_path

    @return_path.setter
    def return_path(self, value: str | None) -> None:
        self._return_path = value.strip() if value and value.strip() else None

    # ---- headers -----------------------------------------------------

    def add_header(self, name: str, value: str) -> None:
        """Append a custom header emitted after the standard ones."""
        self._extra_headers.append(Header(name, value))

    @property
    def headers(self) -> HeaderSet:
        """Current header fields, in serialization order (content headers excluded)."""
        fields: list[Header] = []
        if self.return_path:
            fields.append(Header("Return-Path", f"<{self.return_path}>"))
        if self.sender:
            fields.append(Header("Sender", _format_address_list(self.sender)))
        fields.append(Header("Message-ID", self.message_id))
        fields.append(Header("Date", self.date))
        fields.append(Header("Subject", _encode_text(self.subject)))
        if self.from_:
            fields.append(Header("From", _format_address_list(self.from_)))
        if self.to:
            fields.append(Header("To", _format_address_list(self.to)))
        if self.cc:
            fields.append(Header("Cc", _format_address_list(self.cc)))
        if self.bcc:
            fields.append(Header("Bcc", _format_address_list(self.bcc)))
        fields.extend(self._extra_headers)
        return HeaderSet(fields)

    # ---- serialization -----------------------------------------------

    def to_string(self) -> str:
        """Serialize to CRLF-terminated header lines, a blank line, and the body."""
        mime = EmailMessage(policy=email.policy.SMTP)
        for header in self.headers:
            mime[header.name] = header.field_body
        maintype, _, subtype = self.content_type.partition("/")
        if maintype != "text" or not subtype:
            raise ValueError(f"Unsupported content type: {self.content_type!r}")
        mime.set_content(self.body, subtype=subtype, charset=self.charset)
        return mime.as_string()

    def __repr__(self) -> str:
        return f"Message(subject={self.subject!r}, to={list(self.to)!r}, from_={list(self.from_)!r})"


__all__ = [
    "AddressInput",
    "AddressMap",
    "CRLF",
    "Header",
    "HeaderSet",
    "Message",
    "normalize_addresses",
]
