"""Record-side types and the large-object (LOB) codec.

Attachments and custom field values keep their content in the database
either inline (with a transfer encoding) or as a content key with the
``external`` encoding marker.
"""

from __future__ import annotations

import base64
import binascii
import codecs
import quopri
from dataclasses import dataclass
from email.message import Message
from typing import Final

ENCODING_NONE: Final[str] = "none"
ENCODING_BASE64: Final[str] = "base64"
ENCODING_QUOTED_PRINTABLE: Final[str] = "quoted-printable"
ENCODING_EXTERNAL: Final[str] = "external"

TEXTUAL_CONTENT_TYPES: Final[frozenset[str]] = frozenset(
    {"message/delivery-status", "message/disposition-notification"}
)


@dataclass
class Attachment:
    """Attachment row as persisted by the ticketing application."""

    content_type: str
    content: bytes
    content_encoding: str = ENCODING_NONE
    content_length: int | None = None
    filename: str | None = None

    def __post_init__(self) -> None:
        if self.content_length is None:
            if self.is_external:
                raise ValueError("content_length is required for externally stored attachments")
            self.content_length = len(decode_transfer(self.content_encoding, self.content))

    @property
    def is_external(self) -> bool:
        return (self.content_encoding or ENCODING_NONE).lower() == ENCODING_EXTERNAL


@dataclass
class CustomFieldValue:
    """Custom field value row carrying a large value."""

    field_type: str
    large_content: bytes | None = None
    content_type: str | None = None
    content_encoding: str = ENCODING_NONE

    @property
    def is_external(self) -> bool:
        return (self.content_encoding or ENCODING_NONE).lower() == ENCODING_EXTERNAL

    @property
    def length(self) -> int:
        if not self.large_content or self.is_external:
            return 0
        return len(decode_transfer(self.content_encoding, self.large_content))


def _media_type(content_type: str | None) -> str:
    return (content_type or "").split(";", 1)[0].strip().lower()


def _charset(content_type: str | None) -> str:
    message = Message()
    message["Content-Type"] = content_type or "text/plain"
    charset = message.get_content_charset() or "utf-8"
    try:
        codecs.lookup(charset)
    except LookupError:
        return "utf-8"
    return charset


def is_textual_content_type(content_type: str | None) -> bool:
    """Return True for content types rendered as text."""
    media_type = _media_type(content_type)
    return media_type.startswith("text/") or media_type in TEXTUAL_CONTENT_TYPES


def decode_transfer(content_encoding: str | None, content: bytes) -> bytes:
    """Undo the transfer encoding of inline content.

    Raises:
        ValueError: For the ``external`` marker or an unknown encoding
    """
    encoding = (content_encoding or ENCODING_NONE).lower()
    if encoding == ENCODING_NONE:
        return content
    if encoding == ENCODING_BASE64:
        try:
            return base64.b64decode(content)
        except binascii.Error as exc:
            raise ValueError(f"Invalid base64 content: {exc}") from exc
    if encoding == ENCODING_QUOTED_PRINTABLE:
        return quopri.decodestring(content)
    raise ValueError(f"Cannot transfer-decode content with encoding {content_encoding!r}")


def decode_lob(
    content_type: str | None,
    content_encoding: str | None,
    content: bytes,
    filename: str | None = None,
) -> bytes | str:
    """Decode a stored large object for display.

    Textual content is returned as ``str`` using the charset from the content
    type (UTF-8 by default); anything else is returned as ``bytes``.
    """
    raw = decode_transfer(content_encoding, content)
    if is_textual_content_type(content_type):
        return raw.decode(_charset(content_type), errors="replace")
    return raw


def encode_lob(content_type: str | None, content: bytes | str) -> tuple[str, bytes]:
    """Encode content for inline storage.

    Returns:
        Tuple of (content_encoding, stored bytes)
    """
    if isinstance(content, str):
        content = content.encode(_charset(content_type))

    if is_textual_content_type(content_type) and b"\x00" not in content:
        return ENCODING_NONE, content
    try:
        content.decode("ascii")
    except UnicodeDecodeError:
        return ENCODING_BASE64, base64.b64encode(content)
    if b"\x00" in content:
        return ENCODING_BASE64, base64.b64encode(content)
    return ENCODING_NONE, content
