"""Eligibility rules deciding which content is moved to external storage.

Textual content and images stay inline unless very large, so they render
without a round trip to the backend. Other binaries are always moved out
once non-empty.
"""

from __future__ import annotations

from typing import Final

# Textual content and images above this size are externalized (10 MiB)
EXTERNALIZE_THRESHOLD: Final[int] = 10 * 1024 * 1024

DEFAULT_CONTENT_TYPE: Final[str] = "application/octet-stream"

_INLINE_PREFIXES: Final[tuple[str, ...]] = ("text/", "message/", "image/")


def attachment_should_externalize(content_type: str | None, length: int) -> bool:
    """Determine if an attachment should be stored externally.

    Args:
        content_type: MIME type of the attachment
        length: Content length in bytes

    Returns:
        True if the content belongs in external storage
    """
    if length <= 0:
        return False

    media_type = (content_type or DEFAULT_CONTENT_TYPE).strip().lower()

    if media_type.startswith("multipart/"):
        return False
    if media_type.startswith(_INLINE_PREFIXES):
        return length > EXTERNALIZE_THRESHOLD
    return True


def custom_field_should_externalize(field_type: str | None, length: int) -> bool:
    """Determine if a custom field's large value should be stored externally.

    Args:
        field_type: Declared custom field type ("Binary", "Image", ...)
        length: Length of the large value in bytes
    """
    if length <= 0:
        return False
    if field_type == "Binary":
        return True
    if field_type == "Image":
        return length > EXTERNALIZE_THRESHOLD
    return False
