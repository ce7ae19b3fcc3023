"""Decode-time interception of externally stored content.

Wraps a record layer's decode routine so content carrying the ``external``
encoding marker is fetched from external storage first. Everything else is
passed through to the wrapped routine untouched.

Usage:
    storage = get_external_storage()
    decode = with_external_storage(decode_lob, storage)

    decode("image/png", "external", key)  # fetched, then decoded
    decode("text/plain", "none", b"hi")  # same as decode_lob(...)
"""

from __future__ import annotations

import functools
import logging
from typing import Protocol, TypeVar

from extstore.errors import ExternalStorageError
from extstore.observability.logging import LogContext
from extstore.records import ENCODING_EXTERNAL, ENCODING_NONE
from extstore.storage.facade import ExternalStorage

logger = logging.getLogger(__name__)

T = TypeVar("T")
T_co = TypeVar("T_co", covariant=True)


class DecodeFunction(Protocol[T_co]):
    def __call__(
        self,
        content_type: str | None,
        content_encoding: str | None,
        content: bytes,
        filename: str | None = None,
    ) -> T_co: ...


def _as_key(content: bytes | str) -> str:
    if isinstance(content, bytes):
        return content.decode("ascii", errors="replace").strip()
    return content.strip()


def with_external_storage(
    decode: DecodeFunction[T],
    storage: ExternalStorage,
) -> DecodeFunction[T]:
    """Wrap a decode routine with external storage lookups.

    When content is unavailable (no backend, missing key, backend error) an
    error is logged and the wrapped routine's rendering of empty content is
    returned instead of raising.

    Args:
        decode: The record layer's decode routine
        storage: External storage used to resolve content keys

    Returns:
        A routine with the same signature as ``decode``
    """

    @functools.wraps(decode)
    def decode_with_external(
        content_type: str | None,
        content_encoding: str | None,
        content: bytes,
        filename: str | None = None,
    ) -> T:
        if (content_encoding or ENCODING_NONE).lower() != ENCODING_EXTERNAL:
            return decode(content_type, content_encoding, content, filename)

        key = _as_key(content)
        with LogContext(content_key=key, backend=storage.backend_name):
            if not storage.is_active:
                logger.error(f"Failed to load {key}; external storage not configured")
                return decode(content_type, ENCODING_NONE, b"", filename)

            try:
                fetched = storage.get(key)
            except ExternalStorageError as exc:
                logger.error(f"Failed to load {key} from external storage: {exc.message}")
                return decode(content_type, ENCODING_NONE, b"", filename)

        return decode(content_type, ENCODING_NONE, fetched, filename)

    return decode_with_external
