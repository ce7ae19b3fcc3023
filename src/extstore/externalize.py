"""Move eligible record content into external storage.

Content always lands in the database first. These helpers perform the
later step for a single record: check eligibility, store the bytes, and
replace the inline content with the content key. When the store fails the
record is left inline and unchanged.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from extstore.errors import ExternalStorageError
from extstore.policy import attachment_should_externalize, custom_field_should_externalize
from extstore.records import ENCODING_EXTERNAL, Attachment, CustomFieldValue, decode_transfer
from extstore.storage.facade import ExternalStorage, StorageState

logger = logging.getLogger(__name__)


@dataclass
class ExternalizationResult:
    """Result of externalizing one record's content."""

    externalized: bool
    key: str | None = None
    error: str | None = None


def _not_writable(storage: ExternalStorage) -> ExternalizationResult:
    if storage.state is StorageState.FAILED:
        logger.debug(f"Skipping externalization; external storage failed: {storage.reason}")
        return ExternalizationResult(externalized=False, error=storage.reason)
    return ExternalizationResult(externalized=False)


def _store(storage: ExternalStorage, content: bytes) -> ExternalizationResult:
    try:
        key = storage.store(content)
    except ExternalStorageError as exc:
        logger.warning(f"Keeping content inline; external store failed: {exc.message}")
        return ExternalizationResult(externalized=False, error=exc.message)
    return ExternalizationResult(externalized=True, key=key)


def externalize_attachment(attachment: Attachment, storage: ExternalStorage) -> ExternalizationResult:
    """Externalize an attachment's content in place when eligible."""
    if attachment.is_external:
        return ExternalizationResult(externalized=False)
    if not storage.write:
        return _not_writable(storage)

    if not attachment_should_externalize(attachment.content_type, attachment.content_length or 0):
        return ExternalizationResult(externalized=False)

    raw = decode_transfer(attachment.content_encoding, attachment.content)
    result = _store(storage, raw)
    if result.externalized and result.key is not None:
        attachment.content = result.key.encode("ascii")
        attachment.content_encoding = ENCODING_EXTERNAL
    return result


def externalize_custom_field_value(
    value: CustomFieldValue, storage: ExternalStorage
) -> ExternalizationResult:
    """Externalize a custom field's large value in place when eligible."""
    if value.is_external or not value.large_content:
        return ExternalizationResult(externalized=False)
    if not storage.write:
        return _not_writable(storage)

    if not custom_field_should_externalize(value.field_type, value.length):
        return ExternalizationResult(externalized=False)

    raw = decode_transfer(value.content_encoding, value.large_content)
    result = _store(storage, raw)
    if result.externalized and result.key is not None:
        value.large_content = result.key.encode("ascii")
        value.content_encoding = ENCODING_EXTERNAL
    return result
