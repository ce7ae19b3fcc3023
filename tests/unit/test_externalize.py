"""Tests for moving record content into external storage."""

from __future__ import annotations

import base64
import logging

import pytest

from extstore.decode import with_external_storage
from extstore.externalize import externalize_attachment, externalize_custom_field_value
from extstore.records import Attachment, CustomFieldValue, decode_lob
from extstore.storage.facade import ExternalStorage

MIB = 1024 * 1024


class TestExternalizeAttachment:
    """Tests for externalize_attachment."""

    def test_binary_attachment_externalized(self, storage: ExternalStorage, fake_backend) -> None:
        raw = b"%PDF-1.4 ..."
        attachment = Attachment("application/pdf", base64.b64encode(raw), "base64")

        result = externalize_attachment(attachment, storage)

        assert result.externalized
        assert result.key == ExternalStorage.content_key(raw)
        assert attachment.is_external
        assert attachment.content == result.key.encode("ascii")
        assert attachment.content_length == len(raw)
        assert fake_backend.objects[result.key] == raw

    def test_externalized_attachment_still_decodes(self, storage: ExternalStorage) -> None:
        raw = b"\x00\x01binary"
        attachment = Attachment("application/octet-stream", base64.b64encode(raw), "base64")
        externalize_attachment(attachment, storage)
        decode = with_external_storage(decode_lob, storage)

        assert decode(attachment.content_type, attachment.content_encoding, attachment.content) == raw

    def test_small_text_stays_inline(self, storage: ExternalStorage, fake_backend) -> None:
        attachment = Attachment("text/plain", b"short note")

        result = externalize_attachment(attachment, storage)

        assert not result.externalized
        assert attachment.content == b"short note"
        assert attachment.content_encoding == "none"
        assert fake_backend.store_calls == 0

    def test_large_text_externalized(self, storage: ExternalStorage) -> None:
        attachment = Attachment("text/plain", b"x" * (11 * MIB))

        assert externalize_attachment(attachment, storage).externalized

    def test_already_external_skipped(self, storage: ExternalStorage, fake_backend) -> None:
        key = ExternalStorage.content_key(b"x").encode()
        attachment = Attachment("application/pdf", key, "external", content_length=1)

        assert not externalize_attachment(attachment, storage).externalized
        assert fake_backend.store_calls == 0

    def test_store_failure_keeps_inline(
        self, storage: ExternalStorage, fake_backend, caplog: pytest.LogCaptureFixture
    ) -> None:
        fake_backend.fail_store = "network unreachable"
        attachment = Attachment("application/zip", b"PK\x03\x04")

        with caplog.at_level(logging.WARNING, logger="extstore.externalize"):
            result = externalize_attachment(attachment, storage)

        assert not result.externalized
        assert result.error is not None and "network unreachable" in result.error
        assert attachment.content == b"PK\x03\x04"
        assert attachment.content_encoding == "none"
        assert "Keeping content inline" in caplog.text

    @pytest.mark.parametrize(
        "storage_factory",
        [
            ExternalStorage.disabled,
            lambda: ExternalStorage.failed("boom"),
        ],
    )
    def test_no_backend_skipped(self, storage_factory) -> None:
        attachment = Attachment("application/zip", b"PK")

        assert not externalize_attachment(attachment, storage_factory()).externalized
        assert attachment.content == b"PK"

    def test_failed_storage_reports_reason(self) -> None:
        attachment = Attachment("application/zip", b"PK")

        result = externalize_attachment(attachment, ExternalStorage.failed("Bucket not provided"))

        assert not result.externalized
        assert result.error == "Bucket not provided"

    def test_disabled_storage_reports_no_error(self) -> None:
        attachment = Attachment("application/zip", b"PK")

        result = externalize_attachment(attachment, ExternalStorage.disabled())

        assert result.error is None

    def test_read_only_skipped(self, fake_backend) -> None:
        storage = ExternalStorage.active(fake_backend, write=False)
        attachment = Attachment("application/zip", b"PK")

        assert not externalize_attachment(attachment, storage).externalized
        assert fake_backend.store_calls == 0


class TestExternalizeCustomFieldValue:
    """Tests for externalize_custom_field_value."""

    def test_binary_value_externalized(self, storage: ExternalStorage, fake_backend) -> None:
        value = CustomFieldValue("Binary", b"\x01", content_type="application/octet-stream")

        result = externalize_custom_field_value(value, storage)

        assert result.externalized
        assert value.is_external
        assert fake_backend.objects[result.key] == b"\x01"

    def test_small_image_stays_inline(self, storage: ExternalStorage) -> None:
        value = CustomFieldValue("Image", b"\x89PNG" * 10, content_type="image/png")

        assert not externalize_custom_field_value(value, storage).externalized
        assert not value.is_external

    def test_freeform_stays_inline(self, storage: ExternalStorage) -> None:
        value = CustomFieldValue("Freeform", b"x" * 100)

        assert not externalize_custom_field_value(value, storage).externalized

    def test_empty_value_skipped(self, storage: ExternalStorage, fake_backend) -> None:
        assert not externalize_custom_field_value(CustomFieldValue("Binary"), storage).externalized
        assert fake_backend.store_calls == 0

    def test_failed_storage_reports_reason(self) -> None:
        value = CustomFieldValue("Binary", b"\x01")

        storage = ExternalStorage.failed("Path not provided for Disk")

        result = externalize_custom_field_value(value, storage)

        assert not result.externalized
        assert result.error == "Path not provided for Disk"
        assert not value.is_external
