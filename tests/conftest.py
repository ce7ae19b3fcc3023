"""Global pytest configuration and fixtures."""

from __future__ import annotations

from collections.abc import Iterator

import pytest

from extstore.config import ExternalStorageConfig
from extstore.errors import BackendFetchError, BackendStoreError
from extstore.storage.base import StorageBackend
from extstore.storage.facade import ExternalStorage
from extstore.storage.factory import reset_external_storage


class FakeBackend(StorageBackend):
    """In-memory backend that counts calls and physical transfers."""

    type_name = "Fake"

    def __init__(self, objects: dict[str, bytes] | None = None) -> None:
        self.objects: dict[str, bytes] = dict(objects or {})
        self.store_calls = 0
        self.get_calls = 0
        self.transfers = 0
        self.fail_store: str | None = None
        self.fail_get: str | None = None

    @classmethod
    def from_config(cls, config: ExternalStorageConfig) -> FakeBackend:
        return cls()

    def init(self) -> FakeBackend:
        return self

    def exists(self, key: str) -> bool:
        return key in self.objects

    def store(self, key: str, content: bytes) -> None:
        self.store_calls += 1
        if self.fail_store:
            raise BackendStoreError(
                f"Failed to write to Fake: {self.fail_store}", backend=self.type_name, key=key
            )
        if self.exists(key):
            return
        self.transfers += 1
        self.objects[key] = content

    def get(self, key: str) -> bytes:
        self.get_calls += 1
        if self.fail_get:
            raise BackendFetchError(
                f"Could not retrieve from Fake: {self.fail_get}", backend=self.type_name, key=key
            )
        if key not in self.objects:
            raise BackendFetchError(
                f"Could not retrieve from Fake: {key} not found", backend=self.type_name, key=key
            )
        return self.objects[key]


@pytest.fixture
def fake_backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
def storage(fake_backend: FakeBackend) -> ExternalStorage:
    """Writable external storage over the fake backend."""
    return ExternalStorage.active(fake_backend, write=True)


@pytest.fixture(autouse=True)
def _reset_process_storage() -> Iterator[None]:
    """Never leak the process-wide storage between tests."""
    reset_external_storage()
    yield
    reset_external_storage()
