"""Unit tests for the Disk storage backend."""

from __future__ import annotations

import os
import stat
from collections.abc import Iterator
from pathlib import Path

import pytest

from extstore.config import ExternalStorageConfig
from extstore.errors import BackendFetchError, BackendInitError
from extstore.storage.base import compute_content_key
from extstore.storage.disk import DiskBackend


@pytest.fixture
def disk(tmp_path: Path) -> DiskBackend:
    return DiskBackend(path=tmp_path / "attachments").init()


@pytest.fixture
def shared_umask() -> Iterator[None]:
    previous = os.umask(0o022)
    yield
    os.umask(previous)


class TestDiskInit:
    """Tests for Disk initialization."""

    def test_creates_directory(self, tmp_path: Path) -> None:
        base = tmp_path / "a" / "b"
        DiskBackend(path=base).init()
        assert base.is_dir()

    def test_missing_path(self) -> None:
        with pytest.raises(BackendInitError, match="Path not provided for Disk"):
            DiskBackend(path=None).init()

    def test_path_is_a_file(self, tmp_path: Path) -> None:
        target = tmp_path / "file"
        target.write_bytes(b"")

        with pytest.raises(BackendInitError, match="Disk"):
            DiskBackend(path=target).init()

    def test_from_config(self, tmp_path: Path) -> None:
        config = ExternalStorageConfig.from_mapping({"Type": "Disk", "Path": str(tmp_path)})
        backend = DiskBackend.from_config(config)

        assert backend.path == tmp_path
        assert backend.describe() == {"type": "Disk", "path": str(tmp_path)}


class TestDiskObjects:
    """Tests for storing and fetching objects on disk."""

    def test_roundtrip(self, disk: DiskBackend) -> None:
        content = b"extstore-disk-object" * 100
        key = compute_content_key(content)

        disk.store(key, content)

        assert disk.exists(key)
        assert disk.get(key) == content

    def test_sharded_layout(self, disk: DiskBackend) -> None:
        content = b"layout"
        key = compute_content_key(content)

        disk.store(key, content)

        expected = disk.base_path / key[:3] / key[3:6] / key[6:]
        assert expected.read_bytes() == content

    def test_store_existing_is_noop(self, disk: DiskBackend) -> None:
        key = compute_content_key(b"original")
        disk.store(key, b"original")
        path = disk.base_path / key[:3] / key[3:6] / key[6:]
        mtime = path.stat().st_mtime_ns

        disk.store(key, b"original")

        assert path.stat().st_mtime_ns == mtime
        assert disk.get(key) == b"original"

    def test_no_temporary_files_left(self, disk: DiskBackend) -> None:
        key = compute_content_key(b"tmp")
        disk.store(key, b"tmp")

        leftovers = [p for p in disk.base_path.rglob(".tmp-*")]
        assert leftovers == []

    def test_get_missing(self, disk: DiskBackend) -> None:
        key = compute_content_key(b"missing")

        assert not disk.exists(key)
        with pytest.raises(BackendFetchError, match="Disk") as exc_info:
            disk.get(key)
        assert exc_info.value.key == key
        assert exc_info.value.backend == "Disk"

    def test_store_skips_write_when_exists(
        self, disk: DiskBackend, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        key = compute_content_key(b"present")
        monkeypatch.setattr(disk, "exists", lambda k: True)

        disk.store(key, b"present")

        assert not (disk.base_path / key[:3]).exists()

    def test_objects_readable_by_other_users(
        self, shared_umask: None, tmp_path: Path
    ) -> None:
        """Objects written by one account are readable by the web server account."""
        backend = DiskBackend(path=tmp_path / "shared").init()
        key = compute_content_key(b"shared")

        backend.store(key, b"shared")

        mode = stat.S_IMODE(backend._object_path(key).stat().st_mode)
        assert mode == 0o644
