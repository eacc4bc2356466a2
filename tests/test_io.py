import pytest

from upload_guard.core.io.fs_manager import FileSystemManager
from upload_guard.core.io.local import LocalProvider, SecurityViolationError
from upload_guard.core.io.provider import StorageProvider
from upload_guard.core.io.temp_manager import TempFileManager


class TestLocalProvider:

    def setup_method(self):
        FileSystemManager.reset()

    def test_delete_twice_is_safe(self, tmp_path):
        provider = LocalProvider()
        p = tmp_path / "upload.jpg"
        p.write_bytes(b"x")
        provider.delete(str(p))
        provider.delete(str(p))
        assert not p.exists()

    def test_paths_outside_roots_are_refused(self, tmp_path):
        root = tmp_path / "uploads"
        root.mkdir()
        outside = tmp_path / "elsewhere.png"
        outside.write_bytes(b"x")
        sibling = tmp_path / "uploads-evil" / "a.png"

        provider = LocalProvider(allowed_roots=[str(root)])
        with pytest.raises(SecurityViolationError):
            provider.read_bytes(str(outside))
        with pytest.raises(SecurityViolationError):
            provider.write_bytes(str(sibling), b"x")
        assert provider.exists(str(outside)) is False

        provider.write_bytes(str(root / "nested" / "ok.png"), b"data")
        assert provider.read_bytes(str(root / "nested" / "ok.png")) == b"data"

    def test_move_overwrites(self, tmp_path):
        provider = LocalProvider()
        src, dest = tmp_path / "a", tmp_path / "b"
        src.write_bytes(b"new")
        dest.write_bytes(b"old")
        provider.move(str(src), str(dest))
        assert dest.read_bytes() == b"new"
        assert not src.exists()

    def test_manager_uses_allowed_roots(self, tmp_path):
        manager = FileSystemManager.get_instance({"allowed_roots": [str(tmp_path)]})
        provider = manager.local_provider
        assert provider.allowed_roots == [tmp_path.resolve()]
        assert FileSystemManager.get_instance() is manager

    def test_manager_requires_config_first(self):
        with pytest.raises(ValueError):
            FileSystemManager.get_instance()


class TestStagingPath:

    def test_leftover_is_removed_on_error(self, tmp_path):
        provider = LocalProvider()
        target = str(tmp_path / "photo.jpg")
        with pytest.raises(RuntimeError):
            with TempFileManager.staging_path(provider, target) as staged:
                assert staged == target + "-resized"
                provider.write_bytes(staged, b"partial")
                raise RuntimeError("encoder crashed")
        assert not (tmp_path / "photo.jpg-resized").exists()

    def test_moved_output_is_kept(self, tmp_path):
        provider = LocalProvider()
        target = tmp_path / "photo.jpg"
        target.write_bytes(b"original")
        with TempFileManager.staging_path(provider, str(target)) as staged:
            provider.write_bytes(staged, b"resized")
            provider.move(staged, str(target))
        assert target.read_bytes() == b"resized"
        assert not (tmp_path / "photo.jpg-resized").exists()


def test_storage_contract_is_what_admission_needs():
    assert StorageProvider.__abstractmethods__ == {
        "exists", "read_bytes", "write_bytes", "delete", "move"
    }
