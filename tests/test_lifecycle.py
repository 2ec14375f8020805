from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

import pytest

from pdfpipe.core.lifecycle import ResourceLifecycleManager


@pytest.fixture()
def manager(temp_root: Path) -> ResourceLifecycleManager:
    return ResourceLifecycleManager(temp_root)


def test_allocate_returns_unused_paths_under_root(manager: ResourceLifecycleManager, temp_root: Path) -> None:
    path = manager.allocate(prefix="compressed")
    assert path.parent == temp_root
    assert path.name.startswith("compressed-")
    assert path.suffix == ".pdf"
    assert not path.exists()


def test_allocate_is_collision_free_across_threads(manager: ResourceLifecycleManager) -> None:
    with ThreadPoolExecutor(max_workers=8) as pool:
        paths = list(pool.map(lambda _: manager.allocate(), range(500)))
    assert len(set(paths)) == 500


def test_release_missing_file_is_not_an_error(manager: ResourceLifecycleManager, temp_root: Path) -> None:
    assert manager.release(temp_root / "never-created.pdf") is False


def test_release_failure_is_logged(
    manager: ResourceLifecycleManager, monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture
) -> None:
    path = manager.allocate()
    path.write_bytes(b"data")

    def deny(self, missing_ok=False):
        raise PermissionError("read-only file system")

    monkeypatch.setattr(Path, "unlink", deny)
    with caplog.at_level(logging.WARNING, logger="pdfpipe.lifecycle"):
        assert manager.release(path) is False
    assert "Failed to remove temporary file" in caplog.text


def test_scope_releases_tracked_files_on_error(manager: ResourceLifecycleManager) -> None:
    allocated: list[Path] = []
    with pytest.raises(RuntimeError, match="boom"):
        with manager.scope() as scope:
            path = scope.allocate()
            path.write_bytes(b"intermediate")
            allocated.append(path)
            raise RuntimeError("boom")
    assert not allocated[0].exists()
    assert scope.closed
    assert scope.released == allocated


def test_scope_close_is_idempotent(manager: ResourceLifecycleManager) -> None:
    scope = manager.open_scope()
    path = scope.allocate()
    path.write_bytes(b"x")
    scope.close()
    scope.close()
    assert scope.released == [path]
    with pytest.raises(RuntimeError):
        scope.adopt(path)


def test_scope_tracks_source_files(manager: ResourceLifecycleManager, sample_pdf: Path) -> None:
    source = manager.stage(sample_pdf)
    with manager.scope([source]) as scope:
        assert scope.tracked == (source.temporary_path,)
        assert scope.adopt(source.temporary_path) == source.temporary_path
        assert len(scope.tracked) == 1
    assert not source.temporary_path.exists()
    assert sample_pdf.exists()


def test_stage_describes_the_copy(manager: ResourceLifecycleManager, sample_pdf: Path, temp_root: Path) -> None:
    source = manager.stage(sample_pdf, original_name="Quarterly Report.PDF")
    assert source.temporary_path.parent == temp_root
    assert source.temporary_path.suffix == ".pdf"
    assert source.original_name == "Quarterly Report.PDF"
    assert source.declared_mime_type == "application/pdf"
    assert source.size_bytes == sample_pdf.stat().st_size
    assert source.temporary_path.read_bytes() == sample_pdf.read_bytes()
