"""Scoped acquisition and release of temporary files.

Every file a pipeline operation touches, including the uploaded sources it
consumes and the intermediates it creates, is tracked by a
:class:`TemporaryScope` and deleted when the scope exits, whether the
operation succeeded or raised. Temporary names combine a nanosecond
timestamp with a random UUID so concurrent requests sharing one temp root
never collide.
"""

from __future__ import annotations

import logging
import mimetypes
import shutil
import time
import uuid
from contextlib import contextmanager
from pathlib import Path
from typing import Iterable, Iterator

from .model import SourceFile

LOGGER = logging.getLogger("pdfpipe.lifecycle")


class ResourceLifecycleManager:
    """Hands out collision-free temporary paths under an explicit root."""

    def __init__(self, temp_root: str | Path) -> None:
        self.temp_root = Path(temp_root).expanduser()

    def ensure_root(self) -> Path:
        self.temp_root.mkdir(parents=True, exist_ok=True)
        return self.temp_root

    def allocate(self, suffix: str = ".pdf", prefix: str = "pdfpipe") -> Path:
        """Return a fresh, unused path inside the temp root.

        The file itself is not created.
        """

        root = self.ensure_root()
        name = f"{prefix}-{time.time_ns()}-{uuid.uuid4().hex}{suffix}"
        return root / name

    def release(self, path: str | Path) -> bool:
        """Delete *path*, returning ``True`` when a file was removed.

        A file that is already gone is not an error, and deletion failures
        are logged rather than raised.
        """

        target = Path(path)
        try:
            target.unlink()
        except FileNotFoundError:
            LOGGER.debug("Temporary file %s already removed", target)
            return False
        except OSError as exc:
            LOGGER.warning("Failed to remove temporary file %s: %s", target, exc)
            return False
        LOGGER.debug("Removed temporary file %s", target)
        return True

    def stage(
        self,
        path: str | Path,
        *,
        original_name: str | None = None,
        mime_type: str | None = None,
    ) -> SourceFile:
        """Copy a user-owned file into the temp root and describe it.

        The returned :class:`SourceFile` is disposable: the pipeline may
        delete it while the original at *path* stays untouched.
        """

        source = Path(path).expanduser()
        name = original_name or source.name
        suffix = Path(name).suffix.lower()
        destination = self.allocate(suffix=suffix, prefix="upload")
        shutil.copyfile(source, destination)
        if mime_type is None:
            mime_type = mimetypes.guess_type(name)[0] or "application/octet-stream"
        LOGGER.debug("Staged %s as %s", source, destination)
        return SourceFile(
            temporary_path=destination,
            original_name=name,
            declared_mime_type=mime_type,
            size_bytes=destination.stat().st_size,
        )

    def open_scope(self, sources: Iterable[SourceFile] = ()) -> "TemporaryScope":
        """Return a scope already tracking the files of *sources*.

        The caller must call :meth:`TemporaryScope.close`; prefer
        :meth:`scope` unless the release point needs explicit control.
        """

        scope = TemporaryScope(self)
        for source in sources:
            scope.adopt(source.temporary_path)
        return scope

    @contextmanager
    def scope(self, sources: Iterable[SourceFile] = ()) -> Iterator["TemporaryScope"]:
        """Track *sources* and every path allocated in the block, then release them."""

        scope = self.open_scope(sources)
        try:
            yield scope
        finally:
            scope.close()


class TemporaryScope:
    """A set of temporary paths released together exactly once."""

    def __init__(self, manager: ResourceLifecycleManager) -> None:
        self._manager = manager
        self._tracked: list[Path] = []
        self._closed = False
        self.released: list[Path] = []

    @property
    def tracked(self) -> tuple[Path, ...]:
        return tuple(self._tracked)

    @property
    def closed(self) -> bool:
        return self._closed

    def adopt(self, path: str | Path) -> Path:
        if self._closed:
            raise RuntimeError("Cannot track new files in a closed temporary scope")
        target = Path(path)
        if target not in self._tracked:
            self._tracked.append(target)
        return target

    def allocate(self, suffix: str = ".pdf", prefix: str = "pdfpipe") -> Path:
        return self.adopt(self._manager.allocate(suffix=suffix, prefix=prefix))

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        for path in self._tracked:
            if self._manager.release(path):
                self.released.append(path)


__all__ = ["ResourceLifecycleManager", "TemporaryScope"]
