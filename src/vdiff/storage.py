"""Filesystem access used by the engine and the candidate resolver."""

from __future__ import annotations

import logging
import os
import shutil
from pathlib import Path

from vdiff.errors import FileNotWritableError, ImageFileNotFoundError

log = logging.getLogger(__name__)

_ACCESS_FLAGS = {
    None: os.F_OK,
    "read": os.F_OK | os.R_OK,
    "write": os.F_OK | os.W_OK,
}


class FileStorage:
    """Plain local-filesystem storage.

    Every call goes to the filesystem; nothing is cached, so several workers
    may share one baseline directory.
    """

    def exists(self, path: Path, mode: str | None = None) -> bool:
        """Return True if ``path`` is a file (and readable/writable for ``mode``)."""
        try:
            flag = _ACCESS_FLAGS[mode]
        except KeyError:
            raise ValueError(f"unknown access mode: {mode!r}") from None
        return path.is_file() and os.access(path, flag)

    def read(self, path: Path) -> bytes:
        if not self.exists(path, "read"):
            raise ImageFileNotFoundError(f'the image does not exist at "{path}"')
        return path.read_bytes()

    def write(self, path: Path, data: bytes) -> None:
        if self.exists(path) and not self.exists(path, "write"):
            raise FileNotWritableError(f"cannot write {path}, maybe the file is read-only")
        path.write_bytes(data)

    def list_directory(self, path: Path) -> list[str]:
        if not path.is_dir():
            return []
        return [entry.name for entry in path.iterdir()]

    def ensure_directory(self, path: Path) -> None:
        path.mkdir(parents=True, exist_ok=True)

    def delete(self, path: Path) -> None:
        """Delete ``path`` if it exists."""
        try:
            path.unlink(missing_ok=True)
        except OSError as exc:
            raise FileNotWritableError(
                f'could not delete target file "{path}", is it read-only?'
            ) from exc

    def move(self, src: Path, dst: Path) -> None:
        log.debug("move %s -> %s", src, dst)
        shutil.move(str(src), str(dst))
