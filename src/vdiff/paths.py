"""Per-call image path resolution for the expected/actual/diff/output roles."""

from __future__ import annotations

from pathlib import Path

from vdiff.candidates import diff_file_name, ensure_png, image_stem, with_suffix_label
from vdiff.config import EngineConfig
from vdiff.errors import MissingPathConfigurationError
from vdiff.storage import FileStorage

ROLES = ("expected", "actual", "diff", "output")


class ImagePaths:
    """Builds file paths for one logical image under the engine's directories."""

    def __init__(
        self,
        config: EngineConfig,
        image: str,
        compare_with: str = "",
        storage: FileStorage | None = None,
    ) -> None:
        self.config = config
        self.storage = storage or FileStorage()
        self.image = image
        self.name = image_stem(image)
        self.compare_with = compare_with

    def _dir(self, role: str) -> Path | None:
        if role not in ROLES:
            raise ValueError(f"unknown image role: {role!r}")
        return getattr(self.config, f"{role}_dir")

    def file_name(self, role: str, suffix: str = "") -> str:
        """Return the file name of ``role``, relative to its directory."""
        name = self.compare_with if role == "expected" and self.compare_with else self.name
        if role == "diff":
            return diff_file_name(name, self.config.diff_prefix, suffix)
        return with_suffix_label(ensure_png(name), suffix)

    def build(self, role: str, suffix: str = "") -> Path | None:
        """Return the absolute path of ``role`` and create its parent directory.

        Returns None for ``diff`` when diff output is disabled.

        Raises:
            MissingPathConfigurationError: If the role has no directory and the
                image is not an absolute path to an existing file.
        """
        directory = self._dir(role)
        if directory is None:
            if role == "diff":
                return None
            candidate = Path(self.image)
            if candidate.is_absolute() and candidate.is_file():
                return candidate
            raise MissingPathConfigurationError(f"no {role} folder defined")

        path = directory / self.file_name(role, suffix)
        self.storage.ensure_directory(path.parent)
        return path

    def require(self, role: str, suffix: str = "") -> Path:
        path = self.build(role, suffix)
        if path is None:
            raise MissingPathConfigurationError(f"no {role} folder defined")
        return path
