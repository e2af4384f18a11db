"""Baseline naming conventions and candidate discovery.

A logical image ``shot`` has a canonical baseline ``shot.png`` and any number
of accepted variants ``shot~<label>.png``::

    shot.png        # exact match, variation ""
    shot~dark.png   # variation "dark"
    shot~2.png      # variation "2"
"""

from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

log = logging.getLogger(__name__)

IMAGE_EXT = ".png"

_STEM_RE = re.compile(r"(~[^/\\]+)?\.png$")


class DirectoryStorage(Protocol):
    def exists(self, path: Path, mode: str | None = None) -> bool: ...

    def list_directory(self, path: Path) -> list[str]: ...

    def ensure_directory(self, path: Path) -> None: ...


@dataclass(frozen=True)
class Candidate:
    """One acceptable baseline file for a logical image name."""

    path: Path
    variation: str


def image_stem(image: str) -> str:
    """Strip a trailing ``~<label>.png`` or ``.png`` from a logical image name."""
    return _STEM_RE.sub("", image, count=1)


def ensure_png(name: str) -> str:
    if not name.endswith(IMAGE_EXT):
        return name + IMAGE_EXT
    return name


def with_suffix_label(filename: str, label: str) -> str:
    """Replace the trailing ``.png`` with ``.<label>.png``; no-op for an empty label."""
    label = str(label).strip(".")
    if not label:
        return filename
    return f"{filename[: -len(IMAGE_EXT)]}.{label}{IMAGE_EXT}"


def diff_file_name(name: str, prefix: str, label: str = "") -> str:
    """Build the diff artifact name for a baseline name.

    The prefix goes on the final path segment only, so ``pages/home`` with
    prefix ``Diff_`` becomes ``pages/Diff_home.png``.
    """
    filename = ensure_png(name)
    parts = re.split(r"[/\\]", filename)
    parts[-1] = prefix + parts[-1]
    return with_suffix_label(os.sep.join(parts), label)


def variation_label(filename: str, stem: str) -> str:
    """Return the variant label of ``filename`` relative to ``stem``."""
    rest = filename[len(stem) : -len(IMAGE_EXT)]
    return rest[1:] if rest.startswith("~") else ""


def list_candidates(expected_path: Path, storage: DirectoryStorage) -> list[Candidate]:
    """List every existing baseline for ``expected_path``, canonical file first.

    The directory is read on every call.
    """
    directory = expected_path.parent
    stem = expected_path.name[: -len(IMAGE_EXT)]
    pattern = re.compile(rf"^{re.escape(stem)}(~.+)?{re.escape(IMAGE_EXT)}$")

    storage.ensure_directory(directory)
    found: list[Candidate] = []
    for name in sorted(storage.list_directory(directory)):
        if not pattern.match(name):
            continue
        path = directory / name
        if not storage.exists(path):
            continue
        found.append(Candidate(path=path, variation=variation_label(name, stem)))

    log.debug("found %d baseline candidate(s) for %s", len(found), expected_path)
    return found
