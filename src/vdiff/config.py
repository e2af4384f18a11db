"""Engine-wide configuration, built once and read-only afterwards."""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from vdiff.errors import ConfigError

log = logging.getLogger(__name__)

CaptureFlag = bool | str

MISSING = "missing"
DEFAULT_CONFIG_NAME = "vdiff.json"

_TRUE_TERMS = frozenset({"1", "on", "y", "yes", "true", "always"})

# Config keys accepted in files, camelCase first for compatibility with
# existing helper configs.
_KEY_ALIASES: dict[str, str] = {
    "dirExpected": "expected_dir",
    "dirActual": "actual_dir",
    "dirDiff": "diff_dir",
    "dirOutput": "output_dir",
    "diffPrefix": "diff_prefix",
    "dumpIntermediateImage": "dump_intermediate",
    "captureActual": "capture_actual",
    "captureExpected": "capture_expected",
}
_KNOWN_KEYS = frozenset(
    {
        "expected_dir",
        "actual_dir",
        "diff_dir",
        "output_dir",
        "tolerance",
        "threshold",
        "diff_prefix",
        "dump_intermediate",
        "capture_actual",
        "capture_expected",
    }
)


def to_bool(value: Any, valid_terms: Iterable[str] = ()) -> bool | str:
    """Coerce an option flag to bool.

    Strings like ``"yes"`` or ``"on"`` are true. A value listed in
    ``valid_terms`` is returned as-is instead of being coerced.

    >>> to_bool("Yes"), to_bool("n"), to_bool("missing", ["missing"])
    (True, False, 'missing')
    """
    if isinstance(value, str) and value in set(valid_terms):
        return value
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.lower() in _TRUE_TERMS
    return bool(value)


def _clamp(value: Any, lower: float, upper: float, key: str) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"{key} must be a number, got {value!r}") from exc
    return min(upper, max(lower, number))


def _resolve_dir(value: Any, base_dir: Path) -> Path:
    path = Path(str(value)).expanduser()
    if not path.is_absolute():
        path = base_dir / path
    return path.resolve()


@dataclass(frozen=True)
class EngineConfig:
    """Directories and defaults shared by every comparison of one engine."""

    expected_dir: Path | None = None
    actual_dir: Path | None = None
    diff_dir: Path | None = None
    output_dir: Path | None = None
    tolerance: float = 0.0
    threshold: float = 0.05
    diff_prefix: str = "Diff_"
    dump_intermediate: bool = False
    capture_actual: CaptureFlag = MISSING
    capture_expected: CaptureFlag = MISSING

    @property
    def diff_enabled(self) -> bool:
        return self.diff_dir is not None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any], base_dir: Path | None = None) -> EngineConfig:
        """Build a config from a loaded JSON object.

        Relative directories resolve against ``base_dir`` (default: cwd).
        ``expected_dir`` and ``diff_dir`` fall back to ``tests/screenshots/base``
        and ``tests/screenshots/diff``; a present but empty ``diff_dir``
        disables diff images. ``actual_dir`` falls back to ``output_dir``.
        """
        base = base_dir or Path.cwd()
        values: dict[str, Any] = {}
        for key, value in data.items():
            name = _KEY_ALIASES.get(key, key)
            if name not in _KNOWN_KEYS:
                log.warning("ignoring unknown config key %r", key)
                continue
            values[name] = value

        output_dir = _resolve_dir(values.get("output_dir") or "output", base)
        expected_dir = _resolve_dir(values.get("expected_dir") or "tests/screenshots/base", base)
        if "diff_dir" in values:
            diff_dir = _resolve_dir(values["diff_dir"], base) if values["diff_dir"] else None
        else:
            diff_dir = _resolve_dir("tests/screenshots/diff", base)
        actual_value = values.get("actual_dir")
        actual_dir = _resolve_dir(actual_value, base) if actual_value else output_dir

        kwargs: dict[str, Any] = {
            "expected_dir": expected_dir,
            "actual_dir": actual_dir,
            "diff_dir": diff_dir,
            "output_dir": output_dir,
            "dump_intermediate": bool(to_bool(values.get("dump_intermediate", False))),
        }
        if values.get("tolerance") is not None:
            kwargs["tolerance"] = _clamp(values["tolerance"], 0.0, 100.0, "tolerance")
        if values.get("threshold") is not None:
            kwargs["threshold"] = _clamp(values["threshold"], 0.0, 1.0, "threshold")
        if values.get("diff_prefix"):
            kwargs["diff_prefix"] = str(values["diff_prefix"])
        if "capture_actual" in values:
            kwargs["capture_actual"] = to_bool(values["capture_actual"], [MISSING])
        if "capture_expected" in values:
            kwargs["capture_expected"] = to_bool(values["capture_expected"], [MISSING])
        return cls(**kwargs)


def load_config(path: Path) -> EngineConfig:
    """Load an engine config from a JSON file; relative dirs resolve next to it."""
    try:
        data = json.loads(path.read_text())
    except OSError as exc:
        raise ConfigError(f"cannot read config {path}: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise ConfigError(f"invalid JSON in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"config {path} must contain a JSON object")
    return EngineConfig.from_mapping(data, base_dir=path.resolve().parent)
