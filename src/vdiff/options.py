"""Per-call comparison options and their sanitation."""

from __future__ import annotations

import dataclasses
import logging
import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from vdiff.capture import BoundingBoxResolver
from vdiff.config import MISSING, CaptureFlag, EngineConfig, to_bool
from vdiff.errors import CaptureUnavailableError
from vdiff.mask import Box
from vdiff.pixel_diff import DiffArgs

log = logging.getLogger(__name__)

_INT_PREFIX_RE = re.compile(r"\s*([-+]?\d+)")
_BOX_FIELDS = ("left", "top", "width", "height")
_COLOR_ARGS = frozenset({"aa_color", "diff_color", "diff_color_alt"})

# Caller-facing arg names, including the pixelmatch spellings.
_ARG_ALIASES: dict[str, str] = {
    "includeAA": "include_aa",
    "diffMask": "diff_mask",
    "aaColor": "aa_color",
    "diffColor": "diff_color",
    "diffColorAlt": "diff_color_alt",
}
_ARG_FIELDS = frozenset(f.name for f in dataclasses.fields(DiffArgs))

_OPTION_ALIASES: dict[str, str] = {
    "compareWith": "compare_with",
    "dumpIntermediateImage": "dump_intermediate",
    "captureActual": "capture_actual",
    "captureExpected": "capture_expected",
}
_OPTION_KEYS = frozenset(
    {
        "tolerance",
        "compare_with",
        "element",
        "bounds",
        "ignore",
        "args",
        "dump_intermediate",
        "capture_actual",
        "capture_expected",
    }
)


@dataclass(frozen=True)
class ComparisonOptions:
    """Sanitized options for one comparison."""

    tolerance: float = 0.0
    compare_with: str = ""
    element: str = ""
    bounds: Box = field(default_factory=Box)
    ignore: tuple[Box, ...] = ()
    args: DiffArgs = field(default_factory=DiffArgs)
    dump_intermediate: bool = False
    capture_actual: CaptureFlag = MISSING
    capture_expected: CaptureFlag = MISSING


def parse_int(value: Any) -> int | None:
    """Parse the leading integer of ``value``, or None when there is none."""
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value == value else None
    if isinstance(value, str):
        m = _INT_PREFIX_RE.match(value)
        return int(m.group(1)) if m else None
    return None


def _parse_box(raw: Mapping[str, Any]) -> Box:
    return Box(*(parse_int(raw.get(name)) or 0 for name in _BOX_FIELDS))


def _parse_ignore(raw: Any) -> tuple[Box, ...]:
    boxes: list[Box] = []
    for item in raw or ():
        if not isinstance(item, Mapping) or any(name not in item for name in _BOX_FIELDS):
            log.debug("dropping malformed ignore region %r", item)
            continue
        values = [parse_int(item[name]) for name in _BOX_FIELDS]
        if any(v is None for v in values):
            log.debug("dropping non-numeric ignore region %r", item)
            continue
        boxes.append(Box(*values))  # type: ignore[arg-type]
    return tuple(boxes)


def _parse_color(name: str, value: Any) -> tuple[int, int, int] | None:
    if value is None:
        return None
    try:
        if isinstance(value, (str, bytes)):
            raise TypeError(name)
        r, g, b = (int(c) for c in value)
    except (TypeError, ValueError):
        raise ValueError(f"{name} must be three integers (r, g, b), got {value!r}") from None
    return r, g, b


def merge_diff_args(raw: Mapping[str, Any] | None, defaults: DiffArgs) -> DiffArgs:
    """Overlay caller-supplied differ args on ``defaults``; unknown keys are ignored."""
    changes: dict[str, Any] = {}
    for key, value in (raw or {}).items():
        name = _ARG_ALIASES.get(key, key)
        if name not in _ARG_FIELDS:
            log.warning("ignoring unknown diff arg %r", key)
            continue
        if name in _COLOR_ARGS:
            value = _parse_color(key, value)
            if value is None and name != "diff_color_alt":
                continue
        elif name in ("threshold", "alpha"):
            value = min(1.0, max(0.0, float(value)))
        else:
            value = bool(to_bool(value))
        changes[name] = value
    return dataclasses.replace(defaults, **changes)


def _normalize_options(raw: Mapping[str, Any]) -> dict[str, Any]:
    options: dict[str, Any] = {}
    for key, value in raw.items():
        name = _OPTION_ALIASES.get(key, key)
        if name not in _OPTION_KEYS:
            log.warning("ignoring unknown comparison option %r", key)
            continue
        options[name] = value
    return options


def build_options(
    raw: Mapping[str, Any] | None,
    config: EngineConfig,
    bbox_resolver: BoundingBoxResolver | None = None,
) -> ComparisonOptions:
    """Sanitize caller options over the engine defaults.

    Args:
        raw: Caller options (``tolerance``, ``compare_with``, ``element``,
            ``bounds``, ``ignore``, ``args``, ``dump_intermediate``,
            ``capture_actual``, ``capture_expected``). The camelCase
            spellings ``compareWith``, ``dumpIntermediateImage``,
            ``captureActual`` and ``captureExpected`` are accepted too;
            unknown keys are logged and ignored.
        config: Engine defaults.
        bbox_resolver: Resolves ``element`` to a box. Required when
            ``element`` is given.

    Raises:
        ValueError: If ``tolerance`` is not a number or a colour arg is malformed.
        CaptureUnavailableError: If ``element`` is set without a resolver.
    """
    raw = _normalize_options(raw or {})
    defaults = DiffArgs(threshold=config.threshold)

    tolerance = config.tolerance
    if raw.get("tolerance") is not None:
        tolerance = max(0.0, float(raw["tolerance"]))

    element = str(raw.get("element") or "")
    bounds = Box()
    if element:
        if bbox_resolver is None:
            raise CaptureUnavailableError(f"cannot resolve element {element!r}: no driver")
        bounds = bbox_resolver.bounding_box(element)
        log.debug("bounding box of %s: %s", element, bounds)
    elif isinstance(raw.get("bounds"), Mapping):
        bounds = _parse_box(raw["bounds"])

    dump = raw.get("dump_intermediate", config.dump_intermediate)
    return ComparisonOptions(
        tolerance=tolerance,
        compare_with=str(raw.get("compare_with") or ""),
        element=element,
        bounds=bounds,
        ignore=_parse_ignore(raw.get("ignore")),
        args=merge_diff_args(raw.get("args"), defaults),
        dump_intermediate=bool(to_bool(dump)),
        capture_actual=to_bool(raw.get("capture_actual", config.capture_actual), [MISSING]),
        capture_expected=to_bool(raw.get("capture_expected", config.capture_expected), [MISSING]),
    )
