"""Shared CLI helpers: comparison options, engine setup, error output."""

from __future__ import annotations

import dataclasses
import functools
import sys
from collections.abc import Callable
from pathlib import Path
from typing import Any, NoReturn

import click

from vdiff.config import DEFAULT_CONFIG_NAME, EngineConfig, load_config
from vdiff.engine import VisualEngine
from vdiff.formatters.json_fmt import error_json

__all__ = [
    "comparison_options",
    "engine_from_params",
    "options_from_params",
    "err_exit",
    "parse_box",
    "_json_mode",
]

_DIR = click.Path(file_okay=False, path_type=Path)


def _json_mode() -> bool:
    """Return True if the current Click context has a JSON output flag set."""
    ctx = click.get_current_context(silent=True)
    if ctx is None:
        return False
    return bool(ctx.params.get("use_json"))


def err_exit(msg: str, code: int = 2) -> NoReturn:
    """Print an error (JSON or plain text based on context) and exit."""
    if _json_mode():
        click.echo(error_json(msg), err=True)
    else:
        click.echo(f"error: {msg}", err=True)
    sys.exit(code)


def parse_box(value: str) -> dict[str, int]:
    """Parse ``L,T,W,H`` into a box mapping."""
    parts = [p.strip() for p in value.split(",")]
    if len(parts) != 4:
        raise click.BadParameter(f"{value!r} is not LEFT,TOP,WIDTH,HEIGHT")
    try:
        left, top, width, height = (int(p) for p in parts)
    except ValueError:
        raise click.BadParameter(f"{value!r} must contain four integers") from None
    return {"left": left, "top": top, "width": width, "height": height}


def _box_callback(ctx: click.Context, param: click.Parameter, value: Any) -> Any:
    if value is None:
        return None
    if isinstance(value, tuple):
        return [parse_box(v) for v in value]
    return parse_box(value)


def comparison_options(fn: Callable[..., Any]) -> Callable[..., Any]:
    """Attach directory, tolerance, masking and differ options to a command."""

    @click.option("--expected-dir", type=_DIR, default=None, help="Baseline image folder.")
    @click.option("--actual-dir", type=_DIR, default=None, help="Actual image folder.")
    @click.option("--diff-dir", type=_DIR, default=None, help="Diff image folder.")
    @click.option("--no-diff", is_flag=True, help="Do not write diff images.")
    @click.option("--tolerance", type=float, default=None, help="Allowed difference (%).")
    @click.option(
        "--threshold", type=click.FloatRange(0, 1), default=None, help="Per-pixel sensitivity."
    )
    @click.option(
        "--alpha", type=click.FloatRange(0, 1), default=None, help="Diff background opacity."
    )
    @click.option("--include-aa", is_flag=True, help="Count anti-aliased pixels as different.")
    @click.option("--diff-mask", is_flag=True, help="Draw the diff over a transparent background.")
    @click.option("--compare-with", default=None, help="Baseline name to compare against.")
    @click.option(
        "--bounds",
        default=None,
        metavar="L,T,W,H",
        callback=_box_callback,
        help="Only compare this box.",
    )
    @click.option(
        "--ignore",
        multiple=True,
        metavar="L,T,W,H",
        callback=_box_callback,
        help="Ignore this box (repeatable).",
    )
    @click.option(
        "--dump-intermediate", is_flag=True, help="Save masked images to the output folder."
    )
    @functools.wraps(fn)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        return fn(*args, **kwargs)

    return wrapper


def _base_config(config_path: Path | None) -> EngineConfig:
    if config_path is not None:
        return load_config(config_path)
    default = Path.cwd() / DEFAULT_CONFIG_NAME
    if default.is_file():
        return load_config(default)
    return EngineConfig.from_mapping({})


def engine_from_params(config_path: Path | None, params: dict[str, Any]) -> VisualEngine:
    """Build an engine from the config file plus command-line directory overrides.

    Command-line runs never capture, so both capture flags are off.
    """
    config = _base_config(config_path)
    changes: dict[str, Any] = {"capture_actual": False, "capture_expected": False}
    for key in ("expected_dir", "actual_dir", "diff_dir"):
        if params.get(key) is not None:
            changes[key] = params[key].resolve()
    if params.get("no_diff"):
        changes["diff_dir"] = None
    return VisualEngine(dataclasses.replace(config, **changes))


def options_from_params(params: dict[str, Any]) -> dict[str, Any]:
    """Translate parsed click params into the engine's option mapping."""
    options: dict[str, Any] = {"ignore": list(params.get("ignore") or [])}
    args: dict[str, Any] = {}
    if params.get("tolerance") is not None:
        options["tolerance"] = params["tolerance"]
    if params.get("compare_with"):
        options["compare_with"] = params["compare_with"]
    if params.get("bounds"):
        options["bounds"] = params["bounds"]
    if params.get("dump_intermediate"):
        options["dump_intermediate"] = True
    for key in ("threshold", "alpha"):
        if params.get(key) is not None:
            args[key] = params[key]
    if params.get("include_aa"):
        args["include_aa"] = True
    if params.get("diff_mask"):
        args["diff_mask"] = True
    options["args"] = args
    return options
