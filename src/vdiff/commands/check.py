"""vdiff check command -- assert that an image matches one of its baselines."""

from __future__ import annotations

import sys
from typing import Any

import click

from vdiff.commands._helpers import (
    comparison_options,
    engine_from_params,
    err_exit,
    options_from_params,
)
from vdiff.compare import ComparisonResult
from vdiff.engine import mismatch_message
from vdiff.errors import VdiffError
from vdiff.formatters.json_fmt import to_json


def _summary(result: ComparisonResult) -> str:
    pixels = f"{result.diff_pixel_count}/{result.relevant_pixel_count} pixels"
    variation = f" [{result.variation_label}]" if result.variation_label else ""
    if result.match:
        return f"match{variation}: {pixels} ({result.difference_percent:.4f}%)"
    return f"diff{variation}: {pixels} ({result.difference_percent:.4f}%)"


@click.command("check")
@click.argument("image")
@comparison_options
@click.option("--json", "use_json", is_flag=True, help="JSON output.")
@click.pass_obj
def check_cmd(obj: dict[str, Any] | None, image: str, use_json: bool, **params: Any) -> None:
    """Compare IMAGE with its baselines and fail if it differs.

    Exit 0 if the best baseline matches within the tolerance, exit 1 if the
    images differ, exit 2 if the comparison could not be performed.
    """
    config_path = (obj or {}).get("config")
    try:
        engine = engine_from_params(config_path, params)
        result = engine.get_visual_differences(image, options_from_params(params))
    except (VdiffError, ValueError, OSError) as exc:
        err_exit(str(exc))

    if use_json:
        click.echo(to_json(result.to_dict()))
    else:
        click.echo(_summary(result))
        if not result.match:
            click.echo(mismatch_message(result), err=True)

    sys.exit(0 if result.match else 1)
