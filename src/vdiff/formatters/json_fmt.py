"""JSON rendering for vdiff command output."""

from __future__ import annotations

import json
from typing import Any


def to_json(data: Any) -> str:
    """Pretty JSON for stdout; paths and other objects are stringified."""
    return json.dumps(data, default=str, indent=2)


def error_json(message: str) -> str:
    """Return the single-line JSON error object printed on stderr."""
    return json.dumps({"error": {"message": message}})
