"""vdiff package."""

from importlib.metadata import PackageNotFoundError, version

from vdiff.compare import CandidateResult, ComparisonResult
from vdiff.config import EngineConfig, load_config
from vdiff.engine import VisualEngine

__all__ = [
    "__version__",
    "CandidateResult",
    "ComparisonResult",
    "EngineConfig",
    "VisualEngine",
    "load_config",
]

try:
    __version__ = version("vdiff-cli")
except PackageNotFoundError:
    __version__ = "0.0.0-dev"
