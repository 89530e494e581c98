"""Convenience imports for the govtex package."""

from .config import Settings
from .core.pipeline import DiffPipeline, DiffRequest, run_diff
from .exceptions import GovtexError

__all__ = [
    "Settings",
    "DiffPipeline",
    "DiffRequest",
    "run_diff",
    "GovtexError",
]

__version__ = "0.1.0"
