"""
Typed configuration package for govtex.

This package exposes:
- ``Settings``: environment-driven toggles (pydantic-settings).
- ``load_runtime_config``: loader for the optional repository ``govtex.yaml``.
"""

from .settings import (
    Settings,
    LatexEngineChoice,
    LogFormatChoice,
)
from .runtime import DEFAULT_TITLES, RuntimeConfig, load_runtime_config

__all__ = [
    "Settings",
    "LatexEngineChoice",
    "LogFormatChoice",
    "DEFAULT_TITLES",
    "RuntimeConfig",
    "load_runtime_config",
]
