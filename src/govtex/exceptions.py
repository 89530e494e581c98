from __future__ import annotations

from pathlib import Path
from typing import Optional, Union


class GovtexError(Exception):
    """Base exception for all govtex errors."""

    def __init__(
        self,
        message: str,
        *,
        stage: Optional[str] = None,
        path: Optional[Union[str, Path]] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.stage = stage
        self.path = Path(path) if path is not None else None

    def __str__(self) -> str:
        text = self.message
        if self.path is not None:
            text = f"{text}: {self.path}"
        if self.stage:
            text = f"[{self.stage}] {text}"
        return text


class InputNotFound(GovtexError):
    """Raised when an input document does not exist."""


class InvalidExtension(GovtexError):
    """Raised when an input document does not carry the expected suffix."""


class DiffGenerationFailed(GovtexError):
    """Raised when latexdiff produced no output at all."""


class MarkerNotFound(GovtexError):
    """Raised when the diff output has no end-of-preamble marker to inject before."""


class CompilationFailed(GovtexError):
    """Raised when the expected PDF is absent after compilation."""

    def __init__(self, message: str, *, log_path: Optional[Path] = None, **kwargs) -> None:
        super().__init__(message, **kwargs)
        self.log_path = log_path


class ToolNotFound(GovtexError):
    """Raised when a required external binary is missing from PATH."""

    def __init__(self, tool: str, hint: str = "") -> None:
        message = f"{tool} not found"
        if hint:
            message = f"{message}. {hint}"
        super().__init__(message)
        self.tool = tool


class ToolTimeout(GovtexError):
    """Raised when an external tool exceeds its time budget."""

    def __init__(self, tool: str, timeout: float, **kwargs) -> None:
        super().__init__(f"{tool} did not finish within {timeout:g}s", **kwargs)
        self.tool = tool
        self.timeout = timeout


class BuildFailed(GovtexError):
    """Raised when latexmk fails on one of the repository documents."""


class FormatFailed(GovtexError):
    """Raised when latexindent fails on a file."""


class InvalidOutput(GovtexError):
    """Raised when the output name does not denote a file."""
