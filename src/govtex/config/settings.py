from __future__ import annotations

from pathlib import Path
from typing import Literal, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


LatexEngineChoice = Literal["xelatex", "pdf", "lualatex"]
LogFormatChoice = Literal["console", "json"]


class Settings(BaseSettings):
    """Environment-driven configuration for the document tooling.

    Values are read from environment variables with prefix ``GOVTEX_`` and
    optionally from a local ``.env`` file. The CLI overrides individual
    fields with ``model_copy(update=...)`` and hands the result to each stage.
    """

    model_config = SettingsConfigDict(
        env_prefix="GOVTEX_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # --- Repository Layout ---
    repo_root: Optional[Path] = Field(
        None,
        description="Repository root; the current directory when unset.",
    )
    documents_dir: str = Field(
        "documents",
        description="Directory holding one sub-directory per document.",
    )
    build_dir: str = Field(
        "build",
        description="Directory for build products and relative diff outputs.",
    )
    pdf_dir: str = Field(
        "pdf",
        description="Destination of collected, titled PDFs.",
    )
    shared_dir: str = Field(
        "shared",
        description="Directory of shared styles referenced by documents.",
    )
    shared_relative_prefix: str = Field(
        "../../",
        description="Relative prefix documents use to reach the shared directory.",
    )

    # --- Suffixes ---
    source_suffix: str = Field(".tex", description="Expected source document suffix.")
    render_suffix: str = Field(".pdf", description="Suffix of rendered artifacts.")
    default_output: str = Field("diff", description="Default diff output base name.")

    # --- External Tools ---
    latexdiff_bin: str = Field("latexdiff", description="latexdiff executable.")
    latexdiff_type: str = Field("UNDERLINE", description="latexdiff markup type.")
    latexdiff_encoding: str = Field("utf8", description="latexdiff input encoding.")
    latexmk_bin: str = Field("latexmk", description="latexmk executable.")
    latex_engine: LatexEngineChoice = Field(
        "xelatex",
        description="latexmk engine switch (-xelatex, -pdf, -lualatex).",
    )
    latexindent_bin: str = Field("latexindent", description="latexindent executable.")
    format_config: Path = Field(
        Path("utilities/format.yaml"),
        description="latexindent local settings file, relative to the repository root.",
    )

    # --- Timeouts (seconds) ---
    diff_timeout: float = Field(300.0, description="latexdiff time budget.")
    compile_timeout: float = Field(600.0, description="Diff PDF compilation time budget.")
    build_timeout: float = Field(900.0, description="Per-document build time budget.")
    format_timeout: float = Field(120.0, description="Per-file latexindent time budget.")

    # --- Diff Presentation ---
    addition_color: str = Field("green!70!black", description="xcolor expression for added text.")
    deletion_color: str = Field("red", description="xcolor expression for deleted text.")

    # --- Compilation Policy ---
    strict_compile: bool = Field(
        False,
        description="Fail when latexmk exits non-zero with errors even if a PDF exists.",
    )

    # --- Logging ---
    log_level: str = Field("INFO", description="Root log level.")
    log_format: LogFormatChoice = Field("console", description="Log renderer.")

    @field_validator("source_suffix", "render_suffix", mode="before")
    @classmethod
    def dotted_suffix(cls, value: object) -> str:
        text = str(value)
        return text if text.startswith(".") else f".{text}"

    @field_validator("diff_timeout", "compile_timeout", "build_timeout", "format_timeout")
    @classmethod
    def positive_timeout(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("timeouts must be positive")
        return value

    def resolve_repo_root(self) -> Path:
        """Return the absolute repository root."""
        return (self.repo_root or Path.cwd()).resolve()


__all__ = [
    "Settings",
    "LatexEngineChoice",
    "LogFormatChoice",
]
