"""latexdiff invocation."""
from __future__ import annotations

from pathlib import Path

from govtex.config import Settings
from govtex.core.inputs import DocumentReference
from govtex.core.logging_setup import get_logger
from govtex.core.process import run_tool
from govtex.core.state import StageOutcome
from govtex.exceptions import DiffGenerationFailed

logger = get_logger(__name__)

STAGE = "diffing"
RAW_DIFF_NAME = "diff-raw.tex"
DIFF_LOG_NAME = "latexdiff.log"


def build_latexdiff_command(old: DocumentReference, new: DocumentReference, settings: Settings) -> list[str]:
    return [
        settings.latexdiff_bin,
        "--flatten",
        f"--type={settings.latexdiff_type}",
        f"--encoding={settings.latexdiff_encoding}",
        str(old.path),
        str(new.path),
    ]


def generate_diff(
    old: DocumentReference,
    new: DocumentReference,
    workspace: Path,
    settings: Settings,
    cwd: Path,
) -> StageOutcome:
    """Run latexdiff and leave its merged document in ``workspace``.

    ``--flatten`` inlines ``\\input``/``\\include`` before diffing, so the
    result is a single self-contained document.
    """
    raw_path = workspace / RAW_DIFF_NAME
    log_path = workspace / DIFF_LOG_NAME

    logger.info("latexdiff_started", old=str(old.path), new=str(new.path))
    result = run_tool(
        build_latexdiff_command(old, new, settings),
        cwd=cwd,
        timeout=settings.diff_timeout,
        stdout_path=raw_path,
        stderr_path=log_path,
    )

    if not raw_path.exists() or raw_path.stat().st_size == 0:
        raise DiffGenerationFailed(
            f"latexdiff produced no output (exit {result.returncode}); see {log_path}",
            stage=STAGE,
            path=raw_path,
        )

    outcome = StageOutcome(succeeded=True, output_path=raw_path, log_path=log_path)
    if not result.succeeded:
        message = f"latexdiff completed with warnings (exit {result.returncode}). Check {log_path}"
        outcome.warnings.append(message)
        logger.warning("latexdiff_warnings", returncode=result.returncode, log=str(log_path))
    return outcome
