"""Blocking subprocess wrapper shared by every external tool invocation."""
from __future__ import annotations

import shutil
import subprocess
import time
from contextlib import ExitStack
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence

from govtex.core.logging_setup import get_logger
from govtex.exceptions import ToolNotFound, ToolTimeout

logger = get_logger(__name__)

INSTALL_HINT = "Please install it (e.g., via TeX Live or MacTeX)"


@dataclass(frozen=True)
class ToolResult:
    command: List[str]
    returncode: int
    duration: float
    stdout_path: Optional[Path] = None
    stderr_path: Optional[Path] = None

    @property
    def succeeded(self) -> bool:
        return self.returncode == 0


def require_tool(name: str) -> str:
    """Return the absolute path of ``name`` on PATH or raise ``ToolNotFound``."""
    located = shutil.which(name)
    if located is None:
        raise ToolNotFound(name, INSTALL_HINT)
    return located


def run_tool(
    command: Sequence[str],
    *,
    cwd: Path,
    timeout: float,
    stdout_path: Optional[Path] = None,
    stderr_path: Optional[Path] = None,
    merge_stderr: bool = False,
) -> ToolResult:
    """Run ``command`` in ``cwd`` and wait for it.

    Args:
        command: Program and arguments; the program is looked up on PATH.
        cwd: Working directory for the child. The parent never changes its own.
        timeout: Seconds before the child is killed and ``ToolTimeout`` raised.
        stdout_path: File receiving the child's stdout (discarded when None).
        stderr_path: File receiving the child's stderr (discarded when None).
        merge_stderr: Send stderr into ``stdout_path`` instead.

    Returns:
        ToolResult with the exit status. A non-zero exit is not an error here;
        callers decide by looking at the artifacts the tool should have written.
    """
    cmd = [str(part) for part in command]
    require_tool(cmd[0])

    logger.debug("tool_started", command=cmd, cwd=str(cwd))
    started = time.monotonic()
    with ExitStack() as stack:
        stdout = (
            stack.enter_context(open(stdout_path, "wb")) if stdout_path else subprocess.DEVNULL
        )
        if merge_stderr:
            stderr = subprocess.STDOUT
        elif stderr_path:
            stderr = stack.enter_context(open(stderr_path, "wb"))
        else:
            stderr = subprocess.DEVNULL
        try:
            completed = subprocess.run(
                cmd,
                cwd=str(cwd),
                stdin=subprocess.DEVNULL,
                stdout=stdout,
                stderr=stderr,
                check=False,
                timeout=timeout,
            )
        except subprocess.TimeoutExpired as exc:
            raise ToolTimeout(Path(cmd[0]).name, timeout) from exc
        except FileNotFoundError as exc:
            raise ToolNotFound(cmd[0], INSTALL_HINT) from exc

    duration = time.monotonic() - started
    logger.debug("tool_finished", command=cmd[0], returncode=completed.returncode, seconds=round(duration, 2))
    return ToolResult(
        command=cmd,
        returncode=completed.returncode,
        duration=duration,
        stdout_path=stdout_path,
        stderr_path=stdout_path if merge_stderr else stderr_path,
    )


__all__ = ["ToolResult", "require_tool", "run_tool"]
