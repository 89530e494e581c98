from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, Field


class PipelineStage(str, Enum):
    RESOLVING = "resolving"
    DIFFING = "diffing"
    REWRITING = "rewriting"
    COMPILING = "compiling"
    PUBLISHING = "publishing"
    DONE = "done"
    FAILED = "failed"


@dataclass
class StageOutcome:
    """Result of a stage that shells out to an external tool.

    ``succeeded`` is decided by the presence of ``output_path``; the tool's
    exit status only ever contributes ``warnings``.
    """

    succeeded: bool
    warnings: List[str] = field(default_factory=list)
    output_path: Optional[Path] = None
    log_path: Optional[Path] = None


class DiffReport(BaseModel):
    """
    Everything a caller needs after a diff run.
    """

    stage: PipelineStage = PipelineStage.RESOLVING
    old_path: Optional[Path] = None
    new_path: Optional[Path] = None
    tex_path: Optional[Path] = None
    pdf_path: Optional[Path] = None
    workspace: Optional[Path] = None
    workspace_retained: bool = False
    warnings: List[str] = Field(default_factory=list)
    failure: Optional[str] = None

    def add_warnings(self, messages: List[str]) -> None:
        self.warnings.extend(messages)
