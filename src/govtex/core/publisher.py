from __future__ import annotations

import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from govtex.core.logging_setup import get_logger
from govtex.exceptions import InvalidOutput

logger = get_logger(__name__)


@dataclass(frozen=True)
class OutputTarget:
    directory: Path
    name: str

    def path_for(self, suffix: str) -> Path:
        return self.directory / f"{self.name}{suffix}"


@dataclass(frozen=True)
class PublishedArtifacts:
    source: Path
    rendered: Optional[Path] = None


def resolve_output_target(output: str, repo_root: Path, build_dir: str = "build") -> OutputTarget:
    """Absolute outputs are used as given; relative ones land under the build directory."""
    candidate = Path(output).expanduser()
    if candidate.name in ("", ".", ".."):
        raise InvalidOutput("Output must name a file, not a directory", path=output)
    if not candidate.is_absolute():
        candidate = repo_root / build_dir / candidate
    return OutputTarget(directory=candidate.parent, name=candidate.name)


def _copy(source: Path, destination: Path) -> Path:
    if destination.exists():
        logger.info("overwriting_output", path=str(destination))
    shutil.copyfile(source, destination)
    return destination


def publish(
    source: Path,
    target: OutputTarget,
    *,
    rendered: Optional[Path] = None,
    source_suffix: str = ".tex",
    render_suffix: str = ".pdf",
) -> PublishedArtifacts:
    target.directory.mkdir(parents=True, exist_ok=True)
    tex_path = _copy(source, target.path_for(source_suffix))
    logger.info("saved_diff_source", path=str(tex_path))

    pdf_path = None
    if rendered is not None:
        pdf_path = _copy(rendered, target.path_for(render_suffix))
        logger.info("saved_diff_pdf", path=str(pdf_path))
    return PublishedArtifacts(source=tex_path, rendered=pdf_path)
