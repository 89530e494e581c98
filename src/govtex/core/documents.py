"""Repository-wide document tasks: build, format and collect PDFs."""
from __future__ import annotations

import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from govtex.config import RuntimeConfig, Settings
from govtex.core.logging_setup import get_logger
from govtex.core.process import run_tool
from govtex.exceptions import BuildFailed, FormatFailed

logger = get_logger(__name__)

MAIN_DOCUMENT = "main.tex"
MAIN_PDF = "main.pdf"


def discover_documents(repo_root: Path, documents_dir: str = "documents") -> List[Path]:
    """Document directories (``documents/<name>/``) that contain a ``main.tex``."""
    base = repo_root / documents_dir
    if not base.is_dir():
        return []
    return sorted(child for child in base.iterdir() if child.is_dir() and (child / MAIN_DOCUMENT).is_file())


def build_all(settings: Settings, repo_root: Optional[Path] = None) -> List[Path]:
    """Compile every document with latexmk, stopping at the first failure."""
    repo_root = repo_root or settings.resolve_repo_root()
    aux_dir = repo_root / settings.build_dir
    built = []
    for doc_dir in discover_documents(repo_root, settings.documents_dir):
        logger.info("building_document", document=doc_dir.name)
        log_path = aux_dir / f"{doc_dir.name}.build.log"
        aux_dir.mkdir(parents=True, exist_ok=True)
        result = run_tool(
            [
                settings.latexmk_bin,
                f"-{settings.latex_engine}",
                "-synctex=1",
                "-interaction=nonstopmode",
                "-file-line-error",
                f"--aux-directory={aux_dir}",
                MAIN_DOCUMENT,
            ],
            cwd=doc_dir,
            timeout=settings.build_timeout,
            stdout_path=log_path,
            merge_stderr=True,
        )
        if not result.succeeded:
            raise BuildFailed(
                f"latexmk failed for {doc_dir.name} (exit {result.returncode}); see {log_path}",
                stage="building",
                path=doc_dir / MAIN_DOCUMENT,
            )
        logger.info("document_built", document=doc_dir.name)
        built.append(doc_dir / MAIN_DOCUMENT)
    logger.info("all_documents_built", count=len(built))
    return built


def format_documents(settings: Settings, repo_root: Optional[Path] = None) -> List[Path]:
    """Run latexindent in place over every ``.tex`` file under the documents directory."""
    repo_root = repo_root or settings.resolve_repo_root()
    base = repo_root / settings.documents_dir
    files = sorted(path for path in base.rglob(f"*{settings.source_suffix}") if path.is_file()) if base.is_dir() else []
    config_path = repo_root / settings.format_config
    cache_dir = repo_root / settings.build_dir
    cache_dir.mkdir(parents=True, exist_ok=True)

    failures = []
    for tex_file in files:
        result = run_tool(
            [
                settings.latexindent_bin,
                "-s",
                "-w",
                "-l",
                str(config_path),
                f"-c={cache_dir}/",
                "-m",
                str(tex_file),
            ],
            cwd=repo_root,
            timeout=settings.format_timeout,
        )
        if not result.succeeded:
            logger.warning("format_failed", path=str(tex_file), returncode=result.returncode)
            failures.append(tex_file)
            continue
        logger.debug("formatted", path=str(tex_file))

    logger.info("formatting_complete", files=len(files), failed=len(failures))
    if failures:
        listing = ", ".join(str(path.relative_to(repo_root)) for path in failures)
        raise FormatFailed(
            f"latexindent failed on {len(failures)} of {len(files)} files ({listing})",
            stage="formatting",
            path=failures[0],
        )
    return files


@dataclass
class CollectionResult:
    copied: List[Path] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)


def collect_pdfs(
    settings: Settings,
    runtime: RuntimeConfig,
    repo_root: Optional[Path] = None,
) -> CollectionResult:
    """Copy each ``documents/<name>/main.pdf`` to ``pdf/<title>.pdf``."""
    repo_root = repo_root or settings.resolve_repo_root()
    destination = repo_root / settings.pdf_dir
    destination.mkdir(parents=True, exist_ok=True)
    result = CollectionResult()

    base = repo_root / settings.documents_dir
    doc_dirs = sorted(child for child in base.iterdir() if child.is_dir()) if base.is_dir() else []
    for doc_dir in doc_dirs:
        pdf = doc_dir / MAIN_PDF
        if not pdf.is_file():
            continue
        title = runtime.title_for(doc_dir.name)
        if not title:
            logger.warning("no_title_mapping", document=doc_dir.name)
            result.skipped.append(doc_dir.name)
            continue
        target = destination / f"{title}{settings.render_suffix}"
        shutil.copyfile(pdf, target)
        logger.info("pdf_collected", source=f"{doc_dir.name}/{MAIN_PDF}", target=str(target))
        result.copied.append(target)
    return result
