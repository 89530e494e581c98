"""
Diff pipeline orchestrator.

``DiffPipeline`` runs resolve → diff → rewrite → (compile) → publish inside a
scoped workspace. Each stage receives the settings and working directory
explicitly; the process working directory is never changed.
"""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from govtex.config import Settings
from govtex.core.compiler import LatexCompiler
from govtex.core.difftool import generate_diff
from govtex.core.inputs import resolve_inputs
from govtex.core.logging_setup import get_logger, log_context
from govtex.core.process import require_tool
from govtex.core.publisher import publish, resolve_output_target
from govtex.core.rewriter import RewriteRules, rewrite_file
from govtex.core.state import DiffReport, PipelineStage
from govtex.core.workspace import scoped_workspace
from govtex.exceptions import GovtexError

logger = get_logger(__name__)

WARNINGS_LOG_NAME = "warnings.log"


@dataclass(frozen=True)
class DiffRequest:
    old: Union[str, Path]
    new: Union[str, Path]
    output: Optional[str] = None
    keep_temp: bool = False
    compile_pdf: bool = True


class DiffPipeline:
    """Produce a colorized latexdiff of two documents, optionally compiled."""

    def __init__(self, settings: Settings) -> None:
        self._settings = settings
        self._repo_root = settings.resolve_repo_root()
        self._compiler = LatexCompiler(settings)

    @property
    def repo_root(self) -> Path:
        return self._repo_root

    def check_prerequisites(self, compile_pdf: bool) -> None:
        logger.info("checking_prerequisites")
        require_tool(self._settings.latexdiff_bin)
        if compile_pdf:
            require_tool(self._settings.latexmk_bin)

    def run(self, request: DiffRequest) -> DiffReport:
        report = DiffReport()
        try:
            with log_context(old=request.old, new=request.new, output=request.output):
                self._run(request, report)
        except GovtexError as exc:
            failed_stage = report.stage
            if exc.stage is None:
                exc.stage = failed_stage.value
            report.stage = PipelineStage.FAILED
            report.failure = str(exc)
            logger.error("pipeline_failed", stage=failed_stage.value, error=str(exc))
            raise
        return report

    def _run(self, request: DiffRequest, report: DiffReport) -> None:
        settings = self._settings
        self.check_prerequisites(request.compile_pdf)

        report.stage = PipelineStage.RESOLVING
        old, new = resolve_inputs(request.old, request.new, settings.source_suffix)
        report.old_path, report.new_path = old.path, new.path
        target = resolve_output_target(
            request.output or settings.default_output, self._repo_root, settings.build_dir
        )

        with scoped_workspace(keep=request.keep_temp) as workspace:
            report.workspace = workspace
            report.workspace_retained = request.keep_temp
            try:
                report.stage = PipelineStage.DIFFING
                diff = generate_diff(old, new, workspace, settings, cwd=self._repo_root)
                report.add_warnings(diff.warnings)

                report.stage = PipelineStage.REWRITING
                logger.info("customizing_diff_markup")
                rules = RewriteRules.for_repo(self._repo_root, settings)
                rewritten = rewrite_file(diff.output_path, rules)
                logger.info("diff_file_generated", path=str(rewritten))

                rendered = None
                if request.compile_pdf:
                    report.stage = PipelineStage.COMPILING
                    compiled = self._compiler.compile(
                        rewritten, workspace, target.name, cwd=self._repo_root
                    )
                    report.add_warnings(compiled.warnings)
                    rendered = compiled.output_path

                report.stage = PipelineStage.PUBLISHING
                published = publish(
                    rewritten,
                    target,
                    rendered=rendered,
                    source_suffix=settings.source_suffix,
                    render_suffix=settings.render_suffix,
                )
                report.tex_path = published.source
                report.pdf_path = published.rendered
                report.stage = PipelineStage.DONE
            finally:
                if report.warnings:
                    (workspace / WARNINGS_LOG_NAME).write_text(
                        "\n".join(report.warnings) + "\n", encoding="utf-8"
                    )


def run_diff(settings: Settings, request: DiffRequest) -> DiffReport:
    return DiffPipeline(settings).run(request)
