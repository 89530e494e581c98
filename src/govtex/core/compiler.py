import shutil
from pathlib import Path
from typing import List

from govtex.config import Settings
from govtex.core.latex_log_parser import latex_errors
from govtex.core.logging_setup import get_logger
from govtex.core.process import run_tool
from govtex.core.state import StageOutcome
from govtex.exceptions import CompilationFailed

logger = get_logger(__name__)

STAGE = "compiling"
COMPILE_LOG_NAME = "compile.log"
COMPILE_DIR_NAME = "compile"


class LatexCompiler:
    def __init__(self, settings: Settings):
        """
        Initialize the compiler.
        Args:
            settings: supplies the latexmk binary, engine, timeout and strictness.
        """
        self.settings = settings

    def command(self, tex_file: Path, output_dir: Path) -> List[str]:
        return [
            self.settings.latexmk_bin,
            f"-{self.settings.latex_engine}",
            "-f",
            "-synctex=1",
            "-interaction=nonstopmode",
            "-file-line-error",
            f"-output-directory={output_dir}",
            str(tex_file),
        ]

    def compile(self, source: Path, workspace: Path, output_name: str, cwd: Path) -> StageOutcome:
        """
        Compile the rewritten diff.
        Args:
            source: The rewritten LaTeX file.
            workspace: Run workspace; the job runs in its ``compile/`` subdirectory
                so TeX outputs never clobber the diff intermediates or logs.
            output_name: Base name of the job, so the PDF is ``<output_name>.pdf``.
            cwd: Working directory for latexmk; the repository root.
        Returns:
            StageOutcome whose output_path is the PDF inside ``workspace/compile``.
        """
        job_dir = workspace / COMPILE_DIR_NAME
        job_dir.mkdir(exist_ok=True)
        tex_file = job_dir / f"{output_name}{self.settings.source_suffix}"
        shutil.copyfile(source, tex_file)
        pdf_file = job_dir / f"{output_name}{self.settings.render_suffix}"
        log_path = workspace / COMPILE_LOG_NAME

        logger.info("compilation_started", source=str(tex_file), engine=self.settings.latex_engine)
        result = run_tool(
            self.command(tex_file, job_dir),
            cwd=cwd,
            timeout=self.settings.compile_timeout,
            stdout_path=log_path,
            merge_stderr=True,
        )

        if not pdf_file.exists():
            raise CompilationFailed(
                f"PDF file was not generated. Check {log_path} for details",
                stage=STAGE,
                path=pdf_file,
                log_path=log_path,
            )

        warnings = []
        errors = latex_errors(log_path)
        if not result.succeeded:
            warnings.append(f"latexmk exited with status {result.returncode}")
        if errors:
            warnings.append(f"PDF was generated but compilation had errors. Check {log_path} for details")
            for err in errors[:5]:
                logger.warning("latex_error", message=err.message)

        if self.settings.strict_compile and not result.succeeded and errors:
            raise CompilationFailed(
                "PDF was generated but latexmk reported errors (strict mode)",
                stage=STAGE,
                path=log_path,
                log_path=log_path,
            )

        for message in warnings:
            logger.warning("compilation_warning", detail=message)
        return StageOutcome(succeeded=True, warnings=warnings, output_path=pdf_file, log_path=log_path)
