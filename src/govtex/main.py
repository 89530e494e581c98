"""Command line entry points: ``govtex`` and ``latex-diff``."""
from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from govtex.config import Settings, load_runtime_config
from govtex.core.documents import build_all, collect_pdfs, format_documents
from govtex.core.logging_setup import configure_logging, get_logger
from govtex.core.pipeline import DiffPipeline, DiffRequest
from govtex.core.state import DiffReport
from govtex.core.compiler import COMPILE_LOG_NAME
from govtex.core.difftool import DIFF_LOG_NAME
from govtex.exceptions import GovtexError

logger = get_logger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_INTERRUPTED = 130

DIFF_EPILOG = """\
examples:
  latex-diff documents/bylaws/main.tex documents/bylaws-v2/main.tex
  latex-diff old.tex new.tex --output /tmp/my-diff
  latex-diff old.tex new.tex --keep-temp
  latex-diff old.tex new.tex --no-pdf
"""


def _add_common_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--repo-root", type=Path, default=None, help="Repository root (default: current directory)")
    parser.add_argument("--log-level", default=None, help="Log level (default: INFO)")
    parser.add_argument("--log-format", choices=["console", "json"], default=None, help="Log renderer")


def _add_diff_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("old", type=Path, metavar="OLD.tex", help="Old version of the document")
    parser.add_argument("new", type=Path, metavar="NEW.tex", help="New version of the document")
    parser.add_argument(
        "-o",
        "--output",
        default=None,
        metavar="NAME",
        help="Output basename (default: diff); relative names are placed under build/",
    )
    parser.add_argument("--keep-temp", action="store_true", help="Keep temporary files for debugging")
    parser.add_argument("--no-pdf", action="store_true", help="Generate only the .tex file, skip PDF compilation")


def build_diff_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="latex-diff",
        description="Generate a diff PDF between two LaTeX documents: deleted text in red strikethrough, added text in green.",
        epilog=DIFF_EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    _add_diff_arguments(parser)
    _add_common_options(parser)
    parser.set_defaults(command="diff")
    return parser


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="govtex", description="Build, format, diff and collect governance documents.")
    subparsers = parser.add_subparsers(dest="command", required=True)

    diff = subparsers.add_parser(
        "diff",
        help="Generate a colorized diff of two documents",
        epilog=DIFF_EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    _add_diff_arguments(diff)
    _add_common_options(diff)

    for name, help_text in (
        ("build", "Build every document under documents/"),
        ("format", "Format every .tex file under documents/ with latexindent"),
        ("collect", "Collect built PDFs into pdf/ under their titles"),
    ):
        _add_common_options(subparsers.add_parser(name, help=help_text))
    return parser


def settings_from_args(args: argparse.Namespace, base: Optional[Settings] = None) -> Settings:
    settings = base or Settings()
    updates: Dict[str, Any] = {}
    if args.repo_root is not None:
        updates["repo_root"] = args.repo_root
    if args.log_level:
        updates["log_level"] = args.log_level
    if args.log_format:
        updates["log_format"] = args.log_format
    return settings.model_copy(update=updates) if updates else settings


def print_diff_summary(report: DiffReport, compile_pdf: bool) -> None:
    print()
    print("=== Diff generation complete ===")
    print("Output files:")
    print(f"  LaTeX: {report.tex_path}")
    if compile_pdf:
        print(f"  PDF:   {report.pdf_path}")
    if report.workspace_retained:
        print()
        print(f"Temporary files kept at: {report.workspace}")
        print(f"  {DIFF_LOG_NAME} - latexdiff output")
        if compile_pdf:
            print(f"  {COMPILE_LOG_NAME}   - PDF compilation output")


def _run_command(args: argparse.Namespace, settings: Settings) -> int:
    if args.command == "diff":
        request = DiffRequest(
            old=args.old,
            new=args.new,
            output=args.output,
            keep_temp=args.keep_temp,
            compile_pdf=not args.no_pdf,
        )
        report = DiffPipeline(settings).run(request)
        print_diff_summary(report, request.compile_pdf)
    elif args.command == "build":
        build_all(settings)
        print("All documents built successfully")
    elif args.command == "format":
        format_documents(settings)
        print("Formatting complete")
    elif args.command == "collect":
        repo_root = settings.resolve_repo_root()
        result = collect_pdfs(settings, load_runtime_config(repo_root), repo_root)
        for path in result.copied:
            print(f"  {path}")
        print(f"PDFs collected in {settings.pdf_dir}/")
    return EXIT_OK


def _describe_validation_error(exc: ValidationError) -> str:
    problems = []
    for error in exc.errors():
        field_name = ".".join(str(part) for part in error.get("loc", ()))
        problems.append(f"GOVTEX_{field_name.upper()}: {error.get('msg')}")
    return "; ".join(problems) or str(exc)


def _dispatch(parser: argparse.ArgumentParser, argv: Optional[List[str]]) -> int:
    args = parser.parse_args(argv)
    try:
        settings = settings_from_args(args)
    except ValidationError as exc:
        print(f"Error: invalid configuration: {_describe_validation_error(exc)}", file=sys.stderr)
        return EXIT_FAILURE
    configure_logging(settings.log_level, json_logs=settings.log_format == "json")
    try:
        return _run_command(args, settings)
    except GovtexError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return EXIT_FAILURE
    except KeyboardInterrupt:
        print("Interrupted", file=sys.stderr)
        return EXIT_INTERRUPTED


def main(argv: Optional[List[str]] = None) -> int:
    return _dispatch(build_parser(), argv)


def latex_diff_main(argv: Optional[List[str]] = None) -> int:
    return _dispatch(build_diff_parser(), argv)


if __name__ == "__main__":
    sys.exit(main())
