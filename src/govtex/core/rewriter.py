"""
Post-processing of latexdiff output.

The rewrite is three pure text passes applied in a fixed order:

1. command normalization: ``\\DIFaddtex``/``\\DIFdeltex`` become
   ``\\DIFadd``/``\\DIFdel`` so later passes target one name per concept;
2. presentation injection: color and strikethrough redefinitions are placed
   directly above latexdiff's end-of-preamble marker;
3. path normalization: ``../../shared/`` references become absolute paths
   under the repository root, so the result compiles from any directory.

Path rewriting must run last; it operates on the final command names.
"""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import List, Tuple

from govtex.config import Settings
from govtex.exceptions import MarkerNotFound

STAGE = "rewriting"
MARKER_PREFIX = "%DIF END PREAMBLE"
INJECTION_HEADER = "% Custom diff color overrides"
REWRITTEN_DIFF_NAME = "diff.tex"

COMMAND_RENAMES: Tuple[Tuple[str, str], ...] = (
    ("\\DIFaddtex{", "\\DIFadd{"),
    ("\\DIFdeltex{", "\\DIFdel{"),
)


def presentation_block(addition_color: str, deletion_color: str) -> Tuple[str, ...]:
    add = f"\\protect\\color{{{addition_color}}}"
    delete = f"\\protect\\color{{{deletion_color}}}"
    return (
        INJECTION_HEADER,
        f"\\renewcommand{{\\DIFadd}}[1]{{{{{add}#1}}}}",
        f"\\renewcommand{{\\DIFdel}}[1]{{{{{delete}\\sout{{#1}}}}}}",
        f"\\renewcommand{{\\DIFaddbegin}}{{{add}}}",
        "\\renewcommand{\\DIFaddend}{\\protect\\color{black}}",
        f"\\renewcommand{{\\DIFdelbegin}}{{{delete}}}",
        "\\renewcommand{\\DIFdelend}{\\protect\\color{black}}",
        f"\\renewcommand{{\\DIFaddFL}}[1]{{{{{add}#1}}}}",
        f"\\renewcommand{{\\DIFdelFL}}[1]{{{{{delete}\\sout{{#1}}}}}}",
    )


@dataclass(frozen=True)
class RewriteRules:
    command_renames: Tuple[Tuple[str, str], ...]
    marker_prefix: str
    injected_lines: Tuple[str, ...]
    shared_pattern: str
    shared_replacement: str

    @classmethod
    def for_repo(cls, repo_root: Path, settings: Settings) -> "RewriteRules":
        shared = settings.shared_dir.strip("/")
        return cls(
            command_renames=COMMAND_RENAMES,
            marker_prefix=MARKER_PREFIX,
            injected_lines=presentation_block(settings.addition_color, settings.deletion_color),
            shared_pattern=f"{settings.shared_relative_prefix}{shared}/",
            shared_replacement=f"{repo_root.as_posix().rstrip('/')}/{shared}/",
        )


def normalize_commands(text: str, renames: Tuple[Tuple[str, str], ...] = COMMAND_RENAMES) -> str:
    for old, new in renames:
        text = text.replace(old, new)
    return text


def find_marker(lines: List[str], marker_prefix: str = MARKER_PREFIX) -> int:
    """Index of the first line whose stripped text starts with ``marker_prefix``."""
    for index, line in enumerate(lines):
        if line.strip().startswith(marker_prefix):
            return index
    raise MarkerNotFound(f"No '{marker_prefix}' line in diff output", stage=STAGE)


def inject_presentation(text: str, rules: RewriteRules) -> str:
    lines = text.splitlines(keepends=True)
    marker = find_marker(lines, rules.marker_prefix)

    block = list(rules.injected_lines)
    start = marker - len(block)
    # Already injected: the exact block sits right above the marker.
    if start >= 0 and [line.rstrip("\r\n") for line in lines[start:marker]] == block:
        return text

    newline = "\r\n" if lines[marker].endswith("\r\n") else "\n"
    lines[marker:marker] = [line + newline for line in block]
    return "".join(lines)


def normalize_paths(text: str, pattern: str, replacement: str) -> str:
    return text.replace(pattern, replacement)


def rewrite(text: str, rules: RewriteRules) -> str:
    text = normalize_commands(text, rules.command_renames)
    text = inject_presentation(text, rules)
    return normalize_paths(text, rules.shared_pattern, rules.shared_replacement)


def rewrite_file(raw_path: Path, rules: RewriteRules, destination: Path | None = None) -> Path:
    """Rewrite the latexdiff output at ``raw_path`` into ``destination``."""
    destination = destination or raw_path.with_name(REWRITTEN_DIFF_NAME)
    text = raw_path.read_text(encoding="utf-8", errors="surrogateescape")
    try:
        rewritten = rewrite(text, rules)
    except MarkerNotFound as exc:
        exc.path = raw_path
        raise
    destination.write_text(rewritten, encoding="utf-8", errors="surrogateescape")
    return destination
