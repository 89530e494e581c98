"""
Scanning of latexmk/TeX output for error lines.

latexmk is run with ``-f`` so a PDF may exist even though TeX reported
errors; the findings here are surfaced as warnings.
"""
import re
from dataclasses import dataclass
from pathlib import Path
from typing import List


@dataclass
class LatexError:
    line: int
    message: str
    error_type: str  # latex_error, fatal, file_line_error


class LogParser:
    ERROR_PATTERNS = [
        (re.compile(r"Fatal error"), "fatal"),
        (re.compile(r"LaTeX Error"), "latex_error"),
        # -file-line-error style: ./file.tex:12: message
        (re.compile(r"^[^:\s]+\.tex:(\d+): "), "file_line_error"),
    ]

    def parse_text(self, content: str) -> List[LatexError]:
        errors = []
        for line in content.splitlines():
            for pattern, error_type in self.ERROR_PATTERNS:
                m = pattern.search(line)
                if m:
                    line_num = int(m.group(1)) if m.groups() else -1
                    errors.append(LatexError(line=line_num, message=line.strip(), error_type=error_type))
                    break
        return errors

    def parse(self, log_path: Path) -> List[LatexError]:
        if not log_path.exists():
            return []
        return self.parse_text(log_path.read_text(errors="replace"))


def latex_errors(log_path: Path) -> List[LatexError]:
    """Entries mentioning a ``LaTeX Error`` or ``Fatal error``."""
    return [err for err in LogParser().parse(log_path) if err.error_type in ("latex_error", "fatal")]
