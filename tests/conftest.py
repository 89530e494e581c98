from pathlib import Path

import pytest

from govtex.config import Settings
from govtex.core import compiler, difftool, documents, pipeline
from govtex.core.process import ToolResult

LATEXDIFF_OUTPUT = (
    "\\documentclass{article}\n"
    "\\usepackage{../../shared/styles/governance}\n"
    "%DIF LATEXDIFF DIFFERENCE FILE\n"
    "%DIF PREAMBLE EXTENSION ADDED BY LATEXDIFF\n"
    "%DIF UNDERLINE PREAMBLE %DIF PREAMBLE\n"
    "\\RequirePackage[normalem]{ulem} %DIF PREAMBLE\n"
    "\\providecommand{\\DIFaddtex}[1]{{\\protect\\color{blue}\\uwave{#1}}} %DIF PREAMBLE\n"
    "\\providecommand{\\DIFdeltex}[1]{{\\protect\\color{red}\\sout{#1}}} %DIF PREAMBLE\n"
    "%DIF END PREAMBLE EXTENSION ADDED BY LATEXDIFF\n"
    "\\begin{document}\n"
    "Hello world. \\DIFaddbegin \\DIFaddtex{Second sentence.}\\DIFaddend\n"
    "\\input{../../shared/sections/footer}\n"
    "\\end{document}\n"
)


@pytest.fixture
def repo(tmp_path):
    root = tmp_path / "repo"
    (root / "shared" / "styles").mkdir(parents=True)
    old = root / "documents" / "bylaws" / "main.tex"
    new = root / "documents" / "bylaws-v2" / "main.tex"
    old.parent.mkdir(parents=True)
    new.parent.mkdir(parents=True)
    old.write_text("\\documentclass{article}\n\\begin{document}\nHello world.\n\\end{document}\n", encoding="utf-8")
    new.write_text(
        "\\documentclass{article}\n\\begin{document}\nHello world. Second sentence.\n\\end{document}\n",
        encoding="utf-8",
    )
    return root


@pytest.fixture
def settings(repo):
    return Settings(repo_root=repo, _env_file=None)


class FakeTools:
    """Stand-in for latexdiff/latexmk that writes what the real tools would."""

    def __init__(self):
        self.calls = []
        self.diff_output = LATEXDIFF_OUTPUT
        self.diff_returncode = 0
        self.compile_returncode = 0
        self.produce_pdf = True
        self.compile_log = "Output written on diff.pdf (1 page).\n"

    def latexdiff(self, command, *, cwd, timeout, stdout_path=None, stderr_path=None, merge_stderr=False):
        self.calls.append(("latexdiff", list(command), Path(cwd)))
        stdout_path.write_text(self.diff_output, encoding="utf-8")
        stderr_path.write_text("", encoding="utf-8")
        return ToolResult(list(command), self.diff_returncode, 0.0, stdout_path, stderr_path)

    def latexmk(self, command, *, cwd, timeout, stdout_path=None, stderr_path=None, merge_stderr=False):
        self.calls.append(("latexmk", list(command), Path(cwd)))
        tex_file = Path(command[-1])
        output_dir = Path(next(arg for arg in command if arg.startswith("-output-directory=")).split("=", 1)[1])
        if self.produce_pdf:
            (output_dir / tex_file.with_suffix(".pdf").name).write_bytes(b"%PDF-1.5 fake")
        stdout_path.write_text(self.compile_log, encoding="utf-8")
        return ToolResult(list(command), self.compile_returncode, 0.0, stdout_path, stdout_path)

    def names(self):
        return [name for name, _, _ in self.calls]


@pytest.fixture
def fake_tools(monkeypatch):
    tools = FakeTools()
    monkeypatch.setattr(difftool, "run_tool", tools.latexdiff)
    monkeypatch.setattr(compiler, "run_tool", tools.latexmk)
    monkeypatch.setattr(pipeline, "require_tool", lambda name: name)
    return tools


@pytest.fixture
def recorded_runs(monkeypatch):
    """Record calls made by the repository document tasks."""
    runs = []

    def _fake_run(command, *, cwd, timeout, stdout_path=None, stderr_path=None, merge_stderr=False):
        runs.append((list(command), Path(cwd)))
        if stdout_path is not None:
            stdout_path.write_text("", encoding="utf-8")
        return ToolResult(list(command), 0, 0.0, stdout_path, stderr_path)

    monkeypatch.setattr(documents, "run_tool", _fake_run)
    return runs
