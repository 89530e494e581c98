from pathlib import Path

import pytest

from govtex.core.compiler import COMPILE_DIR_NAME, COMPILE_LOG_NAME, LatexCompiler
from govtex.core.difftool import DIFF_LOG_NAME, RAW_DIFF_NAME, build_latexdiff_command, generate_diff
from govtex.core.inputs import resolve_inputs
from govtex.core.latex_log_parser import LogParser, latex_errors
from govtex.core.publisher import publish, resolve_output_target
from govtex.exceptions import CompilationFailed, DiffGenerationFailed, InvalidOutput


@pytest.fixture
def inputs(repo):
    return resolve_inputs(repo / "documents" / "bylaws" / "main.tex", repo / "documents" / "bylaws-v2" / "main.tex")


def test_latexdiff_command_flattens_and_sets_encoding(inputs, settings):
    old, new = inputs
    command = build_latexdiff_command(old, new, settings)
    assert command[:4] == ["latexdiff", "--flatten", "--type=UNDERLINE", "--encoding=utf8"]
    assert command[-2:] == [str(old.path), str(new.path)]


def test_generate_diff_runs_from_repo_root(inputs, settings, repo, tmp_path, fake_tools):
    outcome = generate_diff(*inputs, tmp_path, settings, cwd=repo)
    assert outcome.succeeded
    assert outcome.warnings == []
    assert outcome.output_path == tmp_path / RAW_DIFF_NAME
    assert outcome.log_path == tmp_path / DIFF_LOG_NAME
    assert fake_tools.calls[0][2] == repo


def test_generate_diff_nonzero_exit_is_warning(inputs, settings, repo, tmp_path, fake_tools):
    fake_tools.diff_returncode = 1
    outcome = generate_diff(*inputs, tmp_path, settings, cwd=repo)
    assert outcome.succeeded
    assert len(outcome.warnings) == 1
    assert "latexdiff completed with warnings" in outcome.warnings[0]


def test_generate_diff_without_output_fails(inputs, settings, repo, tmp_path, fake_tools):
    fake_tools.diff_output = ""
    fake_tools.diff_returncode = 255
    with pytest.raises(DiffGenerationFailed) as excinfo:
        generate_diff(*inputs, tmp_path, settings, cwd=repo)
    assert excinfo.value.stage == "diffing"


def test_compiler_command(settings, tmp_path):
    command = LatexCompiler(settings).command(tmp_path / "diff.tex", tmp_path)
    assert command == [
        "latexmk",
        "-xelatex",
        "-f",
        "-synctex=1",
        "-interaction=nonstopmode",
        "-file-line-error",
        f"-output-directory={tmp_path}",
        str(tmp_path / "diff.tex"),
    ]


def test_compile_names_job_after_output(settings, repo, tmp_path, fake_tools):
    source = tmp_path / "diff.tex"
    source.write_text("x", encoding="utf-8")
    outcome = LatexCompiler(settings).compile(source, tmp_path, "bylaws-changes", cwd=repo)
    assert outcome.output_path == tmp_path / COMPILE_DIR_NAME / "bylaws-changes.pdf"
    assert (tmp_path / COMPILE_DIR_NAME / "bylaws-changes.tex").read_text(encoding="utf-8") == "x"
    assert outcome.log_path == tmp_path / COMPILE_LOG_NAME
    assert fake_tools.calls[-1][2] == repo


def test_compile_tolerates_nonzero_exit_when_pdf_exists(settings, repo, tmp_path, fake_tools):
    fake_tools.compile_returncode = 12
    fake_tools.compile_log = "./diff.tex:5: LaTeX Error: Option clash for package xcolor.\n"
    source = tmp_path / "diff.tex"
    source.write_text("x", encoding="utf-8")
    outcome = LatexCompiler(settings).compile(source, tmp_path, "diff", cwd=repo)
    assert outcome.succeeded
    assert any("exited with status 12" in warning for warning in outcome.warnings)
    assert any("compilation had errors" in warning for warning in outcome.warnings)


def test_compile_strict_mode_rejects_errors(settings, repo, tmp_path, fake_tools):
    fake_tools.compile_returncode = 12
    fake_tools.compile_log = "! LaTeX Error: Something broke.\n"
    source = tmp_path / "diff.tex"
    source.write_text("x", encoding="utf-8")
    strict = settings.model_copy(update={"strict_compile": True})
    with pytest.raises(CompilationFailed):
        LatexCompiler(strict).compile(source, tmp_path, "diff", cwd=repo)


def test_compile_without_pdf_fails(settings, repo, tmp_path, fake_tools):
    fake_tools.produce_pdf = False
    source = tmp_path / "diff.tex"
    source.write_text("x", encoding="utf-8")
    with pytest.raises(CompilationFailed) as excinfo:
        LatexCompiler(settings).compile(source, tmp_path, "diff", cwd=repo)
    assert excinfo.value.log_path == tmp_path / COMPILE_LOG_NAME


def test_log_parser_classifies_lines(tmp_path):
    log = tmp_path / "compile.log"
    log.write_text(
        "./main.tex:12: Undefined control sequence.\n"
        "! LaTeX Error: File `foo.sty' not found.\n"
        "! Emergency stop.\n"
        "Fatal error occurred, no output PDF file produced!\n",
        encoding="utf-8",
    )
    kinds = [err.error_type for err in LogParser().parse(log)]
    assert kinds == ["file_line_error", "latex_error", "fatal"]
    assert LogParser().parse(log)[0].line == 12
    assert len(latex_errors(log)) == 2
    assert latex_errors(tmp_path / "missing.log") == []


def test_relative_output_goes_to_build_dir(tmp_path):
    target = resolve_output_target("reports/bylaws", tmp_path)
    assert target.directory == tmp_path / "build" / "reports"
    assert target.name == "bylaws"


def test_absolute_output_is_used_as_given(tmp_path):
    target = resolve_output_target(str(tmp_path / "out" / "my-diff"), Path("/elsewhere"))
    assert target.directory == tmp_path / "out"
    assert target.name == "my-diff"


def test_publish_copies_artifacts(tmp_path):
    source = tmp_path / "diff.tex"
    source.write_text("tex", encoding="utf-8")
    rendered = tmp_path / "diff.pdf"
    rendered.write_bytes(b"pdf")
    target = resolve_output_target("nested/out", tmp_path / "repo")
    published = publish(source, target, rendered=rendered)
    assert published.source.read_text(encoding="utf-8") == "tex"
    assert published.rendered.read_bytes() == b"pdf"
    assert published.source == tmp_path / "repo" / "build" / "nested" / "out.tex"


def test_publish_source_only(tmp_path):
    source = tmp_path / "diff.tex"
    source.write_text("tex", encoding="utf-8")
    published = publish(source, resolve_output_target("out", tmp_path))
    assert published.rendered is None
    assert not (tmp_path / "build" / "out.pdf").exists()


@pytest.mark.parametrize("output", ["/", "reports/..", "..", "."])
def test_output_must_name_a_file(tmp_path, output):
    with pytest.raises(InvalidOutput):
        resolve_output_target(output, tmp_path)
