"""Unit tests for scripts/render_pdf.py."""

import importlib.util
import sys
from pathlib import Path

import pytest
from loguru import logger
from typer.testing import CliRunner

from texrecipe.contexts.rendering import renderer
from texrecipe.contexts.rendering.compiler import CompilationResult

SCRIPT_PATH = Path(__file__).resolve().parents[2] / "scripts" / "render_pdf.py"

runner = CliRunner()


def load_cli():
    """Import the CLI script as a module (scripts/ is not a package)."""
    spec = importlib.util.spec_from_file_location("render_pdf_cli", SCRIPT_PATH)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


@pytest.fixture
def cli(tmp_path, monkeypatch):
    module = load_cli()
    monkeypatch.setattr(module, "LOGS_PATH", tmp_path / "logs")
    yield module
    # setup_logger() points loguru at the runner's captured stdout; restore the default sink
    logger.remove()
    logger.add(sys.stderr)


@pytest.fixture
def template(tmp_path):
    path = tmp_path / "letter.tex"
    path.write_text("Dear {{name}} of {{company.name}}, {{note}}\n", encoding="utf-8")
    return path


@pytest.mark.unit
def test_load_data_merges_files_and_overrides(cli, tmp_path):
    base = tmp_path / "base.yaml"
    base.write_text("name: Fry\ncompany:\n  name: Planet Express\n", encoding="utf-8")
    extra = tmp_path / "extra.json"
    extra.write_text('{"note": "hello"}', encoding="utf-8")

    data = cli.load_data([base, extra], ["name=Leela", "company.name=MomCorp"])

    assert data == {"name": "Leela", "company": {"name": "MomCorp"}, "note": "hello"}


@pytest.mark.unit
def test_load_data_empty(cli):
    assert cli.load_data(None, None) == {}


@pytest.mark.unit
def test_load_data_keeps_latex_math_literal(cli, tmp_path):
    values = tmp_path / "math.yaml"
    values.write_text("formula: '${x}^2$'\n", encoding="utf-8")

    assert cli.load_data([values], None) == {"formula": "${x}^2$"}


@pytest.mark.unit
def test_tex_command_math_value(cli, tmp_path):
    template = tmp_path / "math.tex"
    template.write_text("Area: {{ formula }}", encoding="utf-8")
    values = tmp_path / "math.yaml"
    values.write_text("formula: '${r}^2$'\n", encoding="utf-8")
    out = tmp_path / "expanded.tex"

    result = runner.invoke(cli.app, ["tex", str(template), str(out), "--data", str(values)])

    assert result.exit_code == 0, result.output
    assert out.read_text(encoding="utf-8") == "Area: ${r}^2$"


@pytest.mark.unit
def test_tex_command(cli, template, tmp_path):
    out = tmp_path / "expanded.tex"

    result = runner.invoke(
        cli.app,
        ["tex", str(template), str(out), "--set", "name=Fry", "--set", "company.name=MomCorp"],
    )

    assert result.exit_code == 0, result.output
    assert out.read_text(encoding="utf-8") == "Dear Fry of MomCorp, \n"


@pytest.mark.unit
def test_tex_command_escape_helper(cli, tmp_path):
    template = tmp_path / "t.tex"
    template.write_text("{{ note | escape }}", encoding="utf-8")
    out = tmp_path / "expanded.tex"

    result = runner.invoke(
        cli.app, ["tex", str(template), str(out), "--set", "note=50%", "--escape-helper"]
    )

    assert result.exit_code == 0, result.output
    assert out.read_text(encoding="utf-8") == r"50\%"


@pytest.mark.unit
def test_tex_command_strict_missing_key(cli, template, tmp_path):
    result = runner.invoke(
        cli.app, ["tex", str(template), str(tmp_path / "x.tex"), "--strict", "--set", "name=Fry"]
    )

    assert result.exit_code == 1


@pytest.mark.unit
def test_tex_command_missing_template(cli, tmp_path):
    result = runner.invoke(cli.app, ["tex", str(tmp_path / "nope.tex"), str(tmp_path / "x.tex")])

    assert result.exit_code == 1
    assert not (tmp_path / "x.tex").exists()


@pytest.mark.unit
def test_pdf_command(cli, template, tmp_path, monkeypatch):
    def fake_compile(tex_source, compile_dir, **kwargs):
        pdf_path = Path(compile_dir) / "document.pdf"
        pdf_path.write_bytes(b"%PDF-1.5\n" + tex_source.encode())
        return CompilationResult(success=True, pdf_path=pdf_path)

    monkeypatch.setattr(renderer, "compile_latex", fake_compile)
    out = tmp_path / "letter.pdf"

    result = runner.invoke(cli.app, ["pdf", str(template), str(out), "-s", "name=Fry"])

    assert result.exit_code == 0, result.output
    assert "Rendering succeeded" in result.output
    assert out.read_bytes() == b"%PDF-1.5\nDear Fry of , \n"
    logger.remove()  # close the session log before reading it
    log_files = list((tmp_path / "logs").glob("render_*/render.log"))
    assert log_files
    header = log_files[0].read_text(encoding="utf-8")
    assert f"Template: {template.resolve()}" in header
    assert f"Output: {out.resolve()}" in header


@pytest.mark.unit
def test_pdf_command_typesetting_failure(cli, template, tmp_path, monkeypatch):
    def failing_compile(tex_source, compile_dir, **kwargs):
        return CompilationResult(success=False, errors=["Undefined control sequence."])

    monkeypatch.setattr(renderer, "compile_latex", failing_compile)
    out = tmp_path / "letter.pdf"

    result = runner.invoke(cli.app, ["pdf", str(template), str(out)])

    assert result.exit_code == 1
    assert "Compilation failed with 1 errors" in result.output
    assert "Undefined control sequence." in result.output
    assert not out.exists()


@pytest.mark.unit
def test_no_command_shows_help(cli):
    result = runner.invoke(cli.app, [])

    assert result.exit_code == 0
    assert "pdf" in result.output
    assert "tex" in result.output
