#!/usr/bin/env python3
"""
Template Rendering CLI

Fills a LaTeX template with values and typesets it to PDF.

Commands:
    pdf - Expand a template and compile it to PDF
    tex - Expand a template and write the TeX source only

Examples:\n

    render_pdf.py pdf letter.tex letter.pdf --data letter.yaml       # Values from YAML

    render_pdf.py pdf letter.tex letter.pdf --set name=Fry           # Inline values

    render_pdf.py tex letter.tex expanded.tex --data letter.json     # Inspect expansion
"""

import os
from pathlib import Path
from typing import Any, Dict, List, Optional

import typer
from dotenv import load_dotenv
from omegaconf import OmegaConf
from typing_extensions import Annotated

from texrecipe import RecipeError, TemplateRecipe, TypesettingError, render_pdf, render_tex
from texrecipe.contexts.rendering.compiler import LATEX_COMPILER, LATEX_NUM_PASSES
from texrecipe.utils.latex import latex_escape
from texrecipe.utils.logger import setup_logger
from texrecipe.utils.timestamp import now

load_dotenv()
LOGS_PATH = Path(os.getenv("LOGS_PATH", "outs/logs"))


app = typer.Typer(
    help="Expand LaTeX templates with values and typeset them to PDF",
    add_completion=False,
    invoke_without_command=True,
)


@app.callback()
def main(ctx: typer.Context):
    """Show help by default when no command is provided."""
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()


def load_data(data_files: Optional[List[Path]], overrides: Optional[List[str]]) -> Dict[str, Any]:
    """
    Merge data files (YAML or JSON) and key=value overrides into one mapping.

    Later files override earlier ones; --set overrides win over all files.
    Dotted keys (author.name=Fry) build nested mappings. Values are taken
    literally: "${x}^2$" is LaTeX math, not an OmegaConf interpolation.
    """
    configs = [OmegaConf.load(path) for path in data_files or []]
    configs.append(OmegaConf.from_dotlist(list(overrides or [])))
    merged = OmegaConf.merge(*configs)
    return OmegaConf.to_container(merged, resolve=False)


def start_session(
    template: Path, output: Path, compiler: str, num_passes: int, verbose: bool
) -> Path:
    """Configure logging for this invocation and return the log file."""
    return setup_logger(
        log_dir=LOGS_PATH / f"render_{now()}",
        template=template,
        output=output,
        settings={"LaTeX compiler": compiler, "Passes": str(num_passes), "Verbose": str(verbose)},
    )


DataOption = Annotated[
    Optional[List[Path]],
    typer.Option(
        "--data",
        "-d",
        help="YAML or JSON file with template values (repeatable, later files win)",
        exists=True,
        dir_okay=False,
    ),
]
SetOption = Annotated[
    Optional[List[str]],
    typer.Option(
        "--set",
        "-s",
        help="Template value as key=value (repeatable, overrides --data)",
    ),
]
StrictOption = Annotated[
    bool,
    typer.Option(
        "--strict",
        help="Fail on placeholders missing from the data instead of rendering them empty",
    ),
]
EscapeOption = Annotated[
    bool,
    typer.Option(
        "--escape-helper/--no-escape-helper",
        help="Register latex_escape as the 'escape' helper ({{ value | escape }})",
    ),
]


@app.command("pdf")
def pdf_command(
    template: Annotated[Path, typer.Argument(help="LaTeX template with {{ placeholders }}")],
    output: Annotated[Path, typer.Argument(help="Destination PDF path")],
    data: DataOption = None,
    overrides: SetOption = None,
    strict: StrictOption = False,
    escape_helper: EscapeOption = False,
    compiler: Annotated[
        str,
        typer.Option("--compiler", "-c", help="TeX engine (pdflatex, xelatex, lualatex, tectonic)"),
    ] = LATEX_COMPILER,
    num_passes: Annotated[
        int,
        typer.Option(
            "--passes",
            "-p",
            help="Number of compiler passes (default: 2 for cross-references)",
            min=1,
            max=5,
        ),
    ] = LATEX_NUM_PASSES,
    keep_artifacts: Annotated[
        Optional[Path],
        typer.Option(
            "--keep-artifacts",
            "-k",
            help="Compile in this directory and keep LaTeX artifacts (.tex, .aux, .log, etc.)",
            file_okay=False,
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Log detailed compilation output"),
    ] = False,
):
    """
    Expand a template and compile it to PDF.

    Examples:\n

        $ render_pdf.py pdf letter.tex letter.pdf --data letter.yaml

        $ render_pdf.py pdf letter.tex letter.pdf -s name=Fry -s company=MomCorp

        $ render_pdf.py pdf letter.tex letter.pdf -d letter.yaml --compiler xelatex
    """
    log_file = start_session(template, output, compiler, num_passes, verbose)
    typer.secho(f"\nRendering: {template}", fg=typer.colors.BLUE, bold=True)

    try:
        values = load_data(data, overrides)
    except Exception as e:
        typer.secho(f"Error: cannot load template values: {e}\n", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    recipe = TemplateRecipe(
        template=template,
        output=output,
        data=values,
        helpers={"escape": latex_escape} if escape_helper else None,
        strict=strict,
    )

    if keep_artifacts is not None:
        keep_artifacts.mkdir(parents=True, exist_ok=True)

    try:
        render_pdf(
            recipe,
            compiler=compiler,
            num_passes=num_passes,
            artifacts_dir=keep_artifacts,
            verbose=verbose,
        )
    except TypesettingError as e:
        typer.secho(
            f"✗ Compilation failed with {len(e.errors)} errors", fg=typer.colors.RED, bold=True
        )
        for error in e.errors[:10]:
            typer.secho(f"  - {error}", fg=typer.colors.RED)
        typer.echo(f"  Log: {log_file}\n")
        raise typer.Exit(code=1)
    except RecipeError as e:
        typer.secho(f"Error: {e}\n", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    typer.secho("✓ Rendering succeeded", fg=typer.colors.GREEN, bold=True)
    typer.echo(f"  PDF: {output}")
    typer.echo(f"  Log: {log_file}\n")


@app.command("tex")
def tex_command(
    template: Annotated[Path, typer.Argument(help="LaTeX template with {{ placeholders }}")],
    tex_output: Annotated[Path, typer.Argument(help="Destination for the expanded TeX")],
    data: DataOption = None,
    overrides: SetOption = None,
    strict: StrictOption = False,
    escape_helper: EscapeOption = False,
):
    """
    Expand a template and write the TeX source without compiling it.

    Examples:\n

        $ render_pdf.py tex letter.tex expanded.tex --data letter.yaml
    """
    try:
        values = load_data(data, overrides)
    except Exception as e:
        typer.secho(f"Error: cannot load template values: {e}\n", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    recipe = TemplateRecipe(
        template=template,
        output=tex_output.with_suffix(".pdf"),
        data=values,
        helpers={"escape": latex_escape} if escape_helper else None,
        strict=strict,
    )

    try:
        render_tex(recipe, tex_output)
    except RecipeError as e:
        typer.secho(f"Error: {e}\n", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    typer.secho(f"✓ TeX written to {tex_output}", fg=typer.colors.GREEN)


if __name__ == "__main__":
    app()
