"""
Render facade

Turns a TemplateRecipe into a PDF: expand the template, typeset the TeX in a
scratch directory, then write the PDF to the recipe's output path or return
its bytes.
"""

import tempfile
from pathlib import Path
from typing import Optional

from texrecipe.contexts.rendering.compiler import (
    KEEP_LATEX_ARTIFACTS,
    LATEX_COMPILER,
    LATEX_NUM_PASSES,
    compile_latex,
)
from texrecipe.contexts.rendering.logger import _log_error, _log_info
from texrecipe.contexts.templating.generator import prepare_tex
from texrecipe.contexts.templating.recipe import TemplateRecipe
from texrecipe.exceptions import RecipeIOError, TypesettingError
from texrecipe.utils.pdf_processing import is_pdf


def render_pdf_bytes(
    recipe: TemplateRecipe,
    compiler: str = LATEX_COMPILER,
    num_passes: int = LATEX_NUM_PASSES,
    artifacts_dir: Optional[Path] = None,
    verbose: bool = False,
) -> bytes:
    """
    Render a recipe to PDF bytes without touching recipe.output.

    Args:
        recipe: Template path, data and optional helpers
        compiler: TeX engine executable (default: from LATEX_COMPILER env)
        num_passes: Engine passes for cross-references (default: from LATEX_NUM_PASSES env)
        artifacts_dir: Compile here and keep intermediate files instead of
            using a throwaway temporary directory (must exist)
        verbose: Log full engine output even on success

    Returns:
        The PDF document

    Raises:
        RecipeIOError: If the template cannot be read or artifacts_dir is not writable
        TemplateRenderError: If expansion fails (the engine is never invoked)
        TypesettingError: If the engine fails or produces no valid PDF
    """
    tex = prepare_tex(recipe)

    if artifacts_dir is not None:
        return _typeset(tex, Path(artifacts_dir), compiler, num_passes, True, verbose)

    with tempfile.TemporaryDirectory(prefix="texrecipe_") as compile_dir:
        return _typeset(tex, Path(compile_dir), compiler, num_passes, KEEP_LATEX_ARTIFACTS, verbose)


def render_pdf(
    recipe: TemplateRecipe,
    compiler: str = LATEX_COMPILER,
    num_passes: int = LATEX_NUM_PASSES,
    artifacts_dir: Optional[Path] = None,
    verbose: bool = False,
) -> None:
    """
    Render a recipe and write the PDF to recipe.output.

    The output file is only written once typesetting has succeeded, so a failed
    render leaves no new file behind. The output's parent directory must exist.

    Args:
        recipe: Template path, output path, data and optional helpers
        compiler: TeX engine executable (default: from LATEX_COMPILER env)
        num_passes: Engine passes for cross-references (default: from LATEX_NUM_PASSES env)
        artifacts_dir: Keep intermediate files here (must exist)
        verbose: Log full engine output even on success

    Raises:
        RecipeIOError: If the template cannot be read or the output cannot be written
        TemplateRenderError: If expansion fails
        TypesettingError: If the engine fails or produces no valid PDF
    """
    pdf_data = render_pdf_bytes(
        recipe,
        compiler=compiler,
        num_passes=num_passes,
        artifacts_dir=artifacts_dir,
        verbose=verbose,
    )

    try:
        recipe.output.write_bytes(pdf_data)
    except OSError as e:
        _log_error(f"Cannot write PDF: {recipe.output}")
        raise RecipeIOError("Cannot write output PDF", path=recipe.output, original_error=e) from e

    _log_info(f"PDF saved to: {recipe.output}")


def _typeset(
    tex: str,
    compile_dir: Path,
    compiler: str,
    num_passes: int,
    keep_artifacts: bool,
    verbose: bool,
) -> bytes:
    """Compile TeX in compile_dir and return the PDF bytes, raising on failure."""
    result = compile_latex(
        tex_source=tex,
        compile_dir=compile_dir,
        num_passes=num_passes,
        keep_artifacts=keep_artifacts,
        compiler=compiler,
        verbose=verbose,
    )

    if not result.success:
        raise TypesettingError(
            "Typesetting failed",
            compiler=compiler,
            errors=result.errors,
            log_excerpt=result.stdout,
        )

    pdf_data = result.pdf_path.read_bytes()
    if not is_pdf(pdf_data):
        raise TypesettingError(
            f"{compiler} reported success, but the output is not a PDF",
            compiler=compiler,
            log_excerpt=result.stdout,
        )

    return pdf_data
