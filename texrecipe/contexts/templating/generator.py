"""
TeX Generator

Expands a recipe's template into TeX source.
"""

import time
from pathlib import Path

from jinja2 import TemplateSyntaxError

from texrecipe.contexts.templating.environment import build_environment
from texrecipe.contexts.templating.logger import (
    _log_error,
    _log_info,
    log_expansion_result,
    log_expansion_start,
)
from texrecipe.contexts.templating.recipe import TemplateRecipe
from texrecipe.exceptions import RecipeIOError, TemplateRenderError


def read_template(template_path: Path) -> str:
    """
    Read template text from disk.

    Args:
        template_path: Path to a UTF-8 template file

    Returns:
        Template text

    Raises:
        RecipeIOError: If the file is missing, unreadable or not UTF-8
    """
    try:
        return template_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        _log_error(f"Cannot read template: {template_path}")
        raise RecipeIOError("Cannot read template file", path=template_path, original_error=e) from e


def prepare_tex(recipe: TemplateRecipe) -> str:
    """
    Expand the recipe's template against its data.

    Args:
        recipe: Template path, data and optional helpers

    Returns:
        Expanded TeX source

    Raises:
        RecipeIOError: If the template cannot be read
        TemplateRenderError: If the template is malformed, a helper fails,
            or a strict recipe references an unknown key
    """
    helpers = recipe.helpers or {}
    log_expansion_start(recipe.template, len(recipe.data), helpers.keys())
    start_time = time.time()

    tex_content = read_template(recipe.template)
    env = build_environment(helpers=helpers, strict=recipe.strict)

    try:
        template = env.from_string(tex_content)
    except TemplateSyntaxError as e:
        _log_error(f"Malformed template {recipe.template.name} (line {e.lineno}): {e.message}")
        raise TemplateRenderError(
            "Malformed template syntax",
            template_path=recipe.template,
            lineno=e.lineno,
            original_error=e,
        ) from e

    try:
        tex = template.render(recipe.data)
    except Exception as e:
        # Helpers are arbitrary caller code, so anything they raise is a template failure
        lineno = getattr(e, "lineno", None)
        _log_error(f"Failed to expand {recipe.template.name}: {e}")
        raise TemplateRenderError(
            "Template expansion failed",
            template_path=recipe.template,
            lineno=lineno,
            original_error=e,
        ) from e

    log_expansion_result(recipe.template, len(tex), time.time() - start_time)
    return tex


def render_tex(recipe: TemplateRecipe, tex_path: Path) -> None:
    """
    Expand the recipe's template and write the TeX source, without typesetting.

    Args:
        recipe: Template path, data and optional helpers
        tex_path: Destination for the expanded TeX

    Raises:
        RecipeIOError: If the template cannot be read or tex_path cannot be written
        TemplateRenderError: If expansion fails
    """
    tex_path = Path(tex_path)
    tex = prepare_tex(recipe)

    try:
        tex_path.write_text(tex, encoding="utf-8")
    except OSError as e:
        _log_error(f"Cannot write TeX file: {tex_path}")
        raise RecipeIOError("Cannot write TeX file", path=tex_path, original_error=e) from e

    _log_info(f"TeX written to: {tex_path}")
