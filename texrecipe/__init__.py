"""
texrecipe - Template Expansion to Typeset PDF

Fills a LaTeX template with named values and typesets the result with an
external TeX engine.

Architecture:
- Templating Context: recipe model, Jinja2 environment, TeX expansion
- Rendering Context: engine invocation, log diagnostics, PDF output
"""

from texrecipe.contexts.rendering.renderer import render_pdf, render_pdf_bytes
from texrecipe.contexts.templating.generator import prepare_tex, render_tex
from texrecipe.contexts.templating.recipe import TemplateRecipe
from texrecipe.exceptions import (
    RecipeError,
    RecipeIOError,
    TemplateRenderError,
    TypesettingError,
)

__version__ = "0.1.0"

__all__ = [
    "TemplateRecipe",
    "prepare_tex",
    "render_tex",
    "render_pdf",
    "render_pdf_bytes",
    "RecipeError",
    "RecipeIOError",
    "TemplateRenderError",
    "TypesettingError",
]
