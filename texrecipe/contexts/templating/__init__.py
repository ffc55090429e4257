"""
Templating Context

Responsibilities:
- Describes a render request (TemplateRecipe)
- Builds the Jinja2 environment with LaTeX-safe delimiters
- Registers caller-supplied helpers
- Expands templates into TeX source

Owns: Recipe model, placeholder syntax, TeX expansion
Never: Invokes the TeX engine
"""

from texrecipe.contexts.templating.environment import build_environment
from texrecipe.contexts.templating.generator import prepare_tex, read_template, render_tex
from texrecipe.contexts.templating.recipe import Helper, TemplateRecipe

__all__ = [
    "TemplateRecipe",
    "Helper",
    "build_environment",
    "read_template",
    "prepare_tex",
    "render_tex",
]
