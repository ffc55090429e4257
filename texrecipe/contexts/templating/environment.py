r"""
Jinja2 environment for LaTeX templates.

Known collisions with plain LaTeX: any literal "{{" is read as a placeholder
(e.g. \graphicspath{{img/}}), and "{{%" opens a block tag, which catches a
brace group ending in a line-end comment such as \newenvironment{x}{{%.
Wrap such passages in {{% raw %}} ... {{% endraw %}} to emit them verbatim.
"""

from typing import Mapping, Optional

from jinja2 import ChainableUndefined, Environment, StrictUndefined

from texrecipe.contexts.templating.recipe import Helper
from texrecipe.exceptions import TemplateRenderError

# Handlebars-flavoured delimiters. Jinja2's defaults ({% %} and {# #}) collide
# with LaTeX line-end comments ("{%") and macro parameters ("{#1}").
VARIABLE_START = "{{"
VARIABLE_END = "}}"
BLOCK_START = "{{%"
BLOCK_END = "%}}"
COMMENT_START = "{{!"
COMMENT_END = "!}}"


def build_environment(
    helpers: Optional[Mapping[str, Helper]] = None,
    strict: bool = False,
) -> Environment:
    """
    Create a Jinja2 environment for expanding LaTeX templates.

    A fresh environment is built per render so helpers registered for one
    recipe never leak into another.

    Syntax:
    - Variable: {{ name }}
    - Block: {{% for item in items %}} ... {{% endfor %}}
    - Comment: {{! note !}}

    Substituted values are not escaped and whitespace is preserved exactly,
    so a template without placeholders expands to itself.

    Args:
        helpers: Named callables, registered both as globals and as filters
        strict: Use StrictUndefined so unknown names raise instead of rendering ""
            (the default ChainableUndefined renders {{ a.b }} as "" when a is missing)

    Returns:
        Configured Jinja2 Environment

    Raises:
        TemplateRenderError: If a helper is not callable
    """
    env = Environment(
        variable_start_string=VARIABLE_START,
        variable_end_string=VARIABLE_END,
        block_start_string=BLOCK_START,
        block_end_string=BLOCK_END,
        comment_start_string=COMMENT_START,
        comment_end_string=COMMENT_END,
        # LaTeX is not HTML
        autoescape=False,
        # Preserve whitespace (important for LaTeX)
        trim_blocks=False,
        lstrip_blocks=False,
        keep_trailing_newline=True,
        undefined=StrictUndefined if strict else ChainableUndefined,
    )

    for name, func in (helpers or {}).items():
        if not callable(func):
            raise TemplateRenderError(f"Helper '{name}' is not callable: {func!r}")
        env.globals[name] = func
        env.filters[name] = func

    return env
