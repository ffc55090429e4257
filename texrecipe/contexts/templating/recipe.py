"""
Template recipe

The value object describing a single render request.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, Mapping, Optional

# Helpers are plain callables; Jinja2 passes template arguments positionally
Helper = Callable[..., Any]


@dataclass
class TemplateRecipe:
    """
    Everything needed to turn a template into a PDF.

    Attributes:
        template: Path to the UTF-8 LaTeX template with {{ placeholders }}
        output: Path the PDF is written to (parent directory must exist)
        data: Values substituted into the template, keyed by placeholder name
        helpers: Optional named callables usable as {{ name(x) }} or {{ x | name }}
        strict: Raise on placeholders missing from data instead of rendering ""
    """

    template: Path
    output: Path
    data: Mapping[str, Any] = field(default_factory=dict)
    helpers: Optional[Dict[str, Helper]] = None
    strict: bool = False

    def __post_init__(self):
        self.template = Path(self.template)
        self.output = Path(self.output)
