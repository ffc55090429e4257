"""
Shared utilities for texrecipe.

Common functionality used across contexts:
- Logger setup
- PDF inspection
- LaTeX escaping
- Timestamps
"""

from texrecipe.utils.latex import latex_escape
from texrecipe.utils.pdf_processing import is_pdf, page_count
from texrecipe.utils.timestamp import now

__all__ = ["latex_escape", "is_pdf", "page_count", "now"]
