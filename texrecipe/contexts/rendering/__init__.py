"""
Rendering Context

Responsibilities:
- Compiles expanded TeX to PDF with an external engine
- Parses engine logs into errors and warnings
- Writes or returns the finished PDF

Owns: Engine invocation, PDF output
Never: Modifies template content
"""

from texrecipe.contexts.rendering.compiler import CompilationResult, compile_latex
from texrecipe.contexts.rendering.renderer import render_pdf, render_pdf_bytes

__all__ = ["CompilationResult", "compile_latex", "render_pdf", "render_pdf_bytes"]
