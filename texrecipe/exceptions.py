"""Exceptions raised by texrecipe, one per failure stage of a render."""

from pathlib import Path
from typing import List, Optional


class RecipeError(Exception):
    """Base class for every error surfaced by a render call."""


class RecipeIOError(RecipeError):
    """
    Exception raised when a recipe path cannot be read or written.

    Attributes:
        message: Error description
        path: The template, TeX or PDF path that failed
        original_error: The underlying OSError (or decode error)
    """

    def __init__(
        self,
        message: str,
        path: Optional[Path] = None,
        original_error: Optional[Exception] = None,
    ):
        self.message = message
        self.path = path
        self.original_error = original_error

        parts = [message]

        if path:
            parts.append(f"Path: {path}")

        if original_error:
            parts.append(f"Original error: {original_error}")

        super().__init__("\n".join(parts))


class TemplateRenderError(RecipeError):
    """
    Exception raised when template expansion fails.

    Covers malformed placeholder syntax, helpers that raise, and undefined
    keys when the recipe is strict.

    Attributes:
        message: Error description
        template_path: Path to the template file
        lineno: Template line reported by Jinja2, if known
        original_error: The original Jinja2 (or helper) error
    """

    def __init__(
        self,
        message: str,
        template_path: Optional[Path] = None,
        lineno: Optional[int] = None,
        original_error: Optional[Exception] = None,
    ):
        self.message = message
        self.template_path = template_path
        self.lineno = lineno
        self.original_error = original_error

        parts = [message]

        if template_path:
            location = f"{template_path}:{lineno}" if lineno else str(template_path)
            parts.append(f"Template: {location}")

        if original_error:
            parts.append(f"Original error: {original_error}")

        super().__init__("\n".join(parts))


class TypesettingError(RecipeError):
    """
    Exception raised when the TeX engine fails to produce a PDF.

    Attributes:
        message: Error description
        compiler: Engine that was invoked (e.g., 'pdflatex')
        errors: Errors parsed from the engine log
        log_excerpt: Tail of the engine's stdout, for context
    """

    def __init__(
        self,
        message: str,
        compiler: Optional[str] = None,
        errors: Optional[List[str]] = None,
        log_excerpt: Optional[str] = None,
    ):
        self.message = message
        self.compiler = compiler
        self.errors = list(errors or [])
        self.log_excerpt = log_excerpt

        parts = [message]

        if compiler:
            parts.append(f"Compiler: {compiler}")

        for i, err in enumerate(self.errors[:5], 1):
            parts.append(f"  Error {i}: {err}")
        if len(self.errors) > 5:
            parts.append(f"  ... and {len(self.errors) - 5} more errors")

        if log_excerpt:
            # Truncate excerpt if too long
            excerpt = "..." + log_excerpt[-800:] if len(log_excerpt) > 800 else log_excerpt
            parts.append(f"\nEngine output:\n{excerpt}")

        super().__init__("\n".join(parts))
