"""
Templating context logger.

Provides logging interface for templating context with automatic [template] prefix.
All templating modules should import from this module, not from loguru directly.
"""

from pathlib import Path

from loguru import logger

CONTEXT_PREFIX = "[template]"


# Wrapper functions with automatic [template] prefix


def _log_info(message: str) -> None:
    """Log info message with [template] prefix."""
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_error(message: str) -> None:
    """Log error message with [template] prefix."""
    logger.error(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    """Log debug message with [template] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")


# High-level templating-specific logging helpers


def log_expansion_start(template_path: Path, num_keys: int, helper_names) -> None:
    """Log start of template expansion with context."""
    _log_info(f"Expanding template: {template_path.name}")
    _log_debug(f"  Source: {template_path}")
    _log_debug(f"  Data keys: {num_keys}")
    if helper_names:
        _log_debug(f"  Helpers: {', '.join(sorted(helper_names))}")


def log_expansion_result(template_path: Path, tex_length: int, elapsed_time: float) -> None:
    """Log successful expansion."""
    _log_debug(f"{template_path.name}: expanded to {tex_length} characters ({elapsed_time:.3f}s)")
