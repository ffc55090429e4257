"""
Session logging for render runs.

Library modules only emit records through loguru's global logger; an entry
point (scripts/render_pdf.py) calls setup_logger() once to route them to a
per-session log file and the console.
"""

import sys
from pathlib import Path
from typing import Dict, Optional

from loguru import logger

from texrecipe import __version__

FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <7} | {message}"
CONSOLE_FORMAT = "{time:HH:mm:ss} | <level>{level: <7}</level> | <level>{message}</level>"


def setup_logger(
    log_dir: Path,
    template: Path,
    output: Path,
    settings: Optional[Dict[str, str]] = None,
    session_name: str = "render",
) -> Path:
    """
    Route loguru output for one render session and write its header.

    The file sink records everything down to DEBUG (including raw engine
    output); the console only shows INFO and above.

    Args:
        log_dir: Directory for this session, created if missing
        template: Template being rendered
        output: Destination of the rendered file
        settings: Engine settings to record (compiler, passes, ...)
        session_name: Stem of the log file

    Returns:
        Path to the session log file
    """
    log_dir.mkdir(exist_ok=True, parents=True)
    log_file = log_dir / f"{session_name}.log"

    logger.remove()
    logger.add(log_file, format=FILE_FORMAT, level="DEBUG")
    logger.add(sys.stdout, format=CONSOLE_FORMAT, level="INFO", colorize=True)

    log_session_header(template, output, settings)

    return log_file


def log_session_header(
    template: Path, output: Path, settings: Optional[Dict[str, str]] = None
) -> None:
    """Log what is being rendered, where it goes and how it was invoked."""
    logger.info("=" * 80)
    logger.info(f"texrecipe {__version__}")
    logger.info(f"Template: {Path(template).resolve()}")
    logger.info(f"Output: {Path(output).resolve()}")
    for key, value in (settings or {}).items():
        logger.info(f"{key}: {value}")
    logger.info(f"Command: {' '.join(sys.argv)}")
    logger.info(f"Python: {sys.version.split()[0]}")
    logger.info("=" * 80)
