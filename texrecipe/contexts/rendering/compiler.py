"""
LaTeX Compilation Module

Runs an external TeX engine (pdflatex, xelatex, lualatex or tectonic) on
expanded TeX source and reports the outcome.
"""

import os
import re
import shutil
import subprocess
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

from texrecipe.contexts.rendering.logger import (
    _log_debug,
    _log_error,
    log_compilation_result,
    log_compilation_start,
)
from texrecipe.exceptions import RecipeIOError
from texrecipe.utils.pdf_processing import page_count

load_dotenv()

LATEX_COMPILER = os.getenv("LATEX_COMPILER", "pdflatex")
LATEX_NUM_PASSES = int(os.getenv("LATEX_NUM_PASSES", "2"))
KEEP_LATEX_ARTIFACTS = os.getenv("KEEP_LATEX_ARTIFACTS", "false").lower() == "true"
SOURCE_DATE_EPOCH = os.getenv("SOURCE_DATE_EPOCH", "0")

# Engines sharing the classic TeX command line
TEX_ENGINES = {"pdflatex", "xelatex", "lualatex"}
# Engines that rerun themselves until references settle
SELF_RERUNNING_ENGINES = {"tectonic"}
# Primitives fixing the PDF trailer /ID, which otherwise depends on the working directory
TRAILER_ID_PINS = {
    "pdflatex": r"\pdftrailerid{}",
    "lualatex": r"\pdfvariable trailerid{}",
}

# LaTeX intermediate files created during compilation
LATEX_ARTIFACTS = [".aux", ".log", ".out", ".toc"]


@dataclass
class CompilationResult:
    """
    Result of LaTeX compilation.

    Attributes:
        success: Whether compilation succeeded
        pdf_path: Path to generated PDF (None if failed)
        stdout: Standard output from the engine
        stderr: Standard error from the engine
        errors: List of parsed LaTeX errors
        warnings: List of parsed LaTeX warnings
        page_count: Number of pages in generated PDF (None if not available)
    """

    success: bool
    pdf_path: Optional[Path] = None
    stdout: str = ""
    stderr: str = ""
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    page_count: Optional[int] = None


def _parse_latex_log(log_content: str) -> tuple[List[str], List[str]]:
    """
    Parse LaTeX log file for errors and warnings.

    Args:
        log_content: Content of the .log file

    Returns:
        Tuple of (errors, warnings)
    """
    errors = []
    warnings = []

    # LaTeX error pattern: "! Error message"
    error_pattern = re.compile(r"^! (.+)$", re.MULTILINE)
    for match in error_pattern.finditer(log_content):
        errors.append(match.group(1).strip())

    # -file-line-error style: "./document.tex:4: Undefined control sequence."
    file_line_pattern = re.compile(r"^\S+\.tex:\d+: (.+)$", re.MULTILINE)
    for match in file_line_pattern.finditer(log_content):
        message = match.group(1).strip()
        if message not in errors:
            errors.append(message)

    # Additional error patterns that don't start with "!"
    additional_error_patterns = [
        r"Undefined control sequence",
        r"File ended while scanning use of",
        r"Emergency stop",
    ]
    for pattern in additional_error_patterns:
        if not any(pattern in err for err in errors):
            match = re.search(rf"({pattern}.*?)$", log_content, re.MULTILINE)
            if match:
                errors.append(match.group(1).strip())

    # Common warning patterns
    warning_patterns = [
        r"LaTeX Warning: (.+)",
        r"Package \w+ Warning: (.+)",
        r"Overfull \\hbox \((.+)\)",
        r"Underfull \\hbox \((.+)\)",
    ]

    for pattern in warning_patterns:
        compiled = re.compile(pattern, re.MULTILINE)
        for match in compiled.finditer(log_content):
            warnings.append(match.group(1).strip())

    return errors, warnings


def _build_command(compiler: str, tex_name: str, compile_dir: Path) -> List[str]:
    """
    Build the engine command line for one invocation.

    Args:
        compiler: Engine executable name or path
        tex_name: File name of the .tex source inside compile_dir
        compile_dir: Working and output directory

    Returns:
        Argument list for subprocess.run
    """
    engine = Path(compiler).name

    if engine in SELF_RERUNNING_ENGINES:
        return [
            compiler,
            "--chatter",
            "minimal",
            "--keep-logs",
            "--outdir",
            str(compile_dir),
            tex_name,
        ]

    command = [
        compiler,
        "-interaction=nonstopmode",
        "-halt-on-error",
        "-file-line-error",
        "-no-shell-escape",
    ]

    trailer_id = TRAILER_ID_PINS.get(engine)
    if trailer_id is None:
        return command + [tex_name]

    jobname = Path(tex_name).stem
    return command + [f"-jobname={jobname}", trailer_id + r"\input{" + tex_name + "}"]


def _engine_env() -> dict:
    """Environment for the engine process, pinned for reproducible output."""
    env_vars = os.environ.copy()
    env_vars["SOURCE_DATE_EPOCH"] = SOURCE_DATE_EPOCH
    env_vars["FORCE_SOURCE_DATE"] = "1"
    return env_vars


def _remove_artifacts(compile_dir: Path, jobname: str) -> None:
    """
    Remove intermediate LaTeX files.

    Args:
        compile_dir: Directory the engine ran in
        jobname: Stem shared by the .tex source and its artifacts
    """
    for ext in LATEX_ARTIFACTS:
        artifact_path = compile_dir / f"{jobname}{ext}"
        if artifact_path.exists():
            artifact_path.unlink()


def compile_latex(
    tex_source: str,
    compile_dir: Path,
    jobname: str = "document",
    num_passes: int = LATEX_NUM_PASSES,
    keep_artifacts: bool = KEEP_LATEX_ARTIFACTS,
    compiler: str = LATEX_COMPILER,
    verbose: bool = False,
) -> CompilationResult:
    """
    Compile TeX source to PDF with an external engine.

    Pure compilation function - assumes compile_dir exists. The source is written
    to compile_dir/{jobname}.tex and the PDF lands at compile_dir/{jobname}.pdf.

    Args:
        tex_source: Complete TeX document
        compile_dir: Working and output directory (must exist)
        jobname: Stem for the .tex, .log and .pdf files
        num_passes: Number of engine passes (ignored by self-rerunning engines)
        keep_artifacts: Keep intermediate files (default: from KEEP_LATEX_ARTIFACTS env)
        compiler: Engine executable (default: from LATEX_COMPILER env)
        verbose: Log full engine output even on success

    Returns:
        CompilationResult with success status and diagnostic information

    Raises:
        RecipeIOError: If the TeX source cannot be written to compile_dir
    """
    compile_dir = Path(compile_dir)
    engine = Path(compiler).name

    if shutil.which(compiler) is None:
        return CompilationResult(
            success=False, errors=[f"LaTeX compiler not found on PATH: {compiler}"]
        )
    if engine not in TEX_ENGINES | SELF_RERUNNING_ENGINES:
        _log_debug(f"Unknown engine '{engine}', assuming pdflatex-compatible command line")

    tex_file = compile_dir / f"{jobname}.tex"
    try:
        tex_file.write_text(tex_source, encoding="utf-8")
    except OSError as e:
        _log_error(f"Cannot write TeX source: {tex_file}")
        raise RecipeIOError("Cannot write TeX source", path=tex_file, original_error=e) from e

    # Clean any existing output files to ensure unambiguous success detection
    # Missing log file → compilation failed; existing PDF → compilation succeeded
    for ext in [".pdf"] + LATEX_ARTIFACTS:
        old_file = compile_dir / f"{jobname}{ext}"
        if old_file.exists():
            old_file.unlink()

    if engine in SELF_RERUNNING_ENGINES:
        num_passes = 1
    num_passes = max(1, num_passes)

    log_compilation_start(engine, jobname, num_passes, compile_dir)
    start_time = time.time()

    all_stdout = []
    all_stderr = []

    # Multiple passes needed for cross-references, TOC, and page numbers
    for _ in range(num_passes):
        result = subprocess.run(
            _build_command(compiler, tex_file.name, compile_dir),
            cwd=compile_dir,
            capture_output=True,
            text=True,
            encoding="utf-8",
            errors="replace",  # Replace invalid UTF-8 bytes instead of crashing
            env=_engine_env(),
        )

        all_stdout.append(result.stdout)
        all_stderr.append(result.stderr)

        # Non-zero return with -halt-on-error means a fatal error; further passes are pointless
        if result.returncode != 0:
            break

    # Parse log file for detailed errors and warnings
    log_file = compile_dir / f"{jobname}.log"
    errors = []
    warnings = []

    if log_file.exists():
        # pdflatex writes log files in latin-1 encoding (font metadata contains non-UTF-8)
        log_content = log_file.read_text(encoding="latin-1")
        errors, warnings = _parse_latex_log(log_content)
    elif result.returncode != 0:
        errors, warnings = _parse_latex_log(result.stdout + "\n" + result.stderr)

    # PDF exists and no LaTeX errors found - consider it a success
    pdf_path = compile_dir / f"{jobname}.pdf"
    success = pdf_path.exists() and len(errors) == 0
    if not pdf_path.exists() and not errors:
        errors.append(f"PDF file was not generated ({engine} exited with code {result.returncode})")

    if not keep_artifacts:
        _remove_artifacts(compile_dir, jobname)

    compilation = CompilationResult(
        success=success,
        pdf_path=pdf_path if pdf_path.exists() else None,
        stdout="\n".join(all_stdout),
        stderr="\n".join(all_stderr),
        errors=errors,
        warnings=warnings,
        page_count=page_count(pdf_path) if pdf_path.exists() else None,
    )

    log_compilation_result(engine, compilation, time.time() - start_time, verbose=verbose)

    return compilation
