"""PDF inspection helpers for compiled output."""

from pathlib import Path
from typing import Optional

from PyPDF2 import PdfReader

PDF_MAGIC = b"%PDF-"


def is_pdf(data: bytes) -> bool:
    """Check for the PDF magic header."""
    return data.startswith(PDF_MAGIC)


def page_count(pdf_path: Path) -> Optional[int]:
    """Get page count from PDF, or None if unreadable."""
    try:
        reader = PdfReader(str(pdf_path))
        return len(reader.pages)
    except Exception:
        return None
