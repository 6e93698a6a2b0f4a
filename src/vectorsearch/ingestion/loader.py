"""Text extraction dispatch by file type."""

from __future__ import annotations

import logging
from pathlib import Path

from vectorsearch.ingestion.pdf_loader import extract_pdf_text

LOGGER = logging.getLogger(__name__)


def extract_text(path: Path) -> str:
    """Return the text of `path`, or an empty string if nothing could be read.

    PDFs go through PyMuPDF; every other file is read as UTF-8 with invalid
    bytes replaced.
    """
    path = Path(path)
    try:
        if path.suffix.lower() == ".pdf":
            return extract_pdf_text(path)
        return path.read_text(encoding="utf-8", errors="replace")
    except OSError as exc:
        LOGGER.error("Error extracting text from %s: %s", path, exc)
        return ""
