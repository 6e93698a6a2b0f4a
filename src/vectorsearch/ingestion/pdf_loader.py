"""PDF text extraction.

Uses PyMuPDF (fitz) for fast PDF text extraction.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterator

import fitz  # PyMuPDF

LOGGER = logging.getLogger(__name__)


def iter_text_parts(path: Path) -> Iterator[str]:
    """Yield the stripped text of each PDF page that has any."""
    try:
        doc = fitz.open(path)
    except Exception as exc:
        LOGGER.error("Failed to open PDF %s: %s", path, exc)
        return

    try:
        for index in range(len(doc)):
            try:
                text = (doc[index].get_text() or "").strip()
            except Exception as exc:  # pragma: no cover - defensive path
                LOGGER.warning("Failed to read page %s in %s: %s", index, path, exc)
                continue
            if text:
                yield text
    finally:
        doc.close()


def extract_pdf_text(path: Path) -> str:
    """Return the text of a PDF with pages separated by blank lines."""
    return "\n\n".join(iter_text_parts(path))
