"""Text helpers including paragraph-aware chunking."""

from __future__ import annotations

import re
from typing import List

DEFAULT_MAX_CHARS = 512

_PARAGRAPH_BREAK = re.compile(r"\n\s*\n")


def split_paragraphs(text: str) -> List[str]:
    """Split text on blank lines, dropping empty pieces."""
    return [part for part in _PARAGRAPH_BREAK.split(text) if part]


def chunk_text(text: str, *, max_chars: int = DEFAULT_MAX_CHARS) -> List[str]:
    """Pack paragraphs greedily into chunks of at most `max_chars` characters.

    Paragraphs are joined with a blank line. A paragraph longer than
    `max_chars` on its own is cut to its first `max_chars` characters and
    the rest of it is discarded. Never returns an empty list: input that
    yields no chunks comes back as a single chunk holding the original text.
    """
    if max_chars <= 0:
        raise ValueError("max_chars must be positive")

    chunks: List[str] = []
    buffer = ""
    for paragraph in split_paragraphs(text):
        candidate = f"{buffer}\n\n{paragraph}" if buffer else paragraph
        if len(candidate) <= max_chars:
            buffer = candidate
            continue

        if buffer:
            chunks.append(buffer)
        if len(paragraph) > max_chars:
            chunks.append(paragraph[:max_chars])
            buffer = ""
        else:
            buffer = paragraph

    if buffer:
        chunks.append(buffer)

    return chunks or [text]

