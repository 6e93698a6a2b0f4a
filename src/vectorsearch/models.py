"""Core vectorsearch data models."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List

import numpy as np


@dataclass(slots=True)
class Chunk:
    """Slice of a source document, addressed by its catalog index."""

    catalog_index: int
    source_file: Path
    chunk_ordinal: int
    text: str
    vector: np.ndarray | None = None


@dataclass(slots=True)
class SearchResult:
    score: float
    chunk: Chunk


@dataclass(slots=True)
class CatalogStats:
    chunk_count: int = 0
    extension_counts: Dict[str, int] = field(default_factory=dict)


@dataclass(slots=True)
class DocumentReport:
    """Outcome of indexing one document."""

    source_file: Path
    chunks_added: int = 0
    failed_ordinals: List[int] = field(default_factory=list)

    @property
    def chunks_failed(self) -> int:
        return len(self.failed_ordinals)
