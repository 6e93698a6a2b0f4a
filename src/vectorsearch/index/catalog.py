"""In-memory catalog of indexed chunks."""

from __future__ import annotations

from pathlib import Path
from typing import Dict, List

import numpy as np

from vectorsearch.models import CatalogStats, Chunk


class ChunkNotFound(LookupError):
    """No chunk is stored under the requested catalog index."""


class DocumentCatalog:
    """Append-only sequence of chunks plus per-extension file counts.

    A chunk's position in the sequence is its catalog index, the handle the
    ANN backend stores. The extension histogram counts distinct files, so
    its values always sum to `len(list_files())`.
    """

    def __init__(self) -> None:
        self._chunks: List[Chunk] = []
        # dict keeps first-seen order for list_files
        self._files: Dict[Path, int] = {}
        self._extension_counts: Dict[str, int] = {}

    def __len__(self) -> int:
        return len(self._chunks)

    def append(
        self,
        source_file: Path,
        chunk_ordinal: int,
        text: str,
        vector: np.ndarray | None = None,
    ) -> int:
        source_file = Path(source_file)
        catalog_index = len(self._chunks)
        self._chunks.append(
            Chunk(
                catalog_index=catalog_index,
                source_file=source_file,
                chunk_ordinal=chunk_ordinal,
                text=text,
                vector=vector,
            )
        )

        if source_file not in self._files:
            self._files[source_file] = 0
            ext = source_file.suffix.lower()
            self._extension_counts[ext] = self._extension_counts.get(ext, 0) + 1
        self._files[source_file] += 1
        return catalog_index

    def get(self, catalog_index: int) -> Chunk:
        if not 0 <= catalog_index < len(self._chunks):
            raise ChunkNotFound(f"No chunk with catalog index {catalog_index}")
        return self._chunks[catalog_index]

    def list_files(self) -> List[Path]:
        return list(self._files)

    def chunk_count(self, source_file: Path) -> int:
        return self._files.get(Path(source_file), 0)

    def stats(self) -> CatalogStats:
        return CatalogStats(
            chunk_count=len(self._chunks),
            extension_counts=dict(self._extension_counts),
        )

    def clear(self) -> None:
        self._chunks.clear()
        self._files.clear()
        self._extension_counts.clear()
