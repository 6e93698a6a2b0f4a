"""Application configuration defaults."""

from __future__ import annotations

import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Literal

from vectorsearch.embedding.encoder import DEFAULT_MODEL
from vectorsearch.utils.files import DEFAULT_EXTENSIONS
from vectorsearch.utils.paths import canonical_dir
from vectorsearch.utils.text import DEFAULT_MAX_CHARS


def _get_default_cache_folder() -> Path:
    """Model downloads go to a temp folder, like the rest of the in-memory index."""
    return Path(tempfile.gettempdir()) / "vectorsearch-models"


@dataclass(slots=True)
class AppConfig:
    allowed_dirs: List[Path] = field(default_factory=list)
    model_name: str = DEFAULT_MODEL
    cache_folder: Path | None = None
    max_chunk_chars: int = DEFAULT_MAX_CHARS
    initial_capacity: int = 1000
    ann_backend: Literal["hnsw", "flat"] = "hnsw"
    num_results: int = 5
    threshold: float = 0.7
    extensions: List[str] = field(default_factory=lambda: list(DEFAULT_EXTENSIONS))

    def __post_init__(self) -> None:
        if self.cache_folder is None:
            self.cache_folder = _get_default_cache_folder()
        if self.ann_backend not in ("hnsw", "flat"):
            raise ValueError(f"Unknown ANN backend: {self.ann_backend}")

    def resolve_allowed_dirs(self) -> List[Path]:
        """Canonicalize the allowed directories, failing on any that is not a directory."""
        resolved = []
        for directory in self.allowed_dirs:
            path = canonical_dir(directory)
            if not path.is_dir():
                raise ValueError(f"{directory} is not a directory")
            resolved.append(path)
        return resolved
