"""Embedding model management."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Literal

import numpy as np
from sentence_transformers import SentenceTransformer

from vectorsearch.errors import EmbeddingError

DEFAULT_MODEL = "sentence-transformers/all-MiniLM-L6-v2"

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class EmbeddingConfig:
    model_name: str = DEFAULT_MODEL
    normalize: bool = True
    backend: Literal["torch", "onnx", "openvino"] = "torch"
    device: str | None = None
    cache_folder: Path | None = None


class SentenceTransformerEmbedder:
    """Thin wrapper around `SentenceTransformer` producing one vector per text.

    Loading is slow, which is why the coordinator loads it off the request
    path. A non-torch backend that fails to load falls back to torch.
    """

    def __init__(self, config: EmbeddingConfig | None = None) -> None:
        self.config = config or EmbeddingConfig()

        try:
            self._model = self._load_model()
        except Exception as e:
            if self.config.backend == "torch":
                raise
            logger.warning(
                f"Failed to load model with backend '{self.config.backend}': {e}. "
                "Falling back to PyTorch."
            )
            self.config.backend = "torch"
            self._model = self._load_model()

        self.dimension = int(self._model.get_sentence_embedding_dimension())
        logger.info(
            f"Loaded {self.config.model_name} | Backend: {self.config.backend} "
            f"| Dimension: {self.dimension}"
        )

    def _load_model(self) -> SentenceTransformer:
        return SentenceTransformer(
            self.config.model_name,
            backend=self.config.backend,
            device=self.config.device,
            cache_folder=str(self.config.cache_folder) if self.config.cache_folder else None,
        )

    def embed(self, text: str) -> np.ndarray:
        """Return a float32 embedding for `text`."""
        try:
            embedding = self._model.encode(
                [text],
                show_progress_bar=False,
                convert_to_numpy=True,
                normalize_embeddings=self.config.normalize,
            )[0]
        except Exception as exc:
            raise EmbeddingError(f"Error generating embedding: {exc}") from exc
        return np.asarray(embedding, dtype="float32")
