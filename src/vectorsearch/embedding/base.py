"""Embedder contract consumed by the index coordinator."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

import numpy as np


@runtime_checkable
class Embedder(Protocol):
    """Maps text to a fixed-length float32 vector.

    `embed` raises `vectorsearch.errors.EmbeddingError` when no vector can
    be produced. `dimension` must not change for the embedder's lifetime.
    """

    dimension: int

    def embed(self, text: str) -> np.ndarray: ...
