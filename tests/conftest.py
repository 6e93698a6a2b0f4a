"""Shared fixtures: a deterministic embedder and a brute-force backed coordinator."""

from __future__ import annotations

import hashlib
from pathlib import Path
from typing import Callable, Dict, Iterable, Sequence

import numpy as np
import pytest

from vectorsearch.config import AppConfig
from vectorsearch.errors import EmbeddingError
from vectorsearch.index.ann import BruteForceIndex
from vectorsearch.index.coordinator import IndexCoordinator
from vectorsearch.tools import VectorSearchTools
from vectorsearch.utils.paths import PathValidator


class FakeEmbedder:
    """Returns fixed vectors for known texts and hash-seeded unit vectors otherwise."""

    def __init__(
        self,
        dimension: int = 8,
        vectors: Dict[str, Sequence[float]] | None = None,
        failing: Iterable[str] = (),
    ) -> None:
        self.dimension = dimension
        self.vectors = dict(vectors or {})
        self.failing = set(failing)
        self.calls: list[str] = []

    def embed(self, text: str) -> np.ndarray:
        self.calls.append(text)
        if text in self.failing:
            raise EmbeddingError(f"cannot embed {text!r}")
        if text in self.vectors:
            return np.asarray(self.vectors[text], dtype="float32")
        seed = int(hashlib.sha256(text.encode("utf-8")).hexdigest()[:8], 16)
        vector = np.random.default_rng(seed).normal(size=self.dimension).astype("float32")
        return vector / np.linalg.norm(vector)


@pytest.fixture
def make_coordinator() -> Callable[..., tuple[IndexCoordinator, FakeEmbedder]]:
    def _make(
        *,
        dimension: int = 8,
        vectors: Dict[str, Sequence[float]] | None = None,
        failing: Iterable[str] = (),
        max_chunk_chars: int = 512,
        capacity: int = 4,
    ) -> tuple[IndexCoordinator, FakeEmbedder]:
        embedder = FakeEmbedder(dimension, vectors, failing)
        coordinator = IndexCoordinator(
            max_chunk_chars=max_chunk_chars, initial_capacity=capacity
        )
        coordinator.initialize(embedder, BruteForceIndex(dimension, capacity))
        return coordinator, embedder

    return _make


@pytest.fixture
def coordinator(make_coordinator) -> IndexCoordinator:
    return make_coordinator()[0]


@pytest.fixture
def allowed_dir(tmp_path: Path) -> Path:
    directory = tmp_path / "allowed"
    directory.mkdir()
    return directory


@pytest.fixture
def make_tools(make_coordinator, allowed_dir: Path) -> Callable[..., VectorSearchTools]:
    def _make(**kwargs) -> VectorSearchTools:
        coordinator, _ = make_coordinator(**kwargs)
        config = AppConfig(allowed_dirs=[allowed_dir])
        return VectorSearchTools(coordinator, PathValidator([allowed_dir]), config)

    return _make


@pytest.fixture
def tools(make_tools) -> VectorSearchTools:
    return make_tools()
