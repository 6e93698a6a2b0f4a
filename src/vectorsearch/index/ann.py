"""Approximate nearest-neighbor backends keyed by catalog index."""

from __future__ import annotations

import logging
from typing import List, Protocol, Tuple, runtime_checkable

import faiss
import numpy as np

LOGGER = logging.getLogger(__name__)

Neighbor = Tuple[int, float]


@runtime_checkable
class AnnIndex(Protocol):
    """Vector store answering k-nearest-neighbor queries.

    `query` returns `(handle, distance)` pairs closest first. Distances are
    non-negative and grow with dissimilarity.
    """

    dimension: int
    capacity: int

    def __len__(self) -> int: ...

    def insert(self, vector: np.ndarray, handle: int) -> None: ...

    def query(self, vector: np.ndarray, k: int) -> List[Neighbor]: ...

    def reinitialize(self, capacity: int) -> None: ...


def _as_vector(vector: np.ndarray, dimension: int) -> np.ndarray:
    array = np.asarray(vector, dtype="float32").reshape(-1)
    if array.shape[0] != dimension:
        raise ValueError(f"Expected vector of dimension {dimension}, got {array.shape[0]}")
    return array


class BruteForceIndex:
    """Exact squared-L2 scan over a preallocated matrix.

    Storage doubles whenever an insert finds it full.
    """

    def __init__(self, dimension: int, capacity: int = 1000) -> None:
        self.dimension = dimension
        self.reinitialize(capacity)

    def reinitialize(self, capacity: int) -> None:
        if capacity < 1:
            raise ValueError("capacity must be positive")
        self.capacity = capacity
        self._vectors = np.zeros((capacity, self.dimension), dtype="float32")
        self._handles = np.zeros(capacity, dtype="int64")
        self._count = 0

    def __len__(self) -> int:
        return self._count

    def _grow(self) -> None:
        new_capacity = self.capacity * 2
        LOGGER.debug("Growing brute-force index from %d to %d", self.capacity, new_capacity)
        vectors = np.zeros((new_capacity, self.dimension), dtype="float32")
        handles = np.zeros(new_capacity, dtype="int64")
        vectors[: self._count] = self._vectors[: self._count]
        handles[: self._count] = self._handles[: self._count]
        self._vectors, self._handles = vectors, handles
        self.capacity = new_capacity

    def insert(self, vector: np.ndarray, handle: int) -> None:
        array = _as_vector(vector, self.dimension)
        if self._count == self.capacity:
            self._grow()
        self._vectors[self._count] = array
        self._handles[self._count] = handle
        self._count += 1

    def query(self, vector: np.ndarray, k: int) -> List[Neighbor]:
        if k < 1 or self._count == 0:
            return []
        query = _as_vector(vector, self.dimension)
        diffs = self._vectors[: self._count] - query
        distances = np.einsum("ij,ij->i", diffs, diffs)

        k = min(k, self._count)
        if k < self._count:
            top = np.argpartition(distances, k - 1)[:k]
            top = top[np.argsort(distances[top], kind="stable")]
        else:
            top = np.argsort(distances, kind="stable")
        return [(int(self._handles[i]), float(distances[i])) for i in top]


class FaissHNSWIndex:
    """HNSW graph from faiss, wrapped in an ID map so handles are catalog indices.

    The graph grows on its own; `capacity` is bookkeeping that doubles when
    reached so callers can see how far the index has grown.
    """

    def __init__(
        self,
        dimension: int,
        capacity: int = 1000,
        *,
        neighbors: int = 16,
        ef_search: int = 64,
    ) -> None:
        self.dimension = dimension
        self.neighbors = neighbors
        self.ef_search = ef_search
        self.reinitialize(capacity)

    def reinitialize(self, capacity: int) -> None:
        if capacity < 1:
            raise ValueError("capacity must be positive")
        self._graph = faiss.IndexHNSWFlat(self.dimension, self.neighbors)
        self._graph.hnsw.efSearch = self.ef_search
        self._index = faiss.IndexIDMap2(self._graph)
        self.capacity = capacity

    def __len__(self) -> int:
        return int(self._index.ntotal)

    def insert(self, vector: np.ndarray, handle: int) -> None:
        array = _as_vector(vector, self.dimension)
        if len(self) >= self.capacity:
            self.capacity *= 2
            LOGGER.info("HNSW index reached capacity, raised to %d", self.capacity)
        self._index.add_with_ids(array.reshape(1, -1), np.array([handle], dtype="int64"))

    def query(self, vector: np.ndarray, k: int) -> List[Neighbor]:
        if k < 1 or len(self) == 0:
            return []
        query = _as_vector(vector, self.dimension).reshape(1, -1)
        distances, labels = self._index.search(query, k)
        # faiss pads with -1 when fewer than k neighbors are reachable.
        return [
            (int(label), float(distance))
            for label, distance in zip(labels[0], distances[0])
            if label != -1
        ]


def create_ann_index(backend: str, dimension: int, capacity: int) -> AnnIndex:
    """Build the ANN backend named in the configuration."""
    if backend == "hnsw":
        return FaissHNSWIndex(dimension, capacity)
    if backend == "flat":
        return BruteForceIndex(dimension, capacity)
    raise ValueError(f"Unknown ANN backend: {backend}")
