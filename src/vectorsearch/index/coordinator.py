"""Indexing and retrieval pipeline."""

from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Callable, List, Tuple

from vectorsearch.embedding.base import Embedder
from vectorsearch.errors import EmbeddingError, EmbeddingUnavailable, InternalInconsistency
from vectorsearch.index.ann import AnnIndex
from vectorsearch.index.catalog import ChunkNotFound, DocumentCatalog
from vectorsearch.models import CatalogStats, DocumentReport, SearchResult
from vectorsearch.utils.text import DEFAULT_MAX_CHARS, chunk_text

LOGGER = logging.getLogger(__name__)

BackendLoader = Callable[[], Tuple[Embedder, AnnIndex]]


def similarity_from_distance(distance: float) -> float:
    """Map a non-negative distance to a score in (0, 1], reaching 1 only at 0."""
    return 1.0 / (1.0 + distance)


class IndexCoordinator:
    """Owns the catalog and the ANN backend and keeps them in lock-step.

    Starts out uninitialized. Every public operation blocks until
    `initialize` has supplied an embedder and an ANN index; after that the
    wait is a no-op. Catalog and ANN mutations happen under one lock, so a
    chunk's catalog index is always the handle stored in the ANN backend.
    """

    def __init__(
        self,
        *,
        max_chunk_chars: int = DEFAULT_MAX_CHARS,
        initial_capacity: int = 1000,
    ) -> None:
        self.max_chunk_chars = max_chunk_chars
        self.initial_capacity = initial_capacity
        self.catalog = DocumentCatalog()
        self._embedder: Embedder | None = None
        self._ann: AnnIndex | None = None
        self._ready = threading.Event()
        self._lock = threading.RLock()

    @property
    def is_ready(self) -> bool:
        return self._ready.is_set()

    def initialize(self, embedder: Embedder, ann_index: AnnIndex) -> None:
        """Attach the backends and release every waiting caller."""
        if self._ready.is_set():
            raise RuntimeError("Index coordinator is already initialized")
        if embedder.dimension != ann_index.dimension:
            raise ValueError(
                f"Embedder dimension {embedder.dimension} does not match "
                f"ANN index dimension {ann_index.dimension}"
            )

        with self._lock:
            self._embedder = embedder
            self._ann = ann_index
            self._ann.reinitialize(self.initial_capacity)
        self._ready.set()
        LOGGER.info("Vector store initialized (dimension %d)", embedder.dimension)

    def start_background_initialization(
        self,
        loader: BackendLoader,
        *,
        on_failure: Callable[[BaseException], None] | None = None,
    ) -> threading.Thread:
        """Run `loader` on a daemon thread and initialize with its result.

        A loader failure is fatal: it is logged and handed to `on_failure`,
        or re-raised on the thread when no callback is given. Callers already
        waiting stay blocked.
        """

        def _run() -> None:
            LOGGER.info("Initializing embedding model...")
            try:
                embedder, ann_index = loader()
                self.initialize(embedder, ann_index)
            except Exception as exc:
                LOGGER.critical("Error initializing vector store: %s", exc)
                if on_failure is None:
                    raise
                on_failure(exc)

        thread = threading.Thread(target=_run, name="vectorsearch-init", daemon=True)
        thread.start()
        return thread

    def wait_until_ready(self) -> None:
        if not self._ready.is_set():
            LOGGER.debug("Waiting for the vector store to initialize")
            self._ready.wait()

    def add_document(self, source_file: Path, raw_text: str) -> DocumentReport:
        """Chunk, embed and index one document.

        Chunks whose embedding fails are skipped and reported; chunks already
        added for this document stay in the index.
        """
        self.wait_until_ready()
        source_file = Path(source_file)
        chunks = chunk_text(raw_text, max_chars=self.max_chunk_chars)
        report = DocumentReport(source_file=source_file)

        with self._lock:
            for ordinal, text in enumerate(chunks):
                try:
                    vector = self._embedder.embed(text)
                except EmbeddingError as exc:
                    LOGGER.warning("Skipping chunk %d of %s: %s", ordinal, source_file, exc)
                    report.failed_ordinals.append(ordinal)
                    continue

                # ANN first: a vector it rejects must not reach the catalog.
                catalog_index = len(self.catalog)
                self._ann.insert(vector, catalog_index)
                self.catalog.append(source_file, ordinal, text, vector)
                report.chunks_added += 1

        LOGGER.debug(
            "Indexed %s: %d chunks added, %d skipped",
            source_file,
            report.chunks_added,
            report.chunks_failed,
        )
        return report

    def search(
        self, query: str, num_results: int = 5, threshold: float = 0.7
    ) -> List[SearchResult]:
        """Return up to `num_results` chunks scoring at least `threshold`, closest first."""
        self.wait_until_ready()
        if num_results < 1 or len(self.catalog) == 0:
            return []

        try:
            query_vector = self._embedder.embed(query)
        except EmbeddingError as exc:
            raise EmbeddingUnavailable("Failed to generate embedding for query") from exc

        with self._lock:
            k = min(num_results, len(self.catalog))
            neighbors = self._ann.query(query_vector, k)

            results: List[SearchResult] = []
            for handle, distance in neighbors:
                score = similarity_from_distance(distance)
                if score < threshold:
                    continue
                try:
                    chunk = self.catalog.get(handle)
                except ChunkNotFound as exc:
                    raise InternalInconsistency(
                        f"ANN index returned handle {handle} with no catalog entry"
                    ) from exc
                results.append(SearchResult(score=score, chunk=chunk))
        return results

    def clear(self) -> None:
        self.wait_until_ready()
        with self._lock:
            self.catalog.clear()
            self._ann.reinitialize(self.initial_capacity)
        LOGGER.info("Vector index cleared")

    def stats(self) -> CatalogStats:
        self.wait_until_ready()
        with self._lock:
            return self.catalog.stats()

    def list_indexed_files(self) -> List[Path]:
        self.wait_until_ready()
        with self._lock:
            return self.catalog.list_files()
