"""Wiring of configuration, backends, coordinator and tools."""

from __future__ import annotations

import logging
import os
import signal

from vectorsearch.config import AppConfig
from vectorsearch.embedding.encoder import EmbeddingConfig, SentenceTransformerEmbedder
from vectorsearch.index.ann import create_ann_index
from vectorsearch.index.coordinator import BackendLoader, IndexCoordinator
from vectorsearch.tools import VectorSearchTools
from vectorsearch.utils.paths import PathValidator

LOGGER = logging.getLogger(__name__)


def make_backend_loader(config: AppConfig) -> BackendLoader:
    """Return a callable that loads the embedding model and builds a matching ANN index."""

    def _load():
        embedder = SentenceTransformerEmbedder(
            EmbeddingConfig(model_name=config.model_name, cache_folder=config.cache_folder)
        )
        ann_index = create_ann_index(
            config.ann_backend, embedder.dimension, config.initial_capacity
        )
        return embedder, ann_index

    return _load


def terminate_process(exc: BaseException) -> None:
    """Initialization failures cannot be recovered from; stop the server."""
    LOGGER.critical("Fatal error during startup, shutting down: %s", exc)
    os.kill(os.getpid(), signal.SIGTERM)


def build_tools(
    config: AppConfig,
    *,
    background: bool = True,
    loader: BackendLoader | None = None,
) -> VectorSearchTools:
    """Create the tool layer for `config`.

    With `background` the model loads on a separate thread and operations
    block until it is ready; otherwise this call loads it before returning.
    """
    validator = PathValidator(config.resolve_allowed_dirs())
    coordinator = IndexCoordinator(
        max_chunk_chars=config.max_chunk_chars,
        initial_capacity=config.initial_capacity,
    )
    loader = loader or make_backend_loader(config)

    if background:
        coordinator.start_background_initialization(loader, on_failure=terminate_process)
    else:
        coordinator.initialize(*loader())

    return VectorSearchTools(coordinator, validator, config)
