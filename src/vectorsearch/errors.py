"""Exception hierarchy shared by the index and tool layers."""

from __future__ import annotations


class VectorSearchError(Exception):
    """Base class for errors raised by vectorsearch."""


class AccessDenied(VectorSearchError):
    """Requested path lies outside the allowed directories."""


class ExtractionFailure(VectorSearchError):
    """No text could be obtained from a file."""


class EmbeddingError(VectorSearchError):
    """The embedder could not produce a vector for a piece of text."""


class EmbeddingUnavailable(EmbeddingError):
    """A query could not be embedded, so it cannot be answered."""


class InternalInconsistency(VectorSearchError):
    """The ANN index returned a handle with no catalog entry."""
