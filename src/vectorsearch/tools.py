"""Tool operations exposed to the hosting protocol layer.

Each operation returns a `ToolResult`: one text payload plus an error flag.
Failures inside an operation are reported in the payload instead of raised.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Sequence

from vectorsearch.config import AppConfig
from vectorsearch.errors import ExtractionFailure, VectorSearchError
from vectorsearch.index.coordinator import IndexCoordinator
from vectorsearch.ingestion.loader import extract_text
from vectorsearch.models import CatalogStats, DocumentReport, SearchResult
from vectorsearch.utils.files import iter_document_paths
from vectorsearch.utils.paths import PathValidator

LOGGER = logging.getLogger(__name__)

_OPERATION_ERRORS = (VectorSearchError, ValueError, OSError)


@dataclass(slots=True)
class ToolResult:
    text: str
    is_error: bool = False

    @classmethod
    def error(cls, exc: BaseException | str) -> "ToolResult":
        return cls(text=f"Error: {exc}", is_error=True)


@dataclass(slots=True)
class DirectoryStats:
    indexed: int = 0
    empty: int = 0
    failed: int = 0
    messages: List[str] = field(default_factory=list)

    def increment(self, status: str, path: Path, detail: str = "") -> None:
        if status == "indexed":
            self.indexed += 1
            self.messages.append(f"Successfully indexed {path}{detail}")
        elif status == "empty":
            self.empty += 1
            self.messages.append(f"No text extracted from {path}")
        else:
            self.failed += 1
            self.messages.append(f"Error indexing {path}: {detail}")


def _skipped_suffix(report: DocumentReport) -> str:
    if not report.chunks_failed:
        return ""
    return f" ({report.chunks_failed} chunks skipped after embedding errors)"


def format_results(results: Sequence[SearchResult]) -> str:
    blocks = [
        f"Result {position} (score: {result.score:.4f})\n"
        f"File: {result.chunk.source_file}\n---\n{result.chunk.text}\n"
        for position, result in enumerate(results, start=1)
    ]
    return "\n---\n\n".join(blocks)


def format_stats(stats: CatalogStats) -> str:
    file_types = "\n".join(
        f"{ext}: {count} files" for ext, count in stats.extension_counts.items()
    )
    return (
        f"Total document chunks: {stats.chunk_count}\n\n"
        f"File types:\n{file_types or 'No files indexed'}"
    )


class VectorSearchTools:
    """Validates, extracts and delegates to the coordinator for each operation."""

    def __init__(
        self,
        coordinator: IndexCoordinator,
        validator: PathValidator,
        config: AppConfig | None = None,
    ) -> None:
        self.coordinator = coordinator
        self.validator = validator
        self.config = config or AppConfig()

    def _index_path(self, path: Path, requested: str | None = None) -> DocumentReport:
        text = extract_text(path)
        if not text:
            raise ExtractionFailure(f"Could not extract text from {requested or path}")
        return self.coordinator.add_document(path, text)

    def index_file(self, path: str) -> ToolResult:
        try:
            valid_path = self.validator.validate(path)
            if not valid_path.is_file():
                raise FileNotFoundError(f"Not a file: {path}")
            report = self._index_path(valid_path, path)
        except _OPERATION_ERRORS as exc:
            return ToolResult.error(exc)
        return ToolResult(f"Successfully indexed {path}{_skipped_suffix(report)}")

    def index_directory(
        self,
        path: str,
        extensions: Sequence[str] | None = None,
        exclude_patterns: Sequence[str] | None = None,
    ) -> ToolResult:
        try:
            valid_path = self.validator.validate(path)
            if not valid_path.is_dir():
                raise NotADirectoryError(f"Not a directory: {path}")
            files = list(
                iter_document_paths(
                    valid_path,
                    extensions=extensions or self.config.extensions,
                    exclude_patterns=exclude_patterns or (),
                )
            )
        except _OPERATION_ERRORS as exc:
            return ToolResult.error(exc)

        if not files:
            return ToolResult(f"No matching files found in {path}")

        stats = DirectoryStats()
        for file in files:
            try:
                # Symlinks under the root may point outside the allowed directories.
                file = self.validator.validate(file)
                report = self._index_path(file)
            except ExtractionFailure:
                stats.increment("empty", file)
            except Exception as exc:
                LOGGER.error("Failed to index %s: %s", file, exc)
                stats.increment("failed", file, str(exc))
            else:
                stats.increment("indexed", file, _skipped_suffix(report))

        LOGGER.info(
            "Directory %s: %d indexed, %d empty, %d failed",
            valid_path,
            stats.indexed,
            stats.empty,
            stats.failed,
        )
        return ToolResult(f"Indexed {len(files)} files:\n" + "\n".join(stats.messages))

    def search(
        self,
        query: str,
        num_results: int | None = None,
        threshold: float | None = None,
    ) -> ToolResult:
        if not query or not query.strip():
            return ToolResult.error("No search query provided")
        try:
            results = self.coordinator.search(
                query,
                num_results=num_results or self.config.num_results,
                threshold=self.config.threshold if threshold is None else threshold,
            )
        except VectorSearchError as exc:
            return ToolResult.error(exc)

        if not results:
            return ToolResult("No matching documents found.")
        return ToolResult(format_results(results))

    def clear_index(self) -> ToolResult:
        self.coordinator.clear()
        return ToolResult("Vector index successfully cleared.")

    def get_index_stats(self) -> ToolResult:
        return ToolResult(format_stats(self.coordinator.stats()))

    def list_indexed_files(self) -> ToolResult:
        files = self.coordinator.list_indexed_files()
        if not files:
            return ToolResult("No files have been indexed.")
        return ToolResult("\n".join(str(f) for f in files))

    def list_allowed_directories(self) -> ToolResult:
        directories = "\n".join(str(d) for d in self.validator.allowed_dirs)
        return ToolResult(f"Allowed directories:\n{directories}")
