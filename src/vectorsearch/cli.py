"""Command line interface for vectorsearch."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List

import typer
from rich.console import Console
from rich.table import Table

from vectorsearch.config import AppConfig
from vectorsearch.errors import VectorSearchError
from vectorsearch.service import build_tools
from vectorsearch.utils.files import DEFAULT_EXTENSIONS

console = Console()
app = typer.Typer(help="vectorsearch - local semantic search over text and PDF files")


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format="[%(levelname)s] %(message)s")


@app.command()
def serve(
    allowed_dirs: List[Path] = typer.Argument(
        ..., help="Directories the server may index."
    ),
    host: str = typer.Option("127.0.0.1", help="Host interface"),
    port: int = typer.Option(8000, help="Server port"),
    model: str = typer.Option(AppConfig().model_name, help="Sentence-transformer model name"),
    max_chunk_chars: int = typer.Option(
        AppConfig().max_chunk_chars, help="Maximum chunk size in characters"
    ),
    backend: str = typer.Option(AppConfig().ann_backend, help="ANN backend: hnsw or flat"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
) -> None:
    """Start the HTTP tool server over the given directories."""
    try:
        import uvicorn
    except ImportError as exc:  # pragma: no cover - defensive
        raise typer.BadParameter("uvicorn is not installed.") from exc

    from vectorsearch.web.app import create_app

    _setup_logging(verbose)
    try:
        config = AppConfig(
            allowed_dirs=list(allowed_dirs),
            model_name=model,
            max_chunk_chars=max_chunk_chars,
            ann_backend=backend,
        )
        tools = build_tools(config)
    except ValueError as exc:
        console.print(f"[red]Error: {exc}[/red]")
        raise typer.Exit(code=1)

    console.print(f"Starting vector search server on http://{host}:{port}")
    console.print("Allowed directories: " + ", ".join(str(d) for d in tools.validator.allowed_dirs))
    uvicorn.run(
        create_app(tools),
        host=host,
        port=port,
        reload=False,
        log_level="debug" if verbose else "info",
    )


@app.command()
def query(
    directory: Path = typer.Argument(..., help="Directory to index before searching."),
    text: str = typer.Argument(..., help="Query text"),
    extension: List[str] = typer.Option(
        list(DEFAULT_EXTENSIONS), "--extension", "-e", help="File extensions to index"
    ),
    exclude: List[str] = typer.Option(
        [], "--exclude", "-x", help="Directory names or glob patterns to skip"
    ),
    top_k: int = typer.Option(AppConfig().num_results, help="Number of results to display"),
    threshold: float = typer.Option(AppConfig().threshold, help="Minimum similarity score"),
    model: str = typer.Option(AppConfig().model_name, help="Sentence-transformer model name"),
    max_chunk_chars: int = typer.Option(
        AppConfig().max_chunk_chars, help="Maximum chunk size in characters"
    ),
    backend: str = typer.Option(AppConfig().ann_backend, help="ANN backend: hnsw or flat"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
) -> None:
    """Index a directory in memory and run one semantic search over it."""
    _setup_logging(verbose)
    try:
        config = AppConfig(
            allowed_dirs=[directory],
            model_name=model,
            max_chunk_chars=max_chunk_chars,
            ann_backend=backend,
        )
        tools = build_tools(config, background=False)
    except ValueError as exc:
        console.print(f"[red]Error: {exc}[/red]")
        raise typer.Exit(code=1)

    indexed = tools.index_directory(str(directory), extension, exclude)
    if indexed.is_error:
        console.print(f"[red]{indexed.text}[/red]")
        raise typer.Exit(code=1)
    console.print(indexed.text)

    try:
        results = tools.coordinator.search(text, num_results=top_k, threshold=threshold)
    except VectorSearchError as exc:
        console.print(f"[red]Error: {exc}[/red]")
        raise typer.Exit(code=1)
    if not results:
        console.print("[yellow]No matches found.[/yellow]")
        return

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Score")
    table.add_column("File")
    table.add_column("Chunk")
    table.add_column("Snippet")

    for result in results:
        snippet = result.chunk.text.replace("\n", " ")
        table.add_row(
            f"{result.score:.4f}",
            str(result.chunk.source_file),
            str(result.chunk.chunk_ordinal),
            snippet[:180],
        )

    console.print(table)
