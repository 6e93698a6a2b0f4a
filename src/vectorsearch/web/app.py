"""FastAPI application exposing the vector search tools."""

from __future__ import annotations

import asyncio
import logging
from typing import List

from fastapi import Depends, FastAPI, Request
from pydantic import AliasChoices, BaseModel, Field

from vectorsearch import __version__
from vectorsearch.tools import ToolResult, VectorSearchTools
from vectorsearch.utils.files import DEFAULT_EXTENSIONS

LOGGER = logging.getLogger(__name__)


class ToolResponse(BaseModel):
    text: str
    is_error: bool = False


class IndexFilePayload(BaseModel):
    path: str = Field(validation_alias=AliasChoices("path", "file_path"))


class IndexDirectoryPayload(BaseModel):
    path: str = Field(validation_alias=AliasChoices("path", "dir_path", "directory"))
    extensions: List[str] = Field(default_factory=lambda: list(DEFAULT_EXTENSIONS))
    exclude_patterns: List[str] = Field(
        default_factory=list,
        validation_alias=AliasChoices("excludePatterns", "exclude_patterns"),
    )


class SearchPayload(BaseModel):
    query: str = Field(validation_alias=AliasChoices("query", "q", "search_query", "text"))
    num_results: int | None = Field(
        default=None,
        ge=1,
        validation_alias=AliasChoices("numResults", "num_results", "limit"),
    )
    threshold: float | None = None


def get_tools(request: Request) -> VectorSearchTools:
    return request.app.state.tools


def _respond(result: ToolResult) -> ToolResponse:
    if result.is_error:
        LOGGER.warning(result.text)
    return ToolResponse(text=result.text, is_error=result.is_error)


def create_app(tools: VectorSearchTools) -> FastAPI:
    """Build the HTTP app around an already wired tools object."""
    app = FastAPI(title="vectorsearch", version=__version__)
    app.state.tools = tools

    # Coordinator calls block (model inference, readiness wait), so they run in threads.

    @app.post("/tools/index_file")
    async def index_file(
        payload: IndexFilePayload, tools: VectorSearchTools = Depends(get_tools)
    ) -> ToolResponse:
        return _respond(await asyncio.to_thread(tools.index_file, payload.path))

    @app.post("/tools/index_directory")
    async def index_directory(
        payload: IndexDirectoryPayload, tools: VectorSearchTools = Depends(get_tools)
    ) -> ToolResponse:
        result = await asyncio.to_thread(
            tools.index_directory,
            payload.path,
            payload.extensions,
            payload.exclude_patterns,
        )
        return _respond(result)

    @app.post("/tools/search")
    async def search(
        payload: SearchPayload, tools: VectorSearchTools = Depends(get_tools)
    ) -> ToolResponse:
        result = await asyncio.to_thread(
            tools.search, payload.query, payload.num_results, payload.threshold
        )
        return _respond(result)

    @app.post("/tools/clear_index")
    async def clear_index(tools: VectorSearchTools = Depends(get_tools)) -> ToolResponse:
        return _respond(await asyncio.to_thread(tools.clear_index))

    @app.get("/tools/get_index_stats")
    async def get_index_stats(tools: VectorSearchTools = Depends(get_tools)) -> ToolResponse:
        return _respond(await asyncio.to_thread(tools.get_index_stats))

    @app.get("/tools/list_indexed_files")
    async def list_indexed_files(tools: VectorSearchTools = Depends(get_tools)) -> ToolResponse:
        return _respond(await asyncio.to_thread(tools.list_indexed_files))

    @app.get("/tools/list_allowed_directories")
    async def list_allowed_directories(
        tools: VectorSearchTools = Depends(get_tools),
    ) -> ToolResponse:
        return _respond(tools.list_allowed_directories())

    return app
