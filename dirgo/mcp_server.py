"""MCP server exposing the tree / context / dependency builders as tools.

Served over stdio (line-delimited JSON-RPC).  Request framing, ``initialize``,
``tools/list`` and error responses for unknown tools or malformed lines are
handled by the MCP SDK; a failing tool call is reported as a tool error and
the server keeps running.
"""

from __future__ import annotations

import asyncio
from typing import Literal

import structlog
from mcp.server.fastmcp import FastMCP

from dirgo import __version__
from dirgo.context import build_context, build_deps, build_tree
from dirgo.models import ContextResult, ScanOptions

log = structlog.get_logger("dirgo.mcp")

Format = Literal["tree", "toon", "json"]


def render_result(result: ContextResult) -> str:
    """Tool output: the document followed by its size and token estimate."""
    return f"{result.text}\n\n[{result.bytes}B · ~{result.tokens} tokens]"


def _options(
    dir: str,
    depth: int | None,
    focus: str | None,
    include_all: bool,
    ignore: list[str] | None,
) -> ScanOptions:
    return ScanOptions(
        dir=dir or ".",
        ignore=tuple(ignore or ()),
        include_all=include_all,
        depth=depth,
        focus=focus or None,
    )


def create_mcp_server() -> FastMCP:
    """Create a FastMCP server with the dirgo tools registered.

    The builders are synchronous; each call runs in a worker thread so the
    stdio loop keeps serving while a large tree is walked.
    """
    mcp = FastMCP("dirgo")

    @mcp.tool()
    async def dirgo_tree(
        dir: str = ".",
        emoji: bool = False,
        format: Format = "tree",
        depth: int | None = None,
        focus: str | None = None,
        include_all: bool = False,
        ignore: list[str] | None = None,
    ) -> str:
        """Get directory tree structure of a project."""
        options = _options(dir, depth, focus, include_all, ignore)
        log.debug("mcp.tool_call", tool="dirgo_tree", dir=options.dir)
        result = await asyncio.to_thread(build_tree, options, format, emoji)
        return render_result(result)

    @mcp.tool()
    async def dirgo_context(
        dir: str = ".",
        emoji: bool = False,
        format: Format = "tree",
        depth: int | None = None,
        focus: str | None = None,
        include_all: bool = False,
        ignore: list[str] | None = None,
    ) -> str:
        """Get full LLM context including structure, dependencies, and config."""
        options = _options(dir, depth, focus, include_all, ignore)
        log.debug("mcp.tool_call", tool="dirgo_context", dir=options.dir)
        result = await asyncio.to_thread(build_context, options, format, emoji)
        return render_result(result)

    @mcp.tool()
    async def dirgo_deps(
        dir: str = ".",
        emoji: bool = False,
        format: Format = "tree",
        depth: int | None = None,
        focus: str | None = None,
        include_all: bool = False,
        ignore: list[str] | None = None,
    ) -> str:
        """Get project dependencies."""
        options = _options(dir, depth, focus, include_all, ignore)
        log.debug("mcp.tool_call", tool="dirgo_deps", dir=options.dir)
        result = await asyncio.to_thread(build_deps, options, format, emoji)
        return render_result(result)

    return mcp


def serve() -> None:
    """Run the MCP server on stdio until the client disconnects."""
    log.info("mcp.serve", version=__version__)
    create_mcp_server().run()
