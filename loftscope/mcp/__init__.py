"""
MCP server for loftscope.

Exposes the Polyloft semantic model to LLMs via the Model Context Protocol.

Tools:
    - loftscope_symbols: Entities and members declared in a file
    - loftscope_lint: Diagnostics for a file
    - loftscope_complete: Completion candidates at a position
    - loftscope_hover: Signature and documentation at a position
    - loftscope_definition: Declaration location at a position

Every tool takes an optional ``text`` with unsaved buffer contents.

Usage:
    Run: loftscope-mcp
"""

import asyncio

from loftscope.mcp.server import serve as _serve


def serve() -> None:
    """Entry point for the MCP server."""
    asyncio.run(_serve())


__all__ = ["serve"]
