"""MCP server implementation for loftscope."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import TextContent, Tool

from loftscope.cli import entity_to_dict
from loftscope.core.logging import configure_logging
from loftscope.session import AnalysisSession

server = Server("loftscope")

_session: AnalysisSession | None = None


def _get_session() -> AnalysisSession:
    """Session for the current directory, created on first use."""
    global _session
    if _session is None:
        _session = AnalysisSession(Path.cwd())
        configure_logging(_session.config.logging)
    return _session


def _file_schema(*, position: bool = False) -> dict[str, Any]:
    properties: dict[str, Any] = {
        "path": {
            "type": "string",
            "description": "Path of the .pf file, absolute or relative to the project root",
        },
        "text": {
            "type": "string",
            "description": "Unsaved buffer contents to analyse instead of the file on disk (optional)",
        },
    }
    required = ["path"]
    if position:
        properties["line"] = {"type": "integer", "description": "Line, 1-based"}
        properties["column"] = {"type": "integer", "description": "Column, 1-based"}
        required += ["line", "column"]
    return {"type": "object", "properties": properties, "required": required}


@server.list_tools()  # type: ignore[no-untyped-call, untyped-decorator]
async def list_tools() -> list[Tool]:
    """List available tools."""
    return [
        Tool(
            name="loftscope_symbols",
            description=(
                "List the classes, enums, records and interfaces declared in a Polyloft file, "
                "with their members and inheritance clauses."
            ),
            inputSchema=_file_schema(),
        ),
        Tool(
            name="loftscope_lint",
            description=(
                "Diagnostics for a Polyloft file: type incompatibilities, import visibility "
                "violations, unresolved imports, block structure and style hints."
            ),
            inputSchema=_file_schema(),
        ),
        Tool(
            name="loftscope_complete",
            description=(
                "Completion candidates at a position. After 'receiver.' only the receiver's "
                "visible members are returned, inherited ones included."
            ),
            inputSchema=_file_schema(position=True),
        ),
        Tool(
            name="loftscope_hover",
            description="Signature and documentation of the symbol at a position.",
            inputSchema=_file_schema(position=True),
        ),
        Tool(
            name="loftscope_definition",
            description="File, line and column where the symbol at a position is declared.",
            inputSchema=_file_schema(position=True),
        ),
    ]


@server.call_tool()  # type: ignore[untyped-decorator]
async def call_tool(name: str, arguments: dict[str, Any]) -> list[TextContent]:
    """Handle tool calls."""
    try:
        if name == "loftscope_symbols":
            result = _handle_symbols(arguments["path"], arguments.get("text"))
        elif name == "loftscope_lint":
            result = _handle_lint(arguments["path"], arguments.get("text"))
        elif name == "loftscope_complete":
            result = _handle_complete(
                arguments["path"], arguments["line"], arguments["column"], arguments.get("text")
            )
        elif name == "loftscope_hover":
            result = _handle_hover(
                arguments["path"], arguments["line"], arguments["column"], arguments.get("text")
            )
        elif name == "loftscope_definition":
            result = _handle_definition(
                arguments["path"], arguments["line"], arguments["column"], arguments.get("text")
            )
        else:
            result = {"error": f"Unknown tool: {name}"}

        return [TextContent(type="text", text=json.dumps(result, indent=2))]

    except Exception as e:
        return [TextContent(type="text", text=json.dumps({"error": str(e)}))]


def _resolve(path: str, session: AnalysisSession) -> Path:
    file = Path(path)
    return file if file.is_absolute() else session.project_root / file


def _handle_symbols(path: str, text: str | None = None) -> dict[str, Any]:
    """Handle loftscope_symbols tool."""
    session = _get_session()
    entities = session.symbols(_resolve(path, session), text)
    return {"results": [entity_to_dict(e) for e in entities]}


def _handle_lint(path: str, text: str | None = None) -> dict[str, Any]:
    """Handle loftscope_lint tool."""
    session = _get_session()
    diagnostics = session.lint(_resolve(path, session), text)
    return {"results": [d.to_dict() for d in diagnostics]}


def _handle_complete(path: str, line: int, column: int, text: str | None = None) -> dict[str, Any]:
    """Handle loftscope_complete tool."""
    session = _get_session()
    items = session.complete(_resolve(path, session), line, column, text)
    return {"results": [item.to_dict() for item in items]}


def _handle_hover(path: str, line: int, column: int, text: str | None = None) -> dict[str, Any]:
    """Handle loftscope_hover tool."""
    session = _get_session()
    info = session.hover(_resolve(path, session), line, column, text)
    return {"result": info.to_dict() if info else None}


def _handle_definition(path: str, line: int, column: int, text: str | None = None) -> dict[str, Any]:
    """Handle loftscope_definition tool."""
    session = _get_session()
    location = session.definition(_resolve(path, session), line, column, text)
    return {"result": location.to_dict() if location else None}


async def serve() -> None:
    """Run the MCP server."""
    async with stdio_server() as (read_stream, write_stream):
        await server.run(read_stream, write_stream, server.create_initialization_options())
