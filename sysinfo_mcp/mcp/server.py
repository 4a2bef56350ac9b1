"""MCP stdio server.

Udostępnia narzędzia z rejestru przez oficjalne SDK MCP (transport stdio),
tak jak oczekują tego klienci typu desktop LLM.
"""

import logging
from typing import Any, Dict, List, Optional

import mcp.types as types
from mcp.server.lowlevel import Server
from mcp.server.stdio import stdio_server

from sysinfo_mcp import __version__
from sysinfo_mcp.mcp.registry import ToolInvokeResult, ToolRegistry, registry
from sysinfo_mcp.mcp import tools as _  # noqa: F401 - triggers tool registration

logger = logging.getLogger(__name__)

SERVER_NAME = "system-info-mcp-server"


def to_mcp_tools(tool_registry: ToolRegistry) -> List[types.Tool]:
    """Zamień definicje z rejestru na typy MCP."""
    return [
        types.Tool(name=tool.name, description=tool.description, inputSchema=tool.args_schema)
        for tool in tool_registry.list_tools()
    ]


def to_call_tool_result(result: ToolInvokeResult) -> types.CallToolResult:
    """Opakuj wynik w pojedynczy blok tekstowy (isError dla błędów)."""
    return types.CallToolResult(
        content=[types.TextContent(type="text", text=result.to_text())],
        isError=not result.ok,
    )


def create_server(tool_registry: Optional[ToolRegistry] = None) -> Server:
    """Utwórz serwer MCP obsługujący list_tools i call_tool.

    Args:
        tool_registry: Rejestr narzędzi (domyślnie globalny).

    Returns:
        Skonfigurowany niskopoziomowy serwer MCP.
    """
    tool_registry = tool_registry or registry
    server = Server(SERVER_NAME, version=__version__)

    @server.list_tools()
    async def list_tools() -> List[types.Tool]:
        return to_mcp_tools(tool_registry)

    @server.call_tool()
    async def call_tool(name: str, arguments: Optional[Dict[str, Any]]) -> types.CallToolResult:
        logger.debug("Invoking MCP tool: %s with arguments: %s", name, arguments)
        result = await tool_registry.invoke(name, arguments)
        if not result.ok:
            logger.warning("[MCP] %s -> error: %s", name, result.error)
        return to_call_tool_result(result)

    return server


async def serve_stdio(tool_registry: Optional[ToolRegistry] = None) -> None:
    """Obsługuj żądania MCP na stdin/stdout aż do zamknięcia strumienia."""
    server = create_server(tool_registry)
    async with stdio_server() as (read_stream, write_stream):
        logger.info("System Info MCP Server running on stdio")
        await server.run(read_stream, write_stream, server.create_initialization_options())
