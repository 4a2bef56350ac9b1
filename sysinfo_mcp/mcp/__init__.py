"""MCP (Model Context Protocol) module.

Moduł zapewnia rejestr narzędzi MCP wspólny dla transportu stdio
(oficjalne SDK MCP) i HTTP (FastAPI).
"""

from sysinfo_mcp.mcp.registry import (
    Tool,
    ToolInvokeResult,
    ToolRegistry,
    registry,
    mcp_tool,
)

__all__ = [
    "Tool",
    "ToolInvokeResult",
    "ToolRegistry",
    "registry",
    "mcp_tool",
]
