"""MCP Tools package.

Pakiet zawierający implementacje narzędzi MCP.
"""

# Import tools to register them with the registry
from sysinfo_mcp.mcp.tools import hardware
from sysinfo_mcp.mcp.tools import processes
from sysinfo_mcp.mcp.tools import system
from sysinfo_mcp.mcp.tools import network
from sysinfo_mcp.mcp.tools import monitors

__all__ = [
    "hardware",
    "processes",
    "system",
    "network",
    "monitors",
]
