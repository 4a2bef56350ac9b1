"""Monitor tools for MCP."""

from typing import Any, Dict

from sysinfo_mcp.config.settings import settings
from sysinfo_mcp.displays import DisplayDiscovery
from sysinfo_mcp.mcp.registry import mcp_tool


@mcp_tool(
    name="get_monitor_info",
    description="Get information about connected monitors/displays across Windows, macOS, and Linux",
)
async def get_monitor_info() -> Dict[str, Any]:
    """Zwróć listę podłączonych monitorów (nowe wykrywanie przy każdym wywołaniu)."""
    return await DisplayDiscovery(settings=settings).get_monitor_info()
