"""Network tools for MCP."""

import asyncio
from typing import Any, Dict, List, Tuple

from sysinfo_mcp.mcp.registry import mcp_tool
from sysinfo_mcp.utils import system_info
from sysinfo_mcp.utils.async_helpers import run_optional, run_sync
from sysinfo_mcp.utils.formatting import or_na


def summarize_connections(connections: List[Tuple[str, str]]) -> Dict[str, int]:
    """Count (protocol, state) pairs by protocol and by listen/established state."""
    return {
        "total": len(connections),
        "tcp": sum(1 for protocol, _ in connections if protocol == "tcp"),
        "udp": sum(1 for protocol, _ in connections if protocol == "udp"),
        "listening": sum(1 for _, state in connections if state == "listen"),
        "established": sum(1 for _, state in connections if state == "established"),
    }


@mcp_tool(
    name="get_network_info",
    description="Get network interface information, connections, and statistics",
)
async def get_network_info() -> Dict[str, Any]:
    """Zwróć interfejsy sieciowe i podsumowanie połączeń.

    Enumerating sockets needs elevated rights on some systems (macOS);
    in that case connection counts are all zero.
    """
    interfaces, connections = await asyncio.gather(
        run_sync(system_info.network_interfaces),
        run_optional(system_info.network_connections, default=[]),
    )

    return {
        "interfaces": [
            {
                "name": iface["name"],
                "type": iface["type"],
                "ip4": or_na(iface["ip4"]),
                "ip6": or_na(iface["ip6"]),
                "mac": or_na(iface["mac"]),
                "internal": iface["internal"],
                "virtual": iface["virtual"],
                "speed": f"{iface['speed_mbps']} Mbps" if iface["speed_mbps"] else "Unknown",
                "is_up": iface["is_up"],
            }
            for iface in interfaces
        ],
        "connections": summarize_connections(connections),
    }
