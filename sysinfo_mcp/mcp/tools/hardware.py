"""Hardware tools for MCP.

Narzędzia sprzętowe: procesor, pamięć, dyski.
"""

import asyncio
from typing import Any, Dict, List

from sysinfo_mcp.config.settings import settings
from sysinfo_mcp.mcp.registry import mcp_tool
from sysinfo_mcp.utils import system_info
from sysinfo_mcp.utils.async_helpers import run_optional, run_sync
from sysinfo_mcp.utils.formatting import (
    format_gb,
    format_percent,
    format_temperature,
    ratio_percent,
)


@mcp_tool(
    name="get_cpu_info",
    description="Get detailed CPU information including usage, cores, frequency, and temperature",
)
async def get_cpu_info() -> Dict[str, Any]:
    """Zwróć informacje o procesorze.

    Identity, usage sample and temperature are gathered concurrently; a missing
    temperature sensor is reported as "Not available".
    """
    identity, usage, temperature, load = await asyncio.gather(
        run_sync(system_info.cpu_identity),
        run_sync(system_info.cpu_usage, settings.cpu_sample_interval),
        run_optional(system_info.cpu_temperature),
        run_optional(system_info.load_average, default=(0.0, 0.0, 0.0)),
    )

    speed = identity["speed_ghz"]
    return {
        "brand": identity["brand"],
        "manufacturer": identity["manufacturer"],
        "family": identity["family"],
        "model": identity["model"],
        "speed": f"{speed} GHz" if speed else "Unknown",
        "cores": {
            "physical": identity["physical_cores"],
            "logical": identity["logical_cores"],
        },
        "architecture": identity["arch"],
        "usage": {
            "overall": format_percent(usage["overall"]),
            "user": format_percent(usage["user"]),
            "system": format_percent(usage["system"]),
            "idle": format_percent(usage["idle"]),
        },
        "temperature": format_temperature(temperature),
        "load_average": [f"{value:.2f}" for value in load],
    }


@mcp_tool(
    name="get_memory_info",
    description="Get memory usage information including RAM and swap details",
)
async def get_memory_info() -> Dict[str, Any]:
    """Zwróć użycie pamięci RAM i swap."""
    mem, swap = await run_sync(system_info.memory_snapshot)
    return {
        "total": format_gb(mem.total),
        "used": format_gb(mem.used),
        "free": format_gb(mem.free),
        "available": format_gb(mem.available),
        "usage_percent": ratio_percent(mem.used, mem.total),
        "swap": {
            "total": format_gb(swap.total),
            "used": format_gb(swap.used),
            "free": format_gb(swap.free),
        },
    }


@mcp_tool(
    name="get_disk_usage",
    description="Get disk usage information for all mounted drives and filesystems",
)
async def get_disk_usage() -> List[Dict[str, Any]]:
    disks = await run_sync(system_info.disk_partitions)
    return [
        {
            "filesystem": disk["device"],
            "mount_point": disk["mountpoint"],
            "total": format_gb(disk["total"]),
            "used": format_gb(disk["used"]),
            "available": format_gb(disk["free"]),
            "usage_percent": format_percent(disk["percent"]),
            "type": disk["fstype"],
        }
        for disk in disks
    ]
