"""System tools for MCP.

Narzędzia systemowe: informacje o systemie operacyjnym, szybkie statystyki.
"""

import asyncio
import platform
from typing import Any, Dict, List, Optional

import psutil

from sysinfo_mcp.config.settings import settings
from sysinfo_mcp.mcp.registry import mcp_tool
from sysinfo_mcp.utils import system_info
from sysinfo_mcp.utils.async_helpers import run_optional, run_sync
from sysinfo_mcp.utils.formatting import format_gb, format_percent, format_uptime, or_na, ratio_percent


@mcp_tool(
    name="get_system_info",
    description="Get general system information including OS, uptime, hardware details",
)
async def get_system_info() -> Dict[str, Any]:
    """Zwróć informacje o systemie.

    Returns:
        OS details, hardware identity, uptime, hostname and current user.
        The hardware UUID usually needs elevated rights and falls back to "N/A".
    """
    os_info, hardware, uuid, uptime = await asyncio.gather(
        run_sync(system_info.os_details),
        run_sync(system_info.hardware_details),
        run_optional(system_info.hardware_uuid),
        run_sync(system_info.uptime_seconds),
    )

    return {
        "operating_system": {
            "platform": os_info["platform"],
            "distro": or_na(os_info.get("distro")),
            "release": or_na(os_info.get("release")),
            "codename": or_na(os_info.get("codename")),
            "kernel": or_na(os_info.get("kernel")),
            "arch": or_na(os_info.get("arch")),
        },
        "hardware": {
            "manufacturer": or_na(hardware.get("manufacturer")),
            "model": or_na(hardware.get("model")),
            "version": or_na(hardware.get("version")),
            "serial": or_na(hardware.get("serial")),
            "uuid": or_na(uuid),
        },
        "uptime": format_uptime(uptime),
        "hostname": system_info.hostname(),
        "user": or_na(system_info.current_user()),
        "python_version": platform.python_version(),
        "versions": {
            "python": platform.python_version(),
            "implementation": platform.python_implementation(),
            "psutil": psutil.__version__,
        },
    }


def _main_disk(disks: List[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    """The root filesystem, or the first partition if there is no "/"."""
    for disk in disks:
        if disk["mountpoint"] == "/":
            return disk
    return disks[0] if disks else None


@mcp_tool(
    name="get_quick_stats",
    description="Get a quick overview of CPU, memory, and disk usage",
)
async def get_quick_stats() -> Dict[str, Any]:
    usage, (mem, _swap), disks, uptime = await asyncio.gather(
        run_sync(system_info.cpu_usage, settings.cpu_sample_interval),
        run_sync(system_info.memory_snapshot),
        run_sync(system_info.disk_partitions),
        run_sync(system_info.uptime_seconds),
    )

    disk = _main_disk(disks)
    disk_stats: Any = "N/A"
    if disk:
        disk_stats = {
            "usage": format_percent(disk["percent"]),
            "used": format_gb(disk["used"], decimals=1),
            "total": format_gb(disk["total"], decimals=1),
            "mount": disk["mountpoint"],
        }

    return {
        "cpu_usage": format_percent(usage["overall"]),
        "memory": {
            "usage": ratio_percent(mem.used, mem.total),
            "used": format_gb(mem.used, decimals=1),
            "total": format_gb(mem.total, decimals=1),
        },
        "disk": disk_stats,
        "uptime": format_uptime(uptime, with_minutes=False),
    }
