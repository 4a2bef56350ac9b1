"""Process tools for MCP.

Narzędzie listy procesów z sortowaniem i limitem.
"""

import asyncio
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional, Tuple

from sysinfo_mcp.config.settings import settings
from sysinfo_mcp.mcp.registry import mcp_tool
from sysinfo_mcp.utils import system_info
from sysinfo_mcp.utils.async_helpers import run_sync
from sysinfo_mcp.utils.formatting import format_mb, format_percent
from sysinfo_mcp.utils.system_info import ProcessSample

DEFAULT_LIMIT = 20
DEFAULT_SORT = "cpu"

# sort_by -> (key, descending)
SORT_ORDERS: Dict[str, Tuple[Callable[[ProcessSample], Any], bool]] = {
    "cpu": (lambda p: p.cpu_percent, True),
    "memory": (lambda p: p.rss, True),
    "name": (lambda p: p.name, False),
}


def sort_processes(samples: List[ProcessSample], sort_by: str = DEFAULT_SORT) -> List[ProcessSample]:
    """Sort a process snapshot by cpu (desc), memory (desc) or name (asc).

    Raises:
        ValueError: If ``sort_by`` is not one of the supported orders.
    """
    if sort_by not in SORT_ORDERS:
        raise ValueError(f"Invalid sort_by '{sort_by}'. Must be one of: {', '.join(SORT_ORDERS)}")
    key, descending = SORT_ORDERS[sort_by]
    return sorted(samples, key=key, reverse=descending)


def _format_started(started: Optional[float]) -> str:
    if not started:
        return "N/A"
    return datetime.fromtimestamp(started).strftime("%Y-%m-%d %H:%M:%S")


def format_process(sample: ProcessSample, total_memory: int) -> Dict[str, Any]:
    """Reshape one sample for display.

    memory_percent is virtual size over total physical memory, so it can
    exceed what the process actually has resident.
    """
    memory_percent = (sample.vms / total_memory * 100) if sample.vms and total_memory else 0.0
    return {
        "pid": sample.pid,
        "name": sample.name,
        "cpu_percent": format_percent(sample.cpu_percent),
        "memory_mb": format_mb(sample.rss),
        "memory_percent": format_percent(memory_percent),
        "status": sample.status,
        "started": _format_started(sample.started),
        "user": sample.user or "N/A",
    }


@mcp_tool(
    name="get_running_processes",
    description="Get list of currently running processes with CPU and memory usage",
    args_schema={
        "type": "object",
        "properties": {
            "limit": {
                "type": "integer",
                "description": f"Maximum number of processes to return (default: {DEFAULT_LIMIT})",
                "default": DEFAULT_LIMIT,
            },
            "sort_by": {
                "type": "string",
                "description": "Sort processes by: cpu, memory, name (default: cpu)",
                "enum": list(SORT_ORDERS),
                "default": DEFAULT_SORT,
            },
        },
        "required": [],
    },
)
async def get_running_processes(limit: int = DEFAULT_LIMIT, sort_by: str = DEFAULT_SORT) -> Dict[str, Any]:
    """Zwróć listę procesów.

    Args:
        limit: Maximum number of processes; values <= 0 return an empty list.
        sort_by: "cpu", "memory" or "name". Any other value raises ValueError
            instead of falling back to "cpu".

    Returns:
        Summary counts over all processes and the sorted, truncated list.
    """
    if sort_by not in SORT_ORDERS:
        raise ValueError(f"Invalid sort_by '{sort_by}'. Must be one of: {', '.join(SORT_ORDERS)}")
    limit = max(0, int(limit))

    samples, total_memory = await asyncio.gather(
        run_sync(system_info.process_snapshot, settings.process_sample_interval),
        run_sync(system_info.total_memory),
    )
    counts = system_info.process_status_counts(samples)
    ordered = sort_processes(samples, sort_by)[:limit]

    return {
        "summary": {
            "total": counts["total"],
            "running": counts["running"],
            "sleeping": counts["sleeping"],
            "blocked": counts["blocked"],
        },
        "processes": [format_process(sample, total_memory) for sample in ordered],
    }
