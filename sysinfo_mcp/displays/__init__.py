"""Display/monitor discovery.

Moduł wykrywa podłączone monitory: najpierw zapytanie wieloplatformowe
(screeninfo), potem narzędzie systemowe (WMI, system_profiler, xrandr).
"""

from sysinfo_mcp.displays.discovery import DisplayDiscovery, default_strategies, discover_displays
from sysinfo_mcp.displays.records import UNKNOWN, DetectionMethod, DisplayRecord, StrategyResult, fallback_record

__all__ = [
    "UNKNOWN",
    "DetectionMethod",
    "DisplayDiscovery",
    "DisplayRecord",
    "StrategyResult",
    "default_strategies",
    "discover_displays",
    "fallback_record",
]
