"""Display detection strategies and the parsers for their command output.

Each strategy exposes ``attempt()`` which never raises: any failure inside a
strategy (missing binary, timeout, non-zero exit, unparsable output) is logged
and reported as an empty :class:`StrategyResult`.
"""

from __future__ import annotations

import json
import logging
import re
from abc import ABC, abstractmethod
from typing import Any, Callable, List, Optional, Sequence, Tuple

from screeninfo import get_monitors

from sysinfo_mcp.displays.records import UNKNOWN, DetectionMethod, Dimension, DisplayRecord, StrategyResult
from sysinfo_mcp.utils.async_helpers import run_sync
from sysinfo_mcp.utils.commands import run_command

logger = logging.getLogger(__name__)

_RESOLUTION_RE = re.compile(r"(\d+)x(\d+)")
_LEADING_NUMBER_RE = re.compile(r"\s*(\d+)")

# Connector names used for laptop/tablet panels
_BUILTIN_CONNECTORS = ("edp", "lvds", "dsi")

WMI_COMMAND = (
    "powershell",
    "-NoProfile",
    "-Command",
    "Get-CimInstance -Namespace root/wmi -ClassName WmiMonitorBasicDisplayParams"
    " | Select-Object InstanceName, MaxHorizontalImageSize, MaxVerticalImageSize"
    " | ConvertTo-Json",
)
SYSTEM_PROFILER_COMMAND = ("system_profiler", "SPDisplaysDataType", "-json")
XRANDR_COMMAND = ("xrandr", "--query")


# ---------------------------------------------------------------------------
# Parsers
# ---------------------------------------------------------------------------


def parse_resolution(text: str) -> Tuple[Dimension, Dimension]:
    """Parse ``"<width> x <height> ..."`` into digit strings.

    Anything that does not have that shape yields ``("Unknown", "Unknown")``.
    """
    if not text or " x " not in text:
        return UNKNOWN, UNKNOWN
    left, right = text.split(" x ", 1)
    width = _LEADING_NUMBER_RE.match(left)
    height = _LEADING_NUMBER_RE.match(right)
    if not width or not height:
        return UNKNOWN, UNKNOWN
    return width.group(1), height.group(1)


def parse_xrandr_output(output: str) -> List[DisplayRecord]:
    """Parse ``xrandr --query`` text into records.

    Only connected outputs with a current mode (``<w>x<h>`` on the line) count.
    """
    records: List[DisplayRecord] = []
    for line in output.splitlines():
        if " connected" not in line or "disconnected" in line:
            continue
        parts = line.split()
        if not parts:
            continue
        match = _RESOLUTION_RE.search(line)
        if not match:
            continue
        width, height = match.groups()
        records.append(
            DisplayRecord(
                id=len(records) + 1,
                name=parts[0],
                detection_method=DetectionMethod.XRANDR,
                width=width,
                height=height,
                is_primary="primary" in line,
            )
        )
    return records


def parse_system_profiler_output(output: str) -> List[DisplayRecord]:
    """Parse ``system_profiler SPDisplaysDataType -json`` output.

    Walks every display adapter and the monitors attached to it.

    Raises:
        ValueError: If the output is not valid JSON.
    """
    data = json.loads(output)
    records: List[DisplayRecord] = []
    for adapter in data.get("SPDisplaysDataType") or []:
        for monitor in adapter.get("spdisplays_ndrvs") or []:
            monitor_id = len(records) + 1
            name = monitor.get("_name") or ""
            resolution = monitor.get("_spdisplays_resolution") or monitor.get("_spdisplays_pixels") or ""
            width, height = parse_resolution(resolution)
            records.append(
                DisplayRecord(
                    id=monitor_id,
                    name=name or f"Monitor {monitor_id}",
                    detection_method=DetectionMethod.SYSTEM_PROFILER,
                    width=width,
                    height=height,
                    retina="Retina" in name,
                )
            )
    return records


def parse_wmi_output(output: str) -> List[DisplayRecord]:
    """Parse ``ConvertTo-Json`` output of WmiMonitorBasicDisplayParams.

    PowerShell emits a bare object for a single instance and an array for
    several. Resolution is not available through this class.

    Raises:
        ValueError: If the output is not valid JSON.
    """
    if not output.strip():
        return []
    data = json.loads(output)
    if isinstance(data, dict):
        data = [data]
    records: List[DisplayRecord] = []
    for index, monitor in enumerate(data, start=1):
        records.append(
            DisplayRecord(
                id=index,
                name=f"Monitor {index}",
                detection_method=DetectionMethod.WMI,
                instance=monitor.get("InstanceName") or UNKNOWN,
                physical_width_cm=monitor.get("MaxHorizontalImageSize"),
                physical_height_cm=monitor.get("MaxVerticalImageSize"),
            )
        )
    return records


def records_from_screeninfo(monitors: Sequence[Any]) -> List[DisplayRecord]:
    """Build records from ``screeninfo.Monitor`` objects."""
    records: List[DisplayRecord] = []
    for index, monitor in enumerate(monitors, start=1):
        name = getattr(monitor, "name", None) or ""
        connector = name.lstrip("\\.").lower()
        records.append(
            DisplayRecord(
                id=index,
                name=name or f"Display {index}",
                detection_method=DetectionMethod.SYSTEMINFO,
                width=getattr(monitor, "width", None) or UNKNOWN,
                height=getattr(monitor, "height", None) or UNKNOWN,
                vendor=UNKNOWN,
                main=bool(getattr(monitor, "is_primary", False)),
                builtin=connector.startswith(_BUILTIN_CONNECTORS),
            )
        )
    return records


# ---------------------------------------------------------------------------
# Strategies
# ---------------------------------------------------------------------------


class DisplayStrategy(ABC):
    """One way of discovering displays."""

    method: DetectionMethod

    async def attempt(self) -> StrategyResult:
        """Run the strategy, turning any failure into an empty result."""
        try:
            records = await self.detect()
        except Exception as e:
            logger.debug("Display detection via %s failed: %s", self.method.value, e)
            return StrategyResult.empty(self.method)
        return StrategyResult(method=self.method, records=tuple(records))

    @abstractmethod
    async def detect(self) -> List[DisplayRecord]:
        """Return detected displays; may raise."""


class ScreenInfoStrategy(DisplayStrategy):
    """Cross-platform query through the screeninfo library."""

    method = DetectionMethod.SYSTEMINFO

    def __init__(self, enumerate_monitors: Optional[Callable[[], Sequence[Any]]] = None):
        self._enumerate = enumerate_monitors or get_monitors

    async def detect(self) -> List[DisplayRecord]:
        monitors = await run_sync(self._enumerate)
        return records_from_screeninfo(monitors or [])


class CommandStrategy(DisplayStrategy):
    """Strategy backed by a platform utility with bounded runtime."""

    default_command: Tuple[str, ...] = ()

    def __init__(self, timeout: float, command: Optional[Sequence[str]] = None):
        self.timeout = timeout
        self.command = tuple(command) if command else self.default_command

    async def detect(self) -> List[DisplayRecord]:
        result = await run_command(self.command, self.timeout)
        if result.timed_out:
            logger.debug("%s timed out after %.1fs", self.command[0], self.timeout)
            return []
        if not result.ok:
            return []
        return self.parse(result.stdout)

    @abstractmethod
    def parse(self, output: str) -> List[DisplayRecord]:
        """Turn command output into records."""


class WmiStrategy(CommandStrategy):
    """Windows: monitor parameters through CIM/WMI."""

    method = DetectionMethod.WMI
    default_command = WMI_COMMAND

    def parse(self, output: str) -> List[DisplayRecord]:
        return parse_wmi_output(output)


class SystemProfilerStrategy(CommandStrategy):
    """macOS: ``system_profiler`` display report."""

    method = DetectionMethod.SYSTEM_PROFILER
    default_command = SYSTEM_PROFILER_COMMAND

    def parse(self, output: str) -> List[DisplayRecord]:
        return parse_system_profiler_output(output)


class XrandrStrategy(CommandStrategy):
    """Linux/X11: ``xrandr --query``."""

    method = DetectionMethod.XRANDR
    default_command = XRANDR_COMMAND

    def parse(self, output: str) -> List[DisplayRecord]:
        return parse_xrandr_output(output)


def platform_strategy(
    platform_tag: str,
    wmi_timeout: float = 10.0,
    system_profiler_timeout: float = 15.0,
    xrandr_timeout: float = 10.0,
) -> Optional[DisplayStrategy]:
    """Pick the OS-specific strategy for a ``sys.platform`` value (None if unsupported)."""
    if platform_tag == "win32":
        return WmiStrategy(timeout=wmi_timeout)
    if platform_tag == "darwin":
        return SystemProfilerStrategy(timeout=system_profiler_timeout)
    if platform_tag.startswith("linux"):
        return XrandrStrategy(timeout=xrandr_timeout)
    return None


__all__ = [
    "CommandStrategy",
    "DisplayStrategy",
    "ScreenInfoStrategy",
    "SystemProfilerStrategy",
    "WmiStrategy",
    "XrandrStrategy",
    "parse_resolution",
    "parse_system_profiler_output",
    "parse_wmi_output",
    "parse_xrandr_output",
    "platform_strategy",
    "records_from_screeninfo",
]
