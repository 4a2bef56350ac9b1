"""Display discovery engine.

Strategies are tried in priority order (cross-platform query, then the
OS-specific utility). The first one that finds at least one display supplies
the whole result; results of different strategies are never merged. When all
of them come back empty a single fallback record is returned.
"""

from __future__ import annotations

import logging
import sys
from typing import Any, Dict, List, Optional, Sequence, Tuple

from sysinfo_mcp.config import Settings
from sysinfo_mcp.displays.records import DisplayRecord, fallback_record
from sysinfo_mcp.displays.strategies import DisplayStrategy, ScreenInfoStrategy, platform_strategy
from sysinfo_mcp.telemetry.metrics import display_detection_total

logger = logging.getLogger(__name__)


def default_strategies(platform_tag: str, settings: Optional[Settings] = None) -> List[DisplayStrategy]:
    """Priority-ordered strategies for ``platform_tag``."""
    settings = settings or Settings()
    strategies: List[DisplayStrategy] = [ScreenInfoStrategy()]
    native = platform_strategy(
        platform_tag,
        wmi_timeout=settings.wmi_timeout,
        system_profiler_timeout=settings.system_profiler_timeout,
        xrandr_timeout=settings.xrandr_timeout,
    )
    if native is not None:
        strategies.append(native)
    return strategies


class DisplayDiscovery:
    """Resolve connected displays using a prioritized chain of strategies."""

    def __init__(
        self,
        strategies: Optional[Sequence[DisplayStrategy]] = None,
        platform_tag: Optional[str] = None,
        settings: Optional[Settings] = None,
    ) -> None:
        self.platform_tag = platform_tag or sys.platform
        if strategies is None:
            strategies = default_strategies(self.platform_tag, settings)
        self._strategies = list(strategies)

    @property
    def strategies(self) -> List[DisplayStrategy]:
        return list(self._strategies)

    async def discover(self) -> Tuple[List[DisplayRecord], str]:
        """Return the records of the first successful strategy and the platform tag."""
        for strategy in self._strategies:
            result = await strategy.attempt()
            display_detection_total.labels(
                method=result.method.value,
                outcome="found" if result.found else "empty",
            ).inc()
            if result.found:
                logger.debug("Detected %d display(s) via %s", len(result.records), result.method.value)
                return list(result.records), self.platform_tag

        logger.info("No displays detected on %s, returning fallback record", self.platform_tag)
        return [fallback_record()], self.platform_tag

    async def get_monitor_info(self) -> Dict[str, Any]:
        """Monitor summary in the tool result shape.

        Returns ``{"error": ..., "system": ...}`` instead of raising.
        """
        try:
            records, system = await self.discover()
        except Exception as e:
            logger.error("Monitor discovery failed: %s", e)
            return {"error": f"Failed to get monitor info: {e}", "system": self.platform_tag}

        return {
            "total_monitors": len(records),
            "monitors": [record.to_dict() for record in records],
            "system": system,
        }


async def discover_displays(settings: Optional[Settings] = None) -> Tuple[List[DisplayRecord], str]:
    """Discover displays on the running host."""
    return await DisplayDiscovery(settings=settings).discover()


__all__ = ["DisplayDiscovery", "default_strategies", "discover_displays"]
