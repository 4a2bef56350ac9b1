"""Tests for the display discovery chain.

Testy kolejności strategii, rekordu zapasowego i limitów czasu poleceń.
"""

import sys
import time
from typing import List

import pytest
from prometheus_client import REGISTRY

from sysinfo_mcp.config import Settings
from sysinfo_mcp.displays import DetectionMethod, DisplayDiscovery, DisplayRecord, default_strategies
from sysinfo_mcp.displays.strategies import (
    DisplayStrategy,
    ScreenInfoStrategy,
    SystemProfilerStrategy,
    WmiStrategy,
    XrandrStrategy,
    platform_strategy,
)


class FakeStrategy(DisplayStrategy):
    """Strategy returning canned records and counting calls."""

    def __init__(self, method: DetectionMethod, count: int = 0, error: Exception = None):
        self.method = method
        self.count = count
        self.error = error
        self.calls = 0

    async def detect(self) -> List[DisplayRecord]:
        self.calls += 1
        if self.error:
            raise self.error
        return [
            DisplayRecord(id=i, name=f"{self.method.value}-{i}", detection_method=self.method)
            for i in range(1, self.count + 1)
        ]


class ExplodingStrategy(DisplayStrategy):
    """Strategy whose attempt() itself raises."""

    method = DetectionMethod.SYSTEMINFO

    async def attempt(self):
        raise RuntimeError("enumeration crashed")

    async def detect(self):
        return []


def _sample(method: str, outcome: str) -> float:
    value = REGISTRY.get_sample_value("display_detection_total", {"method": method, "outcome": outcome})
    return value or 0.0


class TestDiscoveryChain:
    """Tests for strategy priority and fallback."""

    @pytest.mark.asyncio
    async def test_cross_platform_wins(self):
        """Cross-platform records are returned even if the native strategy has more."""
        first = FakeStrategy(DetectionMethod.SYSTEMINFO, count=2)
        native = FakeStrategy(DetectionMethod.XRANDR, count=3)
        discovery = DisplayDiscovery(strategies=[first, native], platform_tag="linux")

        records, system = await discovery.discover()

        assert len(records) == 2
        assert all(r.detection_method is DetectionMethod.SYSTEMINFO for r in records)
        assert system == "linux"
        assert native.calls == 0

    @pytest.mark.asyncio
    async def test_native_used_when_cross_platform_empty(self):
        first = FakeStrategy(DetectionMethod.SYSTEMINFO, count=0)
        native = FakeStrategy(DetectionMethod.WMI, count=3)
        discovery = DisplayDiscovery(strategies=[first, native], platform_tag="win32")

        records, _ = await discovery.discover()

        assert [r.id for r in records] == [1, 2, 3]
        assert all(r.detection_method is DetectionMethod.WMI for r in records)

    @pytest.mark.asyncio
    async def test_failing_strategy_falls_through(self):
        first = FakeStrategy(DetectionMethod.SYSTEMINFO, error=RuntimeError("no display server"))
        native = FakeStrategy(DetectionMethod.SYSTEM_PROFILER, count=1)
        discovery = DisplayDiscovery(strategies=[first, native], platform_tag="darwin")

        records, _ = await discovery.discover()

        assert first.calls == 1
        assert records[0].detection_method is DetectionMethod.SYSTEM_PROFILER

    @pytest.mark.asyncio
    async def test_fallback_when_all_empty(self):
        strategies = [FakeStrategy(DetectionMethod.SYSTEMINFO), FakeStrategy(DetectionMethod.XRANDR)]
        discovery = DisplayDiscovery(strategies=strategies, platform_tag="linux")

        records, _ = await discovery.discover()

        assert len(records) == 1
        assert records[0].detection_method is DetectionMethod.FALLBACK
        assert records[0].note

    @pytest.mark.asyncio
    async def test_fallback_with_no_strategies(self):
        records, system = await DisplayDiscovery(strategies=[], platform_tag="freebsd13").discover()
        assert records[0].detection_method is DetectionMethod.FALLBACK
        assert system == "freebsd13"

    @pytest.mark.asyncio
    async def test_detection_metrics_recorded(self):
        before_empty = _sample("systeminfo", "empty")
        before_found = _sample("wmi", "found")
        strategies = [FakeStrategy(DetectionMethod.SYSTEMINFO), FakeStrategy(DetectionMethod.WMI, count=1)]

        await DisplayDiscovery(strategies=strategies, platform_tag="win32").discover()

        assert _sample("systeminfo", "empty") == before_empty + 1
        assert _sample("wmi", "found") == before_found + 1


class TestGetMonitorInfo:
    """Tests for the tool result shape."""

    @pytest.mark.asyncio
    async def test_result_shape(self):
        discovery = DisplayDiscovery(
            strategies=[FakeStrategy(DetectionMethod.XRANDR, count=2)],
            platform_tag="linux",
        )
        info = await discovery.get_monitor_info()
        assert info["total_monitors"] == 2
        assert info["system"] == "linux"
        assert [m["id"] for m in info["monitors"]] == [1, 2]
        assert info["monitors"][0]["detection_method"] == "xrandr"

    @pytest.mark.asyncio
    async def test_unexpected_error_returns_error_shape(self):
        discovery = DisplayDiscovery(strategies=[ExplodingStrategy()], platform_tag="linux")
        info = await discovery.get_monitor_info()
        assert info == {"error": "Failed to get monitor info: enumeration crashed", "system": "linux"}


class TestStrategySelection:
    """Tests for platform strategy selection."""

    def test_windows(self):
        assert isinstance(platform_strategy("win32"), WmiStrategy)

    def test_macos(self):
        strategy = platform_strategy("darwin", system_profiler_timeout=3)
        assert isinstance(strategy, SystemProfilerStrategy)
        assert strategy.timeout == 3

    def test_linux(self):
        assert isinstance(platform_strategy("linux"), XrandrStrategy)

    def test_unsupported(self):
        assert platform_strategy("freebsd13") is None

    def test_default_chain_order(self, monkeypatch):
        monkeypatch.setenv("XRANDR_TIMEOUT", "4")
        strategies = default_strategies("linux", Settings())
        assert isinstance(strategies[0], ScreenInfoStrategy)
        assert isinstance(strategies[1], XrandrStrategy)
        assert strategies[1].timeout == 4.0

    def test_default_chain_unsupported_platform(self):
        strategies = default_strategies("sunos5", Settings())
        assert len(strategies) == 1


class TestScreenInfoStrategy:
    """Tests for the cross-platform strategy."""

    @pytest.mark.asyncio
    async def test_enumeration_error_is_empty(self):
        def broken():
            raise RuntimeError("Could not enumerate monitors")

        result = await ScreenInfoStrategy(enumerate_monitors=broken).attempt()
        assert result.found is False
        assert result.method is DetectionMethod.SYSTEMINFO

    @pytest.mark.asyncio
    async def test_no_monitors_is_empty(self):
        result = await ScreenInfoStrategy(enumerate_monitors=lambda: []).attempt()
        assert result.found is False


class TestCommandStrategies:
    """Tests running real child processes in place of platform utilities."""

    @pytest.mark.asyncio
    async def test_parses_command_output(self):
        script = "print('HDMI-1 connected primary 1920x1080+0+0 (normal)')"
        strategy = XrandrStrategy(timeout=10, command=[sys.executable, "-c", script])

        result = await strategy.attempt()

        assert result.found is True
        assert result.records[0].name == "HDMI-1"
        assert result.records[0].is_primary is True

    @pytest.mark.asyncio
    async def test_timeout_yields_empty_quickly(self):
        strategy = XrandrStrategy(timeout=0.5, command=[sys.executable, "-c", "import time; time.sleep(30)"])

        started = time.monotonic()
        result = await strategy.attempt()
        elapsed = time.monotonic() - started

        assert result.found is False
        assert elapsed < 5

    @pytest.mark.asyncio
    async def test_non_zero_exit_yields_empty(self):
        script = "import sys; print('HDMI-1 connected 1920x1080'); sys.exit(3)"
        strategy = XrandrStrategy(timeout=10, command=[sys.executable, "-c", script])
        result = await strategy.attempt()
        assert result.found is False

    @pytest.mark.asyncio
    async def test_missing_binary_yields_empty(self):
        strategy = WmiStrategy(timeout=5, command=["definitely-not-a-real-binary-7f3a"])
        result = await strategy.attempt()
        assert result.found is False
        assert result.method is DetectionMethod.WMI

    @pytest.mark.asyncio
    async def test_unparsable_output_yields_empty(self):
        strategy = SystemProfilerStrategy(timeout=10, command=[sys.executable, "-c", "print('garbage')"])
        result = await strategy.attempt()
        assert result.found is False


class TestDiscoverDisplays:
    """Tests for the module-level entry point."""

    @pytest.mark.asyncio
    async def test_uses_default_chain_for_host(self, monkeypatch):
        from sysinfo_mcp.displays import discovery

        seen = {}

        def fake_default_strategies(platform_tag, settings=None):
            seen["platform"] = platform_tag
            return [FakeStrategy(DetectionMethod.SYSTEMINFO, count=1)]

        monkeypatch.setattr(discovery, "default_strategies", fake_default_strategies)

        records, system = await discovery.discover_displays()

        assert system == sys.platform
        assert seen["platform"] == sys.platform
        assert records[0].detection_method is DetectionMethod.SYSTEMINFO
