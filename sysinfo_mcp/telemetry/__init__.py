"""Telemetry and monitoring module."""

from sysinfo_mcp.telemetry.metrics import (
    display_detection_total,
    tool_duration_seconds,
    tool_invocations_total,
)

__all__ = [
    "display_detection_total",
    "tool_duration_seconds",
    "tool_invocations_total",
]
