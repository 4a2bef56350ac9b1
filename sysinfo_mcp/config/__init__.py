"""Configuration module."""

from sysinfo_mcp.config.settings import TRANSPORTS, Settings, settings

__all__ = ["TRANSPORTS", "Settings", "settings"]
