"""Settings and configuration for the system info MCP server."""

import logging
import os
from dataclasses import dataclass, field
from typing import Optional

_settings_logger = logging.getLogger(__name__)

TRANSPORTS = ("stdio", "http")


def _safe_int(env_var: str, default: str) -> int:
    """Safely parse an integer from an environment variable.

    Args:
        env_var: Name of the environment variable.
        default: Default value as a string.

    Returns:
        Parsed integer value, or default if parsing fails.
    """
    value = os.getenv(env_var, default)
    try:
        return int(value)
    except ValueError:
        _settings_logger.warning("Invalid value '%s' for %s, using default %s", value, env_var, default)
        return int(default)


def _safe_float(env_var: str, default: str) -> float:
    """Safely parse a float from an environment variable (seconds, intervals)."""
    value = os.getenv(env_var, default)
    try:
        return float(value)
    except ValueError:
        _settings_logger.warning("Invalid value '%s' for %s, using default %s", value, env_var, default)
        return float(default)


def _parse_transport() -> str:
    """Parse MCP_TRANSPORT, falling back to stdio for unknown values."""
    transport = os.getenv("MCP_TRANSPORT", "stdio").strip().lower()
    if transport not in TRANSPORTS:
        _settings_logger.warning("Unknown MCP_TRANSPORT '%s' (expected one of %s), using stdio", transport, TRANSPORTS)
        return "stdio"
    return transport


@dataclass
class Settings:
    """Configuration settings for the MCP server."""

    # Logging
    log_level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO"))
    # Optional dedicated invocation log (one line per tool call)
    mcp_tools_log_path: Optional[str] = field(default_factory=lambda: os.getenv("MCP_TOOLS_LOG") or None)

    # Transport
    mcp_transport: str = field(default_factory=_parse_transport)
    mcp_host: str = field(default_factory=lambda: os.getenv("MCP_HOST", "127.0.0.1"))
    mcp_port: int = field(default_factory=lambda: _safe_int("MCP_PORT", "8210"))

    # Sampling windows for psutil percentage counters
    cpu_sample_interval: float = field(default_factory=lambda: _safe_float("CPU_SAMPLE_INTERVAL", "0.2"))
    process_sample_interval: float = field(default_factory=lambda: _safe_float("PROCESS_SAMPLE_INTERVAL", "0.1"))

    # Monitor detection command timeouts (seconds)
    wmi_timeout: float = field(default_factory=lambda: _safe_float("WMI_TIMEOUT", "10"))
    system_profiler_timeout: float = field(default_factory=lambda: _safe_float("SYSTEM_PROFILER_TIMEOUT", "15"))
    xrandr_timeout: float = field(default_factory=lambda: _safe_float("XRANDR_TIMEOUT", "10"))

    @property
    def http_base_url(self) -> str:
        """Get the base URL of the HTTP transport."""
        return f"http://{self.mcp_host}:{self.mcp_port}"


# Global settings instance
settings = Settings()
