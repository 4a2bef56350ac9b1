"""
System Info MCP Server - host telemetry for LLM tool-calling clients.

This package provides:
- MCP tools for CPU, memory, disk, processes, network and system details
- Multi-platform monitor/display discovery
- stdio (MCP SDK) and HTTP (FastAPI) transports over one tool registry
"""

__version__ = "1.0.1"
