"""HTTP API for the MCP tool registry."""
