"""Prometheus metrics for tool invocations and display detection."""

from prometheus_client import Counter, Histogram

# Tool invocation metrics
tool_invocations_total = Counter(
    'mcp_tool_invocations_total',
    'Total number of MCP tool invocations',
    ['tool', 'status'],
)

tool_duration_seconds = Histogram(
    'mcp_tool_duration_seconds',
    'MCP tool invocation duration in seconds',
    ['tool'],
    buckets=[0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.0, 5.0, 10.0, 30.0],
)

# Display detection metrics
display_detection_total = Counter(
    'display_detection_total',
    'Display detection strategy attempts',
    ['method', 'outcome'],
)
