"""Global pytest hooks and shared fixtures."""

from pathlib import Path

import pytest

from sysinfo_mcp.mcp.registry import ToolRegistry


@pytest.hookimpl
def pytest_collection_modifyitems(config, items):
    """
    Automatically tag tests with markers based on their file name.

    - test_display*.py → displays
    - all other collected tests → api
    """
    for item in items:
        if Path(item.fspath).name.startswith("test_display"):
            item.add_marker("displays")
        else:
            item.add_marker("api")


@pytest.fixture
def registry():
    """Create a fresh registry for each test."""
    return ToolRegistry()


@pytest.fixture
def clean_registry():
    """Ensure the global registry is restored after each test."""
    from sysinfo_mcp.mcp.registry import registry as global_registry

    original_tools = list(global_registry.list_tool_names())

    yield global_registry

    for tool_name in global_registry.list_tool_names():
        if tool_name not in original_tools:
            global_registry.unregister(tool_name)
