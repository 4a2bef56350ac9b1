"""Main entry point for the System Info MCP Server."""

import argparse
import asyncio
import logging
import sys
from typing import List, Optional

from sysinfo_mcp import __version__
from sysinfo_mcp.config import TRANSPORTS
from sysinfo_mcp.config.settings import settings
from sysinfo_mcp.mcp.registry import registry, setup_tools_log

logger = logging.getLogger(__name__)

# Arguments used by the self-test for tools that take parameters
SELF_TEST_ARGUMENTS = {"get_running_processes": {"limit": 5}}


def setup_logging(log_level: str):
    """Configure logging for the application (stderr, stdout is the MCP channel)."""
    logging.basicConfig(
        level=getattr(logging, log_level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stderr,
    )


async def run_self_test() -> int:
    """Invoke every registered tool once and print its output.

    Returns:
        Process exit code: 0 if all tools succeeded, 1 otherwise.
    """
    from sysinfo_mcp.mcp import tools as _  # noqa: F401 - triggers tool registration

    failures = 0
    for name in registry.list_tool_names():
        result = await registry.invoke(name, SELF_TEST_ARGUMENTS.get(name))
        print(f"== {name} ({result.meta.get('duration_ms', 0)}ms)")
        print(result.to_text())
        if not result.ok:
            failures += 1

    if failures:
        print(f"{failures} tool(s) failed", file=sys.stderr)
        return 1
    print("All tools completed successfully")
    return 0


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="system-info-mcp-server",
        description="System information tools over the Model Context Protocol",
    )
    parser.add_argument(
        "--transport",
        choices=TRANSPORTS,
        default=None,
        help="Transport to serve (default: MCP_TRANSPORT or stdio)",
    )
    parser.add_argument("--test", action="store_true", help="Run every tool once, print results and exit")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    setup_logging(settings.log_level)
    setup_tools_log(settings.mcp_tools_log_path)

    if args.test:
        return asyncio.run(run_self_test())

    transport = args.transport or settings.mcp_transport
    try:
        if transport == "http":
            from sysinfo_mcp.mcp.standalone import run_http

            run_http(settings)
        else:
            from sysinfo_mcp.mcp.server import serve_stdio

            asyncio.run(serve_stdio())
    except KeyboardInterrupt:
        logger.info("Shutting down MCP server...")
    except Exception as e:
        logger.error(f"Error running MCP server: {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
