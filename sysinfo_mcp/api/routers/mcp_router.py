"""MCP Router - HTTP access to the tool registry.

Endpointy:
- GET /api/mcp/tools - narzędzia i ich schematy argumentów
- GET /api/mcp/resources - transport, port i statystyki rejestru
- POST /api/mcp/tools/invoke - wywołanie narzędzia
- GET /api/mcp/stats - statystyki wywołań
"""

import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from sysinfo_mcp.mcp.registry import Tool, ToolInvokeResult, registry
from sysinfo_mcp.mcp import tools as _  # noqa: F401 - triggers tool registration

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/mcp", tags=["mcp"])


class InvokeToolRequest(BaseModel):
    """Body of POST /api/mcp/tools/invoke."""

    tool: str = Field(..., description="Nazwa narzędzia, np. get_quick_stats")
    arguments: Optional[Dict[str, Any]] = Field(default=None, description="Argumenty zgodne z args_schema")


def _describe(tool: Tool) -> Dict[str, Any]:
    return {"name": tool.name, "description": tool.description, "args_schema": tool.args_schema}


def status_code_for(result: ToolInvokeResult) -> int:
    """200 on success, 404 for an unknown tool name, 400 for any other failure."""
    if result.ok:
        return 200
    if (result.error or "").startswith("Unknown tool"):
        return 404
    return 400


@router.get("/tools")
async def list_tools() -> JSONResponse:
    """Lista narzędzi: ``{"ok": true, "tools": [{name, description, args_schema}], "count": N}``."""
    described = [_describe(tool) for tool in registry.list_tools()]
    return JSONResponse({"ok": True, "tools": described, "count": len(described)})


@router.get("/resources")
async def get_resources(request: Request) -> JSONResponse:
    settings = getattr(request.app.state, "settings", None)
    config: Dict[str, Any] = {}
    if settings is not None:
        config = {"mcp_transport": settings.mcp_transport, "mcp_port": settings.mcp_port}

    return JSONResponse({"ok": True, "resources": {"config": config, "stats": registry.get_stats()}})


@router.post("/tools/invoke")
async def invoke_tool(payload: InvokeToolRequest) -> JSONResponse:
    """Wywołaj narzędzie przez rejestr.

    The body is the invocation result plus ``text``, the same string an
    MCP client receives over stdio (pretty JSON or ``"Error: <message>"``).
    """
    logger.info("Invoking MCP tool: %s with arguments: %s", payload.tool, payload.arguments)

    result = await registry.invoke(payload.tool, payload.arguments)
    if result.ok:
        logger.info("[MCP] %s -> success (%dms)", payload.tool, result.meta.get("duration_ms", 0))
    else:
        logger.warning("[MCP] %s -> error: %s", payload.tool, result.error)

    body = result.to_dict()
    body["text"] = result.to_text()
    return JSONResponse(body, status_code=status_code_for(result))


@router.get("/stats")
async def get_stats() -> JSONResponse:
    return JSONResponse({"ok": True, "stats": registry.get_stats()})
