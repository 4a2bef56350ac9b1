"""MCP HTTP Server.

Uruchamia serwer MCP przez HTTP (FastAPI + uvicorn).
Używany gdy MCP_TRANSPORT=http.
"""

import logging

import uvicorn
from fastapi import FastAPI, Response
from fastapi.middleware.cors import CORSMiddleware
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from sysinfo_mcp import __version__
from sysinfo_mcp.api.routers import mcp_router
from sysinfo_mcp.config import Settings

logger = logging.getLogger(__name__)


def create_standalone_app(settings: Settings) -> FastAPI:
    """Utwórz aplikację FastAPI dla transportu HTTP.

    Returns:
        Skonfigurowana aplikacja FastAPI z routerem MCP.
    """
    app = FastAPI(
        title="System Info MCP Server",
        description="Host telemetry tools over the Model Context Protocol tool registry",
        version=__version__,
    )

    # CORS dla integracji zewnętrznych
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.settings = settings

    # Zarejestruj router MCP
    app.include_router(mcp_router.router)

    @app.get("/health")
    async def health():
        """Sprawdź status serwera MCP."""
        from sysinfo_mcp.mcp.registry import registry

        return {
            "ok": True,
            "mode": "http",
            "stats": registry.get_stats(),
        }

    @app.get("/metrics")
    async def metrics() -> Response:
        """Prometheus metrics endpoint."""
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    return app


def run_http(settings: Settings) -> None:
    """Uruchom serwer HTTP (blokuje do zatrzymania)."""
    logger.info("=" * 60)
    logger.info("System Info MCP Server (HTTP) Starting")
    logger.info("=" * 60)
    logger.info(f"Listening on: {settings.http_base_url}")
    logger.info("=" * 60)

    app = create_standalone_app(settings)
    uvicorn.run(
        app,
        host=settings.mcp_host,
        port=settings.mcp_port,
        log_level=settings.log_level.lower(),
    )
