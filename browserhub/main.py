#!/usr/bin/env python3
"""
browserhub - Main Entry Point

This is the thin orchestration layer that:
1. Loads configuration
2. Initializes modules
3. Runs the API and WebSocket gateway

All business logic is in the modules, following black box principles.
"""

import logging
import logging.config as log_config
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

import redis.asyncio as redis
import uvicorn
from fastapi import FastAPI, HTTPException, Response, WebSocket
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse

from browserhub import __version__
from browserhub.config.provider import ConfigProvider, EnvConfigProvider
from browserhub.logging_config import get_logging_config

# Import modules through their black box interfaces
from browserhub.modules.config import get_config
from browserhub.modules.gateway import ConnectionGateway
from browserhub.modules.lifecycle import LifecycleManager
from browserhub.modules.provider import BrowserProvider, ProviderFactory
from browserhub.modules.registry import (
    InMemorySessionRegistry,
    RedisSessionRegistry,
    SessionRegistry,
)

# Get configuration
config = get_config()

log_config.dictConfig(get_logging_config(config.get("log_level")))
logger = logging.getLogger("browserhub.main")

# Configuration provider (provider credentials)
config_provider: ConfigProvider = EnvConfigProvider()

# Module instances (initialized at startup)
provider: Optional[BrowserProvider] = None
registry: Optional[SessionRegistry] = None
lifecycle_manager: Optional[LifecycleManager] = None
gateway: Optional[ConnectionGateway] = None
redis_client: Optional[redis.Redis] = None


def build_registry() -> SessionRegistry:
    """Create the session registry selected by configuration."""
    global redis_client

    if config.get("registry_backend") == "redis":
        redis_client = redis.from_url(
            config.get("redis_url"),
            encoding="utf-8",
            decode_responses=True,
        )
        logger.info("Using Redis session registry")
        return RedisSessionRegistry(redis_client)

    logger.info("Using in-memory session registry")
    return InMemorySessionRegistry()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manage application lifecycle - initialize and cleanup resources.

    Shutdown treats every live connection as a forced disconnect so no
    remote browser outlives the process.
    """
    global provider, registry, lifecycle_manager, gateway, redis_client

    # Startup
    logger.info("Starting browserhub...")

    provider_config = config_provider.get_provider_config()
    provider = ProviderFactory.build(provider_config)
    registry = build_registry()
    lifecycle_manager = LifecycleManager(
        registry,
        provider,
        session_config=ProviderFactory.session_config(provider_config),
        timeout=provider_config.timeout,
    )
    gateway = ConnectionGateway(lifecycle_manager)

    logger.info(f"browserhub running on http://{config.get('host')}:{config.get('port')}")
    logger.info(f"- BrowserBase: {'Enabled' if provider else 'Disabled'}")

    yield

    # Shutdown
    logger.info("Shutting down browserhub...")

    drained = await lifecycle_manager.drain()
    if drained:
        logger.info(f"Released {drained} browser session(s) on shutdown")
    await gateway.close_all()

    if provider:
        await provider.aclose()
    if redis_client:
        await redis_client.aclose()
        redis_client = None
    logger.info("browserhub shutdown complete")


# Create FastAPI application
app = FastAPI(
    title="browserhub",
    description="Remote browser sessions over WebSocket",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.get("cors_origins", ["*"]),
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
)


# Browser control channel


@app.websocket("/ws")
async def browser_socket(websocket: WebSocket):
    """
    Browser control channel.

    Inbound: start-browser, navigate, stop-browser
    Outbound: browser-ready, browser-error, navigation-complete
    """
    if not gateway:
        await websocket.close(code=1013, reason="Service not initialized")
        return

    await gateway.handle(websocket)


# Health/Monitoring Endpoints


@app.get("/healthz")
async def healthz():
    """
    Minimal health check endpoint for readiness/liveness probes.

    Returns:
        200: Service is running
    """
    return {"status": "ok"}


@app.get("/health")
async def health_check():
    """
    Health check with provider and registry status.

    Returns:
        200: Service healthy
        503: Service unhealthy
    """
    if not lifecycle_manager or not registry or not gateway:
        return JSONResponse(status_code=503, content={"status": "unhealthy", "modules": "not initialized"})

    try:
        await registry.ping()
        active_sessions = await registry.count()
    except Exception as e:
        logger.error(f"Health check failed: {e}")
        return JSONResponse(
            status_code=503,
            content={
                "status": "unhealthy",
                "registry": config.get("registry_backend"),
                "error": str(e),
            },
        )

    return {
        "status": "healthy",
        "browserbase": "enabled" if lifecycle_manager.enabled else "disabled",
        "registry": config.get("registry_backend"),
        "active_sessions": active_sessions,
        "connections": gateway.connection_count,
        "version": __version__,
    }


@app.get("/metrics")
async def metrics():
    """
    Prometheus-compatible metrics endpoint.

    Returns basic metrics about the system.
    """
    if not registry or not gateway:
        return Response(content="", status_code=503)

    active_sessions = await registry.count()

    metrics_text = f"""# HELP browserhub_active_sessions Number of remote browser sessions owned by live connections
# TYPE browserhub_active_sessions gauge
browserhub_active_sessions {active_sessions}
# HELP browserhub_active_connections Number of connected WebSocket clients
# TYPE browserhub_active_connections gauge
browserhub_active_connections {gateway.connection_count}
"""

    return Response(content=metrics_text, media_type="text/plain")


# Frontend (registered last so it never shadows API routes)


@app.get("/{full_path:path}", include_in_schema=False)
async def serve_frontend(full_path: str):
    """
    Serve the built frontend with single-page-app fallback.

    Paths without a file extension get index.html so client-side routing works.
    """
    static_root = Path(config.get("static_dir") or "dist").resolve()
    if not static_root.is_dir():
        raise HTTPException(404, "Not Found")

    candidate = (static_root / full_path).resolve()
    if static_root in candidate.parents and candidate.is_file():
        return FileResponse(candidate)

    index = static_root / "index.html"
    if "." not in full_path and index.is_file():
        return FileResponse(index)

    raise HTTPException(404, "Not Found")


# Error handlers


@app.exception_handler(redis.ConnectionError)
async def redis_error_handler(request, exc):
    """Handle Redis connection errors."""
    logger.error(f"Redis connection error: {exc}")
    return JSONResponse(status_code=503, content={"error": "Session registry unavailable"})


@app.exception_handler(ValueError)
async def validation_error_handler(request, exc):
    """Handle validation errors."""
    logger.error(f"Validation error: {exc}")
    return JSONResponse(status_code=400, content={"error": str(exc)})


def run():
    """Run the server with uvicorn."""
    uvicorn.run(
        "browserhub.main:app",
        host=config.get("host"),
        port=config.get("port"),
        log_level=config.get("log_level").lower(),
        reload=config.get("debug"),
        log_config=get_logging_config(config.get("log_level")),
    )


if __name__ == "__main__":
    run()
