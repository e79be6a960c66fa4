"""
Rescal API application: calendar and resource routers, health and metrics.
"""

from contextlib import asynccontextmanager
from typing import AsyncIterator

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from prometheus_client import make_asgi_app

from rescal.platform.config import settings
from rescal.platform.logging import configure_logging, get_logger
from rescal.api.routers import calendar, resources
from rescal.api.dependencies import (
    init_resources,
    close_resources,
    get_database_adapter,
)

configure_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Connect the store on startup and release it on shutdown."""
    await init_resources()
    logger.info("Rescal API started", env=settings.APP_ENV)
    try:
        yield
    finally:
        await close_resources()
        logger.info("Rescal API stopped")


app = FastAPI(
    title=settings.APP_NAME,
    version=settings.VERSION,
    description="Resource utilization calendar",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS.split(",") if settings.CORS_ORIGINS else ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

if settings.METRICS_ENABLED:
    app.mount("/metrics", make_asgi_app())


@app.get("/health/live", tags=["Health"])
async def liveness() -> dict:
    return {"status": "alive"}


@app.get("/health/ready", tags=["Health"])
async def readiness() -> dict:
    """Ready once the schedule database answers."""
    database_healthy = False
    try:
        database_healthy = get_database_adapter().health_check()
    except Exception as e:
        logger.warning("Database health check failed", error=str(e))

    return {
        "status": "ready" if database_healthy else "not_ready",
        "version": settings.VERSION,
        "checks": {
            "database": "healthy" if database_healthy else "unhealthy",
        },
    }


app.include_router(calendar.router, prefix="/api/v1/projects", tags=["Calendar"])
app.include_router(resources.router, prefix="/api/v1/resources", tags=["Resources"])


def serve() -> None:
    """Console entry point: run the API with uvicorn."""
    uvicorn.run(
        "rescal.api.main:app",
        host=settings.API_HOST,
        port=settings.API_PORT,
        reload=settings.DEBUG,
    )
