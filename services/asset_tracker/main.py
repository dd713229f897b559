"""
Asset Tracker Service.

Main FastAPI application for asset registration, administration and
warranty registration.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncGenerator, Awaitable, Callable

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware

from shared import __version__
from shared.auth import hash_password
from shared.config import settings
from shared.logging import bind_context, clear_context, get_logger, setup_logging
from shared.models import HealthResponse
from services.asset_tracker.dependencies import close_warranty_client
from services.asset_tracker.routes import (
    admin_router,
    assets_router,
    auth_router,
    catalog_router,
    warranties_router,
)
from services.asset_tracker.store import Role, store


logger = get_logger(__name__)


def seed_admin() -> None:
    """Create the bootstrap administrator if configured and missing."""
    bootstrap = settings.bootstrap
    if not bootstrap.enabled or store.get_profile_by_email(bootstrap.admin_email):
        return

    store.create_profile(
        email=bootstrap.admin_email,
        full_name=bootstrap.admin_full_name,
        password_hash=hash_password(bootstrap.admin_password.get_secret_value()),
        role=Role.ADMIN,
    )
    logger.info("bootstrap_admin_created", email=bootstrap.admin_email)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager."""
    setup_logging(
        log_level=settings.log_level.value,
        json_logs=settings.is_production,
        service_name=settings.service_name,
    )
    seed_admin()
    logger.info(
        "service_starting",
        port=settings.port,
        warranty_api_url=settings.warranty.base_url,
    )
    yield
    await close_warranty_client()
    logger.info("service_stopped")


app = FastAPI(
    title="Asset Tracker",
    description="Asset registry with remote warranty registration",
    version=__version__,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_tags=[
        {"name": "auth", "description": "Sign-up and login"},
        {"name": "assets", "description": "The signed-in user's assets"},
        {"name": "catalog", "description": "Categories and departments"},
        {"name": "warranties", "description": "Warranty status and registration"},
        {"name": "admin", "description": "System administration"},
        {"name": "health", "description": "Service health checks"},
    ],
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors.origins_list or ["*"],
    allow_credentials=settings.cors.allow_credentials,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def request_context(
    request: Request,
    call_next: Callable[[Request], Awaitable[Response]],
) -> Response:
    """Bind the request path to every log entry of the request."""
    clear_context()
    bind_context(method=request.method, path=request.url.path)
    return await call_next(request)


app.include_router(auth_router, prefix="/api/v1")
app.include_router(assets_router, prefix="/api/v1")
app.include_router(catalog_router, prefix="/api/v1")
app.include_router(warranties_router, prefix="/api/v1")
app.include_router(admin_router, prefix="/api/v1")


@app.get("/health", response_model=HealthResponse, tags=["health"])
async def health_check() -> HealthResponse:
    """Service health check endpoint."""
    counts = store.counts()
    return HealthResponse(
        service=settings.service_name,
        version=__version__,
        components={
            "store": {"status": "healthy", "mode": "in_memory", **counts},
            "warranty_service": {"status": "configured", "url": settings.warranty.base_url},
        },
    )


@app.get("/", tags=["health"])
async def root() -> dict[str, str]:
    """Root endpoint."""
    return {
        "service": "Asset Tracker",
        "description": "Asset registry with remote warranty registration",
        "docs": "/docs",
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "services.asset_tracker.main:app",
        host="0.0.0.0",
        port=settings.port,
        reload=settings.debug,
    )
