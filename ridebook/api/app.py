# ridebook/api/app.py
"""
FastAPI application: lifespan, CORS, exception handlers and routers.
"""

from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from ridebook.api.handlers import register_exception_handlers
from ridebook.common.constants import TypeMsg
from ridebook.common.logger import log_info, setup_logging
from ridebook.config import settings
from ridebook.infra.database import close_db, get_db, init_db
from ridebook.services.auth_service.routes import router as auth_router
from ridebook.services.driver_service.routes import router as driver_router
from ridebook.services.ride_service.routes import router as ride_router
from ridebook.shared.models.common import HealthStatus


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    await log_info(
        f"Starting {settings.system.PROJECT_NAME} v{settings.system.VERSION} ({settings.system.ENVIRONMENT})",
        type_msg=TypeMsg.INFO,
    )
    await init_db()
    yield
    await close_db()
    await log_info("Shutdown complete", type_msg=TypeMsg.INFO)


def create_app(use_lifespan: bool = True) -> FastAPI:
    """Builds the application; tests pass ``use_lifespan=False`` to skip the database."""
    app = FastAPI(
        title="Ridebook API",
        version=settings.system.VERSION,
        lifespan=lifespan if use_lifespan else None,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.server.CORS_ORIGINS,
        allow_credentials="*" not in settings.server.CORS_ORIGINS,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    prefix = settings.server.API_PREFIX
    app.include_router(auth_router, prefix=prefix)
    app.include_router(driver_router, prefix=prefix)
    app.include_router(ride_router, prefix=prefix)

    @app.get(f"{prefix}/health", response_model=HealthStatus, tags=["Health"])
    async def health_check() -> HealthStatus:
        db = get_db()
        db_ok = db.is_connected and await db.health_check()
        return HealthStatus(
            service=settings.system.PROJECT_NAME,
            status="healthy" if db_ok else "degraded",
            version=settings.system.VERSION,
            dependencies={"postgres": "ok" if db_ok else "unavailable"},
        )

    return app


app = create_app()
