"""
Education Portal FastAPI Application

Course progress, assignment submission and evaluation service.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text

from eduportal import __version__
from eduportal.config import settings
from eduportal.core.database import close_db, engine
from eduportal.core.errors import (
    AttemptLimitExceeded,
    Forbidden,
    InvalidGrade,
    NotEnrolled,
    PortalError,
    RecordNotFound,
    StoreError,
    ValidationError,
)

logger = logging.getLogger(__name__)

# Domain error -> HTTP status. Messages are passed through verbatim.
ERROR_STATUS: dict[type[PortalError], int] = {
    NotEnrolled: 403,
    Forbidden: 403,
    RecordNotFound: 404,
    AttemptLimitExceeded: 409,
    InvalidGrade: 422,
    ValidationError: 422,
    StoreError: 503,
}


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan events.

    Startup:
    - Verify database connection

    Shutdown:
    - Close database connections
    """
    logger.info("Education portal starting...")

    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        logger.info("Database connection verified")
    except Exception as e:
        logger.error(f"Database connection failed: {e}")
        raise

    yield

    logger.info("Education portal shutting down...")
    await close_db()


async def portal_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Surface domain errors to the caller with their original message."""
    status_code = next(
        (code for error, code in ERROR_STATUS.items() if isinstance(exc, error)),
        400,
    )
    if status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc}")
    return JSONResponse(
        status_code=status_code,
        content={"detail": str(exc), "error": exc.__class__.__name__},
    )


def create_app() -> FastAPI:
    """Create and configure FastAPI application.

    Returns:
        Configured FastAPI app instance
    """
    logging.basicConfig(level=settings.LOG_LEVEL)

    app = FastAPI(
        title="Education Portal",
        description="Course progress, assignment status and evaluation service",
        version=__version__,
        docs_url="/docs" if not settings.is_production else None,
        redoc_url="/redoc" if not settings.is_production else None,
        lifespan=lifespan,
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if settings.is_local else [],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(PortalError, portal_error_handler)

    # Health check endpoints
    @app.get("/", tags=["Health"])
    async def root() -> dict[str, str]:
        """Root endpoint."""
        return {
            "service": "Education Portal",
            "status": "operational",
            "version": __version__,
            "environment": settings.ENVIRONMENT,
        }

    @app.get("/health", tags=["Health"], response_model=None)
    async def health_check() -> JSONResponse:
        """Health check endpoint for load balancers."""
        checks: dict[str, dict[str, Any]] = {}

        try:
            async with engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            checks["database"] = {"status": "healthy"}
        except Exception as e:
            checks["database"] = {"status": "unhealthy", "error": str(e)}

        all_healthy = all(check["status"] == "healthy" for check in checks.values())
        return JSONResponse(
            status_code=200 if all_healthy else 503,
            content={
                "status": "healthy" if all_healthy else "unhealthy",
                "environment": settings.ENVIRONMENT,
                "checks": checks,
            },
        )

    @app.get("/health/ready", tags=["Health"], response_model=None)
    async def readiness_check() -> dict[str, str] | JSONResponse:
        """Readiness check: 200 once the database is reachable."""
        try:
            async with engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            return {"status": "ready"}
        except Exception:
            return JSONResponse(
                status_code=503,
                content={"status": "not_ready"},
            )

    @app.get("/health/live", tags=["Health"])
    async def liveness_check() -> dict[str, str]:
        """Liveness check: 200 if the process is alive."""
        return {"status": "alive"}

    # Register API routers
    from eduportal.api.v1 import courses, dashboard, evaluations, students

    app.include_router(courses.router, prefix="/api/v1/courses", tags=["Courses"])
    app.include_router(students.router, prefix="/api/v1/students", tags=["Students"])
    app.include_router(evaluations.router, prefix="/api/v1/evaluations", tags=["Evaluations"])
    app.include_router(dashboard.router, prefix="/api/v1/dashboard", tags=["Dashboard"])

    return app


# Create app instance
app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "eduportal.main:app",
        host="0.0.0.0",  # nosec B104 - Intentional for containerized deployment
        port=8000,
        reload=settings.DEBUG,
        log_level=settings.LOG_LEVEL.lower(),
    )
