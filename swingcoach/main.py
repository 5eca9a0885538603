"""
FastAPI application entry point.

This module creates and configures the FastAPI application.
Using an application factory pattern (create_app function) because:
- Easier to test with different configurations
- Explicit about initialization order

For local development:
    uvicorn swingcoach.main:app --reload
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .api.dependencies import reset_session_registry
from .api.routes import health, swing
from .config.settings import get_settings

# Configure logging
logging.basicConfig(
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    level=get_settings().log_level.upper(),
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.

    Validates configuration on startup and drops every in-memory
    session on shutdown.
    """
    settings = get_settings()

    logger.info(
        "SwingCoach API starting",
        extra={
            "version": settings.api_version,
            "model": settings.anthropic_model,
        }
    )

    missing_fields = settings.validate_required_fields()
    if missing_fields:
        # Not fatal: analyses will fail with a request error until it's set.
        logger.error(
            "Missing required configuration",
            extra={"missing_fields": missing_fields}
        )

    yield

    reset_session_registry()
    logger.info("SwingCoach API shutting down")


def create_app() -> FastAPI:
    """
    Application factory.

    Creates and configures the FastAPI application.
    """
    settings = get_settings()

    app = FastAPI(
        title=settings.api_title,
        version=settings.api_version,
        description="""
        AI-powered golf swing coaching.

        ## Workflow

        1. **Start a session**: `POST /api/v1/swing/sessions`
        2. **Select a video**: `POST /api/v1/swing/sessions/{session_id}/video`
        3. **Request analysis**: `POST /api/v1/swing/sessions/{session_id}/analyze`
        4. **Poll for the report**: `GET /api/v1/swing/sessions/{session_id}`
           - `status` moves from `analyzing` to `succeeded` or `failed`
        """,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(
        health.router,
        prefix="/health",
        tags=["Health"],
    )

    app.include_router(
        swing.router,
        prefix="/api/v1/swing",
        tags=["Swing Analysis"],
    )

    @app.get("/", include_in_schema=False)
    async def root():
        """Root endpoint - points at the docs."""
        return {
            "message": "SwingCoach AI API",
            "version": settings.api_version,
            "docs": "/docs",
            "health": "/health",
        }

    @app.exception_handler(Exception)
    async def global_exception_handler(request, exc):
        """
        Catch-all exception handler.

        Logs the full error server-side but returns a generic message.
        """
        logger.error(
            "Unhandled exception",
            extra={
                "path": request.url.path,
                "method": request.method,
                "error": str(exc),
            },
            exc_info=exc,
        )

        return JSONResponse(
            status_code=500,
            content={
                "detail": "Internal server error. Please contact support if this persists."
            }
        )

    return app


# This is what uvicorn will import
app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "swingcoach.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
        log_level=get_settings().log_level.lower(),
    )
