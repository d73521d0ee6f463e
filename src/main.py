"""Main FastAPI application entry point."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import ORJSONResponse
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware

from api.exception_handlers import setup_exception_handlers
from api.middleware.logging import RequestLoggingMiddleware
from api.middleware.request_id import RequestIDMiddleware
from api.middleware.security import SecurityHeadersMiddleware
from api.routes.health import router as health_router
from api.v1 import router as v1_router
from api.v1.dependencies import get_snapshot_channel, get_view_registry
from core.config import APP_VERSION, settings
from core.logging import setup_logging
from core.rate_limit import limiter, rate_limit_exceeded_handler
from infrastructure.database.session import engine

logger = structlog.get_logger()

# Initialize structured logging
setup_logging()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan manager for startup/shutdown tasks."""
    # Subscribe the view registry to auth events before the first request
    get_view_registry()
    logger.info("application_started", environment=settings.app_env)
    yield
    # Live subscriptions and pending banner timers die with the process
    get_view_registry().close()
    get_snapshot_channel().close()
    await engine.dispose()
    logger.info("application_stopped")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        lifespan=lifespan,
        default_response_class=ORJSONResponse,
        title=settings.app_name,
        description=(
            "## Personal Activity Tracker\n\n"
            "Tracklet lets a signed-in user complete a one-time profile and log "
            "activities (description and duration), and renders today's list "
            "with running statistics.\n\n"
            "### Flow\n"
            "1. `POST /api/v1/session` signs in with an identity provider token\n"
            "2. `POST /api/v1/profile` completes the profile (first visit only)\n"
            "3. `POST /api/v1/activities` logs activities\n"
            "4. `GET /api/v1/session/view` renders the page\n\n"
            "### Authentication\n"
            "All endpoints (except `/health`) require the provider's ID token "
            "in the Authorization header:\n"
            "```\nAuthorization: Bearer <id_token>\n```\n\n"
            "### Rate Limits\n"
            "- GET endpoints: 30 requests/minute\n"
            "- POST/DELETE: 10 requests/minute"
        ),
        version=APP_VERSION,
        debug=settings.debug,
        contact={
            "name": "Tracklet Support",
        },
        license_info={
            "name": "MIT",
        },
        openapi_tags=[
            {
                "name": "health",
                "description": "Health check endpoints",
            },
            {
                "name": "session",
                "description": "Sign-in, sign-out and the rendered view",
            },
            {
                "name": "profile",
                "description": "One-time profile setup",
            },
            {
                "name": "activities",
                "description": "Activity logging and statistics",
            },
        ],
    )

    # Rate limiting
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)
    app.add_middleware(SlowAPIMiddleware)

    # Security & tracking middleware (LIFO order - last added = outermost)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # GZip compression for responses > 1KB
    app.add_middleware(GZipMiddleware, minimum_size=1000)

    # Configure CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Setup exception handlers
    setup_exception_handlers(app)

    # Include routers
    app.include_router(health_router)
    app.include_router(v1_router, prefix="/api/v1")

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "main:app",
        host=settings.host,
        port=settings.port,
        reload=not settings.is_production,
    )
