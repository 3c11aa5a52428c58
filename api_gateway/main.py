"""
FastAPI application.

Worker webhooks, the voice catalog proxy and a health check.
"""

from typing import Optional

from fastapi import Depends, FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from api_gateway.dependencies import get_database_client
from api_gateway.routes import status_webhooks, voices
from shared.config import Settings, get_settings
from shared.database import DatabaseClient
from shared.errors import AuthenticationError, ValidationError
from shared.logging import get_logger

logger = get_logger(__name__)

# Webhooks and the voice catalog are served under this prefix; /health is not
API_PREFIX = "/api/v1"


async def authentication_error_handler(request: Request, exc: AuthenticationError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_401_UNAUTHORIZED,
        content={"success": False, "error": "Unauthorized"}
    )


async def validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
    logger.warning(
        f"Rejected request: {exc.message}",
        extra={"path": request.url.path, "pipeline_id": exc.pipeline_id}
    )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"success": False, "error": exc.message}
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        "Unhandled error",
        exc_info=exc,
        extra={"path": request.url.path, "error_type": type(exc).__name__}
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"success": False, "error": "Internal server error"}
    )


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the API application.

    Args:
        settings: Settings to configure CORS with (defaults to process settings)

    Returns:
        Configured FastAPI app
    """
    settings = settings or get_settings()

    app = FastAPI(
        title="Creator Pipeline API",
        description="Worker status webhooks and voice catalog for the video-ad pipeline",
        version="1.0.0",
    )

    # Workers and the dashboard call from anywhere; auth is the shared secret, not origin
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=settings.cors_allow_headers,
    )

    app.add_exception_handler(AuthenticationError, authentication_error_handler)
    app.add_exception_handler(ValidationError, validation_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    app.include_router(status_webhooks.router, prefix=API_PREFIX, tags=["webhooks"])
    app.include_router(voices.router, prefix=API_PREFIX, tags=["voices"])

    @app.get("/health")
    async def health(db_client: DatabaseClient = Depends(get_database_client)):
        """Liveness check with the store connection state."""
        database_ok = await db_client.health_check()
        return {
            "status": "ok" if database_ok else "degraded",
            "environment": settings.environment,
            "database": "ok" if database_ok else "unavailable",
        }

    logger.info(
        "API gateway configured",
        extra={
            "environment": settings.environment,
            "webhook_secret_header": settings.webhook_secret_header,
            "elevenlabs_configured": settings.elevenlabs_api_key is not None,
        }
    )
    return app


app = create_app()
