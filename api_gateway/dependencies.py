"""
FastAPI dependencies.

Webhook authentication and injection of settings, store and upstream clients.
"""

import hmac
from functools import lru_cache

from fastapi import Depends, Request

from modules.status_updates.store import StatusStore
from modules.voice_catalog.client import VoiceCatalogClient
from shared.config import Settings, get_settings
from shared.database import DatabaseClient
from shared.errors import AuthenticationError
from shared.logging import get_logger

logger = get_logger(__name__)


async def verify_webhook_secret(
    request: Request,
    settings: Settings = Depends(get_settings)
) -> None:
    """
    Check the shared secret header sent by workers.

    Args:
        request: Incoming request
        settings: Resolved settings (secret and header name)

    Raises:
        AuthenticationError: If the header is missing or does not match
    """
    provided = request.headers.get(settings.webhook_secret_header)
    if not provided or not hmac.compare_digest(
        provided.encode("utf-8"), settings.webhook_secret.encode("utf-8")
    ):
        logger.error(
            "Invalid or missing API key",
            extra={"path": request.url.path, "header_present": provided is not None}
        )
        raise AuthenticationError("Unauthorized")


@lru_cache
def get_database_client() -> DatabaseClient:
    """Process-wide Supabase client (service role)."""
    return DatabaseClient(get_settings())


def get_status_store(db_client: DatabaseClient = Depends(get_database_client)) -> StatusStore:
    """Status store backed by the process-wide Supabase client."""
    return StatusStore(db_client)


def get_voice_client(settings: Settings = Depends(get_settings)) -> VoiceCatalogClient:
    """ElevenLabs catalog client built from settings."""
    return VoiceCatalogClient(
        api_key=settings.elevenlabs_api_key,
        base_url=settings.elevenlabs_base_url,
    )
