"""
ElevenLabs shared voice catalog client.

Pages through the shared-voice listing and returns one name-sorted list.
"""

from typing import Any, Dict, List, Optional

import httpx
from pydantic import ValidationError as PydanticValidationError

from modules.voice_catalog.config import (
    API_KEY_HEADER,
    MAX_PAGES,
    PAGE_SIZE,
    PAGE_TOKEN_PARAM,
    REQUEST_TIMEOUT_SECONDS,
    SHARED_VOICES_PATH,
)
from modules.voice_catalog.models import SharedVoice, SharedVoicesPage
from shared.errors import UpstreamError
from shared.logging import get_logger

logger = get_logger("voice_catalog.client")


def _is_absolute_url(token: str) -> bool:
    return token.startswith(("http://", "https://"))


class VoiceCatalogClient:
    """Client for the ElevenLabs shared voice library."""

    def __init__(
        self,
        api_key: Optional[str],
        base_url: str = "https://api.elevenlabs.io",
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize voice catalog client.

        Args:
            api_key: ElevenLabs API key (None when not configured)
            base_url: API base URL
            transport: Optional httpx transport (tests inject a MockTransport)
        """
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.transport = transport

    @property
    def listing_url(self) -> str:
        return f"{self.base_url}{SHARED_VOICES_PATH}"

    async def _fetch_page(
        self,
        client: httpx.AsyncClient,
        page_number: int,
        token: Optional[str],
    ) -> SharedVoicesPage:
        params: Optional[Dict[str, Any]] = None
        if token and _is_absolute_url(token):
            url = token
        else:
            url = self.listing_url
            params = {"page_size": PAGE_SIZE}
            if token:
                params[PAGE_TOKEN_PARAM] = token

        try:
            response = await client.get(url, params=params)
        except httpx.RequestError as e:
            logger.error(
                f"Network error fetching voices page {page_number}: {str(e)}",
                extra={"page": page_number, "error_type": type(e).__name__}
            )
            raise UpstreamError(f"Failed to reach ElevenLabs: {str(e)}") from e

        if not response.is_success:
            logger.error(
                f"ElevenLabs API error: {response.status_code}",
                extra={"page": page_number, "status_code": response.status_code}
            )
            raise UpstreamError(f"ElevenLabs API error: {response.status_code}")

        try:
            return SharedVoicesPage.model_validate(response.json())
        except (ValueError, PydanticValidationError) as e:
            raise UpstreamError("Invalid response from ElevenLabs") from e

    async def list_shared_voices(self) -> List[SharedVoice]:
        """
        Fetch up to MAX_PAGES pages of shared voices.

        Returns:
            All fetched voices sorted by name

        Raises:
            UpstreamError: If the key is missing or any page fails
        """
        if not self.api_key:
            logger.error("ELEVENLABS_API_KEY is not configured")
            raise UpstreamError("ElevenLabs API key not configured")

        voices: List[SharedVoice] = []
        token: Optional[str] = None
        headers = {API_KEY_HEADER: self.api_key, "Content-Type": "application/json"}

        async with httpx.AsyncClient(
            timeout=REQUEST_TIMEOUT_SECONDS,
            headers=headers,
            transport=self.transport,
        ) as client:
            for page_number in range(1, MAX_PAGES + 1):
                page = await self._fetch_page(client, page_number, token)
                voices.extend(page.voices)
                logger.debug(
                    f"Fetched voices page {page_number}",
                    extra={"page": page_number, "count": len(page.voices), "has_more": page.has_more}
                )

                if not page.has_more or not page.next_page_token:
                    break
                token = page.next_page_token

        voices.sort(key=lambda voice: voice.name.casefold())
        logger.info(f"Returning {len(voices)} total voices", extra={"count": len(voices)})
        return voices
