"""
Voice catalog endpoint.

Aggregated ElevenLabs shared voices for the voice picker.
"""

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from api_gateway.dependencies import get_voice_client
from modules.voice_catalog.client import VoiceCatalogClient
from shared.errors import UpstreamError
from shared.logging import get_logger

logger = get_logger(__name__)

router = APIRouter()


def _error(message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": message}
    )


@router.get("/elevenlabs-voices")
async def list_voices(client: VoiceCatalogClient = Depends(get_voice_client)):
    """
    List shared voices sorted by name.

    Returns:
        {"voices": [...]}, or {"error": ...} with status 500
    """
    try:
        voices = await client.list_shared_voices()
    except UpstreamError as e:
        logger.error("Error fetching voices", extra={"error_message": e.message})
        return _error(e.message)
    except Exception as e:
        logger.error("Unexpected error fetching voices", exc_info=e, extra={"error_type": type(e).__name__})
        return _error("Internal server error")

    return {"voices": [voice.model_dump(exclude_none=True) for voice in voices]}
