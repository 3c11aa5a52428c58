"""
Status webhook endpoints.

Called by generation workers when a pipeline stage, a standalone file, a
speech or animation file, or an actor changes state. Guarded by the shared
webhook secret.
"""

import json

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse

from api_gateway.dependencies import get_status_store, verify_webhook_secret
from modules.status_updates.models import (
    ActorStatusUpdate,
    AnimateStatusUpdate,
    FileStatusUpdate,
    PipelineStatusUpdate,
    SpeechStatusUpdate,
)
from modules.status_updates.process import (
    apply_actor_status,
    apply_animate_status,
    apply_file_status,
    apply_pipeline_status,
    apply_speech_status,
)
from modules.status_updates.store import StatusStore
from shared.errors import PersistenceError, ValidationError
from shared.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(dependencies=[Depends(verify_webhook_secret)])


async def _read_json(request: Request):
    try:
        return await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise ValidationError("Request body must be valid JSON") from e


def _write_failed(error: str) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"success": False, "error": error}
    )


@router.post("/update-pipeline-status")
async def update_pipeline_status(
    request: Request,
    store: StatusStore = Depends(get_status_store)
):
    """
    Apply a pipeline stage event.

    Returns:
        {"success": true} on success; {"success": false, "error": ...} otherwise
    """
    update = PipelineStatusUpdate.from_payload(await _read_json(request))

    try:
        await apply_pipeline_status(update, store)
    except PersistenceError as e:
        logger.error(
            "Error updating pipeline",
            exc_info=e,
            extra={"pipeline_id": update.pipeline_id, "stage": update.stage, "status": update.status}
        )
        return _write_failed("Internal server error")

    return {"success": True}


@router.post("/update-file-status")
async def update_file_status(
    request: Request,
    store: StatusStore = Depends(get_status_store)
):
    """
    Apply a standalone file generation event.

    Returns:
        {"success": true, "file_id": ..., "status": ...} on success
    """
    update = FileStatusUpdate.from_payload(await _read_json(request))

    try:
        await apply_file_status(update, store)
    except PersistenceError as e:
        logger.error(
            "Error updating file",
            exc_info=e,
            extra={"file_id": update.file_id, "status": update.status}
        )
        return _write_failed("Failed to update file")

    return {"success": True, "file_id": update.file_id, "status": update.status}


@router.post("/update-speech-status")
async def update_speech_status(
    request: Request,
    store: StatusStore = Depends(get_status_store)
):
    """Apply a speech generation event; completes the pipeline voice stage when linked."""
    update = SpeechStatusUpdate.from_payload(await _read_json(request))

    try:
        await apply_speech_status(update, store)
    except PersistenceError as e:
        logger.error(
            "Error updating speech file",
            exc_info=e,
            extra={"file_id": update.file_id, "status": update.status}
        )
        return _write_failed("Internal server error")

    return {"success": True}


@router.post("/update-animate-status")
async def update_animate_status(
    request: Request,
    store: StatusStore = Depends(get_status_store)
):
    """Apply an animation event to the file and its pipeline."""
    update = AnimateStatusUpdate.from_payload(await _read_json(request))

    try:
        await apply_animate_status(update, store)
    except PersistenceError as e:
        logger.error(
            "Error updating animation",
            exc_info=e,
            extra={"file_id": update.file_id, "status": update.status}
        )
        return _write_failed("Internal server error")

    return {"success": True}


@router.post("/update-actor-status")
async def update_actor_status(
    request: Request,
    store: StatusStore = Depends(get_status_store)
):
    """Apply an actor creation event."""
    update = ActorStatusUpdate.from_payload(await _read_json(request))

    try:
        await apply_actor_status(update, store)
    except PersistenceError as e:
        logger.error(
            "Error updating actor",
            exc_info=e,
            extra={"actor_id": update.actor_id, "status": update.status}
        )
        return _write_failed("Internal server error")

    return {"success": True}
