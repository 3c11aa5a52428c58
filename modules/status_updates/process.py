"""
Status update orchestration.

Applies a validated webhook event: refund (when owed) and row updates. The
writes are independent; none is rolled back if another fails.
"""

from datetime import datetime
from typing import Any, Dict, Optional

from modules.status_updates.config import (
    failure_refund_description,
    file_refund_description,
    pipeline_refund_description,
)
from modules.status_updates.models import (
    ActorStatusUpdate,
    AnimateStatusUpdate,
    FileStatusUpdate,
    PipelineStatusUpdate,
    SpeechStatusUpdate,
    WorkerStatusUpdate,
)
from modules.status_updates.store import StatusStore
from modules.status_updates.transitions import (
    build_actor_update,
    build_animate_pipeline_update,
    build_animate_update,
    build_file_update,
    build_pipeline_update,
    build_speech_pipeline_update,
    build_speech_update,
)
from shared.errors import PersistenceError, RefundError
from shared.logging import get_logger, pipeline_context

logger = get_logger("status_updates.process")


async def _refund(store: StatusStore, update: WorkerStatusUpdate, description: str) -> bool:
    """Issue the refund owed for a failed event; failures are logged and never propagate."""
    if not update.should_refund:
        return False

    extra = {"user_id": update.user_id, "credits_cost": float(update.credits_cost)}
    try:
        await store.refund_credits(update.user_id, update.credits_cost, description)
    except RefundError as e:
        logger.error("Error refunding credits", exc_info=e, extra=extra)
        return False

    logger.info("Credits refunded", extra=extra)
    return True


async def _mirror_to_pipeline(store: StatusStore, pipeline_id: str, data: Dict[str, Any]) -> bool:
    """Best-effort pipeline write that follows a file update; failures are logged only."""
    try:
        await store.update_pipeline(pipeline_id, data)
    except PersistenceError as e:
        logger.error(
            "Pipeline update error",
            exc_info=e,
            extra={"mirrored_pipeline_id": pipeline_id, "fields": sorted(data)}
        )
        return False
    return True


async def apply_pipeline_status(
    update: PipelineStatusUpdate,
    store: StatusStore,
    now: Optional[datetime] = None
) -> None:
    """
    Apply a pipeline stage event.

    Args:
        update: Validated webhook event
        store: Status store
        now: Timestamp for stage outputs (defaults to UTC now)

    Raises:
        PersistenceError: If the pipeline update fails
    """
    with pipeline_context(update.pipeline_id):
        logger.info(
            "Received pipeline status update",
            extra={"stage": update.stage, "status": update.status}
        )

        await _refund(store, update, pipeline_refund_description(update.stage, update.error_message))

        data = build_pipeline_update(update, now=now)
        await store.update_pipeline(update.pipeline_id, data)

        logger.info(
            "Pipeline updated successfully",
            extra={"stage": update.stage, "status": update.status, "fields": sorted(data)}
        )


async def apply_file_status(
    update: FileStatusUpdate,
    store: StatusStore,
    now: Optional[datetime] = None
) -> None:
    """
    Apply a standalone file generation event.

    The file row is written first; the refund only happens once it succeeded.

    Raises:
        PersistenceError: If the file update fails
    """
    with pipeline_context(update.file_id):
        logger.info("Received file status update", extra={"status": update.status})

        data = build_file_update(update, now=now)
        await store.update_file(update.file_id, data)

        logger.info("File updated successfully", extra={"status": update.status})

        await _refund(store, update, file_refund_description(update.file_id))


async def apply_speech_status(
    update: SpeechStatusUpdate,
    store: StatusStore,
    now: Optional[datetime] = None
) -> None:
    """
    Apply a speech generation event.

    A completed event carrying pipeline_id also completes that pipeline's
    voice stage.

    Raises:
        PersistenceError: If the file update fails
    """
    with pipeline_context(update.pipeline_id or update.file_id):
        logger.info(
            "Received speech status update",
            extra={"file_id": update.file_id, "status": update.status}
        )

        await store.update_file(update.file_id, build_speech_update(update))

        pipeline_data = build_speech_pipeline_update(update, now=now)
        if pipeline_data is not None:
            await _mirror_to_pipeline(store, update.pipeline_id, pipeline_data)

        await _refund(
            store, update, failure_refund_description("Speech generation", update.error_message)
        )


async def apply_animate_status(
    update: AnimateStatusUpdate,
    store: StatusStore,
    now: Optional[datetime] = None
) -> None:
    """
    Apply an animation event to the file and to the pipeline sharing its id.

    Raises:
        PersistenceError: If the file update fails
    """
    with pipeline_context(update.file_id):
        logger.info("Received animate status update", extra={"status": update.status})

        await store.update_file(update.file_id, build_animate_update(update))
        await _mirror_to_pipeline(store, update.file_id, build_animate_pipeline_update(update, now=now))

        await _refund(
            store, update, failure_refund_description("Animation", update.error_message)
        )


async def apply_actor_status(update: ActorStatusUpdate, store: StatusStore) -> None:
    """
    Apply an actor creation event.

    Processing events without a progress figure write nothing.

    Raises:
        PersistenceError: If the actor update fails
    """
    with pipeline_context(update.actor_id):
        logger.info("Received actor status update", extra={"status": update.status})

        data = build_actor_update(update)
        if data:
            await store.update_actor(update.actor_id, data)

        await _refund(
            store, update, failure_refund_description("Actor creation", update.error_message)
        )
