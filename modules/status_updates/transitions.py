"""
Status transitions.

Pure functions that turn a webhook event into the partial row update written
to the store. No I/O happens here.
"""

from datetime import datetime, timezone
from typing import Any, Dict, Optional

from modules.status_updates.config import (
    DEFAULT_ACTOR_ERROR,
    DEFAULT_ANIMATE_ERROR,
    DEFAULT_ANIMATE_PROGRESS,
    DEFAULT_FILE_ERROR,
    DEFAULT_SPEECH_ERROR,
    PIPELINE_STAGES,
    STAGE_ALIASES,
)
from modules.status_updates.models import (
    ActorStatusUpdate,
    AnimateStatusUpdate,
    FileStatusUpdate,
    PipelineStatusUpdate,
    SpeechStatusUpdate,
)
from shared.logging import get_logger

logger = get_logger("status_updates.transitions")


def normalize_stage(stage: str) -> str:
    """Map worker stage aliases onto pipeline stage names."""
    return STAGE_ALIASES.get(stage, stage)


def _timestamp(now: Optional[datetime]) -> str:
    return (now or datetime.now(timezone.utc)).isoformat()


def _media_output(url: Optional[str], duration_seconds: Optional[float], generated_at: str) -> Dict[str, Any]:
    return {
        "url": url,
        "duration_seconds": duration_seconds or None,
        "generated_at": generated_at,
    }


def _completed_stage_fields(update: PipelineStatusUpdate, generated_at: str) -> Dict[str, Any]:
    stage = normalize_stage(update.stage)

    if stage not in PIPELINE_STAGES:
        logger.warning(
            f"Unknown stage: {update.stage}",
            extra={"pipeline_id": update.pipeline_id, "stage": update.stage}
        )
        return {}

    if stage == "first_frame":
        return {
            "first_frame_output": {"url": update.output_url, "generated_at": generated_at},
            "first_frame_complete": True,
        }

    if stage == "script":
        return {
            "script_output": {"text": update.script_text or "", "generated_at": generated_at},
            "script_complete": True,
        }

    if stage == "voice":
        return {
            "voice_output": _media_output(update.output_url, update.duration_seconds, generated_at),
            "voice_complete": True,
        }

    # No completion flag: the final video is the pipeline's end product
    return {
        "final_video_output": _media_output(update.output_url, update.duration_seconds, generated_at),
    }


def build_pipeline_update(
    update: PipelineStatusUpdate,
    now: Optional[datetime] = None
) -> Dict[str, Any]:
    """
    Build the partial `pipelines` row update for a webhook event.

    Args:
        update: Validated webhook event
        now: Timestamp for generated_at (defaults to UTC now)

    Returns:
        Column -> value mapping
    """
    if update.status == "completed":
        data = _completed_stage_fields(update, _timestamp(now))
        data["status"] = "draft"
        return data

    if update.status == "failed":
        # Stage outputs and flags stay untouched so the user can retry
        return {"status": "draft"}

    return {"status": "processing"}


def build_file_update(
    update: FileStatusUpdate,
    now: Optional[datetime] = None
) -> Dict[str, Any]:
    """
    Build the partial `files` row update for a webhook event.

    Args:
        update: Validated webhook event
        now: Timestamp for updated_at (defaults to UTC now)

    Returns:
        Column -> value mapping
    """
    data: Dict[str, Any] = {
        "status": update.status,
        "updated_at": _timestamp(now),
    }

    if update.status == "completed":
        if update.preview_url:
            data["preview_url"] = update.preview_url
        if update.download_url:
            data["download_url"] = update.download_url
        data["metadata"] = update.metadata or {}
        data["error_message"] = None
        data["progress"] = 100
    elif update.status == "failed":
        data["error_message"] = update.error_message or DEFAULT_FILE_ERROR
        data["preview_url"] = None
        data["download_url"] = None
        data["metadata"] = update.metadata or {}
        data["progress"] = 0

    return data


def _generated_file_fields(
    status: str,
    media_url: Optional[str],
    error_message: Optional[str],
    default_error: str,
    progress: Optional[int],
) -> Dict[str, Any]:
    # Speech and animate files keep their Kanban `status`; generation state lives in generation_status
    data: Dict[str, Any] = {"generation_status": status}

    if status == "completed":
        data.update({
            "download_url": media_url,
            "preview_url": media_url,
            "progress": 100,
            "error_message": None,
        })
    elif status == "failed":
        data.update({"error_message": error_message or default_error, "progress": 0})
    elif progress is not None:
        data["progress"] = progress

    return data


def build_speech_update(update: SpeechStatusUpdate) -> Dict[str, Any]:
    """Partial `files` row update for a speech generation event."""
    return _generated_file_fields(
        update.status, update.audio_url, update.error_message, DEFAULT_SPEECH_ERROR, update.progress
    )


def build_speech_pipeline_update(
    update: SpeechStatusUpdate,
    now: Optional[datetime] = None
) -> Optional[Dict[str, Any]]:
    """
    Pipeline voice stage update carried by a completed speech event.

    Returns:
        Column -> value mapping, or None when there is no pipeline to update
    """
    if update.status != "completed" or not update.pipeline_id:
        return None

    timestamp = _timestamp(now)
    return {
        "voice_output": _media_output(update.audio_url, update.audio_duration, timestamp),
        "voice_complete": True,
        "status": "draft",
        "progress": 100,
        "updated_at": timestamp,
    }


def build_animate_update(update: AnimateStatusUpdate) -> Dict[str, Any]:
    """Partial `files` row update for an animation event."""
    return _generated_file_fields(
        update.status, update.video_url, update.error_message, DEFAULT_ANIMATE_ERROR, update.progress
    )


def build_animate_pipeline_update(
    update: AnimateStatusUpdate,
    now: Optional[datetime] = None
) -> Dict[str, Any]:
    """Partial `pipelines` row update mirroring an animation event."""
    timestamp = _timestamp(now)

    if update.status == "completed":
        return {
            "final_video_output": {"url": update.video_url, "generated_at": timestamp},
            "status": "completed",
            "progress": 100,
            "updated_at": timestamp,
        }

    if update.status == "failed":
        return {"status": "failed", "updated_at": timestamp}

    return {
        "status": "processing",
        "progress": update.progress or DEFAULT_ANIMATE_PROGRESS,
        "updated_at": timestamp,
    }


def build_actor_update(update: ActorStatusUpdate) -> Dict[str, Any]:
    """
    Partial `actors` row update for an actor creation event.

    Returns:
        Column -> value mapping; empty when a processing event carries no progress
    """
    if update.status == "completed":
        data: Dict[str, Any] = {"status": "completed", "progress": 100, "error_message": None}
        for field in ("sora_video_url", "voice_url", "profile_image_url", "sora_prompt"):
            value = getattr(update, field)
            if value is not None:
                data[field] = value
        return data

    if update.status == "failed":
        return {
            "status": "failed",
            "error_message": update.error_message or DEFAULT_ACTOR_ERROR,
            "progress": 0,
        }

    if update.progress is None:
        return {}
    return {"progress": update.progress}
