"""
Credit cost estimation.

Voice: ceil(chars / 1000) * 0.25. Video: seconds * 0.2. Everything else is
looked up by generation type.
"""
import math
from decimal import Decimal
from typing import Any, Dict, Optional, Union

from modules.pricing.config import (
    ANIMATE_COST_PER_SECOND,
    DEFAULT_VIDEO_SECONDS,
    FIXED_GENERATION_COSTS,
    FRAME_4K_COST,
    FRAME_BASE_COST,
    LIP_SYNC_COST_PER_SECOND,
    MINIMUM_GENERATION_COST,
    MINIMUM_LIP_SYNC_COST,
    PIPELINE_GENERATION_TYPES,
    VIDEO_COST_PER_SECOND,
    VOICE_COST_PER_1000_CHARS,
)
from shared.errors import ValidationError
from shared.logging import get_logger

logger = get_logger("pricing.cost_estimator")

Number = Union[int, float]


def _non_negative(value: Number, label: str) -> Decimal:
    if value < 0:
        raise ValidationError(f"{label} cannot be negative: {value}")
    return Decimal(str(value))


def voice_cost(char_count: Number) -> Decimal:
    """
    Credit cost for voice generation.

    Args:
        char_count: Number of characters in the script

    Returns:
        Cost in credits, billed per started block of 1000 characters

    Raises:
        ValidationError: If char_count is negative
    """
    chars = _non_negative(char_count, "Character count")
    return math.ceil(chars / 1000) * VOICE_COST_PER_1000_CHARS


def video_cost(audio_duration_seconds: Number) -> Decimal:
    """
    Credit cost for final video generation.

    Args:
        audio_duration_seconds: Length of the voice track in seconds

    Returns:
        Cost in credits

    Raises:
        ValidationError: If duration is negative
    """
    return _non_negative(audio_duration_seconds, "Audio duration") * VIDEO_COST_PER_SECOND


def lip_sync_cost(audio_duration_seconds: Number) -> Decimal:
    """Per-second lip sync cost with a one-second floor."""
    seconds = _non_negative(audio_duration_seconds, "Audio duration")
    return max(MINIMUM_LIP_SYNC_COST, seconds * LIP_SYNC_COST_PER_SECOND)


def animate_cost(duration_seconds: Number) -> Decimal:
    """Per-second animation cost."""
    return _non_negative(duration_seconds, "Animation duration") * ANIMATE_COST_PER_SECOND


def frame_cost(resolution: Optional[str]) -> Decimal:
    """Still frame cost; 4K frames cost more."""
    return FRAME_4K_COST if resolution == "4K" else FRAME_BASE_COST


def _first_present(payload: Dict[str, Any], *keys: str, default: Number = 0) -> Number:
    for key in keys:
        if payload.get(key):
            return payload[key]
    return default


def _text_length(payload: Dict[str, Any], key: str) -> int:
    text = payload.get(key)
    return len(text) if text else 0


def generation_cost(generation_type: str, payload: Optional[Dict[str, Any]] = None) -> Decimal:
    """
    Server-side cost for a generation request.

    Args:
        generation_type: Pipeline (`pipeline_*`) or standalone file generation type
        payload: Request payload; only the fields the type is priced on are read

    Returns:
        Cost in credits
    """
    payload = payload or {}

    if generation_type in FIXED_GENERATION_COSTS:
        return FIXED_GENERATION_COSTS[generation_type]

    if generation_type == "pipeline_voice":
        char_count = payload.get("char_count") or _text_length(payload, "script_text")
        return voice_cost(char_count)

    if generation_type == "pipeline_final_video":
        return video_cost(_first_present(
            payload, "audio_duration_seconds", "duration_seconds", default=DEFAULT_VIDEO_SECONDS
        ))

    if generation_type in ("speech", "audio"):
        return voice_cost(_text_length(payload, "script"))

    if generation_type == "lip_sync":
        return lip_sync_cost(_first_present(payload, "audio_duration"))

    if generation_type == "animate":
        return animate_cost(_first_present(
            payload, "duration", "duration_seconds", default=DEFAULT_VIDEO_SECONDS
        ))

    if generation_type == "frame":
        return frame_cost(payload.get("frame_resolution"))

    if generation_type in ("talking_head", "b_roll"):
        return video_cost(_first_present(payload, "audio_duration", default=DEFAULT_VIDEO_SECONDS))

    logger.warning(
        f"Unknown generation type for cost calculation: {generation_type}",
        extra={"generation_type": generation_type}
    )
    return MINIMUM_GENERATION_COST


def pipeline_generation_cost(
    generation_type: str,
    char_count: Optional[int] = None,
    script_text: Optional[str] = None,
    audio_duration_seconds: Optional[float] = None,
    duration_seconds: Optional[float] = None,
) -> Decimal:
    """
    Server-side cost for a pipeline stage generation.

    Args:
        generation_type: One of PIPELINE_GENERATION_TYPES
        char_count: Script length for pipeline_voice (preferred over script_text)
        script_text: Script used to derive char_count when it is not given
        audio_duration_seconds: Voice length for pipeline_final_video
        duration_seconds: Fallback length for pipeline_final_video

    Returns:
        Cost in credits
    """
    if generation_type not in PIPELINE_GENERATION_TYPES:
        logger.warning(
            f"Unknown pipeline generation type: {generation_type}",
            extra={"generation_type": generation_type}
        )
        return MINIMUM_GENERATION_COST

    return generation_cost(generation_type, {
        "char_count": char_count,
        "script_text": script_text,
        "audio_duration_seconds": audio_duration_seconds,
        "duration_seconds": duration_seconds,
    })
