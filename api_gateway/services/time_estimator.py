"""
Time estimation service.

Estimates how long a generation task takes and renders the remaining time
shown on in-progress cards.
"""

import math
from datetime import datetime, timezone
from typing import Optional, Union


# Fixed durations by generation type (in seconds)
FIXED_DURATIONS = {
    "create_actor": 360,  # 6 minutes
    "first_frame": 30,
    "script": 20,
    "b_roll": 120,
}

# Speech: 5 seconds per 20 characters
SPEECH_SECONDS_PER_20_CHARS = 5
SPEECH_MIN_SECONDS = 10
SPEECH_DEFAULT_SECONDS = 30

# Lip sync: 4 minutes per 8 seconds of audio
LIP_SYNC_SECONDS_PER_8_AUDIO_SECONDS = 240
LIP_SYNC_MIN_SECONDS = 120
LIP_SYNC_DEFAULT_SECONDS = 240

UNKNOWN_TASK_SECONDS = 60


def estimate_duration(
    task_type: str,
    character_count: Optional[int] = None,
    audio_duration_seconds: Optional[float] = None,
) -> int:
    """
    Estimate duration in seconds for a generation task.

    Args:
        task_type: Generation type (create_actor, speech, lip_sync, first_frame, script, b_roll)
        character_count: Script length, used by speech
        audio_duration_seconds: Audio length, used by lip_sync

    Returns:
        Estimated duration in seconds
    """
    if task_type in FIXED_DURATIONS:
        return FIXED_DURATIONS[task_type]

    if task_type == "speech":
        if not character_count:
            return SPEECH_DEFAULT_SECONDS
        speech_seconds = character_count * SPEECH_SECONDS_PER_20_CHARS / 20
        return max(SPEECH_MIN_SECONDS, math.ceil(speech_seconds))

    if task_type == "lip_sync":
        if not audio_duration_seconds:
            return LIP_SYNC_DEFAULT_SECONDS
        lip_sync_seconds = audio_duration_seconds * LIP_SYNC_SECONDS_PER_8_AUDIO_SECONDS / 8
        return max(LIP_SYNC_MIN_SECONDS, math.ceil(lip_sync_seconds))

    return UNKNOWN_TASK_SECONDS


def _parse_timestamp(value: Union[datetime, str]) -> datetime:
    """Parse an ISO-8601 timestamp; naive values are taken as UTC."""
    if isinstance(value, str):
        value = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value


def remaining_time_label(
    started_at: Union[datetime, str],
    estimated_seconds: float,
    now: Optional[datetime] = None,
) -> str:
    """
    Human-readable remaining time for an in-progress generation.

    Args:
        started_at: When the generation started (datetime or ISO string)
        estimated_seconds: Estimated total duration
        now: Current time (defaults to UTC now)

    Returns:
        "Almost done...", "~{n}s remaining" or "~{n}m remaining"
    """
    start = _parse_timestamp(started_at)
    current = _parse_timestamp(now) if now is not None else datetime.now(timezone.utc)

    elapsed = (current - start).total_seconds()
    remaining = max(0.0, estimated_seconds - elapsed)

    if remaining <= 0:
        return "Almost done..."
    if remaining < 60:
        return f"~{math.ceil(remaining)}s remaining"
    return f"~{math.ceil(remaining / 60)}m remaining"
