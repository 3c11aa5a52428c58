"""
Status update configuration.

Stage names, statuses, table names and the refund contract.
"""
from typing import Dict, Optional

PIPELINE_STAGES = ("first_frame", "script", "voice", "final_video")

# Worker-reported status values accepted by the webhooks
WEBHOOK_STATUSES = ("processing", "completed", "failed")

# Workers report the voice stage as "speech" in some flows
STAGE_ALIASES: Dict[str, str] = {"speech": "voice"}

# Completion flag per stage; final_video has none
STAGE_COMPLETE_FLAGS: Dict[str, Optional[str]] = {
    "first_frame": "first_frame_complete",
    "script": "script_complete",
    "voice": "voice_complete",
    "final_video": None,
}

PIPELINES_TABLE = "pipelines"
FILES_TABLE = "files"
ACTORS_TABLE = "actors"

REFUND_RPC = "refund_credits"

DEFAULT_REFUND_ERROR = "Unknown error"
DEFAULT_FILE_ERROR = "Generation failed"
DEFAULT_SPEECH_ERROR = "Speech generation failed"
DEFAULT_ANIMATE_ERROR = "Animation failed"
DEFAULT_ACTOR_ERROR = "Unknown error occurred"

# Pipeline progress reported while an animation runs without a worker figure
DEFAULT_ANIMATE_PROGRESS = 50


def failure_refund_description(action: str, error_message: Optional[str]) -> str:
    """Ledger description for a refund after `action` failed."""
    return f"{action} failed: {error_message or DEFAULT_REFUND_ERROR}"


def pipeline_refund_description(stage: str, error_message: Optional[str]) -> str:
    """Ledger description for a refunded pipeline stage."""
    return failure_refund_description(f"Pipeline {stage} generation", error_message)


def file_refund_description(file_id: str) -> str:
    """Ledger description for a refunded standalone file generation."""
    return f"Refund for failed generation (file: {file_id})"
