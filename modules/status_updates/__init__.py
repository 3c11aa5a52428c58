"""
Status Updates module.

Applies worker-reported generation events to pipelines, files and actors,
refunding credits on failure.
"""

from modules.status_updates.process import (
    apply_actor_status,
    apply_animate_status,
    apply_file_status,
    apply_pipeline_status,
    apply_speech_status,
)

__all__ = [
    "apply_actor_status",
    "apply_animate_status",
    "apply_file_status",
    "apply_pipeline_status",
    "apply_speech_status",
]
