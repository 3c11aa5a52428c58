"""
Pricing module.

Credit costs for pipeline stages and standalone file generations.
"""

from modules.pricing.config import FIRST_FRAME_COST, SCRIPT_COST
from modules.pricing.cost_estimator import (
    generation_cost,
    pipeline_generation_cost,
    video_cost,
    voice_cost,
)

__all__ = [
    "FIRST_FRAME_COST",
    "SCRIPT_COST",
    "generation_cost",
    "pipeline_generation_cost",
    "video_cost",
    "voice_cost",
]
