"""
Pricing configuration.

Credit rates for pipeline stages and standalone file generations. Credits are
the product's internal currency.
"""
from decimal import Decimal
from typing import Dict

# Fixed costs, charged per generation/edit/regenerate
FIRST_FRAME_COST = Decimal("0.25")
SCRIPT_COST = Decimal("0.25")
HUMANIZE_COST = Decimal("0.25")
ACTOR_CREATE_COST = Decimal("0.5")

# Still frames are priced by resolution
FRAME_BASE_COST = Decimal("0.1")
FRAME_4K_COST = Decimal("0.15")

# Variable rates
VOICE_COST_PER_1000_CHARS = Decimal("0.25")
VIDEO_COST_PER_SECOND = Decimal("0.2")
LIP_SYNC_COST_PER_SECOND = Decimal("0.15")
ANIMATE_COST_PER_SECOND = Decimal("0.15")

# Lip sync never bills less than one second
MINIMUM_LIP_SYNC_COST = Decimal("0.15")

# Video generations fall back to this length when the payload has none
DEFAULT_VIDEO_SECONDS = 5

# Charged for generation types the pricing table does not know
MINIMUM_GENERATION_COST = Decimal("0.25")

# Pipeline generation types as sent to the generation trigger
PIPELINE_GENERATION_TYPES = (
    "pipeline_first_frame",
    "pipeline_first_frame_b_roll",
    "pipeline_script",
    "pipeline_voice",
    "pipeline_final_video",
)

FIXED_GENERATION_COSTS: Dict[str, Decimal] = {
    "pipeline_first_frame": FIRST_FRAME_COST,
    "pipeline_first_frame_b_roll": FIRST_FRAME_COST,
    "pipeline_script": SCRIPT_COST,
    "first_frame": FIRST_FRAME_COST,
    "script": SCRIPT_COST,
    "humanize": HUMANIZE_COST,
    "create_actor": ACTOR_CREATE_COST,
}
