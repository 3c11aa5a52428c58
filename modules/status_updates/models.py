"""
Pipeline and status update data models.

Pipeline mirrors the hosted `pipelines` row. The *StatusUpdate models are
transient webhook payloads, consumed once per call.
"""

from datetime import datetime
from decimal import Decimal
from typing import Any, ClassVar, Dict, List, Literal, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic import ValidationError as PydanticValidationError

from modules.status_updates.config import STAGE_COMPLETE_FLAGS, WEBHOOK_STATUSES
from shared.errors import ValidationError

PipelineStage = Literal["first_frame", "script", "voice", "final_video"]
PipelineStatus = Literal["draft", "processing", "completed", "failed"]
WebhookStatus = Literal["processing", "completed", "failed"]


class FirstFrameOutput(BaseModel):
    """Generated or uploaded first frame image."""

    url: Optional[str] = None
    generated_at: Optional[datetime] = None
    generation_id: Optional[str] = None


class ScriptOutput(BaseModel):
    """Generated or pasted script."""

    text: str = ""
    generated_at: Optional[datetime] = None
    char_count: Optional[int] = None
    estimated_duration: Optional[float] = None
    generation_id: Optional[str] = None


class VoiceOutput(BaseModel):
    """Generated or uploaded voice track."""

    url: Optional[str] = None
    duration_seconds: Optional[float] = None
    generated_at: Optional[datetime] = None
    generation_id: Optional[str] = None


class FinalVideoOutput(BaseModel):
    """Rendered talking-head video."""

    url: Optional[str] = None
    duration_seconds: Optional[float] = None
    generated_at: Optional[datetime] = None


class Pipeline(BaseModel):
    """A multi-stage content generation job (first frame -> script -> voice -> final video)."""

    model_config = ConfigDict(extra="ignore")

    id: str
    user_id: str
    project_id: Optional[str] = None
    folder_id: Optional[str] = None
    name: str = ""
    pipeline_type: Optional[str] = None
    current_stage: PipelineStage = "first_frame"
    status: PipelineStatus = "draft"
    display_status: Optional[str] = Field(default=None, description="Kanban column")
    progress: Optional[int] = None
    tags: List[str] = Field(default_factory=list)

    first_frame_complete: bool = False
    script_complete: bool = False
    voice_complete: bool = False

    first_frame_input: Dict[str, Any] = Field(default_factory=dict)
    first_frame_output: Optional[FirstFrameOutput] = None
    script_input: Dict[str, Any] = Field(default_factory=dict)
    script_output: Optional[ScriptOutput] = None
    voice_input: Dict[str, Any] = Field(default_factory=dict)
    voice_output: Optional[VoiceOutput] = None
    final_video_input: Dict[str, Any] = Field(default_factory=dict)
    final_video_output: Optional[FinalVideoOutput] = None

    output_file_id: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @model_validator(mode="after")
    def check_outputs_match_flags(self) -> "Pipeline":
        """A stage output may only be set once the stage is marked complete."""
        for stage, flag in STAGE_COMPLETE_FLAGS.items():
            if flag is None:
                continue
            if getattr(self, f"{stage}_output") is not None and not getattr(self, flag):
                raise ValueError(f"{stage}_output is set but {flag} is false")
        return self


class WorkerStatusUpdate(BaseModel):
    """
    Base for webhook payloads sent by generation workers.

    Subclasses name their required fields and the 400 message used when one is
    missing. Empty values count as missing.
    """

    model_config = ConfigDict(extra="ignore")

    required_fields: ClassVar[Tuple[str, ...]] = ("status",)
    missing_fields_message: ClassVar[str] = "Missing required fields"

    status: WebhookStatus
    error_message: Optional[str] = None
    user_id: Optional[str] = None
    credits_cost: Optional[Decimal] = None

    @classmethod
    def from_payload(cls, payload: Any):
        """
        Validate a raw webhook body.

        Raises:
            ValidationError: If required fields are missing or values are invalid
        """
        if not isinstance(payload, dict):
            raise ValidationError("Request body must be a JSON object")
        if not all(payload.get(key) for key in cls.required_fields):
            raise ValidationError(cls.missing_fields_message)
        if payload["status"] not in WEBHOOK_STATUSES:
            raise ValidationError("Invalid status. Must be: completed, failed, or processing")

        try:
            return cls.model_validate(payload)
        except PydanticValidationError as e:
            fields = ", ".join(str(err["loc"][0]) for err in e.errors() if err.get("loc"))
            pipeline_id = payload.get("pipeline_id")
            raise ValidationError(
                f"Invalid field values: {fields}",
                pipeline_id=str(pipeline_id) if pipeline_id else None
            ) from e

    @property
    def should_refund(self) -> bool:
        """Refund only on failure when both the user and a non-zero cost are known."""
        return self.status == "failed" and bool(self.user_id) and bool(self.credits_cost)


class PipelineStatusUpdate(WorkerStatusUpdate):
    """Stage completion/failure event sent by a worker."""

    required_fields: ClassVar[Tuple[str, ...]] = ("pipeline_id", "stage", "status")
    missing_fields_message: ClassVar[str] = "Missing required fields: pipeline_id, stage, and status"

    pipeline_id: str
    stage: str
    output_url: Optional[str] = None
    script_text: Optional[str] = None
    duration_seconds: Optional[float] = None


class FileStatusUpdate(WorkerStatusUpdate):
    """Generation status event for a standalone file."""

    required_fields: ClassVar[Tuple[str, ...]] = ("file_id", "status")
    missing_fields_message: ClassVar[str] = "Missing required fields: file_id, status"

    file_id: str
    preview_url: Optional[str] = None
    download_url: Optional[str] = None
    metadata: Optional[Dict[str, Any]] = None


class SpeechStatusUpdate(WorkerStatusUpdate):
    """Speech file event; also completes the pipeline voice stage when pipeline_id is sent."""

    required_fields: ClassVar[Tuple[str, ...]] = ("file_id", "status")
    missing_fields_message: ClassVar[str] = "Missing required fields: file_id and status"

    file_id: str
    pipeline_id: Optional[str] = None
    audio_url: Optional[str] = None
    audio_duration: Optional[float] = None
    progress: Optional[int] = None


class AnimateStatusUpdate(WorkerStatusUpdate):
    """Animation event. The animated file and its pipeline share one id."""

    required_fields: ClassVar[Tuple[str, ...]] = ("file_id", "status")
    missing_fields_message: ClassVar[str] = "Missing required fields: file_id and status"

    file_id: str
    video_url: Optional[str] = None
    progress: Optional[int] = None


class ActorStatusUpdate(WorkerStatusUpdate):
    """Actor creation event."""

    required_fields: ClassVar[Tuple[str, ...]] = ("actor_id", "status")
    missing_fields_message: ClassVar[str] = "Missing required fields: actor_id and status"

    actor_id: str
    sora_video_url: Optional[str] = None
    voice_url: Optional[str] = None
    profile_image_url: Optional[str] = None
    sora_prompt: Optional[str] = None
    progress: Optional[int] = None
