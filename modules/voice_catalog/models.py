"""
Voice catalog data models.
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class SharedVoice(BaseModel):
    """A voice from the ElevenLabs shared library. Unlisted upstream fields are kept."""

    model_config = ConfigDict(extra="allow")

    voice_id: str
    name: str = ""
    accent: Optional[str] = None
    gender: Optional[str] = None
    age: Optional[str] = None
    descriptive: Optional[str] = None
    use_case: Optional[str] = None
    category: Optional[str] = None
    language: Optional[str] = None
    description: Optional[str] = None
    preview_url: Optional[str] = None


class SharedVoicesPage(BaseModel):
    """One page of the upstream listing."""

    model_config = ConfigDict(extra="ignore")

    voices: List[SharedVoice] = Field(default_factory=list)
    has_more: bool = False
    next_page_token: Optional[str] = None
