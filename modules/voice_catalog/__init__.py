"""
Voice Catalog module.

Proxies the ElevenLabs shared voice library.
"""

from modules.voice_catalog.client import VoiceCatalogClient
from modules.voice_catalog.models import SharedVoice

__all__ = ["SharedVoice", "VoiceCatalogClient"]
