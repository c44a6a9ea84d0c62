"""
Voice input: recordings are written to a temp directory and transcribed with
an Azure OpenAI Whisper deployment.
"""

import logging
import os
import uuid
from pathlib import Path
from typing import Any, Dict, Optional

from sundai.application.ports.services.audio_service import AudioService
from sundai.core.ai_client import AzureAIClient
from sundai.core.config import AudioSettings, get_settings

logger = logging.getLogger(__name__)


class WhisperAudioService(AudioService):
    def __init__(self, client: Optional[AzureAIClient] = None, settings: Optional[AudioSettings] = None) -> None:
        self._client = client or AzureAIClient()
        self._settings = settings or get_settings().audio

    async def save_audio(self, audio: bytes) -> Dict[str, Any]:
        max_bytes = self._settings.max_size_mb * 1024 * 1024
        if len(audio) > max_bytes:
            return {
                "success": False,
                "error": f"Audio file too large ({len(audio) / (1024 * 1024):.1f}MB, max {self._settings.max_size_mb}MB)",
            }
        try:
            directory = Path(self._settings.temp_dir)
            directory.mkdir(parents=True, exist_ok=True)
            filepath = directory / f"recording_{uuid.uuid4().hex}.webm"
            filepath.write_bytes(audio)
        except OSError as e:
            logger.error(f"❌ Failed to save audio: {e}")
            return {"success": False, "error": f"Failed to save audio: {e}"}
        return {"success": True, "filepath": str(filepath)}

    async def transcribe_audio(self, filepath: str) -> Dict[str, Any]:
        try:
            with open(filepath, "rb") as f:
                resp = await self._client.transcribe_whisper(f)
            text = (getattr(resp, "text", "") or "").strip()
            return {"success": bool(text), "transcription": text, "error": None if text else "No speech detected"}
        except Exception as e:
            logger.error(f"❌ Whisper transcription failed: {e}")
            return {"success": False, "error": f"Transcription failed: {e}"}
        finally:
            try:
                os.remove(filepath)
            except OSError:
                logger.debug(f"Could not remove temp audio {filepath}")
