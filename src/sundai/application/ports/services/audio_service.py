"""
Audio pipeline interface for voice input.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict


class AudioService(ABC):
    """Abstract service that stores and transcribes recordings."""

    @abstractmethod
    async def save_audio(self, audio: bytes) -> Dict[str, Any]:
        """Persist a recording; returns {success, filepath, error}."""
        pass

    @abstractmethod
    async def transcribe_audio(self, filepath: str) -> Any:
        """
        Transcribe a saved recording.

        Returns:
            A string, {text}, {success, transcription} or {error}
        """
        pass
