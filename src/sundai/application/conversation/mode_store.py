"""
Persistence of the selected assistant mode across sessions.
"""

import json
import logging
from pathlib import Path
from typing import Union

from ...domain.enums import AssistantMode

logger = logging.getLogger(__name__)


class ModePreferenceStore:
    """Stores the assistant mode in a small JSON file."""

    def __init__(self, path: Union[str, Path], default: AssistantMode = AssistantMode.TOOL) -> None:
        self._path = Path(path)
        self._default = default

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> AssistantMode:
        """Saved mode, or the default when nothing valid is saved."""
        if not self._path.exists():
            return self._default
        try:
            payload = json.loads(self._path.read_text(encoding="utf-8"))
            return AssistantMode(payload.get("mode", self._default.value))
        except (OSError, ValueError, AttributeError) as e:
            logger.warning(f"⚠️ Ignoring unreadable mode preference {self._path}: {e}")
            return self._default

    def save(self, mode: AssistantMode) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(json.dumps({"mode": mode.value}), encoding="utf-8")
        logger.info(f"💾 Assistant mode saved: {mode.value}")
