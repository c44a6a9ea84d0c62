"""Outcome DTO returned by every action."""

from dataclasses import dataclass
from typing import Any, Dict, Optional

# Every user-visible failure message starts with this marker.
FAILURE_MARKER = "❌"


@dataclass
class Outcome:
    """Structured result of executing an action."""

    ok: bool
    message: str
    data: Optional[Any] = None

    @classmethod
    def success(cls, message: str, data: Optional[Any] = None) -> "Outcome":
        return cls(ok=True, message=message, data=data)

    @classmethod
    def failure(cls, message: str, data: Optional[Any] = None) -> "Outcome":
        if not message.startswith(FAILURE_MARKER):
            message = f"{FAILURE_MARKER} {message}"
        return cls(ok=False, message=message, data=data)

    @property
    def is_failure(self) -> bool:
        return self.message.startswith(FAILURE_MARKER)

    def to_dict(self) -> Dict[str, Any]:
        return {"ok": self.ok, "message": self.message, "data": self.data}
