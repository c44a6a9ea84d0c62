"""Deadline domain entity."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional

from ...core.utils.datetime_utils import normalize_date
from ..enums import Priority
from ..errors import InvalidEntityDataError
from ._records import first_present, lenient_date, str_id


@dataclass
class Deadline:
    """A dated task with a priority.

    ``date`` and ``due_date`` are synonyms kept for older records; they are
    always written together and never diverge.
    """

    title: str
    date: str
    id: Optional[str] = None
    due_date: str = ""
    priority: str = Priority.MEDIUM.value
    description: str = ""

    def __post_init__(self) -> None:
        if not self.title or not self.title.strip():
            raise InvalidEntityDataError("title", self.title, "deadline title is required")
        self.title = self.title.strip()
        self.date = normalize_date(self.date or self.due_date)
        self.due_date = self.date
        try:
            self.priority = Priority.parse(self.priority).value
        except ValueError:
            raise InvalidEntityDataError(
                "priority", self.priority, "priority must be low, medium or high"
            )

    @property
    def priority_emoji(self) -> str:
        try:
            return Priority.parse(self.priority).emoji
        except ValueError:
            return Priority.MEDIUM.emoji

    def to_record(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "Deadline":
        deadline = object.__new__(cls)
        deadline.id = str_id(record.get("id", record.get("_id")))
        deadline.title = first_present(record, "title", "name") or ""
        deadline.date = lenient_date(first_present(record, "date", "due_date", "dueDate"))
        deadline.due_date = deadline.date
        deadline.priority = (record.get("priority") or Priority.MEDIUM.value).lower()
        deadline.description = record.get("description") or ""
        return deadline
