"""
Enumerations shared across the domain.
"""

from enum import Enum


class EntityKind(str, Enum):
    """The four record collections of the clinic."""

    PATIENT = "patient"
    APPOINTMENT = "appointment"
    DEADLINE = "deadline"
    INVENTORY = "inventory"

    @property
    def view_name(self) -> str:
        """Dashboard view listing this kind."""
        return {
            EntityKind.PATIENT: "patients",
            EntityKind.APPOINTMENT: "appointments",
            EntityKind.DEADLINE: "deadlines",
            EntityKind.INVENTORY: "inventory",
        }[self]

    @property
    def is_dated(self) -> bool:
        """Kinds shown on the calendar and schedule panel."""
        return self in (EntityKind.APPOINTMENT, EntityKind.DEADLINE)


class Priority(str, Enum):
    """Deadline priority."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @property
    def emoji(self) -> str:
        return {Priority.HIGH: "🔴", Priority.LOW: "🟢"}.get(self, "🟡")

    @classmethod
    def parse(cls, value: str) -> "Priority":
        """Parse a priority, defaulting to medium for blank input."""
        text = (value or "").strip().lower()
        if not text:
            return cls.MEDIUM
        return cls(text)


class AssistantMode(str, Enum):
    """Backends the conversation router can address."""

    TOOL = "mcp"
    RETRIEVAL = "rag"

    @property
    def label(self) -> str:
        return "MCP Chatbot" if self is AssistantMode.TOOL else "RAG Agent"

    @property
    def description(self) -> str:
        if self is AssistantMode.TOOL:
            return "MCP Chatbot - Tool-based actions and database operations"
        return "RAG Agent - Enhanced document retrieval and context-aware responses"
