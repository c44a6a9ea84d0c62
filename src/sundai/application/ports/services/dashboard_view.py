"""
Dashboard view interface the action handlers ask to refresh.
"""

from abc import ABC, abstractmethod
from typing import Any, Optional

from ....domain.enums import EntityKind


class DashboardView(ABC):
    """Abstract view side of the dashboard."""

    @property
    @abstractmethod
    def displayed_schedule_date(self) -> Optional[str]:
        """Canonical date currently shown in the schedule panel."""
        pass

    @abstractmethod
    async def refresh_stats(self) -> None:
        """Recompute the dashboard statistics."""
        pass

    @abstractmethod
    async def refresh_calendar(self) -> None:
        """Recompute calendar event counts."""
        pass

    @abstractmethod
    async def refresh_schedule(self) -> None:
        """Reload the schedule panel for the displayed date."""
        pass

    @abstractmethod
    async def refresh_list(self, kind: EntityKind) -> None:
        """Reload the list view of one entity kind."""
        pass

    @abstractmethod
    def open_editor(self, kind: EntityKind, record: Any) -> None:
        """Switch to the kind's view and open the record's editor."""
        pass
