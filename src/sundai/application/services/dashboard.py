"""
Dashboard state: the view side the action handlers refresh.

Everything here is derived from the entity store snapshot, except the
low-stock count which comes from the repository's own query.
"""

import logging
from collections import Counter
from typing import Any, Dict, List, Optional

from ...core.utils.datetime_utils import format_display_date, is_upcoming, normalize_date, parse_date, today, today_iso
from ...domain.enums import EntityKind
from ..ports.repositories.clinic_repositories import ClinicRepositories
from ..ports.services.dashboard_view import DashboardView
from ..store import EntityStore

logger = logging.getLogger(__name__)

DASHBOARD_VIEW = "dashboard"


class DashboardState(DashboardView):
    """Statistics, schedule panel, calendar counts, active view and open editor."""

    def __init__(self, store: EntityStore, repositories: ClinicRepositories) -> None:
        self._store = store
        self._repositories = repositories
        self._schedule_date: Optional[str] = None
        current = today()
        self.calendar_year = current.year
        self.calendar_month = current.month

        self.active_view = DASHBOARD_VIEW
        self.editing: Optional[Dict[str, Any]] = None
        self.stats: Dict[str, Any] = {}
        self.schedule: Dict[str, Any] = {}
        self.calendar: Dict[str, Any] = {}
        self.lists: Dict[str, List[Dict[str, Any]]] = {}

    @property
    def displayed_schedule_date(self) -> Optional[str]:
        return self._schedule_date or today_iso()

    async def load(self) -> None:
        """Build every panel from the current snapshot."""
        await self.refresh_stats()
        await self.refresh_calendar()
        await self.refresh_schedule()
        for kind in EntityKind:
            await self.refresh_list(kind)

    async def refresh_stats(self) -> None:
        day = today_iso()
        try:
            low_stock = len(await self._repositories.inventory.find_low_stock())
        except Exception as e:
            logger.error(f"Failed to load low stock count: {e}")
            low_stock = sum(1 for item in self._store.all(EntityKind.INVENTORY) if item.is_low_stock)

        self.stats = {
            "total_patients": self._store.count(EntityKind.PATIENT),
            "today_appointments": sum(1 for a in self._store.all(EntityKind.APPOINTMENT) if a.date == day),
            "pending_deadlines": sum(1 for d in self._store.all(EntityKind.DEADLINE) if is_upcoming(d.date)),
            "low_stock": low_stock,
            "connected": self._store.connected,
        }

    async def refresh_calendar(self) -> None:
        counts: Counter = Counter()
        for record in list(self._store.all(EntityKind.APPOINTMENT)) + list(self._store.all(EntityKind.DEADLINE)):
            parsed = parse_date(record.date)
            if parsed and parsed.year == self.calendar_year and parsed.month == self.calendar_month:
                counts[parsed.day] += 1
        self.calendar = {
            "year": self.calendar_year,
            "month": self.calendar_month,
            "event_counts": dict(sorted(counts.items())),
        }

    async def refresh_schedule(self) -> None:
        day = self.displayed_schedule_date
        appointments = sorted(
            (a for a in self._store.all(EntityKind.APPOINTMENT) if a.date == day),
            key=lambda a: a.time or "",
        )
        deadlines = [d for d in self._store.all(EntityKind.DEADLINE) if d.date == day]
        is_today = day == today_iso()
        self.schedule = {
            "date": day,
            "title": "Today's Schedule" if is_today else format_display_date(day),
            "is_today": is_today,
            "appointments": [a.to_record() for a in appointments],
            "deadlines": [d.to_record() for d in deadlines],
        }

    async def refresh_list(self, kind: EntityKind) -> None:
        self.lists[kind.view_name] = [record.to_record() for record in self._store.all(kind)]

    def open_editor(self, kind: EntityKind, record: Any) -> None:
        self.active_view = kind.view_name
        self.editing = {"type": kind.value, "id": record.id, "record": record.to_record()}

    def switch_view(self, view: str) -> None:
        self.active_view = view
        self.editing = None

    async def show_date(self, value: Optional[str]) -> None:
        """Point the schedule panel at a day (today when None)."""
        self._schedule_date = normalize_date(value) if value else None
        await self.refresh_schedule()

    async def show_month(self, year: int, month: int) -> None:
        if not 1 <= month <= 12:
            raise ValueError("Month must be between 1 and 12")
        self.calendar_year, self.calendar_month = year, month
        await self.refresh_calendar()

    def snapshot(self) -> Dict[str, Any]:
        return {
            "active_view": self.active_view,
            "editing": self.editing,
            "stats": self.stats,
            "schedule": self.schedule,
            "calendar": self.calendar,
        }
