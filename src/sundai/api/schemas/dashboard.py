"""
Dashboard schemas.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class DashboardStats(BaseModel):
    total_patients: int = 0
    today_appointments: int = 0
    pending_deadlines: int = 0
    low_stock: int = 0
    connected: bool = False


class SchedulePanel(BaseModel):
    date: str
    title: str
    is_today: bool
    appointments: List[Dict[str, Any]] = Field(default_factory=list)
    deadlines: List[Dict[str, Any]] = Field(default_factory=list)


class CalendarCounts(BaseModel):
    year: int
    month: int
    event_counts: Dict[int, int] = Field(default_factory=dict, description="Events per day of month")


class DashboardSnapshot(BaseModel):
    active_view: str
    editing: Optional[Dict[str, Any]] = None
    stats: DashboardStats
    schedule: SchedulePanel
    calendar: CalendarCounts


class LinkActivation(BaseModel):
    """Result of following an entity link."""

    active_view: str
    editing: Optional[Dict[str, Any]] = None


class BackupResult(BaseModel):
    path: Optional[str] = None
    counts: Dict[str, int] = Field(default_factory=dict)
