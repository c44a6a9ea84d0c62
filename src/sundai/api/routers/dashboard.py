"""
Dashboard endpoints: statistics, schedule panel, calendar counts, entity
links and backup.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request

from ...application.linking.mention_linker import EntityMentionLinker
from ...application.ports.services.backup_service import BackupService
from ...application.services.dashboard import DashboardState
from ...application.store import EntityStore
from ...core.exceptions import BackendFailureError, ConfigurationError, ValidationFailedError
from ...domain.enums import EntityKind
from ..deps import get_backup_service, get_dashboard, get_entity_store, get_linker
from ..schemas.common import ApiResponse
from ..schemas.dashboard import BackupResult, CalendarCounts, DashboardSnapshot, LinkActivation, SchedulePanel
from ..utils.responses import ok

router = APIRouter(prefix="/dashboard", tags=["dashboard"])
logger = logging.getLogger(__name__)


@router.get("", response_model=ApiResponse[DashboardSnapshot])
async def get_dashboard_snapshot(
    request: Request,
    refresh: bool = Query(False, description="Reload the entity cache first"),
    dashboard: DashboardState = Depends(get_dashboard),
    store: EntityStore = Depends(get_entity_store),
):
    """Statistics, schedule panel and calendar counts in one payload."""
    if refresh:
        await store.refresh()
        await dashboard.load()
    return ok(request, data=dashboard.snapshot(), message="OK")


@router.get("/schedule", response_model=ApiResponse[SchedulePanel])
async def get_schedule(
    request: Request,
    date: Optional[str] = Query(None, description="Day to show (YYYY-MM-DD or DD/MM/YYYY); today when omitted"),
    dashboard: DashboardState = Depends(get_dashboard),
):
    await dashboard.show_date(date)
    return ok(request, data=dashboard.schedule, message="OK")


@router.get("/calendar", response_model=ApiResponse[CalendarCounts])
async def get_calendar(
    request: Request,
    year: Optional[int] = Query(None, ge=1900, le=9999),
    month: Optional[int] = Query(None, ge=1, le=12),
    dashboard: DashboardState = Depends(get_dashboard),
):
    """Per-day event counts (appointments plus deadlines) for one month."""
    if year is not None or month is not None:
        await dashboard.show_month(year or dashboard.calendar_year, month or dashboard.calendar_month)
    return ok(request, data=dashboard.calendar, message="OK")


@router.post("/links/{kind}/{entity_id}", response_model=ApiResponse[LinkActivation])
async def activate_link(
    request: Request,
    kind: str,
    entity_id: str,
    linker: EntityMentionLinker = Depends(get_linker),
    dashboard: DashboardState = Depends(get_dashboard),
):
    """Follow an entity link: switch to the record's view and open its editor."""
    try:
        entity_kind = EntityKind(kind)
    except ValueError:
        raise ValidationFailedError(f"Unknown entity type '{kind}'", {"kind": kind})
    linker.activate(entity_kind, entity_id)
    return ok(
        request,
        data=LinkActivation(active_view=dashboard.active_view, editing=dashboard.editing),
        message="OK",
    )


@router.post("/backup", response_model=ApiResponse[BackupResult])
async def run_backup(request: Request, backup: Optional[BackupService] = Depends(get_backup_service)):
    if backup is None:
        raise ConfigurationError("Backup service not available")
    result = await backup.backup_data()
    if not result.get("success"):
        raise BackendFailureError("Backup", result.get("error") or "Unknown error")
    logger.info("💾 Backup completed successfully")
    return ok(
        request,
        data=BackupResult(path=result.get("path"), counts=result.get("counts") or {}),
        message="Backup completed successfully!",
    )
