"""
Dashboard state driven by the entity store.
"""

import pytest

from sundai.application.actions.handlers.base import HandlerContext
from sundai.application.actions.registry import build_dispatcher
from sundai.application.services.dashboard import DashboardState
from sundai.core.utils.datetime_utils import today_iso
from sundai.domain.entities.appointment import Appointment
from sundai.domain.entities.deadline import Deadline
from sundai.domain.enums import EntityKind
from sundai.domain.errors import InvalidDateError


@pytest.fixture
def dashboard(store, repositories):
    return DashboardState(store, repositories)


@pytest.mark.asyncio
async def test_load_builds_every_panel(dashboard, seeded):
    await dashboard.load()

    assert dashboard.stats == {
        "total_patients": 2,
        "today_appointments": 1,
        "pending_deadlines": 1,
        "low_stock": 1,
        "connected": True,
    }
    assert dashboard.schedule["title"] == "Today's Schedule"
    assert dashboard.schedule["is_today"] is True
    assert [a["patient_name"] for a in dashboard.schedule["appointments"]] == ["Alice Martin"]
    assert set(dashboard.lists) == {"patients", "appointments", "deadlines", "inventory"}

    snapshot = dashboard.snapshot()
    assert snapshot["active_view"] == "dashboard"
    assert snapshot["editing"] is None


@pytest.mark.asyncio
async def test_calendar_counts_appointments_and_deadlines(dashboard, repositories, store):
    for time in ("09:00", "10:00"):
        await repositories.appointments.create(Appointment(date="2031-02-10", patient_name="Ann", time=time))
    await repositories.deadlines.create(Deadline(title="Audit", date="2031-02-10"))
    await repositories.deadlines.create(Deadline(title="Taxes", date="2031-02-20"))
    await repositories.deadlines.create(Deadline(title="Other month", date="2031-03-20"))
    await store.refresh()

    await dashboard.show_month(2031, 2)

    assert dashboard.calendar == {"year": 2031, "month": 2, "event_counts": {10: 3, 20: 1}}
    with pytest.raises(ValueError):
        await dashboard.show_month(2031, 13)


@pytest.mark.asyncio
async def test_schedule_follows_selected_date(dashboard, repositories, store):
    await repositories.appointments.create(Appointment(date="2031-02-01", patient_name="Ann", time="15:00"))
    await repositories.appointments.create(Appointment(date="2031-02-01", patient_name="Ben", time="08:00"))
    await store.refresh()

    await dashboard.show_date("01/02/2031")

    assert dashboard.displayed_schedule_date == "2031-02-01"
    assert dashboard.schedule["title"] == "01/02/2031"
    assert [a["patient_name"] for a in dashboard.schedule["appointments"]] == ["Ben", "Ann"]

    await dashboard.show_date(None)
    assert dashboard.displayed_schedule_date == today_iso()

    with pytest.raises(InvalidDateError):
        await dashboard.show_date("someday")


@pytest.mark.asyncio
async def test_editor_and_view_switching(dashboard, seeded):
    dashboard.open_editor(EntityKind.PATIENT, seeded["bob"])

    assert dashboard.active_view == "patients"
    assert dashboard.editing["id"] == seeded["bob"].id
    assert dashboard.editing["record"]["name"] == "Bob Stone"

    dashboard.switch_view("dashboard")
    assert dashboard.editing is None


@pytest.mark.asyncio
async def test_actions_keep_the_dashboard_current(dashboard, repositories, store, seeded):
    await dashboard.load()
    dispatcher = build_dispatcher(HandlerContext(repositories=repositories, store=store, view=dashboard))

    await dispatcher.dispatch("create_patient", {"patientName": "Cara Dune"})
    await dispatcher.dispatch("create_appointment", {"patientName": "Cara Dune", "date": today_iso(), "time": "08:00"})

    assert dashboard.stats["total_patients"] == 3
    assert dashboard.stats["today_appointments"] == 2
    assert len(dashboard.lists["patients"]) == 3
    assert [a["patient_name"] for a in dashboard.schedule["appointments"]] == ["Cara Dune", "Alice Martin"]


@pytest.mark.asyncio
async def test_low_stock_falls_back_to_snapshot(dashboard, repositories, seeded):
    repositories.set_available(False)

    await dashboard.refresh_stats()

    assert dashboard.stats["low_stock"] == 1
