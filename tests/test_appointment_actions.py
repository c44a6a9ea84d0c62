"""
Appointment action handlers.
"""

import pytest

from sundai.core.utils.datetime_utils import format_display_date, today_iso
from sundai.domain.enums import EntityKind

from conftest import days_from_today


@pytest.mark.asyncio
async def test_create_for_displayed_day_refreshes_schedule(dispatcher, store, view, seeded):
    outcome = await dispatcher.dispatch(
        "create_appointment", {"patientName": "bob stone", "date": today_iso(), "time": "11:00"}
    )

    assert outcome.ok
    assert outcome.message.startswith("✅ Appointment scheduled successfully!")
    assert outcome.message.endswith("💡 Click on the date in the calendar to view it.")
    assert outcome.data["patient_id"] == seeded["bob"].id
    assert outcome.data["patient_name"] == "bob stone"
    assert outcome.data["duration"] == 30
    assert outcome.data["status"] == "scheduled"

    assert view.names == ["stats", "calendar", "schedule", "list"]
    assert view.calls[0][1][EntityKind.APPOINTMENT] == 3
    assert view.calls[-1] == ("list", EntityKind.APPOINTMENT)


@pytest.mark.asyncio
async def test_create_for_other_day_leaves_schedule_alone(dispatcher, view, seeded):
    outcome = await dispatcher.dispatch(
        "schedule_appointment", {"patient": "Walk In", "appointmentDate": "01/02/2031"}
    )

    assert outcome.ok
    assert outcome.data["date"] == "2031-02-01"
    assert outcome.data["patient_id"] is None
    assert view.names == ["stats", "calendar", "list"]


@pytest.mark.asyncio
async def test_create_by_patient_number_uses_stored_name(dispatcher, seeded):
    outcome = await dispatcher.dispatch("create_appointment", {"patientNumber": 1, "date": "2031-02-01"})

    assert outcome.ok
    assert outcome.data["patient_name"] == "Alice Martin"
    assert outcome.data["patient_id"] == seeded["alice"].id


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "params, message",
    [
        ({"date": "2031-02-01"}, "❌ Patient name or number is required."),
        ({"patientName": "Alice"}, "❌ Appointment date is required."),
        ({"patientName": "Alice", "date": "next week"}, "❌ Invalid date 'next week'. Use YYYY-MM-DD or DD/MM/YYYY"),
        ({"patientName": "Alice", "date": "2031-02-01", "duration": "long"}, "❌ Duration must be a whole number, got 'long'."),
        ({"patientNumber": 99, "date": "2031-02-01"}, '❌ Patient "#99" not found.'),
    ],
)
async def test_create_validation(dispatcher, repositories, seeded, params, message):
    outcome = await dispatcher.dispatch("create_appointment", params)

    assert not outcome.ok
    assert outcome.message == message
    assert len(await repositories.appointments.find_all()) == 2


@pytest.mark.asyncio
async def test_update_moving_away_from_displayed_day(dispatcher, repositories, view, seeded):
    outcome = await dispatcher.dispatch(
        "update_appointment", {"patientName": "Alice", "newDate": "2031-05-05", "newTime": "10:00"}
    )

    assert outcome.ok
    assert outcome.data["date"] == "2031-05-05"
    assert outcome.data["time"] == "10:00"
    assert outcome.data["type"] == "checkup"
    assert view.names == ["stats", "calendar", "schedule", "list"]

    assert await repositories.appointments.find_by_date(today_iso()) == []


@pytest.mark.asyncio
async def test_update_narrows_by_date(dispatcher, repositories, store, seeded):
    await dispatcher.dispatch("create_appointment", {"patientName": "Bob Stone", "date": "2031-01-01"})

    outcome = await dispatcher.dispatch(
        "update_appointment", {"patientName": "Bob", "date": days_from_today(3), "newNotes": "Bring scans"}
    )

    assert outcome.ok
    assert outcome.data["date"] == days_from_today(3)
    untouched = store.find(EntityKind.APPOINTMENT, lambda a: a.date == "2031-01-01")
    assert untouched.notes == ""


@pytest.mark.asyncio
async def test_update_without_changes_fails(dispatcher, seeded):
    outcome = await dispatcher.dispatch("update_appointment", {"patientName": "Alice"})
    assert outcome.message == '❌ No changes supplied for the appointment of "Alice Martin".'


@pytest.mark.asyncio
async def test_delete_by_name(dispatcher, store, seeded):
    outcome = await dispatcher.dispatch("cancel_appointment", {"patientName": "Bob"})

    assert outcome.ok
    assert outcome.message.startswith("✅ Appointment deleted successfully!")
    assert store.count(EntityKind.APPOINTMENT) == 1


@pytest.mark.asyncio
async def test_list_shows_only_upcoming_sorted(dispatcher, repositories, store, seeded):
    await dispatcher.dispatch("create_appointment", {"patientName": "Old Timer", "date": "2001-01-01"})

    outcome = await dispatcher.dispatch("list_appointments", {})

    assert outcome.message.startswith("📅 **Upcoming Appointments (2):**")
    lines = outcome.message.splitlines()[1:]
    assert lines[0] == f"• {format_display_date(today_iso())} 09:30 - Alice Martin"
    assert lines[1] == f"• {format_display_date(days_from_today(3))} 14:00 - Bob Stone"


@pytest.mark.asyncio
async def test_search_covers_type_and_notes(dispatcher, seeded):
    outcome = await dispatcher.dispatch("search_appointments", {"query": "FOLLOW"})

    assert outcome.message.startswith('🔍 **Found 1 appointments for "FOLLOW":**')
    assert "Bob Stone (follow-up)" in outcome.message


@pytest.mark.asyncio
async def test_get_appointment_details(dispatcher, seeded):
    outcome = await dispatcher.dispatch("get_appointment", {"patientName": "Bob"})

    assert outcome.message.startswith("📅 **Appointment Details:**")
    assert "• Type: follow-up" in outcome.message
    assert "• Status: scheduled" in outcome.message


@pytest.mark.asyncio
async def test_get_appointments_by_date(dispatcher, seeded):
    outcome = await dispatcher.dispatch("get_appointments_for_date", {"date": today_iso()})

    label = format_display_date(today_iso())
    assert outcome.message == f"📅 **Appointments for {label} (1):**\n• 09:30 - Alice Martin (checkup)"

    empty = await dispatcher.dispatch("get_appointments_by_date", {"date": "2031-01-01"})
    assert empty.message == "📅 **Appointments for 01/01/2031:** None scheduled."


@pytest.mark.asyncio
async def test_update_and_delete_of_removed_appointment_are_not_found(dispatcher, repositories, view, seeded):
    for appointment in await repositories.appointments.find_all():
        await repositories.appointments.delete(appointment.id)

    updated = await dispatcher.dispatch("update_appointment", {"patientName": "Alice", "newTime": "11:00"})
    assert updated.message == '❌ Appointment "Alice Martin" not found.'

    # The failed update reloaded the snapshot, so the name no longer resolves
    deleted = await dispatcher.dispatch("delete_appointment", {"patientName": "Bob"})
    assert not deleted.ok
    assert deleted.message == '❌ Appointment "Bob" not found.'
    assert view.calls == []
