"""Appointment action handlers."""

from typing import Any, Dict, List, Optional, Tuple

from ....core.exceptions import ValidationFailedError
from ....core.utils.datetime_utils import is_upcoming, normalize_date
from ....domain.entities.appointment import DEFAULT_APPOINTMENT_TYPE, DEFAULT_STATUS, Appointment
from ....domain.enums import EntityKind
from ...dto.outcome import Outcome
from ..params import AppointmentParams
from .base import LIST_CAPS, ActionHandler, capped, details, merge, require, show_date, to_int

CALENDAR_HINT = "\n\n💡 Click on the date in the calendar to view it."


def _appointment_rows(appointment: Appointment):
    return [
        ("Patient", appointment.patient_name),
        ("Date", show_date(appointment.date)),
        ("Time", appointment.time),
        ("Type", appointment.type),
        ("Duration", f"{appointment.duration} min" if appointment.duration else ""),
        ("Notes", appointment.notes),
    ]


def _sort_key(appointment: Appointment) -> Tuple[str, str]:
    return appointment.date or "", appointment.time or ""


def _line(appointment: Appointment) -> str:
    when = show_date(appointment.date) + (f" {appointment.time}" if appointment.time else "")
    return f"• {when} - {appointment.patient_name or 'Unknown'}"


class _AppointmentHandler(ActionHandler):
    kind = EntityKind.APPOINTMENT
    params_class = AppointmentParams

    def resolve_appointment(self, p: AppointmentParams) -> Tuple[Appointment, bool]:
        """Resolve by id, else by patient name narrowed to ``date`` when given."""
        if p.id:
            return self.resolve_target(EntityKind.APPOINTMENT, p.id, None)
        narrow = None
        if p.date:
            day = normalize_date(p.date)
            narrow = lambda record: record.date == day  # noqa: E731
        return self.resolve_target(EntityKind.APPOINTMENT, None, p.patient_name, narrow)


class CreateAppointmentHandler(_AppointmentHandler):
    action = "create_appointment"
    mutating = True
    verb = "schedule appointment"

    async def run(self, p: AppointmentParams) -> Outcome:
        patient_id: Optional[str] = None
        if p.patient_id or p.patient_number is not None:
            patient, _ = await self.resolve_patient(p.patient_id, p.patient_number, None)
            patient_id, patient_name = patient.id, patient.name
        elif p.patient_name:
            patient_name = p.patient_name
            known = self.store.find(
                EntityKind.PATIENT, lambda record: record.name.lower() == patient_name.lower()
            )
            patient_id = known.id if known else None
        else:
            raise ValidationFailedError("Patient name or number is required.")

        day = normalize_date(require(p.date, "Appointment date is required."))
        appointment = Appointment(
            date=day,
            patient_id=patient_id,
            patient_name=patient_name,
            time=p.time or "",
            type=p.type or DEFAULT_APPOINTMENT_TYPE,
            duration=to_int(p.duration, "Duration") or 30,
            notes=p.notes or "",
            status=p.status or DEFAULT_STATUS,
        )

        created = await self.repositories.appointments.create(appointment)
        await self.after_write(EntityKind.APPOINTMENT, [created.date])

        message = details(
            "✅ Appointment scheduled successfully!\n\n📋 **Details:**", _appointment_rows(created)
        )
        return Outcome.success(message + CALENDAR_HINT, created.to_record())


class UpdateAppointmentHandler(_AppointmentHandler):
    action = "update_appointment"
    mutating = True
    verb = "update appointment"

    async def run(self, p: AppointmentParams) -> Outcome:
        appointment, by_id = self.resolve_appointment(p)

        candidates = {
            "patient_name": p.new_patient_name or (p.patient_name if by_id else None),
            "date": p.new_date or (p.date if by_id else None),
            "time": p.new_time or (p.time if by_id else None),
            "type": p.new_type or (p.type if by_id else None),
            "duration": p.new_duration if p.new_duration is not None else (p.duration if by_id else None),
            "notes": p.new_notes or (p.notes if by_id else None),
            "status": p.new_status or (p.status if by_id else None),
        }
        changes: Dict[str, Any] = {key: value for key, value in candidates.items() if value is not None}
        if "duration" in changes:
            changes["duration"] = to_int(changes["duration"], "Duration")
        if not changes:
            raise ValidationFailedError(
                f'No changes supplied for the appointment of "{appointment.patient_name}".'
            )

        merged, changes = merge(appointment, changes)
        written = await self.repositories.appointments.update(appointment.id, changes)
        await self.ensure_written(EntityKind.APPOINTMENT, written, appointment.patient_name)
        await self.after_write(EntityKind.APPOINTMENT, [appointment.date, merged.date])

        rows = _appointment_rows(merged) + [("Status", merged.status)]
        message = details("✅ Appointment updated successfully!\n\n📋 **Updated:**", rows)
        return Outcome.success(message, merged.to_record())


class DeleteAppointmentHandler(_AppointmentHandler):
    action = "delete_appointment"
    mutating = True
    verb = "delete appointment"

    async def run(self, p: AppointmentParams) -> Outcome:
        appointment, _ = self.resolve_appointment(p)

        deleted = await self.repositories.appointments.delete(appointment.id)
        await self.ensure_written(EntityKind.APPOINTMENT, deleted, appointment.patient_name)
        await self.after_write(EntityKind.APPOINTMENT, [appointment.date])

        message = details(
            "✅ Appointment deleted successfully!\n\n📋 **Deleted:**",
            [
                ("Patient", appointment.patient_name),
                ("Date", show_date(appointment.date)),
                ("Time", appointment.time),
            ],
        )
        return Outcome.success(message, {"id": appointment.id})


class ListAppointmentsHandler(_AppointmentHandler):
    action = "list_appointments"
    verb = "list appointments"

    async def run(self, p: AppointmentParams) -> Outcome:
        appointments = await self.fresh_snapshot(EntityKind.APPOINTMENT)
        if not appointments:
            return Outcome.success("📅 **Appointments:** None scheduled.", [])

        upcoming: List[Appointment] = sorted(
            (a for a in appointments if is_upcoming(a.date)), key=_sort_key
        )
        data = [a.to_record() for a in upcoming]
        if not upcoming:
            return Outcome.success("📅 **Appointments:** No upcoming appointments.", data)

        lines = [_line(a) for a in upcoming]
        message = f"📅 **Upcoming Appointments ({len(upcoming)}):**\n" + capped(
            lines, LIST_CAPS[EntityKind.APPOINTMENT]
        )
        return Outcome.success(message, data)


class SearchAppointmentsHandler(_AppointmentHandler):
    action = "search_appointments"
    verb = "search appointments"

    async def run(self, p: AppointmentParams) -> Outcome:
        query = require(p.query, "A search term is required.")
        await self.store.refresh(EntityKind.APPOINTMENT)
        matches = sorted(
            self.store.search(EntityKind.APPOINTMENT, query, ("patient_name", "type", "notes")),
            key=_sort_key,
        )
        data = [a.to_record() for a in matches]
        if not matches:
            return Outcome.success(f'🔍 **Search "{query}":** No appointments found.', data)

        lines = [_line(a) + (f" ({a.type})" if a.type else "") for a in matches]
        message = f'🔍 **Found {len(matches)} appointments for "{query}":**\n' + "\n".join(lines)
        return Outcome.success(message, data)


class GetAppointmentHandler(_AppointmentHandler):
    action = "get_appointment"
    verb = "get appointment"

    async def run(self, p: AppointmentParams) -> Outcome:
        appointment, _ = self.resolve_appointment(p)
        rows = _appointment_rows(appointment) + [("Status", appointment.status)]
        return Outcome.success(details("📅 **Appointment Details:**", rows), appointment.to_record())


class GetAppointmentsByDateHandler(_AppointmentHandler):
    action = "get_appointments_by_date"
    verb = "get appointments"

    async def run(self, p: AppointmentParams) -> Outcome:
        day = normalize_date(require(p.date, "A date is required."))
        appointments = await self.repositories.appointments.find_by_date(day)
        data = [a.to_record() for a in appointments]
        label = show_date(day)

        if not appointments:
            return Outcome.success(f"📅 **Appointments for {label}:** None scheduled.", data)

        lines = [
            f"• {a.time or 'All day'} - {a.patient_name or 'Unknown'}" + (f" ({a.type})" if a.type else "")
            for a in appointments
        ]
        message = f"📅 **Appointments for {label} ({len(appointments)}):**\n" + "\n".join(lines)
        return Outcome.success(message, data)


APPOINTMENT_HANDLERS = (
    CreateAppointmentHandler,
    UpdateAppointmentHandler,
    DeleteAppointmentHandler,
    ListAppointmentsHandler,
    SearchAppointmentsHandler,
    GetAppointmentHandler,
    GetAppointmentsByDateHandler,
)
