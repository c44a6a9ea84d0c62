"""Patient action handlers."""

from typing import Any, Dict

from ....core.exceptions import ValidationFailedError
from ....core.utils.datetime_utils import normalize_date
from ....domain.entities.patient import Patient
from ....domain.enums import EntityKind
from ...dto.outcome import Outcome
from ..params import PatientParams
from .base import LIST_CAPS, ActionHandler, capped, details, merge, require, show_date


def _patient_rows(patient: Patient):
    return [
        ("Name", patient.name),
        ("DOB", show_date(patient.dob)),
        ("Phone", patient.phone),
        ("Email", patient.email),
        ("Address", patient.address),
    ]


class CreatePatientHandler(ActionHandler):
    action = "create_patient"
    kind = EntityKind.PATIENT
    mutating = True
    params_class = PatientParams
    verb = "create patient"

    async def run(self, p: PatientParams) -> Outcome:
        name = require(p.name, "Patient name is required.")
        patient = Patient(
            name=name,
            dob=normalize_date(p.dob) if p.dob else "",
            phone=p.phone or "",
            email=p.email or "",
            address=p.address or "",
        )

        created = await self.repositories.patients.create(patient)
        await self.after_write(EntityKind.PATIENT)

        message = details(
            "✅ Patient created successfully!\n\n📋 **Details:**",
            [("Patient #", created.display_number)] + _patient_rows(created),
        )
        return Outcome.success(message, created.to_record())


class UpdatePatientHandler(ActionHandler):
    action = "update_patient"
    kind = EntityKind.PATIENT
    mutating = True
    params_class = PatientParams
    verb = "update patient"

    async def run(self, p: PatientParams) -> Outcome:
        patient, by_key = await self.resolve_patient(p.id, p.number, p.name)

        # Plain field names only carry new values when they were not used for lookup
        candidates = {
            "name": p.new_name or (p.name if by_key else None),
            "dob": p.new_dob or (p.dob if by_key else None),
            "phone": p.new_phone or (p.phone if by_key else None),
            "email": p.new_email or (p.email if by_key else None),
            "address": p.new_address or (p.address if by_key else None),
        }
        changes: Dict[str, Any] = {key: value for key, value in candidates.items() if value is not None}
        if "dob" in changes:
            changes["dob"] = normalize_date(changes["dob"])
        if not changes:
            raise ValidationFailedError(f'No changes supplied for patient "{patient.name}".')

        merged, changes = merge(patient, changes)
        written = await self.repositories.patients.update(patient.id, changes)
        await self.ensure_written(EntityKind.PATIENT, written, patient.name)
        await self.after_write(EntityKind.PATIENT)

        message = details("✅ Patient updated successfully!\n\n📋 **Updated:**", _patient_rows(merged))
        return Outcome.success(message, merged.to_record())


class DeletePatientHandler(ActionHandler):
    action = "delete_patient"
    kind = EntityKind.PATIENT
    mutating = True
    params_class = PatientParams
    verb = "delete patient"

    async def run(self, p: PatientParams) -> Outcome:
        patient, _ = await self.resolve_patient(p.id, p.number, p.name)

        deleted = await self.repositories.patients.delete(patient.id)
        await self.ensure_written(EntityKind.PATIENT, deleted, patient.name)
        await self.after_write(EntityKind.PATIENT)

        message = details(
            "✅ Patient deleted successfully!\n\n📋 **Deleted:**",
            [("Name", patient.name), ("DOB", show_date(patient.dob))],
        )
        return Outcome.success(message, {"id": patient.id})


class ListPatientsHandler(ActionHandler):
    action = "list_patients"
    kind = EntityKind.PATIENT
    verb = "list patients"

    async def run(self, p: Any) -> Outcome:
        patients = await self.fresh_snapshot(EntityKind.PATIENT)
        if not patients:
            return Outcome.success("📋 **Patients:** None found.", [])

        lines = [f"• #{patient.display_number} - {patient.name}" for patient in patients]
        message = f"📋 **Patients ({len(patients)}):**\n" + capped(lines, LIST_CAPS[EntityKind.PATIENT])
        return Outcome.success(message, [patient.to_record() for patient in patients])


class SearchPatientsHandler(ActionHandler):
    action = "search_patients"
    kind = EntityKind.PATIENT
    params_class = PatientParams
    verb = "search patients"

    async def run(self, p: PatientParams) -> Outcome:
        query = require(p.query, "A search term is required.")
        patients = await self.repositories.patients.search(query)
        data = [patient.to_record() for patient in patients]

        if not patients:
            return Outcome.success(f'🔍 **Search "{query}":** No patients found.', data)
        if len(patients) == 1:
            return Outcome.success(details("🔍 **Found Patient:**", _patient_rows(patients[0])), data)

        lines = [
            f"• {patient.name}" + (f" ({show_date(patient.dob)})" if patient.dob else "")
            for patient in patients
        ]
        message = f'🔍 **Found {len(patients)} patients for "{query}":**\n' + "\n".join(lines)
        return Outcome.success(message, data)


class GetPatientHandler(ActionHandler):
    action = "get_patient"
    kind = EntityKind.PATIENT
    params_class = PatientParams
    verb = "get patient"

    async def run(self, p: PatientParams) -> Outcome:
        patient, _ = await self.resolve_patient(p.id, p.number, p.name)
        rows = _patient_rows(patient) + [
            ("Patient #", patient.patient_number),
            ("Last visit", show_date(patient.last_visit)),
        ]
        return Outcome.success(details("📋 **Patient Details:**", rows), patient.to_record())


class AddPatientNoteHandler(ActionHandler):
    action = "add_patient_note"
    kind = EntityKind.PATIENT
    mutating = True
    params_class = PatientParams
    verb = "add note"

    async def run(self, p: PatientParams) -> Outcome:
        patient, _ = await self.resolve_patient(p.id, p.number, p.name)
        text = require(p.note, "Note text is required.")

        note = await self.repositories.patients.add_note(patient.id, text, p.author or "admin")

        message = details(
            "✅ Note added successfully!\n\n📋 **Details:**",
            [("Patient", patient.name), ("Note", note.note)],
        )
        return Outcome.success(message, note.to_record())


class GetPatientNotesHandler(ActionHandler):
    action = "get_patient_notes"
    kind = EntityKind.PATIENT
    params_class = PatientParams
    verb = "get notes"

    async def run(self, p: PatientParams) -> Outcome:
        patient, _ = await self.resolve_patient(p.id, p.number, p.name)
        notes = await self.repositories.patients.find_notes(patient.id)
        data = [note.to_record() for note in notes]

        if not notes:
            return Outcome.success(f"📋 **{patient.name}** - No notes found.", data)
        listing = "\n".join(f"• {note.note}" for note in notes)
        return Outcome.success(f"📋 **Notes for {patient.name}:**\n{listing}", data)


PATIENT_HANDLERS = (
    CreatePatientHandler,
    UpdatePatientHandler,
    DeletePatientHandler,
    ListPatientsHandler,
    SearchPatientsHandler,
    GetPatientHandler,
    AddPatientNoteHandler,
    GetPatientNotesHandler,
)
