"""
Patient action handlers against the in-memory repositories.
"""

import pytest

from sundai.domain.entities.patient import Patient
from sundai.domain.enums import EntityKind


@pytest.mark.asyncio
async def test_create_patient_persists_refreshes_and_reports(dispatcher, store, view, seeded):
    outcome = await dispatcher.dispatch(
        "create_patient", {"patientName": "Cara Dune", "dob": "02/11/1979", "phone": "0700000000"}
    )

    assert outcome.ok
    assert outcome.message.startswith("✅ Patient created successfully!\n\n📋 **Details:**")
    assert "• Patient #: 3" in outcome.message
    assert "• DOB: 02/11/1979" in outcome.message
    assert outcome.data["dob"] == "1979-11-02"

    assert store.count(EntityKind.PATIENT) == 3
    assert view.names == ["stats", "list"]
    assert view.calls[0][1][EntityKind.PATIENT] == 3
    assert view.calls[1] == ("list", EntityKind.PATIENT)


@pytest.mark.asyncio
async def test_create_patient_requires_a_name(dispatcher, repositories, view):
    outcome = await dispatcher.dispatch("create_patient", {"patientName": "   "})

    assert not outcome.ok
    assert outcome.message == "❌ Patient name is required."
    assert await repositories.patients.find_all() == []
    assert view.calls == []


@pytest.mark.asyncio
async def test_create_patient_rejects_invalid_birth_date(dispatcher, repositories):
    outcome = await dispatcher.dispatch("create_patient", {"patientName": "Cara Dune", "dob": "someday"})

    assert not outcome.ok
    assert outcome.message == "❌ Invalid date 'someday'. Use YYYY-MM-DD or DD/MM/YYYY"
    assert await repositories.patients.find_all() == []


@pytest.mark.asyncio
async def test_update_patient_by_name_uses_new_fields_only(dispatcher, repositories, seeded):
    outcome = await dispatcher.dispatch("edit_patient", {"patientName": "alice", "newPhone": "0799999999"})

    assert outcome.ok
    assert outcome.message.startswith("✅ Patient updated successfully!")
    assert outcome.data["phone"] == "0799999999"
    assert outcome.data["name"] == "Alice Martin"
    assert outcome.data["dob"] == "1985-03-14"

    stored = await repositories.patients.find_by_id(seeded["alice"].id)
    assert stored.phone == "0799999999"


@pytest.mark.asyncio
async def test_update_patient_by_id_accepts_plain_fields(dispatcher, seeded):
    outcome = await dispatcher.dispatch("update_patient", {"id": seeded["bob"].id, "name": "Robert Stone"})

    assert outcome.ok
    assert outcome.data["name"] == "Robert Stone"


@pytest.mark.asyncio
async def test_update_patient_twice_yields_same_record(dispatcher, seeded):
    params = {"patientNumber": 1, "newEmail": "alice@example.com"}

    first = await dispatcher.dispatch("update_patient", params)
    second = await dispatcher.dispatch("update_patient", params)

    assert first.ok and second.ok
    assert first.data == second.data


@pytest.mark.asyncio
async def test_update_patient_without_changes_fails(dispatcher, view, seeded):
    outcome = await dispatcher.dispatch("update_patient", {"patientName": "Alice"})

    assert not outcome.ok
    assert outcome.message == '❌ No changes supplied for patient "Alice Martin".'
    assert view.calls == []


@pytest.mark.asyncio
async def test_unknown_patient_is_reported_by_term(dispatcher, seeded):
    outcome = await dispatcher.dispatch("delete_patient", {"patientName": "Zed"})

    assert not outcome.ok
    assert outcome.message == '❌ Patient "Zed" not found.'


@pytest.mark.asyncio
async def test_delete_patient_by_number_removes_notes(dispatcher, repositories, store, seeded):
    bob = seeded["bob"]
    await repositories.patients.add_note(bob.id, "Prefers mornings")

    outcome = await dispatcher.dispatch("delete_patient", {"patientNumber": "2"})

    assert outcome.ok
    assert outcome.data == {"id": bob.id}
    assert store.find_by_id(EntityKind.PATIENT, bob.id) is None
    assert await repositories.patients.find_notes(bob.id) == []


@pytest.mark.asyncio
async def test_first_substring_match_wins(dispatcher, repositories, store, seeded):
    await repositories.patients.create(Patient(name="Alice Cooper"))
    await store.refresh()

    outcome = await dispatcher.dispatch("get_patient", {"patientName": "alice"})

    assert outcome.ok
    assert "• Name: Alice Martin" in outcome.message


@pytest.mark.asyncio
async def test_list_patients_is_capped(dispatcher, repositories):
    for i in range(12):
        await repositories.patients.create(Patient(name=f"Patient {i:02d}"))

    outcome = await dispatcher.dispatch("list_patients", {})

    assert outcome.ok
    assert outcome.message.startswith("📋 **Patients (12):**\n• #1 - Patient 00")
    assert outcome.message.endswith("... +2 more")
    assert len(outcome.data) == 12


@pytest.mark.asyncio
async def test_list_patients_when_empty(dispatcher):
    outcome = await dispatcher.dispatch("get_patients", {})
    assert outcome.ok
    assert outcome.message == "📋 **Patients:** None found."


@pytest.mark.asyncio
async def test_search_patients(dispatcher, seeded):
    single = await dispatcher.dispatch("search_patients", {"query": "stone"})
    assert single.message.startswith("🔍 **Found Patient:**")
    assert "• Name: Bob Stone" in single.message

    none = await dispatcher.dispatch("search_patients", {"query": "nobody"})
    assert none.ok
    assert none.data == []

    blank = await dispatcher.dispatch("search_patients", {})
    assert blank.message == "❌ A search term is required."


@pytest.mark.asyncio
async def test_patient_notes_round_trip_without_view_refresh(dispatcher, view, seeded):
    empty = await dispatcher.dispatch("get_patient_notes", {"patientName": "Alice"})
    assert empty.message == "📋 **Alice Martin** - No notes found."

    added = await dispatcher.dispatch("add_patient_note", {"patientName": "Alice", "note": "Allergic to penicillin"})
    assert added.ok
    assert view.calls == []

    notes = await dispatcher.dispatch("get_patient_notes", {"patientNumber": 1})
    assert notes.message == "📋 **Notes for Alice Martin:**\n• Allergic to penicillin"
    assert notes.data[0]["author"] == "admin"


@pytest.mark.asyncio
async def test_create_list_delete_by_name_round_trip(dispatcher, store, seeded):
    before = store.count(EntityKind.PATIENT)

    created = await dispatcher.dispatch("create_patient", {"patientName": "Jane Doe"})
    assert created.ok
    listed = await dispatcher.dispatch("list_patients", {})
    assert "Jane Doe" in listed.message

    deleted = await dispatcher.dispatch("delete_patient", {"patientName": "Jane"})
    assert deleted.ok
    listed = await dispatcher.dispatch("list_patients", {})
    assert "Jane Doe" not in listed.message
    assert store.count(EntityKind.PATIENT) == before


@pytest.mark.asyncio
async def test_delete_of_record_removed_elsewhere_is_not_found(dispatcher, repositories, store, view, seeded):
    await repositories.patients.delete(seeded["alice"].id)

    outcome = await dispatcher.dispatch("delete_patient", {"patientName": "Alice"})

    assert not outcome.ok
    assert outcome.message == '❌ Patient "Alice Martin" not found.'
    assert view.calls == []
    assert store.find_by_id(EntityKind.PATIENT, seeded["alice"].id) is None


@pytest.mark.asyncio
async def test_update_of_record_removed_elsewhere_is_not_found(dispatcher, repositories, view, seeded):
    await repositories.patients.delete(seeded["bob"].id)

    outcome = await dispatcher.dispatch("update_patient", {"patientName": "Bob", "newPhone": "555"})

    assert not outcome.ok
    assert outcome.message == '❌ Patient "Bob Stone" not found.'
    assert view.calls == []
