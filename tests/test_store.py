"""
Entity store snapshot semantics.
"""

import pytest

from sundai.domain.entities.patient import Patient
from sundai.domain.enums import EntityKind


@pytest.mark.asyncio
async def test_load_with_unreachable_persistence_yields_empty_collections(repositories, store):
    await repositories.patients.create(Patient(name="Ann Lee"))
    repositories.set_available(False)

    assert await store.load() is False
    assert store.connected is False
    assert all(store.count(kind) == 0 for kind in EntityKind)


@pytest.mark.asyncio
async def test_load_reads_every_collection(repositories, store, seeded):
    assert await store.load() is True
    assert store.connected is True
    assert store.count(EntityKind.PATIENT) == 2
    assert store.count(EntityKind.APPOINTMENT) == 2
    assert store.count(EntityKind.DEADLINE) == 2
    assert store.count(EntityKind.INVENTORY) == 2


@pytest.mark.asyncio
async def test_failed_refresh_keeps_previous_snapshot(repositories, store, seeded):
    before = store.all(EntityKind.PATIENT)
    repositories.set_available(False)

    assert await store.refresh() is False
    assert store.all(EntityKind.PATIENT) == before
    assert store.connected is False
    assert store.last_error

    repositories.set_available(True)
    assert await store.refresh() is True
    assert store.last_error is None


@pytest.mark.asyncio
async def test_refresh_of_one_kind_leaves_the_others_alone(repositories, store, seeded):
    await repositories.patients.create(Patient(name="Cara Dune"))

    await store.refresh(EntityKind.APPOINTMENT)
    assert store.count(EntityKind.PATIENT) == 2

    await store.refresh(EntityKind.PATIENT)
    assert store.count(EntityKind.PATIENT) == 3


@pytest.mark.asyncio
async def test_search_is_case_insensitive_substring(store, seeded):
    assert [p.name for p in store.search(EntityKind.PATIENT, "MART")] == ["Alice Martin"]
    assert store.search(EntityKind.APPOINTMENT, "follow", ("type",))[0].patient_name == "Bob Stone"
    assert store.search(EntityKind.INVENTORY, "zzz") == []


@pytest.mark.asyncio
async def test_find_and_context(store, seeded):
    alice = seeded["alice"]
    assert store.find_by_id(EntityKind.PATIENT, alice.id).name == "Alice Martin"
    assert store.find_by_id(EntityKind.PATIENT, None) is None
    assert len(store.find(EntityKind.INVENTORY, lambda item: item.is_low_stock, first=False)) == 1

    context = store.as_context([EntityKind.PATIENT, EntityKind.DEADLINE])
    assert set(context) == {"patients", "deadlines"}
    assert context["patients"][0]["name"] == "Alice Martin"
