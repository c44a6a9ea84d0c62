"""
In-memory implementation of the clinic repositories.

Used when no database is configured and by the test-suite. Records are kept
in insertion order and ids are sequential strings. A shared switch lets the
whole bundle be taken offline to exercise connectivity failures.
"""

import itertools
from dataclasses import replace
from typing import Any, Dict, Generic, List, Optional, TypeVar

from sundai.application.ports.repositories.appointment_repo import AppointmentRepository
from sundai.application.ports.repositories.clinic_repositories import ClinicRepositories
from sundai.application.ports.repositories.deadline_repo import DeadlineRepository
from sundai.application.ports.repositories.inventory_repo import InventoryRepository
from sundai.application.ports.repositories.patient_repo import PatientRepository
from sundai.core.exceptions import NotConnectedError
from sundai.core.utils.string_utils import contains_ci
from sundai.domain.entities.appointment import Appointment
from sundai.domain.entities.deadline import Deadline
from sundai.domain.entities.inventory_item import InventoryItem
from sundai.domain.entities.patient import Patient, PatientNote

T = TypeVar("T")


class _Switch:
    """Reachability flag shared by every repository of one bundle."""

    def __init__(self) -> None:
        self.online = True

    def check(self) -> None:
        if not self.online:
            raise NotConnectedError()


class _InMemoryRepository(Generic[T]):
    """Dict-backed storage shared by the per-kind repositories."""

    def __init__(self, switch: _Switch) -> None:
        self._switch = switch
        self._records: Dict[str, T] = {}
        self._ids = itertools.count(1)

    def _next_id(self) -> str:
        return str(next(self._ids))

    async def create(self, entity: T) -> T:
        self._switch.check()
        stored = replace(entity, id=self._next_id())
        self._records[stored.id] = stored
        return stored

    async def update(self, entity_id: str, changes: Dict[str, Any]) -> bool:
        self._switch.check()
        current = self._records.get(str(entity_id))
        if current is None:
            return False
        self._records[current.id] = replace(current, **changes)
        return True

    async def delete(self, entity_id: str) -> bool:
        self._switch.check()
        return self._records.pop(str(entity_id), None) is not None

    async def find_by_id(self, entity_id: str) -> Optional[T]:
        self._switch.check()
        return self._records.get(str(entity_id))

    async def find_all(self, limit: int = 100, offset: int = 0) -> List[T]:
        self._switch.check()
        return list(self._records.values())[offset : offset + limit]


class InMemoryPatientRepository(_InMemoryRepository[Patient], PatientRepository):
    """In-memory PatientRepository with sequential patient numbers."""

    def __init__(self, switch: _Switch) -> None:
        super().__init__(switch)
        self._notes: List[PatientNote] = []
        self._note_ids = itertools.count(1)

    async def create(self, entity: Patient) -> Patient:
        self._switch.check()
        numbers = [p.patient_number for p in self._records.values() if p.patient_number is not None]
        stored = replace(entity, id=self._next_id(), patient_number=max(numbers, default=0) + 1)
        self._records[stored.id] = stored
        return stored

    async def delete(self, entity_id: str) -> bool:
        deleted = await super().delete(entity_id)
        if deleted:
            self._notes = [n for n in self._notes if n.patient_id != str(entity_id)]
        return deleted

    async def search(self, query: str, limit: int = 100, offset: int = 0) -> List[Patient]:
        self._switch.check()
        matches = [p for p in self._records.values() if contains_ci(p.name, query)]
        return matches[offset : offset + limit]

    async def find_by_number(self, patient_number: int) -> Optional[Patient]:
        self._switch.check()
        return next((p for p in self._records.values() if p.patient_number == patient_number), None)

    async def add_note(self, patient_id: str, note: str, author: str = "admin") -> PatientNote:
        self._switch.check()
        stored = PatientNote(patient_id=str(patient_id), note=note, author=author, id=str(next(self._note_ids)))
        self._notes.append(stored)
        return stored

    async def find_notes(self, patient_id: str) -> List[PatientNote]:
        self._switch.check()
        return [n for n in self._notes if n.patient_id == str(patient_id)]


class InMemoryAppointmentRepository(_InMemoryRepository[Appointment], AppointmentRepository):
    """In-memory AppointmentRepository."""

    async def find_by_date(self, date: str) -> List[Appointment]:
        self._switch.check()
        return sorted((a for a in self._records.values() if a.date == date), key=lambda a: a.time or "")


class InMemoryDeadlineRepository(_InMemoryRepository[Deadline], DeadlineRepository):
    """In-memory DeadlineRepository."""


class InMemoryInventoryRepository(_InMemoryRepository[InventoryItem], InventoryRepository):
    """In-memory InventoryRepository."""

    async def find_low_stock(self) -> List[InventoryItem]:
        self._switch.check()
        return [item for item in self._records.values() if item.is_low_stock]


class InMemoryClinicRepositories(ClinicRepositories):
    """Bundle of in-memory repositories sharing one reachability switch."""

    def __init__(self) -> None:
        self._switch = _Switch()
        super().__init__(
            patients=InMemoryPatientRepository(self._switch),
            appointments=InMemoryAppointmentRepository(self._switch),
            deadlines=InMemoryDeadlineRepository(self._switch),
            inventory=InMemoryInventoryRepository(self._switch),
        )

    def set_available(self, available: bool) -> None:
        self._switch.online = available

    async def is_available(self) -> bool:
        return self._switch.online
