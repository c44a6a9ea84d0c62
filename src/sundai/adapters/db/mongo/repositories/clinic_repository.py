"""
MongoDB implementation of the clinic repositories.
"""

import logging
import re
import uuid
from datetime import datetime
from typing import Any, Callable, Dict, Generic, List, Optional, Type, TypeVar

from beanie import Document
from pymongo.errors import PyMongoError

from sundai.application.ports.repositories.appointment_repo import AppointmentRepository
from sundai.application.ports.repositories.clinic_repositories import ClinicRepositories
from sundai.application.ports.repositories.deadline_repo import DeadlineRepository
from sundai.application.ports.repositories.inventory_repo import InventoryRepository
from sundai.application.ports.repositories.patient_repo import PatientRepository
from sundai.domain.entities.appointment import Appointment
from sundai.domain.entities.deadline import Deadline
from sundai.domain.entities.inventory_item import InventoryItem
from sundai.domain.entities.patient import Patient, PatientNote

from ..models.clinic_m import (
    AppointmentMongo,
    DeadlineMongo,
    InventoryItemMongo,
    PatientMongo,
    PatientNoteMongo,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

_INTERNAL_FIELDS = {"id", "revision_id", "record_id", "created_at", "updated_at"}


def _new_record_id() -> str:
    return uuid.uuid4().hex


def _ci_contains(value: str) -> Dict[str, str]:
    return {"$regex": re.escape(value), "$options": "i"}


class _MongoRepository(Generic[T]):
    """Shared CRUD over one Beanie document class keyed by ``record_id``."""

    model: Type[Document]
    entity_factory: Callable[[Dict[str, Any]], T]

    def _mongo_to_domain(self, doc: Document) -> T:
        record = doc.model_dump(exclude=_INTERNAL_FIELDS)
        record["id"] = doc.record_id
        return type(self).entity_factory(record)

    def _domain_to_mongo(self, entity: T, record_id: str) -> Document:
        record = {k: v for k, v in entity.to_record().items() if k != "id"}
        return self.model(record_id=record_id, **record)

    async def _find_doc(self, entity_id: str) -> Optional[Document]:
        return await self.model.find_one(self.model.record_id == str(entity_id))

    async def create(self, entity: T) -> T:
        doc = self._domain_to_mongo(entity, _new_record_id())
        await doc.insert()
        return self._mongo_to_domain(doc)

    async def update(self, entity_id: str, changes: Dict[str, Any]) -> bool:
        doc = await self._find_doc(entity_id)
        if not doc:
            return False
        for key, value in changes.items():
            setattr(doc, key, value)
        doc.updated_at = datetime.utcnow()
        await doc.save()
        return True

    async def delete(self, entity_id: str) -> bool:
        doc = await self._find_doc(entity_id)
        if not doc:
            return False
        await doc.delete()
        return True

    async def find_by_id(self, entity_id: str) -> Optional[T]:
        doc = await self._find_doc(entity_id)
        return self._mongo_to_domain(doc) if doc else None

    async def find_all(self, limit: int = 100, offset: int = 0) -> List[T]:
        docs = await self.model.find().skip(offset).limit(limit).to_list()
        return [self._mongo_to_domain(doc) for doc in docs]


class MongoPatientRepository(_MongoRepository[Patient], PatientRepository):
    """MongoDB implementation of PatientRepository."""

    model = PatientMongo
    entity_factory = Patient.from_record

    async def create(self, entity: Patient) -> Patient:
        """Insert a patient with the next free patient number."""
        latest = await PatientMongo.find(PatientMongo.patient_number != None).sort(  # noqa: E711
            -PatientMongo.patient_number
        ).limit(1).to_list()
        next_number = (latest[0].patient_number if latest else 0) + 1

        doc = self._domain_to_mongo(entity, _new_record_id())
        doc.patient_number = next_number
        await doc.insert()
        return self._mongo_to_domain(doc)

    async def delete(self, entity_id: str) -> bool:
        deleted = await super().delete(entity_id)
        if deleted:
            await PatientNoteMongo.find(PatientNoteMongo.patient_id == str(entity_id)).delete()
        return deleted

    async def search(self, query: str, limit: int = 100, offset: int = 0) -> List[Patient]:
        docs = await PatientMongo.find({"name": _ci_contains(query)}).skip(offset).limit(limit).to_list()
        return [self._mongo_to_domain(doc) for doc in docs]

    async def find_by_number(self, patient_number: int) -> Optional[Patient]:
        doc = await PatientMongo.find_one(PatientMongo.patient_number == patient_number)
        return self._mongo_to_domain(doc) if doc else None

    async def add_note(self, patient_id: str, note: str, author: str = "admin") -> PatientNote:
        doc = PatientNoteMongo(
            record_id=_new_record_id(), patient_id=str(patient_id), note=note, author=author
        )
        await doc.insert()
        return PatientNote(
            id=doc.record_id, patient_id=doc.patient_id, note=doc.note, author=doc.author, created_at=doc.created_at
        )

    async def find_notes(self, patient_id: str) -> List[PatientNote]:
        docs = await PatientNoteMongo.find(PatientNoteMongo.patient_id == str(patient_id)).sort(
            +PatientNoteMongo.created_at
        ).to_list()
        return [
            PatientNote(id=d.record_id, patient_id=d.patient_id, note=d.note, author=d.author, created_at=d.created_at)
            for d in docs
        ]


class MongoAppointmentRepository(_MongoRepository[Appointment], AppointmentRepository):
    """MongoDB implementation of AppointmentRepository."""

    model = AppointmentMongo
    entity_factory = Appointment.from_record

    async def find_by_date(self, date: str) -> List[Appointment]:
        docs = await AppointmentMongo.find(AppointmentMongo.date == date).sort(+AppointmentMongo.time).to_list()
        return [self._mongo_to_domain(doc) for doc in docs]


class MongoDeadlineRepository(_MongoRepository[Deadline], DeadlineRepository):
    """MongoDB implementation of DeadlineRepository."""

    model = DeadlineMongo
    entity_factory = Deadline.from_record


class MongoInventoryRepository(_MongoRepository[InventoryItem], InventoryRepository):
    """MongoDB implementation of InventoryRepository."""

    model = InventoryItemMongo
    entity_factory = InventoryItem.from_record

    async def find_low_stock(self) -> List[InventoryItem]:
        docs = await InventoryItemMongo.find(
            {"$expr": {"$lte": ["$quantity", "$min_stock"]}}
        ).to_list()
        return [self._mongo_to_domain(doc) for doc in docs]


class MongoClinicRepositories(ClinicRepositories):
    """Clinic repositories backed by one Motor client."""

    def __init__(self, client: Any) -> None:
        super().__init__(
            patients=MongoPatientRepository(),
            appointments=MongoAppointmentRepository(),
            deadlines=MongoDeadlineRepository(),
            inventory=MongoInventoryRepository(),
        )
        self._client = client

    async def is_available(self) -> bool:
        try:
            await self._client.admin.command("ping")
            return True
        except PyMongoError as e:
            logger.warning(f"⚠️ MongoDB ping failed: {e}")
            return False

    async def close(self) -> None:
        self._client.close()
