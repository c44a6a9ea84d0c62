"""Patient domain entity representing a patient in the clinic system."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import datetime
from typing import Any, Dict, Optional

from ..errors import InvalidEntityDataError
from ._records import first_present, lenient_date, optional_int, str_id


@dataclass
class Patient:
    """Patient domain entity."""

    name: str
    id: Optional[str] = None
    dob: str = ""
    phone: str = ""
    email: str = ""
    address: str = ""
    # Human-facing sequential number, assigned by persistence
    patient_number: Optional[int] = None
    last_visit: str = ""

    def __post_init__(self) -> None:
        if not self.name or not self.name.strip():
            raise InvalidEntityDataError("name", self.name, "patient name is required")
        self.name = self.name.strip()

    @property
    def display_number(self) -> str:
        """Patient number when assigned, else the opaque id."""
        return str(self.patient_number if self.patient_number is not None else self.id)

    def to_record(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "Patient":
        patient = object.__new__(cls)
        patient.id = str_id(record.get("id", record.get("_id")))
        patient.name = first_present(record, "name", "patientName", "patient_name") or ""
        patient.dob = lenient_date(first_present(record, "dob", "dateOfBirth", "date_of_birth"))
        patient.phone = first_present(record, "phone", "contactPhone") or ""
        patient.email = record.get("email") or ""
        patient.address = record.get("address") or ""
        patient.patient_number = optional_int(first_present(record, "patient_number", "patientNumber"))
        patient.last_visit = lenient_date(first_present(record, "last_visit", "lastVisit"))
        return patient


@dataclass
class PatientNote:
    """Free-text note attached to a patient."""

    patient_id: str
    note: str
    author: str = "admin"
    id: Optional[str] = None
    created_at: datetime = field(default_factory=datetime.utcnow)

    def to_record(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "PatientNote":
        return cls(
            id=str_id(record.get("id", record.get("_id"))),
            patient_id=str(first_present(record, "patient_id", "patientId") or ""),
            note=first_present(record, "note", "text") or "",
            author=record.get("author") or "admin",
            created_at=record.get("created_at") or datetime.utcnow(),
        )


