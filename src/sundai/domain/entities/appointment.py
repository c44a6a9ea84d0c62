"""Appointment domain entity."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional

from ...core.utils.datetime_utils import normalize_date
from ..errors import InvalidEntityDataError
from ._records import first_present, lenient_date, optional_int, str_id

DEFAULT_APPOINTMENT_TYPE = "checkup"
DEFAULT_DURATION_MINUTES = 30
DEFAULT_STATUS = "scheduled"


@dataclass
class Appointment:
    """
    A booked visit.

    The patient is referenced by id and by a denormalized name; the two
    may disagree when a patient was renamed after booking.
    """

    date: str
    patient_id: Optional[str] = None
    patient_name: str = ""
    id: Optional[str] = None
    time: str = ""
    type: str = DEFAULT_APPOINTMENT_TYPE
    duration: int = DEFAULT_DURATION_MINUTES
    notes: str = ""
    status: str = DEFAULT_STATUS

    def __post_init__(self) -> None:
        self.date = normalize_date(self.date)
        if not self.patient_id and not (self.patient_name or "").strip():
            raise InvalidEntityDataError(
                "patient", self.patient_name, "appointment needs a patient name or id"
            )
        if self.duration is None or self.duration <= 0:
            raise InvalidEntityDataError("duration", self.duration, "duration must be positive")

    def to_record(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "Appointment":
        # Stored rows are trusted; skip validation by building via object.__new__
        appointment = object.__new__(cls)
        appointment.id = str_id(record.get("id", record.get("_id")))
        appointment.patient_id = str_id(first_present(record, "patient_id", "patientId"))
        appointment.patient_name = first_present(record, "patient_name", "patientName") or ""
        appointment.date = lenient_date(first_present(record, "date", "appointmentDate"))
        appointment.time = first_present(record, "time", "appointmentTime") or ""
        appointment.type = first_present(record, "type", "appointmentType") or DEFAULT_APPOINTMENT_TYPE
        appointment.duration = optional_int(record.get("duration")) or DEFAULT_DURATION_MINUTES
        appointment.notes = record.get("notes") or ""
        appointment.status = record.get("status") or DEFAULT_STATUS
        return appointment
