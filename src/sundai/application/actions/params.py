"""
Parameter aliasing for action handlers.

Assistant backends name the same logical field in several ways
(``patientName`` / ``name`` / ``patient``). Each parameter dataclass lists the
accepted keys per field, in priority order, and ``resolve_params`` turns the
raw mapping into a frozen instance once, at handler entry.
"""

from dataclasses import dataclass, field, fields
from typing import Any, Dict, Optional, Type, TypeVar

P = TypeVar("P")


def aliased(*keys: str) -> Any:
    """Declare a parameter field fed by the given raw keys, first non-blank wins."""
    return field(default=None, metadata={"aliases": keys})


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def pick(raw: Dict[str, Any], *keys: str) -> Any:
    """First non-blank value among ``keys`` (strings are stripped)."""
    for key in keys:
        value = raw.get(key)
        if not _is_blank(value):
            return value.strip() if isinstance(value, str) else value
    return None


def resolve_params(params_class: Type[P], raw: Optional[Dict[str, Any]]) -> P:
    """Build a parameter dataclass from a loosely-keyed mapping."""
    raw = raw or {}
    values = {}
    for f in fields(params_class):
        keys = f.metadata.get("aliases", (f.name,))
        values[f.name] = pick(raw, *keys)
    return params_class(**values)


@dataclass(frozen=True)
class PatientParams:
    id: Optional[str] = aliased("id", "patientId", "patient_id")
    number: Any = aliased("patientNumber", "patient_number", "number")
    name: Optional[str] = aliased("patientName", "name", "patient", "fullName")
    dob: Optional[str] = aliased("patientDob", "dob", "dateOfBirth", "date_of_birth")
    phone: Optional[str] = aliased("phone", "contactPhone", "mobile")
    email: Optional[str] = aliased("email")
    address: Optional[str] = aliased("address")
    query: Optional[str] = aliased("query", "searchTerm", "patientName", "name")
    note: Optional[str] = aliased("note", "text", "content")
    author: Optional[str] = aliased("author")
    new_name: Optional[str] = aliased("newName", "new_name")
    new_dob: Optional[str] = aliased("newDob", "newDateOfBirth", "new_dob")
    new_phone: Optional[str] = aliased("newPhone", "new_phone")
    new_email: Optional[str] = aliased("newEmail", "new_email")
    new_address: Optional[str] = aliased("newAddress", "new_address")


@dataclass(frozen=True)
class AppointmentParams:
    id: Optional[str] = aliased("id", "appointmentId", "appointment_id")
    patient_id: Optional[str] = aliased("patientId", "patient_id")
    patient_number: Any = aliased("patientNumber", "patient_number")
    patient_name: Optional[str] = aliased("patientName", "patient", "name", "fullName")
    date: Any = aliased("date", "appointmentDate", "appointment_date", "day")
    time: Optional[str] = aliased("time", "appointmentTime", "appointment_time")
    type: Optional[str] = aliased("type", "appointmentType", "appointment_type")
    duration: Any = aliased("duration", "durationMinutes")
    notes: Optional[str] = aliased("notes", "note")
    status: Optional[str] = aliased("status")
    query: Optional[str] = aliased("query", "searchTerm", "patientName", "patient", "name")
    new_patient_name: Optional[str] = aliased("newPatientName", "new_patient_name")
    new_date: Any = aliased("newDate", "new_date")
    new_time: Optional[str] = aliased("newTime", "new_time")
    new_type: Optional[str] = aliased("newType", "new_type")
    new_duration: Any = aliased("newDuration", "new_duration")
    new_notes: Optional[str] = aliased("newNotes", "new_notes")
    new_status: Optional[str] = aliased("newStatus", "new_status")


@dataclass(frozen=True)
class DeadlineParams:
    id: Optional[str] = aliased("id", "deadlineId", "deadline_id")
    title: Optional[str] = aliased("title", "oldTitle", "name")
    date: Any = aliased("date", "dueDate", "due_date")
    priority: Optional[str] = aliased("priority")
    description: Optional[str] = aliased("description", "details")
    query: Optional[str] = aliased("query", "searchTerm", "title")
    new_title: Optional[str] = aliased("newTitle", "new_title")
    new_date: Any = aliased("newDate", "newDueDate", "new_date")
    new_priority: Optional[str] = aliased("newPriority", "new_priority")
    new_description: Optional[str] = aliased("newDescription", "new_description")


@dataclass(frozen=True)
class InventoryParams:
    id: Optional[str] = aliased("id", "itemId", "item_id")
    name: Optional[str] = aliased("name", "itemName", "item_name", "item")
    category: Optional[str] = aliased("category")
    quantity: Any = aliased("quantity", "qty")
    min_stock: Any = aliased("minStock", "minimumStock", "min_stock")
    unit: Optional[str] = aliased("unit")
    low_stock: Any = aliased("lowStock", "low_stock")
    query: Optional[str] = aliased("query", "searchTerm", "name", "itemName")
    new_name: Optional[str] = aliased("newName", "new_name")
    new_category: Optional[str] = aliased("newCategory", "new_category")
    new_quantity: Any = aliased("newQuantity", "new_quantity")
    new_min_stock: Any = aliased("newMinStock", "newMinimumStock", "new_min_stock")
    new_unit: Optional[str] = aliased("newUnit", "new_unit")
