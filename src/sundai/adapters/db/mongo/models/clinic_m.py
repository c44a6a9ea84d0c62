"""
MongoDB Beanie models used by the persistence layer.
"""

from datetime import datetime
from typing import Optional

from beanie import Document, Indexed
from pydantic import Field


class PatientMongo(Document):
    """MongoDB model for a patient."""

    record_id: Indexed(str, unique=True) = Field(..., description="Stable patient id")  # type: ignore
    name: str = Field(..., description="Patient full name")
    dob: str = Field(default="", description="Date of birth (YYYY-MM-DD)")
    phone: str = Field(default="")
    email: str = Field(default="")
    address: str = Field(default="")
    patient_number: Optional[int] = Field(None, description="Human-facing sequential number")
    last_visit: str = Field(default="")
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

    class Settings:
        name = "patients"
        indexes = ["patient_number", "name"]


class PatientNoteMongo(Document):
    """MongoDB model for a note attached to a patient."""

    record_id: Indexed(str, unique=True)  # type: ignore
    patient_id: Indexed(str)  # type: ignore
    note: str
    author: str = Field(default="admin")
    created_at: datetime = Field(default_factory=datetime.utcnow)

    class Settings:
        name = "patient_notes"


class AppointmentMongo(Document):
    """MongoDB model for an appointment."""

    record_id: Indexed(str, unique=True)  # type: ignore
    patient_id: Optional[str] = None
    patient_name: str = Field(default="")
    date: Indexed(str)  # type: ignore
    time: str = Field(default="")
    type: str = Field(default="checkup")
    duration: int = Field(default=30)
    notes: str = Field(default="")
    status: str = Field(default="scheduled")
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

    class Settings:
        name = "appointments"


class DeadlineMongo(Document):
    """MongoDB model for a deadline (``date`` and ``due_date`` always equal)."""

    record_id: Indexed(str, unique=True)  # type: ignore
    title: str
    date: Indexed(str)  # type: ignore
    due_date: str
    priority: str = Field(default="medium")
    description: str = Field(default="")
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

    class Settings:
        name = "deadlines"


class InventoryItemMongo(Document):
    """MongoDB model for an inventory item."""

    record_id: Indexed(str, unique=True)  # type: ignore
    name: str
    category: str = Field(default="consumables")
    quantity: int = Field(default=0, ge=0)
    min_stock: int = Field(default=10, ge=0)
    unit: str = Field(default="")
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

    class Settings:
        name = "inventory"


DOCUMENT_MODELS = [PatientMongo, PatientNoteMongo, AppointmentMongo, DeadlineMongo, InventoryItemMongo]
