"""
Domain entities for the SundAI assistant.
"""

from .appointment import Appointment
from .deadline import Deadline
from .inventory_item import InventoryItem
from .patient import Patient, PatientNote

__all__ = [
    "Patient",
    "PatientNote",
    "Appointment",
    "Deadline",
    "InventoryItem",
]
