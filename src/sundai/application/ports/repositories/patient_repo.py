"""
Patient repository interface for data access abstraction.
"""

from abc import abstractmethod
from typing import List, Optional

from ....domain.entities.patient import Patient, PatientNote
from .base_repo import EntityRepository


class PatientRepository(EntityRepository[Patient]):
    """Abstract repository for patient data access."""

    @abstractmethod
    async def search(self, query: str, limit: int = 100, offset: int = 0) -> List[Patient]:
        """Search patients by name (case-insensitive substring)."""
        pass

    @abstractmethod
    async def find_by_number(self, patient_number: int) -> Optional[Patient]:
        """Find a patient by their human-facing patient number."""
        pass

    @abstractmethod
    async def add_note(self, patient_id: str, note: str, author: str = "admin") -> PatientNote:
        """Attach a note to a patient."""
        pass

    @abstractmethod
    async def find_notes(self, patient_id: str) -> List[PatientNote]:
        """List the notes attached to a patient, oldest first."""
        pass
