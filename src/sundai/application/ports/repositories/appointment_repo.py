"""
Appointment repository interface for data access abstraction.
"""

from abc import abstractmethod
from typing import List

from ....domain.entities.appointment import Appointment
from .base_repo import EntityRepository


class AppointmentRepository(EntityRepository[Appointment]):
    """Abstract repository for appointment data access."""

    @abstractmethod
    async def find_by_date(self, date: str) -> List[Appointment]:
        """Find appointments on a canonical YYYY-MM-DD day, ordered by time."""
        pass
