"""
Bundle of the four clinic repositories plus a reachability probe.
"""

from abc import ABC, abstractmethod

from ....domain.enums import EntityKind
from .appointment_repo import AppointmentRepository
from .base_repo import EntityRepository
from .deadline_repo import DeadlineRepository
from .inventory_repo import InventoryRepository
from .patient_repo import PatientRepository


class ClinicRepositories(ABC):
    """The persistence collaborator as seen by the application layer."""

    def __init__(
        self,
        patients: PatientRepository,
        appointments: AppointmentRepository,
        deadlines: DeadlineRepository,
        inventory: InventoryRepository,
    ) -> None:
        self.patients = patients
        self.appointments = appointments
        self.deadlines = deadlines
        self.inventory = inventory

    def for_kind(self, kind: EntityKind) -> EntityRepository:
        return {
            EntityKind.PATIENT: self.patients,
            EntityKind.APPOINTMENT: self.appointments,
            EntityKind.DEADLINE: self.deadlines,
            EntityKind.INVENTORY: self.inventory,
        }[kind]

    @abstractmethod
    async def is_available(self) -> bool:
        """Whether the backing store is currently reachable."""
        pass

    async def close(self) -> None:
        """Release connections; no-op by default."""
        return None
