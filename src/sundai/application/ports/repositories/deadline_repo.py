"""
Deadline repository interface for data access abstraction.
"""

from ....domain.entities.deadline import Deadline
from .base_repo import EntityRepository


class DeadlineRepository(EntityRepository[Deadline]):
    """Abstract repository for deadline data access."""
