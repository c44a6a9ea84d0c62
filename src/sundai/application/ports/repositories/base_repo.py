"""
Generic repository interface shared by every entity kind.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Generic, List, Optional, TypeVar

T = TypeVar("T")


class EntityRepository(ABC, Generic[T]):
    """Abstract repository for one record collection."""

    @abstractmethod
    async def create(self, entity: T) -> T:
        """Persist a new record and return it with its assigned id."""
        pass

    @abstractmethod
    async def update(self, entity_id: str, changes: Dict[str, Any]) -> bool:
        """Apply a partial update to the record with the given id."""
        pass

    @abstractmethod
    async def delete(self, entity_id: str) -> bool:
        """Delete a record by id."""
        pass

    @abstractmethod
    async def find_by_id(self, entity_id: str) -> Optional[T]:
        """Find a record by id."""
        pass

    @abstractmethod
    async def find_all(self, limit: int = 100, offset: int = 0) -> List[T]:
        """Find all records with pagination."""
        pass
