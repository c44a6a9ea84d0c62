"""
Inventory repository interface for data access abstraction.
"""

from abc import abstractmethod
from typing import List

from ....domain.entities.inventory_item import InventoryItem
from .base_repo import EntityRepository


class InventoryRepository(EntityRepository[InventoryItem]):
    """Abstract repository for inventory data access."""

    @abstractmethod
    async def find_low_stock(self) -> List[InventoryItem]:
        """Find items at or below their minimum-stock threshold."""
        pass
