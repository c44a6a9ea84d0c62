"""Inventory item domain entity."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional

from ..errors import InvalidEntityDataError
from ._records import first_present, optional_int, str_id

DEFAULT_CATEGORY = "consumables"
DEFAULT_MIN_STOCK = 10


@dataclass
class InventoryItem:
    """Stock-tracked supply item."""

    name: str
    id: Optional[str] = None
    category: str = DEFAULT_CATEGORY
    quantity: int = 0
    min_stock: int = DEFAULT_MIN_STOCK
    unit: str = ""

    def __post_init__(self) -> None:
        if not self.name or not self.name.strip():
            raise InvalidEntityDataError("name", self.name, "item name is required")
        self.name = self.name.strip()
        if self.quantity < 0:
            raise InvalidEntityDataError("quantity", self.quantity, "quantity cannot be negative")
        if self.min_stock < 0:
            raise InvalidEntityDataError("min_stock", self.min_stock, "minimum stock cannot be negative")

    @property
    def is_low_stock(self) -> bool:
        """Low stock is inclusive of the threshold; computed, never stored."""
        return self.quantity <= self.min_stock

    def to_record(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "InventoryItem":
        item = object.__new__(cls)
        item.id = str_id(record.get("id", record.get("_id")))
        item.name = first_present(record, "name", "itemName") or ""
        item.category = record.get("category") or DEFAULT_CATEGORY
        item.quantity = optional_int(record.get("quantity")) or 0
        min_stock = optional_int(first_present(record, "min_stock", "minStock"))
        item.min_stock = DEFAULT_MIN_STOCK if min_stock is None else min_stock
        item.unit = record.get("unit") or ""
        return item
