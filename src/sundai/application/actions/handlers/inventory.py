"""Inventory action handlers."""

from typing import Any, Dict

from ....core.exceptions import ValidationFailedError
from ....domain.entities.inventory_item import DEFAULT_CATEGORY, DEFAULT_MIN_STOCK, InventoryItem
from ....domain.enums import EntityKind
from ...dto.outcome import Outcome
from ..params import InventoryParams
from .base import LIST_CAPS, ActionHandler, capped, details, merge, require, to_bool, to_int


def _stock_label(item: InventoryItem) -> str:
    return f"{item.quantity} {item.unit}".strip()


def _line(item: InventoryItem, with_min: bool = True) -> str:
    status = "🔴" if item.is_low_stock else "🟢"
    line = f"{status} {item.name} - {_stock_label(item)}"
    return line + (f" (min: {item.min_stock})" if with_min else "")


class _InventoryHandler(ActionHandler):
    kind = EntityKind.INVENTORY
    params_class = InventoryParams


class CreateInventoryItemHandler(_InventoryHandler):
    action = "create_inventory_item"
    mutating = True
    verb = "create inventory item"

    async def run(self, p: InventoryParams) -> Outcome:
        name = require(p.name, "Item name is required.")
        quantity = to_int(p.quantity, "Quantity")
        min_stock = to_int(p.min_stock, "Minimum stock")
        item = InventoryItem(
            name=name,
            category=p.category or DEFAULT_CATEGORY,
            quantity=quantity if quantity is not None else 0,
            min_stock=min_stock if min_stock is not None else DEFAULT_MIN_STOCK,
            unit=p.unit or "",
        )

        created = await self.repositories.inventory.create(item)
        await self.after_write(EntityKind.INVENTORY)

        message = details(
            "✅ Inventory item created successfully!\n\n📋 **Details:**",
            [
                ("Name", created.name),
                ("Category", created.category),
                ("Quantity", _stock_label(created)),
                ("Min Stock", created.min_stock),
            ],
        )
        return Outcome.success(message, created.to_record())


class UpdateInventoryItemHandler(_InventoryHandler):
    action = "update_inventory_item"
    mutating = True
    verb = "update inventory item"

    async def run(self, p: InventoryParams) -> Outcome:
        item, by_id = self.resolve_target(EntityKind.INVENTORY, p.id, p.name)

        quantity = p.new_quantity if p.new_quantity is not None else (p.quantity if by_id else None)
        min_stock = p.new_min_stock if p.new_min_stock is not None else (p.min_stock if by_id else None)
        candidates = {
            "name": p.new_name or (p.name if by_id else None),
            "category": p.new_category or (p.category if by_id else None),
            "quantity": to_int(quantity, "Quantity"),
            "min_stock": to_int(min_stock, "Minimum stock"),
            "unit": p.new_unit or (p.unit if by_id else None),
        }
        changes: Dict[str, Any] = {key: value for key, value in candidates.items() if value is not None}
        if not changes:
            raise ValidationFailedError(f'No changes supplied for inventory item "{item.name}".')

        merged, changes = merge(item, changes)
        written = await self.repositories.inventory.update(item.id, changes)
        await self.ensure_written(EntityKind.INVENTORY, written, item.name)
        await self.after_write(EntityKind.INVENTORY)

        message = details(
            "✅ Inventory item updated successfully!\n\n📋 **Updated:**",
            [
                ("Name", merged.name),
                ("Category", merged.category),
                ("Quantity", _stock_label(merged)),
                ("Min Stock", merged.min_stock),
            ],
        )
        return Outcome.success(message, merged.to_record())


class DeleteInventoryItemHandler(_InventoryHandler):
    action = "delete_inventory_item"
    mutating = True
    verb = "delete inventory item"

    async def run(self, p: InventoryParams) -> Outcome:
        item, _ = self.resolve_target(EntityKind.INVENTORY, p.id, p.name)

        deleted = await self.repositories.inventory.delete(item.id)
        await self.ensure_written(EntityKind.INVENTORY, deleted, item.name)
        await self.after_write(EntityKind.INVENTORY)

        message = details(
            "✅ Inventory item deleted successfully!\n\n📋 **Deleted:**",
            [("Name", item.name), ("Category", item.category or "N/A")],
        )
        return Outcome.success(message, {"id": item.id})


class ListInventoryItemsHandler(_InventoryHandler):
    action = "list_inventory_items"
    verb = "list inventory"

    async def run(self, p: InventoryParams) -> Outcome:
        items = await self.fresh_snapshot(EntityKind.INVENTORY)
        if not items:
            return Outcome.success("📦 **Inventory:** No items found.", [])

        low_only = to_bool(p.low_stock) if p.low_stock is not None else False
        shown = [item for item in items if item.is_low_stock] if low_only else list(items)
        data = [item.to_record() for item in shown]
        if not shown:
            return Outcome.success("📦 **Low Stock Items:** None found.", data)

        lines = [_line(item) for item in shown]
        message = f"📦 **Inventory ({len(shown)}):**\n" + capped(lines, LIST_CAPS[EntityKind.INVENTORY])
        return Outcome.success(message, data)


class SearchInventoryHandler(_InventoryHandler):
    action = "search_inventory"
    verb = "search inventory"

    async def run(self, p: InventoryParams) -> Outcome:
        query = require(p.query, "A search term is required.")
        await self.store.refresh(EntityKind.INVENTORY)
        matches = self.store.search(EntityKind.INVENTORY, query, ("name", "category"))
        data = [item.to_record() for item in matches]
        if not matches:
            return Outcome.success(f'🔍 **Search "{query}":** No inventory items found.', data)

        message = f'🔍 **Found {len(matches)} items for "{query}":**\n' + "\n".join(
            _line(item, with_min=False) for item in matches
        )
        return Outcome.success(message, data)


class GetInventoryItemHandler(_InventoryHandler):
    action = "get_inventory_item"
    verb = "get inventory item"

    async def run(self, p: InventoryParams) -> Outcome:
        item, _ = self.resolve_target(EntityKind.INVENTORY, p.id, p.name)
        rows = [
            ("Name", item.name),
            ("Category", item.category),
            ("Quantity", _stock_label(item)),
            ("Min Stock", item.min_stock),
            ("Status", "🔴 Low stock" if item.is_low_stock else "🟢 In stock"),
        ]
        return Outcome.success(details("📦 **Item Details:**", rows), item.to_record())


class GetLowStockHandler(_InventoryHandler):
    action = "get_low_stock"
    verb = "get low stock items"

    async def run(self, p: InventoryParams) -> Outcome:
        items = await self.repositories.inventory.find_low_stock()
        data = [item.to_record() for item in items]
        if not items:
            return Outcome.success("📦 **Low Stock Items:** None found. All items are well stocked.", data)

        lines = [f"🔴 {item.name} - {_stock_label(item)} (min: {item.min_stock})" for item in items]
        return Outcome.success(f"📦 **Low Stock Items ({len(items)}):**\n" + "\n".join(lines), data)


INVENTORY_HANDLERS = (
    CreateInventoryItemHandler,
    UpdateInventoryItemHandler,
    DeleteInventoryItemHandler,
    ListInventoryItemsHandler,
    SearchInventoryHandler,
    GetInventoryItemHandler,
    GetLowStockHandler,
)
