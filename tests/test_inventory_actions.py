"""
Inventory action handlers.
"""

import pytest

from sundai.domain.enums import EntityKind


@pytest.mark.asyncio
async def test_create_item(dispatcher, store, view):
    outcome = await dispatcher.dispatch(
        "add_inventory_item", {"itemName": "Masks", "quantity": "20", "minStock": 5, "unit": "boxes"}
    )

    assert outcome.ok
    assert outcome.message.startswith("✅ Inventory item created successfully!")
    assert "• Quantity: 20 boxes" in outcome.message
    assert outcome.data["category"] == "consumables"
    assert store.count(EntityKind.INVENTORY) == 1
    assert view.names == ["stats", "list"]


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "params, message",
    [
        ({"quantity": 3}, "❌ Item name is required."),
        ({"name": "Masks", "quantity": "lots"}, "❌ Quantity must be a whole number, got 'lots'."),
        ({"name": "Masks", "quantity": -3}, "❌ Invalid value for quantity: quantity cannot be negative"),
    ],
)
async def test_create_item_validation(dispatcher, repositories, params, message):
    outcome = await dispatcher.dispatch("create_inventory_item", params)

    assert not outcome.ok
    assert outcome.message == message
    assert await repositories.inventory.find_all() == []


@pytest.mark.asyncio
async def test_restock_to_threshold_is_still_low(dispatcher, seeded):
    outcome = await dispatcher.dispatch("update_inventory_item", {"name": "gloves", "newQuantity": "10"})

    assert outcome.ok
    assert outcome.data["quantity"] == 10

    low = await dispatcher.dispatch("get_low_stock", {})
    assert low.message == "📦 **Low Stock Items (1):**\n🔴 Gloves - 10 boxes (min: 10)"


@pytest.mark.asyncio
async def test_plain_quantity_is_ignored_when_resolved_by_name(dispatcher, seeded):
    outcome = await dispatcher.dispatch("edit_inventory_item", {"name": "Gloves", "quantity": 40})

    assert not outcome.ok
    assert outcome.message == '❌ No changes supplied for inventory item "Gloves".'


@pytest.mark.asyncio
async def test_list_items_with_low_stock_filter(dispatcher, seeded):
    everything = await dispatcher.dispatch("list_inventory", {})
    assert everything.message == (
        "📦 **Inventory (2):**\n🔴 Gloves - 5 boxes (min: 10)\n🟢 Syringes - 200 (min: 50)"
    )

    low = await dispatcher.dispatch("list_inventory_items", {"lowStock": "true"})
    assert low.message == "📦 **Inventory (1):**\n🔴 Gloves - 5 boxes (min: 10)"


@pytest.mark.asyncio
async def test_search_and_get_item(dispatcher, seeded):
    found = await dispatcher.dispatch("search_inventory", {"query": "glo"})
    assert found.message == '🔍 **Found 1 items for "glo":**\n🔴 Gloves - 5 boxes'

    by_category = await dispatcher.dispatch("search_inventory", {"query": "CONSUM"})
    assert len(by_category.data) == 2

    item = await dispatcher.dispatch("get_inventory_item", {"itemName": "syringes"})
    assert "• Status: 🟢 In stock" in item.message


@pytest.mark.asyncio
async def test_delete_item(dispatcher, store, seeded):
    outcome = await dispatcher.dispatch("remove_inventory_item", {"item": "Syringes"})

    assert outcome.ok
    assert [item.name for item in store.all(EntityKind.INVENTORY)] == ["Gloves"]


@pytest.mark.asyncio
async def test_low_stock_when_all_stocked(dispatcher):
    outcome = await dispatcher.dispatch("get_low_stock", {})
    assert outcome.message == "📦 **Low Stock Items:** None found. All items are well stocked."


@pytest.mark.asyncio
async def test_update_and_delete_of_removed_item_are_not_found(dispatcher, repositories, store, view, seeded):
    for item in await repositories.inventory.find_all():
        await repositories.inventory.delete(item.id)

    updated = await dispatcher.dispatch("update_inventory_item", {"item": "Gloves", "newQuantity": 20})
    assert updated.message == '❌ Inventory "Gloves" not found.'

    deleted = await dispatcher.dispatch("delete_inventory_item", {"item": "Syringes"})
    assert not deleted.ok
    assert view.calls == []
    assert store.count(EntityKind.INVENTORY) == 0
