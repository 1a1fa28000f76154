"""
Inventory module - item stacks and equipment slots.
"""

from tale_framework.inventory.items import (
    GameItem,
    ItemEffects,
    ItemType,
    EquipmentSlot,
    make_placeholder_item,
)
from tale_framework.inventory.manager import (
    find_stack,
    count_item,
    add_item,
    remove_item,
    use_consumable,
    toggle_equipment,
    equip_new,
    ConsumableResult,
    EquipResult,
)

__all__ = [
    "GameItem",
    "ItemEffects",
    "ItemType",
    "EquipmentSlot",
    "make_placeholder_item",
    "find_stack",
    "count_item",
    "add_item",
    "remove_item",
    "use_consumable",
    "toggle_equipment",
    "equip_new",
    "ConsumableResult",
    "EquipResult",
]
