"""
Item definitions - stacks, effects and equipment slots.
"""

from __future__ import annotations

import uuid
from enum import Enum
from typing import Optional

from tale_engine.core.component import Component


class ItemType(str, Enum):
    """Item categories."""
    CONSUMABLE = "consumable"
    WEAPON = "weapon"
    ARMOR = "armor"
    ACCESSORY = "accessory"
    KEY_ITEM = "keyItem"


class EquipmentSlot(str, Enum):
    """Equipment slot types. One item per slot."""
    WEAPON = "weapon"
    ARMOR = "armor"
    ACCESSORY = "accessory"


class ItemEffects(Component):
    """
    Stat contributions of an item.

    For consumables hp/mp are restore amounts and attack is thrown damage;
    for equipment every field is a flat bonus while worn.
    """
    hp: int = 0
    mp: int = 0
    attack: int = 0
    defense: int = 0
    speed: int = 0
    luck: int = 0
    crit_chance: int = 0


class GameItem(Component):
    """
    An item definition, or a stack of it when held.

    Attributes:
        quantity: Stack size in the inventory (1 while equipped)
        effects: Restore / damage / bonus values
        equip_slot: Slot this item occupies when worn
        sell_price: Gold paid by shops; buy price derives from it
    """
    id: str
    name: str
    description: str = ""
    type: ItemType = ItemType.CONSUMABLE
    quantity: int = 1
    effects: Optional[ItemEffects] = None
    equip_slot: Optional[EquipmentSlot] = None
    sell_price: Optional[int] = None
    icon: Optional[str] = None

    @property
    def is_consumable(self) -> bool:
        return self.type == ItemType.CONSUMABLE

    @property
    def is_tradeable(self) -> bool:
        return self.sell_price is not None and self.sell_price > 0

    def stack_of(self, quantity: int) -> GameItem:
        """A detached copy of this definition with the given quantity."""
        return self.model_copy(update={"quantity": quantity}, deep=True)


def make_placeholder_item(name: str) -> GameItem:
    """Key item standing in for a pickup whose id is not in the catalog."""
    return GameItem(
        id=f"unknown_{uuid.uuid4().hex[:12]}",
        name=name,
        description="An item nobody has catalogued.",
        type=ItemType.KEY_ITEM,
        quantity=1,
    )
