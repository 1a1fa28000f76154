"""
Inventory and equipment operations.

These functions mutate the PlayerState they are given and raise a
GameError when the operation is not possible, leaving the player
untouched. Callers recompute derived stats afterwards.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

from tale_framework.errors import (
    InsufficientQuantity,
    ItemNotEquippable,
    ItemNotFound,
    ItemNotUsable,
    NoEffect,
)
from tale_framework.inventory.items import GameItem

if TYPE_CHECKING:
    from tale_framework.progression.player import PlayerState

logger = logging.getLogger(__name__)


def find_stack(player: PlayerState, item_id: str) -> Optional[GameItem]:
    """The inventory stack for an item id, if held."""
    return next((s for s in player.inventory if s.id == item_id), None)


def count_item(player: PlayerState, item_id: str) -> int:
    stack = find_stack(player, item_id)
    return stack.quantity if stack else 0


def add_item(player: PlayerState, item: GameItem, quantity: Optional[int] = None) -> GameItem:
    """
    Add items to the inventory, merging into an existing stack.

    Args:
        player: Player to modify
        item: Item definition (its own quantity is used if none given)
        quantity: Amount to add

    Returns:
        The stack now holding the item
    """
    amount = item.quantity if quantity is None else quantity
    if amount <= 0:
        raise ValueError(f"Cannot add {amount} of {item.id}")

    stack = find_stack(player, item.id)
    if stack is not None:
        stack.quantity += amount
        return stack

    stack = item.stack_of(amount)
    player.inventory.append(stack)
    return stack


def remove_item(player: PlayerState, item_id: str, quantity: int = 1) -> GameItem:
    """
    Take items out of a stack, dropping the stack when it empties.

    Returns:
        A detached copy of the removed items

    Raises:
        ItemNotFound: Item is not held
        InsufficientQuantity: Fewer held than requested
    """
    stack = find_stack(player, item_id)
    if stack is None:
        raise ItemNotFound(item_id)
    if quantity > stack.quantity:
        raise InsufficientQuantity(quantity, stack.quantity)

    removed = stack.stack_of(quantity)
    stack.quantity -= quantity
    if stack.quantity <= 0:
        player.inventory.remove(stack)
    return removed


@dataclass
class ConsumableResult:
    """What a consumable did."""
    item: GameItem
    hp_restored: int = 0
    mp_restored: int = 0


def use_consumable(player: PlayerState, item_id: str) -> ConsumableResult:
    """
    Drink or eat an item outside combat.

    Raises:
        ItemNotFound: Item is not held
        ItemNotUsable: Not a consumable, or it has no effects
        NoEffect: Neither hp nor mp would be restored by its effects
    """
    stack = find_stack(player, item_id)
    if stack is None:
        raise ItemNotFound(item_id)
    if not stack.is_consumable or stack.effects is None:
        raise ItemNotUsable(f"{stack.name} cannot be used.")

    effects = stack.effects
    if effects.hp <= 0 and effects.mp <= 0:
        raise NoEffect(f"{stack.name} has no effect here.")

    result = ConsumableResult(item=stack.stack_of(1))
    if effects.hp > 0:
        before = player.hp
        player.hp = min(player.max_hp, player.hp + effects.hp)
        result.hp_restored = player.hp - before
    if effects.mp > 0:
        before = player.mp
        player.mp = min(player.max_mp, player.mp + effects.mp)
        result.mp_restored = player.mp - before

    remove_item(player, item_id, 1)
    return result


@dataclass
class EquipResult:
    """What toggle_equipment changed."""
    item: GameItem
    equipped: bool
    replaced: Optional[GameItem] = None


def toggle_equipment(player: PlayerState, item_id: str) -> EquipResult:
    """
    Equip an item from the inventory, or unequip it if already worn.

    Equipping into an occupied slot returns the previous item to the
    inventory first.

    Raises:
        ItemNotFound: Item is neither worn nor held
        ItemNotEquippable: Item has no equipment slot
    """
    for worn in player.equipment.worn():
        if worn.id == item_id and worn.equip_slot is not None:
            player.equipment.set(worn.equip_slot, None)
            add_item(player, worn, 1)
            return EquipResult(item=worn, equipped=False)

    stack = find_stack(player, item_id)
    if stack is None:
        raise ItemNotFound(item_id)
    if stack.equip_slot is None:
        raise ItemNotEquippable(f"{stack.name} cannot be equipped.")

    slot = stack.equip_slot
    replaced = player.equipment.get(slot)
    if replaced is not None:
        player.equipment.set(slot, None)
        add_item(player, replaced, 1)

    item = remove_item(player, item_id, 1)
    player.equipment.set(slot, item)
    return EquipResult(item=item, equipped=True, replaced=replaced)


def equip_new(player: PlayerState, item: GameItem) -> None:
    """Wear an item that was never in the inventory (starter kit)."""
    if item.equip_slot is None:
        raise ItemNotEquippable(f"{item.name} cannot be equipped.")
    current = player.equipment.get(item.equip_slot)
    if current is not None:
        add_item(player, current, 1)
    player.equipment.set(item.equip_slot, item.stack_of(1))
