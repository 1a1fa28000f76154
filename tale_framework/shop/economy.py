"""
Shop economy - catalog resolution, buying and selling.

Shops only carry sell prices. Buying costs the sell price times the
buy multiplier times the quantity, rounded up once for the whole order.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Optional

from tale_framework.errors import (
    ActionNotAllowed,
    InsufficientGold,
    ItemNotSellable,
)
from tale_framework.inventory.items import GameItem
from tale_framework.inventory.manager import add_item, find_stack, remove_item
from tale_framework.rules import DEFAULT_RULES, GameRules

if TYPE_CHECKING:
    from tale_framework.catalog import GameCatalog
    from tale_framework.progression.player import PlayerState

logger = logging.getLogger(__name__)

NO_ITEMS = "This shop has nothing for sale."


@dataclass
class ShopCatalog:
    """The wares of one shop."""
    shop_id: str
    items: list[GameItem] = field(default_factory=list)
    error: Optional[str] = None


def resolve_catalog(catalog: GameCatalog, scene_id: Optional[str]) -> ShopCatalog:
    """
    Items on sale for a scene.

    An empty shop is a valid result with `error` set, not a failure.
    Unknown item ids in the shop list are skipped.
    """
    shop_id, item_ids = catalog.shop_item_ids(scene_id)
    items = []
    for item_id in item_ids:
        item = catalog.get_item(item_id)
        if item is None:
            logger.warning(f"Shop '{shop_id}' lists unknown item '{item_id}'")
            continue
        items.append(item)

    return ShopCatalog(
        shop_id=shop_id,
        items=items,
        error=None if items else NO_ITEMS,
    )


def buy_price(item: GameItem, quantity: int = 1, rules: GameRules = DEFAULT_RULES) -> int:
    """Price of `quantity` units, in whole gold."""
    return math.ceil((item.sell_price or 0) * rules.buy_multiplier * quantity)


def buy(
    player: PlayerState,
    item: GameItem,
    quantity: int = 1,
    rules: GameRules = DEFAULT_RULES,
) -> int:
    """
    Buy items from a shop.

    Returns:
        Gold spent

    Raises:
        ItemNotSellable: Item has no positive sell price
        InsufficientGold: Player cannot pay for the whole quantity
    """
    if quantity <= 0:
        raise ActionNotAllowed("Quantity must be at least 1.")
    if not item.is_tradeable:
        raise ItemNotSellable(item.name)

    cost = buy_price(item, quantity, rules)
    if player.gold < cost:
        raise InsufficientGold(cost, player.gold)

    player.gold -= cost
    add_item(player, item, quantity)
    return cost


def sell(player: PlayerState, item_id: str, quantity: int = 1) -> int:
    """
    Sell held items.

    Returns:
        Gold earned

    Raises:
        ItemNotFound: Item is not held
        InsufficientQuantity: Fewer held than offered
        ItemNotSellable: Item has no positive sell price
    """
    if quantity <= 0:
        raise ActionNotAllowed("Quantity must be at least 1.")

    stack = find_stack(player, item_id)
    if stack is not None and quantity <= stack.quantity and not stack.is_tradeable:
        raise ItemNotSellable(stack.name)

    removed = remove_item(player, item_id, quantity)
    earned = (removed.sell_price or 0) * quantity
    player.gold += earned
    return earned
