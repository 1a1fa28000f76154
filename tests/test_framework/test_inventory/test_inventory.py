import pytest

from tale_framework.errors import (
    InsufficientQuantity,
    ItemNotEquippable,
    ItemNotFound,
    ItemNotUsable,
    NoEffect,
)
from tale_framework.inventory.items import EquipmentSlot, ItemType, make_placeholder_item
from tale_framework.inventory.manager import (
    add_item,
    count_item,
    equip_new,
    find_stack,
    remove_item,
    toggle_equipment,
    use_consumable,
)


def test_add_item_merges_stacks(player, catalog):
    potion = catalog.get_item("small_potion")
    add_item(player, potion, 2)
    add_item(player, potion, 3)

    assert len([s for s in player.inventory if s.id == "small_potion"]) == 1
    assert count_item(player, "small_potion") == 5


def test_add_item_uses_definition_quantity(player, catalog):
    add_item(player, catalog.get_item("mana_potion"))
    assert count_item(player, "mana_potion") == 1


def test_remove_item_drops_empty_stack(player, catalog):
    add_item(player, catalog.get_item("small_potion"), 2)

    removed = remove_item(player, "small_potion", 2)

    assert removed.quantity == 2
    assert find_stack(player, "small_potion") is None


def test_remove_item_errors(player, catalog):
    with pytest.raises(ItemNotFound):
        remove_item(player, "small_potion")

    add_item(player, catalog.get_item("small_potion"), 1)
    with pytest.raises(InsufficientQuantity):
        remove_item(player, "small_potion", 2)
    assert count_item(player, "small_potion") == 1


def test_use_consumable_heals_and_consumes(player, catalog):
    add_item(player, catalog.get_item("small_potion"), 2)
    player.hp = 50

    result = use_consumable(player, "small_potion")

    assert result.hp_restored == 30
    assert player.hp == 80
    assert count_item(player, "small_potion") == 1


def test_use_consumable_clamps_to_max(player, catalog):
    add_item(player, catalog.get_item("large_potion"), 1)
    player.hp = 90

    result = use_consumable(player, "large_potion")

    assert player.hp == player.max_hp
    assert result.hp_restored == 10
    assert find_stack(player, "large_potion") is None


def test_use_consumable_failures(player, catalog):
    with pytest.raises(ItemNotFound):
        use_consumable(player, "small_potion")

    add_item(player, catalog.get_item("iron_sword"), 1)
    with pytest.raises(ItemNotUsable):
        use_consumable(player, "iron_sword")

    add_item(player, catalog.get_item("fire_bomb"), 1)
    with pytest.raises(NoEffect):
        use_consumable(player, "fire_bomb")
    assert count_item(player, "fire_bomb") == 1


def test_equip_unequip_round_trip(player, catalog):
    add_item(player, catalog.get_item("iron_sword"), 2)

    equipped = toggle_equipment(player, "iron_sword")
    assert equipped.equipped
    assert player.equipment.weapon.id == "iron_sword"
    assert count_item(player, "iron_sword") == 1

    unequipped = toggle_equipment(player, "iron_sword")
    assert not unequipped.equipped
    assert player.equipment.weapon is None
    assert count_item(player, "iron_sword") == 2


def test_equip_last_item_removes_stack(player, catalog):
    add_item(player, catalog.get_item("chain_mail"), 1)
    toggle_equipment(player, "chain_mail")
    assert find_stack(player, "chain_mail") is None
    assert player.equipment.get(EquipmentSlot.ARMOR).id == "chain_mail"


def test_equip_replaces_occupied_slot(player, catalog):
    equip_new(player, catalog.get_item("basic_sword"))
    add_item(player, catalog.get_item("iron_sword"), 1)

    result = toggle_equipment(player, "iron_sword")

    assert result.replaced.id == "basic_sword"
    assert player.equipment.weapon.id == "iron_sword"
    assert count_item(player, "basic_sword") == 1
    assert find_stack(player, "iron_sword") is None


def test_equip_requires_slot(player, catalog):
    add_item(player, catalog.get_item("small_potion"), 1)
    with pytest.raises(ItemNotEquippable):
        toggle_equipment(player, "small_potion")
    assert count_item(player, "small_potion") == 1


def test_equip_missing_item(player):
    with pytest.raises(ItemNotFound):
        toggle_equipment(player, "iron_sword")


def test_placeholder_item_is_key_item():
    item = make_placeholder_item("Glowing Orb")
    other = make_placeholder_item("Glowing Orb")

    assert item.type == ItemType.KEY_ITEM
    assert item.name == "Glowing Orb"
    assert item.id != other.id
    assert not item.is_tradeable
