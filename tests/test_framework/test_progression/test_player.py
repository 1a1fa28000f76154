import pytest

from tale_framework.inventory.items import EquipmentSlot
from tale_framework.inventory.manager import add_item, toggle_equipment
from tale_framework.progression.player import compute_derived_stats, create_player, level_up
from tale_framework.progression.skills import ProgressionTable
from tale_framework.rules import GameRules


def test_create_player_defaults(player):
    assert player.level == 1
    assert player.hp == player.max_hp == 100
    assert player.mp == player.max_mp == 50
    assert player.attack == 10
    assert player.gold == 50
    assert player.learned_skill_ids == ["power_strike", "heal"]
    assert player.current_location == "Willow Village"


def test_derived_stats_include_equipment(player, catalog):
    add_item(player, catalog.get_item("leather_armor"), 1)
    add_item(player, catalog.get_item("lucky_charm"), 1)
    toggle_equipment(player, "leather_armor")
    toggle_equipment(player, "lucky_charm")

    derived = compute_derived_stats(player)

    assert derived.defense == player.base_defense + 5
    assert derived.max_hp == player.base_max_hp + 10
    assert derived.luck == player.base_luck + 5
    assert derived.speed == player.base_speed + 2
    assert derived.attack == player.base_attack


def test_derived_stats_is_pure_and_idempotent(player, catalog):
    add_item(player, catalog.get_item("leather_armor"), 1)
    toggle_equipment(player, "leather_armor")
    snapshot = player.model_dump()

    once = compute_derived_stats(player)
    twice = compute_derived_stats(once)

    assert once == twice
    assert player.model_dump() == snapshot


def test_derived_stats_clamp_current_values(player, catalog):
    add_item(player, catalog.get_item("leather_armor"), 1)
    toggle_equipment(player, "leather_armor")
    player = compute_derived_stats(player)
    player.hp = player.max_hp

    toggle_equipment(player, "leather_armor")
    player = compute_derived_stats(player)

    assert player.max_hp == 100
    assert player.hp == 100


def test_derived_stats_never_raise_current_values(player):
    player.hp = 40
    player.mp = 5
    derived = compute_derived_stats(player)
    assert derived.hp == 40
    assert derived.mp == 5


def test_level_up_noop_below_threshold(player, catalog):
    player.exp = 99
    result = level_up(player, catalog.progression)

    assert not result.leveled
    assert result.player == player
    assert result.player is not player


def test_level_up_single_level(player, catalog):
    player.exp = 120
    player.hp = 10

    result = level_up(player, catalog.progression)
    hero = result.player

    assert result.levels_gained == [2]
    assert result.learned_skills == ["whirlwind"]
    assert hero.level == 2
    assert hero.exp == 20
    assert hero.exp_to_next_level == 150
    assert hero.max_hp == 120
    assert hero.max_mp == 60
    assert hero.base_attack == 12
    assert hero.hp == hero.max_hp
    assert hero.mp == hero.max_mp


def test_level_up_two_thresholds(player, catalog):
    player.exp = 100 + 150

    result = level_up(player, catalog.progression)

    assert result.levels_gained == [2, 3]
    assert result.learned_skills == ["whirlwind", "focus"]
    assert result.player.level == 3
    assert result.player.exp == 0
    ids = result.player.learned_skill_ids
    assert len(ids) == len(set(ids))


def test_level_up_does_not_relearn_known_skills(player):
    table = ProgressionTable(skills_by_level={2: ["heal", "whirlwind"]})
    player.exp = 100

    result = level_up(player, table)

    assert result.learned_skills == ["whirlwind"]
    assert result.player.learned_skill_ids.count("heal") == 1


def test_level_up_keeps_equipment_bonus(player, catalog):
    add_item(player, catalog.get_item("iron_sword"), 1)
    toggle_equipment(player, "iron_sword")
    player = compute_derived_stats(player)
    player.exp = 100

    hero = level_up(player, catalog.progression).player

    assert hero.equipment.get(EquipmentSlot.WEAPON).id == "iron_sword"
    assert hero.attack == hero.base_attack + 10


def test_custom_rules():
    rules = GameRules(player_hp=60, player_gold=0, exp_growth_factor=2.0)
    hero = create_player("Solo", "Nowhere", rules)
    hero.exp = 100

    leveled = level_up(hero, None, rules).player

    assert hero.max_hp == 60
    assert hero.gold == 0
    assert leveled.exp_to_next_level == 200


@pytest.mark.parametrize("exp,level", [(0, 1), (99, 1), (100, 2), (249, 2), (250, 3), (475, 4)])
def test_level_for_exp(player, exp, level):
    player.exp = exp
    assert level_up(player).player.level == level
