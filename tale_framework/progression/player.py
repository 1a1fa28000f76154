"""
Player progression - base stats, derived stats, leveling.

Derived stats (attack, defense, speed, luck, max_hp, max_mp) are never
edited directly. They are rebuilt by compute_derived_stats() from the
base values and whatever is equipped, and every change to either must
be followed by a recompute.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterator, Optional

from pydantic import Field

from tale_engine.core.component import Component
from tale_framework.inventory.items import EquipmentSlot, GameItem, ItemEffects
from tale_framework.progression.skills import ProgressionTable
from tale_framework.rules import DEFAULT_RULES, GameRules

logger = logging.getLogger(__name__)


class PlayerEquipment(Component):
    """One optional item per slot. A worn item is not in the inventory."""
    weapon: Optional[GameItem] = None
    armor: Optional[GameItem] = None
    accessory: Optional[GameItem] = None

    def get(self, slot: EquipmentSlot) -> Optional[GameItem]:
        return getattr(self, slot.value)

    def set(self, slot: EquipmentSlot, item: Optional[GameItem]) -> None:
        setattr(self, slot.value, item)

    def worn(self) -> Iterator[GameItem]:
        """Equipped items in slot order."""
        for slot in EquipmentSlot:
            item = self.get(slot)
            if item is not None:
                yield item

    def total_bonus(self) -> ItemEffects:
        total = ItemEffects()
        for item in self.worn():
            if item.effects is None:
                continue
            for name in ItemEffects.model_fields:
                setattr(total, name, getattr(total, name) + getattr(item.effects, name))
        return total


class PlayerState(Component):
    """
    The player's persistent character sheet.

    Attributes:
        base_max_hp: Max HP from level growth alone
        max_hp: base_max_hp plus equipment bonuses (derived)
        base_attack: Attack from level growth alone
        attack: base_attack plus equipment bonuses (derived)
        learned_skill_ids: Known skills, no duplicates
    """
    name: str
    level: int = 1
    exp: int = 0
    exp_to_next_level: int = 100

    hp: int = 100
    max_hp: int = 100
    base_max_hp: int = 100
    mp: int = 50
    max_mp: int = 50
    base_max_mp: int = 50

    base_attack: int = 10
    base_defense: int = 5
    base_speed: int = 5
    base_luck: int = 5
    attack: int = 10
    defense: int = 5
    speed: int = 5
    luck: int = 5

    gold: int = 0
    inventory: list[GameItem] = Field(default_factory=list)
    equipment: PlayerEquipment = Field(default_factory=PlayerEquipment)
    current_location: str = ""
    learned_skill_ids: list[str] = Field(default_factory=list)

    @property
    def is_alive(self) -> bool:
        return self.hp > 0

    def knows_skill(self, skill_id: str) -> bool:
        return skill_id in self.learned_skill_ids

    def learn_skill(self, skill_id: str) -> bool:
        """Add a skill id. Returns False if it was already known."""
        if skill_id in self.learned_skill_ids:
            return False
        self.learned_skill_ids.append(skill_id)
        return True


def compute_derived_stats(player: PlayerState) -> PlayerState:
    """
    Rebuild derived stats from base stats and equipment.

    Current hp/mp are capped to the new maxima but never raised.
    Returns a new PlayerState; the input is not modified.
    """
    result = player.clone()
    bonus = player.equipment.total_bonus()

    result.attack = player.base_attack + bonus.attack
    result.defense = player.base_defense + bonus.defense
    result.speed = player.base_speed + bonus.speed
    result.luck = player.base_luck + bonus.luck
    result.max_hp = player.base_max_hp + bonus.hp
    result.max_mp = player.base_max_mp + bonus.mp
    result.hp = min(player.hp, result.max_hp)
    result.mp = min(player.mp, result.max_mp)
    return result


@dataclass
class LevelUpResult:
    """Outcome of applying accumulated experience."""
    player: PlayerState
    levels_gained: list[int] = field(default_factory=list)
    learned_skills: list[str] = field(default_factory=list)

    @property
    def leveled(self) -> bool:
        return bool(self.levels_gained)


def level_up(
    player: PlayerState,
    table: Optional[ProgressionTable] = None,
    rules: GameRules = DEFAULT_RULES,
) -> LevelUpResult:
    """
    Consume experience thresholds while exp allows.

    Each level consumes the current threshold, grows the next one, adds
    the per-level gains and learns that level's skills. If at least one
    level was gained, hp and mp are restored to the recomputed maxima.

    Args:
        player: Player to level (not modified)
        table: Skill unlocks per level
        rules: Growth constants

    Returns:
        LevelUpResult with the new player and what changed
    """
    result = LevelUpResult(player=player.clone())
    current = result.player

    while current.exp_to_next_level > 0 and current.exp >= current.exp_to_next_level:
        current.exp -= current.exp_to_next_level
        current.exp_to_next_level = int(current.exp_to_next_level * rules.exp_growth_factor)
        current.level += 1

        current.base_max_hp += rules.level_hp_gain
        current.base_max_mp += rules.level_mp_gain
        current.base_attack += rules.level_attack_gain
        current.base_defense += rules.level_defense_gain
        current.base_speed += rules.level_speed_gain
        current.base_luck += rules.level_luck_gain
        result.levels_gained.append(current.level)

        if table is not None:
            for skill_id in table.skills_for_level(current.level):
                if current.learn_skill(skill_id):
                    result.learned_skills.append(skill_id)

    if result.leveled:
        current = compute_derived_stats(current)
        current.hp = current.max_hp
        current.mp = current.max_mp
        result.player = current
        logger.debug(f"{current.name} reached level {current.level}")
    return result


def create_player(
    name: str,
    location: str,
    rules: GameRules = DEFAULT_RULES,
    table: Optional[ProgressionTable] = None,
) -> PlayerState:
    """Fresh level 1 player with default stats and skills (no items)."""
    player = PlayerState(
        name=name,
        level=rules.player_level,
        exp=0,
        exp_to_next_level=rules.player_exp_to_next_level,
        hp=rules.player_hp,
        max_hp=rules.player_hp,
        base_max_hp=rules.player_hp,
        mp=rules.player_mp,
        max_mp=rules.player_mp,
        base_max_mp=rules.player_mp,
        base_attack=rules.player_attack,
        base_defense=rules.player_defense,
        base_speed=rules.player_speed,
        base_luck=rules.player_luck,
        gold=rules.player_gold,
        current_location=location,
    )
    if table is not None:
        for skill_id in table.default_skills:
            player.learn_skill(skill_id)
    return compute_derived_stats(player)
