"""
Skill definitions.

Skills are catalog entries; the player only owns their ids.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import Field

from tale_engine.core.component import Component


class SkillEffectType(str, Enum):
    DAMAGE_HP = "damage_hp"
    HEAL_HP = "heal_hp"
    DAMAGE_MP = "damage_mp"
    HEAL_MP = "heal_mp"
    BUFF_ATTACK = "buff_attack"
    DEBUFF_ATTACK = "debuff_attack"
    BUFF_DEFENSE = "buff_defense"
    DEBUFF_DEFENSE = "debuff_defense"
    ETC = "etc"

    @property
    def is_stat_modifier(self) -> bool:
        """Buffs and debuffs: logged, not numerically modelled."""
        return self in (
            SkillEffectType.BUFF_ATTACK,
            SkillEffectType.DEBUFF_ATTACK,
            SkillEffectType.BUFF_DEFENSE,
            SkillEffectType.DEBUFF_DEFENSE,
        )


class SkillTargetType(str, Enum):
    ENEMY_SINGLE = "enemy_single"
    ENEMY_ALL = "enemy_all"
    SELF = "self"
    ALLY_SINGLE = "ally_single"
    NONE = "none"


class Skill(Component):
    """Static data for a skill."""
    id: str
    name: str
    description: str = ""
    mp_cost: int = 0
    effect_value: int = 0
    effect_turns: Optional[int] = None
    effect_type: SkillEffectType = SkillEffectType.ETC
    target_type: SkillTargetType = SkillTargetType.NONE
    icon: Optional[str] = None

    @property
    def needs_enemy_target(self) -> bool:
        return self.target_type == SkillTargetType.ENEMY_SINGLE


class ProgressionTable(Component):
    """
    Skill unlocks for the player.

    Attributes:
        default_skills: Known from level 1
        skills_by_level: Level reached -> skill ids learned on reaching it
    """
    id: str = "player"
    default_skills: list[str] = Field(default_factory=list)
    skills_by_level: dict[int, list[str]] = Field(default_factory=dict)

    def skills_for_level(self, level: int) -> list[str]:
        return list(self.skills_by_level.get(level, []))
