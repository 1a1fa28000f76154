"""
Progression module - character sheet, leveling and skills.
"""

from tale_framework.progression.skills import (
    Skill,
    SkillEffectType,
    SkillTargetType,
    ProgressionTable,
)
from tale_framework.progression.player import (
    PlayerState,
    PlayerEquipment,
    LevelUpResult,
    compute_derived_stats,
    level_up,
    create_player,
)

__all__ = [
    "Skill",
    "SkillEffectType",
    "SkillTargetType",
    "ProgressionTable",
    "PlayerState",
    "PlayerEquipment",
    "LevelUpResult",
    "compute_derived_stats",
    "level_up",
    "create_player",
]
