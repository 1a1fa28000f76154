"""
Battle module - turn-based combat.

Provides:
- Live enemy instances spawned from scene templates
- Damage, skill and item resolution
- The combat turn machine and end-of-round checks
- Delegated (auto-play) attacks
"""

from tale_framework.battle.actor import (
    CombatEnemyInstance,
    create_enemy_instance,
    spawn_enemies,
    first_living,
    find_enemy,
)
from tale_framework.battle.actions import (
    CombatTurn,
    ActionResult,
    calculate_damage,
    execute_attack,
    execute_skill,
    execute_thrown_item,
)

__all__ = [
    # Actors
    "CombatEnemyInstance",
    "create_enemy_instance",
    "spawn_enemies",
    "first_living",
    "find_enemy",
    # Actions
    "CombatTurn",
    "ActionResult",
    "calculate_damage",
    "execute_attack",
    "execute_skill",
    "execute_thrown_item",
]
