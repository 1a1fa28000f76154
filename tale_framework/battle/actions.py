"""
Battle actions - damage, skills and thrown items.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from tale_framework.battle.actor import CombatEnemyInstance
from tale_framework.progression.player import PlayerState
from tale_framework.progression.skills import Skill, SkillEffectType, SkillTargetType


class CombatTurn(str, Enum):
    """Whose move it is. None on the session means no combat."""
    PLAYER = "player"
    ENEMY = "enemy"
    ENEMY_ACTING = "enemy_acting"


@dataclass
class ActionResult:
    """Result of executing a battle action."""
    success: bool = True
    damage_dealt: dict[str, int] = field(default_factory=dict)  # combat_id -> damage
    defeated: list[str] = field(default_factory=list)  # combat_ids
    healing_done: int = 0
    mp_restored: int = 0
    mp_cost: int = 0
    modelled: bool = True
    message: str = ""


def calculate_damage(power: int, defense: int) -> int:
    """Every hit deals at least 1."""
    return max(1, power - defense)


def strike(enemy: CombatEnemyInstance, power: int, result: ActionResult) -> int:
    """Hit one enemy and record it on the result."""
    damage = calculate_damage(power, enemy.defense)
    enemy.take_damage(damage)
    result.damage_dealt[enemy.combat_id] = damage
    if enemy.is_defeated:
        result.defeated.append(enemy.combat_id)
    return damage


def execute_attack(player: PlayerState, enemy: CombatEnemyInstance) -> ActionResult:
    """Basic weapon attack."""
    result = ActionResult()
    damage = strike(enemy, player.attack, result)
    result.message = f"{player.name} attacks {enemy.name} for {damage} damage."
    return result


def execute_skill(
    player: PlayerState,
    skill: Skill,
    enemies: list[CombatEnemyInstance],
    target: CombatEnemyInstance | None = None,
) -> ActionResult:
    """
    Resolve a skill whose MP has already been paid.

    Offensive skills hit for effect_value plus the player's attack.
    Buffs and debuffs have no numeric effect and are reported as such.
    """
    result = ActionResult(mp_cost=skill.mp_cost)
    effect = skill.effect_type

    if effect == SkillEffectType.DAMAGE_HP and skill.target_type in (
        SkillTargetType.ENEMY_SINGLE, SkillTargetType.ENEMY_ALL,
    ):
        power = skill.effect_value + player.attack
        if skill.target_type == SkillTargetType.ENEMY_ALL:
            victims = [e for e in enemies if e.is_alive]
        else:
            victims = [target] if target is not None else []
        for enemy in victims:
            strike(enemy, power, result)
        hits = ", ".join(
            f"{e.name} ({result.damage_dealt[e.combat_id]})" for e in victims
        )
        result.message = f"{player.name} uses {skill.name}! Hits: {hits}."

    elif effect == SkillEffectType.HEAL_HP:
        before = player.hp
        player.hp = min(player.max_hp, player.hp + skill.effect_value)
        result.healing_done = player.hp - before
        result.message = f"{player.name} uses {skill.name} and recovers {result.healing_done} HP."

    elif effect == SkillEffectType.HEAL_MP:
        before = player.mp
        player.mp = min(player.max_mp, player.mp + skill.effect_value)
        result.mp_restored = player.mp - before
        result.message = f"{player.name} uses {skill.name} and recovers {result.mp_restored} MP."

    elif effect.is_stat_modifier:
        result.modelled = False
        result.message = f"{player.name} uses {skill.name}. Its {effect.value} effect is not modelled yet."

    else:
        result.success = False
        result.message = f"{player.name} uses {skill.name}, but nothing happened."

    return result


def execute_thrown_item(
    player: PlayerState,
    item_name: str,
    power: int,
    enemy: CombatEnemyInstance,
) -> ActionResult:
    """Offensive consumable against one enemy."""
    result = ActionResult()
    damage = strike(enemy, power, result)
    result.message = f"{player.name} throws {item_name} at {enemy.name} for {damage} damage."
    return result
