"""
Battle actors - live enemy instances.
"""

from __future__ import annotations

import logging
import uuid
from typing import Optional

from tale_engine.core.component import Component
from tale_framework.content.models import Character, CharacterType, Scene, Stage
from tale_framework.rules import DEFAULT_RULES, GameRules

logger = logging.getLogger(__name__)


class CombatEnemyInstance(Component):
    """
    A monster template projected into one fight.

    Each spawn gets a fresh combat_id, so restarting a scene never
    aliases instances from the previous attempt.
    """
    combat_id: str
    character_id: str
    name: str
    type: CharacterType = CharacterType.MONSTER_NORMAL
    description: str = ""
    max_hp: int
    current_hp: int
    attack: int
    defense: int

    @property
    def is_alive(self) -> bool:
        return self.current_hp > 0

    @property
    def is_defeated(self) -> bool:
        return self.current_hp <= 0

    def take_damage(self, amount: int) -> int:
        """
        Apply damage, clamping HP at zero.

        Returns:
            HP actually lost
        """
        before = self.current_hp
        self.current_hp = max(0, self.current_hp - amount)
        return before - self.current_hp


def create_enemy_instance(
    character: Character,
    index: int,
    is_boss_fight: bool,
    rules: GameRules = DEFAULT_RULES,
) -> CombatEnemyInstance:
    """Create a live instance, filling missing stats from role defaults."""
    if is_boss_fight:
        default_hp = int(rules.enemy_hp * rules.boss_hp_multiplier)
        default_attack = int(rules.enemy_attack * rules.boss_attack_multiplier)
        default_defense = int(rules.enemy_defense * rules.boss_defense_multiplier)
    else:
        default_hp = rules.enemy_hp
        default_attack = rules.enemy_attack
        default_defense = rules.enemy_defense

    max_hp = character.hp if character.hp is not None else default_hp
    return CombatEnemyInstance(
        combat_id=f"{character.id}_{index}_{uuid.uuid4().hex}",
        character_id=character.id,
        name=character.name,
        type=character.type,
        description=character.description,
        max_hp=max_hp,
        current_hp=max_hp,
        attack=character.attack if character.attack is not None else default_attack,
        defense=character.defense if character.defense is not None else default_defense,
    )


def spawn_enemies(
    scene: Scene,
    stage: Stage,
    rules: GameRules = DEFAULT_RULES,
) -> list[CombatEnemyInstance]:
    """
    Spawn one instance per enemy id of a combat scene, in listed order.

    Ids that do not resolve to a character of the stage are skipped.
    """
    enemy_ids = scene.combat_details.enemy_character_ids if scene.combat_details else []
    enemies = []
    for index, character_id in enumerate(enemy_ids):
        character = stage.get_character(character_id)
        if character is None:
            logger.warning(f"Scene '{scene.id}' references unknown enemy '{character_id}'")
            continue
        enemies.append(create_enemy_instance(character, index, scene.is_boss, rules))
    return enemies


def first_living(enemies: list[CombatEnemyInstance]) -> Optional[CombatEnemyInstance]:
    return next((e for e in enemies if e.is_alive), None)


def find_enemy(enemies: list[CombatEnemyInstance], combat_id: Optional[str]) -> Optional[CombatEnemyInstance]:
    if combat_id is None:
        return None
    return next((e for e in enemies if e.combat_id == combat_id), None)
