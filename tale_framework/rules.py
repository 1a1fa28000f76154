"""
Balance rules - tunable numbers shared by progression, economy and combat.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class CombatReward:
    """Fixed reward for winning a fight."""
    gold: int
    exp: int


@dataclass(frozen=True)
class GameRules:
    """
    Balance constants.

    Defaults describe a fresh level 1 adventurer and a modest economy.
    Override by constructing a new instance; nothing reads these as
    mutable globals.
    """

    # Player start
    player_hp: int = 100
    player_mp: int = 50
    player_level: int = 1
    player_exp_to_next_level: int = 100
    player_gold: int = 50
    player_attack: int = 10
    player_defense: int = 5
    player_speed: int = 5
    player_luck: int = 5
    starter_items: tuple[tuple[str, int], ...] = (("small_potion", 3),)
    starter_weapon: str | None = "basic_sword"
    unknown_location: str = "Unknown"

    # Leveling
    exp_growth_factor: float = 1.5
    level_hp_gain: int = 20
    level_mp_gain: int = 10
    level_attack_gain: int = 2
    level_defense_gain: int = 2
    level_speed_gain: int = 1
    level_luck_gain: int = 1

    # Enemies
    enemy_hp: int = 30
    enemy_attack: int = 8
    enemy_defense: int = 2
    boss_hp_multiplier: float = 3.0
    boss_attack_multiplier: float = 1.5
    boss_defense_multiplier: float = 1.5

    # Combat
    normal_reward: CombatReward = field(default_factory=lambda: CombatReward(gold=10, exp=20))
    boss_reward: CombatReward = field(default_factory=lambda: CombatReward(gold=100, exp=150))
    flee_chance: float = 0.5
    defeat_hp_ratio: float = 0.1
    defeat_gold_penalty: float = 0.2

    # Economy
    buy_multiplier: float = 1.5

    def reward_for(self, is_boss: bool) -> CombatReward:
        return self.boss_reward if is_boss else self.normal_reward


DEFAULT_RULES = GameRules()
