"""
Session configuration.
"""

from __future__ import annotations

from typing import Optional

from tale_framework.rules import DEFAULT_RULES, GameRules


class SessionConfig:
    """
    Session configuration.

    Attributes:
        enemy_turn_delay: Pause before enemies act
        delegated_enemy_turn_delay: Same, while auto-battle is on
        safe_transition_delay: Pause before moving a defeated player to safety
        victory_advance_delay: Pause before leaving a won boss fight
        flee_advance_delay: Pause before moving on after fleeing
        delegation_interval: Cadence of automatic attacks
        log_limit: Newest log entries kept
        seed: RNG seed, None for nondeterministic
        rules: Balance constants
    """

    def __init__(
        self,
        enemy_turn_delay: float = 1.0,
        delegated_enemy_turn_delay: float = 0.5,
        safe_transition_delay: float = 1.5,
        victory_advance_delay: float = 1.5,
        flee_advance_delay: float = 1.0,
        delegation_interval: float = 1.5,
        log_limit: int = 100,
        seed: Optional[int] = None,
        rules: Optional[GameRules] = None,
    ):
        self.enemy_turn_delay = enemy_turn_delay
        self.delegated_enemy_turn_delay = delegated_enemy_turn_delay
        self.safe_transition_delay = safe_transition_delay
        self.victory_advance_delay = victory_advance_delay
        self.flee_advance_delay = flee_advance_delay
        self.delegation_interval = delegation_interval
        self.log_limit = log_limit
        self.seed = seed
        self.rules = rules or DEFAULT_RULES
