"""
Session state - the single aggregate every action transforms.
"""

from __future__ import annotations

import copy
from enum import Enum
from typing import Optional

from pydantic import Field

from tale_engine.core.component import Component
from tale_framework.battle.actions import CombatTurn
from tale_framework.battle.actor import CombatEnemyInstance
from tale_framework.content.models import Scene, Script, Stage
from tale_framework.inventory.items import GameItem
from tale_framework.progression.player import PlayerState


class LogType(str, Enum):
    NARRATION = "narration"
    DIALOGUE = "dialogue"
    SYSTEM = "system"
    COMBAT = "combat"
    REWARD = "reward"
    ERROR = "error"
    CHOICE = "choice"


class GameLogEntry(Component):
    """One line of the in-game log."""
    id: int
    type: LogType
    message: str
    speaker: Optional[str] = None


class SessionState(Component):
    """
    Everything needed to resume a game.

    The script is shared between snapshots instead of copied; it is
    frozen, so sharing is safe.
    """
    script: Optional[Script] = None
    current_stage_id: Optional[str] = None
    current_scene_id: Optional[str] = None
    player: Optional[PlayerState] = None

    log: list[GameLogEntry] = Field(default_factory=list)
    log_counter: int = 0

    # Combat
    is_combat_active: bool = False
    current_enemies: list[CombatEnemyInstance] = Field(default_factory=list)
    combat_turn: Optional[CombatTurn] = None
    player_target_id: Optional[str] = None
    active_skill_id: Optional[str] = None
    active_item_id: Optional[str] = None
    combat_message: Optional[str] = None
    pending_safe_scene_transition: Optional[str] = None
    awaiting_post_combat_choice: bool = False
    fled_last_combat: bool = False
    last_visited_town_scene_id: Optional[str] = None

    # Terminal
    is_game_over: bool = False
    is_game_completed: bool = False

    # Modes and panels
    is_delegation_active: bool = False
    is_ui_blocking: bool = False
    current_shop_id: Optional[str] = None
    current_shop_items: list[GameItem] = Field(default_factory=list)
    shop_error: Optional[str] = None

    error: Optional[str] = None

    def clone(self) -> SessionState:
        memo = {id(self.script): self.script} if self.script is not None else {}
        return copy.deepcopy(self, memo)

    @property
    def current_stage(self) -> Optional[Stage]:
        if self.script is None or self.current_stage_id is None:
            return None
        return self.script.get_stage(self.current_stage_id)

    @property
    def current_scene(self) -> Optional[Scene]:
        stage = self.current_stage
        if stage is None or self.current_scene_id is None:
            return None
        return stage.get_scene(self.current_scene_id)

    @property
    def is_shop_open(self) -> bool:
        return self.current_shop_id is not None

    @property
    def living_enemies(self) -> list[CombatEnemyInstance]:
        return [e for e in self.current_enemies if e.is_alive]

    def close_shop(self) -> None:
        self.current_shop_id = None
        self.current_shop_items = []
        self.shop_error = None

    def clear_combat(self) -> None:
        """Drop every combat-transient field."""
        self.is_combat_active = False
        self.current_enemies = []
        self.combat_turn = None
        self.clear_selection()
        self.combat_message = None

    def leave_post_combat(self) -> None:
        self.awaiting_post_combat_choice = False
        self.fled_last_combat = False

    def clear_selection(self) -> None:
        self.player_target_id = None
        self.active_skill_id = None
        self.active_item_id = None
