"""
Delegation - automatic basic attacks while auto-battle is on.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from tale_engine.core.actions import ActionType
from tale_engine.core.events import UIEvent
from tale_framework.battle.actions import CombatTurn
from tale_framework.battle.actor import first_living
from tale_framework.session.state import LogType

if TYPE_CHECKING:
    from tale_framework.battle.system import CombatSystem
    from tale_framework.session.reducer import TransitionContext
    from tale_framework.session.state import SessionState

logger = logging.getLogger(__name__)

DELEGATION_KEY = "delegation"


class DelegationController:
    """
    Keeps one delegated attack armed while auto-play is allowed.

    Anything that blocks auto-play (disabled mode, open modal or shop,
    pending retreat, no combat) cancels the armed attack; combat state
    itself is left alone.
    """

    def __init__(self, combat: CombatSystem):
        self.combat = combat

    def is_allowed(self, state: SessionState) -> bool:
        return (
            state.is_delegation_active
            and state.is_combat_active
            and state.pending_safe_scene_transition is None
            and not state.is_ui_blocking
            and not state.is_shop_open
            and state.player is not None
            and state.player.hp > 0
        )

    def toggle(self, ctx: TransitionContext) -> None:
        state = ctx.state
        state.is_delegation_active = not state.is_delegation_active
        status = "on" if state.is_delegation_active else "off"
        ctx.log(LogType.SYSTEM, f"Auto-battle {status}.")
        ctx.emit(UIEvent.DELEGATION_TOGGLED, active=state.is_delegation_active)

    def evaluate(self, ctx: TransitionContext) -> None:
        """Re-arm the next delegated attack, or cancel it."""
        if self.is_allowed(ctx.state):
            ctx.schedule(
                ctx.config.delegation_interval,
                ActionType.DELEGATED_ATTACK,
                key=DELEGATION_KEY,
            )
        else:
            ctx.cancel(DELEGATION_KEY)

    def act(self, ctx: TransitionContext) -> None:
        """Attack the first living enemy, if it is still the player's move."""
        state = ctx.state
        if not self.is_allowed(state) or state.combat_turn != CombatTurn.PLAYER:
            return
        target = first_living(state.current_enemies)
        if target is None:
            return
        self.combat.attack(ctx, target.combat_id)
