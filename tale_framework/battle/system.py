"""
Battle system - turn-based combat controller.

Turn flow:
    None -> player -> enemy -> enemy_acting -> player -> ...

The player acts, the turn passes to the enemy, the session schedules
the enemy phase after a short pause, enemies strike in spawn order and
the turn comes back. The end-of-round check runs right after every
player action and every enemy phase.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Optional

from tale_engine.core.actions import ActionType
from tale_engine.core.events import SessionEvent
from tale_framework.battle.actions import (
    ActionResult,
    CombatTurn,
    calculate_damage,
    execute_attack,
    execute_skill,
    execute_thrown_item,
)
from tale_framework.battle.actor import (
    CombatEnemyInstance,
    find_enemy,
    first_living,
    spawn_enemies,
)
from tale_framework.errors import (
    ActionNotAllowed,
    InsufficientMP,
    InvalidTarget,
    ItemNotFound,
    ItemNotUsable,
    NoEffect,
    UnknownSkill,
)
from tale_framework.inventory.manager import find_stack, remove_item
from tale_framework.progression.player import compute_derived_stats, level_up
from tale_framework.progression.skills import Skill
from tale_framework.session.state import LogType

if TYPE_CHECKING:
    from tale_framework.session.reducer import TransitionContext

logger = logging.getLogger(__name__)

ENEMY_PHASE_KEY = "enemy_phase"
SAFE_TRANSITION_KEY = "safe_transition"
VICTORY_ADVANCE_KEY = "victory_advance"
FLEE_ADVANCE_KEY = "flee_advance"


class CombatSystem:
    """
    Resolves combat against the session state in a TransitionContext.

    Player-facing methods raise GameErrors for rejected actions; the
    reducer turns them into the session error string.
    """

    # Entry

    def can_start(self, ctx: TransitionContext) -> bool:
        state = ctx.state
        scene = state.current_scene
        return (
            scene is not None
            and scene.is_combat
            and state.player is not None
            and not state.is_combat_active
            and not state.is_game_over
            and state.pending_safe_scene_transition is None
            and not state.awaiting_post_combat_choice
        )

    def start(self, ctx: TransitionContext) -> None:
        """Spawn the current scene's enemies and give the player the first move."""
        state = ctx.state
        scene = state.current_scene
        stage = state.current_stage
        enemies = spawn_enemies(scene, stage, ctx.rules)

        state.close_shop()
        state.clear_combat()
        if not enemies:
            ctx.log(LogType.SYSTEM, "There is nobody here to fight.")
            state.awaiting_post_combat_choice = True
            return

        state.is_combat_active = True
        state.current_enemies = enemies
        state.combat_turn = CombatTurn.PLAYER
        names = ", ".join(e.name for e in enemies)
        kind = "A powerful foe blocks the way" if scene.is_boss else "Enemies appear"
        ctx.log(LogType.COMBAT, f"{kind}: {names}!")
        ctx.emit(
            SessionEvent.COMBAT_STARTED,
            scene_id=scene.id,
            is_boss=scene.is_boss,
            enemy_ids=[e.combat_id for e in enemies],
        )

    def restart(self, ctx: TransitionContext) -> None:
        """Fight the current combat scene again with fresh enemies."""
        state = ctx.state
        scene = state.current_scene
        if scene is None or not scene.is_combat:
            raise ActionNotAllowed("There is no fight here to restart.")
        if state.is_combat_active or state.is_game_over:
            raise ActionNotAllowed("Cannot restart right now.")
        if state.pending_safe_scene_transition is not None:
            raise ActionNotAllowed("Cannot restart right now.")

        ctx.cancel(FLEE_ADVANCE_KEY)
        ctx.cancel(VICTORY_ADVANCE_KEY)
        state.leave_post_combat()
        ctx.log(LogType.SYSTEM, "You prepare to fight again.")
        self.start(ctx)

    # Player actions

    def require_player_turn(self, ctx: TransitionContext) -> None:
        state = ctx.state
        if not state.is_combat_active:
            raise ActionNotAllowed("You are not in combat.")
        if state.pending_safe_scene_transition is not None:
            raise ActionNotAllowed("The fight is over.")
        if state.combat_turn != CombatTurn.PLAYER:
            raise ActionNotAllowed("It is not your turn.")

    def _living_target(self, ctx: TransitionContext, combat_id: Optional[str]) -> Optional[CombatEnemyInstance]:
        enemy = find_enemy(ctx.state.current_enemies, combat_id)
        if enemy is None or not enemy.is_alive:
            return None
        return enemy

    def attack(self, ctx: TransitionContext, combat_id: Optional[str] = None) -> ActionResult:
        """Basic attack. Without an id, the selected or first living enemy is hit."""
        self.require_player_turn(ctx)
        state = ctx.state

        if combat_id is None:
            target = (
                self._living_target(ctx, state.player_target_id)
                or first_living(state.current_enemies)
            )
        else:
            target = self._living_target(ctx, combat_id)
        if target is None:
            raise InvalidTarget("Choose an enemy that is still standing.")

        result = execute_attack(state.player, target)
        self._report(ctx, result)
        self.end_player_turn(ctx)
        return result

    def cast_skill(
        self,
        ctx: TransitionContext,
        skill_id: str,
        combat_id: Optional[str] = None,
    ) -> Optional[ActionResult]:
        """
        Cast a learned skill.

        A single-target skill without a valid target is armed instead:
        no MP is spent and the player is asked to pick a target.

        Returns:
            The result, or None if the skill was only armed
        """
        self.require_player_turn(ctx)
        state = ctx.state
        player = state.player
        skill = self._learned_skill(ctx, skill_id)

        if player.mp < skill.mp_cost:
            raise InsufficientMP(skill.mp_cost, player.mp)

        target = None
        if skill.needs_enemy_target:
            target = self._living_target(ctx, combat_id or state.player_target_id)
            if target is None:
                state.active_skill_id = skill.id
                state.active_item_id = None
                state.player_target_id = None
                state.combat_message = f"Choose a target for {skill.name}."
                return None

        player.mp -= skill.mp_cost
        result = execute_skill(player, skill, state.current_enemies, target)
        self._report(ctx, result)
        self.end_player_turn(ctx)
        return result

    def use_item(
        self,
        ctx: TransitionContext,
        item_id: str,
        combat_id: Optional[str] = None,
    ) -> Optional[ActionResult]:
        """
        Use a consumable in combat.

        HP restore wins over MP restore, which wins over thrown damage.
        A thrown item without a valid target is armed like a skill.
        """
        self.require_player_turn(ctx)
        state = ctx.state
        player = state.player

        stack = find_stack(player, item_id)
        if stack is None:
            raise ItemNotFound(item_id)
        if not stack.is_consumable or stack.effects is None:
            raise ItemNotUsable(f"{stack.name} cannot be used in combat.")

        effects = stack.effects
        result = ActionResult()
        if effects.hp > 0:
            before = player.hp
            player.hp = min(player.max_hp, player.hp + effects.hp)
            result.healing_done = player.hp - before
            result.message = f"{player.name} uses {stack.name} and recovers {result.healing_done} HP."
        elif effects.mp > 0:
            before = player.mp
            player.mp = min(player.max_mp, player.mp + effects.mp)
            result.mp_restored = player.mp - before
            result.message = f"{player.name} uses {stack.name} and recovers {result.mp_restored} MP."
        elif effects.attack > 0:
            target = self._living_target(ctx, combat_id or state.player_target_id)
            if target is None:
                state.active_item_id = stack.id
                state.active_skill_id = None
                state.player_target_id = None
                state.combat_message = f"Choose a target for {stack.name}."
                return None
            result = execute_thrown_item(player, stack.name, effects.attack, target)
        else:
            raise NoEffect(f"{stack.name} has no effect in combat.")

        remove_item(player, item_id, 1)
        self._report(ctx, result)
        self.end_player_turn(ctx)
        return result

    def flee(self, ctx: TransitionContext) -> bool:
        """
        Try to run away. Boss fights cannot be fled.

        Returns:
            True if the player escaped
        """
        self.require_player_turn(ctx)
        state = ctx.state
        scene = state.current_scene

        if scene.is_boss:
            state.combat_message = "There is no escape from this fight!"
            ctx.log(LogType.COMBAT, "There is no escape from this fight!")
            return False

        if ctx.rng.random() >= ctx.rules.flee_chance:
            ctx.log(LogType.COMBAT, f"{state.player.name} failed to escape!")
            self.end_player_turn(ctx)
            return False

        ctx.log(LogType.COMBAT, f"{state.player.name} escaped safely.")
        state.clear_combat()
        state.awaiting_post_combat_choice = True
        state.fled_last_combat = True
        ctx.emit(SessionEvent.COMBAT_ENDED, scene_id=scene.id, outcome="fled")
        if scene.next_scene_id:
            ctx.schedule(
                ctx.config.flee_advance_delay,
                ActionType.FLEE_ADVANCE,
                key=FLEE_ADVANCE_KEY,
                scene_id=scene.id,
            )
        return True

    def set_target(self, ctx: TransitionContext, combat_id: Optional[str]) -> None:
        """
        Select an enemy. An armed skill or item fires at it right away.
        """
        state = ctx.state
        if not state.is_combat_active:
            raise ActionNotAllowed("You are not in combat.")
        if combat_id is None:
            state.player_target_id = None
            return

        target = self._living_target(ctx, combat_id)
        if target is None:
            raise InvalidTarget("Choose an enemy that is still standing.")
        state.player_target_id = target.combat_id

        if state.active_skill_id is not None:
            self.cast_skill(ctx, state.active_skill_id, target.combat_id)
        elif state.active_item_id is not None:
            self.use_item(ctx, state.active_item_id, target.combat_id)

    def set_active_skill(self, ctx: TransitionContext, skill_id: Optional[str]) -> None:
        state = ctx.state
        if not state.is_combat_active:
            raise ActionNotAllowed("You are not in combat.")
        state.player_target_id = None
        state.active_item_id = None
        if skill_id is None:
            state.active_skill_id = None
            state.combat_message = None
            return
        skill = self._learned_skill(ctx, skill_id)
        state.active_skill_id = skill.id
        if skill.needs_enemy_target:
            state.combat_message = f"Choose a target for {skill.name}."

    def _learned_skill(self, ctx: TransitionContext, skill_id: str) -> Skill:
        skill = ctx.catalog.get_skill(skill_id)
        if skill is None:
            raise UnknownSkill(skill_id)
        if not ctx.state.player.knows_skill(skill_id):
            raise ActionNotAllowed(f"You have not learned {skill.name}.")
        return skill

    def _report(self, ctx: TransitionContext, result: ActionResult) -> None:
        state = ctx.state
        ctx.log(LogType.COMBAT, result.message)
        for combat_id in result.defeated:
            enemy = find_enemy(state.current_enemies, combat_id)
            ctx.log(LogType.COMBAT, f"{enemy.name} is defeated!")
        state.combat_message = result.message

    def end_player_turn(self, ctx: TransitionContext) -> None:
        state = ctx.state
        state.combat_turn = CombatTurn.ENEMY
        state.clear_selection()
        self.check_combat_end(ctx)

    # Enemy phase

    def begin_enemy_phase(self, ctx: TransitionContext) -> None:
        """Mark enemies as acting and schedule their strikes."""
        state = ctx.state
        state.combat_turn = CombatTurn.ENEMY_ACTING
        delay = (
            ctx.config.delegated_enemy_turn_delay
            if state.is_delegation_active
            else ctx.config.enemy_turn_delay
        )
        ctx.schedule(delay, ActionType.RESOLVE_ENEMY_PHASE, key=ENEMY_PHASE_KEY)

    def resolve_enemy_phase(self, ctx: TransitionContext) -> None:
        """Every living enemy strikes in spawn order until the player falls."""
        state = ctx.state
        if (
            not state.is_combat_active
            or state.combat_turn != CombatTurn.ENEMY_ACTING
            or state.pending_safe_scene_transition is not None
        ):
            return

        player = state.player
        for enemy in state.current_enemies:
            if not enemy.is_alive:
                continue
            damage = calculate_damage(enemy.attack, player.defense)
            player.hp = max(0, player.hp - damage)
            ctx.log(LogType.COMBAT, f"{enemy.name} attacks {player.name} for {damage} damage.")
            if player.hp <= 0:
                break

        state.combat_turn = CombatTurn.PLAYER
        state.combat_message = None
        self.check_combat_end(ctx)

    # End of round

    def check_combat_end(self, ctx: TransitionContext) -> None:
        state = ctx.state
        if not state.is_combat_active or state.pending_safe_scene_transition is not None:
            return
        if state.player.hp <= 0:
            self._defeat(ctx)
        elif not state.living_enemies:
            self._victory(ctx)

    def _defeat(self, ctx: TransitionContext) -> None:
        state = ctx.state
        scene = state.current_scene
        player = state.player
        ctx.log(LogType.COMBAT, f"{player.name} has fallen...")
        ctx.emit(SessionEvent.COMBAT_ENDED, scene_id=scene.id, outcome="defeat")

        safe_scene_id = self.find_safe_scene_id(ctx)
        if safe_scene_id is None:
            state.clear_combat()
            state.is_game_over = True
            ctx.log(LogType.SYSTEM, "There is nowhere left to retreat to. Game over.")
            ctx.emit(SessionEvent.GAME_OVER, scene_id=scene.id)
            return

        rules = ctx.rules
        lost_gold = int(player.gold * rules.defeat_gold_penalty)
        player.gold -= lost_gold
        player.hp = max(1, int(player.max_hp * rules.defeat_hp_ratio))
        state.combat_turn = None
        state.clear_selection()
        state.pending_safe_scene_transition = safe_scene_id
        ctx.log(
            LogType.SYSTEM,
            f"You are dragged back to safety. Lost {lost_gold} gold.",
        )
        ctx.schedule(
            ctx.config.safe_transition_delay,
            ActionType.SAFE_TRANSITION,
            key=SAFE_TRANSITION_KEY,
            scene_id=safe_scene_id,
        )

    def find_safe_scene_id(self, ctx: TransitionContext) -> Optional[str]:
        """Last visited town, else the first town, else the first non-combat scene."""
        state = ctx.state
        script = state.script
        town_id = state.last_visited_town_scene_id
        if town_id is not None and script.find_scene(town_id) is not None:
            return town_id
        safe = script.find_safe_scene()
        return safe.id if safe is not None else None

    def _victory(self, ctx: TransitionContext) -> None:
        state = ctx.state
        scene = state.current_scene
        reward = ctx.rules.reward_for(scene.is_boss)

        state.clear_combat()
        player = state.player
        player.gold += reward.gold
        player.exp += reward.exp
        ctx.log(LogType.REWARD, f"Victory! Gained {reward.gold} gold and {reward.exp} EXP.")

        result = level_up(player, ctx.catalog.progression, ctx.rules)
        state.player = result.player
        for level in result.levels_gained:
            ctx.log(LogType.SYSTEM, f"Level up! {player.name} is now level {level}.")
            ctx.emit(SessionEvent.LEVEL_UP, level=level)
        for skill_id in result.learned_skills:
            skill = ctx.catalog.get_skill(skill_id)
            ctx.log(LogType.SYSTEM, f"Learned a new skill: {skill.name if skill else skill_id}!")
            ctx.emit(SessionEvent.SKILL_LEARNED, skill_id=skill_id)
        state.player = compute_derived_stats(state.player)

        ctx.emit(SessionEvent.COMBAT_ENDED, scene_id=scene.id, outcome="victory")

        if scene.is_boss:
            stage = state.current_stage
            if scene.next_scene_id is None and stage is not None and state.script.is_last_stage(stage.id):
                state.is_game_over = True
                state.is_game_completed = True
                ctx.log(LogType.SYSTEM, "The story is complete. Thank you for playing!")
                ctx.emit(SessionEvent.GAME_COMPLETED, stage_id=stage.id)
                return
            state.awaiting_post_combat_choice = True
            ctx.schedule(
                ctx.config.victory_advance_delay,
                ActionType.VICTORY_ADVANCE,
                key=VICTORY_ADVANCE_KEY,
                scene_id=scene.id,
            )
        elif not state.is_delegation_active:
            state.awaiting_post_combat_choice = True
