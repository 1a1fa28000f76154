"""
Action handlers.

One function per ActionType. Each receives the TransitionContext and
the action, mutates ctx.state, and raises a GameError to reject the
action as a whole.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from tale_engine.core.actions import Action, ActionType
from tale_engine.core.events import SessionEvent, UIEvent
from tale_framework.battle.actions import CombatTurn
from tale_framework.battle.delegation import DelegationController
from tale_framework.battle.system import (
    FLEE_ADVANCE_KEY,
    SAFE_TRANSITION_KEY,
    VICTORY_ADVANCE_KEY,
    CombatSystem,
)
from tale_framework.content.loader import load_script
from tale_framework.errors import ActionNotAllowed, ItemNotEquippable, UnknownItem
from tale_framework.inventory.manager import add_item, equip_new, toggle_equipment, use_consumable
from tale_framework.progression.player import compute_derived_stats, create_player
from tale_framework.session.state import LogType, SessionState
from tale_framework.shop import economy
from tale_framework.world.navigator import SceneNavigator

if TYPE_CHECKING:
    from tale_framework.session.reducer import Handler, TransitionContext

logger = logging.getLogger(__name__)

combat = CombatSystem()
navigator = SceneNavigator()
delegation = DelegationController(combat)


def _require_field(ctx: TransitionContext) -> None:
    """Reject field actions during combat or after the game ended."""
    state = ctx.state
    if state.player is None:
        raise ActionNotAllowed("No game in progress.")
    if state.is_combat_active:
        raise ActionNotAllowed("Not during combat.")
    if state.is_game_over:
        raise ActionNotAllowed("The game is over.")


# Lifecycle

def handle_load_script(ctx: TransitionContext, action: Action) -> None:
    script = load_script(action.payload["document"])
    rules = ctx.rules
    first_stage = script.stages[0]
    first_scene = first_stage.scenes[0]
    hero = first_stage.find_player()

    location = (
        first_scene.new_location_name
        or script.world_settings.first_key_location()
        or rules.unknown_location
    )
    player = create_player(hero.name, location, rules, ctx.catalog.progression)
    for item_id, quantity in rules.starter_items:
        item = ctx.catalog.get_item(item_id)
        if item is None:
            logger.warning(f"Starter item '{item_id}' missing from catalog")
            continue
        add_item(player, item, quantity)
    if rules.starter_weapon:
        weapon = ctx.catalog.get_item(rules.starter_weapon)
        if weapon is not None:
            equip_new(player, weapon)

    previous = ctx.state
    ctx.replace_state(SessionState(
        script=script,
        current_stage_id=first_stage.id,
        player=compute_derived_stats(player),
        log=previous.log,
        log_counter=previous.log_counter,
    ))
    ctx.log(LogType.SYSTEM, f"'{script.world_settings.title}' begins.")
    ctx.emit(SessionEvent.SCRIPT_LOADED, title=script.world_settings.title)
    logger.info(f"Loaded script '{script.world_settings.title}' ({len(script.stages)} stages)")
    navigator.enter_scene(ctx, first_stage, first_scene)


def _fresh_session(ctx: TransitionContext, message: str) -> None:
    previous = ctx.state
    ctx.replace_state(SessionState(log=previous.log, log_counter=previous.log_counter))
    ctx.log(LogType.SYSTEM, message)
    ctx.emit(SessionEvent.SESSION_RESET)


def handle_reset(ctx: TransitionContext, action: Action) -> None:
    _fresh_session(ctx, "The game has been reset.")


def handle_clear_session(ctx: TransitionContext, action: Action) -> None:
    _fresh_session(ctx, "The session has been cleared.")


def handle_restore_session(ctx: TransitionContext, action: Action) -> None:
    restored: SessionState = action.payload["state"].clone()
    restored.error = None
    ctx.replace_state(restored)
    ctx.log(LogType.SYSTEM, "Game loaded.")

    # Re-arm continuations that were pending when the game was saved
    if restored.combat_turn == CombatTurn.ENEMY_ACTING:
        restored.combat_turn = CombatTurn.ENEMY
    if restored.pending_safe_scene_transition is not None:
        ctx.schedule(
            ctx.config.safe_transition_delay,
            ActionType.SAFE_TRANSITION,
            key=SAFE_TRANSITION_KEY,
            scene_id=restored.pending_safe_scene_transition,
        )
    scene = restored.current_scene
    if scene is None or restored.is_combat_active or not restored.awaiting_post_combat_choice:
        return
    if scene.is_boss:
        ctx.schedule(
            ctx.config.victory_advance_delay,
            ActionType.VICTORY_ADVANCE,
            key=VICTORY_ADVANCE_KEY,
            scene_id=scene.id,
        )
    elif restored.fled_last_combat and scene.next_scene_id:
        ctx.schedule(
            ctx.config.flee_advance_delay,
            ActionType.FLEE_ADVANCE,
            key=FLEE_ADVANCE_KEY,
            scene_id=scene.id,
        )


def handle_report(ctx: TransitionContext, action: Action) -> None:
    message = action.payload["message"]
    if action.payload.get("is_error"):
        ctx.state.error = message
        ctx.log(LogType.ERROR, message)
    else:
        ctx.log(LogType.SYSTEM, message)


# Navigation

def handle_advance_scene(ctx: TransitionContext, action: Action) -> None:
    navigator.advance_to_scene(ctx, action.payload.get("scene_id"))


def handle_make_choice(ctx: TransitionContext, action: Action) -> None:
    navigator.make_choice(ctx, action.payload["choice_id"])


# Field

def handle_use_item(ctx: TransitionContext, action: Action) -> None:
    _require_field(ctx)
    state = ctx.state
    result = use_consumable(state.player, action.payload["item_id"])
    state.player = compute_derived_stats(state.player)

    gains = []
    if result.hp_restored:
        gains.append(f"{result.hp_restored} HP")
    if result.mp_restored:
        gains.append(f"{result.mp_restored} MP")
    restored = " and ".join(gains) if gains else "nothing"
    ctx.log(LogType.SYSTEM, f"Used {result.item.name}, recovered {restored}.")


def handle_toggle_equipment(ctx: TransitionContext, action: Action) -> None:
    _require_field(ctx)
    state = ctx.state
    try:
        result = toggle_equipment(state.player, action.payload["item_id"])
    except ItemNotEquippable as e:
        ctx.log(LogType.SYSTEM, e.message)
        return

    state.player = compute_derived_stats(state.player)
    if not result.equipped:
        ctx.log(LogType.SYSTEM, f"Unequipped {result.item.name}.")
    elif result.replaced is not None:
        ctx.log(LogType.SYSTEM, f"Equipped {result.item.name} (replacing {result.replaced.name}).")
    else:
        ctx.log(LogType.SYSTEM, f"Equipped {result.item.name}.")


def handle_rest(ctx: TransitionContext, action: Action) -> None:
    _require_field(ctx)
    player = ctx.state.player
    player.hp = player.max_hp
    player.mp = player.max_mp
    ctx.log(LogType.SYSTEM, "You rest and recover fully.")


def handle_open_shop(ctx: TransitionContext, action: Action) -> None:
    _require_field(ctx)
    state = ctx.state
    scene_id = action.payload.get("scene_id") or state.current_scene_id
    shop = economy.resolve_catalog(ctx.catalog, scene_id)
    state.current_shop_id = shop.shop_id
    state.current_shop_items = shop.items
    state.shop_error = shop.error
    ctx.emit(UIEvent.SHOP_OPENED, shop_id=shop.shop_id)


def handle_close_shop(ctx: TransitionContext, action: Action) -> None:
    if ctx.state.is_shop_open:
        ctx.state.close_shop()
        ctx.emit(UIEvent.SHOP_CLOSED)


def _require_shop(ctx: TransitionContext) -> None:
    _require_field(ctx)
    if not ctx.state.is_shop_open:
        raise ActionNotAllowed("No shop is open.")


def handle_buy(ctx: TransitionContext, action: Action) -> None:
    _require_shop(ctx)
    state = ctx.state
    item_id = action.payload["item_id"]
    quantity = action.payload.get("quantity", 1)
    item = next((i for i in state.current_shop_items if i.id == item_id), None)
    if item is None:
        raise UnknownItem(item_id)

    cost = economy.buy(state.player, item, quantity, ctx.rules)
    state.player = compute_derived_stats(state.player)
    state.shop_error = None
    ctx.log(LogType.SYSTEM, f"Bought {quantity} x {item.name} for {cost} gold.")


def handle_sell(ctx: TransitionContext, action: Action) -> None:
    _require_shop(ctx)
    state = ctx.state
    item_id = action.payload["item_id"]
    quantity = action.payload.get("quantity", 1)
    held = next((i for i in state.player.inventory if i.id == item_id), None)
    name = held.name if held is not None else item_id

    earned = economy.sell(state.player, item_id, quantity)
    state.player = compute_derived_stats(state.player)
    state.shop_error = None
    ctx.log(LogType.SYSTEM, f"Sold {quantity} x {name} for {earned} gold.")


# Combat

def handle_attack(ctx: TransitionContext, action: Action) -> None:
    combat.attack(ctx, action.payload.get("combat_id"))


def handle_cast_skill(ctx: TransitionContext, action: Action) -> None:
    combat.cast_skill(ctx, action.payload["skill_id"], action.payload.get("combat_id"))


def handle_use_combat_item(ctx: TransitionContext, action: Action) -> None:
    combat.use_item(ctx, action.payload["item_id"], action.payload.get("combat_id"))


def handle_flee(ctx: TransitionContext, action: Action) -> None:
    combat.flee(ctx)


def handle_set_target(ctx: TransitionContext, action: Action) -> None:
    combat.set_target(ctx, action.payload.get("combat_id"))


def handle_set_active_skill(ctx: TransitionContext, action: Action) -> None:
    combat.set_active_skill(ctx, action.payload.get("skill_id"))


def handle_restart_combat(ctx: TransitionContext, action: Action) -> None:
    combat.restart(ctx)


def handle_continue_after_combat(ctx: TransitionContext, action: Action) -> None:
    state = ctx.state
    scene = state.current_scene
    if scene is None or not scene.is_combat or state.is_combat_active:
        raise ActionNotAllowed("There is nothing to continue from.")
    if state.pending_safe_scene_transition is not None:
        raise ActionNotAllowed("Cannot continue right now.")
    ctx.cancel(FLEE_ADVANCE_KEY)
    ctx.cancel(VICTORY_ADVANCE_KEY)
    navigator.advance_to_scene(ctx, scene.next_scene_id)


# Modes

def handle_toggle_delegation(ctx: TransitionContext, action: Action) -> None:
    delegation.toggle(ctx)


def handle_set_ui_blocking(ctx: TransitionContext, action: Action) -> None:
    ctx.state.is_ui_blocking = bool(action.payload.get("blocking"))


# Follow-ups. Each re-checks the state it was scheduled for.

def handle_resolve_enemy_phase(ctx: TransitionContext, action: Action) -> None:
    combat.resolve_enemy_phase(ctx)


def handle_safe_transition(ctx: TransitionContext, action: Action) -> None:
    state = ctx.state
    scene_id = action.payload["scene_id"]
    if state.pending_safe_scene_transition != scene_id:
        return
    state.clear_combat()
    state.pending_safe_scene_transition = None
    navigator.advance_to_scene(ctx, scene_id, any_stage=True)
    ctx.log(LogType.SYSTEM, "You come to your senses somewhere safe.")


def _scheduled_advance(ctx: TransitionContext, action: Action) -> None:
    state = ctx.state
    scene = state.current_scene
    if (
        scene is None
        or scene.id != action.payload["scene_id"]
        or state.is_combat_active
        or state.is_game_over
        or not state.awaiting_post_combat_choice
    ):
        return
    navigator.advance_to_scene(ctx, scene.next_scene_id)


def handle_delegated_attack(ctx: TransitionContext, action: Action) -> None:
    delegation.act(ctx)


def evaluate(ctx: TransitionContext) -> None:
    """
    Arm automatic follow-ups for the state an action left behind.

    - entering a combat scene starts the fight
    - an enemy turn becomes the enemy phase after a pause
    - auto-battle keeps one delegated attack scheduled
    """
    state = ctx.state
    if combat.can_start(ctx):
        combat.start(ctx)

    if (
        state.is_combat_active
        and state.combat_turn == CombatTurn.ENEMY
        and state.pending_safe_scene_transition is None
    ):
        combat.begin_enemy_phase(ctx)

    delegation.evaluate(ctx)


def build_handlers() -> dict[ActionType, Handler]:
    return {
        ActionType.LOAD_SCRIPT: handle_load_script,
        ActionType.RESET: handle_reset,
        ActionType.CLEAR_SESSION: handle_clear_session,
        ActionType.RESTORE_SESSION: handle_restore_session,
        ActionType.REPORT: handle_report,
        ActionType.ADVANCE_SCENE: handle_advance_scene,
        ActionType.MAKE_CHOICE: handle_make_choice,
        ActionType.USE_ITEM: handle_use_item,
        ActionType.TOGGLE_EQUIPMENT: handle_toggle_equipment,
        ActionType.REST: handle_rest,
        ActionType.OPEN_SHOP: handle_open_shop,
        ActionType.CLOSE_SHOP: handle_close_shop,
        ActionType.BUY: handle_buy,
        ActionType.SELL: handle_sell,
        ActionType.ATTACK: handle_attack,
        ActionType.CAST_SKILL: handle_cast_skill,
        ActionType.USE_COMBAT_ITEM: handle_use_combat_item,
        ActionType.FLEE: handle_flee,
        ActionType.SET_TARGET: handle_set_target,
        ActionType.SET_ACTIVE_SKILL: handle_set_active_skill,
        ActionType.RESTART_COMBAT: handle_restart_combat,
        ActionType.CONTINUE_AFTER_COMBAT: handle_continue_after_combat,
        ActionType.TOGGLE_DELEGATION: handle_toggle_delegation,
        ActionType.SET_UI_BLOCKING: handle_set_ui_blocking,
        ActionType.RESOLVE_ENEMY_PHASE: handle_resolve_enemy_phase,
        ActionType.SAFE_TRANSITION: handle_safe_transition,
        ActionType.VICTORY_ADVANCE: _scheduled_advance,
        ActionType.FLEE_ADVANCE: _scheduled_advance,
        ActionType.DELEGATED_ATTACK: handle_delegated_attack,
    }
