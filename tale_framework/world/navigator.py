"""
Scene navigation - moving through the script graph.

Entering a scene applies its side effects (location change, town
pointer, item pickup, dialogue and narration) and recomputes the
player's derived stats. Combat scenes are only entered here; the
combat system takes over on the evaluation pass that follows.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

from tale_engine.core.events import SessionEvent
from tale_framework.catalog import GameCatalog
from tale_framework.content.models import Scene, SceneType, Stage
from tale_framework.errors import ActionNotAllowed, SceneNotFound
from tale_framework.inventory.items import GameItem, make_placeholder_item
from tale_framework.inventory.manager import add_item
from tale_framework.progression.player import compute_derived_stats
from tale_framework.session.state import LogType

if TYPE_CHECKING:
    from tale_framework.session.reducer import TransitionContext

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ItemPickup:
    """
    Item found in a scene.

    `known` is False when the scene referenced an id missing from the
    catalog and a placeholder key item was made up in its place.
    """
    reference: str
    item: GameItem
    known: bool


def resolve_pickup(catalog: GameCatalog, reference: str) -> ItemPickup:
    item = catalog.get_item(reference)
    if item is not None:
        return ItemPickup(reference=reference, item=item.stack_of(1), known=True)
    logger.warning(f"Unknown item '{reference}' picked up, using a placeholder")
    return ItemPickup(reference=reference, item=make_placeholder_item(reference), known=False)


class SceneNavigator:
    """Moves the session between scenes."""

    def advance_to_scene(
        self,
        ctx: TransitionContext,
        scene_id: Optional[str],
        any_stage: bool = False,
    ) -> Optional[ItemPickup]:
        """
        Move to a scene of the current stage.

        Args:
            ctx: Transition context
            scene_id: Target scene, None at the end of a branch
            any_stage: Search every stage (retreat after a defeat)

        Returns:
            The item picked up on arrival, if any

        Raises:
            ActionNotAllowed: No script, combat in progress or game over
            SceneNotFound: Target scene does not exist
        """
        state = ctx.state
        if state.script is None or state.player is None:
            raise ActionNotAllowed("No script is loaded.")
        if state.is_combat_active:
            raise ActionNotAllowed("You cannot leave during combat.")
        if state.is_game_over:
            raise ActionNotAllowed("The game is over.")

        if scene_id is None:
            self._end_of_branch(ctx)
            return None

        if any_stage:
            found = state.script.find_scene(scene_id)
            if found is None:
                raise SceneNotFound(scene_id)
            stage, scene = found
        else:
            stage = state.current_stage
            scene = stage.get_scene(scene_id) if stage is not None else None
            if scene is None:
                raise SceneNotFound(scene_id)

        return self.enter_scene(ctx, stage, scene)

    def _end_of_branch(self, ctx: TransitionContext) -> None:
        state = ctx.state
        stage = state.current_stage
        state.close_shop()
        state.leave_post_combat()
        if stage is not None and state.script.is_last_stage(stage.id):
            state.is_game_over = True
            state.is_game_completed = True
            ctx.log(LogType.SYSTEM, "The story is complete. Thank you for playing!")
            ctx.emit(SessionEvent.GAME_COMPLETED, stage_id=stage.id)
            return

        logger.info(f"Stage '{stage.id if stage else None}' ended; stage transitions are not supported")
        state.current_scene_id = None
        ctx.log(LogType.SYSTEM, "This stage is over. The next stage is not available yet.")

    def enter_scene(self, ctx: TransitionContext, stage: Stage, scene: Scene) -> Optional[ItemPickup]:
        """Make a scene current and apply its side effects."""
        state = ctx.state
        player = state.player

        state.close_shop()
        state.clear_combat()
        state.leave_post_combat()
        state.current_stage_id = stage.id
        state.current_scene_id = scene.id

        if scene.new_location_name:
            player.current_location = scene.new_location_name
            ctx.log(LogType.SYSTEM, f"You arrive at {scene.new_location_name}.")

        if scene.type == SceneType.TOWN:
            state.last_visited_town_scene_id = scene.id

        if scene.type == SceneType.DIALOGUE:
            self._log_dialogue(ctx, stage, scene)
        elif scene.content:
            ctx.log(LogType.NARRATION, scene.content)

        pickup = None
        if scene.type == SceneType.ITEM_GET and scene.item:
            pickup = resolve_pickup(ctx.catalog, scene.item)
            add_item(player, pickup.item, 1)
            ctx.log(LogType.REWARD, f"Obtained {pickup.item.name}.")

        state.player = compute_derived_stats(player)
        ctx.emit(SessionEvent.SCENE_ENTERED, scene_id=scene.id, stage_id=stage.id)
        return pickup

    def _log_dialogue(self, ctx: TransitionContext, stage: Stage, scene: Scene) -> None:
        if not scene.character_ids:
            if scene.content:
                ctx.log(LogType.NARRATION, scene.content)
            return

        character_id = scene.character_ids[0]
        speaker = stage.get_character(character_id)
        if speaker is None:
            ctx.log(LogType.ERROR, f"Unknown character '{character_id}' in scene '{scene.id}'.")
            return
        if speaker.dialogue_seed:
            ctx.log(LogType.DIALOGUE, speaker.dialogue_seed, speaker=speaker.name)
        else:
            ctx.log(LogType.DIALOGUE, f"{speaker.name} has nothing to say.", speaker=speaker.name)

    def make_choice(self, ctx: TransitionContext, choice_id: str) -> None:
        state = ctx.state
        scene = state.current_scene
        if state.is_combat_active or state.is_game_over:
            raise ActionNotAllowed("You cannot choose right now.")
        if scene is None:
            raise ActionNotAllowed("There is nothing to choose.")
        choice = scene.get_choice(choice_id)
        if choice is None:
            raise ActionNotAllowed(f"Unknown choice '{choice_id}'.")

        ctx.log(LogType.CHOICE, choice.text)
        self.advance_to_scene(ctx, choice.next_scene_id)
