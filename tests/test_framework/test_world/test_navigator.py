import pytest

from tale_engine.core.events import SessionEvent
from tale_framework.inventory.items import ItemType
from tale_framework.inventory.manager import count_item, find_stack
from tale_framework.session.game import GameSession
from tale_framework.session.state import LogType
from tale_framework.world.navigator import resolve_pickup


def messages(state, log_type=None):
    return [e.message for e in state.log if log_type is None or e.type == log_type]


def test_load_enters_first_scene(session):
    state = session.state

    assert state.current_stage_id == "stage_1"
    assert state.current_scene_id == "intro"
    assert state.player.current_location == "Willow Village"
    assert "You wake in Willow Village." in messages(state, LogType.NARRATION)
    assert "You arrive at Willow Village." in messages(state)


def test_town_updates_recovery_pointer(session):
    state = session.advance_to_scene("town")

    assert state.last_visited_town_scene_id == "town"
    assert state.log[-1].message == "The square is busy."


def test_location_change(session):
    state = session.advance_to_scene("cave")
    assert state.player.current_location == "Dark Forest"


def test_dialogue_uses_seed(session):
    state = session.advance_to_scene("elder_talk")

    entry = state.log[-1]
    assert entry.type == LogType.DIALOGUE
    assert entry.speaker == "Elder Bram"
    assert entry.message == "The dragon sleeps in the lair to the north."


def test_dialogue_without_seed(session):
    state = session.advance_to_scene("monk_talk")
    assert state.log[-1].message == "Silent Monk has nothing to say."


def test_dialogue_with_unknown_character(config, catalog, script_data):
    script_data["stages"][0]["scenes"][3]["characterIds"] = ["ghost"]
    game = GameSession(config, catalog=catalog)
    game.load_script(script_data)

    state = game.advance_to_scene("monk_talk")

    assert state.log[-1].type == LogType.ERROR
    assert state.error is None


def test_item_pickup(session):
    state = session.advance_to_scene("treasure")

    assert count_item(state.player, "iron_sword") == 1
    assert state.log[-1].message == "Obtained Iron Sword."
    # picked up, not equipped
    assert state.player.attack == 15


def test_unknown_item_becomes_placeholder(session):
    state = session.advance_to_scene("mystery")

    orb = next(i for i in state.player.inventory if i.name == "Glowing Orb")
    assert orb.type == ItemType.KEY_ITEM
    assert orb.id.startswith("unknown_")
    assert orb.quantity == 1


def test_resolve_pickup(catalog):
    known = resolve_pickup(catalog, "rusty_key")
    unknown = resolve_pickup(catalog, "Golden Idol")

    assert known.known and known.item.id == "rusty_key"
    assert not unknown.known
    assert unknown.reference == "Golden Idol"
    assert unknown.item.name == "Golden Idol"


def test_missing_scene_keeps_state(session):
    before = session.state

    state = session.advance_to_scene("nowhere")

    assert state.error == "Scene 'nowhere' not found."
    assert state.current_scene_id == "intro"
    assert state.log == before.log


def test_error_cleared_by_next_action(session):
    session.advance_to_scene("nowhere")
    state = session.advance_to_scene("town")
    assert state.error is None


def test_cannot_leave_combat(session):
    session.advance_to_scene("forest")

    state = session.advance_to_scene("town")

    assert state.error == "You cannot leave during combat."
    assert state.current_scene_id == "forest"
    assert state.is_combat_active


def test_make_choice(session):
    session.advance_to_scene("crossroads")

    state = session.make_choice("c_cave")

    assert state.current_scene_id == "cave"
    assert "Enter the cave." in messages(state, LogType.CHOICE)


def test_unknown_choice(session):
    session.advance_to_scene("crossroads")
    state = session.make_choice("c_sky")
    assert state.error == "Unknown choice 'c_sky'."
    assert state.current_scene_id == "crossroads"


def test_end_of_last_stage_completes(session, event_bus):
    completed = []
    event_bus.subscribe(SessionEvent.GAME_COMPLETED, completed.append)

    state = session.advance_to_scene(None)

    assert state.is_game_completed
    assert state.is_game_over
    assert len(completed) == 1

    state = session.advance_to_scene("town")
    assert state.error == "The game is over."


def test_end_of_earlier_stage(config, catalog, script_data):
    script_data["stages"].append({
        "id": "stage_2",
        "characters": [{"id": "hero", "name": "Aria", "type": "PLAYER"}],
        "scenes": [{"id": "epilogue", "type": "NARRATION", "content": "Later."}],
    })
    game = GameSession(config, catalog=catalog)
    game.load_script(script_data)

    state = game.advance_to_scene(None)

    assert not state.is_game_over
    assert state.current_scene_id is None
    assert state.log[-1].message == "This stage is over. The next stage is not available yet."


def test_scene_entered_event(session, event_bus):
    entered = []
    event_bus.subscribe(SessionEvent.SCENE_ENTERED, entered.append)

    session.advance_to_scene("town")

    assert entered[0].data == {"scene_id": "town", "stage_id": "stage_1"}


def test_entering_scene_closes_shop(session):
    session.advance_to_scene("town")
    session.open_shop()

    state = session.advance_to_scene("elder_talk")

    assert not state.is_shop_open
    assert find_stack(state.player, "small_potion").quantity == 3
