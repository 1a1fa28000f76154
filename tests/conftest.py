import copy
import os
import sys

import pytest

# Ensure engine modules can be imported
sys.path.append(os.getcwd())


SAMPLE_SCRIPT = {
    "worldSettings": {
        "title": "The Willow Chronicle",
        "description": "A small village, a large dragon.",
        "mainConflict": "The dragon wakes.",
        "keyLocations": "Willow Village, Dark Forest, Dragon Lair",
    },
    "stages": [
        {
            "id": "stage_1",
            "title": "Chapter One",
            "characters": [
                {"id": "hero", "name": "Aria", "type": "PLAYER"},
                {
                    "id": "elder",
                    "name": "Elder Bram",
                    "type": "NPC",
                    "dialogueSeed": "The dragon sleeps in the lair to the north.",
                },
                {"id": "mute", "name": "Silent Monk", "type": "NPC"},
                {"id": "slime", "name": "Slime", "type": "MONSTER_NORMAL",
                 "hp": 5, "attack": 8, "defense": 3},
                {"id": "wolf", "name": "Wolf", "type": "MONSTER_NORMAL"},
                {"id": "ogre", "name": "Ogre", "type": "MONSTER_NORMAL",
                 "hp": 500, "attack": 200, "defense": 0},
                {"id": "dragon", "name": "Dragon", "type": "MONSTER_BOSS",
                 "hp": 40, "attack": 12, "defense": 4},
                {"id": "wyrmling", "name": "Wyrmling", "type": "MONSTER_BOSS"},
            ],
            "scenes": [
                {"id": "intro", "type": "NARRATION", "title": "Dawn",
                 "content": "You wake in Willow Village.",
                 "newLocationName": "Willow Village", "nextSceneId": "town"},
                {"id": "town", "type": "TOWN", "content": "The square is busy.",
                 "nextSceneId": "elder_talk"},
                {"id": "elder_talk", "type": "DIALOGUE", "characterIds": ["elder"],
                 "content": "The elder beckons.", "nextSceneId": "crossroads"},
                {"id": "monk_talk", "type": "DIALOGUE", "characterIds": ["mute"],
                 "nextSceneId": "crossroads"},
                {"id": "crossroads", "type": "CHOICE", "content": "Two paths.",
                 "choices": [
                     {"id": "c_forest", "text": "Take the forest path.", "nextSceneId": "forest"},
                     {"id": "c_cave", "text": "Enter the cave.", "nextSceneId": "cave"},
                 ]},
                {"id": "forest", "type": "COMBAT_NORMAL", "content": "Something stirs.",
                 "combatDetails": {"enemyCharacterIds": ["slime", "slime"], "reward": ""},
                 "nextSceneId": "treasure"},
                {"id": "cave", "type": "COMBAT_NORMAL",
                 "combatDetails": {"enemyCharacterIds": ["wolf"]},
                 "newLocationName": "Dark Forest", "nextSceneId": "lair"},
                {"id": "ambush", "type": "COMBAT_NORMAL",
                 "combatDetails": {"enemyCharacterIds": ["ogre"]},
                 "nextSceneId": "lair"},
                {"id": "treasure", "type": "ITEM_GET", "content": "A chest!",
                 "item": "iron_sword", "nextSceneId": "mystery"},
                {"id": "mystery", "type": "ITEM_GET", "item": "Glowing Orb",
                 "nextSceneId": "lair"},
                {"id": "lair", "type": "COMBAT_BOSS", "content": "The dragon roars.",
                 "newLocationName": "Dragon Lair",
                 "combatDetails": {"enemyCharacterIds": ["dragon"]},
                 "nextSceneId": None},
                {"id": "nest", "type": "COMBAT_BOSS",
                 "combatDetails": {"enemyCharacterIds": ["wyrmling"]},
                 "nextSceneId": "lair"},
            ],
        },
    ],
}


@pytest.fixture
def script_data():
    """Fresh, mutable copy of the sample script document."""
    return copy.deepcopy(SAMPLE_SCRIPT)


@pytest.fixture
def script(script_data):
    from tale_framework.content.loader import load_script
    return load_script(script_data)


@pytest.fixture
def catalog():
    from tale_framework.catalog import GameCatalog
    return GameCatalog.default()


@pytest.fixture
def event_bus():
    """Fresh EventBus for each test."""
    from tale_engine.core.events import EventBus
    return EventBus()


@pytest.fixture
def store():
    from tale_engine.resources.store import MemoryStore
    return MemoryStore()


@pytest.fixture
def config():
    from tale_framework.session.config import SessionConfig
    return SessionConfig(seed=1234)


@pytest.fixture
def session(config, catalog, store, event_bus, script_data):
    """Session with the sample script loaded, standing on the intro scene."""
    from tale_framework.session.game import GameSession
    game = GameSession(config, catalog=catalog, store=store, event_bus=event_bus)
    game.load_script(script_data)
    return game


@pytest.fixture
def player(catalog):
    """Level 1 player with the default skill set and no items."""
    from tale_framework.progression.player import create_player
    return create_player("Aria", "Willow Village", table=catalog.progression)
