import json

import pytest

from tale_framework.content.loader import inspect_script, load_script
from tale_framework.content.models import CharacterType, SceneType
from tale_framework.errors import ScriptInvalid


def test_load_sample_script(script):
    assert script.world_settings.title == "The Willow Chronicle"
    assert script.world_settings.first_key_location() == "Willow Village"
    stage = script.stages[0]
    assert stage.find_player().name == "Aria"
    assert stage.get_scene("forest").combat_details.enemy_character_ids == ["slime", "slime"]
    assert stage.get_scene("lair").is_boss


def test_load_from_json_text(script_data):
    script = load_script(json.dumps(script_data))
    assert script.stages[0].id == "stage_1"


def test_script_is_frozen(script):
    with pytest.raises(Exception):
        script.stages[0].scenes[0].content = "changed"


def test_no_stages(script_data):
    script_data["stages"] = []
    with pytest.raises(ScriptInvalid, match="no stages"):
        load_script(script_data)


def test_first_stage_without_scenes(script_data):
    script_data["stages"][0]["scenes"] = []
    with pytest.raises(ScriptInvalid, match="no scenes"):
        load_script(script_data)


def test_not_json():
    with pytest.raises(ScriptInvalid, match="not valid JSON"):
        load_script("{ nope")


def test_schema_violation(script_data):
    del script_data["worldSettings"]["title"]
    with pytest.raises(ScriptInvalid, match="worldSettings"):
        load_script(script_data)


def test_unknown_scene_type(script_data):
    script_data["stages"][0]["scenes"][0]["type"] = "DANCE_OFF"
    with pytest.raises(ScriptInvalid):
        load_script(script_data)


def test_duplicate_scene_ids_rejected(script_data):
    scenes = script_data["stages"][0]["scenes"]
    scenes.append(dict(scenes[0]))
    with pytest.raises(ScriptInvalid, match="duplicate scene ids"):
        load_script(script_data)


def test_missing_player_rejected(script_data):
    characters = script_data["stages"][0]["characters"]
    script_data["stages"][0]["characters"] = [c for c in characters if c["type"] != "PLAYER"]
    with pytest.raises(ScriptInvalid, match="no player"):
        load_script(script_data)


def test_authoring_tool_labels_are_accepted(script_data):
    stage = script_data["stages"][0]
    stage["scenes"][0]["type"] = "나레이션"
    stage["characters"][0]["type"] = "플레이어 캐릭터"
    stage["scenes"][1]["type"] = "town"

    script = load_script(script_data)

    assert script.stages[0].scenes[0].type == SceneType.NARRATION
    assert script.stages[0].characters[0].type == CharacterType.PLAYER
    assert script.stages[0].scenes[1].type == SceneType.TOWN


def test_unknown_keys_are_ignored(script_data):
    script_data["stages"][0]["scenes"][0]["backgroundMusic"] = "calm.ogg"
    assert load_script(script_data).stages[0].scenes[0].id == "intro"


def test_dangling_references_are_warnings(script_data, caplog):
    scenes = script_data["stages"][0]["scenes"]
    scenes[0]["nextSceneId"] = "nowhere"
    scenes[2]["characterIds"] = ["ghost"]

    script = load_script(script_data)
    warnings = inspect_script(script)

    assert any("nowhere" in w for w in warnings)
    assert any("ghost" in w for w in warnings)
    assert "nowhere" in caplog.text


def test_clean_script_has_no_warnings(script):
    assert inspect_script(script) == []


def test_find_scene_and_safe_scene(script):
    stage, scene = script.find_scene("town")
    assert stage.id == "stage_1"
    assert scene.type == SceneType.TOWN
    assert script.find_scene("missing") is None
    assert script.find_safe_scene().id == "town"
    assert script.is_last_stage("stage_1")


def test_safe_scene_falls_back_to_first_non_combat(script_data):
    for scene in script_data["stages"][0]["scenes"]:
        if scene["type"] == "TOWN":
            scene["type"] = "NARRATION"
    script = load_script(script_data)
    assert script.find_safe_scene().id == "intro"
