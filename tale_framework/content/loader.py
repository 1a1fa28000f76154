"""
Script loader - turns a raw document into a validated Script.

Loading is strict about structure (schema, at least one stage, a first
stage with scenes and a player character, unique scene ids per stage)
and lenient about references: a dangling scene, character or choice
reference is reported as a warning, because navigation already handles
a missing target at the moment it is reached.
"""

from __future__ import annotations

import json
import logging
from collections import Counter
from typing import Any, Mapping, Union

import jsonschema
from pydantic import ValidationError

from tale_engine.resources.schemas import SCRIPT_SCHEMA
from tale_framework.content.models import Script
from tale_framework.errors import ScriptInvalid

logger = logging.getLogger(__name__)

RawScript = Union[str, bytes, Mapping[str, Any]]


def parse_script_document(raw: RawScript) -> dict[str, Any]:
    """Decode a raw script into a plain dict without validating it."""
    if isinstance(raw, (str, bytes)):
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            raise ScriptInvalid(f"Invalid script: not valid JSON ({e.msg}).") from e
    else:
        data = dict(raw)

    if not isinstance(data, dict):
        raise ScriptInvalid("Invalid script: the document must be a JSON object.")
    return data


def load_script(raw: RawScript) -> Script:
    """
    Parse and validate a script document.

    Args:
        raw: JSON text or an already decoded mapping

    Returns:
        The immutable Script

    Raises:
        ScriptInvalid: on any structural problem
    """
    data = parse_script_document(raw)

    stages = data.get("stages")
    if not isinstance(stages, list) or not stages:
        raise ScriptInvalid("Invalid script: no stages found.")
    first_scenes = stages[0].get("scenes") if isinstance(stages[0], dict) else None
    if not first_scenes:
        raise ScriptInvalid("Invalid script: the first stage has no scenes.")

    try:
        jsonschema.validate(instance=data, schema=SCRIPT_SCHEMA)
    except jsonschema.ValidationError as e:
        location = "/".join(str(p) for p in e.absolute_path) or "<root>"
        raise ScriptInvalid(f"Invalid script at {location}: {e.message}") from e

    try:
        script = Script.model_validate(data)
    except ValidationError as e:
        first = e.errors()[0]
        location = "/".join(str(p) for p in first["loc"])
        raise ScriptInvalid(f"Invalid script at {location}: {first['msg']}") from e

    for stage in script.stages:
        duplicates = [
            scene_id for scene_id, count in
            Counter(s.id for s in stage.scenes).items() if count > 1
        ]
        if duplicates:
            raise ScriptInvalid(
                f"Invalid script: duplicate scene ids in stage '{stage.id}': "
                f"{', '.join(sorted(duplicates))}."
            )

    if script.stages[0].find_player() is None:
        raise ScriptInvalid("Invalid script: no player character in the first stage.")

    for warning in inspect_script(script):
        logger.warning(warning)

    return script


def inspect_script(script: Script) -> list[str]:
    """
    Report dangling references inside each stage.

    Returns:
        Human readable warnings, empty if the script is consistent
    """
    warnings: list[str] = []

    for stage in script.stages:
        scene_ids = {s.id for s in stage.scenes}
        character_ids = {c.id for c in stage.characters}

        for scene in stage.scenes:
            where = f"stage '{stage.id}', scene '{scene.id}'"

            if scene.next_scene_id and scene.next_scene_id not in scene_ids:
                warnings.append(f"{where}: next scene '{scene.next_scene_id}' does not exist")

            for choice in scene.choices:
                if choice.next_scene_id not in scene_ids:
                    warnings.append(
                        f"{where}: choice '{choice.id}' leads to missing scene "
                        f"'{choice.next_scene_id}'"
                    )

            for character_id in scene.character_ids:
                if character_id not in character_ids:
                    warnings.append(f"{where}: unknown character '{character_id}'")

            if scene.is_combat:
                enemy_ids = scene.combat_details.enemy_character_ids if scene.combat_details else []
                if not enemy_ids:
                    warnings.append(f"{where}: combat scene without enemies")
                for enemy_id in enemy_ids:
                    if enemy_id not in character_ids:
                        warnings.append(f"{where}: unknown enemy '{enemy_id}'")

    return warnings
