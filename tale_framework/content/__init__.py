"""
Content module - the loaded script graph.

Provides:
- Script, Stage, Scene, Character models (immutable once loaded)
- Script loading with schema validation and id uniqueness checks
- Reference inspection for authoring tools
"""

from tale_framework.content.models import (
    Script,
    WorldSettings,
    Stage,
    Scene,
    SceneType,
    SceneChoice,
    Character,
    CharacterType,
    CombatDetails,
)
from tale_framework.content.loader import (
    load_script,
    inspect_script,
    parse_script_document,
)

__all__ = [
    # Models
    "Script",
    "WorldSettings",
    "Stage",
    "Scene",
    "SceneType",
    "SceneChoice",
    "Character",
    "CharacterType",
    "CombatDetails",
    # Loading
    "load_script",
    "inspect_script",
    "parse_script_document",
]
