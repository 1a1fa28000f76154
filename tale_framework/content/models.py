"""
Content model - the static, immutable graph of a loaded script.

A script is `{worldSettings, stages}`; each stage owns its characters and
scenes, and scenes refer to characters and to each other by id within
the same stage.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import Field, field_validator

from tale_engine.core.component import ContentModel


class _LabelledEnum(str, Enum):
    """
    Enum that also accepts member names case-insensitively and the
    display labels used by scripts exported from the authoring tool.
    """

    @classmethod
    def _labels(cls) -> dict[str, str]:
        return {}

    @classmethod
    def _missing_(cls, value):
        if not isinstance(value, str):
            return None
        key = value.strip()
        labels = cls._labels()
        if key in labels:
            return cls(labels[key])
        normalized = key.upper().replace(" ", "_").replace("-", "_")
        return cls.__members__.get(normalized)


class SceneType(_LabelledEnum):
    NARRATION = "NARRATION"
    LOCATION_CHANGE = "LOCATION_CHANGE"
    TOWN = "TOWN"
    DIALOGUE = "DIALOGUE"
    COMBAT_NORMAL = "COMBAT_NORMAL"
    COMBAT_BOSS = "COMBAT_BOSS"
    ITEM_GET = "ITEM_GET"
    CHOICE = "CHOICE"

    @classmethod
    def _labels(cls) -> dict[str, str]:
        return {
            "나레이션": "NARRATION",
            "장소 변경": "LOCATION_CHANGE",
            "마을": "TOWN",
            "대화": "DIALOGUE",
            "일반 전투": "COMBAT_NORMAL",
            "보스 전투": "COMBAT_BOSS",
            "아이템 획득": "ITEM_GET",
            "선택": "CHOICE",
        }

    @property
    def is_combat(self) -> bool:
        return self in (SceneType.COMBAT_NORMAL, SceneType.COMBAT_BOSS)


class CharacterType(_LabelledEnum):
    PLAYER = "PLAYER"
    NPC = "NPC"
    MONSTER_NORMAL = "MONSTER_NORMAL"
    MONSTER_BOSS = "MONSTER_BOSS"

    @classmethod
    def _labels(cls) -> dict[str, str]:
        return {
            "플레이어 캐릭터": "PLAYER",
            "일반 몬스터": "MONSTER_NORMAL",
            "보스 몬스터": "MONSTER_BOSS",
        }


class WorldSettings(ContentModel):
    title: str
    description: str = ""
    main_conflict: Optional[str] = None
    key_locations: Optional[str] = None

    def first_key_location(self) -> Optional[str]:
        """First entry of the comma separated key location list."""
        if not self.key_locations:
            return None
        first = self.key_locations.split(",")[0].strip()
        return first or None


class Character(ContentModel):
    """Template for the player, an NPC or a monster."""
    id: str
    name: str
    type: CharacterType
    description: str = ""
    dialogue_seed: Optional[str] = None
    hp: Optional[int] = None
    attack: Optional[int] = None
    defense: Optional[int] = None
    skills: list[str] = Field(default_factory=list)


class CombatDetails(ContentModel):
    enemy_character_ids: list[str] = Field(default_factory=list)
    reward: str = ""


class SceneChoice(ContentModel):
    id: str
    text: str
    next_scene_id: str


class Scene(ContentModel):
    """A single addressable beat within a stage."""
    id: str
    type: SceneType
    stage_id: Optional[str] = None
    title: str = ""
    content: str = ""
    character_ids: list[str] = Field(default_factory=list)
    next_scene_id: Optional[str] = None
    new_location_name: Optional[str] = None
    combat_details: Optional[CombatDetails] = None
    item: Optional[str] = None
    choices: list[SceneChoice] = Field(default_factory=list)

    @field_validator("character_ids", "choices", mode="before")
    @classmethod
    def _null_as_empty(cls, value):
        return [] if value is None else value

    @property
    def is_combat(self) -> bool:
        return self.type.is_combat

    @property
    def is_boss(self) -> bool:
        return self.type == SceneType.COMBAT_BOSS

    def get_choice(self, choice_id: str) -> Optional[SceneChoice]:
        return next((c for c in self.choices if c.id == choice_id), None)


class Stage(ContentModel):
    id: str
    title: str = ""
    setting_description: str = ""
    characters: list[Character] = Field(default_factory=list)
    scenes: list[Scene] = Field(default_factory=list)

    def get_scene(self, scene_id: str) -> Optional[Scene]:
        return next((s for s in self.scenes if s.id == scene_id), None)

    def get_character(self, character_id: str) -> Optional[Character]:
        return next((c for c in self.characters if c.id == character_id), None)

    def find_player(self) -> Optional[Character]:
        return next(
            (c for c in self.characters if c.type == CharacterType.PLAYER),
            None,
        )


class Script(ContentModel):
    """Root of the content graph."""
    world_settings: WorldSettings
    stages: list[Stage] = Field(default_factory=list)

    def get_stage(self, stage_id: str) -> Optional[Stage]:
        return next((s for s in self.stages if s.id == stage_id), None)

    def is_last_stage(self, stage_id: str) -> bool:
        return bool(self.stages) and self.stages[-1].id == stage_id

    def find_scene(self, scene_id: str) -> Optional[tuple[Stage, Scene]]:
        """Locate a scene anywhere in the script, first stage wins."""
        for stage in self.stages:
            scene = stage.get_scene(scene_id)
            if scene is not None:
                return stage, scene
        return None

    def iter_scenes(self):
        for stage in self.stages:
            yield from stage.scenes

    def find_safe_scene(self) -> Optional[Scene]:
        """
        Recovery destination when no town has been visited yet: the first
        town scene in script order, else the first non-combat scene.
        """
        town = next((s for s in self.iter_scenes() if s.type == SceneType.TOWN), None)
        if town is not None:
            return town
        return next((s for s in self.iter_scenes() if not s.is_combat), None)
