"""
Game catalog - typed items, skills, shops and progression.

Built from a Database, so built-in data and data directories are
validated the same way before they become models.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from tale_engine.resources.database import Database
from tale_framework.data import defaults
from tale_framework.inventory.items import GameItem
from tale_framework.progression.skills import ProgressionTable, Skill

logger = logging.getLogger(__name__)


class GameCatalog:
    """
    Lookup tables for everything referenced by id at runtime.

    Shops map a scene id to a list of item ids; scenes without their
    own entry use the default shop.
    """

    def __init__(
        self,
        items: Optional[dict[str, GameItem]] = None,
        skills: Optional[dict[str, Skill]] = None,
        shops: Optional[dict[str, list[str]]] = None,
        progression: Optional[ProgressionTable] = None,
        default_shop_id: str = defaults.DEFAULT_SHOP_ID,
    ):
        self.items: dict[str, GameItem] = items or {}
        self.skills: dict[str, Skill] = skills or {}
        self.shops: dict[str, list[str]] = shops or {}
        self.progression: ProgressionTable = progression or ProgressionTable()
        self.default_shop_id = default_shop_id

    @classmethod
    def from_database(cls, database: Database) -> GameCatalog:
        """Convert validated database entries into models."""
        items = _parse_all(GameItem, database.items)
        skills = _parse_all(Skill, database.skills)
        shops = {
            shop_id: list(entry.get("itemIds", []))
            for shop_id, entry in database.shops.items()
        }
        tables = _parse_all(ProgressionTable, database.progression)
        progression = tables.get("player") or next(iter(tables.values()), None)
        return cls(items=items, skills=skills, shops=shops, progression=progression)

    @classmethod
    def default(cls) -> GameCatalog:
        """The built-in catalog."""
        database = Database()
        database.load_entries("items", defaults.ITEMS)
        database.load_entries("skills", defaults.SKILLS)
        database.load_entries("shops", defaults.SHOPS)
        database.load_entries("progression", defaults.PROGRESSION)
        return cls.from_database(database)

    @classmethod
    def from_directory(cls, data_path: Path | str) -> GameCatalog:
        """Load a data directory laid out as database/<category>/*.json."""
        database = Database(data_path)
        database.load_all()
        return cls.from_database(database)

    def get_item(self, item_id: str) -> Optional[GameItem]:
        """A detached copy of an item definition."""
        item = self.items.get(item_id)
        return item.clone() if item is not None else None

    def get_skill(self, skill_id: str) -> Optional[Skill]:
        return self.skills.get(skill_id)

    def shop_item_ids(self, scene_id: Optional[str]) -> tuple[str, list[str]]:
        """
        Resolve the shop for a scene.

        Returns:
            (shop id, item ids), falling back to the default shop
        """
        if scene_id is not None and scene_id in self.shops:
            return scene_id, list(self.shops[scene_id])
        return self.default_shop_id, list(self.shops.get(self.default_shop_id, []))


def _parse_all(model, entries: dict) -> dict:
    parsed = {}
    for entry_id, entry in entries.items():
        try:
            parsed[entry_id] = model.model_validate(entry)
        except ValidationError as e:
            logger.error(f"Invalid {model.__name__} '{entry_id}': {e.errors()[0]['msg']}")
    return parsed
