"""
Catalog Database.

Handles loading and validation of static game data (items, skills,
shop inventories, progression tables).
"""

import json
import logging
from pathlib import Path
from typing import Any, Iterable

import jsonschema

from tale_engine.resources.schemas import CATALOG_SCHEMAS


class Database:
    """
    Central storage for static catalog data.

    Entries are kept as validated raw dicts keyed by id; typed access is
    layered on top by the game catalog.
    """

    def __init__(self, data_path: Path | str | None = None):
        self._data_path = Path(data_path) if data_path is not None else None
        self._schemas: dict[str, Any] = dict(CATALOG_SCHEMAS)

        # Data stores
        self.items: dict[str, Any] = {}
        self.skills: dict[str, Any] = {}
        self.shops: dict[str, Any] = {}
        self.progression: dict[str, Any] = {}

        self.logger = logging.getLogger(__name__)

    def load_all(self) -> None:
        """Load every category folder under the data path."""
        if self._data_path is None:
            self.logger.warning("No data path configured, nothing to load")
            return

        for category in self._schemas:
            self._store(category).update(self._load_category(category))

        self.logger.info(
            f"Loaded {len(self.items)} items, "
            f"{len(self.skills)} skills, "
            f"{len(self.shops)} shops, "
            f"{len(self.progression)} progression tables."
        )

    def load_entries(self, category: str, entries: Iterable[dict[str, Any]]) -> int:
        """
        Validate and store in-memory entries for a category.

        Returns:
            Number of entries accepted
        """
        store = self._store(category)
        accepted = 0
        for entry in entries:
            if self._validate(category, entry, source="<memory>"):
                store[entry['id']] = entry
                accepted += 1
        return accepted

    def _store(self, category: str) -> dict[str, Any]:
        if category not in self._schemas:
            raise KeyError(f"Unknown catalog category: {category}")
        return getattr(self, category)

    def _validate(self, category: str, entry: Any, source: str) -> bool:
        try:
            jsonschema.validate(instance=entry, schema=self._schemas[category])
        except jsonschema.ValidationError as e:
            self.logger.error(f"Validation error in {source}: {e.message}")
            return False
        return True

    def _load_category(self, category: str) -> dict[str, Any]:
        """Load all JSON files in a category folder."""
        category_dir = self._data_path / "database" / category
        data_store: dict[str, Any] = {}

        if not category_dir.exists():
            self.logger.warning(f"Data directory not found: {category_dir}")
            return data_store

        for file_path in sorted(category_dir.glob("*.json")):
            try:
                with open(file_path, 'r', encoding='utf-8') as f:
                    data = json.load(f)
            except (OSError, json.JSONDecodeError) as e:
                self.logger.error(f"Failed to load {file_path}: {e}")
                continue

            # A file holds either a single entry or a list of entries
            entries = data if isinstance(data, list) else [data]
            for entry in entries:
                if self._validate(category, entry, source=str(file_path)):
                    data_store[entry['id']] = entry

        return data_store

    def get_item(self, item_id: str) -> dict[str, Any] | None:
        return self.items.get(item_id)

    def get_skill(self, skill_id: str) -> dict[str, Any] | None:
        return self.skills.get(skill_id)

    def get_shop(self, shop_id: str) -> dict[str, Any] | None:
        return self.shops.get(shop_id)
