import json

import pytest

from tale_engine.resources.database import Database
from tale_framework.catalog import GameCatalog


@pytest.fixture
def mock_db_path(tmp_path):
    database = tmp_path / "database"
    database.mkdir()
    (database / "items").mkdir()
    (database / "skills").mkdir()
    (database / "shops").mkdir()
    return tmp_path


def test_load_all(mock_db_path):
    item_data = [
        {"id": "sword", "name": "Sword", "type": "weapon", "equipSlot": "weapon",
         "effects": {"attack": 4}, "sellPrice": 100},
    ]
    with open(mock_db_path / "database" / "items" / "sword.json", "w") as f:
        json.dump(item_data, f)

    db = Database(mock_db_path)
    db.load_all()

    assert "sword" in db.items
    assert db.get_item("sword")["sellPrice"] == 100


def test_single_entry_file(mock_db_path):
    skill = {"id": "zap", "name": "Zap", "effectType": "damage_hp", "targetType": "enemy_single"}
    with open(mock_db_path / "database" / "skills" / "zap.json", "w") as f:
        json.dump(skill, f)

    db = Database(mock_db_path)
    db.load_all()

    assert db.get_skill("zap")["name"] == "Zap"


def test_validation_error(mock_db_path, caplog):
    item_data = [
        {"id": "broken", "name": "Broken"},
        {"id": "fine", "name": "Fine", "type": "keyItem"},
    ]
    with open(mock_db_path / "database" / "items" / "mixed.json", "w") as f:
        json.dump(item_data, f)

    db = Database(mock_db_path)
    db.load_all()

    assert "broken" not in db.items
    assert "fine" in db.items
    assert "Validation error" in caplog.text


def test_invalid_json_is_skipped(mock_db_path):
    (mock_db_path / "database" / "shops" / "bad.json").write_text("{not json")

    db = Database(mock_db_path)
    db.load_all()

    assert db.shops == {}


def test_missing_directories_are_tolerated(tmp_path):
    db = Database(tmp_path)
    db.load_all()
    assert db.items == {}


def test_load_entries_validates():
    db = Database()
    accepted = db.load_entries("shops", [
        {"id": "default", "itemIds": ["small_potion"]},
        {"id": "broken"},
    ])

    assert accepted == 1
    assert db.get_shop("default")["itemIds"] == ["small_potion"]


def test_unknown_category_rejected():
    with pytest.raises(KeyError):
        Database().load_entries("monsters", [])


def test_default_catalog_is_typed(catalog):
    potion = catalog.get_item("small_potion")
    assert potion.effects.hp == 30
    assert potion.sell_price == 5
    assert catalog.get_skill("whirlwind").mp_cost == 12
    assert catalog.progression.default_skills == ["power_strike", "heal"]
    assert catalog.progression.skills_for_level(2) == ["whirlwind"]


def test_catalog_get_item_returns_copy(catalog):
    potion = catalog.get_item("small_potion")
    potion.quantity = 99
    assert catalog.get_item("small_potion").quantity == 1


def test_catalog_from_directory(mock_db_path):
    items = [{"id": "gem", "name": "Gem", "type": "keyItem", "sellPrice": 7}]
    with open(mock_db_path / "database" / "items" / "gems.json", "w") as f:
        json.dump(items, f)
    with open(mock_db_path / "database" / "shops" / "default.json", "w") as f:
        json.dump({"id": "default", "itemIds": ["gem"]}, f)

    catalog = GameCatalog.from_directory(mock_db_path)

    assert catalog.get_item("gem").sell_price == 7
    assert catalog.shop_item_ids("anywhere") == ("default", ["gem"])
