import pytest

from tale_engine.resources.store import JsonFileStore, KeyValueStore, MemoryStore, StoreError


def test_memory_store_roundtrip(store):
    store.set("k", {"a": [1, 2]})
    assert store.get("k") == {"a": [1, 2]}
    assert "k" in store
    assert store.keys() == ["k"]

    store.remove("k")
    assert store.get("k") is None
    store.remove("k")


def test_memory_store_returns_detached_values(store):
    store.set("k", {"a": 1})
    value = store.get("k")
    value["a"] = 2
    assert store.get("k") == {"a": 1}


def test_memory_store_rejects_unserializable(store):
    with pytest.raises(StoreError):
        store.set("k", {"bad": object()})


def test_file_store_roundtrip(tmp_path):
    store = JsonFileStore(tmp_path / "saves")
    store.set("rpg_game_state", {"hp": 10})

    assert (tmp_path / "saves" / "rpg_game_state.json").exists()
    assert store.get("rpg_game_state") == {"hp": 10}

    store.remove("rpg_game_state")
    assert store.get("rpg_game_state") is None


def test_file_store_sanitizes_keys(tmp_path):
    store = JsonFileStore(tmp_path)
    store.set("../escape me", 1)
    assert store.get("../escape me") == 1
    assert list(tmp_path.glob("*.json"))[0].parent == tmp_path


def test_file_store_corrupt_file(tmp_path):
    store = JsonFileStore(tmp_path)
    (tmp_path / "broken.json").write_text("{oops")
    with pytest.raises(StoreError):
        store.get("broken")


def test_stores_satisfy_protocol(tmp_path):
    assert isinstance(MemoryStore(), KeyValueStore)
    assert isinstance(JsonFileStore(tmp_path), KeyValueStore)
