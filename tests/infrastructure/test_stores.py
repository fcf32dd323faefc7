import json

import pytest

from mastery.domain.errors import CorruptStateError
from mastery.infrastructure.stores import InMemoryStore, JsonFileStore


@pytest.fixture(params=["memory", "file"])
def store(request, tmp_path):
    if request.param == "memory":
        return InMemoryStore()
    return JsonFileStore(tmp_path / "data" / "store.json")


def test_get_missing_key_returns_none(store):
    assert store.get("nope") is None


def test_set_get_delete(store):
    store.set("a", "1")
    store.set("b", "2")
    store.set("a", "3")
    assert store.get("a") == "3"
    assert store.get("b") == "2"

    assert store.delete("a") is True
    assert store.delete("a") is False
    assert store.get("a") is None
    assert store.get("b") == "2"


def test_file_store_persists_across_instances(tmp_path):
    path = tmp_path / "store.json"
    JsonFileStore(path).set("state", '{"x": 1}')

    assert JsonFileStore(path).get("state") == '{"x": 1}'
    assert json.loads(path.read_text()) == {"state": '{"x": 1}'}


def test_file_store_leaves_no_temp_files(tmp_path):
    store = JsonFileStore(tmp_path / "store.json")
    store.set("k", "v")
    store.set("k", "w")
    assert [p.name for p in tmp_path.iterdir()] == ["store.json"]


def test_file_store_empty_file_reads_as_empty(tmp_path):
    path = tmp_path / "store.json"
    path.write_text("")
    assert JsonFileStore(path).get("k") is None


@pytest.mark.parametrize("content", ["{broken", "[1, 2]"])
def test_file_store_rejects_corrupt_file(tmp_path, content):
    path = tmp_path / "store.json"
    path.write_text(content)
    with pytest.raises(CorruptStateError):
        JsonFileStore(path).get("k")


def test_memory_store_initial_data():
    store = InMemoryStore({"k": "v"})
    assert store.get("k") == "v"
    assert store.keys() == ["k"]
