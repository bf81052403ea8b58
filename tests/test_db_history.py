"""Tests for HistoryStore persistence."""

import json
import sqlite3
import time
from unittest.mock import MagicMock

import pytest

from fridgeai.db.history import HistoryStore
from fridgeai.db.kv import KeyValueStore
from fridgeai.models import Recipe, ScanResult


@pytest.fixture
def kv(tmp_path):
    """Create a temporary KeyValueStore."""
    store = KeyValueStore(db_path=tmp_path / "test.db")
    yield store
    store.close()


@pytest.fixture
def history(kv):
    store = HistoryStore(kv)
    store.load()
    return store


@pytest.fixture
def omelette():
    return ScanResult(
        found_ingredients=("eggs", "milk"),
        recipes=(
            Recipe(
                title="Omelette",
                cook_time="10 minutes",
                ingredients=("eggs", "milk"),
                instructions=("Beat eggs", "Cook on pan"),
            ),
        ),
    )


def test_new_store_is_empty(history):
    assert history.list() == []
    assert len(history) == 0


def test_append_round_trip(history, omelette):
    """The newest entry reproduces the appended result."""
    before = int(time.time() * 1000)
    entry = history.append(omelette)

    first = history.list()[0]
    assert first == entry
    assert first.found_ingredients == omelette.found_ingredients
    assert first.recipes == omelette.recipes
    assert first.timestamp >= before
    assert first.id


def test_newest_first_and_unique_ids(history, omelette):
    a = history.append(omelette)
    b = history.append(ScanResult(found_ingredients=("butter",)))
    c = history.append(ScanResult())

    assert [e.id for e in history.list()] == [c.id, b.id, a.id]
    assert len({a.id, b.id, c.id}) == 3


def test_append_persists_immediately(kv, history, omelette):
    entry = history.append(omelette)

    reloaded = HistoryStore(kv)
    assert reloaded.load() == [entry]


def test_persisted_blob_is_json_array(kv, history, omelette):
    entry = history.append(omelette)

    blob = json.loads(kv.get("scanHistory"))
    assert blob == [entry.to_dict()]
    assert blob[0]["foundIngredients"] == ["eggs", "milk"]
    assert blob[0]["recipes"][0]["cookTime"] == "10 minutes"


def test_reads_existing_camel_case_blob(kv):
    """A blob written in the same JSON shape loads as entries."""
    kv.set(
        "scanHistory",
        json.dumps([
            {
                "id": "1700000000000",
                "timestamp": 1700000000000,
                "foundIngredients": ["eggs"],
                "recipes": [
                    {
                        "title": "Omelette",
                        "cookTime": "10 minutes",
                        "ingredients": ["eggs"],
                        "instructions": ["Beat eggs"],
                    }
                ],
            }
        ]),
    )
    entries = HistoryStore(kv).load()
    assert len(entries) == 1
    assert entries[0].recipes[0].title == "Omelette"


@pytest.mark.parametrize(
    "blob",
    [
        "",
        "{not json",
        '{"id": "x"}',
        "null",
        "42",
        pytest.param("[" * 200000, id="deeply-nested"),
    ],
)
def test_corrupt_blob_loads_empty(kv, blob):
    kv.set("scanHistory", blob)
    assert HistoryStore(kv).load() == []


def test_malformed_items_are_skipped(kv):
    kv.set(
        "scanHistory",
        json.dumps([
            {"id": "good", "timestamp": 1, "foundIngredients": [], "recipes": []},
            {"timestamp": 2},
            "garbage",
        ]),
    )
    entries = HistoryStore(kv).load()
    assert [e.id for e in entries] == ["good"]


def test_custom_key(kv, omelette):
    store = HistoryStore(kv, key="otherHistory")
    store.load()
    store.append(omelette)
    assert kv.get("scanHistory") is None
    assert kv.get("otherHistory") is not None


def test_get_by_id(history, omelette):
    entry = history.append(omelette)
    assert history.get(entry.id) == entry
    assert history.get("missing") is None


def test_read_error_loads_empty():
    kv = MagicMock()
    kv.get.side_effect = sqlite3.OperationalError("disk I/O error")
    assert HistoryStore(kv).load() == []


def test_write_error_is_swallowed(omelette):
    kv = MagicMock()
    kv.get.return_value = None
    kv.set.side_effect = sqlite3.OperationalError("database is locked")

    store = HistoryStore(kv)
    store.load()
    entry = store.append(omelette)

    assert store.list() == [entry]
    kv.set.assert_called_once()


def test_append_without_load_keeps_existing_entries(kv, omelette):
    """A store that was never loaded reads the saved list before writing."""
    first = HistoryStore(kv)
    first.load()
    a = first.append(omelette)

    second = HistoryStore(kv)
    b = second.append(ScanResult(found_ingredients=("butter",)))

    assert [e.id for e in second.list()] == [b.id, a.id]
    assert [e.id for e in HistoryStore(kv).load()] == [b.id, a.id]


def test_list_without_load_reads_persisted_entries(kv, omelette):
    entry = HistoryStore(kv).append(omelette)

    fresh = HistoryStore(kv)
    assert fresh.list() == [entry]
    assert fresh.get(entry.id) == entry
    assert len(fresh) == 1


def test_string_fields_make_entry_malformed(kv):
    kv.set(
        "scanHistory",
        json.dumps([
            {"id": "good", "timestamp": 1, "foundIngredients": ["eggs"], "recipes": []},
            {"id": "bad", "timestamp": 2, "foundIngredients": "eggs", "recipes": []},
        ]),
    )
    assert [e.id for e in HistoryStore(kv).load()] == ["good"]
