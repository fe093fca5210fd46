import os
import pytest

from sprintpilot.storage.memory import InMemoryKeyValueStore
from sprintpilot.storage.models import DocumentModel
from sprintpilot.storage.sql_store import SqlKeyValueStore


@pytest.fixture
def sql_store():
    store = SqlKeyValueStore("sqlite:///:memory:")
    store.connect()
    yield store
    store.close()


@pytest.fixture(params=["memory", "sql"])
def store(request, sql_store):
    if request.param == "memory":
        return InMemoryKeyValueStore()
    return sql_store


def test_load_missing_key(store):
    assert store.load("nothing") is None


def test_save_and_load(store):
    store.save("doc", {"name": "Sprint 1", "dates": ["2024-07-01"]})
    assert store.load("doc") == {"name": "Sprint 1", "dates": ["2024-07-01"]}


def test_save_replaces(store):
    store.save("doc", {"v": 1})
    store.save("doc", {"v": 2})
    assert store.load("doc") == {"v": 2}


def test_delete(store):
    store.save("doc", [1, 2])

    assert store.delete("doc") is True
    assert store.load("doc") is None
    assert store.delete("doc") is False


def test_health_check(store):
    assert store.health_check() is True


def test_memory_store_copies_values():
    store = InMemoryKeyValueStore()
    value = {"items": [1]}
    store.save("doc", value)

    value["items"].append(2)
    loaded = store.load("doc")
    loaded["items"].append(3)

    assert store.load("doc") == {"items": [1]}


def test_sql_store_versions_documents(sql_store):
    sql_store.save("doc", {"v": 1})
    sql_store.save("doc", {"v": 2})

    with sql_store.get_session() as session:
        assert session.get(DocumentModel, "doc").version == 2


def test_sql_store_requires_connect():
    store = SqlKeyValueStore("sqlite:///:memory:")

    assert store.health_check() is False
    with pytest.raises(ConnectionError):
        store.load("doc")


def test_sql_store_creates_file_directory(test_data_dir):
    db_path = os.path.join(test_data_dir, "nested", "sprints.db")
    store = SqlKeyValueStore(f"sqlite:///{db_path}")
    store.connect()
    store.save("doc", {"ok": True})
    store.close()

    reopened = SqlKeyValueStore(f"sqlite:///{db_path}")
    reopened.connect()
    assert reopened.load("doc") == {"ok": True}
    reopened.close()
