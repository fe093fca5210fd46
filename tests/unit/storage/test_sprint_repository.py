from datetime import date

import pytest

from sprintpilot.domain.models import MasterHoliday, SprintData, SprintSettings, Task, TaskCategory, TeamMember
from sprintpilot.storage.memory import InMemoryKeyValueStore
from sprintpilot.storage.repositories.sprint_repository import (
    CURRENT_SPRINT_KEY,
    SprintRepository,
)
from sprintpilot.storage.sql_store import SqlKeyValueStore


@pytest.fixture(params=["memory", "sql"])
def repo(request):
    if request.param == "memory":
        yield SprintRepository(InMemoryKeyValueStore())
        return
    store = SqlKeyValueStore("sqlite:///:memory:")
    store.connect()
    yield SprintRepository(store)
    store.close()


def _sprint(sprint_id="sprint-1") -> SprintData:
    return SprintData(
        id=sprint_id,
        settings=SprintSettings(
            start_date=date(2024, 7, 1),
            duration=10,
            end_date=date(2024, 7, 12),
            public_holidays=[date(2024, 7, 4)],
        ),
        team=[TeamMember(id="m1", name="Alice", daily_capacity=6, leave_days=[date(2024, 7, 2)])],
        tasks=[Task(id="t1", key="PRJ-1", story_points=8, category=TaskCategory.TECH_DEBT, assignee_id="m1")],
    )


def test_current_sprint_round_trip(repo):
    assert repo.get_current_sprint() is None

    repo.save_current_sprint(_sprint())

    assert repo.get_current_sprint() == _sprint()


def test_clearing_current_sprint(repo):
    repo.save_current_sprint(_sprint())
    repo.save_current_sprint(None)

    assert repo.get_current_sprint() is None
    assert repo.store.load(CURRENT_SPRINT_KEY) is None


def test_master_holidays_distinguish_unsaved_from_empty(repo):
    assert repo.get_master_holidays() is None

    repo.save_master_holidays([])
    assert repo.get_master_holidays() == []

    holiday = MasterHoliday(id="mh-1", name="New Year", date=date(2025, 1, 1))
    repo.save_master_holidays([holiday])
    assert repo.get_master_holidays() == [holiday]


def test_archive_appends_in_order(repo):
    repo.archive_sprint(_sprint("a"))
    history = repo.archive_sprint(_sprint("b"))

    assert [s.id for s in history] == ["a", "b"]
    assert [s.id for s in repo.get_history()] == ["a", "b"]
    assert repo.get_archived_sprint("b").id == "b"
    assert repo.get_archived_sprint("missing") is None


def test_unknown_category_loads_as_other():
    store = InMemoryKeyValueStore()
    raw = _sprint().model_dump(mode="json")
    raw["tasks"][0]["category"] = "Spike"
    store.save(CURRENT_SPRINT_KEY, raw)

    sprint = SprintRepository(store).get_current_sprint()

    assert sprint.tasks[0].category == TaskCategory.OTHER
