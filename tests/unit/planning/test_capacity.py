import pytest
from datetime import date

from sprintpilot.domain.models import (
    CapacityStatus,
    MasterHoliday,
    SprintData,
    SprintSettings,
    Task,
    TeamMember,
)
from sprintpilot.planning.capacity import (
    calculate_capacity_summary,
    classify_utilization,
    sprint_exclusion_set,
)


def _sprint(tasks=(), leave_days=(), holidays=(), end=date(2024, 7, 12)) -> SprintData:
    return SprintData(
        id="sprint-1",
        settings=SprintSettings(
            start_date=date(2024, 7, 1),
            duration=10,
            end_date=end,
            public_holidays=list(holidays),
        ),
        team=[TeamMember(id="m1", name="Alice", daily_capacity=6, leave_days=list(leave_days))],
        tasks=list(tasks),
    )


def _tasks(*hours, assignee="m1"):
    return [Task(id=f"t{i}", key=f"PRJ-{i}", story_points=h, assignee_id=assignee) for i, h in enumerate(hours)]


def test_unassigned_member_is_underutilized():
    [summary] = calculate_capacity_summary(_sprint())

    assert summary.total_capacity == 60
    assert summary.assigned_hours == 0
    assert summary.remaining_hours == 60
    assert summary.utilization == 0
    assert summary.status == CapacityStatus.UNDERUTILIZED


def test_overloaded_member():
    [summary] = calculate_capacity_summary(_sprint(_tasks(40, 25)))

    assert summary.assigned_hours == 65
    assert summary.utilization == pytest.approx(108.33, abs=0.01)
    assert summary.remaining_hours == -5
    assert summary.status == CapacityStatus.OVERLOADED


def test_ok_member():
    [summary] = calculate_capacity_summary(_sprint(_tasks(30, 15)))

    assert summary.utilization == pytest.approx(75.0)
    assert summary.status == CapacityStatus.OK


def test_threshold_boundaries():
    assert classify_utilization(100.0) == CapacityStatus.OK
    assert classify_utilization(70.0) == CapacityStatus.OK
    assert classify_utilization(100.01) == CapacityStatus.OVERLOADED
    assert classify_utilization(69.99) == CapacityStatus.UNDERUTILIZED


def test_dangling_assignee_is_ignored():
    tasks = _tasks(10) + _tasks(50, assignee="gone")
    [summary] = calculate_capacity_summary(_sprint(tasks))

    assert summary.assigned_hours == 10


def test_leave_and_holidays_reduce_capacity():
    sprint = _sprint(leave_days=[date(2024, 7, 2)], holidays=[date(2024, 7, 4)])
    master = [MasterHoliday(id="mh-1", name="Founders Day", date=date(2024, 7, 8))]

    [summary] = calculate_capacity_summary(sprint, master)

    # 10 - sprint holiday - master holiday - 1 leave day
    assert summary.total_capacity == 7 * 6


def test_overlapping_holidays_counted_once():
    sprint = _sprint(holidays=[date(2024, 7, 4)])
    master = [MasterHoliday(id="mh-1", name="Independence Day", date=date(2024, 7, 4))]

    assert sprint_exclusion_set(sprint.settings, master) == {date(2024, 7, 4)}
    assert calculate_capacity_summary(sprint, master)[0].total_capacity == 54


def test_excess_leave_gives_negative_capacity():
    leave = [date(2024, 6, d) for d in range(3, 15)]  # 12 leave days
    [summary] = calculate_capacity_summary(_sprint(leave_days=leave))

    assert summary.total_capacity == -12
    assert summary.utilization == 0
    assert summary.status == CapacityStatus.UNDERUTILIZED


def test_no_sprint_or_no_end_date():
    assert calculate_capacity_summary(None) == []
    [summary] = calculate_capacity_summary(_sprint(end=None))
    assert summary.total_capacity == 0


def test_aggregator_is_pure():
    sprint = _sprint(_tasks(30, 15))
    before = sprint.model_dump()

    first = calculate_capacity_summary(sprint)
    second = calculate_capacity_summary(sprint)

    assert first == second
    assert sprint.model_dump() == before
