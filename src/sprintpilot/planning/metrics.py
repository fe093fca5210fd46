"""
Sprint History Metrics

Trend data across archived sprints, used by the history view and the
performance-insights prompt:

- Velocity: total estimated hours committed per sprint
- Work mix: share of hours per category per sprint
- Role utilization: assigned vs. available hours per role across sprints
- Current progress: how far the sprint in flight has come, and what is left
"""

from dataclasses import dataclass, field
from datetime import date
from typing import Dict, Iterable, List, Optional

from sprintpilot.domain.models import MasterHoliday, SprintData, TaskCategory
from sprintpilot.planning.calendar import count_working_days
from sprintpilot.planning.capacity import (
    calculate_capacity_summary,
    sprint_exclusion_set,
    utilization_percent,
)

# OTHER is counted in the total but not reported as its own share
TRACKED_CATEGORIES = (TaskCategory.FEATURE, TaskCategory.TECH_DEBT, TaskCategory.PROD_ISSUE)

TEAM_OVER_THRESHOLD = 90.0
TEAM_UNDER_THRESHOLD = 70.0


@dataclass
class VelocityPoint:
    sprint_id: str
    end_date: Optional[date]
    total_hours: float


@dataclass
class WorkMixPoint:
    sprint_id: str
    end_date: Optional[date]
    mix: Dict[str, float] = field(default_factory=dict)  # category -> percent


@dataclass
class RoleUtilization:
    role: str
    total_capacity: float
    assigned_hours: float
    utilization: float


@dataclass
class HistoryMetrics:
    velocity: List[VelocityPoint]
    work_mix: List[WorkMixPoint]
    roles: List[RoleUtilization]


def total_hours(sprint: SprintData) -> float:
    return sum(t.story_points for t in sprint.tasks)


def velocity_trend(sprints: Iterable[SprintData]) -> List[VelocityPoint]:
    return [
        VelocityPoint(
            sprint_id=s.id,
            end_date=s.settings.end_date,
            total_hours=total_hours(s),
        )
        for s in sprints
    ]


def work_mix(sprint: SprintData) -> Dict[str, float]:
    hours = total_hours(sprint)
    by_category = {c.value: 0.0 for c in TRACKED_CATEGORIES}
    if hours <= 0:
        return by_category

    for task in sprint.tasks:
        if task.category.value in by_category:
            by_category[task.category.value] += task.story_points

    return {category: (h / hours) * 100 for category, h in by_category.items()}


def work_mix_trend(sprints: Iterable[SprintData]) -> List[WorkMixPoint]:
    return [
        WorkMixPoint(sprint_id=s.id, end_date=s.settings.end_date, mix=work_mix(s))
        for s in sprints
    ]


def role_utilization(
    sprints: Iterable[SprintData],
    master_holidays: Iterable[MasterHoliday] = (),
) -> List[RoleUtilization]:
    """
    Aggregate capacity and assigned hours per role across sprints.

    Roles appear in order of first occurrence.
    """
    holidays = list(master_holidays)
    totals: Dict[str, Dict[str, float]] = {}

    for sprint in sprints:
        by_member = {c.member_id: c for c in calculate_capacity_summary(sprint, holidays)}
        for member in sprint.team:
            bucket = totals.setdefault(member.role.value, {"capacity": 0.0, "assigned": 0.0})
            summary = by_member.get(member.id)
            if summary:
                bucket["capacity"] += summary.total_capacity
                bucket["assigned"] += summary.assigned_hours

    return [
        RoleUtilization(
            role=role,
            total_capacity=data["capacity"],
            assigned_hours=data["assigned"],
            utilization=utilization_percent(data["assigned"], data["capacity"]),
        )
        for role, data in totals.items()
    ]


def history_metrics(
    sprints: Iterable[SprintData],
    master_holidays: Iterable[MasterHoliday] = (),
) -> HistoryMetrics:
    selected = list(sprints)
    return HistoryMetrics(
        velocity=velocity_trend(selected),
        work_mix=work_mix_trend(selected),
        roles=role_utilization(selected, master_holidays),
    )


@dataclass
class SprintProgress:
    percent_elapsed: float
    working_days_elapsed: int
    total_working_days: int
    working_days_left: int
    hours_remaining: float
    completed_tasks: int
    total_tasks: int
    average_utilization: float
    utilization_status: str  # over / optimal / under


def team_utilization_status(average: float) -> str:
    if average > TEAM_OVER_THRESHOLD:
        return "over"
    if average < TEAM_UNDER_THRESHOLD:
        return "under"
    return "optimal"


def current_sprint_progress(
    sprint: SprintData,
    master_holidays: Iterable[MasterHoliday] = (),
    today: Optional[date] = None,
) -> SprintProgress:
    """
    Progress of the sprint in flight as of `today`.

    Elapsed days count from the start through `today`, capped at the end
    date; days left count from `today` (or the start, if not yet begun)
    through the end date, both inclusive. A task is complete once its
    logged time reaches its estimate. Team utilization is the mean over all
    members, with members lacking capacity counted as 0%.
    """
    today = today or date.today()
    holidays = list(master_holidays)
    settings = sprint.settings
    start, end = settings.start_date, settings.end_date or settings.start_date
    excluded = sprint_exclusion_set(settings, holidays)

    total_days = count_working_days(start, end, excluded)
    elapsed = 0 if today < start else count_working_days(start, min(today, end), excluded)
    left = 0 if today > end else count_working_days(max(today, start), end, excluded)

    hours_remaining = sum(max(t.story_points - (t.time_spent or 0.0), 0.0) for t in sprint.tasks)
    completed = sum(
        1 for t in sprint.tasks
        if t.story_points > 0 and (t.time_spent or 0.0) >= t.story_points
    )

    capacity = calculate_capacity_summary(sprint, holidays)
    average = sum(c.utilization for c in capacity) / len(capacity) if capacity else 0.0

    return SprintProgress(
        percent_elapsed=round(elapsed / total_days * 100, 1) if total_days > 0 else 0.0,
        working_days_elapsed=elapsed,
        total_working_days=total_days,
        working_days_left=left,
        hours_remaining=round(hours_remaining, 1),
        completed_tasks=completed,
        total_tasks=len(sprint.tasks),
        average_utilization=round(average, 1),
        utilization_status=team_utilization_status(average),
    )
