"""
Capacity Aggregator

Turns a sprint (settings, team, tasks) and the master holiday list into one
CapacitySummary per team member.

    total_working_days = working days in [start, end] minus all holidays
    member capacity    = (total_working_days - leave days) * daily capacity
    utilization        = assigned hours / capacity * 100

Leave days are not clamped against the sprint length, so an impossible
schedule shows up as negative capacity.
"""

from typing import Iterable, List, Optional, Set
from datetime import date

from sprintpilot.domain.models import (
    CapacityStatus,
    CapacitySummary,
    MasterHoliday,
    SprintData,
    SprintSettings,
    Task,
    TeamMember,
)
from sprintpilot.planning.calendar import count_working_days

OVERLOADED_THRESHOLD = 100.0
UNDERUTILIZED_THRESHOLD = 70.0


def sprint_exclusion_set(
    settings: SprintSettings,
    master_holidays: Iterable[MasterHoliday] = (),
) -> Set[date]:
    """Union of sprint-specific and master holiday dates."""
    excluded = set(settings.public_holidays)
    excluded.update(h.date for h in master_holidays)
    return excluded


def utilization_percent(assigned_hours: float, total_capacity: float) -> float:
    if total_capacity > 0:
        return (assigned_hours / total_capacity) * 100
    return 0.0


def classify_utilization(utilization: float) -> CapacityStatus:
    if utilization > OVERLOADED_THRESHOLD:
        return CapacityStatus.OVERLOADED
    if utilization < UNDERUTILIZED_THRESHOLD:
        return CapacityStatus.UNDERUTILIZED
    return CapacityStatus.OK


def assigned_hours_for(member_id: str, tasks: Iterable[Task]) -> float:
    return sum(t.story_points for t in tasks if t.assignee_id == member_id)


def member_capacity(
    member: TeamMember,
    total_working_days: int,
    tasks: Iterable[Task],
) -> CapacitySummary:
    member_working_days = total_working_days - len(member.leave_days)
    total_capacity = member_working_days * member.daily_capacity
    assigned = assigned_hours_for(member.id, tasks)
    utilization = utilization_percent(assigned, total_capacity)

    return CapacitySummary(
        member_id=member.id,
        member_name=member.name,
        total_capacity=total_capacity,
        assigned_hours=assigned,
        remaining_hours=total_capacity - assigned,
        utilization=utilization,
        status=classify_utilization(utilization),
    )


def calculate_capacity_summary(
    sprint: Optional[SprintData],
    master_holidays: Iterable[MasterHoliday] = (),
) -> List[CapacitySummary]:
    """
    Per-member capacity for a sprint.

    Args:
        sprint: Sprint with settings, team and tasks (None yields [])
        master_holidays: Global holidays to exclude

    Returns:
        One CapacitySummary per team member, in roster order. Tasks assigned
        to ids that are not on the roster are ignored.
    """
    if sprint is None:
        return []

    settings = sprint.settings
    if settings.end_date is None:
        # end_date is derived; a sprint that has never been saved has no window
        total_working_days = 0
    else:
        excluded = sprint_exclusion_set(settings, master_holidays)
        total_working_days = count_working_days(settings.start_date, settings.end_date, excluded)

    return [member_capacity(m, total_working_days, sprint.tasks) for m in sprint.team]
