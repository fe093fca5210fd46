"""
SprintPilot Planning Core

Pure functions over sprint data:
- calendar: working-day counting and advancing
- capacity: per-member capacity and utilization
- risk: per-task progress risk
- metrics: trends across archived sprints
"""

from .calendar import (
    add_working_days,
    code_freeze_date,
    count_working_days,
    is_working_day,
    sprint_end_date,
)
from .capacity import calculate_capacity_summary, sprint_exclusion_set
from .risk import analyze_task_risks, classify_task_risk
from .metrics import (
    current_sprint_progress,
    history_metrics,
    role_utilization,
    velocity_trend,
    work_mix_trend,
)

__all__ = [
    # Calendar
    "add_working_days",
    "code_freeze_date",
    "count_working_days",
    "is_working_day",
    "sprint_end_date",
    # Capacity
    "calculate_capacity_summary",
    "sprint_exclusion_set",
    # Risk
    "analyze_task_risks",
    "classify_task_risk",
    # History and progress
    "current_sprint_progress",
    "history_metrics",
    "role_utilization",
    "velocity_trend",
    "work_mix_trend",
]
