"""
Task Risk Classifier

Compares how much of a task's estimate has been logged against how much of
its start-to-due window has elapsed.

- past due and not complete                      -> Off Track
- > 60% of the window elapsed and completion
  below 75% of the elapsed ratio                  -> At Risk
- anything else (including a zero-length window)  -> On Track

Dates are read as midnight of that day. `story_points > 0` is a precondition;
`analyze_task_risks` skips tasks that cannot be classified.
"""

from datetime import date, datetime, time
from typing import Iterable, List, Optional

from sprintpilot.domain.models import RiskLevel, Task, TaskRisk

LATE_WINDOW_RATIO = 0.6
PACE_TOLERANCE = 0.75

OFF_TRACK_REASON = "Task is past its due date but is not complete."
AT_RISK_REASON = "Progress is significantly lagging behind the timeline."
ON_TRACK_REASON = "Progress is aligned with the timeline."


def _midnight(day: date) -> datetime:
    return datetime.combine(day, time.min)


def classify_task_risk(task: Task, now: Optional[datetime] = None) -> TaskRisk:
    """
    Classify one task against the reference clock.

    Args:
        task: Task with start_date, due_date and story_points > 0
        now: Reference clock; defaults to the current local time

    Returns:
        TaskRisk for the task
    """
    now = now or datetime.now()
    start = _midnight(task.start_date)
    due = _midnight(task.due_date)
    time_spent = task.time_spent or 0.0

    if now > due and time_spent < task.story_points:
        return TaskRisk(task_id=task.id, risk_level=RiskLevel.OFF_TRACK, reason=OFF_TRACK_REASON)

    total_window = (due - start).total_seconds()
    elapsed = (now - start).total_seconds()

    if total_window <= 0:
        return TaskRisk(task_id=task.id, risk_level=RiskLevel.ON_TRACK, reason=ON_TRACK_REASON)

    elapsed_ratio = max(0.0, elapsed / total_window)
    completed_ratio = time_spent / task.story_points

    if elapsed_ratio > LATE_WINDOW_RATIO and completed_ratio < elapsed_ratio * PACE_TOLERANCE:
        return TaskRisk(task_id=task.id, risk_level=RiskLevel.AT_RISK, reason=AT_RISK_REASON)

    return TaskRisk(task_id=task.id, risk_level=RiskLevel.ON_TRACK, reason=ON_TRACK_REASON)


def is_classifiable(task: Task) -> bool:
    return task.start_date is not None and task.due_date is not None and task.story_points > 0


def analyze_task_risks(tasks: Iterable[Task], now: Optional[datetime] = None) -> List[TaskRisk]:
    """Classify every task with both dates and a positive estimate."""
    now = now or datetime.now()
    return [classify_task_risk(t, now) for t in tasks if is_classifiable(t)]
