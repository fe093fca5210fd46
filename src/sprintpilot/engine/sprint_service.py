"""
Sprint Service

Orchestrates the current sprint: settings and derived end date, team roster,
task backlog, capacity and risk views, and the archive of completed sprints.

Usage:
    service = SprintService(repository, holiday_service)

    sprint = await service.start_blank_sprint()
    service.add_member("Alice", Role.FRONTEND, daily_capacity=6)
    capacity = service.capacity_summary()
"""

import uuid
from contextlib import contextmanager
from datetime import date, datetime
from typing import Any, Callable, Dict, Iterable, Iterator, List, Optional, Tuple

from pydantic import ValidationError

from sprintpilot.domain.models import (
    CapacitySummary,
    MeetingType,
    Role,
    SprintData,
    SprintMeeting,
    SprintSettings,
    Task,
    TaskRisk,
    TeamMember,
    TimelineEvent,
    TimelineEventType,
)
from sprintpilot.engine.errors import (
    InvalidUpdateError,
    MeetingNotFoundError,
    MemberNotFoundError,
    SprintNotFoundError,
    TaskNotFoundError,
)
from sprintpilot.engine.holiday_service import HolidayService
from sprintpilot.planning.calendar import code_freeze_date, sprint_end_date
from sprintpilot.planning.capacity import calculate_capacity_summary
from sprintpilot.planning.metrics import HistoryMetrics, SprintProgress, current_sprint_progress, history_metrics
from sprintpilot.planning.risk import analyze_task_risks
from sprintpilot.platform.config import settings as app_settings
from sprintpilot.platform.logging import bind_sprint_context, get_logger
from sprintpilot.storage.repositories.sprint_repository import SprintRepository

logger = get_logger(__name__)

DEFAULT_FREEZE_DAYS_BEFORE_END = 2


def _new_id(prefix: str) -> str:
    return f"{prefix}-{uuid.uuid4().hex[:12]}"


class SprintService:
    def __init__(
        self,
        repository: SprintRepository,
        holiday_service: HolidayService,
        today: Callable[[], date] = date.today,
    ):
        self.repository = repository
        self.holidays = holiday_service
        self.today = today

    # =========================================================================
    # CURRENT SPRINT
    # =========================================================================

    def find_current_sprint(self) -> Optional[SprintData]:
        return self.repository.get_current_sprint()

    def get_current_sprint(self) -> SprintData:
        sprint = self.repository.get_current_sprint()
        if sprint is None:
            raise SprintNotFoundError()
        return sprint

    def _save(self, sprint: SprintData) -> SprintData:
        self.repository.save_current_sprint(sprint)
        return sprint

    @contextmanager
    def _editing(self) -> Iterator[SprintData]:
        """
        Load the current sprint under the write lock and save it when the block
        finishes. Nothing is saved if the block raises.
        """
        with self.repository.locked():
            sprint = self.get_current_sprint()
            bind_sprint_context(sprint.id)
            yield sprint
            self._save(sprint)

    async def calculate_end_date(self, sprint_settings: SprintSettings) -> date:
        """Derive the end date from start date, duration and every known holiday."""
        excluded = await self.holidays.exclusion_dates(sprint_settings)
        return sprint_end_date(sprint_settings.start_date, sprint_settings.duration, excluded)

    async def suggest_freeze_date(
        self,
        sprint_settings: SprintSettings,
        days_before: int = DEFAULT_FREEZE_DAYS_BEFORE_END,
    ) -> date:
        _, freeze = await self.preview_dates(sprint_settings, days_before)
        return freeze

    async def preview_dates(
        self,
        sprint_settings: SprintSettings,
        days_before: int = DEFAULT_FREEZE_DAYS_BEFORE_END,
    ) -> Tuple[date, date]:
        """
        End date and suggested code freeze for the given settings.

        Both dates come from a single exclusion set, so the holiday API is
        asked once.
        """
        excluded = await self.holidays.exclusion_dates(sprint_settings)
        end = sprint_end_date(sprint_settings.start_date, sprint_settings.duration, excluded)
        return end, code_freeze_date(end, days_before, excluded)

    async def start_blank_sprint(
        self,
        start_date: Optional[date] = None,
        duration: Optional[int] = None,
    ) -> SprintData:
        """Replace the current sprint with an empty one."""
        sprint_settings = SprintSettings(
            start_date=start_date or self.today(),
            duration=duration or app_settings.DEFAULT_SPRINT_DURATION,
        )
        sprint_settings.end_date = await self.calculate_end_date(sprint_settings)

        sprint = SprintData(id=_new_id("sprint"), settings=sprint_settings)
        bind_sprint_context(sprint.id)
        logger.info("Started sprint", sprint_id=sprint.id, start=sprint_settings.start_date.isoformat(),
                    end=sprint_settings.end_date.isoformat())
        return self._save(sprint)

    async def start_from_template(
        self,
        template_sprint_id: str,
        start_date: Optional[date] = None,
    ) -> SprintData:
        """
        Start a sprint that reuses an archived sprint's team and backlog.

        Tasks get fresh ids and lose their assignee, dates and logged time.
        Leave days are cleared since they belonged to the old sprint window.
        """
        template = self.repository.get_archived_sprint(template_sprint_id)
        if template is None:
            raise SprintNotFoundError(template_sprint_id)

        sprint = await self.start_blank_sprint(start_date, template.settings.duration)
        sprint.team = [m.model_copy(update={"leave_days": []}, deep=True) for m in template.team]
        sprint.tasks = [
            t.model_copy(update={
                "id": _new_id("task"),
                "assignee_id": None,
                "start_date": None,
                "due_date": None,
                "time_spent": None,
            })
            for t in template.tasks
        ]
        logger.info("Created sprint from template", sprint_id=sprint.id, template_id=template_sprint_id,
                    members=len(sprint.team), tasks=len(sprint.tasks))
        return self._save(sprint)

    async def update_settings(self, sprint_settings: SprintSettings) -> SprintData:
        """Save new settings. The end date is always re-derived, never taken from input."""
        self.get_current_sprint()
        sprint_settings = sprint_settings.model_copy(
            update={"public_holidays": sorted(set(sprint_settings.public_holidays))}
        )
        # Holiday lookup happens outside the write lock
        sprint_settings.end_date = await self.calculate_end_date(sprint_settings)

        with self._editing() as sprint:
            sprint.settings = sprint_settings

        logger.info("Updated sprint settings", sprint_id=sprint.id, end=sprint_settings.end_date.isoformat())
        return sprint

    def complete_sprint(self) -> SprintData:
        """Archive the current sprint and clear it."""
        with self.repository.locked():
            sprint = self.get_current_sprint()
            bind_sprint_context(sprint.id)
            self.repository.archive_sprint(sprint)
            self.repository.save_current_sprint(None)
        logger.info("Completed sprint", sprint_id=sprint.id)
        return sprint

    def get_meeting(self, meeting_type: MeetingType) -> SprintMeeting:
        sprint = self.get_current_sprint()
        meeting = next((m for m in sprint.settings.meetings if m.type == meeting_type), None)
        if meeting is None:
            raise MeetingNotFoundError(meeting_type.value)
        return meeting

    # =========================================================================
    # TEAM
    # =========================================================================

    def _get_member(self, sprint: SprintData, member_id: str) -> TeamMember:
        member = sprint.find_member(member_id)
        if member is None:
            raise MemberNotFoundError(member_id)
        return member

    def add_member(
        self,
        name: str,
        role: Role,
        daily_capacity: float,
        leave_days: Iterable[date] = (),
    ) -> TeamMember:
        member = TeamMember(
            id=_new_id("member"),
            name=name,
            role=role,
            daily_capacity=daily_capacity,
            leave_days=sorted(set(leave_days)),
        )
        with self._editing() as sprint:
            sprint.team.append(member)
        logger.info("Added team member", sprint_id=sprint.id, member_id=member.id)
        return member

    def update_member(self, member_id: str, updates: Dict[str, Any]) -> TeamMember:
        """
        Apply a partial update. The merged member is validated again, so an
        explicit null on a required field raises InvalidUpdateError.
        """
        with self._editing() as sprint:
            member = self._get_member(sprint, member_id)

            data = member.model_dump()
            data.update({k: v for k, v in updates.items() if k != "id"})
            try:
                updated = TeamMember.model_validate(data)
            except ValidationError as e:
                raise InvalidUpdateError("team member", e.errors()) from e

            sprint.team = [updated if m.id == member_id else m for m in sprint.team]
        return updated

    def remove_member(self, member_id: str) -> None:
        """Drop a member. Their tasks keep the stale assignee and simply stop counting."""
        with self._editing() as sprint:
            self._get_member(sprint, member_id)
            sprint.team = [m for m in sprint.team if m.id != member_id]
        logger.info("Removed team member", sprint_id=sprint.id, member_id=member_id)

    def add_leave_day(self, member_id: str, day: date) -> TeamMember:
        with self._editing() as sprint:
            member = self._get_member(sprint, member_id)
            if day not in member.leave_days:
                member.leave_days = sorted([*member.leave_days, day])
        return member

    def remove_leave_day(self, member_id: str, day: date) -> TeamMember:
        with self._editing() as sprint:
            member = self._get_member(sprint, member_id)
            member.leave_days = [d for d in member.leave_days if d != day]
        return member

    # =========================================================================
    # TASKS
    # =========================================================================

    def _get_task(self, sprint: SprintData, task_id: str) -> Task:
        task = sprint.find_task(task_id)
        if task is None:
            raise TaskNotFoundError(task_id)
        return task

    def import_tasks(self, tasks: List[Task], replace: bool = True) -> List[Task]:
        """
        Load tasks into the sprint backlog.

        Args:
            tasks: Tasks to import
            replace: Replace the backlog (default) or append to it; appended
                tasks replace existing ones with the same id

        Returns:
            The resulting backlog
        """
        with self._editing() as sprint:
            if replace:
                sprint.tasks = list(tasks)
            else:
                incoming = {t.id for t in tasks}
                sprint.tasks = [t for t in sprint.tasks if t.id not in incoming] + list(tasks)

        logger.info("Imported tasks", sprint_id=sprint.id, count=len(tasks), replace=replace)
        return sprint.tasks

    def assign_task(self, task_id: str, assignee_id: Optional[str]) -> Task:
        with self._editing() as sprint:
            task = self._get_task(sprint, task_id)
            if assignee_id is not None:
                self._get_member(sprint, assignee_id)
            task.assignee_id = assignee_id
        return task

    def update_task_progress(
        self,
        task_id: str,
        start_date: Optional[date] = None,
        due_date: Optional[date] = None,
        time_spent: Optional[float] = None,
    ) -> Task:
        """Record declared progress. Fields left as None are unchanged."""
        with self._editing() as sprint:
            task = self._get_task(sprint, task_id)
            if start_date is not None:
                task.start_date = start_date
            if due_date is not None:
                task.due_date = due_date
            if time_spent is not None:
                task.time_spent = time_spent
        return task

    # =========================================================================
    # DERIVED VIEWS
    # =========================================================================

    def capacity_summary(self, sprint: Optional[SprintData] = None) -> List[CapacitySummary]:
        """Capacity of the given sprint, or of the current one."""
        if sprint is None:
            sprint = self.find_current_sprint()
        return calculate_capacity_summary(sprint, self.holidays.list_master_holidays())

    def analyze_risks(self, now: Optional[datetime] = None) -> List[TaskRisk]:
        sprint = self.get_current_sprint()
        risks = analyze_task_risks(sprint.tasks, now)
        skipped = len(sprint.tasks) - len(risks)
        if skipped:
            logger.info("Skipped tasks without dates or estimate", sprint_id=sprint.id, skipped=skipped)
        return risks

    def current_metrics(self, today: Optional[date] = None) -> SprintProgress:
        """Elapsed and remaining working days, open hours and team utilization of the current sprint."""
        sprint = self.get_current_sprint()
        return current_sprint_progress(sprint, self.holidays.list_master_holidays(), today or self.today())

    def timeline(self) -> List[TimelineEvent]:
        """Start, end, holidays in the window, deployments, freeze and meetings, by date then time."""
        sprint = self.get_current_sprint()
        s = sprint.settings
        end = s.end_date or s.start_date

        events = [
            TimelineEvent(date=s.start_date, name="Sprint Start", type=TimelineEventType.START),
            TimelineEvent(date=end, name="Sprint End", type=TimelineEventType.END),
        ]
        events += [
            TimelineEvent(date=d, name="Holiday (Sprint)", type=TimelineEventType.HOLIDAY)
            for d in s.public_holidays
        ]
        events += [
            TimelineEvent(date=h.date, name=h.name, type=TimelineEventType.HOLIDAY, is_master=True)
            for h in self.holidays.master_holidays_between(s.start_date, end)
        ]
        events += [
            TimelineEvent(date=d.date, name=d.name, type=TimelineEventType.DEPLOYMENT)
            for d in s.deployments
        ]
        if s.freeze_date:
            events.append(TimelineEvent(date=s.freeze_date, name="Code Freeze", type=TimelineEventType.FREEZE))
        events += [
            TimelineEvent(date=m.date, name=f"Meeting: {m.type.value}", type=TimelineEventType.MEETING, time=m.time)
            for m in s.meetings
        ]

        return sorted(events, key=lambda e: (e.date, e.time or "00:00"))

    # =========================================================================
    # HISTORY
    # =========================================================================

    def list_history(self) -> List[SprintData]:
        return self.repository.get_history()

    def get_archived_sprint(self, sprint_id: str) -> SprintData:
        sprint = self.repository.get_archived_sprint(sprint_id)
        if sprint is None:
            raise SprintNotFoundError(sprint_id)
        return sprint

    def select_history(self, sprint_ids: Optional[Iterable[str]] = None) -> List[SprintData]:
        """Archived sprints in archive order, optionally restricted to the given ids."""
        history = self.repository.get_history()
        if not sprint_ids:
            return history
        wanted = set(sprint_ids)
        return [s for s in history if s.id in wanted]

    def history_metrics(self, sprint_ids: Optional[Iterable[str]] = None) -> HistoryMetrics:
        selected = self.select_history(sprint_ids)
        return history_metrics(selected, self.holidays.list_master_holidays())
