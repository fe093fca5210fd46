class SprintPilotError(Exception):
    """Base class for service-level errors."""


class NotFoundError(SprintPilotError):
    pass


class SprintNotFoundError(NotFoundError):
    def __init__(self, sprint_id: str | None = None):
        self.sprint_id = sprint_id
        super().__init__(f"Sprint {sprint_id} not found" if sprint_id else "No active sprint")


class MemberNotFoundError(NotFoundError):
    def __init__(self, member_id: str):
        self.member_id = member_id
        super().__init__(f"Team member {member_id} not found")


class TaskNotFoundError(NotFoundError):
    def __init__(self, task_id: str):
        self.task_id = task_id
        super().__init__(f"Task {task_id} not found")


class HolidayNotFoundError(NotFoundError):
    def __init__(self, holiday_id: str):
        self.holiday_id = holiday_id
        super().__init__(f"Holiday {holiday_id} not found")


class MeetingNotFoundError(NotFoundError):
    def __init__(self, meeting_type: str):
        self.meeting_type = meeting_type
        super().__init__(f"No {meeting_type} meeting scheduled for this sprint")


class DuplicateHolidayError(SprintPilotError):
    def __init__(self, holiday_date: str):
        self.holiday_date = holiday_date
        super().__init__(f"A holiday already exists on {holiday_date}")


class InvalidUpdateError(SprintPilotError):
    def __init__(self, entity: str, errors: list):
        self.entity = entity
        self.errors = errors
        fields = ", ".join(".".join(str(p) for p in e.get("loc", ())) for e in errors) or "unknown"
        super().__init__(f"Invalid {entity} update: {fields}")
