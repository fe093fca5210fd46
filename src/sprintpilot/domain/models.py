"""
Domain models for sprint planning.

Team members, sprint settings, holidays and tasks are the inputs of the
planning core; CapacitySummary and TaskRisk are its derived outputs and are
never persisted on their own.
"""

import datetime as dt
from datetime import date
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Role(str, Enum):
    """Team member role. Labeling only, no effect on capacity."""
    BACKEND = "Backend"
    FRONTEND = "Frontend"
    QA = "QA"
    DEVOPS = "DevOps"
    MANAGER = "Manager"
    DESIGNER = "Designer"


class MeetingType(str, Enum):
    PLANNING = "Planning"
    GROOMING = "Grooming"
    RETROSPECTIVE = "Retrospective"


class TaskCategory(str, Enum):
    """Work category. Unrecognised values collapse into OTHER."""
    FEATURE = "FEATURE"
    TECH_DEBT = "TECH_DEBT"
    PROD_ISSUE = "PROD_ISSUE"
    OTHER = "OTHER"

    @classmethod
    def parse(cls, value: object) -> "TaskCategory":
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            normalized = value.strip().upper().replace("-", "_").replace(" ", "_")
            for member in cls:
                if member.value == normalized:
                    return member
        return cls.OTHER


class CapacityStatus(str, Enum):
    OK = "OK"
    OVERLOADED = "Overloaded"
    UNDERUTILIZED = "Underutilized"


class RiskLevel(str, Enum):
    ON_TRACK = "On Track"
    AT_RISK = "At Risk"
    OFF_TRACK = "Off Track"


# --- Team ---

class TeamMember(BaseModel):
    id: str
    name: str = Field(..., min_length=1)
    role: Role = Role.BACKEND
    daily_capacity: float = Field(..., gt=0, description="Hours per working day")
    leave_days: List[date] = Field(default_factory=list)


# --- Sprint ---

class SprintDeployment(BaseModel):
    id: str
    name: str
    date: dt.date


class SprintMeeting(BaseModel):
    id: str
    type: MeetingType
    date: dt.date
    time: str = Field("10:00", pattern=r"^\d{2}:\d{2}$")
    duration: int = Field(60, gt=0, description="Minutes")


class SprintSettings(BaseModel):
    start_date: date
    duration: int = Field(..., ge=1, description="Working days")
    # Derived from start_date + duration; recomputed by the sprint service
    end_date: Optional[date] = None
    freeze_date: Optional[date] = None
    public_holidays: List[date] = Field(default_factory=list)
    deployments: List[SprintDeployment] = Field(default_factory=list)
    meetings: List[SprintMeeting] = Field(default_factory=list)


class MasterHoliday(BaseModel):
    id: str
    name: str
    date: dt.date


# --- Tasks ---

class Task(BaseModel):
    id: str
    key: str
    summary: str = ""
    story_points: float = Field(0, ge=0, description="Estimated hours")
    category: TaskCategory = TaskCategory.OTHER
    assignee_id: Optional[str] = None
    start_date: Optional[date] = None
    due_date: Optional[date] = None
    time_spent: Optional[float] = Field(None, ge=0, description="Hours logged")

    @field_validator("category", mode="before")
    @classmethod
    def _coerce_category(cls, value: object) -> TaskCategory:
        return TaskCategory.parse(value)


class SprintData(BaseModel):
    """A sprint with its roster and backlog; the unit of persistence."""
    id: str
    settings: SprintSettings
    team: List[TeamMember] = Field(default_factory=list)
    tasks: List[Task] = Field(default_factory=list)

    def find_member(self, member_id: str) -> Optional[TeamMember]:
        return next((m for m in self.team if m.id == member_id), None)

    def find_task(self, task_id: str) -> Optional[Task]:
        return next((t for t in self.tasks if t.id == task_id), None)


# --- Derived ---

class CapacitySummary(BaseModel):
    member_id: str
    member_name: str
    total_capacity: float
    assigned_hours: float
    remaining_hours: float
    utilization: float
    status: CapacityStatus

    model_config = ConfigDict(frozen=True)


class TaskRisk(BaseModel):
    task_id: str
    risk_level: RiskLevel
    reason: str

    model_config = ConfigDict(frozen=True)


class TimelineEventType(str, Enum):
    START = "start"
    END = "end"
    HOLIDAY = "holiday"
    DEPLOYMENT = "deployment"
    FREEZE = "freeze"
    MEETING = "meeting"


class TimelineEvent(BaseModel):
    date: dt.date
    name: str
    type: TimelineEventType
    is_master: bool = False
    time: Optional[str] = None
