import datetime as dt
from datetime import date
from typing import List, Optional

from pydantic import BaseModel, Field

from sprintpilot.domain.models import Role, Task
from sprintpilot.planning.metrics import RoleUtilization, VelocityPoint, WorkMixPoint

# --- Sprint ---

class SprintStart(BaseModel):
    start_date: Optional[date] = None
    duration: Optional[int] = Field(None, ge=1, description="Working days")

class TemplateStart(BaseModel):
    start_date: Optional[date] = None

class EndDatePreview(BaseModel):
    end_date: date
    suggested_freeze_date: date

# --- Team ---

class MemberCreate(BaseModel):
    name: str = Field(..., min_length=1)
    role: Role = Role.BACKEND
    daily_capacity: float = Field(..., gt=0)
    leave_days: List[date] = Field(default_factory=list)

class MemberUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1)
    role: Optional[Role] = None
    daily_capacity: Optional[float] = Field(None, gt=0)
    leave_days: Optional[List[date]] = None

class LeaveDay(BaseModel):
    date: dt.date

# --- Tasks ---

class TaskImport(BaseModel):
    tasks: List[Task]
    replace: bool = True

class TaskAssignment(BaseModel):
    assignee_id: Optional[str] = None

class TaskProgress(BaseModel):
    start_date: Optional[date] = None
    due_date: Optional[date] = None
    time_spent: Optional[float] = Field(None, ge=0)

# --- Holidays ---

class HolidayCreate(BaseModel):
    name: str = Field(..., min_length=1)
    date: dt.date

# --- History ---

class HistorySelection(BaseModel):
    sprint_ids: List[str] = Field(default_factory=list, description="Empty selects every archived sprint")

class HistoryMetricsResponse(BaseModel):
    velocity: List[VelocityPoint]
    work_mix: List[WorkMixPoint]
    roles: List[RoleUtilization]

# --- AI ---

class GeneratedText(BaseModel):
    content: str

class InsightsRequest(HistorySelection):
    pass
