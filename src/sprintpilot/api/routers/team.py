from datetime import date
from typing import Annotated, List

from fastapi import APIRouter, Depends, HTTPException, status

from sprintpilot.api import schemas
from sprintpilot.api.dependencies import get_sprint_service
from sprintpilot.domain.models import TeamMember
from sprintpilot.engine.errors import InvalidUpdateError, NotFoundError
from sprintpilot.engine.sprint_service import SprintService

router = APIRouter()


@router.get("/", response_model=List[TeamMember])
def list_members(
    service: Annotated[SprintService, Depends(get_sprint_service)],
):
    try:
        return service.get_current_sprint().team
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.post("/", response_model=TeamMember, status_code=status.HTTP_201_CREATED)
def add_member(
    member: schemas.MemberCreate,
    service: Annotated[SprintService, Depends(get_sprint_service)],
):
    """
    Add a team member to the current sprint.
    """
    try:
        return service.add_member(member.name, member.role, member.daily_capacity, member.leave_days)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.put("/{member_id}", response_model=TeamMember)
def update_member(
    member_id: str,
    member_update: schemas.MemberUpdate,
    service: Annotated[SprintService, Depends(get_sprint_service)],
):
    """
    Partially update a member. An explicit null for a required field is rejected.
    """
    try:
        return service.update_member(member_id, member_update.model_dump(exclude_unset=True))
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except InvalidUpdateError as e:
        raise HTTPException(status_code=422, detail=str(e))


@router.delete("/{member_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_member(
    member_id: str,
    service: Annotated[SprintService, Depends(get_sprint_service)],
):
    """
    Remove a member. Tasks assigned to them keep the assignee id.
    """
    try:
        service.remove_member(member_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return None


@router.post("/{member_id}/leave", response_model=TeamMember)
def add_leave_day(
    member_id: str,
    leave: schemas.LeaveDay,
    service: Annotated[SprintService, Depends(get_sprint_service)],
):
    try:
        return service.add_leave_day(member_id, leave.date)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.delete("/{member_id}/leave/{leave_date}", response_model=TeamMember)
def remove_leave_day(
    member_id: str,
    leave_date: date,
    service: Annotated[SprintService, Depends(get_sprint_service)],
):
    try:
        return service.remove_leave_day(member_id, leave_date)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
