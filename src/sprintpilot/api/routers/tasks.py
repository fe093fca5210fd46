from typing import Annotated, List

from fastapi import APIRouter, Depends, HTTPException

from sprintpilot.api import schemas
from sprintpilot.api.dependencies import get_sprint_service
from sprintpilot.domain.models import Task, TaskRisk
from sprintpilot.engine.errors import NotFoundError
from sprintpilot.engine.sprint_service import SprintService

router = APIRouter()


@router.get("/", response_model=List[Task])
def list_tasks(
    service: Annotated[SprintService, Depends(get_sprint_service)],
):
    try:
        return service.get_current_sprint().tasks
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.post("/import", response_model=List[Task])
def import_tasks(
    payload: schemas.TaskImport,
    service: Annotated[SprintService, Depends(get_sprint_service)],
):
    """
    Import tasks into the backlog, replacing it unless replace is false.
    """
    try:
        return service.import_tasks(payload.tasks, replace=payload.replace)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.get("/risks", response_model=List[TaskRisk])
def get_risks(
    service: Annotated[SprintService, Depends(get_sprint_service)],
):
    """Risk of every task that has a start date, due date and estimate."""
    try:
        return service.analyze_risks()
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.put("/{task_id}/assignee", response_model=Task)
def assign_task(
    task_id: str,
    assignment: schemas.TaskAssignment,
    service: Annotated[SprintService, Depends(get_sprint_service)],
):
    try:
        return service.assign_task(task_id, assignment.assignee_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.put("/{task_id}/progress", response_model=Task)
def update_progress(
    task_id: str,
    progress: schemas.TaskProgress,
    service: Annotated[SprintService, Depends(get_sprint_service)],
):
    try:
        return service.update_task_progress(
            task_id,
            start_date=progress.start_date,
            due_date=progress.due_date,
            time_spent=progress.time_spent,
        )
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
