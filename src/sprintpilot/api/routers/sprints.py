from typing import Annotated, List

from fastapi import APIRouter, Depends, HTTPException, status

from sprintpilot.api import schemas
from sprintpilot.api.dependencies import get_sprint_service
from sprintpilot.domain.models import CapacitySummary, SprintData, SprintSettings, TimelineEvent
from sprintpilot.engine.errors import NotFoundError
from sprintpilot.engine.sprint_service import SprintService
from sprintpilot.planning.metrics import SprintProgress

router = APIRouter()


@router.get("/", response_model=SprintData)
def get_current_sprint(
    service: Annotated[SprintService, Depends(get_sprint_service)],
):
    """Get the sprint being planned."""
    try:
        return service.get_current_sprint()
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.post("/", response_model=SprintData, status_code=status.HTTP_201_CREATED)
async def start_blank_sprint(
    payload: schemas.SprintStart,
    service: Annotated[SprintService, Depends(get_sprint_service)],
):
    """
    Start an empty sprint, replacing the current one.
    """
    return await service.start_blank_sprint(payload.start_date, payload.duration)


@router.post("/from-template/{sprint_id}", response_model=SprintData, status_code=status.HTTP_201_CREATED)
async def start_from_template(
    sprint_id: str,
    payload: schemas.TemplateStart,
    service: Annotated[SprintService, Depends(get_sprint_service)],
):
    """
    Start a sprint that reuses the team and backlog of an archived sprint.
    """
    try:
        return await service.start_from_template(sprint_id, payload.start_date)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.put("/settings", response_model=SprintData)
async def update_settings(
    sprint_settings: SprintSettings,
    service: Annotated[SprintService, Depends(get_sprint_service)],
):
    """Save settings. The end date is always recomputed."""
    try:
        return await service.update_settings(sprint_settings)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.post("/end-date", response_model=schemas.EndDatePreview)
async def preview_end_date(
    sprint_settings: SprintSettings,
    service: Annotated[SprintService, Depends(get_sprint_service)],
):
    """Compute the end date and a suggested code freeze without saving anything."""
    end_date, freeze_date = await service.preview_dates(sprint_settings)
    return schemas.EndDatePreview(end_date=end_date, suggested_freeze_date=freeze_date)


@router.post("/complete", response_model=SprintData)
def complete_sprint(
    service: Annotated[SprintService, Depends(get_sprint_service)],
):
    """Archive the current sprint into history."""
    try:
        return service.complete_sprint()
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.get("/capacity", response_model=List[CapacitySummary])
def get_capacity(
    service: Annotated[SprintService, Depends(get_sprint_service)],
):
    """Capacity per member. Empty when no sprint is active."""
    return service.capacity_summary()


@router.get("/metrics", response_model=SprintProgress)
def get_current_metrics(
    service: Annotated[SprintService, Depends(get_sprint_service)],
):
    """Progress of the current sprint as of today."""
    try:
        return service.current_metrics()
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.get("/timeline", response_model=List[TimelineEvent])
def get_timeline(
    service: Annotated[SprintService, Depends(get_sprint_service)],
):
    try:
        return service.timeline()
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
