from typing import Annotated, List

from fastapi import APIRouter, Depends, HTTPException

from sprintpilot.api import schemas
from sprintpilot.api.dependencies import get_sprint_service
from sprintpilot.domain.models import CapacitySummary, SprintData
from sprintpilot.engine.errors import NotFoundError
from sprintpilot.engine.sprint_service import SprintService

router = APIRouter()


@router.get("/", response_model=List[SprintData])
def list_history(
    service: Annotated[SprintService, Depends(get_sprint_service)],
):
    """Archived sprints, oldest first."""
    return service.list_history()


@router.post("/metrics", response_model=schemas.HistoryMetricsResponse)
def get_metrics(
    selection: schemas.HistorySelection,
    service: Annotated[SprintService, Depends(get_sprint_service)],
):
    """
    Velocity, work mix and role utilization over the selected sprints.
    """
    return service.history_metrics(selection.sprint_ids)


@router.get("/{sprint_id}", response_model=SprintData)
def get_archived_sprint(
    sprint_id: str,
    service: Annotated[SprintService, Depends(get_sprint_service)],
):
    try:
        return service.get_archived_sprint(sprint_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.get("/{sprint_id}/capacity", response_model=List[CapacitySummary])
def get_archived_capacity(
    sprint_id: str,
    service: Annotated[SprintService, Depends(get_sprint_service)],
):
    try:
        return service.capacity_summary(service.get_archived_sprint(sprint_id))
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
