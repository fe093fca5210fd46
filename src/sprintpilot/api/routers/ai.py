from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException

from sprintpilot.ai.content_generator import ContentGenerationError, ContentGenerator, MeetingInvite
from sprintpilot.api import schemas
from sprintpilot.api.dependencies import get_content_generator, get_sprint_service
from sprintpilot.domain.models import MeetingType
from sprintpilot.engine.errors import NotFoundError
from sprintpilot.engine.sprint_service import SprintService
from sprintpilot.platform.logging import get_logger

logger = get_logger(__name__)

router = APIRouter()


@router.post("/sprint-summary", response_model=schemas.GeneratedText)
def sprint_summary(
    service: Annotated[SprintService, Depends(get_sprint_service)],
    generator: Annotated[ContentGenerator, Depends(get_content_generator)],
):
    """Prose summary of the current sprint."""
    try:
        sprint = service.get_current_sprint()
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    content = generator.generate_sprint_summary(sprint, service.capacity_summary(sprint))
    return schemas.GeneratedText(content=content)


@router.post("/risk-summary", response_model=schemas.GeneratedText)
def risk_summary(
    service: Annotated[SprintService, Depends(get_sprint_service)],
    generator: Annotated[ContentGenerator, Depends(get_content_generator)],
):
    """
    Summarize the tasks that are at risk or off track.
    """
    try:
        sprint = service.get_current_sprint()
        content = generator.generate_risk_summary(sprint.tasks, service.analyze_risks())
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ContentGenerationError as e:
        logger.error("Risk summary failed", error=str(e))
        raise HTTPException(status_code=502, detail=str(e))
    return schemas.GeneratedText(content=content)


@router.post("/export/{kind}", response_model=schemas.GeneratedText)
def export_document(
    kind: str,
    service: Annotated[SprintService, Depends(get_sprint_service)],
    generator: Annotated[ContentGenerator, Depends(get_content_generator)],
):
    """
    Generate a Confluence page, Teams message or Outlook invite for the current sprint.
    """
    try:
        sprint = service.get_current_sprint()
        content = generator.generate_export(kind, sprint, service.capacity_summary(sprint))
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return schemas.GeneratedText(content=content)


@router.post("/meetings/{meeting_type}/invite", response_model=MeetingInvite)
def meeting_invite(
    meeting_type: MeetingType,
    service: Annotated[SprintService, Depends(get_sprint_service)],
    generator: Annotated[ContentGenerator, Depends(get_content_generator)],
):
    try:
        meeting = service.get_meeting(meeting_type)
        sprint = service.get_current_sprint()
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return generator.generate_meeting_invite(meeting, sprint.settings)


@router.post("/history/insights", response_model=schemas.GeneratedText)
def performance_insights(
    selection: schemas.InsightsRequest,
    service: Annotated[SprintService, Depends(get_sprint_service)],
    generator: Annotated[ContentGenerator, Depends(get_content_generator)],
):
    """Insights over the selected archived sprints (all when none are selected)."""
    sprints = service.select_history(selection.sprint_ids)
    if not sprints:
        raise HTTPException(status_code=404, detail="No archived sprints selected")
    metrics = service.history_metrics(selection.sprint_ids)
    content = generator.generate_performance_insights(sprints, metrics.velocity, metrics.work_mix, metrics.roles)
    return schemas.GeneratedText(content=content)
