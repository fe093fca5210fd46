"""
AI Content Generator

Turns sprint data, capacity summaries and risk lists into prose through an
injected TextGenerator. Generation failures never reach the planning core:
sprint-level documents fall back to a fixed message, meeting invites fall back
to a templated invite, and only the risk summary surfaces an error.
"""

import json
from typing import List, Optional, Sequence

from pydantic import BaseModel, ValidationError

from sprintpilot.ai import prompts
from sprintpilot.ai.llm import TextGenerator
from sprintpilot.domain.models import (
    CapacitySummary,
    SprintData,
    SprintMeeting,
    SprintSettings,
    Task,
    TaskRisk,
)
from sprintpilot.planning.metrics import RoleUtilization, VelocityPoint, WorkMixPoint
from sprintpilot.platform.logging import get_logger

logger = get_logger(__name__)

NOT_CONFIGURED_MESSAGE = "AI is unavailable. API key is not configured."


class ContentGenerationError(Exception):
    """Raised when a generation that has no fallback fails."""


class MeetingInvite(BaseModel):
    subject: str
    body: str


class ContentGenerator:
    def __init__(self, provider: Optional[TextGenerator] = None):
        self.provider = provider

    @property
    def available(self) -> bool:
        return self.provider is not None

    def _generate_or_fallback(self, prompt: str, what: str) -> str:
        if not self.available:
            return NOT_CONFIGURED_MESSAGE
        try:
            return self.provider.generate(prompt)
        except Exception as e:
            logger.error("AI generation failed", content=what, error=str(e))
            return f"An error occurred while generating the {what}."

    def _sprint_block(self, sprint: SprintData, capacity: Sequence[CapacitySummary]) -> str:
        return prompts.sprint_data_block(sprint.team, sprint.settings, sprint.tasks, capacity)

    def generate_sprint_summary(self, sprint: SprintData, capacity: Sequence[CapacitySummary]) -> str:
        logger.info("Generating sprint summary", sprint_id=sprint.id)
        prompt = prompts.sprint_summary_prompt(self._sprint_block(sprint, capacity))
        return self._generate_or_fallback(prompt, "AI summary")

    def generate_export(self, kind: str, sprint: SprintData, capacity: Sequence[CapacitySummary]) -> str:
        """
        Generate an export document.

        Args:
            kind: One of prompts.export_formats() (confluence, teams, outlook)
            sprint: Sprint to describe
            capacity: Capacity summary of that sprint

        Raises:
            ValueError: if kind is unknown
        """
        builder = prompts.EXPORT_PROMPTS.get(kind)
        if builder is None:
            raise ValueError(f"Unknown export format '{kind}'")
        logger.info("Generating export", sprint_id=sprint.id, kind=kind)
        return self._generate_or_fallback(builder(self._sprint_block(sprint, capacity)), f"{kind} content")

    def generate_risk_summary(self, tasks: Sequence[Task], risks: Sequence[TaskRisk]) -> str:
        if not self.available:
            raise ContentGenerationError("API key is not configured.")
        try:
            return self.provider.generate(prompts.risk_summary_prompt(tasks, risks))
        except Exception as e:
            logger.error("Risk summary generation failed", error=str(e))
            raise ContentGenerationError("An error occurred while generating the AI risk summary.") from e

    def generate_meeting_invite(self, meeting: SprintMeeting, settings: SprintSettings) -> MeetingInvite:
        details = prompts.meeting_details(meeting.type, settings)
        fallback = MeetingInvite(
            subject=details.title,
            body=(
                f"Hi Team,\n\nThis is an invitation for our upcoming {meeting.type.value} session.\n\n"
                f"{details.purpose}\n\nAgenda:\n{details.agenda}\n\n"
                "Looking forward to a productive session."
            ),
        )
        if not self.available:
            return fallback

        try:
            raw = self.provider.generate(
                prompts.meeting_invite_prompt(meeting, settings, details),
                json_output=True,
            )
            return MeetingInvite.model_validate(json.loads(raw))
        except (ValueError, ValidationError) as e:
            logger.warning("Unparseable meeting invite, using template", meeting_type=meeting.type.value, error=str(e))
            return fallback
        except Exception as e:
            logger.error("Meeting invite generation failed", meeting_type=meeting.type.value, error=str(e))
            return fallback

    def generate_performance_insights(
        self,
        sprints: Sequence[SprintData],
        velocity: List[VelocityPoint],
        work_mix: List[WorkMixPoint],
        roles: List[RoleUtilization],
    ) -> str:
        logger.info("Generating performance insights", sprints=len(sprints))
        prompt = prompts.performance_insights_prompt(sprints, velocity, work_mix, roles)
        return self._generate_or_fallback(prompt, "AI performance insights")
