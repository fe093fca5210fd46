import json
import pytest
from datetime import date
from unittest.mock import MagicMock

from sprintpilot.ai.content_generator import (
    NOT_CONFIGURED_MESSAGE,
    ContentGenerationError,
    ContentGenerator,
    MeetingInvite,
)
from sprintpilot.domain.models import (
    MeetingType,
    RiskLevel,
    SprintData,
    SprintMeeting,
    SprintSettings,
    Task,
    TaskRisk,
    TeamMember,
)
from sprintpilot.planning.capacity import calculate_capacity_summary
from sprintpilot.planning.metrics import history_metrics


@pytest.fixture
def sprint():
    return SprintData(
        id="sprint-1",
        settings=SprintSettings(
            start_date=date(2024, 7, 1),
            duration=10,
            end_date=date(2024, 7, 12),
            meetings=[SprintMeeting(id="m1", type=MeetingType.PLANNING, date=date(2024, 7, 1), time="09:30")],
        ),
        team=[TeamMember(id="m1", name="Alice", daily_capacity=6)],
        tasks=[Task(id="t1", key="PRJ-1", summary="Login page", story_points=65, assignee_id="m1")],
    )


@pytest.fixture
def provider():
    provider = MagicMock()
    provider.generate.return_value = "- Looks good"
    return provider


def test_sprint_summary_prompt_contains_sprint_data(sprint, provider):
    generator = ContentGenerator(provider)

    result = generator.generate_sprint_summary(sprint, calculate_capacity_summary(sprint))

    assert result == "- Looks good"
    prompt = provider.generate.call_args[0][0]
    assert "2024-07-12" in prompt
    assert "PRJ-1: Login page (65h) - Assigned: Alice" in prompt
    assert "Status: Overloaded" in prompt


def test_not_configured_returns_message(sprint):
    generator = ContentGenerator(None)

    assert generator.available is False
    assert generator.generate_sprint_summary(sprint, []) == NOT_CONFIGURED_MESSAGE
    assert generator.generate_export("teams", sprint, []) == NOT_CONFIGURED_MESSAGE


def test_provider_failure_falls_back(sprint, provider):
    provider.generate.side_effect = RuntimeError("rate limited")

    result = ContentGenerator(provider).generate_export("confluence", sprint, [])

    assert result == "An error occurred while generating the confluence content."


@pytest.mark.parametrize("kind,marker", [
    ("confluence", "Confluence wiki markup"),
    ("teams", "Microsoft Teams"),
    ("outlook", "Outlook invite"),
])
def test_export_prompts(sprint, provider, kind, marker):
    ContentGenerator(provider).generate_export(kind, sprint, [])
    assert marker in provider.generate.call_args[0][0]


def test_unknown_export_kind(sprint, provider):
    with pytest.raises(ValueError):
        ContentGenerator(provider).generate_export("slack", sprint, [])
    provider.generate.assert_not_called()


def test_risk_summary(sprint, provider):
    risks = [TaskRisk(task_id="t1", risk_level=RiskLevel.AT_RISK, reason="Lagging")]

    ContentGenerator(provider).generate_risk_summary(sprint.tasks, risks)

    prompt = provider.generate.call_args[0][0]
    assert '"riskLevel": "At Risk"' in prompt


def test_risk_summary_errors_surface(sprint, provider):
    with pytest.raises(ContentGenerationError):
        ContentGenerator(None).generate_risk_summary(sprint.tasks, [])

    provider.generate.side_effect = RuntimeError("boom")
    with pytest.raises(ContentGenerationError):
        ContentGenerator(provider).generate_risk_summary(sprint.tasks, [])


def test_meeting_invite_parsed(sprint, provider):
    provider.generate.return_value = json.dumps({"subject": "Planning", "body": "Hi team"})
    meeting = sprint.settings.meetings[0]

    invite = ContentGenerator(provider).generate_meeting_invite(meeting, sprint.settings)

    assert invite == MeetingInvite(subject="Planning", body="Hi team")
    assert provider.generate.call_args[1] == {"json_output": True}
    assert "09:30" in provider.generate.call_args[0][0]


@pytest.mark.parametrize("raw", ["not json", json.dumps({"subject": "Only subject"})])
def test_meeting_invite_falls_back_to_template(sprint, provider, raw):
    provider.generate.return_value = raw
    meeting = sprint.settings.meetings[0]

    invite = ContentGenerator(provider).generate_meeting_invite(meeting, sprint.settings)

    assert invite.subject == "Sprint Planning: 2024-07-01 to 2024-07-12"
    assert "Review sprint goals" in invite.body


def test_meeting_invite_without_provider(sprint):
    invite = ContentGenerator(None).generate_meeting_invite(sprint.settings.meetings[0], sprint.settings)
    assert invite.subject.startswith("Sprint Planning")


def test_performance_insights(sprint, provider):
    metrics = history_metrics([sprint])

    ContentGenerator(provider).generate_performance_insights([sprint], metrics.velocity, metrics.work_mix, metrics.roles)

    prompt = provider.generate.call_args[0][0]
    assert "Number of sprints analyzed: 1" in prompt
    assert "Sprint ending 2024-07-12: 65 hours" in prompt
    assert "- Backend: 108%" in prompt
