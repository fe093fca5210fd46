"""
Prompt builders for sprint summaries, export documents and meeting invites.

Each builder takes structured sprint data and returns the full prompt text.
"""

import json
from dataclasses import dataclass
from textwrap import dedent
from typing import Iterable, List, Optional, Sequence

from sprintpilot.domain.models import (
    CapacitySummary,
    MeetingType,
    SprintData,
    SprintMeeting,
    SprintSettings,
    Task,
    TaskRisk,
    TeamMember,
)
from sprintpilot.planning.metrics import RoleUtilization, VelocityPoint, WorkMixPoint


@dataclass(frozen=True)
class MeetingDetails:
    title: str
    purpose: str
    agenda: str


def _fmt_hours(value: float) -> str:
    return f"{value:g}"


def _assignee_name(task: Task, team: Sequence[TeamMember]) -> str:
    member = next((m for m in team if m.id == task.assignee_id), None)
    return member.name if member else "Unassigned"


def sprint_data_block(
    team: Sequence[TeamMember],
    settings: SprintSettings,
    tasks: Iterable[Task],
    workload: Iterable[CapacitySummary],
) -> str:
    """Shared description of a sprint used by every sprint-level prompt."""
    team_lines = "\n".join(f"- {m.name} ({m.role.value})" for m in team) or "- (no team members)"
    task_lines = "\n".join(
        f"- {t.key}: {t.summary} ({_fmt_hours(t.story_points)}h) - Assigned: {_assignee_name(t, team)}"
        for t in tasks
    ) or "- (no tasks)"
    workload_lines = "\n".join(
        f"- {w.member_name}: Capacity {_fmt_hours(w.total_capacity)}h, "
        f"Assigned {_fmt_hours(w.assigned_hours)}h, Status: {w.status.value}"
        for w in workload
    ) or "- (no capacity data)"

    return (
        "**Sprint Details:**\n"
        f"- Start Date: {settings.start_date.isoformat()}\n"
        f"- End Date: {settings.end_date.isoformat() if settings.end_date else 'N/A'}\n"
        f"- Duration: {settings.duration} working days\n"
        "\n**Team Members:**\n"
        f"{team_lines}\n"
        "\n**Sprint Tasks:**\n"
        f"{task_lines}\n"
        "\n**Workload Allocation:**\n"
        f"{workload_lines}\n"
    )


def sprint_summary_prompt(data_block: str) -> str:
    return dedent("""\
        Analyze the following sprint data and write a concise summary for an engineering manager.

        {data}
        **Your Task:**
        Write the summary as markdown bullet points ("- Point") covering:
        - **Primary Focus:** the main goal or theme of the sprint, based on the work items.
        - **Workload Balance:** capacity versus assigned work; name anyone overloaded or underutilized.
        - **Potential Risks:** for example a heavy load on one person or a large amount of unplanned work.
        - **Overall Assessment:** a short verdict on the sprint plan.
        """).format(data=data_block)


def confluence_page_prompt(data_block: str) -> str:
    return dedent("""\
        Using the sprint data below, write the content of a Confluence page in Confluence wiki markup.

        {data}
        **Your Task:**
        Structure the page with:
        1. An h1 title for the sprint plan that includes the dates.
        2. An h2 "Sprint Goals" section with 2-3 high-level goals inferred from the task list.
        3. An h2 "Team Capacity" section summarizing the workload.
        4. An h2 "Work Items" section listing every task with key, summary, hours and assignee as bullets (*).
        """).format(data=data_block)


def teams_message_prompt(data_block: str) -> str:
    return dedent("""\
        Using the sprint data below, write a Microsoft Teams announcement for the sprint kick-off.

        {data}
        **Your Task:**
        Use Teams markdown (for example **bold**):
        - Open with an upbeat kick-off line.
        - State the sprint dates and duration.
        - List 2-3 focus areas as bullet points.
        - Close with a motivating sentence.
        """).format(data=data_block)


def outlook_invite_prompt(data_block: str) -> str:
    return dedent("""\
        Using the sprint data below, write the body of an Outlook invite for the sprint planning session.

        {data}
        **Your Task:**
        - Begin with a subject line such as "Subject: Sprint Planning: [Start Date] - [End Date]".
        - Add one introductory sentence.
        - Include a short agenda: review the previous sprint, discuss goals, assign tasks.
        - End with a professional closing.
        """).format(data=data_block)


def risk_summary_prompt(tasks: Iterable[Task], risks: Iterable[TaskRisk]) -> str:
    by_task = {r.task_id: r for r in risks}
    rows = []
    for task in tasks:
        risk = by_task.get(task.id)
        rows.append({
            "key": task.key,
            "summary": task.summary,
            "storyPoints": task.story_points,
            "riskLevel": risk.risk_level.value if risk else "Unknown",
            "reason": risk.reason if risk else "Not analyzed",
        })

    return dedent("""\
        You are an experienced project manager. The tasks of a sprint have been analyzed and
        each has a calculated risk level. Write a high-level summary for an engineering manager.

        - Call out the most severe blockers ('Off Track' items).
        - Look for bottlenecks or patterns among the 'At Risk' items (same assignee, same kind of work).
        - Finish with a short overall health assessment of the sprint.
        - Use concise markdown bullet points.

        Risk data:
        {data}
        """).format(data=json.dumps(rows, indent=2))


def meeting_details(meeting_type: MeetingType, settings: SprintSettings) -> MeetingDetails:
    window = f"{settings.start_date.isoformat()} to {settings.end_date.isoformat() if settings.end_date else 'TBD'}"
    if meeting_type == MeetingType.PLANNING:
        return MeetingDetails(
            title=f"Sprint Planning: {window}",
            purpose="To plan the upcoming sprint, discuss goals, and finalize the backlog.",
            agenda="- Review sprint goals\n- Discuss team capacity\n- Select and estimate tasks\n- Finalize sprint backlog",
        )
    if meeting_type == MeetingType.GROOMING:
        return MeetingDetails(
            title="Backlog Grooming / Refinement",
            purpose="To review and prepare upcoming user stories for future sprints.",
            agenda="- Review top priority backlog items\n- Clarify requirements and acceptance criteria\n- Add estimates\n- Identify dependencies",
        )
    return MeetingDetails(
        title=f"Sprint Retrospective: {window}",
        purpose="To reflect on the past sprint and identify areas for improvement.",
        agenda="- What went well?\n- What could be improved?\n- Action items for the next sprint",
    )


def meeting_invite_prompt(meeting: SprintMeeting, settings: SprintSettings, details: MeetingDetails) -> str:
    window = f"{settings.start_date.isoformat()} to {settings.end_date.isoformat() if settings.end_date else 'TBD'}"
    return dedent("""\
        Produce a JSON object for a concise, professional Outlook meeting invite with the keys "subject" and "body".

        **Meeting Details:**
        - Type: {type}
        - Date: {date}
        - Time: {time}
        - Duration: {duration} minutes
        - Sprint Dates: {window}
        - Suggested Title: {title}
        - Purpose: {purpose}
        - Suggested Agenda:
        {agenda}

        **Your Task:**
        1. "subject" is the suggested meeting title.
        2. "body" is a short friendly sentence stating the purpose, then the agenda (newline separated),
           then a professional closing line.
        """).format(
        type=meeting.type.value,
        date=meeting.date.isoformat(),
        time=meeting.time,
        duration=meeting.duration,
        window=window,
        title=details.title,
        purpose=details.purpose,
        agenda=details.agenda,
    )


def performance_insights_prompt(
    sprints: Sequence[SprintData],
    velocity: Iterable[VelocityPoint],
    work_mix: Iterable[WorkMixPoint],
    roles: Iterable[RoleUtilization],
) -> str:
    def _end(value: Optional[object]) -> str:
        return value.isoformat() if value else "N/A"

    velocity_text = "\n".join(
        f"- Sprint ending {_end(v.end_date)}: {v.total_hours:.0f} hours" for v in velocity
    )
    mix_text = "\n".join(
        f"- Sprint ending {_end(w.end_date)}: "
        + ", ".join(f"{category}: {share:.0f}%" for category, share in w.mix.items())
        for w in work_mix
    )
    role_text = "\n".join(f"- {r.role}: {r.utilization:.0f}%" for r in roles)

    first: Optional[SprintData] = sprints[0] if sprints else None
    last: Optional[SprintData] = sprints[-1] if sprints else None
    period_start = first.settings.start_date.isoformat() if first else "N/A"
    period_end = _end(last.settings.end_date) if last else "N/A"

    return dedent("""\
        You are an experienced Agile coach and engineering manager. Analyze this team's sprint history.

        **Data Overview:**
        - Number of sprints analyzed: {count}
        - Time period: {start} to {end}

        **Velocity Trend (total hours delivered per sprint):**
        {velocity}

        **Work Mix Trend (% of hours per category per sprint):**
        {mix}

        **Average Role Utilization (across the selected sprints):**
        {roles}

        **Your Task:**
        Give actionable insights as markdown bullet points:
        - **Overall Performance:** is velocity improving, declining or erratic?
        - **Strategic Focus:** is the balance between features, tech debt and production issues healthy?
        - **Team Health & Bottlenecks:** roles consistently above 100% or below 70%, and the risks that brings.
        - **Recommendations:** 1-2 concrete steps for the next sprint.
        """).format(
        count=len(sprints),
        start=period_start,
        end=period_end,
        velocity=velocity_text or "- (no data)",
        mix=mix_text or "- (no data)",
        roles=role_text or "- (no data)",
    )


EXPORT_PROMPTS = {
    "confluence": confluence_page_prompt,
    "teams": teams_message_prompt,
    "outlook": outlook_invite_prompt,
}


def export_formats() -> List[str]:
    return list(EXPORT_PROMPTS)
