"""
AI Assistant Endpoints

Suggestions generated by a language model for the task board, the
approval screens and the dashboard, plus a help chat.

RBAC:
- Every procedure requires a logged-in user
- generateReviewComment: only someone allowed to review the entry
- generateDashboardInsights: admins get organization-wide figures,
  everyone else their own

Model failures surface as INTERNAL_SERVER_ERROR with a generic message;
the underlying error is logged.
"""
from collections import defaultdict
from datetime import date, timedelta
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import Dict, List, Tuple

from hrportal.config import get_settings
from hrportal.database import get_db
from hrportal.models.user import User
from hrportal.models.project import Project
from hrportal.models.timesheet import TimeEntry
from hrportal.schemas.ai import (
    TaskPriorityRequest,
    PrioritySuggestion,
    TaskDescriptionRequest,
    TaskDescriptionResponse,
    ReviewCommentRequest,
    ReviewCommentResponse,
    DashboardInsights,
    ChatRequest,
    ChatResponse,
)
from hrportal.api.deps import get_current_user
from hrportal.core.exceptions import NotFoundError, PermissionDenied, ProcedureError
from hrportal.core.permissions import can_review, is_admin
from hrportal.services.assistant import AssistantClient, AssistantError, get_assistant
from hrportal.utils.formatting import format_hours, format_us_date
from hrportal.utils.logging import get_logger

logger = get_logger(__name__)
settings = get_settings()

router = APIRouter(tags=["ai"])

INSIGHT_WINDOW_DAYS = 30
INSIGHT_TOP_N = 5
RECENT_TASK_COUNT = 5


def hours_lines(hours_by_name: Dict[str, float]) -> str:
    return "\n".join(f"- {name}: {format_hours(hours)}h" for name, hours in hours_by_name.items())


def top_hours(hours_by_name: Dict[str, float], limit: int = INSIGHT_TOP_N) -> Dict[str, float]:
    ranked = sorted(hours_by_name.items(), key=lambda item: item[1], reverse=True)
    return dict(ranked[:limit])


def status_totals(entries: List[TimeEntry]) -> Tuple[str, float]:
    total = sum(e.hours for e in entries)
    approved = sum(e.hours for e in entries if e.status == "approved")
    pending = sum(e.hours for e in entries if e.status == "submitted")
    rejected = sum(1 for e in entries if e.status == "rejected")
    return (
        f"Approved hours: {format_hours(approved)}\n"
        f"Pending hours: {format_hours(pending)}\n"
        f"Rejected entries: {rejected}"
    ), total


def organization_prompt(entries: List[TimeEntry]) -> str:
    project_hours = defaultdict(float)
    employee_hours = defaultdict(float)
    for entry in entries:
        project_hours[entry.project.name] += entry.hours
        employee_hours[entry.user.full_name] += entry.hours

    totals, total_hours = status_totals(entries)

    return (
        "Analyze this organization's work patterns over the last 30 days and provide administrative insights:\n\n"
        f"Total hours logged across organization: {format_hours(total_hours)}\n"
        f"{totals}\n"
        f"Active employees: {len(employee_hours)}\n\n"
        f"Hours by project:\n{hours_lines(top_hours(project_hours))}\n\n"
        f"Top employees by hours:\n{hours_lines(top_hours(employee_hours))}\n\n"
        "Provide 3-4 actionable insights about organizational productivity, resource allocation, "
        "project health, or management recommendations. Focus on trends, potential issues, "
        "and opportunities for improvement."
    )


def personal_prompt(entries: List[TimeEntry]) -> str:
    project_hours = defaultdict(float)
    for entry in entries:
        project_hours[entry.project.name] += entry.hours

    totals, total_hours = status_totals(entries)

    return (
        "Analyze this employee's work patterns over the last 30 days and provide insights:\n\n"
        f"Total hours logged: {format_hours(total_hours)}\n"
        f"{totals}\n\n"
        f"Hours by project:\n{hours_lines(project_hours)}\n\n"
        "Provide 3-4 actionable insights about their work patterns, productivity, or suggestions "
        "for improvement. Be encouraging and constructive."
    )


def chat_system_prompt() -> str:
    return f"""You are a helpful AI assistant for an employee HR portal called "{settings.PORTAL_NAME}". You help employees with:

- Understanding how to use the timesheet system
- Applying for leaves and understanding leave policies
- Navigating the project management features
- Understanding their dashboard and statistics
- General work-related questions

Be concise, friendly, and professional. If asked about specific personal data, remind users to check their actual portal pages as you don't have access to their personal information.

Available features in the portal:
- Dashboard: View work statistics and quick actions
- Timesheet: Log work hours for projects
- Leaves: Apply for time off and check balances
- Projects: View assigned projects and manage tasks (Kanban board)
- Documents: Access payslips and company documents
- Profile: Update personal information
- Manager Dashboard (for managers): Approve/reject timesheets and leave requests
- Admin Dashboard (for admins): Manage employees, projects, and assignments"""


@router.post("/suggestTaskPriority", response_model=PrioritySuggestion)
async def suggest_task_priority(
    request: TaskPriorityRequest,
    current_user: User = Depends(get_current_user),
    assistant: AssistantClient = Depends(get_assistant)
):
    lines = [
        "Analyze this task and suggest a priority level:",
        "",
        f"Title: {request.title}",
    ]
    if request.description:
        lines.append(f"Description: {request.description}")
    lines += [
        "",
        "Consider:",
        "- HIGH priority: Critical bugs, blocking issues, urgent deadlines, security issues",
        "- MEDIUM priority: Important features, moderate impact, standard work items",
        "- LOW priority: Nice-to-haves, minor improvements, non-urgent tasks",
        "",
        "What priority level should this task have?",
    ]

    try:
        return await assistant.generate_object("\n".join(lines), PrioritySuggestion)
    except AssistantError as exc:
        logger.error(f"Priority suggestion failed for user {current_user.id}: {exc}")
        raise ProcedureError("Failed to suggest priority")


@router.post("/suggestTaskDescription", response_model=TaskDescriptionResponse)
async def suggest_task_description(
    request: TaskDescriptionRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    assistant: AssistantClient = Depends(get_assistant)
):
    """Timesheet description drafted from the project and the caller's recent tasks on it."""
    project = db.query(Project).filter(Project.id == request.project_id).first()
    if not project:
        raise NotFoundError("Project")

    recent = db.query(TimeEntry).filter(
        TimeEntry.user_id == current_user.id,
        TimeEntry.project_id == project.id
    ).order_by(TimeEntry.date.desc(), TimeEntry.id.desc()).limit(RECENT_TASK_COUNT).all()

    lines = [
        "You are helping an employee write a task description for their timesheet entry.",
        "",
        f"Project: {project.name}" + (f" (Client: {project.client})" if project.client else ""),
    ]
    if project.description:
        lines.append(f"Project Description: {project.description}")
    if request.task_title:
        lines.append(f"Task Title: {request.task_title}")

    if recent:
        lines += ["", "Recent tasks the employee has worked on for this project:"]
        lines += [
            f"{n}. {entry.task}" + (f" - {entry.description}" if entry.description else "")
            for n, entry in enumerate(recent, start=1)
        ]

    lines += [
        "",
        "Generate a concise, professional task description (1-2 sentences) that the employee could use "
        "for their timesheet. Make it specific and action-oriented. Only return the description text, "
        "nothing else.",
    ]

    try:
        suggestion = await assistant.generate_text("\n".join(lines))
    except AssistantError as exc:
        logger.error(f"Task description suggestion failed for user {current_user.id}: {exc}")
        raise ProcedureError("Failed to generate suggestion")

    return {"suggestion": suggestion}


@router.post("/generateReviewComment", response_model=ReviewCommentResponse)
async def generate_review_comment(
    request: ReviewCommentRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    assistant: AssistantClient = Depends(get_assistant)
):
    """Draft an approval or rejection comment for a timesheet entry the caller may review."""
    entry = db.query(TimeEntry).filter(TimeEntry.id == request.time_entry_id).first()
    if not entry:
        raise NotFoundError("Timesheet entry")

    if not can_review(current_user, entry.user):
        raise PermissionDenied("You are not authorized to review this timesheet")

    project = entry.project
    lines = [
        "You are a professional manager providing feedback on a timesheet entry.",
        "",
        f"Employee: {entry.user.full_name}",
        f"Project: {project.name}" + (f" ({project.client})" if project.client else ""),
        f"Task: {entry.task}",
    ]
    if entry.description:
        lines.append(f"Description: {entry.description}")
    lines += [
        f"Hours: {format_hours(entry.hours)}",
        f"Date: {format_us_date(entry.date)}",
        "",
    ]

    if request.review_type == "approval":
        lines.append(
            "Generate a brief, encouraging approval comment (1-2 sentences) acknowledging the work. "
            "Be professional and positive."
        )
    else:
        reason = f" Reason: {request.reason}" if request.reason else ""
        lines += [
            f"The manager wants to reject this timesheet entry.{reason}",
            "",
            "Generate a brief, constructive rejection comment (2-3 sentences) that is professional and "
            "helpful. Explain what needs to be corrected without being harsh.",
        ]

    lines += ["", "Only return the comment text, nothing else."]

    try:
        comment = await assistant.generate_text("\n".join(lines))
    except AssistantError as exc:
        logger.error(f"Review comment generation failed for entry {entry.id}: {exc}")
        raise ProcedureError("Failed to generate review comment")

    return {"comment": comment}


@router.post("/generateDashboardInsights", response_model=DashboardInsights)
async def generate_dashboard_insights(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    assistant: AssistantClient = Depends(get_assistant)
):
    """
    Three or four insights on the last 30 days of time entries.

    Admins get the whole organization; managers and employees their own
    entries only.
    """
    since = date.today() - timedelta(days=INSIGHT_WINDOW_DAYS)
    query = db.query(TimeEntry).filter(
        TimeEntry.date >= since
    ).order_by(TimeEntry.date.desc(), TimeEntry.id.desc())

    if is_admin(current_user):
        prompt = organization_prompt(query.all())
    else:
        prompt = personal_prompt(query.filter(TimeEntry.user_id == current_user.id).all())

    try:
        return await assistant.generate_object(prompt, DashboardInsights)
    except AssistantError as exc:
        logger.error(f"Dashboard insights failed for user {current_user.id}: {exc}")
        raise ProcedureError("Failed to generate insights")


@router.post("/chatAssistant", response_model=ChatResponse)
async def chat_assistant(
    request: ChatRequest,
    current_user: User = Depends(get_current_user),
    assistant: AssistantClient = Depends(get_assistant)
):
    """Portal help chat. The client keeps the history and sends it back each turn."""
    messages = [{"role": "system", "content": chat_system_prompt()}]
    messages += [m.model_dump() for m in request.conversation_history or []]
    messages.append({"role": "user", "content": request.message})

    try:
        reply = await assistant.chat(messages)
    except AssistantError as exc:
        logger.error(f"Chat assistant failed for user {current_user.id}: {exc}")
        raise ProcedureError("Failed to process chat message")

    return {"response": reply}
