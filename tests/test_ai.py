import json
from datetime import date, timedelta

import pytest

from hrportal.core.exceptions import ProcedureError
from hrportal.models.project import Project
from hrportal.models.timesheet import TimeEntry
from hrportal.models.user import UserRole
from hrportal.services.assistant import get_assistant


AI_PROCEDURES = [
    ("suggestTaskPriority", {"title": "Fix login"}),
    ("suggestTaskDescription", {"projectId": 1}),
    ("generateReviewComment", {"timeEntryId": 1, "reviewType": "approval"}),
    ("generateDashboardInsights", None),
    ("chatAssistant", {"message": "Hi"}),
]


@pytest.fixture
def llm(assistant):
    """The fake completions endpoint: queue `replies`, inspect `requests`."""
    return assistant.client.completions


def prompt_of(request):
    return request["messages"][-1]["content"]


@pytest.mark.parametrize("procedure,payload", AI_PROCEDURES)
def test_ai_procedures_require_token(client, procedure, payload):
    assert client.post(f"/trpc/{procedure}", json=payload).status_code == 401


def test_unconfigured_assistant_is_an_internal_error():
    get_assistant.cache_clear()

    with pytest.raises(ProcedureError) as excinfo:
        get_assistant()

    assert excinfo.value.detail == "AI features are not configured"


def test_suggest_task_priority(client, employee, llm, headers):
    llm.replies.append('{"priority": "high"}')

    response = client.post(
        "/trpc/suggestTaskPriority",
        json={"title": "Login broken", "description": "Users cannot sign in"},
        headers=headers(employee),
    )

    assert response.status_code == 200
    assert response.json() == {"priority": "high"}

    request = llm.requests[0]
    assert request["response_format"] == {"type": "json_object"}
    assert request["messages"][0]["role"] == "system"
    assert "Title: Login broken\nDescription: Users cannot sign in" in prompt_of(request)
    assert "What priority level should this task have?" in prompt_of(request)


def test_suggest_task_priority_unusable_reply(client, employee, llm, headers):
    llm.replies.append('{"priority": "urgent"}')

    response = client.post("/trpc/suggestTaskPriority", json={"title": "Login broken"}, headers=headers(employee))

    assert response.status_code == 500
    assert response.json() == {"detail": "Failed to suggest priority", "code": "INTERNAL_SERVER_ERROR"}


def test_suggest_task_priority_connection_error(client, employee, llm, headers):
    llm.fail = True

    response = client.post("/trpc/suggestTaskPriority", json={"title": "Login broken"}, headers=headers(employee))

    assert response.status_code == 500
    assert response.json()["detail"] == "Failed to suggest priority"


def test_suggest_task_description_unknown_project(client, employee, llm, headers):
    response = client.post("/trpc/suggestTaskDescription", json={"projectId": 999}, headers=headers(employee))

    assert response.status_code == 404
    assert response.json()["detail"] == "Project not found"
    assert llm.requests == []


def test_suggest_task_description_uses_recent_tasks(client, db, employee, other_employee, project, llm, headers):
    project.description = "Moon landing portal"
    db.add_all([
        TimeEntry(user_id=employee.id, project_id=project.id, date=date(2025, 6, 2), task="Build API", hours=8,
                  description="Endpoints for launches"),
        TimeEntry(user_id=employee.id, project_id=project.id, date=date(2025, 6, 3), task="Write tests", hours=4),
        TimeEntry(user_id=other_employee.id, project_id=project.id, date=date(2025, 6, 4), task="Not mine", hours=1),
    ])
    db.commit()
    llm.replies.append("  Implemented launch scheduling endpoints.  \n")

    response = client.post(
        "/trpc/suggestTaskDescription",
        json={"projectId": project.id, "taskTitle": "Launch API"},
        headers=headers(employee),
    )

    assert response.status_code == 200
    assert response.json() == {"suggestion": "Implemented launch scheduling endpoints."}

    prompt = prompt_of(llm.requests[0])
    assert "Project: Apollo (Client: Acme Corp)" in prompt
    assert "Project Description: Moon landing portal" in prompt
    assert "Task Title: Launch API" in prompt
    assert "1. Write tests\n2. Build API - Endpoints for launches" in prompt
    assert "Not mine" not in prompt


def test_suggest_task_description_empty_reply(client, employee, project, llm, headers):
    llm.replies.append("   ")

    response = client.post("/trpc/suggestTaskDescription", json={"projectId": project.id}, headers=headers(employee))

    assert response.status_code == 500
    assert response.json()["detail"] == "Failed to generate suggestion"


@pytest.fixture
def entry(db, employee, project):
    entry = TimeEntry(user_id=employee.id, project_id=project.id, date=date(2025, 6, 2), task="Build API",
                      hours=7.5, description="Endpoints", status="submitted")
    db.add(entry)
    db.commit()
    return entry


def test_review_comment_approval(client, manager, entry, llm, headers):
    llm.replies.append("Great work on the API.")

    response = client.post(
        "/trpc/generateReviewComment",
        json={"timeEntryId": entry.id, "reviewType": "approval"},
        headers=headers(manager),
    )

    assert response.status_code == 200
    assert response.json() == {"comment": "Great work on the API."}

    prompt = prompt_of(llm.requests[0])
    assert "Employee: Erin Employee\nProject: Apollo (Acme Corp)\nTask: Build API" in prompt
    assert "Hours: 7.5\nDate: 6/2/2025" in prompt
    assert "encouraging approval comment" in prompt
    assert prompt.endswith("Only return the comment text, nothing else.")


def test_review_comment_rejection_includes_reason(client, admin, entry, llm, headers):
    llm.replies.append("Please split the hours by task.")

    response = client.post(
        "/trpc/generateReviewComment",
        json={"timeEntryId": entry.id, "reviewType": "rejection", "reason": "Hours too vague"},
        headers=headers(admin),
    )

    assert response.status_code == 200
    assert "The manager wants to reject this timesheet entry. Reason: Hours too vague" in prompt_of(llm.requests[0])


def test_review_comment_forbidden_for_other_managers(client, make_user, entry, llm, headers):
    stranger = make_user("Sam", "Stranger", role=UserRole.MANAGER)

    response = client.post(
        "/trpc/generateReviewComment",
        json={"timeEntryId": entry.id, "reviewType": "approval"},
        headers=headers(stranger),
    )

    assert response.status_code == 403
    assert response.json()["detail"] == "You are not authorized to review this timesheet"
    assert llm.requests == []


def test_review_comment_unknown_entry(client, manager, headers):
    response = client.post(
        "/trpc/generateReviewComment",
        json={"timeEntryId": 999, "reviewType": "approval"},
        headers=headers(manager),
    )

    assert response.status_code == 404
    assert response.json()["detail"] == "Timesheet entry not found"


INSIGHTS = {
    "insights": [
        {"title": "Steady week", "description": "Hours are consistent.", "type": "positive"},
        {"title": "Pending approvals", "description": "Submit earlier.", "type": "suggestion"},
    ]
}


@pytest.fixture
def recent_entries(db, employee, other_employee, project):
    zeus = Project(name="Zeus", status="active")
    db.add(zeus)
    db.flush()
    today = date.today()
    db.add_all([
        TimeEntry(user_id=employee.id, project_id=project.id, date=today, task="a", hours=8, status="approved"),
        TimeEntry(user_id=employee.id, project_id=zeus.id, date=today, task="b", hours=2, status="submitted"),
        TimeEntry(user_id=other_employee.id, project_id=zeus.id, date=today, task="c", hours=5,
                  status="rejected"),
        TimeEntry(user_id=employee.id, project_id=project.id, date=today - timedelta(days=45), task="old",
                  hours=40, status="approved"),
    ])
    db.commit()


def test_dashboard_insights_for_employee(client, employee, recent_entries, llm, headers):
    llm.replies.append(json.dumps(INSIGHTS))

    response = client.post("/trpc/generateDashboardInsights", headers=headers(employee))

    assert response.status_code == 200
    assert response.json() == INSIGHTS

    prompt = prompt_of(llm.requests[0])
    assert prompt.startswith("Analyze this employee's work patterns over the last 30 days")
    assert "Total hours logged: 10\nApproved hours: 8\nPending hours: 2\nRejected entries: 0" in prompt
    assert "- Zeus: 2h\n- Apollo: 8h" in prompt


def test_dashboard_insights_for_admin_cover_organization(client, admin, recent_entries, llm, headers):
    llm.replies.append(json.dumps(INSIGHTS))

    response = client.post("/trpc/generateDashboardInsights", headers=headers(admin))

    assert response.status_code == 200
    prompt = prompt_of(llm.requests[0])
    assert "Total hours logged across organization: 15" in prompt
    assert "Rejected entries: 1\nActive employees: 2" in prompt
    assert "Hours by project:\n- Apollo: 8h\n- Zeus: 7h" in prompt
    assert "Top employees by hours:\n- Erin Employee: 10h\n- Oscar Other: 5h" in prompt


def test_dashboard_insights_bad_shape(client, employee, llm, headers):
    llm.replies.append('{"insights": [{"title": "x"}]}')

    response = client.post("/trpc/generateDashboardInsights", headers=headers(employee))

    assert response.status_code == 500
    assert response.json()["detail"] == "Failed to generate insights"


def test_chat_assistant_passes_history(client, employee, llm, headers):
    llm.replies.append("Open the Leaves page and click Apply.")

    response = client.post(
        "/trpc/chatAssistant",
        json={
            "message": "And how do I apply?",
            "conversationHistory": [
                {"role": "user", "content": "Do I have leave left?"},
                {"role": "assistant", "content": "Check the Leaves page."},
            ],
        },
        headers=headers(employee),
    )

    assert response.status_code == 200
    assert response.json() == {"response": "Open the Leaves page and click Apply."}

    messages = llm.requests[0]["messages"]
    assert [m["role"] for m in messages] == ["system", "user", "assistant", "user"]
    assert 'HR portal called "202 Space"' in messages[0]["content"]
    assert messages[-1] == {"role": "user", "content": "And how do I apply?"}


def test_chat_assistant_failure(client, employee, llm, headers):
    llm.fail = True

    response = client.post("/trpc/chatAssistant", json={"message": "Hello"}, headers=headers(employee))

    assert response.status_code == 500
    assert response.json()["detail"] == "Failed to process chat message"


def test_chat_assistant_needs_message(client, employee, headers):
    response = client.post("/trpc/chatAssistant", json={"message": ""}, headers=headers(employee))

    assert response.status_code == 400
