from datetime import date

from hrportal.models.project import Project, ProjectAssignment
from hrportal.models.project_management import Sprint, Task, TaskComment
from hrportal.models.timesheet import TimeEntry


def test_create_project(client, db, admin, headers):
    response = client.post(
        "/trpc/createProject",
        json={
            "name": "Orion",
            "client": "Globex",
            "budgetHours": 250,
            "customerEmail": "pm@globex.com",
            "startDate": "2025-01-01",
        },
        headers=headers(admin),
    )

    assert response.status_code == 200
    body = response.json()
    assert body["projectName"] == "Orion"

    project = db.query(Project).filter(Project.id == body["projectId"]).one()
    assert project.status == "active"
    assert project.budget_hours == 250


def test_create_project_rejects_bad_status(client, admin, headers):
    response = client.post("/trpc/createProject", json={"name": "X", "status": "archived"}, headers=headers(admin))

    assert response.status_code == 400


def test_sow_upload_url(client, admin, headers):
    response = client.post(
        "/trpc/getProjectSowUploadUrl",
        json={"fileName": "sow.pdf", "fileType": "application/pdf"},
        headers=headers(admin),
    )

    body = response.json()
    assert body["objectName"].startswith("sow/")
    assert body["objectName"].endswith("-sow.pdf")
    assert "/documents/sow/" in body["uploadUrl"]


def test_assign_project(client, db, admin, employee, project, headers):
    payload = {"userId": employee.id, "projectId": project.id, "role": "Developer"}

    first = client.post("/trpc/assignProjectToEmployee", json=payload, headers=headers(admin))
    second = client.post("/trpc/assignProjectToEmployee", json=payload, headers=headers(admin))

    assert first.status_code == 200
    assert first.json()["assignmentId"]
    assert second.status_code == 409
    assert db.query(ProjectAssignment).count() == 1


def test_assign_project_unknown_user_or_project(client, admin, employee, project, headers):
    no_user = client.post("/trpc/assignProjectToEmployee", json={"userId": 999, "projectId": project.id},
                          headers=headers(admin))
    no_project = client.post("/trpc/assignProjectToEmployee", json={"userId": employee.id, "projectId": 999},
                             headers=headers(admin))

    assert no_user.status_code == 404
    assert no_project.status_code == 404


def test_get_all_projects_with_counts(client, db, admin, employee, project, assign, headers):
    assign(employee, project)
    db.add(TimeEntry(user_id=employee.id, project_id=project.id, date=date(2025, 6, 2), task="x", hours=1))
    db.commit()

    projects = client.post("/trpc/getAllProjects", headers=headers(admin)).json()["projects"]

    assert len(projects) == 1
    assert projects[0]["counts"] == {"assignments": 1, "timeEntries": 1}
    assert projects[0]["assignments"][0]["user"]["firstName"] == "Erin"


def test_update_project(client, admin, project, headers):
    response = client.post(
        "/trpc/updateProject",
        json={"projectId": project.id, "status": "on-hold", "client": None},
        headers=headers(admin),
    )

    assert response.status_code == 200
    updated = response.json()["project"]
    assert updated["status"] == "on-hold"
    assert updated["client"] is None
    assert updated["name"] == "Apollo"


def test_delete_project_with_time_entries_is_refused(client, db, admin, employee, project, headers):
    db.add(TimeEntry(user_id=employee.id, project_id=project.id, date=date(2025, 6, 2), task="x", hours=1))
    db.commit()

    response = client.post("/trpc/deleteProject", json={"projectId": project.id}, headers=headers(admin))

    assert response.status_code == 400
    assert response.json()["detail"].startswith("Cannot delete project with 1 time entries")


def test_delete_project_removes_board(client, db, admin, employee, project, assign, headers):
    assign(employee, project)
    sprint = Sprint(project_id=project.id, name="Sprint 1", start_date=date(2025, 6, 1), end_date=date(2025, 6, 14))
    db.add(sprint)
    db.flush()
    task = Task(project_id=project.id, sprint_id=sprint.id, title="Build")
    db.add(task)
    db.flush()
    db.add(TaskComment(task_id=task.id, user_id=employee.id, content="On it"))
    db.commit()

    response = client.post("/trpc/deleteProject", json={"projectId": project.id}, headers=headers(admin))

    assert response.status_code == 200
    db.expire_all()
    assert db.query(Project).count() == 0
    assert db.query(ProjectAssignment).count() == 0
    assert db.query(Sprint).count() == 0
    assert db.query(Task).count() == 0
    assert db.query(TaskComment).count() == 0
