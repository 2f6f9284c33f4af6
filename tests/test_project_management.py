from datetime import date

import pytest

from hrportal.models.project import Project
from hrportal.models.project_management import Sprint, Task, TaskComment
from hrportal.models.timesheet import TimeEntry


@pytest.fixture
def sprint(db, project):
    sprint = Sprint(project_id=project.id, name="Sprint 1", start_date=date(2025, 6, 2), end_date=date(2025, 6, 13))
    db.add(sprint)
    db.commit()
    return sprint


def sprint_payload(project, **overrides):
    payload = {"projectId": project.id, "name": "Sprint 2", "startDate": "2025-06-16", "endDate": "2025-06-27"}
    payload.update(overrides)
    return payload


def test_create_sprint_requires_manager(client, employee, manager, project, headers):
    refused = client.post("/trpc/createSprint", json=sprint_payload(project), headers=headers(employee))
    created = client.post("/trpc/createSprint", json=sprint_payload(project), headers=headers(manager))

    assert refused.status_code == 403
    assert created.status_code == 200
    assert created.json()["sprintId"]


def test_create_sprint_unknown_project(client, manager, headers):
    response = client.post("/trpc/createSprint", json=sprint_payload(Project(id=999)), headers=headers(manager))

    assert response.status_code == 404


def test_create_sprint_inverted_dates(client, manager, project, headers):
    response = client.post(
        "/trpc/createSprint",
        json=sprint_payload(project, startDate="2025-06-27", endDate="2025-06-16"),
        headers=headers(manager),
    )

    assert response.status_code == 400


def test_update_sprint(client, db, manager, sprint, headers):
    response = client.post(
        "/trpc/updateSprint",
        json={"sprintId": sprint.id, "status": "active", "goal": "Ship login"},
        headers=headers(manager),
    )

    assert response.status_code == 200
    db.expire_all()
    updated = db.query(Sprint).filter(Sprint.id == sprint.id).one()
    assert updated.status == "active"
    assert updated.goal == "Ship login"


def test_get_sprints_with_task_counts(client, db, employee, project, sprint, headers):
    later = Sprint(project_id=project.id, name="Sprint 2", start_date=date(2025, 6, 16), end_date=date(2025, 6, 27))
    db.add(later)
    db.flush()
    db.add_all([
        Task(project_id=project.id, sprint_id=sprint.id, title="A"),
        Task(project_id=project.id, sprint_id=sprint.id, title="B"),
        Task(project_id=project.id, title="Backlog"),
    ])
    db.commit()

    sprints = client.post("/trpc/getSprints", json={"projectId": project.id}, headers=headers(employee)).json()["sprints"]

    assert [s["name"] for s in sprints] == ["Sprint 2", "Sprint 1"]
    assert [s["counts"]["tasks"] for s in sprints] == [0, 2]


def test_create_task_any_user(client, db, employee, project, sprint, headers):
    response = client.post(
        "/trpc/createTask",
        json={"projectId": project.id, "sprintId": sprint.id, "title": "Login page", "assignedToId": employee.id,
              "priority": "high"},
        headers=headers(employee),
    )

    assert response.status_code == 200
    task = db.query(Task).filter(Task.id == response.json()["taskId"]).one()
    assert task.status == "todo"
    assert task.priority == "high"


def test_create_task_sprint_from_other_project(client, db, employee, sprint, headers):
    other = Project(name="Zeus", status="active")
    db.add(other)
    db.commit()

    response = client.post(
        "/trpc/createTask",
        json={"projectId": other.id, "sprintId": sprint.id, "title": "Nope"},
        headers=headers(employee),
    )

    assert response.status_code == 400


def test_create_task_unknown_project(client, employee, headers):
    response = client.post("/trpc/createTask", json={"projectId": 999, "title": "x"}, headers=headers(employee))

    assert response.status_code == 404


def test_update_task_clears_sprint(client, db, employee, project, sprint, headers):
    task = Task(project_id=project.id, sprint_id=sprint.id, title="Move me")
    db.add(task)
    db.commit()

    response = client.post(
        "/trpc/updateTask",
        json={"taskId": task.id, "sprintId": None, "status": "in-progress"},
        headers=headers(employee),
    )

    assert response.status_code == 200
    db.expire_all()
    updated = db.query(Task).filter(Task.id == task.id).one()
    assert updated.sprint_id is None
    assert updated.status == "in-progress"


def test_update_unknown_task(client, employee, headers):
    assert client.post("/trpc/updateTask", json={"taskId": 999, "title": "x"},
                       headers=headers(employee)).status_code == 404


def test_get_tasks_by_sprint(client, db, employee, project, sprint, headers):
    db.add_all([
        Task(project_id=project.id, sprint_id=sprint.id, title="In sprint", assigned_to_id=employee.id),
        Task(project_id=project.id, title="Backlog"),
    ])
    db.commit()

    everything = client.post("/trpc/getTasks", json={"projectId": project.id}, headers=headers(employee))
    in_sprint = client.post("/trpc/getTasks", json={"projectId": project.id, "sprintId": sprint.id},
                            headers=headers(employee))

    assert len(everything.json()["tasks"]) == 2
    tasks = in_sprint.json()["tasks"]
    assert [t["title"] for t in tasks] == ["In sprint"]
    assert tasks[0]["sprint"]["name"] == "Sprint 1"
    assert tasks[0]["assignedTo"]["firstName"] == "Erin"


def test_get_project_tasks_requires_assignment_for_employees(client, db, employee, manager, project, assign, headers):
    db.add(Task(project_id=project.id, title="Secret"))
    db.commit()

    refused = client.post("/trpc/getProjectTasks", json={"projectId": project.id}, headers=headers(employee))
    as_manager = client.post("/trpc/getProjectTasks", json={"projectId": project.id}, headers=headers(manager))
    assign(employee, project)
    allowed = client.post("/trpc/getProjectTasks", json={"projectId": project.id}, headers=headers(employee))

    assert refused.status_code == 403
    assert as_manager.status_code == 200
    assert [t["title"] for t in allowed.json()["tasks"]] == ["Secret"]


def test_delete_task_unlinks_time_entries(client, db, employee, manager, project, headers):
    task = Task(project_id=project.id, title="Build")
    db.add(task)
    db.flush()
    db.add_all([
        TaskComment(task_id=task.id, user_id=employee.id, content="Started"),
        TimeEntry(user_id=employee.id, project_id=project.id, task_id=task.id, date=date(2025, 6, 2),
                  task="Build", hours=3),
    ])
    db.commit()

    refused = client.post("/trpc/deleteTask", json={"taskId": task.id}, headers=headers(employee))
    deleted = client.post("/trpc/deleteTask", json={"taskId": task.id}, headers=headers(manager))

    assert refused.status_code == 403
    assert deleted.status_code == 200
    db.expire_all()
    assert db.query(Task).count() == 0
    assert db.query(TaskComment).count() == 0
    entry = db.query(TimeEntry).one()
    assert entry.task_id is None
    assert entry.task == "Build"


def test_get_my_projects(client, db, employee, manager, project, assign, headers):
    other = Project(name="Zeus", status="active")
    db.add(other)
    db.commit()
    assign(employee, project)

    mine = client.post("/trpc/getMyProjects", headers=headers(employee)).json()["projects"]
    everything = client.post("/trpc/getMyProjects", headers=headers(manager)).json()["projects"]

    assert [p["name"] for p in mine] == ["Apollo"]
    assert mine[0]["counts"]["assignments"] == 1
    assert [p["name"] for p in everything] == ["Apollo", "Zeus"]


def test_task_comments_oldest_first(client, db, employee, manager, project, headers):
    task = Task(project_id=project.id, title="Discuss")
    db.add(task)
    db.commit()

    first = client.post("/trpc/createTaskComment", json={"taskId": task.id, "content": "First"},
                        headers=headers(employee))
    client.post("/trpc/createTaskComment", json={"taskId": task.id, "content": "Second"}, headers=headers(manager))

    assert first.status_code == 200
    assert first.json()["comment"]["user"]["firstName"] == "Erin"

    comments = client.post("/trpc/getTaskComments", json={"taskId": task.id},
                           headers=headers(employee)).json()["comments"]
    assert [c["content"] for c in comments] == ["First", "Second"]
    assert comments[1]["user"]["firstName"] == "Mark"


def test_empty_comment_is_rejected(client, db, employee, project, headers):
    task = Task(project_id=project.id, title="Discuss")
    db.add(task)
    db.commit()

    response = client.post("/trpc/createTaskComment", json={"taskId": task.id, "content": ""},
                           headers=headers(employee))

    assert response.status_code == 400


def test_comment_on_unknown_task(client, employee, headers):
    response = client.post("/trpc/createTaskComment", json={"taskId": 999, "content": "Hi"},
                           headers=headers(employee))

    assert response.status_code == 404
