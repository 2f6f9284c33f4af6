from hrportal.models.notification import Notification
from hrportal.services.notifications import summarize_names, plural


def add_notifications(db, user, count):
    rows = [Notification(user_id=user.id, title=f"Title {n}", message=f"Message {n}") for n in range(count)]
    db.add_all(rows)
    db.commit()
    return rows


def test_summarize_names():
    assert summarize_names(["Apollo"]) == "Apollo"
    assert summarize_names(["A", "B", "C"]) == "A, B, C"
    assert summarize_names(["A", "B", "C", "D", "E"]) == "A, B, C and 2 more"


def test_plural():
    assert plural(1, "Timesheet") == "Timesheet"
    assert plural(3, "Timesheet") == "Timesheets"


def test_get_notifications_newest_first_capped_at_50(client, db, employee, headers):
    add_notifications(db, employee, 55)

    response = client.post("/trpc/getNotifications", headers=headers(employee))

    notifications = response.json()["notifications"]
    assert len(notifications) == 50
    assert notifications[0]["title"] == "Title 54"
    assert notifications[0]["isRead"] is False


def test_notifications_are_scoped_to_caller(client, db, employee, other_employee, headers):
    add_notifications(db, other_employee, 2)

    assert client.post("/trpc/getNotifications", headers=headers(employee)).json()["notifications"] == []
    assert client.post("/trpc/getUnreadCount", headers=headers(employee)).json()["count"] == 0


def test_mark_one_as_read(client, db, employee, headers):
    rows = add_notifications(db, employee, 3)

    response = client.post("/trpc/markAsRead", json={"notificationId": rows[0].id}, headers=headers(employee))

    assert response.status_code == 200
    assert client.post("/trpc/getUnreadCount", headers=headers(employee)).json()["count"] == 2


def test_mark_all_as_read(client, db, employee, headers):
    add_notifications(db, employee, 3)

    client.post("/trpc/markAsRead", json={"markAll": True}, headers=headers(employee))

    assert client.post("/trpc/getUnreadCount", headers=headers(employee)).json()["count"] == 0


def test_marking_someone_elses_notification_is_ignored(client, db, employee, other_employee, headers):
    rows = add_notifications(db, other_employee, 1)

    response = client.post("/trpc/markAsRead", json={"notificationId": rows[0].id}, headers=headers(employee))

    assert response.status_code == 200
    assert client.post("/trpc/getUnreadCount", headers=headers(other_employee)).json()["count"] == 1
