"""
Notification Service

In-app notifications created as a side effect of timesheet and leave
workflows. Notifications are added to the caller's session and
committed together with the change that triggered them.
"""
from sqlalchemy.orm import Session
from hrportal.models.notification import Notification
from hrportal.models.user import User
from hrportal.utils.logging import get_logger

logger = get_logger(__name__)


def create_notification(db: Session, user_id: int, title: str, message: str) -> Notification:
    """
    Queue an in-app notification for a user.

    The caller commits. E-mail delivery is not wired up yet; the
    recipient and subject are logged instead.
    """
    notification = Notification(user_id=user_id, title=title, message=message)
    db.add(notification)
    db.flush()

    user = db.query(User).filter(User.id == user_id).first()
    if user:
        logger.info(f"Email notification to {user.email}: {title}")

    return notification


def plural(count: int, word: str) -> str:
    return word if count == 1 else f"{word}s"


def summarize_names(names, limit: int = 3) -> str:
    """'A, B, C and 2 more' style list for notification text."""
    names = list(names)
    if len(names) <= limit:
        return ", ".join(names)
    return f"{', '.join(names[:limit])} and {len(names) - limit} more"
