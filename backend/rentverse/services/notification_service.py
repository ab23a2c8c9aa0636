import uuid

from sqlalchemy.orm import Session

from rentverse.database import utcnow
from rentverse.models.notification import NOTIFICATION_TYPES, Notification
from rentverse.schemas.notification import NotificationResponse


def add_notification(db: Session, user_id: str, type: str, title: str, message: str) -> Notification:
    """Stage a notification in the caller's transaction; the caller commits."""
    if type not in NOTIFICATION_TYPES:
        raise ValueError(f"Unknown notification type: {type}")
    notification = Notification(
        id=str(uuid.uuid4()),
        user_id=user_id,
        type=type,
        title=title,
        message=message,
        read=False,
        created_at=utcnow(),
    )
    db.add(notification)
    return notification


def notification_to_response(n: Notification) -> NotificationResponse:
    return NotificationResponse(
        id=n.id,
        user_id=n.user_id,
        type=n.type,
        title=n.title,
        message=n.message,
        read=bool(n.read),
        created_at=n.created_at,
    )


def preview(text: str, limit: int = 50) -> str:
    return text if len(text) <= limit else text[: limit - 3] + "..."
