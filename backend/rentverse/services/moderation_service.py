"""
Moderation queue: user reports in, reviewer decisions out.
"""
import uuid

from sqlalchemy import case
from sqlalchemy.orm import Session

from rentverse.database import utcnow
from rentverse.models.listing import Listing
from rentverse.models.moderation import ModerationItem
from rentverse.models.user import User
from rentverse.schemas.moderation import ModerationItemResponse, ReviewerSummary

TARGET_MODELS = {"Listing": Listing, "User": User}

_PRIORITY_RANK = case(
    (ModerationItem.priority == "HIGH", 3),
    (ModerationItem.priority == "MEDIUM", 2),
    else_=1,
)


def queue_order():
    """Highest priority first, then oldest first."""
    return _PRIORITY_RANK.desc(), ModerationItem.created_at.asc()


def target_exists(db: Session, target_type: str, target_id: str) -> bool:
    model = TARGET_MODELS.get(target_type)
    return model is not None and db.get(model, target_id) is not None


def add_report(db: Session, reporter: User, target_type: str, target_id: str,
               reason: str, priority: str) -> ModerationItem:
    item = ModerationItem(
        id=str(uuid.uuid4()),
        target_type=target_type,
        target_id=target_id,
        reason=reason,
        priority=priority,
        status="PENDING",
        reporter_id=reporter.id,
        created_at=utcnow(),
    )
    db.add(item)
    return item


def review_item(item: ModerationItem, reviewer: User, status: str, note: str | None) -> None:
    item.status = status
    item.reviewer_id = reviewer.id
    item.review_note = note
    item.reviewed_at = utcnow()


def item_to_response(item: ModerationItem) -> ModerationItemResponse:
    reviewer = None
    if item.reviewer is not None:
        reviewer = ReviewerSummary(
            id=item.reviewer.id,
            first_name=item.reviewer.first_name,
            last_name=item.reviewer.last_name,
        )
    return ModerationItemResponse(
        id=item.id,
        target_type=item.target_type,
        target_id=item.target_id,
        reason=item.reason,
        priority=item.priority,
        status=item.status,
        reporter_id=item.reporter_id,
        reviewer=reviewer,
        review_note=item.review_note,
        reviewed_at=item.reviewed_at,
        created_at=item.created_at,
    )
