import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from rentverse.database import get_db
from rentverse.dependencies import require_user
from rentverse.models.moderation import MODERATION_PRIORITIES, MODERATION_TARGETS
from rentverse.models.user import User
from rentverse.schemas.moderation import ModerationItemResponse, ReportCreate
from rentverse.services import moderation_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/reports", tags=["reports"])


@router.post("", response_model=ModerationItemResponse, status_code=201)
async def create_report(req: ReportCreate, user: User = Depends(require_user), db: Session = Depends(get_db)):
    if req.target_type not in MODERATION_TARGETS:
        raise HTTPException(status_code=400, detail=f"Invalid target type. Must be one of: {MODERATION_TARGETS}")
    priority = req.priority.upper()
    if priority not in MODERATION_PRIORITIES:
        raise HTTPException(status_code=400, detail=f"Invalid priority. Must be one of: {MODERATION_PRIORITIES}")
    reason = (req.reason or "").strip()
    if not reason:
        raise HTTPException(status_code=400, detail="A reason is required")
    if not moderation_service.target_exists(db, req.target_type, req.target_id):
        raise HTTPException(status_code=404, detail=f"{req.target_type} not found")

    item = moderation_service.add_report(db, user, req.target_type, req.target_id, reason, priority)
    db.commit()
    db.refresh(item)
    logger.info("User %s reported %s %s", user.id, req.target_type, req.target_id)
    return moderation_service.item_to_response(item)
