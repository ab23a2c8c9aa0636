import logging
import math
import uuid

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session, joinedload, selectinload

from rentverse.database import get_db, utcnow
from rentverse.dependencies import require_admin
from rentverse.models.audit import AuditLog
from rentverse.models.booking import BOOKING_STATUSES, Booking
from rentverse.models.listing import LISTING_STATUSES, Listing
from rentverse.models.moderation import ModerationItem
from rentverse.models.setting import PlatformSetting
from rentverse.models.user import User
from rentverse.routers.bookings import booking_to_response
from rentverse.schemas.admin import (
    AdminBookingListResponse,
    AdminProfileResponse,
    AdminUserResponse,
    AuditLogResponse,
    BanRequest,
    BookingStatusUpdate,
    ListingStatusUpdate,
    SettingResponse,
    SettingUpdate,
)
from rentverse.schemas.booking import BookingResponse
from rentverse.schemas.listing import ListingResponse
from rentverse.schemas.moderation import ModerationDecision, ModerationItemResponse, ModerationQueueResponse
from rentverse.services import moderation_service
from rentverse.services.listing_service import like_pattern, listing_to_response
from rentverse.services.settings_service import put_setting
from rentverse.utils.permissions import accessible_modules

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["admin"])

DEFAULT_BAN_REASON = "Violation of terms"


def _audit(db: Session, admin: User, action: str, module: str, target_type: str,
           target_id: str, details: str | None = None) -> None:
    db.add(AuditLog(
        id=str(uuid.uuid4()),
        admin_id=admin.id,
        action=action,
        module=module,
        target_type=target_type,
        target_id=target_id,
        details=details,
        created_at=utcnow(),
    ))


def _user_to_admin_response(u: User) -> AdminUserResponse:
    return AdminUserResponse(
        id=u.id,
        email=u.email,
        first_name=u.first_name,
        last_name=u.last_name,
        role=u.role,
        verified=bool(u.verified),
        banned=bool(u.banned),
        ban_reason=u.ban_reason,
        created_at=u.created_at,
    )


def _get_user(db: Session, user_id: str) -> User:
    user = db.get(User, user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return user


@router.get("/me", response_model=AdminProfileResponse)
async def admin_me(admin: User = Depends(require_admin("dashboard", "read"))):
    return AdminProfileResponse(
        id=admin.id,
        email=admin.email,
        first_name=admin.first_name,
        role=admin.role,
        modules=accessible_modules(admin.role),
    )


@router.get("/users", response_model=list[AdminUserResponse])
async def list_users(
    q: str | None = None,
    banned: bool | None = None,
    limit: int = Query(50, ge=1, le=200),
    _admin: User = Depends(require_admin("users", "read")),
    db: Session = Depends(get_db),
):
    query = db.query(User)
    if q:
        pattern = like_pattern(q)
        query = query.filter(
            User.email.ilike(pattern, escape="\\")
            | User.first_name.ilike(pattern, escape="\\")
            | User.last_name.ilike(pattern, escape="\\")
        )
    if banned is not None:
        query = query.filter(User.banned.is_(banned))
    users = query.order_by(User.created_at.desc()).limit(limit).all()
    return [_user_to_admin_response(u) for u in users]


@router.post("/users/{user_id}/ban", response_model=AdminUserResponse)
async def ban_user(
    user_id: str,
    req: BanRequest,
    admin: User = Depends(require_admin("users", "write")),
    db: Session = Depends(get_db),
):
    user = _get_user(db, user_id)
    if user.id == admin.id:
        raise HTTPException(status_code=400, detail="Cannot ban yourself")
    reason = req.reason or DEFAULT_BAN_REASON
    user.banned = True
    user.ban_reason = reason
    _audit(db, admin, "BAN_USER", "users", "USER", user.id, f"Banned user for: {reason}")
    db.commit()
    db.refresh(user)
    logger.info("Admin %s banned user %s", admin.id, user.id)
    return _user_to_admin_response(user)


@router.delete("/users/{user_id}/ban", response_model=AdminUserResponse)
async def unban_user(
    user_id: str,
    admin: User = Depends(require_admin("users", "write")),
    db: Session = Depends(get_db),
):
    user = _get_user(db, user_id)
    user.banned = False
    user.ban_reason = None
    _audit(db, admin, "UNBAN_USER", "users", "USER", user.id, "Unbanned user")
    db.commit()
    db.refresh(user)
    return _user_to_admin_response(user)


@router.get("/listings", response_model=list[ListingResponse])
async def list_all_listings(
    status: str | None = None,
    limit: int = Query(50, ge=1, le=200),
    _admin: User = Depends(require_admin("listings", "read")),
    db: Session = Depends(get_db),
):
    query = db.query(Listing).options(joinedload(Listing.owner), selectinload(Listing.tags))
    if status:
        query = query.filter(Listing.status == status)
    listings = query.order_by(Listing.created_at.desc()).limit(limit).all()
    return [listing_to_response(l) for l in listings]


@router.patch("/listings/{listing_id}/status", response_model=ListingResponse)
async def set_listing_status(
    listing_id: str,
    req: ListingStatusUpdate,
    admin: User = Depends(require_admin("listings", "approve")),
    db: Session = Depends(get_db),
):
    if req.status not in LISTING_STATUSES:
        raise HTTPException(status_code=400, detail=f"Invalid status. Must be one of: {LISTING_STATUSES}")
    listing = db.get(Listing, listing_id)
    if not listing:
        raise HTTPException(status_code=404, detail="Listing not found")

    previous = listing.status
    listing.status = req.status
    listing.updated_at = utcnow()
    details = f"{previous} -> {req.status}"
    if req.reason:
        details += f": {req.reason}"
    _audit(db, admin, "SET_LISTING_STATUS", "listings", "LISTING", listing.id, details)
    db.commit()
    db.refresh(listing)
    return listing_to_response(listing)


@router.get("/settings", response_model=list[SettingResponse])
async def list_settings(
    _admin: User = Depends(require_admin("settings", "read")),
    db: Session = Depends(get_db),
):
    rows = db.query(PlatformSetting).order_by(PlatformSetting.key).all()
    return [SettingResponse(key=r.key, value=r.value, updated_at=r.updated_at) for r in rows]


@router.put("/settings/{key}", response_model=SettingResponse)
async def update_setting(
    key: str,
    req: SettingUpdate,
    admin: User = Depends(require_admin("settings", "manage")),
    db: Session = Depends(get_db),
):
    row = put_setting(db, key, req.value)
    _audit(db, admin, "UPDATE_SETTING", "settings", "SETTING", key, f"{key} = {req.value}")
    db.commit()
    db.refresh(row)
    return SettingResponse(key=row.key, value=row.value, updated_at=row.updated_at)


@router.get("/audit/logs", response_model=list[AuditLogResponse])
async def audit_logs(
    module: str | None = None,
    limit: int = Query(100, ge=1, le=500),
    _admin: User = Depends(require_admin("audit", "read")),
    db: Session = Depends(get_db),
):
    query = db.query(AuditLog)
    if module:
        query = query.filter(AuditLog.module == module)
    logs = query.order_by(AuditLog.created_at.desc()).limit(limit).all()
    return [
        AuditLogResponse(
            id=log.id,
            admin_id=log.admin_id,
            action=log.action,
            module=log.module,
            target_type=log.target_type,
            target_id=log.target_id,
            details=log.details,
            created_at=log.created_at,
        )
        for log in logs
    ]


@router.get("/bookings", response_model=AdminBookingListResponse)
async def list_all_bookings(
    status: str | None = None,
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    _admin: User = Depends(require_admin("bookings", "read")),
    db: Session = Depends(get_db),
):
    query = db.query(Booking)
    if status:
        query = query.filter(Booking.status == status)
    total = query.count()
    bookings = (
        query.options(joinedload(Booking.listing), joinedload(Booking.renter))
        .order_by(Booking.created_at.desc())
        .offset((page - 1) * page_size)
        .limit(page_size)
        .all()
    )
    return AdminBookingListResponse(
        items=[booking_to_response(b) for b in bookings],
        total=total,
        page=page,
        page_size=page_size,
        total_pages=math.ceil(total / page_size),
    )


@router.patch("/bookings/{booking_id}/status", response_model=BookingResponse)
async def set_booking_status(
    booking_id: str,
    req: BookingStatusUpdate,
    admin: User = Depends(require_admin("bookings", "write")),
    db: Session = Depends(get_db),
):
    if req.status not in BOOKING_STATUSES:
        raise HTTPException(status_code=400, detail=f"Invalid status. Must be one of: {BOOKING_STATUSES}")
    booking = db.get(Booking, booking_id)
    if not booking:
        raise HTTPException(status_code=404, detail="Booking not found")

    previous = booking.status
    booking.status = req.status
    _audit(db, admin, "SET_BOOKING_STATUS", "bookings", "BOOKING", booking.id, f"{previous} -> {req.status}")
    db.commit()
    db.refresh(booking)
    return booking_to_response(booking)


@router.get("/moderation/queue", response_model=ModerationQueueResponse)
async def moderation_queue(
    status: str = "PENDING",
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    _admin: User = Depends(require_admin("moderation", "read")),
    db: Session = Depends(get_db),
):
    query = db.query(ModerationItem).filter(ModerationItem.status == status)
    total = query.count()
    items = (
        query.options(joinedload(ModerationItem.reviewer))
        .order_by(*moderation_service.queue_order())
        .offset((page - 1) * page_size)
        .limit(page_size)
        .all()
    )
    return ModerationQueueResponse(
        items=[moderation_service.item_to_response(i) for i in items],
        total=total,
        page=page,
        page_size=page_size,
        total_pages=math.ceil(total / page_size),
    )


def _review(db: Session, admin: User, item_id: str, status: str, note: str | None) -> ModerationItemResponse:
    item = db.get(ModerationItem, item_id)
    if not item:
        raise HTTPException(status_code=404, detail="Moderation item not found")
    if item.status != "PENDING":
        raise HTTPException(status_code=400, detail="Moderation item already reviewed")

    moderation_service.review_item(item, admin, status, note)
    action = "APPROVE_MODERATION_ITEM" if status == "APPROVED" else "REJECT_MODERATION_ITEM"
    _audit(db, admin, action, "moderation", item.target_type.upper(), item.target_id, note)
    db.commit()
    db.refresh(item)
    logger.info("Admin %s marked moderation item %s %s", admin.id, item.id, status)
    return moderation_service.item_to_response(item)


@router.post("/moderation/queue/{item_id}/approve", response_model=ModerationItemResponse)
async def approve_moderation_item(
    item_id: str,
    req: ModerationDecision,
    admin: User = Depends(require_admin("moderation", "approve")),
    db: Session = Depends(get_db),
):
    return _review(db, admin, item_id, "APPROVED", req.note)


@router.post("/moderation/queue/{item_id}/reject", response_model=ModerationItemResponse)
async def reject_moderation_item(
    item_id: str,
    req: ModerationDecision,
    admin: User = Depends(require_admin("moderation", "approve")),
    db: Session = Depends(get_db),
):
    return _review(db, admin, item_id, "REJECTED", req.note)
