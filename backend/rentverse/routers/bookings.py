import logging
import uuid
from datetime import date

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from rentverse.database import get_db, utcnow
from rentverse.dependencies import require_user
from rentverse.models.booking import Booking
from rentverse.models.listing import Listing
from rentverse.models.user import User
from rentverse.schemas.booking import (
    BookingCreate,
    BookingCreatedResponse,
    BookingListingSummary,
    BookingRenterSummary,
    BookingResponse,
    OwnerAction,
)
from rentverse.services.notification_service import add_notification, notification_to_response
from rentverse.services.realtime_service import RealtimePublisher, get_publisher, notify_user

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/bookings", tags=["bookings"])


def booking_to_response(b: Booking) -> BookingResponse:
    return BookingResponse(
        id=b.id,
        listing_id=b.listing_id,
        renter_id=b.renter_id,
        start_date=b.start_date,
        end_date=b.end_date,
        total_price=float(b.total_price),
        status=b.status,
        owner_note=b.owner_note,
        created_at=b.created_at,
        listing=BookingListingSummary(
            id=b.listing.id,
            title=b.listing.title,
            price=float(b.listing.price),
            price_unit=b.listing.price_unit,
        ) if b.listing else None,
        renter=BookingRenterSummary(
            id=b.renter.id,
            first_name=b.renter.first_name,
            last_name=b.renter.last_name,
        ) if b.renter else None,
    )


def _parse_date(value: str, field: str) -> date:
    try:
        return date.fromisoformat(value[:10])
    except ValueError:
        raise HTTPException(status_code=400, detail=f"Invalid {field}, expected YYYY-MM-DD")


@router.post("", response_model=BookingCreatedResponse, status_code=201)
async def create_booking(
    req: BookingCreate,
    user: User = Depends(require_user),
    db: Session = Depends(get_db),
    publisher: RealtimePublisher = Depends(get_publisher),
):
    if not req.listing_id or not req.start_date or not req.end_date or not req.total_price:
        raise HTTPException(status_code=400, detail="Missing booking details")
    if req.total_price <= 0:
        raise HTTPException(status_code=400, detail="total_price must be positive")
    start = _parse_date(req.start_date, "start_date")
    end = _parse_date(req.end_date, "end_date")
    if end < start:
        raise HTTPException(status_code=400, detail="end_date must not be before start_date")

    listing = db.get(Listing, req.listing_id)
    if not listing:
        raise HTTPException(status_code=404, detail="Listing not found")
    if not listing.available or listing.status != "ACTIVE":
        raise HTTPException(status_code=400, detail="Listing not available")
    if listing.owner_id == user.id:
        raise HTTPException(status_code=400, detail="You cannot book your own listing")

    # Booking and owner notification commit together or not at all
    try:
        booking = Booking(
            id=str(uuid.uuid4()),
            listing_id=listing.id,
            renter_id=user.id,
            start_date=start.isoformat(),
            end_date=end.isoformat(),
            total_price=req.total_price,
            status="PENDING",
            created_at=utcnow(),
        )
        db.add(booking)
        notification = add_notification(
            db,
            user_id=listing.owner_id,
            type="BOOKING_REQUEST",
            title="New Booking Request",
            message=f'{user.first_name} wants to rent "{listing.title}" from {start.isoformat()} to {end.isoformat()}.',
        )
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Create booking failed for listing %s", req.listing_id)
        raise HTTPException(status_code=500, detail="Failed to create booking")

    db.refresh(booking)
    logger.info("Booking %s requested on listing %s", booking.id, listing.id)
    await notify_user(publisher, listing.owner_id, "notification",
                      notification_to_response(notification).model_dump())

    return BookingCreatedResponse(
        message="Booking created successfully",
        booking=booking_to_response(booking),
    )


@router.get("", response_model=list[BookingResponse])
async def my_bookings(user: User = Depends(require_user), db: Session = Depends(get_db)):
    bookings = (
        db.query(Booking)
        .options(joinedload(Booking.listing), joinedload(Booking.renter))
        .filter(Booking.renter_id == user.id)
        .order_by(Booking.created_at.desc())
        .all()
    )
    return [booking_to_response(b) for b in bookings]


@router.get("/owner", response_model=list[BookingResponse])
async def owner_bookings(user: User = Depends(require_user), db: Session = Depends(get_db)):
    bookings = (
        db.query(Booking)
        .join(Booking.listing)
        .options(joinedload(Booking.listing), joinedload(Booking.renter))
        .filter(Listing.owner_id == user.id)
        .order_by(Booking.created_at.desc())
        .all()
    )
    return [booking_to_response(b) for b in bookings]


@router.patch("/{booking_id}/owner-action", response_model=BookingCreatedResponse)
async def owner_action(
    booking_id: str,
    req: OwnerAction,
    user: User = Depends(require_user),
    db: Session = Depends(get_db),
    publisher: RealtimePublisher = Depends(get_publisher),
):
    if req.action not in ("approve", "reject"):
        raise HTTPException(status_code=400, detail="action must be 'approve' or 'reject'")

    booking = (
        db.query(Booking)
        .options(joinedload(Booking.listing), joinedload(Booking.renter))
        .filter(Booking.id == booking_id)
        .first()
    )
    if not booking:
        raise HTTPException(status_code=404, detail="Booking not found")
    if booking.listing.owner_id != user.id:
        raise HTTPException(status_code=403, detail="Not your listing")
    if booking.status != "PENDING":
        raise HTTPException(status_code=400, detail="Booking is not pending")

    approved = req.action == "approve"
    note = req.owner_note or None
    if approved:
        message = f'Your booking for "{booking.listing.title}" has been approved!'
        if note:
            message += f" Note: {note}"
    else:
        message = f'Your booking for "{booking.listing.title}" was declined.'
        if note:
            message += f" Reason: {note}"

    try:
        booking.status = "CONFIRMED" if approved else "CANCELLED"
        booking.owner_note = note
        notification = add_notification(
            db,
            user_id=booking.renter_id,
            type="BOOKING_APPROVED" if approved else "BOOKING_REJECTED",
            title="Booking Approved!" if approved else "Booking Declined",
            message=message,
        )
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Owner action %s failed for booking %s", req.action, booking_id)
        raise HTTPException(status_code=500, detail="Failed to process booking action")

    db.refresh(booking)
    await notify_user(publisher, booking.renter_id, "notification",
                      notification_to_response(notification).model_dump())

    return BookingCreatedResponse(
        message=f"Booking {'approved' if approved else 'rejected'}",
        booking=booking_to_response(booking),
    )
