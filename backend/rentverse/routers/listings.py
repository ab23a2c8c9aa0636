import uuid

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import and_
from sqlalchemy.orm import Session, joinedload, selectinload

from rentverse.database import get_db, utcnow
from rentverse.dependencies import require_user
from rentverse.models.listing import LISTING_STATUSES, PRICE_UNITS, Listing
from rentverse.models.user import User
from rentverse.schemas.listing import ListingCreate, ListingListResponse, ListingResponse, ListingUpdate
from rentverse.services.listing_service import category_match, listing_to_response, set_listing_tags, text_match

router = APIRouter(prefix="/listings", tags=["listings"])

SORT_ORDERS = {
    "newest": Listing.created_at.desc(),
    "price_asc": Listing.price.asc(),
    "price_desc": Listing.price.desc(),
    "rating_desc": Listing.rating.desc(),
}


def _get_listing(db: Session, listing_id: str) -> Listing:
    listing = (
        db.query(Listing)
        .options(joinedload(Listing.owner), selectinload(Listing.tags))
        .filter(Listing.id == listing_id)
        .first()
    )
    if not listing:
        raise HTTPException(status_code=404, detail="Listing not found")
    return listing


def _check_price_unit(price_unit: str) -> str:
    unit = price_unit.upper()
    if unit not in PRICE_UNITS:
        raise HTTPException(status_code=400, detail=f"Invalid price unit. Must be one of: {PRICE_UNITS}")
    return unit


@router.get("", response_model=ListingListResponse)
async def list_listings(
    category: str | None = None,
    search: str | None = None,
    min_price: float | None = Query(None, ge=0),
    max_price: float | None = Query(None, ge=0),
    available_only: bool = False,
    sort: str = Query("newest", pattern="^(newest|price_asc|price_desc|rating_desc)$"),
    db: Session = Depends(get_db),
):
    query = db.query(Listing).options(joinedload(Listing.owner), selectinload(Listing.tags))
    query = query.filter(Listing.status == "ACTIVE")

    if category and category.lower() != "all":
        query = query.filter(category_match(category))
    if search:
        words = [w for w in search.split() if len(w) > 1]
        if words:
            query = query.filter(and_(*[text_match(w) for w in words]))
    if min_price is not None:
        query = query.filter(Listing.price >= min_price)
    if max_price is not None:
        query = query.filter(Listing.price <= max_price)
    if available_only:
        query = query.filter(Listing.available.is_(True))

    listings = query.order_by(SORT_ORDERS[sort]).all()
    return ListingListResponse(
        listings=[listing_to_response(l) for l in listings],
        total=len(listings),
    )


@router.get("/{listing_id}", response_model=ListingResponse)
async def get_listing(listing_id: str, db: Session = Depends(get_db)):
    return listing_to_response(_get_listing(db, listing_id))


@router.post("", response_model=ListingResponse, status_code=201)
async def create_listing(req: ListingCreate, user: User = Depends(require_user), db: Session = Depends(get_db)):
    now = utcnow()
    listing = Listing(
        id=str(uuid.uuid4()),
        owner_id=user.id,
        title=req.title.strip(),
        description=req.description,
        category=req.category.strip(),
        price=req.price,
        price_unit=_check_price_unit(req.price_unit),
        location=req.location,
        status="ACTIVE",
        available=req.available,
        rating=0.0,
        created_at=now,
        updated_at=now,
    )
    db.add(listing)
    set_listing_tags(db, listing, req.tags)
    db.commit()
    return listing_to_response(_get_listing(db, listing.id))


@router.put("/{listing_id}", response_model=ListingResponse)
async def update_listing(
    listing_id: str,
    req: ListingUpdate,
    user: User = Depends(require_user),
    db: Session = Depends(get_db),
):
    listing = _get_listing(db, listing_id)
    if listing.owner_id != user.id:
        raise HTTPException(status_code=403, detail="Not your listing")

    update_data = req.model_dump(exclude_unset=True)
    tags = update_data.pop("tags", None)
    if update_data.get("price_unit") is not None:
        update_data["price_unit"] = _check_price_unit(update_data["price_unit"])
    status = update_data.get("status")
    # Owners may draft, publish or archive; BLOCKED is reserved for moderators
    if status is not None and (status not in LISTING_STATUSES or status == "BLOCKED"):
        raise HTTPException(status_code=400, detail="Invalid listing status")
    if listing.status == "BLOCKED" and status is not None:
        raise HTTPException(status_code=403, detail="Listing is blocked by moderation")

    for key, value in update_data.items():
        if value is not None:
            setattr(listing, key, value)
    if tags is not None:
        set_listing_tags(db, listing, tags)
    listing.updated_at = utcnow()

    db.commit()
    return listing_to_response(_get_listing(db, listing.id))


@router.delete("/{listing_id}")
async def archive_listing(listing_id: str, user: User = Depends(require_user), db: Session = Depends(get_db)):
    listing = _get_listing(db, listing_id)
    if listing.owner_id != user.id:
        raise HTTPException(status_code=403, detail="Not your listing")
    listing.status = "ARCHIVED"
    listing.updated_at = utcnow()
    db.commit()
    return {"message": "Listing archived"}
