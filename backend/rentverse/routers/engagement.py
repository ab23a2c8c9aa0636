import uuid

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from rentverse.config import settings
from rentverse.database import get_db, utcnow
from rentverse.dependencies import require_user
from rentverse.models.engagement import HostFollow, RecentlyViewed, WishlistCollection, WishlistItem
from rentverse.models.listing import Listing
from rentverse.models.user import User
from rentverse.schemas.engagement import (
    CollectionCreate,
    CollectionResponse,
    ListingRef,
    QuickSaveResponse,
    RecentlyViewedEntry,
    RecentlyViewedResponse,
    SavedListingSummary,
    WishlistItemResponse,
    WishlistResponse,
)
from rentverse.services.listing_service import listing_to_response

router = APIRouter(prefix="/engagement", tags=["engagement"])

DEFAULT_COLLECTION_NAME = "Saved Items"


def _item_to_response(item: WishlistItem) -> WishlistItemResponse:
    listing = item.listing
    return WishlistItemResponse(
        id=item.id,
        collection_id=item.collection_id,
        listing_id=item.listing_id,
        added_at=item.added_at,
        listing=SavedListingSummary(
            id=listing.id,
            title=listing.title,
            price=float(listing.price),
            price_unit=listing.price_unit,
            rating=float(listing.rating or 0.0),
            location=listing.location,
            available=bool(listing.available),
        ) if listing else None,
    )


def _collection_to_response(c: WishlistCollection) -> CollectionResponse:
    return CollectionResponse(
        id=c.id,
        name=c.name,
        emoji=c.emoji,
        is_default=bool(c.is_default),
        item_count=len(c.items),
        items=[_item_to_response(i) for i in c.items],
        created_at=c.created_at,
    )


def _own_collection(db: Session, collection_id: str, user: User) -> WishlistCollection:
    collection = db.get(WishlistCollection, collection_id)
    if not collection or collection.user_id != user.id:
        raise HTTPException(status_code=404, detail="Collection not found")
    return collection


def _require_listing(db: Session, listing_id: str) -> Listing:
    listing = db.get(Listing, listing_id)
    if not listing:
        raise HTTPException(status_code=404, detail="Listing not found")
    return listing


def _save(db: Session, collection: WishlistCollection, listing_id: str) -> WishlistItem:
    item = (
        db.query(WishlistItem)
        .filter(WishlistItem.collection_id == collection.id, WishlistItem.listing_id == listing_id)
        .first()
    )
    if item is None:
        item = WishlistItem(id=str(uuid.uuid4()), collection_id=collection.id,
                            listing_id=listing_id, added_at=utcnow())
        db.add(item)
    return item


# --- Wishlist ---

@router.get("/wishlist", response_model=WishlistResponse)
async def get_wishlist(user: User = Depends(require_user), db: Session = Depends(get_db)):
    collections = (
        db.query(WishlistCollection)
        .options(selectinload(WishlistCollection.items).joinedload(WishlistItem.listing))
        .filter(WishlistCollection.user_id == user.id)
        .order_by(WishlistCollection.created_at.asc())
        .all()
    )
    return WishlistResponse(collections=[_collection_to_response(c) for c in collections])


@router.post("/wishlist/collections", response_model=CollectionResponse, status_code=201)
async def create_collection(req: CollectionCreate, user: User = Depends(require_user), db: Session = Depends(get_db)):
    collection = WishlistCollection(
        id=str(uuid.uuid4()),
        user_id=user.id,
        name=(req.name or "").strip() or "New Collection",
        emoji=req.emoji,
        is_default=False,
        created_at=utcnow(),
    )
    db.add(collection)
    db.commit()
    db.refresh(collection)
    return _collection_to_response(collection)


@router.delete("/wishlist/collections/{collection_id}")
async def delete_collection(collection_id: str, user: User = Depends(require_user), db: Session = Depends(get_db)):
    collection = _own_collection(db, collection_id, user)
    if collection.is_default:
        raise HTTPException(status_code=400, detail="Cannot delete default collection")
    db.delete(collection)
    db.commit()
    return {"success": True}


@router.post("/wishlist/quick-save", response_model=QuickSaveResponse, status_code=201)
async def quick_save(req: ListingRef, user: User = Depends(require_user), db: Session = Depends(get_db)):
    _require_listing(db, req.listing_id)
    collection = (
        db.query(WishlistCollection)
        .filter(WishlistCollection.user_id == user.id, WishlistCollection.is_default.is_(True))
        .first()
    )
    if collection is None:
        collection = WishlistCollection(id=str(uuid.uuid4()), user_id=user.id, name=DEFAULT_COLLECTION_NAME,
                                        is_default=True, created_at=utcnow())
        db.add(collection)
    item = _save(db, collection, req.listing_id)
    db.commit()
    db.refresh(item)
    return QuickSaveResponse(item=_item_to_response(item), collection_id=collection.id)


@router.post("/wishlist/quick-unsave")
async def quick_unsave(req: ListingRef, user: User = Depends(require_user), db: Session = Depends(get_db)):
    own = select(WishlistCollection.id).where(WishlistCollection.user_id == user.id)
    db.query(WishlistItem).filter(
        WishlistItem.listing_id == req.listing_id,
        WishlistItem.collection_id.in_(own),
    ).delete(synchronize_session=False)
    db.commit()
    return {"success": True}


@router.get("/wishlist/check/{listing_id}")
async def check_saved(listing_id: str, user: User = Depends(require_user), db: Session = Depends(get_db)):
    saved = (
        db.query(WishlistItem.id)
        .join(WishlistItem.collection)
        .filter(WishlistItem.listing_id == listing_id, WishlistCollection.user_id == user.id)
        .first()
    )
    return {"saved": saved is not None}


@router.post("/wishlist/{collection_id}/items", response_model=WishlistItemResponse, status_code=201)
async def add_to_collection(
    collection_id: str,
    req: ListingRef,
    user: User = Depends(require_user),
    db: Session = Depends(get_db),
):
    collection = _own_collection(db, collection_id, user)
    _require_listing(db, req.listing_id)
    item = _save(db, collection, req.listing_id)
    db.commit()
    db.refresh(item)
    return _item_to_response(item)


@router.delete("/wishlist/items/{collection_id}/{listing_id}")
async def remove_from_collection(
    collection_id: str,
    listing_id: str,
    user: User = Depends(require_user),
    db: Session = Depends(get_db),
):
    _own_collection(db, collection_id, user)
    deleted = db.query(WishlistItem).filter(
        WishlistItem.collection_id == collection_id, WishlistItem.listing_id == listing_id
    ).delete(synchronize_session=False)
    if not deleted:
        raise HTTPException(status_code=404, detail="Item not found")
    db.commit()
    return {"success": True}


# --- Recently viewed ---

@router.post("/recently-viewed")
async def track_view(req: ListingRef, user: User = Depends(require_user), db: Session = Depends(get_db)):
    _require_listing(db, req.listing_id)
    view = (
        db.query(RecentlyViewed)
        .filter(RecentlyViewed.user_id == user.id, RecentlyViewed.listing_id == req.listing_id)
        .first()
    )
    if view:
        view.viewed_at = utcnow()
    else:
        db.add(RecentlyViewed(id=str(uuid.uuid4()), user_id=user.id,
                              listing_id=req.listing_id, viewed_at=utcnow()))
    db.flush()

    # Keep only the newest views per user
    stale = (
        db.query(RecentlyViewed.id)
        .filter(RecentlyViewed.user_id == user.id)
        .order_by(RecentlyViewed.viewed_at.desc())
        .offset(settings.recently_viewed_limit)
        .all()
    )
    if stale:
        db.query(RecentlyViewed).filter(
            RecentlyViewed.id.in_([row.id for row in stale])
        ).delete(synchronize_session=False)
    db.commit()
    return {"success": True}


@router.get("/recently-viewed", response_model=RecentlyViewedResponse)
async def recently_viewed(
    limit: int = Query(20, ge=1, le=50),
    user: User = Depends(require_user),
    db: Session = Depends(get_db),
):
    views = (
        db.query(RecentlyViewed)
        .filter(RecentlyViewed.user_id == user.id)
        .order_by(RecentlyViewed.viewed_at.desc())
        .limit(limit)
        .all()
    )
    return RecentlyViewedResponse(items=[
        RecentlyViewedEntry(listing=listing_to_response(v.listing), viewed_at=v.viewed_at)
        for v in views
    ])


# --- Following hosts ---

@router.post("/follow/{host_id}")
async def follow_host(host_id: str, user: User = Depends(require_user), db: Session = Depends(get_db)):
    if host_id == user.id:
        raise HTTPException(status_code=400, detail="Cannot follow yourself")
    if not db.get(User, host_id):
        raise HTTPException(status_code=404, detail="Host not found")
    if db.get(HostFollow, (user.id, host_id)) is None:
        db.add(HostFollow(follower_id=user.id, host_id=host_id, created_at=utcnow()))
        db.commit()
    return {"following": True}


@router.delete("/follow/{host_id}")
async def unfollow_host(host_id: str, user: User = Depends(require_user), db: Session = Depends(get_db)):
    follow = db.get(HostFollow, (user.id, host_id))
    if follow is not None:
        db.delete(follow)
        db.commit()
    return {"following": False}


@router.get("/follow/check/{host_id}")
async def check_following(host_id: str, user: User = Depends(require_user), db: Session = Depends(get_db)):
    return {"following": db.get(HostFollow, (user.id, host_id)) is not None}


@router.get("/follow/stats/{host_id}")
async def follower_stats(host_id: str, db: Session = Depends(get_db)):
    return {"followers": db.query(HostFollow).filter(HostFollow.host_id == host_id).count()}
