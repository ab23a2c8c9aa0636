from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from rentverse.config import settings
from rentverse.database import get_db
from rentverse.dependencies import require_user
from rentverse.models.listing import Listing
from rentverse.models.user import User
from rentverse.routers.auth import user_to_response
from rentverse.schemas.auth import PublicProfileResponse, UserResponse, UserSearchResponse, UserSearchResult
from rentverse.services.listing_service import like_pattern, listing_to_response

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/me", response_model=UserResponse)
async def me(user: User = Depends(require_user)):
    return user_to_response(user)


@router.get("/search", response_model=UserSearchResponse)
async def search_users(q: str | None = None, db: Session = Depends(get_db)):
    if not q or not q.strip():
        return UserSearchResponse(users=[])
    pattern = like_pattern(q.strip())
    users = (
        db.query(User)
        .filter(
            User.banned.is_(False),
            User.first_name.ilike(pattern, escape="\\") | User.last_name.ilike(pattern, escape="\\"),
        )
        .order_by(User.first_name)
        .limit(settings.user_search_limit)
        .all()
    )
    return UserSearchResponse(users=[
        UserSearchResult(
            id=u.id,
            first_name=u.first_name,
            last_name=u.last_name,
            avatar=u.avatar,
            verified=bool(u.verified),
            city=u.city,
        )
        for u in users
    ])


@router.get("/{user_id}", response_model=PublicProfileResponse)
async def public_profile(user_id: str, db: Session = Depends(get_db)):
    user = db.get(User, user_id)
    if not user or user.banned:
        raise HTTPException(status_code=404, detail="User not found")

    listings = (
        db.query(Listing)
        .filter(Listing.owner_id == user.id, Listing.status == "ACTIVE")
        .order_by(Listing.created_at.desc())
        .all()
    )
    return PublicProfileResponse(
        id=user.id,
        first_name=user.first_name,
        last_name=user.last_name,
        avatar=user.avatar,
        bio=user.bio,
        city=user.city,
        verified=bool(user.verified),
        created_at=user.created_at,
        listings=[listing_to_response(l) for l in listings],
    )
