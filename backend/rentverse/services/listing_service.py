import uuid

from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from rentverse.models.listing import Listing
from rentverse.models.tag import Tag
from rentverse.schemas.listing import ListingResponse, OwnerSummary


def like_pattern(term: str) -> str:
    escaped = term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


def text_match(term: str):
    """Title or description contains ``term``, or a tag equals it (case-insensitive)."""
    pattern = like_pattern(term)
    return or_(
        Listing.title.ilike(pattern, escape="\\"),
        Listing.description.ilike(pattern, escape="\\"),
        Listing.tags.any(func.lower(Tag.name) == term.lower()),
    )


def category_match(category: str):
    return func.lower(Listing.category) == category.lower()


def clean_tags(names: list[str]) -> list[str]:
    cleaned = []
    for name in names:
        name = name.strip()
        if name and name not in cleaned:
            cleaned.append(name)
    return cleaned


def set_listing_tags(db: Session, listing: Listing, names: list[str]) -> None:
    tags = []
    for name in clean_tags(names):
        tag = db.query(Tag).filter(Tag.name == name).first()
        if not tag:
            tag = Tag(id=str(uuid.uuid4()), name=name)
            db.add(tag)
        tags.append(tag)
    listing.tags = tags


def listing_to_response(listing: Listing) -> ListingResponse:
    owner = None
    if listing.owner is not None:
        owner = OwnerSummary(
            id=listing.owner.id,
            first_name=listing.owner.first_name,
            verified=bool(listing.owner.verified),
        )
    return ListingResponse(
        id=listing.id,
        title=listing.title,
        description=listing.description or "",
        category=listing.category,
        price=float(listing.price),
        price_unit=listing.price_unit,
        location=listing.location,
        status=listing.status,
        available=bool(listing.available),
        rating=float(listing.rating or 0.0),
        tags=[t.name for t in listing.tags],
        owner_id=listing.owner_id,
        owner=owner,
        created_at=listing.created_at,
        updated_at=listing.updated_at,
    )
