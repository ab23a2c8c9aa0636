from pydantic import BaseModel

from rentverse.schemas.listing import ListingResponse


class CollectionCreate(BaseModel):
    name: str | None = None
    emoji: str | None = None


class ListingRef(BaseModel):
    listing_id: str


class SavedListingSummary(BaseModel):
    id: str
    title: str
    price: float
    price_unit: str
    rating: float
    location: str | None
    available: bool


class WishlistItemResponse(BaseModel):
    id: str
    collection_id: str
    listing_id: str
    added_at: str
    listing: SavedListingSummary | None = None


class CollectionResponse(BaseModel):
    id: str
    name: str
    emoji: str | None
    is_default: bool
    item_count: int = 0
    items: list[WishlistItemResponse] = []
    created_at: str


class WishlistResponse(BaseModel):
    collections: list[CollectionResponse]


class QuickSaveResponse(BaseModel):
    item: WishlistItemResponse
    collection_id: str


class RecentlyViewedEntry(BaseModel):
    listing: ListingResponse
    viewed_at: str


class RecentlyViewedResponse(BaseModel):
    items: list[RecentlyViewedEntry]
