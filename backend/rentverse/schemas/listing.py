from pydantic import BaseModel, Field


class OwnerSummary(BaseModel):
    id: str
    first_name: str
    verified: bool


class ListingCreate(BaseModel):
    title: str = Field(..., min_length=1)
    description: str = Field(..., min_length=1)
    price: float = Field(..., gt=0)
    category: str = Field(..., min_length=1)
    location: str = Field(..., min_length=1)
    price_unit: str = "DAY"
    tags: list[str] = []
    available: bool = True


class ListingUpdate(BaseModel):
    title: str | None = None
    description: str | None = None
    price: float | None = Field(None, gt=0)
    category: str | None = None
    location: str | None = None
    price_unit: str | None = None
    tags: list[str] | None = None
    available: bool | None = None
    status: str | None = None


class ListingResponse(BaseModel):
    id: str
    title: str
    description: str
    category: str
    price: float
    price_unit: str
    location: str | None
    status: str
    available: bool
    rating: float
    tags: list[str] = []
    owner_id: str
    owner: OwnerSummary | None = None
    created_at: str
    updated_at: str


class ListingListResponse(BaseModel):
    listings: list[ListingResponse]
    total: int
