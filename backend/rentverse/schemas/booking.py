from pydantic import BaseModel


class BookingCreate(BaseModel):
    listing_id: str | None = None
    start_date: str | None = None
    end_date: str | None = None
    total_price: float | None = None


class OwnerAction(BaseModel):
    action: str
    owner_note: str | None = None


class BookingListingSummary(BaseModel):
    id: str
    title: str
    price: float
    price_unit: str


class BookingRenterSummary(BaseModel):
    id: str
    first_name: str
    last_name: str | None


class BookingResponse(BaseModel):
    id: str
    listing_id: str
    renter_id: str
    start_date: str
    end_date: str
    total_price: float
    status: str
    owner_note: str | None
    created_at: str
    listing: BookingListingSummary | None = None
    renter: BookingRenterSummary | None = None


class BookingCreatedResponse(BaseModel):
    message: str
    booking: BookingResponse
