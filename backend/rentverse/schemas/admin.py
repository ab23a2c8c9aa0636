from pydantic import BaseModel

from rentverse.schemas.booking import BookingResponse


class AdminProfileResponse(BaseModel):
    id: str
    email: str
    first_name: str
    role: str
    modules: list[str]


class AdminUserResponse(BaseModel):
    id: str
    email: str
    first_name: str
    last_name: str | None
    role: str
    verified: bool
    banned: bool
    ban_reason: str | None
    created_at: str


class BanRequest(BaseModel):
    reason: str | None = None


class ListingStatusUpdate(BaseModel):
    status: str
    reason: str | None = None


class SettingResponse(BaseModel):
    key: str
    value: str
    updated_at: str


class SettingUpdate(BaseModel):
    value: str


class AuditLogResponse(BaseModel):
    id: str
    admin_id: str | None
    action: str
    module: str
    target_type: str
    target_id: str
    details: str | None
    created_at: str


class BookingStatusUpdate(BaseModel):
    status: str


class AdminBookingListResponse(BaseModel):
    items: list[BookingResponse]
    total: int
    page: int
    page_size: int
    total_pages: int
