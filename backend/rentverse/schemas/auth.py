from pydantic import BaseModel, Field

from rentverse.schemas.listing import ListingResponse


class RegisterRequest(BaseModel):
    email: str = Field(..., min_length=3)
    password: str
    first_name: str = Field(..., min_length=1)
    last_name: str | None = None
    phone: str | None = None
    city: str | None = None


class LoginRequest(BaseModel):
    email: str
    password: str


class UserResponse(BaseModel):
    id: str
    email: str
    first_name: str
    last_name: str | None
    phone: str | None = None
    city: str | None = None
    avatar: str | None = None
    bio: str | None = None
    verified: bool
    role: str
    created_at: str


class AuthResponse(BaseModel):
    message: str
    user: UserResponse
    token: str


class PublicProfileResponse(BaseModel):
    id: str
    first_name: str
    last_name: str | None
    avatar: str | None
    bio: str | None
    city: str | None
    verified: bool
    created_at: str
    listings: list[ListingResponse] = []


class UserSearchResult(BaseModel):
    id: str
    first_name: str
    last_name: str | None
    avatar: str | None
    verified: bool
    city: str | None


class UserSearchResponse(BaseModel):
    users: list[UserSearchResult]
