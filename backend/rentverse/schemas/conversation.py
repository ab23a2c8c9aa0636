from pydantic import BaseModel


class ConversationCreate(BaseModel):
    receiver_id: str | None = None
    listing_id: str | None = None
    message: str | None = None


class MessageCreate(BaseModel):
    text: str | None = None


class ParticipantSummary(BaseModel):
    id: str
    first_name: str
    last_name: str | None
    avatar: str | None


class MessageResponse(BaseModel):
    id: str
    conversation_id: str
    sender_id: str
    sender_name: str
    text: str
    read: bool
    created_at: str


class ConversationResponse(BaseModel):
    id: str
    listing_id: str | None
    listing_title: str | None
    participants: list[ParticipantSummary]
    last_message: MessageResponse | None
    unread_count: int = 0
    created_at: str
    updated_at: str
