from pydantic import BaseModel


class ReportCreate(BaseModel):
    target_type: str
    target_id: str
    reason: str | None = None
    priority: str = "MEDIUM"


class ModerationDecision(BaseModel):
    note: str | None = None


class ReviewerSummary(BaseModel):
    id: str
    first_name: str
    last_name: str | None


class ModerationItemResponse(BaseModel):
    id: str
    target_type: str
    target_id: str
    reason: str
    priority: str
    status: str
    reporter_id: str | None
    reviewer: ReviewerSummary | None = None
    review_note: str | None
    reviewed_at: str | None
    created_at: str


class ModerationQueueResponse(BaseModel):
    items: list[ModerationItemResponse]
    total: int
    page: int
    page_size: int
    total_pages: int
