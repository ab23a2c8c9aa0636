from pydantic import BaseModel

from rentverse.schemas.listing import ListingResponse


class SearchIntent(BaseModel):
    category: str | None = None
    min_price: float | None = None
    max_price: float | None = None
    keywords: list[str] = []
    semantic_query: str = ""
    explanation: str = ""


class IntentSummary(BaseModel):
    category: str | None
    explanation: str
    confidence: float


class SearchResponse(BaseModel):
    results: list[ListingResponse]
    query: str
    intent: IntentSummary | None
