"""
Natural-language listing search: intent -> filter query -> ranking.
"""
import logging

from sqlalchemy import and_, or_
from sqlalchemy.orm import Session, joinedload, selectinload

from rentverse.config import settings
from rentverse.models.listing import Listing
from rentverse.schemas.search import IntentSummary, SearchIntent, SearchResponse
from rentverse.services.intent_service import detect_search_intent
from rentverse.services.listing_service import category_match, listing_to_response, text_match
from rentverse.services.ranking_service import rank_results

logger = logging.getLogger(__name__)

SEARCH_CATEGORIES = ["Tech", "Vehicles", "Rooms", "Equipment", "Fashion", "Studios", "Tools", "Digital"]


def build_search_terms(query: str, keywords: list[str]) -> list[str]:
    """Union of the model's keywords and the user's literal words.

    Each keyword contributes its whitespace-split words and itself; the raw
    query contributes its words. Terms are lower-cased, longer than one
    character, de-duplicated and kept in first-seen order.
    """
    terms: dict[str, None] = {}

    def add(term: str):
        term = term.strip().lower()
        if len(term) > 1:
            terms.setdefault(term, None)

    for keyword in keywords:
        for word in keyword.split():
            add(word)
        add(keyword)
    for word in query.split():
        add(word)
    return list(terms)


def build_search_filter(intent: SearchIntent, terms: list[str]):
    """Return the WHERE clause for a search, or None when nothing can match."""
    branches = [text_match(term) for term in terms]
    if intent.category:
        branches.append(category_match(intent.category))
    if not branches:
        return None

    clauses = [Listing.status == "ACTIVE", or_(*branches)]
    if intent.min_price is not None:
        clauses.append(Listing.price >= intent.min_price)
    if intent.max_price is not None:
        clauses.append(Listing.price <= intent.max_price)
    return and_(*clauses)


def find_listings(db: Session, intent: SearchIntent, query: str) -> list[dict]:
    where = build_search_filter(intent, build_search_terms(query, intent.keywords))
    if where is None:
        return []
    listings = (
        db.query(Listing)
        .options(joinedload(Listing.owner), selectinload(Listing.tags))
        .filter(where)
        .limit(settings.search_result_limit)
        .all()
    )
    return [listing_to_response(listing).model_dump() for listing in listings]


async def search(db: Session, query: str | None, client=None) -> SearchResponse:
    if not query:
        return SearchResponse(results=[], query="", intent=None)

    intent = await detect_search_intent(query, SEARCH_CATEGORIES, client)
    results = find_listings(db, intent, query)
    if len(results) > 1:
        results = await rank_results(query, results, client)

    logger.info("Search %r matched %d listings (category=%s)", query, len(results), intent.category)
    return SearchResponse(
        results=results,
        query=query,
        intent=IntentSummary(
            category=intent.category,
            explanation=intent.explanation,
            confidence=settings.search_confidence,
        ),
    )
