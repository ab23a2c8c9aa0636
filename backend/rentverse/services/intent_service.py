"""
Turns a free-text search query into structured filters.

The need-to-item table below is the source of truth for informal phrasing
("I need to cut wood" -> saws). It is rendered into the model prompt, and
its keywords stand in only when the model answers without any. Without a
model the intent is the raw query.
"""
import json
import logging
import math
import re
from dataclasses import dataclass

from rentverse.schemas.search import SearchIntent
from rentverse.services.llm_client import complete_json

logger = logging.getLogger(__name__)

BASIC_FILTERS_EXPLANATION = "Searching using basic filters"
FALLBACK_EXPLANATION = "Searching across all items"


@dataclass(frozen=True)
class NeedRule:
    example: str
    triggers: frozenset[str]
    keywords: tuple[str, ...]
    category: str


NEED_RULES: tuple[NeedRule, ...] = (
    NeedRule(
        example="I need to cut some wood",
        triggers=frozenset({"cut", "cutting", "chop", "wood", "lumber", "firewood", "tree"}),
        keywords=("axe", "chainsaw", "saw"),
        category="Tools",
    ),
    NeedRule(
        example="want to record a high quality video",
        triggers=frozenset({"video", "record", "recording", "film", "filming", "vlog"}),
        keywords=("camera", "tripod", "sony", "canon"),
        category="Tech",
    ),
    NeedRule(
        example="something to move my furniture",
        triggers=frozenset({"move", "moving", "furniture", "haul", "relocate", "relocating"}),
        keywords=("truck", "van", "pickup"),
        category="Vehicles",
    ),
)

SYSTEM_PROMPT = """You are an AI search assistant for RentVerse, a peer-to-peer rental platform.
Your goal is to parse user natural language queries into structured search parameters.

Available categories: {categories}

Return ONLY a JSON object with:
- category: The most relevant category from the list above, or null if uncertain.
- minPrice: Minimum price detected as a number, or null.
- maxPrice: Maximum price detected as a number, or null.
- keywords: An array of specific item keywords to use for text matching.
- semanticQuery: A cleaned up version of the query for semantic comparison.
- explanation: A short, friendly message explaining what you're searching for (e.g., "Looking for professional cameras under $200").

Instructions for improved accuracy:
1. Map "needs" or "problems" to specific items.
{need_rules}
2. Clean up "fluff" words (e.g., "I want", "Please search for").
3. If multiple categories could apply, pick the most specific one.
4. Map informal names to categories (e.g., "car" -> "Vehicles", "room" -> "Rooms")."""


def build_system_prompt(categories: list[str]) -> str:
    rules = "\n".join(
        f'   - "{rule.example}" -> keywords: {json.dumps(list(rule.keywords))}, '
        f'category: "{rule.category}"'
        for rule in NEED_RULES
    )
    return SYSTEM_PROMPT.format(categories=", ".join(categories), need_rules=rules)


def matching_need_rules(query: str) -> list[NeedRule]:
    tokens = set(re.findall(r"[a-z]+", query.lower()))
    return [rule for rule in NEED_RULES if rule.triggers & tokens]


def basic_intent(query: str, explanation: str) -> SearchIntent:
    return SearchIntent(
        category=None,
        min_price=None,
        max_price=None,
        keywords=[query],
        semantic_query=query,
        explanation=explanation,
    )


def _coerce_price(value) -> float | None:
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, str):
        value = value.strip().lstrip("$").replace(",", "")
    try:
        price = float(value)
    except (TypeError, ValueError, OverflowError):
        return None
    if not math.isfinite(price) or price < 0:
        return None
    return price


def _coerce_keywords(value) -> list[str]:
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, list):
        return []
    return [k.strip() for k in value if isinstance(k, str) and k.strip()]


def normalize_intent(data: dict, query: str, categories: list[str]) -> SearchIntent:
    """Coerce a raw model answer into a valid SearchIntent."""
    by_lower = {c.lower(): c for c in categories}
    raw_category = data.get("category")
    category = by_lower.get(raw_category.strip().lower()) if isinstance(raw_category, str) else None

    min_price = _coerce_price(data.get("minPrice"))
    max_price = _coerce_price(data.get("maxPrice"))
    if min_price is not None and max_price is not None and min_price > max_price:
        min_price, max_price = max_price, min_price

    keywords = _coerce_keywords(data.get("keywords"))
    if not keywords:
        for rule in matching_need_rules(query):
            for keyword in rule.keywords:
                if keyword not in keywords:
                    keywords.append(keyword)
    if not keywords:
        keywords = [query]

    semantic_query = data.get("semanticQuery")
    if not isinstance(semantic_query, str) or not semantic_query.strip():
        semantic_query = query

    explanation = data.get("explanation")
    if not isinstance(explanation, str) or not explanation.strip():
        explanation = f"Looking for {semantic_query}"

    return SearchIntent(
        category=category,
        min_price=min_price,
        max_price=max_price,
        keywords=keywords,
        semantic_query=semantic_query,
        explanation=explanation,
    )


async def detect_search_intent(query: str, categories: list[str], client=None) -> SearchIntent:
    if client is None:
        return basic_intent(query, BASIC_FILTERS_EXPLANATION)

    try:
        data = await complete_json(client, build_system_prompt(categories), query)
        return normalize_intent(data, query, categories)
    except Exception as exc:
        logger.warning("Intent detection failed for %r: %s", query, exc)
        return basic_intent(query, FALLBACK_EXPLANATION)
