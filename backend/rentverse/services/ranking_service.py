"""
Relevance reordering of a fixed candidate set.

The model only proposes an order; ``merge_ranked_ids`` decides the output
and always returns every candidate exactly once.
"""
import json
import logging
from typing import Any, Callable, Sequence, TypeVar

from rentverse.config import settings
from rentverse.services.llm_client import complete_json

logger = logging.getLogger(__name__)

T = TypeVar("T")

RANKING_PROMPT = """Rank the following rental items based on their relevance to the user's query.
Consider the item's title, category, and description.

CRITICAL: You MUST return a JSON object with a 'rankedIds' array containing ALL of the IDs provided, sorted from most relevant to least relevant. DO NOT omit any IDs.

Query: {query}"""


def _default_id(item: Any) -> Any:
    return item["id"] if isinstance(item, dict) else item.id


def merge_ranked_ids(
    results: Sequence[T],
    ranked_ids: Any,
    key: Callable[[T], Any] = _default_id,
) -> list[T]:
    """Reorder ``results`` by ``ranked_ids`` without losing or inventing items.

    Known ids are taken in model order, first occurrence only; unknown ids
    are ignored. Anything the model left out follows in original order.
    """
    by_id: dict[Any, T] = {}
    for item in results:
        by_id.setdefault(key(item), item)

    ordered: list[T] = []
    seen: set = set()
    if isinstance(ranked_ids, list):
        for rid in ranked_ids:
            try:
                item = by_id.get(rid)
            except TypeError:  # unhashable garbage from the model
                continue
            if item is not None and rid not in seen:
                ordered.append(item)
                seen.add(rid)

    for item in results:
        item_id = key(item)
        if item_id not in seen:
            ordered.append(item)
            seen.add(item_id)
    return ordered


def simplify_candidate(item: dict) -> dict:
    description = item.get("description") or ""
    return {
        "id": item["id"],
        "title": item.get("title"),
        "description": description[: settings.ranking_description_chars],
        "category": item.get("category"),
    }


async def rank_results(query: str, results: list[dict], client=None) -> list[dict]:
    if client is None or len(results) <= 1:
        return results

    try:
        candidates = [simplify_candidate(r) for r in results]
        data = await complete_json(
            client,
            RANKING_PROMPT.format(query=query),
            f"Items to rank (IDs): {json.dumps(candidates)}",
        )
        return merge_ranked_ids(results, data.get("rankedIds"))
    except Exception as exc:
        logger.warning("Ranking failed for %r, keeping filter order: %s", query, exc)
        return results
