"""
Chat-completion client for the hosted language model.

The provider exposes an OpenAI-compatible API, so the official ``openai``
SDK is pointed at its base URL. Without a configured key there is no client
and callers fall back to deterministic behaviour.
"""
import json
import logging
from functools import lru_cache

from openai import AsyncOpenAI

from rentverse.config import settings

logger = logging.getLogger(__name__)


@lru_cache(maxsize=4)
def _build_client(api_key: str, base_url: str, timeout: float) -> AsyncOpenAI:
    # Callers fall back on the first failure
    return AsyncOpenAI(api_key=api_key, base_url=base_url, timeout=timeout, max_retries=0)


def get_llm_client() -> AsyncOpenAI | None:
    if not settings.groq_api_key:
        return None
    return _build_client(settings.groq_api_key, settings.llm_base_url, settings.llm_timeout_seconds)


async def complete_json(client, system_prompt: str, user_content: str) -> dict:
    """Run one JSON-mode chat completion and return the decoded object.

    Raises on transport errors and on responses that are not a JSON object;
    callers own the fallback policy.
    """
    completion = await client.chat.completions.create(
        model=settings.llm_model,
        messages=[
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": user_content},
        ],
        response_format={"type": "json_object"},
    )
    content = completion.choices[0].message.content if completion.choices else None
    data = json.loads(content or "{}")
    if not isinstance(data, dict):
        raise ValueError(f"Expected a JSON object, got {type(data).__name__}")
    return data
