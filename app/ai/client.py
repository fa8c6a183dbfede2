import logging
from functools import lru_cache
from typing import Optional

from openai import AsyncOpenAI

from app.core.config import settings

logger = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def _build_client() -> Optional[AsyncOpenAI]:
    if not settings.OPENAI_API_KEY:
        logger.warning("OPENAI_API_KEY is not set; AI generation is disabled")
        return None
    # single-shot calls: the SDK must not retry behind our back
    return AsyncOpenAI(
        api_key=settings.OPENAI_API_KEY,
        base_url=settings.OPENAI_BASE_URL,
        timeout=settings.AI_TIMEOUT_SECONDS,
        max_retries=0,
    )


def get_ai_client() -> Optional[AsyncOpenAI]:
    """Dependency returning the shared chat completions client"""
    return _build_client()
