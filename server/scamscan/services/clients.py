"""
Client construction for external services.

Built once in the app lifespan and injected; nothing here reads the
environment on its own.
"""

import logging
from typing import Optional

import httpx
from openai import AsyncOpenAI

logger = logging.getLogger(__name__)

BROWSER_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/91.0.4472.124 Safari/537.36"
)


def create_openai_client(api_key: Optional[str], timeout: float) -> Optional[AsyncOpenAI]:
    """
    Create an async OpenAI client for listing analysis.

    Returns None when no key is configured; the analyzer then reports a
    missing key on every call instead of the process refusing to start.
    """
    if not api_key:
        logger.warning("[CLIENTS] No OpenAI API key provided, listing analysis will use fallbacks")
        return None

    client = AsyncOpenAI(api_key=api_key, timeout=timeout)
    logger.info("[CLIENTS] OpenAI client initialized")
    return client


def create_http_client(timeout: float) -> httpx.AsyncClient:
    return httpx.AsyncClient(
        timeout=timeout,
        follow_redirects=True,
        headers={"User-Agent": BROWSER_USER_AGENT},
    )
