import asyncio
import logging
import re
from decimal import Decimal, InvalidOperation
from typing import Any, Callable, Dict, List, Optional

from serpapi import GoogleSearch

logger = logging.getLogger(__name__)

# SerpAPI's client is blocking; these run in the default executor.

def google_shopping_search(query: str, api_key: str, location: str) -> dict:
    params = {
        "api_key": api_key,
        "engine": "google_shopping",
        "google_domain": "google.com",
        "q": query,
        "hl": "en",
        "location": location
    }
    return GoogleSearch(params).get_dict()

def yahoo_shopping_search(query: str, api_key: str, location: str) -> dict:
    params = {
        "api_key": api_key,
        "engine": "yahoo_shopping",
        "p": query
    }
    return GoogleSearch(params).get_dict()

def ebay_search(query: str, api_key: str, location: str) -> dict:
    params = {
        "api_key": api_key,
        "engine": "ebay",
        "_nkw": query
    }
    return GoogleSearch(params).get_dict()

def walmart_search(query: str, api_key: str, location: str) -> dict:
    params = {
        "api_key": api_key,
        "engine": "walmart",
        "query": query
    }
    return GoogleSearch(params).get_dict()

def home_depot_search(query: str, api_key: str, location: str) -> dict:
    params = {
        "country": "us",
        "api_key": api_key,
        "engine": "home_depot",
        "q": query
    }
    return GoogleSearch(params).get_dict()

def amazon_search(query: str, api_key: str, location: str) -> dict:
    params = {
        "engine": "amazon",
        "k": query,
        "amazon_domain": "amazon.com",
        "api_key": api_key
    }
    return GoogleSearch(params).get_dict()

PROVIDER_FUNCTION_MAP: Dict[str, Callable[[str, str, str], dict]] = {
    "google_shopping": google_shopping_search,
    "yahoo_shopping": yahoo_shopping_search,
    "ebay": ebay_search,
    "walmart": walmart_search,
    "home_depot": home_depot_search,
    "amazon": amazon_search,
}

# marketplaces where anyone can sell; everything else is a retailer
UNTRUSTED_PROVIDERS = {"ebay"}


def parse_price_to_decimal(val: Any) -> Optional[Decimal]:
    if val is None:
        return None
    if isinstance(val, dict):
        # some engines nest it: {"raw": "$12.99", "extracted": 12.99}
        val = val.get("extracted") or val.get("value") or val.get("raw")
    if isinstance(val, Decimal):
        return val.quantize(Decimal("0.01"))
    if isinstance(val, (int, float)):
        return Decimal(str(val)).quantize(Decimal("0.01"))
    if isinstance(val, str):
        # remove currency symbols and commas, preserve dots
        cleaned = re.sub(r"[^\d\.]", "", val)
        if not cleaned:
            return None
        try:
            return Decimal(cleaned).quantize(Decimal("0.01"))
        except InvalidOperation:
            return None
    return None


def normalize_items(provider: str, result: dict) -> List[dict]:
    items = result.get("shopping_results") or result.get("organic_results") or result.get("products") or []

    normalized = []
    for item in items:
        price = parse_price_to_decimal(item.get("extracted_price") or item.get("price"))
        if price is None or price <= 0:
            continue
        normalized.append({
            "provider": provider,
            "title": item.get("title") or item.get("name") or "Unknown product",
            "price": float(price),
            "url": item.get("link") or item.get("product_link") or "#",
            "trusted": provider not in UNTRUSTED_PROVIDERS,
        })
    return normalized


async def run_provider_search(provider: str, query: str, api_key: str, location: str) -> List[dict]:
    search_func = PROVIDER_FUNCTION_MAP.get(provider)
    if not search_func:
        raise ValueError(f"Unknown SerpAPI provider: {provider}")

    loop = asyncio.get_running_loop()
    raw = await loop.run_in_executor(None, search_func, query, api_key, location)
    if raw.get("error"):
        raise RuntimeError(raw["error"])

    items = normalize_items(provider, raw)
    logger.info("SerpAPI %s returned %d priced results for %r", provider, len(items), query)
    return items
