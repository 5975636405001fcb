import logging
import re
from typing import Optional
from urllib.parse import urljoin, urlparse

import httpx
from bs4 import BeautifulSoup

from scamscan.core.exceptions import ScrapeError
from scamscan.schemas.schemas import ScrapedListing

logger = logging.getLogger(__name__)

PRICE_SELECTORS = [
    ".price",
    '[itemprop="price"]',
    ".product-price",
    ".offer-price",
    ".current-price",
    ".sale-price",
    ".product__price",
    ".product-meta__price",
    'span:-soup-contains("$")',
]

SELLER_SELECTORS = [
    ".seller-info",
    ".merchant-info",
    '[itemprop="seller"]',
    ".vendor",
    ".store-name",
    ".sold-by",
]

PRICE_PATTERN = re.compile(r"\$\s?[\d,]+\.?\d*")


def is_valid_url(url: str) -> bool:
    parsed = urlparse(url)
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


def _clean(text: Optional[str]) -> str:
    return re.sub(r"\s+", " ", text or "").strip()


def _meta(soup: BeautifulSoup, **attrs) -> str:
    tag = soup.find("meta", attrs=attrs)
    return tag.get("content", "") if tag else ""


def _first_text(soup: BeautifulSoup, selector: str) -> str:
    element = soup.select_one(selector)
    return element.get_text(" ", strip=True) if element else ""


def _first_by_selectors(soup: BeautifulSoup, selectors) -> str:
    """Text of the first selector that matches anything, even if empty."""
    for selector in selectors:
        element = soup.select_one(selector)
        if element is not None:
            return element.get_text(" ", strip=True)
    return ""


def extract_listing(html: str, page_url: str) -> ScrapedListing:
    soup = BeautifulSoup(html, "html.parser")

    title = (
        _meta(soup, property="og:title")
        or _meta(soup, name="twitter:title")
        or (soup.title.get_text(strip=True) if soup.title else "")
        or _first_text(soup, "h1")
    )

    description = (
        _meta(soup, property="og:description")
        or _meta(soup, name="description")
        or _meta(soup, name="twitter:description")
        or _first_text(soup, "p")
    )

    price = _first_by_selectors(soup, PRICE_SELECTORS)
    if not price and soup.body:
        match = PRICE_PATTERN.search(soup.body.get_text(" "))
        if match:
            price = match.group(0)

    seller_info = _first_by_selectors(soup, SELLER_SELECTORS)

    image_url = (
        _meta(soup, property="og:image")
        or _meta(soup, name="twitter:image")
        or _attr(soup, 'img[itemprop="image"]', "src")
        or _attr(soup, ".product-image img", "src")
        or _attr(soup, "img", "src")
    )
    if image_url and not image_url.startswith("http"):
        parsed = urlparse(page_url)
        image_url = urljoin(f"{parsed.scheme}://{parsed.netloc}", image_url)

    return ScrapedListing(
        title=_clean(title),
        description=_clean(description),
        price=_clean(price),
        seller_info=_clean(seller_info),
        image_url=image_url,
    )


def _attr(soup: BeautifulSoup, selector: str, attr: str) -> str:
    element = soup.select_one(selector)
    return element.get(attr, "") if element else ""


async def scrape_listing(client: httpx.AsyncClient, url: str) -> ScrapedListing:
    try:
        response = await client.get(url)
        response.raise_for_status()
    except httpx.HTTPStatusError as e:
        raise ScrapeError(url, e.response.reason_phrase or str(e.response.status_code)) from e
    except httpx.RequestError as e:
        raise ScrapeError(url, str(e)) from e

    listing = extract_listing(response.text, str(response.url))
    logger.info("Scraped %s: title=%r price=%r", url, listing.title[:50], listing.price)
    return listing
