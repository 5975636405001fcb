"""
Price comparison for a listing.

compare_prices never raises: comparable listings are gathered from the
configured sources with each source isolated from the others' failures, and
when fewer than MIN_COMPARABLES listings come back the result is estimated
from the static per-category price table instead.
"""

import asyncio
import logging
import re
from typing import List, Optional, Sequence, Tuple

from scamscan.schemas.schemas import Alternative, ComparableListing, PriceComparisonResult
from scamscan.services import catalog
from scamscan.services.category import detect_category, extract_keywords
from scamscan.services.price_sources import ListingQuery, PriceSource

logger = logging.getLogger(__name__)

SUSPICIOUS_DISCOUNT_PCT = 40
MIN_COMPARABLES = 2
MAX_ALTERNATIVES = 5
VEHICLE_CATEGORIES = {"vehicle", "motorcycle"}


def parse_price(price_text) -> float:
    """Strip everything but digits and dots; empty or unparseable gives 0."""
    if price_text is None:
        return 0.0
    cleaned = re.sub(r"[^0-9.]", "", str(price_text))
    try:
        return float(cleaned) if cleaned else 0.0
    except ValueError:
        return 0.0


def format_price(value: float) -> str:
    return f"${value:.2f}"


def price_deviation(average_price: float, price: float) -> Tuple[float, bool]:
    """
    Percentage the asking price sits below the average (negative when above)
    and whether that discount is large enough to be suspicious.
    """
    if average_price <= 0:
        return 0.0, False
    percentage = (average_price - price) / average_price * 100
    return percentage, percentage > SUSPICIOUS_DISCOUNT_PCT


def summarize_listings(listings: Sequence[ComparableListing], price: float) -> PriceComparisonResult:
    prices = [listing.price for listing in listings]
    average_price = sum(prices) / len(prices)
    percentage, suspicious = price_deviation(average_price, price)

    return PriceComparisonResult(
        average_price=average_price,
        lowest_price=min(prices),
        highest_price=max(prices),
        percentage_difference=percentage,
        is_suspiciously_low=suspicious,
        alternatives=[
            Alternative(title=l.title, price=format_price(l.price), url=l.url, trusted=l.trusted)
            for l in listings[:MAX_ALTERNATIVES]
        ],
    )


def fallback_alternatives(category: str, avg_price: float, title: str = "") -> List[Alternative]:
    year_match = re.search(r"\b(?:19|20)\d{2}\b", title)
    year = year_match.group(0) if year_match else "Recent"
    brands = [w for w in title.split() if len(w) > 2]
    brand = brands[0] if brands else None

    if category == "motorcycle":
        make = _make_from_title(title, catalog.MOTORCYCLE_MODELS) or brand or "Unknown"
        return [
            Alternative(title=f"{year} {make} Motorcycle - Excellent Condition",
                        price=format_price(round(avg_price * 0.95)), url="https://www.cycletrader.com/", trusted=True),
            Alternative(title=f"{year} {make} Motorcycle - Good Condition",
                        price=format_price(round(avg_price * 0.85)), url="https://www.motorcycles.autotrader.com/", trusted=True),
            Alternative(title=f"Similar {make} Model - Low Miles",
                        price=format_price(round(avg_price * 1.05)), url="https://www.revzilla.com/", trusted=True),
        ]

    if category == "vehicle":
        make = _make_from_title(title, catalog.CAR_MODELS) or brand or "Unknown"
        return [
            Alternative(title=f"{year} {make} - Certified Pre-Owned",
                        price=format_price(round(avg_price * 1.05)), url="https://www.autotrader.com/", trusted=True),
            Alternative(title=f"{year} {make} - Excellent Condition",
                        price=format_price(round(avg_price * 0.95)), url="https://www.cars.com/", trusted=True),
            Alternative(title=f"Similar {make} Model - Low Miles",
                        price=format_price(round(avg_price * 0.9)), url="https://www.cargurus.com/", trusted=True),
        ]

    fixed = catalog.FALLBACK_ALTERNATIVES.get(category)
    if fixed:
        return [
            Alternative(title=alt_title, price=format_price(alt_price), url=url, trusted=True)
            for alt_title, alt_price, url in fixed
        ]

    return [
        Alternative(title="Similar Product - Verified Seller",
                    price=format_price(round(avg_price)), url="https://www.amazon.com", trusted=True),
        Alternative(title="Alternative Product - Top Rated",
                    price=format_price(round(avg_price * 0.9)), url="https://www.bestbuy.com", trusted=True),
    ]


def _make_from_title(title: str, models_by_make) -> Optional[str]:
    lowered = title.lower()
    for make in models_by_make:
        short = make.split("-")[0]
        if short.lower() in lowered:
            return short
    return None


def category_comparison(title: str, price: float, category: str) -> PriceComparisonResult:
    """Estimate from the static table when live data is too thin."""
    price_range = catalog.price_range_for_category(category, price)
    percentage, suspicious = price_deviation(price_range.avg_price, price)

    return PriceComparisonResult(
        average_price=price_range.avg_price,
        lowest_price=price_range.min_price,
        highest_price=price_range.max_price,
        percentage_difference=percentage,
        is_suspiciously_low=suspicious,
        alternatives=fallback_alternatives(category, price_range.avg_price, title),
    )


def absolute_fallback() -> PriceComparisonResult:
    return PriceComparisonResult(
        average_price=100,
        lowest_price=80,
        highest_price=120,
        percentage_difference=0,
        is_suspiciously_low=False,
        alternatives=[Alternative(title="Similar Product", price="$100.00", url="https://www.amazon.com", trusted=True)],
    )


class PriceOracle:
    """
    Routes a listing to the right price sources and condenses the answer.

    Vehicles and motorcycles go to vehicle_source, real estate to
    real_estate_source, everything else fans out to marketplace_sources
    concurrently.
    """

    def __init__(
        self,
        marketplace_sources: Sequence[PriceSource],
        vehicle_source: Optional[PriceSource] = None,
        real_estate_source: Optional[PriceSource] = None,
    ):
        self.marketplace_sources = list(marketplace_sources)
        self.vehicle_source = vehicle_source
        self.real_estate_source = real_estate_source

    async def compare_prices(self, title, price_text) -> PriceComparisonResult:
        title = title if isinstance(title, str) else ""
        price = parse_price(price_text)

        try:
            category = detect_category(title)
            keywords = extract_keywords(title)
            logger.info("Detected category %s for title %r", category, title)

            listings = await self.find_comparables(ListingQuery(title=title, keywords=keywords, category=category))
            logger.info("Found %d comparable listings for %r", len(listings), keywords)

            if len(listings) < MIN_COMPARABLES:
                return category_comparison(title, price, category)
            return summarize_listings(listings, price)
        except Exception:
            logger.exception("Error in price comparison")
            try:
                return category_comparison(title, price, detect_category(title))
            except Exception:
                logger.exception("Error creating category comparison")
                return absolute_fallback()

    async def find_comparables(self, query: ListingQuery) -> List[ComparableListing]:
        if query.category in VEHICLE_CATEGORIES:
            sources = [self.vehicle_source] if self.vehicle_source else []
        elif query.category == "real_estate":
            sources = [self.real_estate_source] if self.real_estate_source else []
        else:
            sources = self.marketplace_sources

        # one result slot per source; a failing source only empties its own slot
        outcomes = await asyncio.gather(*(s.search(query) for s in sources), return_exceptions=True)

        listings: List[ComparableListing] = []
        for source, outcome in zip(sources, outcomes):
            if isinstance(outcome, BaseException):
                logger.warning("Price source %s failed: %s", source.name, outcome)
                continue
            listings.extend(l for l in outcome if l.price > 0)
        return listings
