"""
Price sources: where comparable listings come from.

PriceSource is the capability the Price Oracle depends on. SerpApiPriceSource
is the live implementation; the simulated marketplaces and the vehicle and
real-estate generators synthesize plausible listings from the category price
tables and draw all randomness from an injected random.Random, so a seeded
generator gives repeatable output. StaticPriceSource serves canned listings.
"""

import logging
import random
import re
import string
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, List, Optional, Sequence, Tuple

from scamscan.core.exceptions import PriceSourceError
from scamscan.schemas.schemas import ComparableListing
from scamscan.services import catalog
from scamscan.services.serp_api import run_provider_search

logger = logging.getLogger(__name__)

YEAR_RE = re.compile(r"\b(?:19|20)\d{2}\b")
BEDROOM_RE = re.compile(r"(\d+)\s*(?:bed|bedroom|br)\b", re.IGNORECASE)
BATHROOM_RE = re.compile(r"(\d+(?:\.\d+)?)\s*(?:bath|bathroom|ba)\b", re.IGNORECASE)
LOCATION_RE = re.compile(r"\bin\s+([a-z][a-z\s]*)", re.IGNORECASE)


@dataclass(frozen=True)
class ListingQuery:
    title: str
    keywords: str
    category: str


class PriceSource(ABC):
    name: str = "source"

    @abstractmethod
    async def search(self, query: ListingQuery) -> List[ComparableListing]:
        """Return comparable listings; raise PriceSourceError on failure."""


def _random_id(rng: random.Random, length: int = 8) -> str:
    return "".join(rng.choice(string.ascii_uppercase + string.digits) for _ in range(length))


def _vary(rng: random.Random, base: float, spread: float) -> float:
    """base scaled by a uniform factor in [1 - spread, 1 + spread)."""
    return base * (1 + rng.random() * 2 * spread - spread)


class SerpApiPriceSource(PriceSource):
    def __init__(self, provider: str, api_key: str, location: str):
        self.name = provider
        self.provider = provider
        self.api_key = api_key
        self.location = location

    async def search(self, query: ListingQuery) -> List[ComparableListing]:
        try:
            items = await run_provider_search(self.provider, query.keywords, self.api_key, self.location)
        except Exception as e:
            raise PriceSourceError(self.name, str(e)) from e
        return [
            ComparableListing(title=i["title"], price=i["price"], url=i["url"], trusted=i["trusted"])
            for i in items
        ]


class SimulatedMarketplaceSource(PriceSource):
    """Stands in for a retailer API by jittering the category average price."""

    def __init__(
        self,
        name: str,
        label: str,
        count_range: Tuple[int, int],
        spread: float,
        conditions: Tuple[str, str],
        url_template: str,
        trusted: Callable[[int], bool],
        rng: random.Random,
    ):
        self.name = name
        self.label = label
        self.count_range = count_range
        self.spread = spread
        self.conditions = conditions
        self.url_template = url_template
        self.trusted = trusted
        self.rng = rng

    async def search(self, query: ListingQuery) -> List[ComparableListing]:
        avg_price = catalog.price_range_for_category(query.category).avg_price
        names = catalog.product_names_for_category(query.category)
        count = self.rng.randint(*self.count_range)

        results = []
        for i in range(count):
            condition = self.conditions[0] if i == 0 else self.conditions[1]
            results.append(ComparableListing(
                title=f"{self.label}: {self.rng.choice(names)} ({condition})",
                price=_vary(self.rng, avg_price, self.spread),
                url=self.url_template.format(id=_random_id(self.rng)),
                trusted=self.trusted(i),
            ))
        return results


def amazon_source(rng: random.Random) -> SimulatedMarketplaceSource:
    return SimulatedMarketplaceSource(
        "amazon", "Amazon", (2, 4), 0.15, ("New", "Renewed"),
        "https://www.amazon.com/dp/{id}", lambda i: True, rng,
    )


def ebay_source(rng: random.Random) -> SimulatedMarketplaceSource:
    # only the top result comes from a trusted seller
    return SimulatedMarketplaceSource(
        "ebay", "eBay", (1, 3), 0.25, ("Like New", "Used"),
        "https://www.ebay.com/itm/{id}", lambda i: i == 0, rng,
    )


def walmart_source(rng: random.Random) -> SimulatedMarketplaceSource:
    return SimulatedMarketplaceSource(
        "walmart", "Walmart", (1, 2), 0.10, ("New", "Refurbished"),
        "https://www.walmart.com/ip/{id}", lambda i: True, rng,
    )


class VehicleListingSource(PriceSource):
    """Dealer-style car and motorcycle listings priced by make, year and age."""

    name = "vehicles"

    def __init__(self, rng: random.Random, now: Callable[[], datetime] = datetime.now):
        self.rng = rng
        self.now = now

    async def search(self, query: ListingQuery) -> List[ComparableListing]:
        is_motorcycle = query.category == "motorcycle"
        models_by_make = catalog.MOTORCYCLE_MODELS if is_motorcycle else catalog.CAR_MODELS
        sources = catalog.MOTORCYCLE_SOURCES if is_motorcycle else catalog.CAR_SOURCES
        text = f"{query.title} {query.keywords}".lower()

        year_match = YEAR_RE.search(text)
        year = int(year_match.group(0)) if year_match else None
        detected_make = detect_make(text, models_by_make.keys())

        base_price = 5000 if is_motorcycle else 15000
        if year:
            age = self.now().year - year
            if is_motorcycle:
                base_price = max(2000, 12000 - age * 500)
            else:
                base_price = max(5000, 35000 - age * 1500)

        results = []
        for _ in range(self.rng.randint(3, 5)):
            if year:
                listing_year = year + self.rng.randint(-3, 3)
            else:
                listing_year = self.rng.randint(2015, 2022)
            make = detected_make or self.rng.choice(list(models_by_make))
            model = self.rng.choice(models_by_make.get(make) or ["Model Unknown"])
            condition = self.rng.choice(catalog.VEHICLE_CONDITIONS)
            source = self.rng.choice(sources)
            model_slug = re.sub(r"\s+", "-", model.lower())
            slug = f"{make.lower()}-{model_slug}-{listing_year}"

            results.append(ComparableListing(
                title=f"{source}: {listing_year} {make} {model} - {condition} Condition",
                price=_vary(self.rng, base_price, 0.20),
                url=f"https://www.example.com/{slug}",
                trusted=source not in catalog.PRIVATE_PARTY_SOURCES,
            ))
        return results


def detect_make(text: str, makes: Sequence[str]) -> Optional[str]:
    lowered = text.lower()
    for make in makes:
        # "harley" should find "Harley-Davidson"
        if make.lower().split("-")[0] in lowered:
            return make
    return None


class RealEstateListingSource(PriceSource):
    name = "real_estate"

    def __init__(self, rng: random.Random):
        self.rng = rng

    async def search(self, query: ListingQuery) -> List[ComparableListing]:
        text = query.title or query.keywords

        bedroom_match = BEDROOM_RE.search(text)
        bathroom_match = BATHROOM_RE.search(text)
        location_match = LOCATION_RE.search(text)

        bedrooms = int(bedroom_match.group(1)) if bedroom_match else self.rng.randint(2, 4)
        bathrooms = float(bathroom_match.group(1)) if bathroom_match else float(self.rng.randint(1, 2))
        location = location_match.group(1).strip() if location_match else "the area"

        base_price = 250000 + bedrooms * 50000 + bathrooms * 25000

        results = []
        for _ in range(self.rng.randint(3, 4)):
            listing_bedrooms = max(1, bedrooms + self.rng.randint(-1, 1))
            listing_bathrooms = max(1.0, bathrooms + self.rng.choice((-0.5, 0.5)))
            property_type = self.rng.choice(catalog.PROPERTY_TYPES)
            source = self.rng.choice(catalog.REAL_ESTATE_SOURCES)

            results.append(ComparableListing(
                title=f"{source}: {listing_bedrooms} bed, {listing_bathrooms:g} bath {property_type} in {location}",
                price=_vary(self.rng, base_price, 0.15),
                url=f"https://www.example.com/property-{self.rng.randint(0, 9999)}",
                trusted=True,
            ))
        return results


class StaticPriceSource(PriceSource):
    """Serves a fixed list of listings, or raises the configured error."""

    def __init__(self, listings: Sequence[ComparableListing], name: str = "static", error: Optional[Exception] = None):
        self.name = name
        self.listings = list(listings)
        self.error = error
        self.queries: List[ListingQuery] = []

    async def search(self, query: ListingQuery) -> List[ComparableListing]:
        self.queries.append(query)
        if self.error is not None:
            raise self.error
        return [listing.model_copy() for listing in self.listings]


def build_marketplace_sources(
    serpapi_key: Optional[str],
    providers: Sequence[str],
    location: str,
    rng: random.Random,
) -> List[PriceSource]:
    """Live SerpAPI engines when a key is configured, simulated retailers otherwise."""
    if serpapi_key:
        sources: List[PriceSource] = [SerpApiPriceSource(p, serpapi_key, location) for p in providers[:3]]
        logger.info("Using live SerpAPI price sources: %s", ", ".join(s.name for s in sources))
        return sources

    logger.info("No SerpAPI key configured, using simulated marketplace sources")
    return [amazon_source(rng), ebay_source(rng), walmart_source(rng)]
