import pytest

from conftest import listings
from scamscan.core.exceptions import PriceSourceError
from scamscan.schemas.schemas import ComparableListing
from scamscan.services.price_oracle import (
    PriceOracle,
    category_comparison,
    format_price,
    parse_price,
    price_deviation,
)
from scamscan.services.price_sources import StaticPriceSource


def test_price_deviation_flags_deep_discounts():
    assert price_deviation(1000, 500) == (50, True)
    assert price_deviation(1000, 900) == (10, False)


def test_price_deviation_threshold_is_strict():
    assert price_deviation(1000, 600) == (40, False)


def test_price_deviation_overpriced_is_negative_and_not_suspicious():
    pct, suspicious = price_deviation(1000, 1500)
    assert pct == -50
    assert suspicious is False


def test_price_deviation_without_average():
    assert price_deviation(0, 100) == (0, False)


@pytest.mark.parametrize("text,expected", [
    ("$1,299.99", 1299.99),
    ("500", 500.0),
    ("USD 45.50 obo", 45.50),
    ("", 0.0),
    (None, 0.0),
    ("free", 0.0),
    ("1.2.3", 0.0),
])
def test_parse_price(text, expected):
    assert parse_price(text) == expected


def test_format_price():
    assert format_price(699) == "$699.00"
    assert format_price(1234.5) == "$1234.50"


async def test_compare_prices_from_comparables():
    oracle = PriceOracle([StaticPriceSource(listings(900, 1100))])

    result = await oracle.compare_prices("Samsung Galaxy S22", "$500")

    assert result.average_price == 1000
    assert result.lowest_price == 900
    assert result.highest_price == 1100
    assert result.percentage_difference == 50
    assert result.is_suspiciously_low is True
    assert [a.price for a in result.alternatives] == ["$900.00", "$1100.00"]
    assert result.alternatives[0].url == "https://shop.example/0"


async def test_compare_prices_caps_alternatives_at_five():
    oracle = PriceOracle([StaticPriceSource(listings(100, 110, 120, 130, 140, 150, 160))])

    result = await oracle.compare_prices("Office chair", "120")

    assert len(result.alternatives) == 5
    assert result.average_price == 130


async def test_compare_prices_ignores_unpriced_listings():
    source = StaticPriceSource(listings(0, 1000, 1000))
    result = await PriceOracle([source]).compare_prices("Gadget", "900")

    assert result.average_price == 1000
    assert len(result.alternatives) == 2


async def test_too_few_comparables_falls_back_to_category_table():
    oracle = PriceOracle([StaticPriceSource(listings(650))])

    result = await oracle.compare_prices("iPhone 13 Pro", "$400")

    assert result.average_price == 800
    assert result.lowest_price == 600
    assert result.highest_price == 1200
    assert result.percentage_difference == 50
    assert result.is_suspiciously_low is True
    assert result.alternatives[0].title == "iPhone 13 Pro - Certified Refurbished"
    assert result.alternatives[0].price == "$699.00"


async def test_failing_source_does_not_sink_the_others():
    broken = StaticPriceSource([], name="broken", error=PriceSourceError("broken", "timeout"))
    working = StaticPriceSource(listings(900, 1100), name="working")

    result = await PriceOracle([broken, working]).compare_prices("Dell XPS laptop", "1000")

    assert result.average_price == 1000
    assert result.is_suspiciously_low is False
    assert len(broken.queries) == 1


async def test_all_sources_failing_uses_category_estimate():
    broken = [StaticPriceSource([], name=f"s{i}", error=RuntimeError("down")) for i in range(3)]

    result = await PriceOracle(broken).compare_prices("PlayStation 5", "450")

    assert result.average_price == 500
    assert result.percentage_difference == 10
    assert result.alternatives[0].title == "PlayStation 5 - New"


async def test_vehicles_use_the_vehicle_source():
    marketplace = StaticPriceSource(listings(10, 20), name="marketplace")
    vehicles = StaticPriceSource(listings(20000, 30000), name="vehicles")
    oracle = PriceOracle([marketplace], vehicle_source=vehicles)

    result = await oracle.compare_prices("2018 Toyota Camry", "$12,000")

    assert marketplace.queries == []
    assert vehicles.queries[0].category == "vehicle"
    assert vehicles.queries[0].keywords == "2018 toyota camry"
    assert result.average_price == 25000
    assert result.is_suspiciously_low is True


async def test_real_estate_uses_the_real_estate_source():
    homes = StaticPriceSource(listings(400000, 500000), name="homes")
    oracle = PriceOracle([], real_estate_source=homes)

    result = await oracle.compare_prices("3 bedroom 2 bath house", "440000")

    assert homes.queries[0].category == "real_estate"
    assert result.average_price == 450000


async def test_vehicle_without_vehicle_source_gets_synthetic_alternatives():
    result = await PriceOracle([]).compare_prices("2018 Toyota Camry", "20000")

    assert result.average_price == 25000
    assert [a.title for a in result.alternatives] == [
        "2018 Toyota - Certified Pre-Owned",
        "2018 Toyota - Excellent Condition",
        "Similar Toyota Model - Low Miles",
    ]
    assert result.alternatives[0].price == "$26250.00"


async def test_compare_prices_tolerates_junk_input():
    result = await PriceOracle([]).compare_prices(None, None)

    assert result.average_price == 500
    assert result.alternatives


def test_motorcycle_fallback_alternatives():
    result = category_comparison("2020 Honda CBR600RR", 9000, "motorcycle")

    assert result.average_price == 8000
    assert result.is_suspiciously_low is False
    assert result.alternatives[0].title == "2020 Honda Motorcycle - Excellent Condition"
    assert result.alternatives[0].price == "$7600.00"


def test_unknown_category_brackets_the_asking_price():
    result = category_comparison("Thing", 100, "spaceship")

    assert result.average_price == pytest.approx(120)
    assert result.lowest_price == pytest.approx(80)
    assert result.highest_price == pytest.approx(150)
