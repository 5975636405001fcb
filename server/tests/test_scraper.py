import pytest

from scamscan.core.exceptions import ScrapeError
from scamscan.services.scraper import extract_listing, is_valid_url, scrape_listing

LISTING_PAGE = """
<html>
  <head>
    <title>Page title | Shop</title>
    <meta property="og:title" content="Sony WH-1000XM4 Headphones">
    <meta name="description" content="Noise cancelling,   barely used.">
    <meta property="og:image" content="/images/xm4.jpg">
  </head>
  <body>
    <h1>Heading title</h1>
    <div class="product-price"> $149.99 </div>
    <div class="sold-by">Sold by <b>AudioDeals</b></div>
  </body>
</html>
"""


def test_extract_listing_prefers_meta_tags():
    listing = extract_listing(LISTING_PAGE, "https://shop.example/items/42?ref=home")

    assert listing.title == "Sony WH-1000XM4 Headphones"
    assert listing.description == "Noise cancelling, barely used."
    assert listing.price == "$149.99"
    assert listing.seller_info == "Sold by AudioDeals"
    assert listing.image_url == "https://shop.example/images/xm4.jpg"


def test_extract_listing_falls_back_to_page_content():
    html = """
    <html><head><title>Old bike</title></head>
    <body>
      <p>Ridden twice, asking</p>
      <div>Now only $ 75 or best offer</div>
      <img src="https://cdn.example/bike.png">
    </body></html>
    """

    listing = extract_listing(html, "https://forum.example/t/1")

    assert listing.title == "Old bike"
    assert listing.description == "Ridden twice, asking"
    assert listing.price == "$ 75"
    assert listing.seller_info == ""
    assert listing.image_url == "https://cdn.example/bike.png"


def test_extract_listing_empty_page():
    listing = extract_listing("<html><body></body></html>", "https://x.example/")

    assert listing.title == ""
    assert listing.price == ""
    assert listing.image_url == ""


@pytest.mark.parametrize("url,valid", [
    ("https://www.ebay.com/itm/123", True),
    ("http://localhost:8000/listing", True),
    ("ftp://files.example/listing", False),
    ("not a url", False),
    ("https://", False),
])
def test_is_valid_url(url, valid):
    assert is_valid_url(url) is valid


async def test_scrape_listing_fetches_page(pages, scrape_client):
    pages["https://shop.example/items/42"] = (200, LISTING_PAGE)

    listing = await scrape_listing(scrape_client, "https://shop.example/items/42")

    assert listing.title == "Sony WH-1000XM4 Headphones"


async def test_scrape_listing_http_error(scrape_client):
    with pytest.raises(ScrapeError) as excinfo:
        await scrape_listing(scrape_client, "https://shop.example/missing")

    assert excinfo.value.message == "Failed to fetch URL: Not Found"
