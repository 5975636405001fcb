import logging

import httpx
from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse

from scamscan.api.deps import get_http_client
from scamscan.core.exceptions import ScrapeError
from scamscan.schemas.schemas import ScrapedListing, ScrapeRequest
from scamscan.services.scraper import is_valid_url, scrape_listing

logger = logging.getLogger(__name__)

router = APIRouter()

@router.post("/url-scraper", response_model=ScrapedListing)
async def scrape_url(body: ScrapeRequest, client: httpx.AsyncClient = Depends(get_http_client)):
    """
    Pull title, description, price, seller and image out of a listing page.
    """
    if not body.url:
        raise HTTPException(400, "No URL provided")
    if not is_valid_url(body.url):
        raise HTTPException(400, "Invalid URL format")

    try:
        return await scrape_listing(client, body.url)
    except ScrapeError as e:
        logger.error("Error scraping URL: %s", e)
        return JSONResponse({"error": e.message}, status_code=500)
    except Exception as e:
        logger.exception("Error in URL scraper API")
        return JSONResponse({"error": str(e) or "Failed to scrape URL"}, status_code=500)
