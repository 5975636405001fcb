import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from scamscan.api.deps import get_analyzer, get_price_oracle
from scamscan.db.db import get_db
from scamscan.schemas.schemas import ScanRequest, ScanResponse
from scamscan.services.llm import ListingAnalyzer
from scamscan.services.price_oracle import PriceOracle
from scamscan.services.scanner import run_scan, scan_failure_payload

logger = logging.getLogger(__name__)

router = APIRouter()

@router.post("/scan", response_model=ScanResponse)
async def scan_listing(
    body: ScanRequest,
    analyzer: ListingAnalyzer = Depends(get_analyzer),
    oracle: PriceOracle = Depends(get_price_oracle),
    db: AsyncSession = Depends(get_db),
):
    """
    Score a listing: text analysis, price comparison and optional image
    analysis combined into one scam score, stored in the scan history.
    """
    try:
        return await run_scan(body, analyzer, oracle, db)
    except Exception as e:
        logger.exception("Error in scan API")
        return JSONResponse(scan_failure_payload(e), status_code=500)
