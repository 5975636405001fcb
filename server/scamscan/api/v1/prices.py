import logging

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse

from scamscan.api.deps import get_price_oracle
from scamscan.schemas.schemas import PriceComparisonRequest, PriceComparisonResult
from scamscan.services.price_oracle import PriceOracle

logger = logging.getLogger(__name__)

router = APIRouter()

@router.post("/price-comparison", response_model=PriceComparisonResult)
async def price_comparison(body: PriceComparisonRequest, oracle: PriceOracle = Depends(get_price_oracle)):
    """
    Compare an asking price with comparable listings for the same title.
    """
    if not body.title:
        raise HTTPException(400, "Title is required")

    try:
        result = await oracle.compare_prices(body.title, body.price)
    except Exception as e:
        logger.exception("Error in price comparison API")
        return JSONResponse({"error": str(e) or "Failed to compare prices"}, status_code=500)

    logger.info(
        "Price comparison for %r: average=%.2f difference=%.1f%% alternatives=%d",
        body.title, result.average_price, result.percentage_difference, len(result.alternatives),
    )
    return result
