"""
The /scan pipeline.

Text analysis, price comparison and (when an image URL is given) image
analysis run concurrently. Each hop catches its own failure and substitutes
a default, so the aggregation step always has three settled inputs. The
result is persisted as scan, red flag and alternative rows, written one
after another; if the scan row can't be stored the caller still gets a
transient result with a temp- id.
"""

import asyncio
import logging
import time
from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from scamscan.db import crud
from scamscan.schemas.schemas import (
    Alternative,
    ImageAnalysisResult,
    PriceComparisonResult,
    PriceSummary,
    RedFlag,
    ScanRequest,
    ScanResponse,
    TextAnalysisRequest,
    TextAnalysisResult,
)
from scamscan.services.llm import ListingAnalyzer, image_analysis_fallback, scan_text_fallback
from scamscan.services.price_oracle import PriceOracle
from scamscan.services.risk import aggregate, risk_level

logger = logging.getLogger(__name__)

UNKNOWN_TITLE = "Unknown listing"
ANALYSIS_UNAVAILABLE = "Analysis unavailable"


def _millis() -> int:
    return int(time.time() * 1000)


async def analyze_text_or_default(analyzer: ListingAnalyzer, listing: TextAnalysisRequest) -> TextAnalysisResult:
    try:
        return await analyzer.analyze_text(listing)
    except Exception as e:
        logger.error("Error in text analysis: %s", e)
        return scan_text_fallback(listing.title)


async def compare_prices_or_default(oracle: PriceOracle, title: str, price: str) -> PriceComparisonResult:
    try:
        return await oracle.compare_prices(title, price)
    except Exception as e:
        logger.error("Error in price comparison: %s", e)
        return PriceComparisonResult()


async def analyze_image_or_default(analyzer: ListingAnalyzer, image_url: str) -> ImageAnalysisResult:
    try:
        return await analyzer.analyze_image(image_url)
    except Exception as e:
        logger.error("Error in image analysis: %s", e)
        return image_analysis_fallback("Image analysis unavailable")


async def _no_image() -> None:
    return None


async def persist_scan(
    db: AsyncSession,
    title: str,
    url: Optional[str],
    image_url: Optional[str],
    scam_score: int,
    analysis: str,
    red_flags: List[RedFlag],
    alternatives: List[Alternative],
) -> str:
    """Store the scan and its children; returns the stored id or a temp- id."""
    try:
        scan = await crud.create_scan(
            db, title=title, url=url, image_url=image_url, scam_score=scam_score, analysis=analysis,
        )
    except Exception as e:
        logger.error("Error storing scan data: %s", e)
        return f"temp-{_millis()}"

    # not transactional with the scan row; a failure here leaves a scan without children
    try:
        await crud.add_red_flags(db, scan.id, red_flags)
        await crud.add_alternatives(db, scan.id, alternatives)
    except Exception as e:
        logger.error("Error storing details for scan %s: %s", scan.id, e)

    logger.info("Saved scan %s to database.", scan.id)
    return scan.id


async def run_scan(
    request: ScanRequest,
    analyzer: ListingAnalyzer,
    oracle: PriceOracle,
    db: AsyncSession,
) -> ScanResponse:
    title = request.title or UNKNOWN_TITLE
    price = request.price or ""
    logger.info("Processing scan for: title=%r price=%r", title, price)

    listing = TextAnalysisRequest(
        title=title,
        description=request.description or "",
        price=price,
        seller_info=request.seller_info or "",
    )
    text_analysis, price_comparison, image_analysis = await asyncio.gather(
        analyze_text_or_default(analyzer, listing),
        compare_prices_or_default(oracle, title, price),
        analyze_image_or_default(analyzer, request.image_url) if request.image_url else _no_image(),
    )

    assessment = aggregate(text_analysis, price_comparison, image_analysis)
    analysis = text_analysis.analysis or ANALYSIS_UNAVAILABLE
    logger.info("Final scam score %d with %d red flags", assessment.final_scam_score, len(assessment.red_flags))

    scan_id = await persist_scan(
        db,
        title=title,
        url=request.url,
        image_url=request.image_url,
        scam_score=assessment.final_scam_score,
        analysis=analysis,
        red_flags=assessment.red_flags,
        alternatives=price_comparison.alternatives,
    )

    return ScanResponse(
        id=scan_id,
        title=title,
        url=request.url,
        image_url=request.image_url,
        scam_score=assessment.final_scam_score,
        risk_level=risk_level(assessment.final_scam_score),
        analysis=analysis,
        red_flags=assessment.red_flags,
        alternatives=price_comparison.alternatives,
        price_comparison=PriceSummary(
            average_price=price_comparison.average_price,
            percentage_difference=price_comparison.percentage_difference,
            is_suspiciously_low=price_comparison.is_suspiciously_low,
        ),
        image_analysis=image_analysis,
    )


def scan_failure_payload(error: Exception) -> dict:
    """Minimal body with the /scan shape, for when the pipeline itself blew up."""
    return {
        "error": str(error) or "Failed to analyze listing",
        "id": f"error-{_millis()}",
        "title": "Error analyzing listing",
        "scamScore": 50,
        "riskLevel": risk_level(50),
        "analysis": "An error occurred while analyzing this listing. Please try again.",
        "redFlags": [{"severity": "medium", "description": "Analysis failed due to technical issues"}],
        "alternatives": [],
    }
