import logging

from fastapi import APIRouter, Depends

from scamscan.api.deps import get_analyzer
from scamscan.schemas.schemas import (
    ImageAnalysisRequest,
    ImageAnalysisResult,
    TextAnalysisRequest,
    TextAnalysisResult,
)
from scamscan.services.llm import ListingAnalyzer, image_analysis_fallback, text_analysis_fallback

logger = logging.getLogger(__name__)

router = APIRouter()

@router.post("/analyze-text", response_model=TextAnalysisResult)
async def analyze_text(body: TextAnalysisRequest, analyzer: ListingAnalyzer = Depends(get_analyzer)):
    """
    Ask the model to rate the listing text. Always answers 200, with a
    neutral fallback when the model can't be used.
    """
    logger.info("Analyzing text for: title=%r", body.title)
    try:
        return await analyzer.analyze_text(body)
    except Exception as e:
        logger.error("Error in text analysis API: %s", e)
        return text_analysis_fallback()

@router.post("/analyze-image", response_model=ImageAnalysisResult)
async def analyze_image(body: ImageAnalysisRequest, analyzer: ListingAnalyzer = Depends(get_analyzer)):
    """
    Look for stock-photo and editing tells in a listing image.
    """
    if not body.image_url:
        logger.error("Error in image analysis API: no image URL provided")
        return image_analysis_fallback()
    try:
        return await analyzer.analyze_image(body.image_url)
    except Exception as e:
        logger.error("Error in image analysis API: %s", e)
        return image_analysis_fallback()
