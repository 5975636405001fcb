"""
LLM-backed listing analysis.

The model is treated as a black-box classifier: it receives the listing text
or image and must answer with JSON, which is validated through the same
pydantic models the HTTP API returns. Any failure surfaces as an exception;
the *_fallback helpers give callers the defaults to substitute.
"""

import json
import logging
from typing import Optional

from openai import AsyncOpenAI
from pydantic import ValidationError

from scamscan.core.exceptions import LLMResponseError, MissingAPIKeyError
from scamscan.schemas.schemas import (
    ImageAnalysisResult,
    RedFlag,
    TextAnalysisRequest,
    TextAnalysisResult,
)

logger = logging.getLogger(__name__)

TEXT_SYSTEM_PROMPT = (
    "You are an expert in detecting online marketplace scams. Analyze the listing "
    "and provide your assessment in the requested JSON format."
)

TEXT_PROMPT_TEMPLATE = """
Analyze this online marketplace listing for potential scam indicators:

Title: {title}
Description: {description}
Price: {price}
Seller Information: {seller_info}

Provide your analysis in the following JSON format:
{{
  "title": "The listing title",
  "scamScore": [A number from 0-100 indicating the likelihood of a scam, with 100 being definitely a scam],
  "analysis": "A detailed paragraph explaining why this listing might be a scam or appears legitimate",
  "redFlags": [
    {{
      "severity": "high/medium/low",
      "description": "Description of the red flag"
    }}
  ]
}}

Focus on these common scam indicators:
1. Price too good to be true
2. Vague description lacking specific details
3. Poor grammar or spelling
4. Urgency language ("act fast", "won't last")
5. Unusual payment methods requested
6. New seller account
7. Generic stock photos
8. Requests to continue communication off-platform
"""

IMAGE_SYSTEM_PROMPT = (
    "You are an expert in detecting suspicious elements in marketplace listing images. "
    "Analyze the image thoroughly and provide your assessment in JSON format. Look for signs "
    "of stock photos, watermarks, image editing, inconsistencies, and other red flags that "
    "might indicate a scam listing."
)

IMAGE_PROMPT = """Analyze this marketplace listing image for suspicious elements. Provide a detailed analysis in JSON format with these fields:

1. isStockImage (boolean): Is this likely a stock photo or professional product image not taken by the seller?
2. containsText (boolean): Does the image contain any text, watermarks, or overlays?
3. description (string): Detailed description of what you see in the image
4. suspiciousElements (array of strings): List any suspicious elements like:
   - Watermarks or stock photo indicators
   - Professional studio lighting inconsistent with personal sale
   - Multiple products in one image suggesting catalog photo
   - Image quality too high for typical marketplace photo
   - Background inconsistencies
   - Signs of image editing or manipulation
   - Generic product shots without personal context
   - Any other red flags

Be thorough in your analysis and err on the side of caution when identifying potential issues."""


class ListingAnalyzer:
    def __init__(self, client: Optional[AsyncOpenAI], model: str = "gpt-4o", image_max_tokens: int = 1000):
        self.client = client
        self.model = model
        self.image_max_tokens = image_max_tokens

    async def analyze_text(self, listing: TextAnalysisRequest) -> TextAnalysisResult:
        prompt = TEXT_PROMPT_TEMPLATE.format(
            title=listing.title or "Unknown title",
            description=listing.description or "No description provided",
            price=listing.price or "Unknown price",
            seller_info=listing.seller_info or "No seller information",
        )
        content = await self._complete_json([
            {"role": "system", "content": TEXT_SYSTEM_PROMPT},
            {"role": "user", "content": prompt},
        ])
        result = self._validate(TextAnalysisResult, content)
        logger.info("Text analysis complete: score=%d flags=%d", result.scam_score, len(result.red_flags))
        return result

    async def analyze_image(self, image_url: str) -> ImageAnalysisResult:
        content = await self._complete_json(
            [
                {"role": "system", "content": IMAGE_SYSTEM_PROMPT},
                {
                    "role": "user",
                    "content": [
                        {"type": "text", "text": IMAGE_PROMPT},
                        {"type": "image_url", "image_url": {"url": image_url}},
                    ],
                },
            ],
            max_tokens=self.image_max_tokens,
        )
        result = self._validate(ImageAnalysisResult, content)
        logger.info(
            "Image analysis complete: stock=%s text=%s suspicious=%d",
            result.is_stock_image, result.contains_text, len(result.suspicious_elements),
        )
        return result

    async def _complete_json(self, messages: list, max_tokens: Optional[int] = None) -> str:
        if self.client is None:
            raise MissingAPIKeyError("openai")

        kwargs = {}
        if max_tokens:
            kwargs["max_tokens"] = max_tokens

        response = await self.client.chat.completions.create(
            model=self.model,
            messages=messages,
            response_format={"type": "json_object"},
            **kwargs,
        )
        content = response.choices[0].message.content if response.choices else None
        if not content:
            raise LLMResponseError(self.model)
        return content

    def _validate(self, model_cls, content: str):
        try:
            return model_cls.model_validate(json.loads(content))
        except (json.JSONDecodeError, ValidationError) as e:
            raise LLMResponseError(self.model, f"unparseable JSON ({e.__class__.__name__})") from e


def text_analysis_fallback() -> TextAnalysisResult:
    """What /analyze-text answers when the model can't be reached."""
    return TextAnalysisResult(
        title="Analysis unavailable",
        scam_score=50,
        analysis="We couldn't analyze this listing due to a technical error. Please try again with more information.",
        red_flags=[RedFlag(severity="medium", description="Analysis failed due to technical issues")],
    )


def scan_text_fallback(title: str) -> TextAnalysisResult:
    """Neutral stand-in used inside a scan: no flags, middle score."""
    return TextAnalysisResult(
        title=title,
        scam_score=50,
        analysis="We couldn't fully analyze this listing. Please provide more details for a better assessment.",
        red_flags=[],
    )


def image_analysis_fallback(description: str = "We couldn't analyze this image due to a technical error.") -> ImageAnalysisResult:
    return ImageAnalysisResult(
        is_stock_image=False,
        contains_text=False,
        description=description,
        suspicious_elements=[],
    )
