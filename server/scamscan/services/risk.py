"""
Risk aggregation.

Folds the three independent signals of a scan into one bounded score:

    final = text.scam_score
          + 15 if the price is suspiciously low
          + 10 if the image looks like a stock photo
          + 5 per suspicious element spotted in the image

clamped to [0, 100]. Red flags are concatenated in the same order the
adjustments are applied, so the explanation reads like the arithmetic.
"""

import math
from dataclasses import dataclass, field
from typing import List, Optional

from scamscan.schemas.schemas import (
    ImageAnalysisResult,
    PriceComparisonResult,
    RedFlag,
    TextAnalysisResult,
)

DEFAULT_TEXT_SCORE = 50
SUSPICIOUS_PRICE_PENALTY = 15
STOCK_IMAGE_PENALTY = 10
SUSPICIOUS_ELEMENT_PENALTY = 5

SAFE_MAX_SCORE = 30
CAUTION_MAX_SCORE = 70


@dataclass
class RiskAssessment:
    final_scam_score: int
    red_flags: List[RedFlag] = field(default_factory=list)


def clamp_score(score: float) -> int:
    return max(0, min(100, int(score)))


def half_up(value: float) -> int:
    """Round half up, e.g. 50.5 -> 51."""
    return math.floor(value + 0.5)


def aggregate(
    text_analysis: Optional[TextAnalysisResult],
    price_comparison: Optional[PriceComparisonResult],
    image_analysis: Optional[ImageAnalysisResult] = None,
) -> RiskAssessment:
    score = DEFAULT_TEXT_SCORE
    red_flags: List[RedFlag] = []

    if text_analysis is not None:
        score = text_analysis.scam_score
        red_flags.extend(text_analysis.red_flags)

    if price_comparison is not None and price_comparison.is_suspiciously_low:
        score += SUSPICIOUS_PRICE_PENALTY
        red_flags.append(RedFlag(
            severity="high",
            description=f"Price is {half_up(price_comparison.percentage_difference)}% below market value",
        ))

    if image_analysis is not None:
        if image_analysis.is_stock_image:
            score += STOCK_IMAGE_PENALTY
            red_flags.append(RedFlag(severity="medium", description="Image appears to be a stock photo"))

        elements = image_analysis.suspicious_elements
        if elements:
            score += SUSPICIOUS_ELEMENT_PENALTY * len(elements)
            red_flags.append(RedFlag(
                severity="medium",
                description=f"Suspicious elements in image: {', '.join(elements)}",
            ))

    return RiskAssessment(final_scam_score=clamp_score(score), red_flags=red_flags)


def risk_level(score: int) -> str:
    """Band a score the way the results page colours it."""
    if score <= SAFE_MAX_SCORE:
        return "safe"
    if score <= CAUTION_MAX_SCORE:
        return "caution"
    return "danger"
