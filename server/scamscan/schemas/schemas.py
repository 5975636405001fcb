from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, Field, field_validator
from pydantic.alias_generators import to_camel

Severity = Literal["low", "medium", "high"]
SEVERITIES = ("low", "medium", "high")


class CamelModel(BaseModel):
    """JSON bodies use camelCase keys; python code uses snake_case."""

    class Config:
        alias_generator = to_camel
        populate_by_name = True


class ListingFields(CamelModel):
    """Request body of free-text listing fields; null or non-string values fall back to the field default."""

    @field_validator("*", mode="before")
    @classmethod
    def non_string_to_default(cls, value, info):
        if isinstance(value, str):
            return value
        return cls.model_fields[info.field_name].default


# ---- analysis pieces ----

class RedFlag(CamelModel):
    severity: Severity = "medium"
    description: str = "Unknown issue"

    @field_validator("description", mode="before")
    @classmethod
    def default_description(cls, value):
        return "Unknown issue" if value is None else str(value)

    @field_validator("severity", mode="before")
    @classmethod
    def normalize_severity(cls, value):
        value = str(value or "").strip().lower()
        return value if value in SEVERITIES else "medium"


class TextAnalysisRequest(ListingFields):
    title: str = ""
    description: str = ""
    price: str = ""
    seller_info: str = ""


class TextAnalysisResult(CamelModel):
    title: str = ""
    scam_score: int = Field(default=50, ge=0, le=100)
    analysis: str = ""
    red_flags: List[RedFlag] = Field(default_factory=list)

    @field_validator("scam_score", mode="before")
    @classmethod
    def clamp_score(cls, value):
        if value is None:
            return 50
        return max(0, min(100, int(round(float(value)))))


class ImageAnalysisRequest(ListingFields):
    image_url: Optional[str] = None


class ImageAnalysisResult(CamelModel):
    is_stock_image: bool = False
    contains_text: bool = False
    description: str = ""
    suspicious_elements: List[str] = Field(default_factory=list)


# ---- prices ----

class ComparableListing(BaseModel):
    """A listing returned by a price source, price still numeric."""
    title: str
    price: float
    url: str
    trusted: bool = False


class Alternative(CamelModel):
    title: str = "Unknown product"
    price: str = "$0"
    url: str = "#"
    trusted: bool = False


class PriceComparisonRequest(ListingFields):
    title: str = ""
    price: str = "0"


class PriceComparisonResult(CamelModel):
    average_price: float = 0
    lowest_price: float = 0
    highest_price: float = 0
    percentage_difference: float = 0
    is_suspiciously_low: bool = False
    alternatives: List[Alternative] = Field(default_factory=list)


class PriceSummary(CamelModel):
    average_price: float = 0
    percentage_difference: float = 0
    is_suspiciously_low: bool = False


# ---- scraping ----

class ScrapeRequest(CamelModel):
    url: Optional[str] = None


class ScrapedListing(CamelModel):
    title: str = ""
    description: str = ""
    price: str = ""
    seller_info: str = ""
    image_url: str = ""


# ---- scans ----

class ScanRequest(ListingFields):
    url: Optional[str] = None
    title: Optional[str] = None
    description: Optional[str] = None
    price: Optional[str] = None
    seller_info: Optional[str] = None
    image_url: Optional[str] = None


class ScanResponse(CamelModel):
    id: str
    title: str
    url: Optional[str] = None
    image_url: Optional[str] = None
    scam_score: int
    risk_level: str
    analysis: str
    red_flags: List[RedFlag]
    alternatives: List[Alternative]
    price_comparison: PriceSummary
    image_analysis: Optional[ImageAnalysisResult] = None


class RedFlagOut(RedFlag):
    id: int
    scan_id: str

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True


class AlternativeOut(Alternative):
    id: int
    scan_id: str

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True


class ScanOut(CamelModel):
    id: str
    created_at: datetime
    title: str
    url: Optional[str] = None
    image_url: Optional[str] = None
    scam_score: int
    risk_level: str
    analysis: str
    red_flags: List[RedFlagOut] = Field(default_factory=list)
    alternatives: List[AlternativeOut] = Field(default_factory=list)

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True


class TrendPoint(CamelModel):
    id: str
    created_at: datetime
    scam_score: int


class ScanStats(CamelModel):
    total_scans: int
    high_risk_scans: int
    average_score: int
    trend: List[TrendPoint] = Field(default_factory=list)
