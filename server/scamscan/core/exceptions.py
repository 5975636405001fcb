"""
Exception hierarchy for the scam scanner.

Every failure the pipeline knows how to recover from is raised as a subclass
of ScamScanError, so call sites can catch one family, log it and substitute
their default value.

Usage:
    from scamscan.core.exceptions import ScanNotFoundError

    try:
        scan = await crud.get_scan(db, scan_id)
    except ScanNotFoundError as e:
        return JSONResponse(e.to_dict(), status_code=404)
"""

from typing import Any, Dict, Optional


class ScamScanError(Exception):
    """Base exception for all scanner errors."""

    def __init__(
        self,
        message: str,
        code: str = "SCAMSCAN_ERROR",
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for API responses."""
        result = {
            "error": self.code,
            "message": self.message,
        }
        if self.details:
            result["details"] = self.details
        return result


# ============================================================
# Configuration
# ============================================================

class ConfigurationError(ScamScanError):
    def __init__(self, message: str, code: str = "CONFIGURATION_ERROR"):
        super().__init__(message, code)


class MissingAPIKeyError(ConfigurationError):
    """The LLM provider key is not configured."""

    def __init__(self, service: str = "openai"):
        super().__init__(f"Missing {service} API key", code="MISSING_API_KEY")
        self.details = {"service": service}


# ============================================================
# Upstream services
# ============================================================

class UpstreamError(ScamScanError):
    """An external collaborator failed or answered with garbage."""

    def __init__(
        self,
        message: str,
        code: str = "UPSTREAM_ERROR",
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message, code, details)


class LLMResponseError(UpstreamError):
    def __init__(self, model: str, reason: str = "empty or invalid response"):
        super().__init__(
            f"Model {model} returned {reason}",
            code="LLM_RESPONSE_ERROR",
            details={"model": model, "reason": reason},
        )


class PriceSourceError(UpstreamError):
    def __init__(self, source: str, reason: str):
        super().__init__(
            f"Price source {source} failed: {reason}",
            code="PRICE_SOURCE_ERROR",
            details={"source": source},
        )


class ScrapeError(UpstreamError):
    def __init__(self, url: str, reason: str):
        super().__init__(
            f"Failed to fetch URL: {reason}",
            code="SCRAPE_ERROR",
            details={"url": url},
        )


# ============================================================
# Persistence
# ============================================================

class ScanNotFoundError(ScamScanError):
    def __init__(self, scan_id: str):
        super().__init__(
            f"Scan {scan_id} not found",
            code="SCAN_NOT_FOUND",
            details={"scan_id": scan_id},
        )


class PersistenceError(ScamScanError):
    def __init__(self, operation: str, cause: Exception):
        super().__init__(
            f"Database error during {operation}: {cause}",
            code="PERSISTENCE_ERROR",
            details={"operation": operation},
        )
        self.cause = cause
