import logging
import random
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from scamscan.api.v1 import analysis, history, prices, scan, scraper
from scamscan.core.config import settings
from scamscan.core.exceptions import ScamScanError, ScanNotFoundError
from scamscan.db.db import init_db
from scamscan.services.clients import create_http_client, create_openai_client
from scamscan.services.llm import ListingAnalyzer
from scamscan.services.price_oracle import PriceOracle
from scamscan.services.price_sources import (
    RealEstateListingSource,
    VehicleListingSource,
    build_marketplace_sources,
)

logging.basicConfig(level=settings.LOG_LEVEL)
logger = logging.getLogger(__name__)


def build_price_oracle(rng: random.Random) -> PriceOracle:
    return PriceOracle(
        marketplace_sources=build_marketplace_sources(
            settings.SERPAPI_KEY, settings.price_provider_list, settings.LOCATION, rng,
        ),
        vehicle_source=VehicleListingSource(rng),
        real_estate_source=RealEstateListingSource(rng),
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    logger.info("Creating database tables...")
    await init_db()
    logger.info("Database tables created.")

    rng = random.Random(settings.PRICE_SIMULATION_SEED)
    openai_client = create_openai_client(settings.OPENAI_API_KEY, settings.HTTP_TIMEOUT)
    app.state.http_client = create_http_client(settings.HTTP_TIMEOUT)
    app.state.analyzer = ListingAnalyzer(openai_client, settings.OPENAI_MODEL, settings.IMAGE_MAX_TOKENS)
    app.state.price_oracle = build_price_oracle(rng)

    yield

    # Shutdown
    logger.info("Closing HTTP clients...")
    await app.state.http_client.aclose()
    if openai_client is not None:
        await openai_client.close()


app = FastAPI(
    title="Listing Scam Scanner API",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origin_list,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(scan.router, prefix="/api/v1")
app.include_router(analysis.router, prefix="/api/v1")
app.include_router(prices.router, prefix="/api/v1")
app.include_router(scraper.router, prefix="/api/v1")
app.include_router(history.router, prefix="/api/v1")


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    return JSONResponse({"detail": jsonable_encoder(exc.errors())}, status_code=400)


@app.exception_handler(ScamScanError)
async def scamscan_error_handler(request: Request, exc: ScamScanError):
    status_code = 404 if isinstance(exc, ScanNotFoundError) else 500
    if status_code == 500:
        logger.error("Unhandled %s: %s", exc.code, exc.message)
    return JSONResponse(exc.to_dict(), status_code=status_code)


@app.get("/")
def root():
    return {"message": "Listing Scam Scanner API is running."}


if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=8000)
