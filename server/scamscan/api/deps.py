"""FastAPI dependencies handing out the collaborators built in the lifespan."""

import httpx
from fastapi import Request

from scamscan.services.llm import ListingAnalyzer
from scamscan.services.price_oracle import PriceOracle


def get_analyzer(request: Request) -> ListingAnalyzer:
    return request.app.state.analyzer


def get_price_oracle(request: Request) -> PriceOracle:
    return request.app.state.price_oracle


def get_http_client(request: Request) -> httpx.AsyncClient:
    return request.app.state.http_client
