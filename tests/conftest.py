from typing import AsyncGenerator, Dict, List, Optional

import pytest
from fastapi import FastAPI
from httpx import AsyncClient, ASGITransport

from portfolio_tracker.config import Settings
from portfolio_tracker.domain.models import Fundamentals, Holding, PriceRecord, PriceSource
from portfolio_tracker.domain.services.enrichment_pipeline import EnrichmentPipeline
from portfolio_tracker.infrastructure.holdings.holdings_store import HoldingsStore
from portfolio_tracker.infrastructure.market_data.fallback_prices import FallbackPriceTable
from portfolio_tracker.infrastructure.market_data.price_cache import PriceCache
from portfolio_tracker.infrastructure.market_data.types import (
    QuoteFetchFailure,
    QuoteFetchResult,
    QuoteFetchSuccess,
)
from portfolio_tracker.infrastructure.market_data.yahoo_provider import PrimaryPriceAdapter
from portfolio_tracker.main import create_app
from portfolio_tracker.runtime import PortfolioRuntime


class FakeClock:
    def __init__(self, start: float = 1_700_000_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeQuoteClient:
    """Returns canned prices; symbols without one fail like an outage"""

    def __init__(self, prices: Optional[Dict[str, float]] = None):
        self.prices = dict(prices or {})
        self.calls: List[str] = []

    async def fetch_quote(self, symbol: str) -> QuoteFetchResult:
        self.calls.append(symbol)
        if symbol not in self.prices:
            return QuoteFetchFailure(symbol, "simulated outage")
        return QuoteFetchSuccess(
            PriceRecord(
                symbol=symbol,
                current_price=self.prices[symbol],
                pe_ratio=20.0,
                eps=5.0,
                source=PriceSource.PRIMARY,
            )
        )


class FakeFundamentals:
    def __init__(self, values: Optional[Dict[str, Fundamentals]] = None):
        self.values = dict(values or {})
        self.calls: List[str] = []

    async def fetch(self, symbol: str) -> Fundamentals:
        self.calls.append(symbol)
        return self.values.get(symbol, Fundamentals())


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def price_cache(clock) -> PriceCache:
    return PriceCache(ttl_seconds=15.0, clock=clock)


@pytest.fixture
def quote_client() -> FakeQuoteClient:
    return FakeQuoteClient({"AAPL": 195.45, "MSFT": 425.30})


@pytest.fixture
def fundamentals() -> FakeFundamentals:
    return FakeFundamentals()


@pytest.fixture
def empty_fallback() -> FallbackPriceTable:
    return FallbackPriceTable(prices={})


@pytest.fixture
def pipeline(price_cache, quote_client, fundamentals) -> EnrichmentPipeline:
    primary = PrimaryPriceAdapter(
        cache=price_cache,
        quote_client=quote_client,
        fallback_table=FallbackPriceTable(),
    )
    return EnrichmentPipeline(primary=primary, secondary=fundamentals, cache=price_cache)


@pytest.fixture
def holdings() -> List[Holding]:
    return [
        Holding(id="holding-0", symbol="AAPL", quantity=10, purchase_price=150, sector_name="Tech"),
        Holding(id="holding-1", symbol="MSFT", quantity=5, purchase_price=300, sector_name="Tech"),
        Holding(id="holding-2", symbol="ZZZZ", quantity=4, purchase_price=25, sector_name="Misc"),
    ]


@pytest.fixture
def runtime(holdings, price_cache, pipeline) -> PortfolioRuntime:
    return PortfolioRuntime(
        holdings_store=HoldingsStore.from_holdings(holdings),
        price_cache=price_cache,
        pipeline=pipeline,
    )


@pytest.fixture
def test_settings() -> Settings:
    return Settings(DEBUG=False, CORS_ORIGIN="http://localhost:5173")


@pytest.fixture
def app(test_settings, runtime) -> FastAPI:
    return create_app(settings=test_settings, runtime=runtime)


@pytest.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
