"""
Portfolio runtime: holdings store, price cache, upstream adapters, pipeline.

Built once at application startup and torn down at shutdown. Routes reach
it through ``request.app.state.portfolio_runtime``.
"""

from __future__ import annotations

import logging
from typing import List, Optional

import httpx

from portfolio_tracker.config import Settings
from portfolio_tracker.domain.models import ConsolidatedQuote, EnrichedHolding, Holding
from portfolio_tracker.domain.services.enrichment_pipeline import EnrichmentPipeline
from portfolio_tracker.domain.services.portfolio_aggregator import PortfolioAggregator
from portfolio_tracker.infrastructure.holdings.holdings_store import HoldingsStore
from portfolio_tracker.infrastructure.market_data.fallback_prices import FallbackPriceTable
from portfolio_tracker.infrastructure.market_data.google_finance_scraper import GoogleFinanceScraper
from portfolio_tracker.infrastructure.market_data.price_cache import PriceCache
from portfolio_tracker.infrastructure.market_data.yahoo_provider import (
    PrimaryPriceAdapter,
    YahooQuoteClient,
)

logger = logging.getLogger(__name__)


class PortfolioRuntime:
    def __init__(
        self,
        holdings_store: HoldingsStore,
        price_cache: PriceCache,
        pipeline: EnrichmentPipeline,
        aggregator: Optional[PortfolioAggregator] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        self.holdings_store = holdings_store
        self.price_cache = price_cache
        self.pipeline = pipeline
        self.aggregator = aggregator or PortfolioAggregator()
        self._http_client = http_client

    @classmethod
    def from_settings(cls, settings: Settings) -> "PortfolioRuntime":
        http_client = httpx.AsyncClient(
            timeout=settings.UPSTREAM_TIMEOUT_SECONDS,
            follow_redirects=True,
        )
        price_cache = PriceCache(ttl_seconds=settings.PRICE_CACHE_TTL_SECONDS)
        primary = PrimaryPriceAdapter(
            cache=price_cache,
            quote_client=YahooQuoteClient(
                client=http_client,
                timeout_seconds=settings.UPSTREAM_TIMEOUT_SECONDS,
            ),
            fallback_table=FallbackPriceTable(),
        )
        secondary = GoogleFinanceScraper(
            client=http_client,
            timeout_seconds=settings.UPSTREAM_TIMEOUT_SECONDS,
            default_exchange=settings.GOOGLE_FINANCE_EXCHANGE,
            exchange_overrides=settings.exchange_overrides,
        )
        return cls(
            holdings_store=HoldingsStore(settings.HOLDINGS_FILE),
            price_cache=price_cache,
            pipeline=EnrichmentPipeline(primary=primary, secondary=secondary, cache=price_cache),
            http_client=http_client,
        )

    async def start(self) -> None:
        """Load holdings; HoldingsLoadError propagates and aborts startup"""
        if not self.holdings_store.is_loaded:
            self.holdings_store.load()

    async def stop(self) -> None:
        self.price_cache.clear()
        if self._http_client is not None:
            await self._http_client.aclose()
            self._http_client = None

    async def enriched_holdings(self, holdings: Optional[List[Holding]] = None) -> List[EnrichedHolding]:
        if holdings is None:
            holdings = self.holdings_store.get_holdings()
        symbols = list(dict.fromkeys(h.symbol for h in holdings))
        quotes: List[ConsolidatedQuote] = await self.pipeline.fetch_all(symbols)
        return self.aggregator.enrich(holdings, quotes)

    async def refresh(self, symbols: List[str]) -> List[ConsolidatedQuote]:
        return await self.pipeline.refresh(symbols)
