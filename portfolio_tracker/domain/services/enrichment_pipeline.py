"""
Enrichment Pipeline
Merges primary prices with supplementary fundamentals, one symbol at a time.

Symbols are processed sequentially in input order; both upstreams are
rate-sensitive, so there is no fan-out.
"""

from __future__ import annotations

import logging
from typing import Iterable, List, Optional

from portfolio_tracker.domain.models import ConsolidatedQuote, Fundamentals, PriceRecord
from portfolio_tracker.infrastructure.market_data.price_cache import PriceCache
from portfolio_tracker.infrastructure.market_data.types import FundamentalsSource, PriceSourceAdapter

logger = logging.getLogger(__name__)


def consolidate(primary: PriceRecord, secondary: Fundamentals) -> ConsolidatedQuote:
    """
    P/E prefers the scraped figure, EPS prefers the primary one.
    Everything else comes from the primary record.
    """
    return ConsolidatedQuote(
        symbol=primary.symbol,
        current_price=primary.current_price,
        currency=primary.currency or "USD",
        pe_ratio=secondary.pe_ratio or primary.pe_ratio or 0.0,
        latest_earnings=primary.eps or secondary.eps or 0.0,
        market_cap=primary.market_cap,
        fifty_two_week_high=primary.fifty_two_week_high,
        fifty_two_week_low=primary.fifty_two_week_low,
        dividend_yield=primary.dividend_yield,
        source=primary.source,
    )


class EnrichmentPipeline:
    def __init__(
        self,
        primary: PriceSourceAdapter,
        secondary: FundamentalsSource,
        cache: Optional[PriceCache] = None,
    ):
        self.primary = primary
        self.secondary = secondary
        self.cache = cache

    async def fetch_one(self, symbol: str) -> Optional[ConsolidatedQuote]:
        primary = await self.primary.fetch(symbol)
        if primary is None:
            logger.info(f"No price available for {symbol}; skipping")
            return None
        secondary = await self.secondary.fetch(symbol)
        return consolidate(primary, secondary)

    async def fetch_all(self, symbols: Iterable[str]) -> List[ConsolidatedQuote]:
        """
        Consolidated quotes for every symbol that produced one, in input
        order. A failing symbol is logged and left out.
        """
        results: List[ConsolidatedQuote] = []
        for symbol in symbols:
            try:
                quote = await self.fetch_one(symbol)
            except Exception as exc:
                logger.error(f"❌ Error fetching {symbol}: {exc}")
                continue
            if quote is not None:
                results.append(quote)
        return results

    async def refresh(self, symbols: List[str]) -> List[ConsolidatedQuote]:
        """Drop cached prices for the symbols, then fetch them again"""
        if self.cache is not None:
            for symbol in symbols:
                self.cache.invalidate(symbol)
        return await self.fetch_all(symbols)
