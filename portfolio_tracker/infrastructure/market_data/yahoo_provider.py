"""
Yahoo Finance Market Data Provider
Primary price source: quoteSummary endpoint, cache first, static fallback last.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import httpx

from portfolio_tracker.domain.models import PriceRecord, PriceSource
from portfolio_tracker.infrastructure.market_data.fallback_prices import FallbackPriceTable
from portfolio_tracker.infrastructure.market_data.price_cache import PriceCache
from portfolio_tracker.infrastructure.market_data.types import (
    QuoteClient,
    QuoteFetchFailure,
    QuoteFetchResult,
    QuoteFetchSuccess,
)

logger = logging.getLogger(__name__)


def _raw(value: Any) -> float:
    """Yahoo wraps most numbers as {"raw": 1.23, "fmt": "1.23"}"""
    if isinstance(value, dict):
        value = value.get("raw")
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0.0
    return float(value)


def _section(payload: Dict[str, Any], name: str) -> Dict[str, Any]:
    section = payload.get(name)
    return section if isinstance(section, dict) else {}


class YahooQuoteClient:
    """
    Single-request quote lookup. Never raises: every outcome is
    returned as a QuoteFetchSuccess or QuoteFetchFailure.
    """

    BASE_URL = "https://query1.finance.yahoo.com/v10/finance/quoteSummary"
    MODULES = "price,summaryDetail,financialData"

    # Yahoo rejects requests that do not look like a browser
    HEADERS = {
        "User-Agent": (
            "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
            "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
        ),
        "Accept": "application/json",
        "Accept-Language": "en-US,en;q=0.9",
        "Referer": "https://finance.yahoo.com/",
    }

    def __init__(
        self,
        client: Optional[httpx.AsyncClient] = None,
        timeout_seconds: float = 8.0,
        base_url: Optional[str] = None,
    ):
        self._client = client
        self.timeout_seconds = timeout_seconds
        self.base_url = (base_url or self.BASE_URL).rstrip("/")

    async def _get(self, url: str, params: Dict[str, str]) -> httpx.Response:
        if self._client is not None:
            return await self._client.get(
                url, params=params, headers=self.HEADERS, timeout=self.timeout_seconds
            )
        async with httpx.AsyncClient(timeout=self.timeout_seconds) as client:
            return await client.get(url, params=params, headers=self.HEADERS)

    async def fetch_quote(self, symbol: str) -> QuoteFetchResult:
        url = f"{self.base_url}/{symbol}"
        try:
            response = await self._get(url, {"modules": self.MODULES})
        except httpx.TimeoutException:
            return QuoteFetchFailure(symbol, "timeout")
        except httpx.HTTPError as exc:
            return QuoteFetchFailure(symbol, f"request failed: {exc}")

        if response.status_code != 200:
            return QuoteFetchFailure(symbol, f"status {response.status_code}")

        try:
            payload = response.json()
        except ValueError:
            return QuoteFetchFailure(symbol, "invalid JSON payload")

        record = self._parse(symbol, payload)
        if record is None:
            return QuoteFetchFailure(symbol, "No data found")
        return QuoteFetchSuccess(record)

    def _parse(self, symbol: str, payload: Any) -> Optional[PriceRecord]:
        if not isinstance(payload, dict):
            return None
        results = _section(payload, "quoteSummary").get("result")
        if not isinstance(results, list) or not results or not isinstance(results[0], dict):
            return None
        result = results[0]

        price = _section(result, "price")
        summary = _section(result, "summaryDetail")
        financial = _section(result, "financialData")
        currency = price.get("currency")

        return PriceRecord(
            symbol=symbol,
            current_price=_raw(price.get("regularMarketPrice")),
            currency=currency if isinstance(currency, str) and currency else "USD",
            pe_ratio=_raw(summary.get("trailingPE")),
            eps=_raw(financial.get("trailingEps")),
            market_cap=_raw(price.get("marketCap")),
            fifty_two_week_high=_raw(summary.get("fiftyTwoWeekHigh")),
            fifty_two_week_low=_raw(summary.get("fiftyTwoWeekLow")),
            dividend_yield=_raw(summary.get("dividendYield")),
            source=PriceSource.PRIMARY,
        )


class PrimaryPriceAdapter:
    """
    Cache -> Yahoo -> fallback table.

    Fallback records are cached like live ones so a flapping upstream
    is not retried more than once per TTL window.
    """

    def __init__(
        self,
        cache: PriceCache,
        quote_client: QuoteClient,
        fallback_table: Optional[FallbackPriceTable] = None,
    ):
        self.cache = cache
        self.quote_client = quote_client
        self.fallback_table = fallback_table or FallbackPriceTable()

    async def fetch(self, symbol: str) -> Optional[PriceRecord]:
        cached = self.cache.get(symbol)
        if cached is not None:
            return cached

        result = await self.quote_client.fetch_quote(symbol)

        if isinstance(result, QuoteFetchSuccess):
            self.cache.put(symbol, result.record)
            logger.info(f"✓ Fetched Yahoo Finance quote for {symbol}")
            return result.record

        logger.warning(f"⚠ Yahoo Finance unavailable for {symbol}: {result.reason}")
        fallback = self.fallback_table.to_record(symbol)
        if fallback is None:
            return None

        logger.info(f"📊 Using fallback data for {symbol}")
        self.cache.put(symbol, fallback)
        return fallback
