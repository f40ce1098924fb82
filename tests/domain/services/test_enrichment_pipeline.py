"""
Unit Tests for the Enrichment Pipeline
"""

import asyncio

import pytest

from portfolio_tracker.domain.models import Fundamentals, PriceRecord, PriceSource
from portfolio_tracker.domain.services.enrichment_pipeline import EnrichmentPipeline, consolidate
from portfolio_tracker.infrastructure.market_data.fallback_prices import FALLBACK_PRICES
from portfolio_tracker.infrastructure.market_data.types import QuoteFetchSuccess
from portfolio_tracker.infrastructure.market_data.yahoo_provider import PrimaryPriceAdapter


class ExplodingPrimary:
    """Raises for one symbol, delegates the rest"""

    def __init__(self, inner, bad_symbol: str):
        self.inner = inner
        self.bad_symbol = bad_symbol

    async def fetch(self, symbol):
        if symbol == self.bad_symbol:
            raise RuntimeError("adapter bug")
        return await self.inner.fetch(symbol)


class TestConsolidate:
    def test_secondary_pe_wins_when_nonzero(self):
        primary = PriceRecord(symbol="AAPL", current_price=195.45, pe_ratio=28.5, eps=6.05)
        quote = consolidate(primary, Fundamentals(pe_ratio=30.1, eps=7.0))
        assert quote.pe_ratio == 30.1
        assert quote.latest_earnings == 6.05

    def test_primary_values_used_when_secondary_is_zero(self):
        primary = PriceRecord(symbol="AAPL", current_price=195.45, pe_ratio=28.5, eps=6.05)
        quote = consolidate(primary, Fundamentals())
        assert quote.pe_ratio == 28.5
        assert quote.latest_earnings == 6.05

    def test_secondary_eps_used_when_primary_has_none(self):
        primary = PriceRecord(symbol="AAPL", current_price=195.45)
        quote = consolidate(primary, Fundamentals(pe_ratio=0, eps=6.4))
        assert quote.pe_ratio == 0
        assert quote.latest_earnings == 6.4

    def test_price_fields_copied_from_primary(self):
        primary = PriceRecord(
            symbol="JPM",
            current_price=205.75,
            currency="USD",
            market_cap=589e9,
            fifty_two_week_high=223.5,
            fifty_two_week_low=144.35,
            dividend_yield=0.025,
            source=PriceSource.FALLBACK,
        )
        quote = consolidate(primary, Fundamentals(pe_ratio=1, eps=1))
        assert quote.current_price == 205.75
        assert quote.market_cap == 589e9
        assert quote.fifty_two_week_high == 223.5
        assert quote.fifty_two_week_low == 144.35
        assert quote.dividend_yield == 0.025
        assert quote.source == PriceSource.FALLBACK


@pytest.mark.asyncio
async def test_fetch_all_preserves_order_and_skips_missing(pipeline):
    quotes = await pipeline.fetch_all(["MSFT", "ZZZZ", "AAPL"])
    assert [q.symbol for q in quotes] == ["MSFT", "AAPL"]


@pytest.mark.asyncio
async def test_secondary_always_attempted(pipeline, fundamentals):
    await pipeline.fetch_all(["AAPL", "MSFT"])
    assert fundamentals.calls == ["AAPL", "MSFT"]


@pytest.mark.asyncio
async def test_second_run_within_ttl_makes_no_primary_calls(pipeline, quote_client):
    symbols = ["AAPL", "MSFT", "JPM"]
    await pipeline.fetch_all(symbols)
    calls_after_first = list(quote_client.calls)

    await pipeline.fetch_all(symbols)

    assert calls_after_first == symbols
    assert quote_client.calls == calls_after_first


@pytest.mark.asyncio
async def test_fallback_symbol_yields_one_fallback_record(pipeline):
    quotes = await pipeline.fetch_all(["PFE"])

    assert len(quotes) == 1
    quote = quotes[0]
    expected = FALLBACK_PRICES["PFE"]
    assert quote.source == PriceSource.FALLBACK
    assert quote.current_price == expected.current_price
    assert quote.pe_ratio == expected.pe_ratio
    assert quote.latest_earnings == expected.eps
    assert quote.market_cap == expected.market_cap
    assert quote.dividend_yield == expected.dividend_yield


@pytest.mark.asyncio
async def test_single_symbol_failure_does_not_propagate(price_cache, quote_client, fundamentals):
    primary = ExplodingPrimary(PrimaryPriceAdapter(price_cache, quote_client), bad_symbol="MSFT")
    pipeline = EnrichmentPipeline(primary=primary, secondary=fundamentals)

    quotes = await pipeline.fetch_all(["AAPL", "MSFT"])

    assert [q.symbol for q in quotes] == ["AAPL"]


@pytest.mark.asyncio
async def test_refresh_invalidates_before_fetching(pipeline, price_cache, quote_client):
    await pipeline.fetch_all(["AAPL"])
    await pipeline.refresh(["AAPL"])
    assert quote_client.calls == ["AAPL", "AAPL"]
    assert price_cache.get("AAPL") is not None


@pytest.mark.asyncio
async def test_empty_input_yields_empty_output(pipeline):
    assert await pipeline.fetch_all([]) == []


class InterleavingQuoteClient:
    """Yields to the loop mid-request and hands out a distinct record per call"""

    def __init__(self):
        self.records = []

    async def fetch_quote(self, symbol):
        await asyncio.sleep(0)
        record = PriceRecord(symbol=symbol, current_price=100.0 + len(self.records), pe_ratio=20.0, eps=5.0)
        self.records.append(record)
        await asyncio.sleep(0)
        return QuoteFetchSuccess(record)


@pytest.mark.asyncio
async def test_overlapping_runs_leave_one_whole_record_per_symbol(price_cache, fundamentals):
    client = InterleavingQuoteClient()
    pipeline = EnrichmentPipeline(
        primary=PrimaryPriceAdapter(price_cache, client),
        secondary=fundamentals,
        cache=price_cache,
    )
    symbols = ["AAPL", "MSFT", "NVDA"]

    first, second = await asyncio.gather(pipeline.fetch_all(symbols), pipeline.fetch_all(symbols))

    assert [q.symbol for q in first] == symbols
    assert [q.symbol for q in second] == symbols
    for quote in first + second:
        assert quote.current_price >= 100.0
        assert quote.latest_earnings == 5.0

    for symbol in symbols:
        cached = price_cache.get(symbol)
        assert any(cached is record for record in client.records if record.symbol == symbol)

    stats = price_cache.stats()
    assert sorted(entry.symbol for entry in stats) == sorted(symbols)
