"""
Static fallback prices used when the primary quote source is down.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from types import MappingProxyType
from typing import List, Mapping, Optional

from portfolio_tracker.domain.models import PriceRecord, PriceSource


@dataclass(frozen=True)
class FallbackQuote:
    current_price: float
    pe_ratio: float
    eps: float
    market_cap: float
    fifty_two_week_high: float
    fifty_two_week_low: float
    dividend_yield: float
    currency: str = "USD"


FALLBACK_PRICES: Mapping[str, FallbackQuote] = MappingProxyType({
    "AAPL": FallbackQuote(195.45, 28.5, 6.05, 2.8e12, 199.62, 124.17, 0.005),
    "MSFT": FallbackQuote(425.30, 32.1, 11.25, 3.2e12, 445.10, 275.00, 0.007),
    "GOOGL": FallbackQuote(165.80, 24.3, 6.75, 1.1e12, 192.30, 102.21, 0.0),
    "AMZN": FallbackQuote(180.50, 42.8, 4.20, 1.9e12, 198.88, 81.43, 0.0),
    "JPM": FallbackQuote(205.75, 12.5, 16.45, 589e9, 223.50, 144.35, 0.025),
    "BAC": FallbackQuote(35.90, 10.2, 3.52, 312e9, 40.25, 28.12, 0.028),
    "JNJ": FallbackQuote(158.20, 15.8, 10.00, 416e9, 165.79, 143.70, 0.031),
    "PFE": FallbackQuote(26.45, 11.3, 2.34, 147e9, 40.05, 23.85, 0.062),
    "PG": FallbackQuote(168.90, 27.2, 6.20, 408e9, 186.14, 129.50, 0.024),
    "WMT": FallbackQuote(89.50, 31.5, 2.84, 233e9, 99.98, 70.28, 0.013),
})


class FallbackPriceTable:
    """Read-only lookup over a fixed set of plausible quotes"""

    def __init__(self, prices: Optional[Mapping[str, FallbackQuote]] = None):
        source = FALLBACK_PRICES if prices is None else prices
        self._prices: Mapping[str, FallbackQuote] = MappingProxyType(
            {symbol.upper(): quote for symbol, quote in source.items()}
        )

    def __contains__(self, symbol: str) -> bool:
        return symbol.upper() in self._prices

    def symbols(self) -> List[str]:
        return list(self._prices.keys())

    def get(self, symbol: str) -> Optional[FallbackQuote]:
        return self._prices.get(symbol.upper())

    def to_record(self, symbol: str, now: Optional[datetime] = None) -> Optional[PriceRecord]:
        quote = self.get(symbol)
        if quote is None:
            return None
        return PriceRecord(
            symbol=symbol.upper(),
            current_price=quote.current_price,
            currency=quote.currency,
            pe_ratio=quote.pe_ratio,
            eps=quote.eps,
            market_cap=quote.market_cap,
            fifty_two_week_high=quote.fifty_two_week_high,
            fifty_two_week_low=quote.fifty_two_week_low,
            dividend_yield=quote.dividend_yield,
            fetched_at=now or datetime.now(tz=timezone.utc),
            source=PriceSource.FALLBACK,
        )
