"""
DOMAIN MODELS — PRICES & FUNDAMENTALS
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum


def _utcnow() -> datetime:
    return datetime.now(tz=timezone.utc)


class PriceSource(str, Enum):
    """Provenance of a price record"""
    PRIMARY = "primary-source"
    FALLBACK = "fallback"


@dataclass(frozen=True)
class PriceRecord:
    """
    Price and valuation data for one symbol from a single source.
    Numeric fields are always numbers; missing upstream values become 0.
    """
    symbol: str
    current_price: float = 0.0
    currency: str = "USD"
    pe_ratio: float = 0.0
    eps: float = 0.0
    market_cap: float = 0.0
    fifty_two_week_high: float = 0.0
    fifty_two_week_low: float = 0.0
    dividend_yield: float = 0.0
    fetched_at: datetime = field(default_factory=_utcnow)
    source: PriceSource = PriceSource.PRIMARY


@dataclass(frozen=True)
class Fundamentals:
    """P/E and EPS from the supplementary source"""
    pe_ratio: float = 0.0
    eps: float = 0.0


@dataclass(frozen=True)
class ConsolidatedQuote:
    """
    Best-available view of a symbol after merging the primary
    price record with the supplementary fundamentals.
    """
    symbol: str
    current_price: float
    currency: str
    pe_ratio: float
    latest_earnings: float
    market_cap: float
    fifty_two_week_high: float
    fifty_two_week_low: float
    dividend_yield: float
    source: PriceSource
    timestamp: datetime = field(default_factory=_utcnow)

    def to_dict(self) -> dict:
        return {
            "symbol": self.symbol,
            "current_price": self.current_price,
            "currency": self.currency,
            "pe_ratio": self.pe_ratio,
            "latest_earnings": self.latest_earnings,
            "market_cap": self.market_cap,
            "fifty_two_week_high": self.fifty_two_week_high,
            "fifty_two_week_low": self.fifty_two_week_low,
            "dividend_yield": self.dividend_yield,
            "source": self.source.value,
            "timestamp": self.timestamp.isoformat(),
        }
