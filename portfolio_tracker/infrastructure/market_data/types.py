"""
Market data source protocols and outbound fetch results.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Protocol, Union

from portfolio_tracker.domain.models import Fundamentals, PriceRecord


@dataclass(frozen=True)
class QuoteFetchSuccess:
    record: PriceRecord


@dataclass(frozen=True)
class QuoteFetchFailure:
    symbol: str
    reason: str


QuoteFetchResult = Union[QuoteFetchSuccess, QuoteFetchFailure]


class QuoteClient(Protocol):
    async def fetch_quote(self, symbol: str) -> QuoteFetchResult:
        ...


class PriceSourceAdapter(Protocol):
    async def fetch(self, symbol: str) -> Optional[PriceRecord]:
        ...


class FundamentalsSource(Protocol):
    async def fetch(self, symbol: str) -> Fundamentals:
        ...
