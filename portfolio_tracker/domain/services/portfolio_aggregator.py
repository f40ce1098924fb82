"""
Portfolio Aggregator
Joins holdings with consolidated quotes and folds them into summaries.

Pure domain logic. No market data fetching.
"""

from collections import defaultdict
from typing import Dict, Iterable, List

from portfolio_tracker.domain.models import (
    ConsolidatedQuote,
    EnrichedHolding,
    Holding,
    PortfolioSummary,
    SectorSummary,
)


class PortfolioAggregator:
    def __init__(self, currency: str = "USD"):
        self.currency = currency

    def enrich_holding(self, holding: Holding, quote: ConsolidatedQuote | None) -> EnrichedHolding:
        if quote is None:
            return EnrichedHolding(
                holding=holding,
                current_price=holding.purchase_price,
                currency=self.currency,
            )

        return EnrichedHolding(
            holding=holding,
            current_price=quote.current_price or holding.purchase_price,
            currency=quote.currency or self.currency,
            pe_ratio=quote.pe_ratio or 0.0,
            latest_earnings=quote.latest_earnings or 0.0,
            market_cap=quote.market_cap or 0.0,
            fifty_two_week_high=quote.fifty_two_week_high or 0.0,
            fifty_two_week_low=quote.fifty_two_week_low or 0.0,
            dividend_yield=quote.dividend_yield or 0.0,
        )

    def enrich(
        self,
        holdings: Iterable[Holding],
        quotes: Iterable[ConsolidatedQuote],
    ) -> List[EnrichedHolding]:
        """
        One EnrichedHolding per holding, in holdings order. Holdings
        without a quote are valued at their purchase price.
        """
        by_symbol: Dict[str, ConsolidatedQuote] = {q.symbol: q for q in quotes}
        return [self.enrich_holding(h, by_symbol.get(h.symbol)) for h in holdings]

    def summarize(self, enriched: Iterable[EnrichedHolding]) -> PortfolioSummary:
        total_investment = 0.0
        total_present_value = 0.0
        count = 0
        for item in enriched:
            total_investment += item.investment
            total_present_value += item.present_value
            count += 1

        return PortfolioSummary(
            total_investment=total_investment,
            total_present_value=total_present_value,
            currency=self.currency,
            holdings_count=count,
        )

    def group_by_sector(self, enriched: Iterable[EnrichedHolding]) -> List[SectorSummary]:
        """Sectors in order of first appearance"""
        grouped: Dict[str, List[EnrichedHolding]] = defaultdict(list)
        for item in enriched:
            grouped[item.sector_name].append(item)

        return [
            SectorSummary(sector_name=sector, holdings=members)
            for sector, members in grouped.items()
        ]
