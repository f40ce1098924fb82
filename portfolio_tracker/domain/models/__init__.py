"""
Domain Models Package
Export all domain entities
"""

from .holding import DEFAULT_SECTOR, EnrichedHolding, Holding
from .price import ConsolidatedQuote, Fundamentals, PriceRecord, PriceSource
from .summary import PortfolioSummary, SectorSummary

__all__ = [
    "DEFAULT_SECTOR",
    "ConsolidatedQuote",
    "EnrichedHolding",
    "Fundamentals",
    "Holding",
    "PortfolioSummary",
    "PriceRecord",
    "PriceSource",
    "SectorSummary",
]
