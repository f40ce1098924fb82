"""
DOMAIN MODELS — PORTFOLIO & SECTOR SUMMARIES

Snapshots folded from enriched holdings. Recomputed on every request.
"""

from dataclasses import dataclass, field
from typing import List

from .holding import EnrichedHolding


def _safe_percentage(gain_loss: float, investment: float) -> float:
    if investment <= 0:
        return 0.0
    return (gain_loss / investment) * 100.0


@dataclass(frozen=True)
class PortfolioSummary:
    total_investment: float
    total_present_value: float
    currency: str = "USD"
    holdings_count: int = 0

    @property
    def total_gain_loss(self) -> float:
        return self.total_present_value - self.total_investment

    @property
    def gain_loss_percentage(self) -> float:
        return _safe_percentage(self.total_gain_loss, self.total_investment)

    def to_dict(self) -> dict:
        return {
            "total_investment": self.total_investment,
            "total_present_value": self.total_present_value,
            "total_gain_loss": self.total_gain_loss,
            "gain_loss_percentage": self.gain_loss_percentage,
            "currency": self.currency,
            "holdings_count": self.holdings_count,
        }


@dataclass(frozen=True)
class SectorSummary:
    sector_name: str
    holdings: List[EnrichedHolding] = field(default_factory=list)

    @property
    def total_investment(self) -> float:
        return sum(h.investment for h in self.holdings)

    @property
    def total_present_value(self) -> float:
        return sum(h.present_value for h in self.holdings)

    @property
    def total_gain_loss(self) -> float:
        return self.total_present_value - self.total_investment

    @property
    def gain_loss_percentage(self) -> float:
        return _safe_percentage(self.total_gain_loss, self.total_investment)

    def to_dict(self) -> dict:
        return {
            "sector_name": self.sector_name,
            "total_investment": self.total_investment,
            "total_present_value": self.total_present_value,
            "total_gain_loss": self.total_gain_loss,
            "gain_loss_percentage": self.gain_loss_percentage,
            "holdings": [h.to_dict() for h in self.holdings],
        }
