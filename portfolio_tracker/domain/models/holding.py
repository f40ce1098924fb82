"""
DOMAIN MODELS — HOLDINGS & VALUATION

Immutable structures representing loaded holdings and their
price-enriched valuation. No file access. No market data fetching.
"""

from dataclasses import dataclass

DEFAULT_SECTOR = "Unknown"


@dataclass(frozen=True)
class Holding:
    """
    A single position as read from the holdings spreadsheet.
    """
    id: str
    symbol: str
    quantity: float
    purchase_price: float
    sector_name: str = DEFAULT_SECTOR


@dataclass(frozen=True)
class EnrichedHolding:
    """
    Holding joined with its consolidated quote.

    current_price is already resolved: when no quote was available it
    equals purchase_price.
    """
    holding: Holding
    current_price: float
    currency: str = "USD"
    pe_ratio: float = 0.0
    latest_earnings: float = 0.0
    market_cap: float = 0.0
    fifty_two_week_high: float = 0.0
    fifty_two_week_low: float = 0.0
    dividend_yield: float = 0.0

    @property
    def symbol(self) -> str:
        return self.holding.symbol

    @property
    def sector_name(self) -> str:
        return self.holding.sector_name

    @property
    def investment(self) -> float:
        return self.holding.purchase_price * self.holding.quantity

    @property
    def present_value(self) -> float:
        return self.current_price * self.holding.quantity

    @property
    def gain_loss(self) -> float:
        return self.present_value - self.investment

    @property
    def gain_loss_percentage(self) -> float:
        if self.investment <= 0:
            return 0.0
        return (self.gain_loss / self.investment) * 100.0

    def to_dict(self) -> dict:
        return {
            "id": self.holding.id,
            "symbol": self.holding.symbol,
            "quantity": self.holding.quantity,
            "purchase_price": self.holding.purchase_price,
            "sector_name": self.holding.sector_name,
            "current_price": self.current_price,
            "currency": self.currency,
            "pe_ratio": self.pe_ratio,
            "latest_earnings": self.latest_earnings,
            "market_cap": self.market_cap,
            "fifty_two_week_high": self.fifty_two_week_high,
            "fifty_two_week_low": self.fifty_two_week_low,
            "dividend_yield": self.dividend_yield,
            "investment": self.investment,
            "present_value": self.present_value,
            "gain_loss": self.gain_loss,
            "gain_loss_percentage": self.gain_loss_percentage,
        }
