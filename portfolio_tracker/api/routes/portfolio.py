"""
Portfolio API Routes
Holdings, portfolio/sector summaries and price refresh
"""

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from pydantic import BaseModel
from typing import Any, List, Optional
from datetime import datetime
import logging

from portfolio_tracker.api.deps import get_runtime
from portfolio_tracker.runtime import PortfolioRuntime

logger = logging.getLogger(__name__)
router = APIRouter()


# Response models
class HoldingResponse(BaseModel):
    id: str
    symbol: str
    quantity: float
    purchase_price: float
    sector_name: str
    current_price: float
    currency: str
    pe_ratio: float
    latest_earnings: float
    market_cap: float
    fifty_two_week_high: float
    fifty_two_week_low: float
    dividend_yield: float
    investment: float
    present_value: float
    gain_loss: float
    gain_loss_percentage: float


class PortfolioSummaryResponse(BaseModel):
    total_investment: float
    total_present_value: float
    total_gain_loss: float
    gain_loss_percentage: float
    currency: str
    holdings_count: int


class SectorSummaryResponse(BaseModel):
    sector_name: str
    total_investment: float
    total_present_value: float
    total_gain_loss: float
    gain_loss_percentage: float
    holdings: List[HoldingResponse]


class QuoteResponse(BaseModel):
    symbol: str
    current_price: float
    currency: str
    pe_ratio: float
    latest_earnings: float
    market_cap: float
    fifty_two_week_high: float
    fifty_two_week_low: float
    dividend_yield: float
    source: str
    timestamp: datetime


class RefreshResponse(BaseModel):
    success: bool
    message: str
    data: List[QuoteResponse]


class ReloadResponse(BaseModel):
    success: bool
    message: str
    holdings_count: int


def _parse_symbols(payload: Any) -> List[str]:
    """
    Validate a refresh body. Returns upper-cased, de-duplicated symbols
    in request order; anything malformed is a 400.
    """
    if not isinstance(payload, dict):
        raise HTTPException(status_code=400, detail="Invalid symbols array")
    symbols = payload.get("symbols")
    if symbols is None or not isinstance(symbols, list):
        raise HTTPException(status_code=400, detail="Invalid symbols array")

    cleaned: List[str] = []
    for symbol in symbols:
        if not isinstance(symbol, str) or not symbol.strip():
            raise HTTPException(status_code=400, detail="Symbols must be non-empty strings")
        cleaned.append(symbol.strip().upper())
    return list(dict.fromkeys(cleaned))


@router.get("/holdings", response_model=List[HoldingResponse])
async def get_holdings(
    symbols: Optional[str] = Query(None, description="Comma separated symbols to include"),
    runtime: PortfolioRuntime = Depends(get_runtime),
):
    """
    Get all holdings with live prices and valuation

    Holdings whose price could not be fetched are valued at purchase price.
    """
    holdings = None
    if symbols:
        holdings = runtime.holdings_store.get_holdings_by_symbols(symbols.split(","))
    enriched = await runtime.enriched_holdings(holdings)
    return [item.to_dict() for item in enriched]


@router.get("/portfolio-summary", response_model=PortfolioSummaryResponse)
async def get_portfolio_summary(runtime: PortfolioRuntime = Depends(get_runtime)):
    """Totals across all holdings"""
    enriched = await runtime.enriched_holdings()
    return runtime.aggregator.summarize(enriched).to_dict()


@router.get("/sector-summaries", response_model=List[SectorSummaryResponse])
async def get_sector_summaries(runtime: PortfolioRuntime = Depends(get_runtime)):
    """Totals per sector, with member holdings"""
    enriched = await runtime.enriched_holdings()
    return [summary.to_dict() for summary in runtime.aggregator.group_by_sector(enriched)]


@router.post("/refresh-prices", response_model=RefreshResponse)
async def refresh_prices(request: Request, runtime: PortfolioRuntime = Depends(get_runtime)):
    """
    Evict cached prices for the given symbols and fetch them again.

    Body: {"symbols": ["AAPL", "MSFT"]}
    """
    try:
        payload = await request.json()
    except ValueError:
        raise HTTPException(status_code=400, detail="Request body must be JSON")

    symbols = _parse_symbols(payload)
    quotes = await runtime.refresh(symbols)
    logger.info(f"🔄 Refreshed {len(symbols)} symbols ({len(quotes)} priced)")
    return {
        "success": True,
        "message": f"Refreshed {len(symbols)} symbols",
        "data": [quote.to_dict() for quote in quotes],
    }


@router.post("/reload-holdings", response_model=ReloadResponse)
def reload_holdings(runtime: PortfolioRuntime = Depends(get_runtime)):
    """Re-read the holdings spreadsheet; the old list stays on failure"""
    holdings = runtime.holdings_store.reload()
    return {
        "success": True,
        "message": f"Reloaded {len(holdings)} holdings",
        "holdings_count": len(holdings),
    }
