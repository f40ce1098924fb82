"""
Price cache routes - diagnostics & eviction.
"""

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from datetime import datetime
from typing import List
import logging

from portfolio_tracker.api.deps import get_runtime
from portfolio_tracker.runtime import PortfolioRuntime

logger = logging.getLogger(__name__)
router = APIRouter()


class CachedSymbol(BaseModel):
    symbol: str
    cached_at: datetime
    age_seconds: int


class CacheStatsResponse(BaseModel):
    cached_symbols: int
    cache_duration_seconds: float
    symbols: List[CachedSymbol]


class ClearCacheResponse(BaseModel):
    success: bool
    message: str


@router.get("/cache-stats", response_model=CacheStatsResponse)
async def cache_stats(runtime: PortfolioRuntime = Depends(get_runtime)):
    """Every resident entry, stale ones included"""
    cache = runtime.price_cache
    entries = cache.stats()
    return {
        "cached_symbols": len(entries),
        "cache_duration_seconds": cache.ttl_seconds,
        "symbols": [
            {
                "symbol": entry.symbol,
                "cached_at": entry.cached_at,
                "age_seconds": round(entry.age_seconds),
            }
            for entry in entries
        ],
    }


@router.post("/clear-cache", response_model=ClearCacheResponse)
async def clear_cache(runtime: PortfolioRuntime = Depends(get_runtime)):
    runtime.price_cache.clear()
    logger.info("🗑 Cache cleared")
    return {"success": True, "message": "Cache cleared"}
