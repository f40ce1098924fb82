"""
In-memory price cache with a fixed time-to-live.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, Dict, List, Optional

from portfolio_tracker.domain.models import PriceRecord

DEFAULT_TTL_SECONDS = 15.0


@dataclass(frozen=True)
class CacheEntry:
    record: PriceRecord
    stored_at: float


@dataclass(frozen=True)
class CacheEntryStatus:
    symbol: str
    cached_at: datetime
    age_seconds: float


class PriceCache:
    """
    Symbol -> last fetched PriceRecord.

    Entries are replaced whole on every put, so overlapping pipeline
    runs can only ever observe a complete record (last write wins).
    """

    def __init__(
        self,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        clock: Optional[Callable[[], float]] = None,
    ):
        self._entries: Dict[str, CacheEntry] = {}
        self._ttl_seconds = ttl_seconds
        self._clock = clock or time.time

    @property
    def ttl_seconds(self) -> float:
        return self._ttl_seconds

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, symbol: str) -> bool:
        return self.get(symbol) is not None

    def get(self, symbol: str) -> Optional[PriceRecord]:
        entry = self._entries.get(symbol.upper())
        if entry is None:
            return None
        if self._clock() - entry.stored_at >= self._ttl_seconds:
            return None
        return entry.record

    def put(self, symbol: str, record: PriceRecord) -> None:
        self._entries[symbol.upper()] = CacheEntry(record=record, stored_at=self._clock())

    def invalidate(self, symbol: str) -> None:
        self._entries.pop(symbol.upper(), None)

    def clear(self) -> None:
        self._entries.clear()

    def stats(self) -> List[CacheEntryStatus]:
        """
        Every resident entry with its age, stale ones included.
        """
        now = self._clock()
        return [
            CacheEntryStatus(
                symbol=symbol,
                cached_at=datetime.fromtimestamp(entry.stored_at, tz=timezone.utc),
                age_seconds=now - entry.stored_at,
            )
            for symbol, entry in self._entries.items()
        ]
