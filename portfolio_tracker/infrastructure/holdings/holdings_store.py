"""
Holdings store backed by a spreadsheet.

Expected columns (by position, header row skipped):
Symbol | Quantity | Purchase Price | Sector
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, List, Optional

import pandas as pd

from portfolio_tracker.domain.models import DEFAULT_SECTOR, Holding

logger = logging.getLogger(__name__)

EXCEL_SUFFIXES = {".xlsx", ".xls"}
CSV_SUFFIXES = {".csv"}


class HoldingsLoadError(RuntimeError):
    """Raised when the holdings source yields no usable holdings."""


def _cell_text(value: object) -> str:
    if value is None or (not isinstance(value, str) and pd.isna(value)):
        return ""
    return str(value).strip()


def _cell_number(value: object) -> float:
    if value is None:
        return 0.0
    if isinstance(value, str):
        value = value.replace(",", "").strip()
    number = pd.to_numeric(value, errors="coerce")
    if pd.isna(number):
        return 0.0
    return float(number)


def read_holdings_frame(path: Path) -> pd.DataFrame:
    suffix = path.suffix.lower()
    if suffix in EXCEL_SUFFIXES:
        return pd.read_excel(path, sheet_name=0, header=0, dtype=object)
    if suffix in CSV_SUFFIXES:
        return pd.read_csv(path, header=0, dtype=object)
    raise HoldingsLoadError(f"Unsupported holdings file type: {path.suffix or '<none>'}")


def parse_holdings(frame: pd.DataFrame) -> List[Holding]:
    """
    Turn raw spreadsheet rows into holdings, dropping rows without a
    symbol, with a non-positive quantity or a negative purchase price.
    """
    holdings: List[Holding] = []
    for index, row in enumerate(frame.itertuples(index=False, name=None)):
        cells = list(row) + [None] * (4 - len(row))
        symbol = _cell_text(cells[0]).upper()
        quantity = _cell_number(cells[1])
        purchase_price = _cell_number(cells[2])
        sector = _cell_text(cells[3]) or DEFAULT_SECTOR

        if not symbol or quantity <= 0 or purchase_price < 0:
            logger.debug(f"Skipping holdings row {index}: {cells[:4]}")
            continue

        holdings.append(
            Holding(
                id=f"holding-{index}",
                symbol=symbol,
                quantity=quantity,
                purchase_price=purchase_price,
                sector_name=sector,
            )
        )
    return holdings


class HoldingsStore:
    """
    Loads holdings once and serves them for the process lifetime.
    A reload replaces the list only when the new read succeeds.
    """

    def __init__(self, path: Path | str):
        self.path = Path(path)
        self._holdings: List[Holding] = []

    @classmethod
    def from_holdings(cls, holdings: Iterable[Holding], path: Path | str = "<memory>") -> "HoldingsStore":
        store = cls(path)
        store._holdings = [h for h in holdings if h.symbol and h.quantity > 0]
        return store

    def __len__(self) -> int:
        return len(self._holdings)

    @property
    def is_loaded(self) -> bool:
        return bool(self._holdings)

    def load(self) -> List[Holding]:
        logger.info(f"📂 Loading portfolio data from {self.path}")
        if not self.path.exists():
            raise HoldingsLoadError(
                f"Holdings file not found: {self.path} "
                "(expected columns: Symbol | Quantity | Purchase Price | Sector)"
            )

        try:
            frame = read_holdings_frame(self.path)
        except HoldingsLoadError:
            raise
        except Exception as exc:
            raise HoldingsLoadError(f"Could not read holdings file {self.path}: {exc}") from exc

        if frame.empty:
            raise HoldingsLoadError(f"No data found in holdings file {self.path}")

        logger.info(f"📋 Holdings columns: {list(frame.columns)}")
        holdings = parse_holdings(frame)
        if not holdings:
            raise HoldingsLoadError(f"No valid holdings found in {self.path}")

        self._holdings = holdings
        logger.info(f"✓ Loaded {len(holdings)} holdings")
        return list(holdings)

    def reload(self) -> List[Holding]:
        return self.load()

    def get_holdings(self) -> List[Holding]:
        if not self._holdings:
            return self.load()
        return list(self._holdings)

    def get_holdings_by_symbols(self, symbols: Iterable[str]) -> List[Holding]:
        wanted = {s.strip().upper() for s in symbols if s and s.strip()}
        return [h for h in self.get_holdings() if h.symbol in wanted]

    def symbols(self) -> List[str]:
        """Distinct symbols in holdings order"""
        return list(dict.fromkeys(h.symbol for h in self.get_holdings()))
