"""
Google Finance fundamentals scraper.

Best-effort P/E and EPS lookup from the public quote page. There is no
stable API behind it, so every failure degrades to zeros.
"""

from __future__ import annotations

import logging
import re
from typing import Dict, Optional

import httpx
from bs4 import BeautifulSoup, NavigableString

from portfolio_tracker.domain.models import Fundamentals

logger = logging.getLogger(__name__)

_NUMBER = r"-?\d[\d,]*(?:\.\d+)?"

# A label is a text node that is nothing but the label, optionally with
# its value inline ("P/E ratio 29.12").
PE_LABEL = re.compile(rf"(?:P/E\s*ratio|PE\s*ratio|P/E)\s*:?\s*(?P<value>{_NUMBER})?", re.IGNORECASE)
EPS_LABEL = re.compile(
    rf"(?:Earnings\s*per\s*share|EPS)(?:\s*\(TTM\))?\s*:?\s*(?P<value>{_NUMBER})?",
    re.IGNORECASE,
)
VALUE_PATTERN = re.compile(rf"\$?(?P<value>{_NUMBER})")

# Google renders a dash when a figure is not available
MISSING_VALUES = {"-", "\u2014", "N/A"}

# Text nodes inspected after a label (tooltips sit between label and value)
VALUE_LOOKAHEAD = 4


def _to_float(token: str) -> float:
    try:
        return float(token.replace(",", ""))
    except ValueError:
        return 0.0


def _is_label(text: str) -> bool:
    return bool(PE_LABEL.fullmatch(text) or EPS_LABEL.fullmatch(text))


def _value_after(label: NavigableString) -> float:
    inspected = 0
    for element in label.next_elements:
        if not isinstance(element, NavigableString):
            continue
        text = element.strip()
        if not text:
            continue
        if text in MISSING_VALUES or _is_label(text):
            return 0.0
        match = VALUE_PATTERN.fullmatch(text)
        if match:
            return _to_float(match.group("value"))
        inspected += 1
        if inspected >= VALUE_LOOKAHEAD:
            return 0.0
    return 0.0


def _read_labelled_value(soup: BeautifulSoup, pattern: re.Pattern) -> float:
    for node in soup.find_all(string=True):
        match = pattern.fullmatch(node.strip())
        if not match:
            continue
        value = _to_float(match.group("value")) if match.group("value") else _value_after(node)
        if value:
            return value
    return 0.0


def parse_fundamentals(html: str) -> Fundamentals:
    """
    Pull P/E and EPS out of a quote page.

    Only text nodes that are exactly a label count, so prose such as the
    P/E tooltip ("...trailing twelve month EPS...") never matches. The
    value is either inline with the label or the next numeric text node.
    """
    soup = BeautifulSoup(html, "html.parser")
    return Fundamentals(
        pe_ratio=_read_labelled_value(soup, PE_LABEL),
        eps=_read_labelled_value(soup, EPS_LABEL),
    )


class GoogleFinanceScraper:
    BASE_URL = "https://www.google.com/finance/quote"

    HEADERS = {
        "User-Agent": (
            "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
            "(KHTML, like Gecko) Chrome/91.0.4472.124 Safari/537.36"
        ),
        "Accept": "text/html,application/xhtml+xml",
        "Accept-Language": "en-US,en;q=0.9",
    }

    def __init__(
        self,
        client: Optional[httpx.AsyncClient] = None,
        timeout_seconds: float = 8.0,
        default_exchange: str = "NASDAQ",
        exchange_overrides: Optional[Dict[str, str]] = None,
        base_url: Optional[str] = None,
    ):
        self._client = client
        self.timeout_seconds = timeout_seconds
        self.default_exchange = default_exchange.upper()
        self.exchange_overrides = {k.upper(): v.upper() for k, v in (exchange_overrides or {}).items()}
        self.base_url = (base_url or self.BASE_URL).rstrip("/")

    def quote_url(self, symbol: str) -> str:
        exchange = self.exchange_overrides.get(symbol.upper(), self.default_exchange)
        return f"{self.base_url}/{symbol.upper()}:{exchange}"

    async def _get(self, url: str) -> httpx.Response:
        if self._client is not None:
            return await self._client.get(url, headers=self.HEADERS, timeout=self.timeout_seconds)
        async with httpx.AsyncClient(timeout=self.timeout_seconds, follow_redirects=True) as client:
            return await client.get(url, headers=self.HEADERS)

    async def fetch(self, symbol: str) -> Fundamentals:
        try:
            response = await self._get(self.quote_url(symbol))
            if response.status_code != 200:
                logger.warning(f"⚠ Google Finance returned {response.status_code} for {symbol}")
                return Fundamentals()
            fundamentals = parse_fundamentals(response.text)
        except httpx.HTTPError as exc:
            logger.warning(f"⚠ Could not fetch Google Finance for {symbol}: {exc}")
            return Fundamentals()
        except Exception as exc:
            logger.warning(f"⚠ Could not parse Google Finance page for {symbol}: {exc}")
            return Fundamentals()

        if fundamentals.pe_ratio or fundamentals.eps:
            logger.info(
                f"✓ Fetched Google Finance for {symbol}: "
                f"PE={fundamentals.pe_ratio}, EPS={fundamentals.eps}"
            )
        return fundamentals
