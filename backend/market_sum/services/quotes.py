# backend/market_sum/services/quotes.py
from __future__ import annotations

import asyncio
import math
import random
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Sequence, Tuple
from urllib.parse import quote as urlquote

import httpx

from market_sum.exceptions import MalformedPayloadError, UpstreamError
from market_sum.logger import get_logger
from market_sum.results import Degraded, FetchResult, Ok, combine, map_result
from market_sum.schemas.market import AustralianMarket, MarketIndex, MarketSummary, Quote
from market_sum.services.http_fetcher import fetch_json
from market_sum.services.mock_data import mock_index, mock_quote

if TYPE_CHECKING:
    from market_sum.services.news_aggregator import NewsAggregator

log = get_logger(__name__)

INDICES: List[Tuple[str, str]] = [
    ("^GSPC", "S&P 500"),
    ("^AXJO", "ASX 200"),
    ("^IXIC", "NASDAQ"),
    ("^DJI", "Dow Jones"),
    ("^FTSE", "FTSE 100"),
]

POPULAR_STOCKS: List[str] = [
    "AAPL", "MSFT", "GOOGL", "AMZN", "TSLA", "META", "NVDA", "NFLX", "AMD", "INTC",
    "CRM", "ADBE", "PYPL", "UBER", "LYFT", "SNAP", "PINS", "ZM", "SHOP", "XYZ",
    "ROKU", "CRWD", "OKTA", "DOCU", "PLTR", "COIN", "HOOD", "RBLX", "SPOT",
]

ASX_INDICES: List[Tuple[str, str]] = [
    ("^AXJO", "ASX 200"),
    ("^AORD", "All Ordinaries"),
]

ASX_STOCKS: List[str] = [
    "BHP.AX", "CBA.AX", "CSL.AX", "NAB.AX", "WBC.AX", "ANZ.AX",
    "WES.AX", "MQG.AX", "WOW.AX", "TLS.AX", "RIO.AX", "FMG.AX",
]


# ===================== DERIVATION =====================

def _number(v: Any) -> Optional[float]:
    if isinstance(v, bool) or not isinstance(v, (int, float)):
        return None
    f = float(v)
    return f if math.isfinite(f) else None


def _series(v: Any) -> List[Any]:
    return v if isinstance(v, list) else []


def _valid(series: Any) -> List[float]:
    return [f for f in (_number(v) for v in _series(series)) if f is not None]


def _last(series: Any) -> Optional[float]:
    s = _series(series)
    return _number(s[-1]) if s else None


def _dict(v: Any) -> Dict[str, Any]:
    return v if isinstance(v, dict) else {}


def _when(ts: Optional[float], now: Optional[datetime]) -> datetime:
    """Series timestamp as UTC; missing or out-of-range stamps fall back to now."""
    if ts:
        try:
            return datetime.fromtimestamp(ts, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            log.warning("Ignoring out-of-range chart timestamp: %r", ts)
    return now or datetime.now(timezone.utc)


def derive_quote(symbol: str, payload: Dict[str, Any], now: Optional[datetime] = None) -> Quote:
    """
    Build a Quote from one Yahoo chart response.
    Raises MalformedPayloadError if the snapshot lacks the price fields.
    """
    sym = symbol.upper().strip()
    try:
        result = payload["chart"]["result"][0]
        meta = result["meta"]
    except (KeyError, IndexError, TypeError):
        raise MalformedPayloadError(sym, "no chart result") from None
    if not isinstance(result, dict) or not isinstance(meta, dict):
        raise MalformedPayloadError(sym, "no chart result")

    price = _number(meta.get("regularMarketPrice"))
    prev = _number(meta.get("previousClose")) or _number(meta.get("chartPreviousClose"))
    if not price or not prev:
        raise MalformedPayloadError(sym, "missing price data")

    blocks = _series(_dict(result.get("indicators")).get("quote"))
    series = _dict(blocks[0]) if blocks else {}

    highs = _valid(series.get("high"))
    lows = _valid(series.get("low"))
    volume = int(_last(series.get("volume")) or 0)
    open_ = _last(series.get("open")) or price

    when = _when(_last(result.get("timestamp")), now)

    change = price - prev
    return Quote(
        symbol=sym,
        price=price,
        change=change,
        change_percent=(change / prev) * 100,
        volume=volume,
        # rough: no shares-outstanding figure in the chart payload
        market_cap=price * volume * 100,
        high=max(highs) if highs else price,
        low=min(lows) if lows else price,
        open=open_,
        previous_close=prev,
        timestamp=when,
    )


def _to_index(q: Quote, name: str) -> MarketIndex:
    return MarketIndex(
        name=name,
        symbol=q.symbol,
        value=q.price,
        change=q.change,
        change_percent=q.change_percent,
        timestamp=q.timestamp,
    )


def gainers(quotes: Sequence[Quote], limit: int) -> List[Quote]:
    up = [q for q in quotes if q.change_percent > 0]
    return sorted(up, key=lambda q: q.change_percent, reverse=True)[:limit]


def losers(quotes: Sequence[Quote], limit: int) -> List[Quote]:
    down = [q for q in quotes if q.change_percent < 0]
    return sorted(down, key=lambda q: q.change_percent)[:limit]


def most_active(quotes: Sequence[Quote], limit: int) -> List[Quote]:
    return sorted(quotes, key=lambda q: q.volume, reverse=True)[:limit]


# ===================== SERVICE =====================

class QuoteService:
    """Quotes from one upstream chart endpoint, with mock fallback per symbol."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        base_url: str,
        *,
        timeout: float = 10.0,
        user_agent: str = "Mozilla/5.0",
        rng: Optional[random.Random] = None,
    ):
        self.client = client
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.user_agent = user_agent
        self.rng = rng or random.Random()

    def url_for(self, symbol: str) -> str:
        return f"{self.base_url}/{urlquote(symbol, safe='')}"

    async def get_quote(self, symbol: str) -> FetchResult[Quote]:
        sym = symbol.upper().strip()
        log.info("Fetching quote for %s", sym)
        try:
            payload = await self._fetch(sym)
            return Ok(derive_quote(sym, payload))
        except UpstreamError as e:
            log.error("quote failed for %s: %s", sym, e)
            return Degraded(mock_quote(sym, self.rng), f"{sym}: {e.reason}")

    async def _fetch(self, symbol: str) -> Dict[str, Any]:
        return await fetch_json(self.client, self.url_for(symbol), timeout=self.timeout, user_agent=self.user_agent)

    async def get_quotes(self, symbols: Sequence[str]) -> FetchResult[List[Quote]]:
        results = await asyncio.gather(*(self.get_quote(s) for s in symbols))
        return combine(results)

    async def _index(self, symbol: str, name: str) -> FetchResult[MarketIndex]:
        r = await self.get_quote(symbol)
        if isinstance(r, Ok):
            return Ok(_to_index(r.data, name))
        return Degraded(mock_index(symbol, name, self.rng), r.reason)

    async def get_indices(self, indices: Sequence[Tuple[str, str]] = INDICES) -> FetchResult[List[MarketIndex]]:
        results = await asyncio.gather(*(self._index(sym, name) for sym, name in indices))
        return combine(results)

    async def get_top_gainers(self, limit: int = 10) -> FetchResult[List[Quote]]:
        return map_result(await self.get_quotes(POPULAR_STOCKS), lambda qs: gainers(qs, limit))

    async def get_top_losers(self, limit: int = 10) -> FetchResult[List[Quote]]:
        return map_result(await self.get_quotes(POPULAR_STOCKS), lambda qs: losers(qs, limit))

    async def get_summary(
        self, limit: int = 5, news: Optional["NewsAggregator"] = None
    ) -> FetchResult[MarketSummary]:
        """
        Indices, movers and (optionally) the latest headlines in one payload.
        `news` is a NewsAggregator; the quote batch is fetched once and
        reused for gainers, losers and most active.
        """
        tasks = [self.get_indices(), self.get_quotes(POPULAR_STOCKS)]
        if news is not None:
            tasks.append(news.latest(limit))
        results = await asyncio.gather(*tasks)
        indices, quotes = results[0], results[1]
        articles = results[2] if news is not None else Ok([])

        summary = MarketSummary(
            timestamp=datetime.now(timezone.utc),
            indices=indices.data or [],
            top_gainers=gainers(quotes.data or [], limit),
            top_losers=losers(quotes.data or [], limit),
            most_active=most_active(quotes.data or [], limit),
            news=articles.data or [],
        )
        return _wrap(summary, results)

    async def get_australian_market(self, limit: int = 5) -> FetchResult[AustralianMarket]:
        indices, quotes = await asyncio.gather(self.get_indices(ASX_INDICES), self.get_quotes(ASX_STOCKS))
        data = AustralianMarket(
            asx_indices=indices.data or [],
            top_asx_gainers=gainers(quotes.data or [], limit),
            top_asx_losers=losers(quotes.data or [], limit),
            major_asx_stocks=list(quotes.data or []),
        )
        return _wrap(data, [indices, quotes])


def _wrap(data, parts: Sequence[FetchResult]) -> FetchResult:
    reasons = [p.reason for p in parts if p.degraded and p.reason]
    if reasons:
        return Degraded(data, "; ".join(reasons))
    return Ok(data)
