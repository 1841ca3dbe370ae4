# backend/market_sum/services/mock_data.py
"""Fallback data served when every upstream fetch fails."""
from __future__ import annotations

import random
from datetime import datetime, timedelta, timezone
from typing import List, Optional

from market_sum.schemas.market import MarketIndex, Quote
from market_sum.schemas.news import Article

# symbol -> (base value, value spread, change spread, percent spread)
MOCK_INDEX_BASES = {
    "^GSPC": (4500.0, 100.0, 50.0, 2.0),
    "^AXJO": (7000.0, 200.0, 30.0, 1.5),
    "^IXIC": (14000.0, 300.0, 100.0, 3.0),
}


def mock_articles(limit: int, now: Optional[datetime] = None) -> List[Article]:
    now = now or datetime.now(timezone.utc)
    articles = [
        Article(
            id="mock-1",
            title="Markets Rally on Positive Economic Data",
            summary="Global markets showed strong gains today following better-than-expected economic indicators.",
            content=(
                "Global markets showed strong gains today following better-than-expected economic indicators. "
                "The S&P 500 rose 1.2% while the NASDAQ gained 1.8%."
            ),
            url="https://example.com/news/1",
            source="Reuters",
            published_at=now,
            author="Financial Reporter",
            tags=("markets", "s&p 500", "nasdaq"),
            sentiment="positive",
        ),
        Article(
            id="mock-2",
            title="Tech Stocks Face Pressure from Regulatory Concerns",
            summary="Technology companies saw mixed trading as investors weighed regulatory risks.",
            content=(
                "Technology companies saw mixed trading as investors weighed regulatory risks. "
                "Apple and Microsoft were among the most active stocks."
            ),
            url="https://example.com/news/2",
            source="Reuters",
            published_at=now - timedelta(hours=1),
            author="Tech Reporter",
            tags=("technology", "apple", "microsoft"),
            sentiment="neutral",
        ),
        Article(
            id="mock-3",
            title="Federal Reserve Signals Potential Rate Changes",
            summary="The Federal Reserve indicated possible adjustments to interest rates in upcoming meetings.",
            content=(
                "The Federal Reserve indicated possible adjustments to interest rates in upcoming meetings, "
                "causing volatility in bond markets."
            ),
            url="https://example.com/news/3",
            source="Reuters",
            published_at=now - timedelta(hours=2),
            author="Economic Reporter",
            tags=("federal reserve", "interest rates"),
            sentiment="neutral",
        ),
    ]
    return articles[:max(0, limit)]


def mock_quote(symbol: str, rng: Optional[random.Random] = None) -> Quote:
    rng = rng or random.Random()
    price = rng.random() * 1000 + 50
    change = (rng.random() - 0.5) * 20
    prev = price - change
    return Quote(
        symbol=symbol.upper(),
        price=price,
        change=change,
        change_percent=(change / prev) * 100,
        volume=int(rng.random() * 10_000_000),
        market_cap=float(int(rng.random() * 1_000_000_000)),
        high=price + rng.random() * 10,
        low=price - rng.random() * 10,
        open=prev,
        previous_close=prev,
        timestamp=datetime.now(timezone.utc),
    )


def mock_index(symbol: str, name: str, rng: Optional[random.Random] = None) -> MarketIndex:
    rng = rng or random.Random()
    base, spread, chg, pct = MOCK_INDEX_BASES.get(symbol, (4000.0, 1000.0, 100.0, 3.0))
    return MarketIndex(
        name=name,
        symbol=symbol,
        value=base + rng.random() * spread,
        change=(rng.random() - 0.5) * chg,
        change_percent=(rng.random() - 0.5) * pct,
        timestamp=datetime.now(timezone.utc),
    )
