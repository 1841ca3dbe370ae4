# backend/market_sum/schemas/market.py
"""Quote and market overview schemas"""

from __future__ import annotations
from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field

from market_sum.schemas.news import Article


class Quote(BaseModel):
    """Point-in-time price snapshot for one symbol"""
    model_config = ConfigDict(frozen=True)

    symbol: str
    price: float
    change: float
    change_percent: float
    volume: int = 0
    market_cap: Optional[float] = None
    high: float
    low: float
    open: float
    previous_close: float
    timestamp: datetime


class MarketIndex(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    symbol: str
    value: float
    change: float
    change_percent: float
    timestamp: datetime


class MarketSummary(BaseModel):
    timestamp: datetime
    indices: List[MarketIndex] = Field(default_factory=list)
    top_gainers: List[Quote] = Field(default_factory=list)
    top_losers: List[Quote] = Field(default_factory=list)
    most_active: List[Quote] = Field(default_factory=list)
    news: List[Article] = Field(default_factory=list)


class AustralianMarket(BaseModel):
    asx_indices: List[MarketIndex] = Field(default_factory=list)
    top_asx_gainers: List[Quote] = Field(default_factory=list)
    top_asx_losers: List[Quote] = Field(default_factory=list)
    major_asx_stocks: List[Quote] = Field(default_factory=list)
