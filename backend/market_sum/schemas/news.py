# backend/market_sum/schemas/news.py
"""News article and feed source schemas"""

from __future__ import annotations
from datetime import datetime
from typing import List, Literal, Optional, Tuple
from pydantic import BaseModel, ConfigDict, Field

Sentiment = Literal["positive", "negative", "neutral"]


class SourceSpec(BaseModel):
    """One RSS/Atom feed the aggregator reads from"""
    name: str = Field(..., min_length=1)
    url: str = Field(..., min_length=1)
    parser_format: str = "rss"
    # Overrides Article.source; falls back to `name`
    display_name: Optional[str] = None
    # Injected into every article from this source
    extra_tags: List[str] = Field(default_factory=list)

    @property
    def label(self) -> str:
        return self.display_name or self.name


class Article(BaseModel):
    """Normalized news article (immutable once built)"""
    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    summary: str
    content: str
    url: str
    source: str
    published_at: datetime
    tags: Tuple[str, ...] = ()
    sentiment: Sentiment = "neutral"
    author: Optional[str] = None
