# backend/market_sum/services/news_aggregator.py
from __future__ import annotations

import asyncio
from datetime import timedelta
from typing import List, Mapping, Optional, Sequence, Tuple

import httpx

from market_sum.core.config import CategorySpec
from market_sum.logger import get_logger
from market_sum.results import Degraded, FetchResult, Ok, map_result
from market_sum.schemas.news import Article, SourceSpec
from market_sum.services.http_fetcher import fetch_text
from market_sum.services.mock_data import mock_articles
from market_sum.services.rss_parser import parse_feed

log = get_logger(__name__)


class NewsAggregator:
    """
    Fans out to every configured feed, merges what comes back and sorts it
    newest first. A failing source contributes nothing; if nothing at all
    comes back the caller gets the static mock articles as Degraded.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        sources: Sequence[SourceSpec],
        *,
        categories: Mapping[str, CategorySpec],
        default_category: str = "business",
        timeout: float = 10.0,
        user_agent: str = "Market-Sum-News-Bot/1.0",
        staleness_days: int = 7,
        search_window: int = 100,
    ):
        if default_category not in categories:
            raise ValueError(f"default category {default_category!r} is not configured")
        self.client = client
        self._sources: Tuple[SourceSpec, ...] = tuple(sources)
        self.categories = dict(categories)
        self.default_category = default_category
        self.timeout = timeout
        self.user_agent = user_agent
        self.staleness = timedelta(days=staleness_days)
        self.search_window = search_window

    @property
    def sources(self) -> Tuple[SourceSpec, ...]:
        """Configured feeds, in configuration order."""
        return self._sources

    # ---------- fetching ----------

    async def _fetch_source(self, source: SourceSpec, limit: int) -> Optional[List[Article]]:
        """Articles from one feed, or None if the fetch failed."""
        try:
            xml = await fetch_text(self.client, source.url, timeout=self.timeout, user_agent=self.user_agent)
        except Exception as e:
            log.error("news source=%s failed: %s", source.name, e)
            return None
        articles = parse_feed(xml, source, limit, staleness=self.staleness)
        log.info("news source=%s articles=%d", source.name, len(articles))
        return articles

    async def _collect(self, sources: Sequence[SourceSpec], per_source: int) -> Tuple[List[Article], List[str]]:
        results = await asyncio.gather(*(self._fetch_source(s, per_source) for s in sources))
        merged: List[Article] = []
        failed: List[str] = []
        for source, articles in zip(sources, results):
            if articles is None:
                failed.append(source.name)
            else:
                merged.extend(articles)
        merged.sort(key=lambda a: a.published_at, reverse=True)
        return merged, failed

    @staticmethod
    def _empty_reason(sources: Sequence[SourceSpec], failed: Sequence[str]) -> str:
        if not sources:
            return "no news sources configured"
        if len(failed) == len(sources):
            return "all news sources failed: " + ", ".join(failed)
        return "no fresh articles from any news source"

    # ---------- public API ----------

    async def latest(self, limit: int = 20) -> FetchResult[List[Article]]:
        articles, failed = await self._collect(self.sources, limit)
        if articles:
            return Ok(articles[:limit])
        reason = self._empty_reason(self.sources, failed)
        log.warning("serving mock news: %s", reason)
        return Degraded(mock_articles(limit), reason)

    async def search(self, query: str, limit: int = 20) -> FetchResult[List[Article]]:
        """Case-insensitive substring match over the most recent articles."""
        q = (query or "").strip().lower()
        if not q:
            raise ValueError("Search query is required")
        log.info("Searching news for query: %s", q)
        recent = await self.latest(self.search_window)
        return map_result(
            recent,
            lambda arts: [a for a in arts if q in a.title.lower() or q in a.summary.lower()][:limit],
        )

    def resolve_category(self, category: str) -> Tuple[str, CategorySpec]:
        """Unknown categories resolve to the default one."""
        key = (category or "").strip().lower()
        if key in self.categories:
            return key, self.categories[key]
        return self.default_category, self.categories[self.default_category]

    @staticmethod
    def matches(article: Article, keywords: Sequence[str]) -> bool:
        text = f"{article.title} {article.summary}".lower()
        return any(k in text for k in keywords)

    async def by_category(self, category: str, limit: int = 20) -> FetchResult[List[Article]]:
        name, spec = self.resolve_category(category)
        keywords = [k.lower() for k in spec.keywords]
        sources = [s for s in self.sources if s.name in spec.sources] or self.sources
        log.info("Fetching news for category=%s (resolved %s) from %d sources", category, name, len(sources))

        articles, failed = await self._collect(sources, self.search_window)
        picked = [a for a in articles if self.matches(a, keywords)][:limit]
        if picked:
            return Ok(picked)

        reason = self._empty_reason(sources, failed) if not articles else f"no articles matched category {name}"
        log.warning("serving mock news for category=%s: %s", name, reason)
        fallback = [a for a in mock_articles(3) if self.matches(a, keywords)] or mock_articles(3)
        return Degraded(fallback[:limit], reason)
