# backend/market_sum/services/rss_parser.py
"""
Regex-based feed parsing.

One ExtractionSchema per feed format (rss, atom). Per-source behaviour
(source-name override, tag injection) comes from SourceSpec, not from
separate parsers.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional, Pattern, Tuple

from dateutil import parser as dtparse

from market_sum.logger import get_logger
from market_sum.schemas.news import Article, SourceSpec
from market_sum.services.heuristics import analyze_sentiment, extract_tags
from market_sum.services.text import clean_html

log = get_logger(__name__)

STALENESS_WINDOW = timedelta(days=7)


def element(tag: str) -> Pattern[str]:
    """Pattern capturing the inner text of <tag ...>...</tag>."""
    return re.compile(rf"<{tag}(?:\s[^>]*)?>(.*?)</{tag}>", re.DOTALL | re.IGNORECASE)


@dataclass(frozen=True)
class ExtractionSchema:
    item: Pattern[str]
    title: Pattern[str]
    description: Pattern[str]
    link: Pattern[str]
    pub_date: Pattern[str]

    @classmethod
    def for_tags(cls, item: str, title: str, description: str, link: str, pub_date: str) -> "ExtractionSchema":
        return cls(
            item=element(item),
            title=element(title),
            description=element(description),
            link=element(link),
            pub_date=element(pub_date),
        )


FORMATS: Dict[str, ExtractionSchema] = {
    "rss": ExtractionSchema.for_tags("item", "title", "description", "link", "pubDate"),
    "atom": ExtractionSchema(
        item=element("entry"),
        title=element("title"),
        description=element("summary"),
        link=re.compile(r"<link\b[^>]*\bhref=[\"']([^\"']*)[\"']", re.IGNORECASE),
        pub_date=element("updated"),
    ),
}


def get_schema(parser_format: str) -> ExtractionSchema:
    try:
        return FORMATS[(parser_format or "rss").lower()]
    except KeyError:
        raise ValueError(f"Unknown feed format: {parser_format!r}") from None


def _first(pattern: Pattern[str], block: str) -> Optional[str]:
    m = pattern.search(block)
    return m.group(1) if m else None


def _extract(schema: ExtractionSchema, block: str) -> Optional[Tuple[str, str, str, Optional[str]]]:
    """(title, summary, url, raw_date) or None when a required field is missing."""
    title = clean_html(_first(schema.title, block) or "")
    summary = clean_html(_first(schema.description, block) or "")
    url = clean_html(_first(schema.link, block) or "")
    if not (title and summary and url):
        return None
    return title, summary, url, _first(schema.pub_date, block)


def parse_published(raw: Optional[str], now: datetime) -> datetime:
    """Parse a feed date as UTC; missing or unparsable dates become `now`."""
    if not raw or not raw.strip():
        return now
    try:
        dt = dtparse.parse(clean_html(raw))
    except (ValueError, OverflowError):
        log.warning("Could not parse feed date: %r", raw)
        return now
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def _merge_tags(*groups) -> Tuple[str, ...]:
    seen: List[str] = []
    for group in groups:
        for tag in group:
            if tag not in seen:
                seen.append(tag)
    return tuple(seen)


def parse_feed(
    xml: str,
    source: SourceSpec,
    limit: int,
    *,
    now: Optional[datetime] = None,
    staleness: timedelta = STALENESS_WINDOW,
) -> List[Article]:
    """
    Turn raw feed text into at most `limit` articles, in feed order.

    Items missing title, description or link are skipped, as are items
    published before now - staleness. Any unexpected error discards the
    whole feed and returns [] so the caller can substitute fallback data.
    """
    now = now or datetime.now(timezone.utc)
    cutoff = now - staleness
    stamp = int(now.timestamp() * 1000)

    try:
        schema = get_schema(source.parser_format)
        articles: List[Article] = []
        for m in schema.item.finditer(xml or ""):
            if len(articles) >= limit:
                break
            fields = _extract(schema, m.group(1))
            if fields is None:
                continue
            title, summary, url, raw_date = fields

            published = parse_published(raw_date, now)
            if published < cutoff:
                continue

            text = f"{title} {summary}"
            articles.append(Article(
                id=f"{source.name}-{len(articles)}-{stamp}",
                title=title,
                summary=summary,
                content=summary,
                url=url,
                source=source.label,
                published_at=published,
                tags=_merge_tags(source.extra_tags, extract_tags(text)),
                sentiment=analyze_sentiment(text),
            ))
        return articles
    except Exception:
        log.exception("Failed to parse feed from %s", source.name)
        return []
