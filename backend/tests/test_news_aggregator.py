# backend/tests/test_news_aggregator.py
import pytest

from conftest import timeout_reply

from market_sum.core.config import CategorySpec, DEFAULT_CATEGORIES
from market_sum.results import Degraded, Ok
from market_sum.schemas.news import SourceSpec
from market_sum.services.news_aggregator import NewsAggregator

SOURCES = [
    SourceSpec(name="alpha", url="https://alpha.test/rss", display_name="Alpha"),
    SourceSpec(name="beta", url="https://beta.test/rss", display_name="Beta", extra_tags=["technology"]),
]


def make_aggregator(client, sources=SOURCES, **kwargs):
    return NewsAggregator(client, sources, categories=DEFAULT_CATEGORIES, **kwargs)


@pytest.mark.asyncio
async def test_no_reachable_sources_serves_mock_articles(mock_http):
    news = make_aggregator(mock_http({}))
    result = await news.latest(2)
    assert isinstance(result, Degraded)
    assert len(result.data) <= 2
    assert [a.id for a in result.data] == ["mock-1", "mock-2"]
    assert "all news sources failed" in result.reason


@pytest.mark.asyncio
async def test_upstream_error_status_counts_as_failure(mock_http):
    news = make_aggregator(mock_http({"alpha.test": (500, "oops"), "beta.test": (404, "gone")}))
    result = await news.latest(10)
    assert isinstance(result, Degraded)
    assert len(result.data) == 3


@pytest.mark.asyncio
async def test_merges_sources_newest_first(mock_http, rss_feed, rss_item):
    client = mock_http({
        "alpha.test": (200, rss_feed(
            rss_item(title="Alpha old", link="https://alpha.test/1", hours_ago=5),
            rss_item(title="Alpha new", link="https://alpha.test/2", hours_ago=1),
        )),
        "beta.test": (200, rss_feed(
            rss_item(title="Beta mid", link="https://beta.test/1", hours_ago=3),
        )),
    })
    result = await make_aggregator(client).latest(10)
    assert isinstance(result, Ok)
    assert [a.title for a in result.data] == ["Alpha new", "Beta mid", "Alpha old"]
    assert [a.source for a in result.data] == ["Alpha", "Beta", "Alpha"]
    dates = [a.published_at for a in result.data]
    assert dates == sorted(dates, reverse=True)


@pytest.mark.asyncio
async def test_one_failing_source_still_returns_live_data(mock_http, rss_feed, rss_item):
    client = mock_http({"beta.test": (200, rss_feed(rss_item(title="Beta only")))})
    result = await make_aggregator(client).latest(10)
    assert isinstance(result, Ok)
    assert [a.title for a in result.data] == ["Beta only"]
    assert "technology" in result.data[0].tags


@pytest.mark.asyncio
async def test_latest_truncates_to_limit(mock_http, rss_feed, rss_item):
    items = [rss_item(title=f"Story {i}", link=f"https://alpha.test/{i}", hours_ago=i + 1) for i in range(4)]
    client = mock_http({"alpha.test": (200, rss_feed(*items)), "beta.test": (200, rss_feed(*items))})
    result = await make_aggregator(client).latest(3)
    assert len(result.data) == 3


@pytest.mark.asyncio
async def test_only_stale_items_degrades(mock_http, rss_feed, rss_item):
    stale = rss_feed(rss_item(hours_ago=24 * 30))
    client = mock_http({"alpha.test": (200, stale), "beta.test": (200, stale)})
    result = await make_aggregator(client).latest(5)
    assert isinstance(result, Degraded)
    assert result.reason == "no fresh articles from any news source"


@pytest.mark.asyncio
async def test_search_on_mock_fallback_matches_apple(mock_http):
    news = make_aggregator(mock_http({}))
    result = await news.search("apple", 5)
    assert isinstance(result, Degraded)
    assert len(result.data) <= 5
    for a in result.data:
        assert "apple" in a.title.lower() or "apple" in a.summary.lower()


@pytest.mark.asyncio
async def test_search_is_case_insensitive_over_live_data(mock_http, rss_feed, rss_item):
    client = mock_http({"alpha.test": (200, rss_feed(
        rss_item(title="Tesla deliveries jump", description="EV maker beats estimates", link="https://alpha.test/1"),
        rss_item(title="Oil slides", description="Crude weak on supply", link="https://alpha.test/2"),
    ))})
    result = await make_aggregator(client).search("TESLA", 5)
    assert isinstance(result, Ok)
    assert [a.title for a in result.data] == ["Tesla deliveries jump"]


@pytest.mark.asyncio
async def test_search_rejects_blank_query(mock_http):
    news = make_aggregator(mock_http({}))
    with pytest.raises(ValueError):
        await news.search("   ")


@pytest.mark.asyncio
async def test_unknown_category_behaves_like_default(mock_http, rss_feed, rss_item):
    feed = rss_feed(
        rss_item(title="Company earnings beat", description="Revenue up", link="https://alpha.test/1"),
        rss_item(title="Weather report", description="Sunny skies", link="https://alpha.test/2"),
    )
    client = mock_http({"alpha.test": (200, feed)})
    news = make_aggregator(client)
    unknown = await news.by_category("astrology", 10)
    business = await news.by_category("business", 10)
    assert [a.title for a in unknown.data] == [a.title for a in business.data]
    assert [a.title for a in business.data] == ["Company earnings beat"]


@pytest.mark.asyncio
async def test_category_uses_configured_sources_only(mock_http, rss_feed, rss_item):
    categories = {
        "business": CategorySpec(sources=["alpha"], keywords=["stock"]),
        "technology": CategorySpec(sources=["beta"], keywords=["chip"]),
    }
    client = mock_http({
        "alpha.test": (200, rss_feed(rss_item(title="Stock picks", description="Chip makers", link="https://alpha.test/1"))),
        "beta.test": (200, rss_feed(rss_item(title="Chip shortage eases", description="Supply returns", link="https://beta.test/1"))),
    })
    news = NewsAggregator(client, SOURCES, categories=categories)
    result = await news.by_category("technology", 10)
    assert isinstance(result, Ok)
    assert [a.title for a in result.data] == ["Chip shortage eases"]


@pytest.mark.asyncio
async def test_category_without_matches_falls_back_to_mock(mock_http):
    news = make_aggregator(mock_http({}))
    result = await news.by_category("economy", 10)
    assert isinstance(result, Degraded)
    assert [a.id for a in result.data] == ["mock-1", "mock-3"]


def test_default_category_must_exist(mock_http):
    with pytest.raises(ValueError):
        NewsAggregator(mock_http({}), SOURCES, categories=DEFAULT_CATEGORIES, default_category="sports")


def test_resolve_category_normalises_name(mock_http):
    news = make_aggregator(mock_http({}))
    assert news.resolve_category(" Technology ")[0] == "technology"
    assert news.resolve_category("nope")[0] == "business"


@pytest.mark.asyncio
async def test_timed_out_source_contributes_nothing(mock_http, rss_feed, rss_item):
    seen = []
    client = mock_http({
        "alpha.test": timeout_reply(seen),
        "beta.test": (200, rss_feed(rss_item(title="Beta survives"))),
    })
    news = make_aggregator(client, user_agent="News-Agent/9.9")
    result = await news.latest(10)
    assert isinstance(result, Ok)
    assert [a.source for a in result.data] == ["Beta"]
    assert seen[0].headers["User-Agent"] == "News-Agent/9.9"


@pytest.mark.asyncio
async def test_all_sources_timing_out_degrades(mock_http):
    client = mock_http({"alpha.test": timeout_reply(), "beta.test": timeout_reply()})
    result = await make_aggregator(client, timeout=1.0).latest(3)
    assert isinstance(result, Degraded)
    assert result.reason == "all news sources failed: alpha, beta"
    assert len(result.data) == 3


def test_sources_is_read_only(mock_http):
    news = make_aggregator(mock_http({}))
    assert [s.name for s in news.sources] == ["alpha", "beta"]
    with pytest.raises(AttributeError):
        news.sources = []
