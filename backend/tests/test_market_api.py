# backend/tests/test_market_api.py
import random

import pytest

from conftest import chart_payload
from market_sum.api.deps import get_news_aggregator, get_quote_service
from market_sum.core.config import DEFAULT_CATEGORIES
from market_sum.services.news_aggregator import NewsAggregator
from market_sum.services.quotes import QuoteService

BASE = "https://quotes.test/v8/finance/chart"


@pytest.fixture
def use_upstream(app, mock_http):
    def _install(routes):
        client = mock_http(routes)
        quotes = QuoteService(client, BASE, rng=random.Random(1))
        news = NewsAggregator(client, [], categories=DEFAULT_CATEGORIES)
        app.dependency_overrides[get_quote_service] = lambda: quotes
        app.dependency_overrides[get_news_aggregator] = lambda: news
        return quotes
    return _install


def test_stock_quote_live(client, use_upstream):
    use_upstream({"/AAPL": (200, chart_payload(price=150.0, previous_close=145.0))})
    r = client.get("/api/v1/market/stock/aapl")
    assert r.status_code == 200
    body = r.json()
    assert body["success"] is True
    assert body["degraded"] is False
    assert body["data"]["symbol"] == "AAPL"
    assert body["data"]["change"] == pytest.approx(5.0)
    assert body["data"]["change_percent"] == pytest.approx(3.448, abs=1e-3)


def test_stock_quote_degraded_on_upstream_error(client, use_upstream):
    use_upstream({"/AAPL": (500, "boom")})
    r = client.get("/api/v1/market/stock/AAPL")
    assert r.status_code == 200
    body = r.json()
    assert body["success"] is True
    assert body["degraded"] is True
    assert body["reason"] == "AAPL: status 500"
    assert body["data"]["symbol"] == "AAPL"


@pytest.mark.parametrize("symbol", ["AA$PL", "TOO-LONG-SYMBOL-XYZ", "%20"])
def test_stock_quote_rejects_invalid_symbol(client, use_upstream, symbol):
    use_upstream({})
    r = client.get(f"/api/v1/market/stock/{symbol}")
    assert r.status_code == 400
    assert r.json()["success"] is False


def test_indices_envelope(client, use_upstream):
    use_upstream({})
    r = client.get("/api/v1/market/indices")
    assert r.status_code == 200
    body = r.json()
    assert body["degraded"] is True
    assert [i["symbol"] for i in body["data"]] == ["^GSPC", "^AXJO", "^IXIC", "^DJI", "^FTSE"]


def test_gainers_respects_limit(client, use_upstream):
    use_upstream({})
    r = client.get("/api/v1/market/gainers", params={"limit": 4})
    assert r.status_code == 200
    data = r.json()["data"]
    assert len(data) <= 4
    assert all(q["change_percent"] > 0 for q in data)


def test_losers_limit_out_of_range(client, use_upstream):
    use_upstream({})
    r = client.get("/api/v1/market/losers", params={"limit": 30})
    assert r.status_code == 400


def test_summary_includes_fallback_news(client, use_upstream):
    use_upstream({})
    r = client.get("/api/v1/market/summary", params={"limit": 2})
    assert r.status_code == 200
    body = r.json()
    assert body["degraded"] is True
    data = body["data"]
    assert len(data["indices"]) == 5
    assert len(data["most_active"]) == 2
    assert [a["id"] for a in data["news"]] == ["mock-1", "mock-2"]
    assert "no news sources configured" in body["reason"]


def test_australia_endpoint(client, use_upstream):
    use_upstream({})
    r = client.get("/api/v1/market/australia")
    assert r.status_code == 200
    data = r.json()["data"]
    assert [i["symbol"] for i in data["asx_indices"]] == ["^AXJO", "^AORD"]
    assert len(data["major_asx_stocks"]) == 12


def test_unknown_route_uses_error_envelope(client):
    r = client.get("/api/v1/market/nowhere")
    assert r.status_code == 404
    assert r.json()["success"] is False


def test_health(client):
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json()["status"] == "healthy"


def test_responses_carry_process_time_header(client):
    r = client.get("/health")
    assert int(r.headers["x-process-time-ms"]) >= 0


def test_gainers_survive_one_malformed_quote(client, use_upstream):
    use_upstream({"/AAPL": (200, {"chart": {"result": [{"meta": None}]}})})
    r = client.get("/api/v1/market/gainers")
    assert r.status_code == 200
    body = r.json()
    assert body["success"] is True
    assert body["degraded"] is True
    assert "AAPL: no chart result" in body["reason"]
