# backend/tests/conftest.py
import asyncio
import os
from datetime import datetime, timedelta, timezone
from email.utils import format_datetime

import httpx
import pytest

# settings are read at import time, so configure before importing the app
os.environ["LOG_TO_FILE"] = "0"
os.environ["USER_STORE"] = "memory"
os.environ["THROTTLE_LIMIT"] = "100000"
os.environ["GOOGLE_CLIENT_ID"] = "test-client-id"
os.environ["GOOGLE_CLIENT_SECRET"] = "test-client-secret"
os.environ["SECRET_KEY"] = "test-secret"


def _item(title="Apple shares surge", description="Strong growth lifts Apple.",
          link="https://example.com/a", hours_ago=1, pub_date=None):
    parts = []
    if title is not None:
        parts.append(f"<title>{title}</title>")
    if description is not None:
        parts.append(f"<description>{description}</description>")
    if link is not None:
        parts.append(f"<link>{link}</link>")
    if pub_date is None and hours_ago is not None:
        pub_date = format_datetime(datetime.now(timezone.utc) - timedelta(hours=hours_ago))
    if pub_date is not None:
        parts.append(f"<pubDate>{pub_date}</pubDate>")
    return "<item>" + "".join(parts) + "</item>"


def _feed(*items):
    return (
        '<?xml version="1.0" encoding="UTF-8"?>'
        '<rss version="2.0"><channel><title>Test feed</title>'
        + "".join(items)
        + "</channel></rss>"
    )


@pytest.fixture
def rss_item():
    return _item


@pytest.fixture
def rss_feed():
    return _feed


@pytest.fixture
def mock_http():
    """
    Build an httpx.AsyncClient whose responses come from `routes`:
    {url-substring: (status, body) or callable(request) -> Response}.
    Unmatched URLs raise ConnectError. Clients are closed on teardown.
    """
    clients = []

    def _make(routes):
        def handler(request: httpx.Request) -> httpx.Response:
            url = str(request.url)
            for key, reply in routes.items():
                if key not in url:
                    continue
                if callable(reply):
                    return reply(request)
                status, body = reply
                if isinstance(body, (dict, list)):
                    return httpx.Response(status, json=body)
                return httpx.Response(status, text=body)
            raise httpx.ConnectError("unreachable", request=request)

        c = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        clients.append(c)
        return c

    yield _make

    # private loop, so the current event loop of the test run is left alone
    loop = asyncio.new_event_loop()
    try:
        for c in clients:
            loop.run_until_complete(c.aclose())
    finally:
        loop.close()


def timeout_reply(seen=None):
    """Route handler that records the request and times out."""
    def _reply(request: httpx.Request) -> httpx.Response:
        if seen is not None:
            seen.append(request)
        raise httpx.ReadTimeout("upstream too slow", request=request)
    return _reply


def chart_payload(price=150.0, previous_close=145.0, **series):
    quote = {
        "high": series.get("high", [151.0, None, 152.5]),
        "low": series.get("low", [148.0, 147.5, None]),
        "open": series.get("open", [149.0, 149.5, 150.0]),
        "volume": series.get("volume", [1000, 2000, 3000]),
    }
    return {
        "chart": {
            "result": [{
                "meta": {"regularMarketPrice": price, "previousClose": previous_close},
                "indicators": {"quote": [quote]},
                "timestamp": series.get("timestamp", [1700000000, 1700000060, 1700000120]),
            }],
            "error": None,
        }
    }


@pytest.fixture
def chart():
    return chart_payload


@pytest.fixture
def app():
    from market_sum.main import app as fastapi_app
    yield fastapi_app
    fastapi_app.dependency_overrides.clear()


@pytest.fixture
def client(app):
    # context manager so lifespan startup/shutdown run
    from fastapi.testclient import TestClient
    with TestClient(app) as c:
        yield c
