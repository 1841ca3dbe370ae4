# backend/tests/test_deps.py
import pytest
from fastapi import Depends, FastAPI
from fastapi.testclient import TestClient

from market_sum.api.deps import RateLimiter
from market_sum.core.config import Settings
from market_sum.utils.validators import normalize_symbol, require_text, validate_symbol


def test_rate_limiter_blocks_after_limit():
    limiter = RateLimiter(times=2, seconds=60)
    mini = FastAPI()

    @mini.get("/ping", dependencies=[Depends(limiter)])
    def ping():
        return {"ok": True}

    c = TestClient(mini)
    assert c.get("/ping").status_code == 200
    assert c.get("/ping").status_code == 200
    r = c.get("/ping")
    assert r.status_code == 429
    assert "Rate limit exceeded" in r.json()["detail"]


@pytest.mark.parametrize("raw,expected", [
    (" aap l ", "AAPL"),
    ("brk.b", "BRK.B"),
    ("^gspc", "^GSPC"),
    ("bhp.ax", "BHP.AX"),
    ("audusd=x", "AUDUSD=X"),
    (" msft ", "MSFT"),
])
def test_validate_symbol_accepts(raw, expected):
    assert validate_symbol(raw) == expected


@pytest.mark.parametrize("raw", ["AA$PL", "^^GSPC", "A" * 16])
def test_validate_symbol_rejects(raw):
    with pytest.raises(ValueError, match="Invalid symbol format"):
        validate_symbol(raw)


def test_validate_symbol_requires_value():
    with pytest.raises(ValueError, match="Symbol is required"):
        validate_symbol("   ")
    assert normalize_symbol(None) == ""


def test_require_text():
    assert require_text("  apple ", "Search query") == "apple"
    with pytest.raises(ValueError, match="Search query is required"):
        require_text("", "Search query")


def test_settings_parse_env(monkeypatch):
    monkeypatch.setenv("CORS_ORIGINS", "http://a.test, http://b.test")
    monkeypatch.setenv("LOG_TO_FILE", "no")
    monkeypatch.setenv("USER_STORE", "Mongo")
    s = Settings()
    assert s.CORS_ORIGINS == ["http://a.test", "http://b.test"]
    assert s.LOG_TO_FILE is False
    assert s.USER_STORE == "mongo"
    assert [c for c in s.NEWS_CATEGORIES] == ["business", "technology", "markets", "economy"]


def test_settings_reject_unknown_user_store(monkeypatch):
    monkeypatch.setenv("USER_STORE", "postgres")
    with pytest.raises(ValueError):
        Settings()


def test_google_oauth_enabled_needs_both_credentials():
    assert Settings(GOOGLE_CLIENT_ID="id", GOOGLE_CLIENT_SECRET="secret").google_oauth_enabled
    assert not Settings(GOOGLE_CLIENT_ID="id", GOOGLE_CLIENT_SECRET="").google_oauth_enabled
