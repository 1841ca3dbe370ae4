# backend/market_sum/core/config.py
from __future__ import annotations
import os
from pathlib import Path
from typing import Annotated, Dict, List, Optional
from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

from market_sum.schemas.news import SourceSpec

# Resolves to <repo-root>/backend/.env
ENV_FILE = Path(__file__).resolve().parents[2] / ".env"


class CategorySpec(BaseModel):
    """Feeds and keywords that make up one news category."""
    sources: List[str]
    keywords: List[str]


DEFAULT_SOURCES: List[SourceSpec] = [
    SourceSpec(
        name="reuters-business",
        url="https://feeds.reuters.com/reuters/businessNews",
        display_name="Reuters",
        extra_tags=["business"],
    ),
    SourceSpec(
        name="reuters-technology",
        url="https://feeds.reuters.com/reuters/technologyNews",
        display_name="Reuters",
        extra_tags=["technology"],
    ),
    SourceSpec(
        name="cnbc-markets",
        url="https://search.cnbc.com/rs/search/combinedcms/view.xml?partnerId=wrss01&id=15839069",
        display_name="CNBC",
        extra_tags=["markets"],
    ),
    SourceSpec(
        name="marketwatch",
        url="https://feeds.marketwatch.com/marketwatch/topstories/",
        display_name="MarketWatch",
    ),
    SourceSpec(
        name="yahoo-finance",
        url="https://finance.yahoo.com/news/rssindex",
        display_name="Yahoo Finance",
    ),
]

DEFAULT_CATEGORIES: Dict[str, CategorySpec] = {
    "business": CategorySpec(
        sources=["reuters-business", "marketwatch", "yahoo-finance"],
        keywords=["business", "company", "companies", "earnings", "revenue", "profit",
                  "deal", "ceo", "shares", "stock", "market"],
    ),
    "technology": CategorySpec(
        sources=["reuters-technology", "yahoo-finance"],
        keywords=["tech", "software", "chip", "semiconductor", "artificial intelligence",
                  "apple", "microsoft", "google", "nvidia", "cloud", "cyber"],
    ),
    "markets": CategorySpec(
        sources=["cnbc-markets", "marketwatch", "reuters-business"],
        keywords=["market", "stocks", "shares", "index", "nasdaq", "s&p", "dow",
                  "bond", "yield", "trading", "futures"],
    ),
    "economy": CategorySpec(
        sources=["reuters-business", "marketwatch"],
        keywords=["economy", "economic", "inflation", "gdp", "federal reserve", "fed ",
                  "central bank", "interest rate", "jobs", "unemployment", "rba"],
    ),
}


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=str(ENV_FILE),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # --- App meta
    APP_NAME: str = "Market Summary API"
    APP_VERSION: str = "1.0.0"
    ENV: str = "development"
    API_PREFIX: str = "/api/v1"
    HOST: str = "0.0.0.0"
    PORT: int = 3000
    RELOAD: bool = False
    CORS_ORIGINS: Annotated[List[str], NoDecode] = ["http://localhost:3000"]

    # --- Logging
    LOG_LEVEL: str = "INFO"
    LOG_TO_FILE: bool = True

    # --- Auth
    SECRET_KEY: str = "your-super-secret-jwt-key-change-in-production"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24
    OAUTH_STATE_EXPIRE_MINUTES: int = 10
    GOOGLE_CLIENT_ID: Optional[str] = None
    GOOGLE_CLIENT_SECRET: Optional[str] = None
    GOOGLE_CALLBACK_URL: str = "http://localhost:3000/api/v1/auth/google/callback"
    GOOGLE_AUTH_URL: str = "https://accounts.google.com/o/oauth2/v2/auth"
    GOOGLE_TOKEN_URL: str = "https://oauth2.googleapis.com/token"
    GOOGLE_USERINFO_URL: str = "https://www.googleapis.com/oauth2/v3/userinfo"
    FRONTEND_URL: str = "http://localhost:3000"

    # --- User store ("memory" or "mongo")
    USER_STORE: str = "memory"
    MONGO_URI: str = "mongodb://127.0.0.1:27017"
    MONGO_DB_NAME: str = "market_sum"

    # --- Throttling (per client address)
    THROTTLE_TTL: int = 60
    THROTTLE_LIMIT: int = 100

    # --- Upstream: quotes
    QUOTE_BASE_URL: str = "https://query1.finance.yahoo.com/v8/finance/chart"
    QUOTE_TIMEOUT_SECONDS: float = 10.0
    QUOTE_USER_AGENT: str = "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36"

    # --- Upstream: news
    NEWS_TIMEOUT_SECONDS: float = 10.0
    NEWS_USER_AGENT: str = "Market-Sum-News-Bot/1.0"
    NEWS_STALENESS_DAYS: int = 7
    NEWS_SEARCH_WINDOW: int = 100
    NEWS_SOURCES: List[SourceSpec] = Field(default_factory=lambda: list(DEFAULT_SOURCES))
    NEWS_CATEGORIES: Dict[str, CategorySpec] = Field(default_factory=lambda: dict(DEFAULT_CATEGORIES))
    NEWS_DEFAULT_CATEGORY: str = "business"

    @field_validator("CORS_ORIGINS", mode="before")
    @classmethod
    def _parse_cors(cls, v):
        if isinstance(v, list):
            return v
        raw = v or os.getenv("CORS_ORIGIN", "")
        return [o.strip() for o in str(raw).split(",") if o.strip()]

    @field_validator("RELOAD", "LOG_TO_FILE", mode="before")
    @classmethod
    def _parse_bool(cls, v):
        if isinstance(v, bool):
            return v
        return str(v).lower() in ("1", "true", "yes", "on")

    @field_validator("USER_STORE")
    @classmethod
    def _validate_user_store(cls, v):
        v = (v or "memory").strip().lower()
        if v not in ("memory", "mongo"):
            raise ValueError("USER_STORE must be 'memory' or 'mongo'")
        return v

    @field_validator("NEWS_STALENESS_DAYS", "NEWS_SEARCH_WINDOW", "THROTTLE_LIMIT", "THROTTLE_TTL")
    @classmethod
    def _validate_positive(cls, v):
        if v <= 0:
            raise ValueError("must be a positive integer")
        return v

    @property
    def google_oauth_enabled(self) -> bool:
        return bool(self.GOOGLE_CLIENT_ID and self.GOOGLE_CLIENT_SECRET)


settings = Settings()
