# backend/market_sum/main.py
from __future__ import annotations

from contextlib import asynccontextmanager
from datetime import datetime, timezone

import httpx
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from market_sum.core.config import settings
from market_sum.db import InMemoryUserRepository, MongoUserRepository, close_mongo_connection, connect_to_mongo
from market_sum.exceptions import ConfigurationError
from market_sum.logger import get_logger
from market_sum.middleware.request_logger import RequestLoggerMiddleware
from market_sum.routers import auth, market, news
from market_sum.services.google_oauth import GoogleOAuthClient
from market_sum.services.news_aggregator import NewsAggregator
from market_sum.services.quotes import QuoteService

log = get_logger(__name__)


def build_services(app: FastAPI, client: httpx.AsyncClient) -> None:
    """Wire the core services from settings onto app.state"""
    app.state.http_client = client
    app.state.news_aggregator = NewsAggregator(
        client,
        settings.NEWS_SOURCES,
        categories=settings.NEWS_CATEGORIES,
        default_category=settings.NEWS_DEFAULT_CATEGORY,
        timeout=settings.NEWS_TIMEOUT_SECONDS,
        user_agent=settings.NEWS_USER_AGENT,
        staleness_days=settings.NEWS_STALENESS_DAYS,
        search_window=settings.NEWS_SEARCH_WINDOW,
    )
    app.state.quote_service = QuoteService(
        client,
        settings.QUOTE_BASE_URL,
        timeout=settings.QUOTE_TIMEOUT_SECONDS,
        user_agent=settings.QUOTE_USER_AGENT,
    )
    app.state.google_client = None
    if settings.google_oauth_enabled:
        app.state.google_client = GoogleOAuthClient(
            client,
            client_id=settings.GOOGLE_CLIENT_ID,
            client_secret=settings.GOOGLE_CLIENT_SECRET,
            redirect_uri=settings.GOOGLE_CALLBACK_URL,
            auth_url=settings.GOOGLE_AUTH_URL,
            token_url=settings.GOOGLE_TOKEN_URL,
            userinfo_url=settings.GOOGLE_USERINFO_URL,
        )
    else:
        log.warning("GOOGLE_CLIENT_ID/SECRET not set - Google login disabled")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage application lifecycle with async context manager"""
    # ========== STARTUP ==========
    log.info("Starting %s...", settings.APP_NAME)

    client = httpx.AsyncClient(follow_redirects=True)
    build_services(app, client)

    if settings.USER_STORE == "mongo":
        db = await connect_to_mongo()
        app.state.user_repository = MongoUserRepository(db)
    else:
        app.state.user_repository = InMemoryUserRepository()
    log.info("User store: %s", settings.USER_STORE)
    log.info("News sources: %s", [s.name for s in settings.NEWS_SOURCES])

    yield  # Application runs here

    # ========== SHUTDOWN ==========
    log.info("Shutting down %s...", settings.APP_NAME)
    await client.aclose()
    if settings.USER_STORE == "mongo":
        await close_mongo_connection()
    log.info("Application shutdown complete!")


app = FastAPI(
    title=settings.APP_NAME,
    description="Real-time market data and financial news aggregation API",
    version=settings.APP_VERSION,
    docs_url=f"{settings.API_PREFIX}/docs",
    openapi_url=f"{settings.API_PREFIX}/openapi.json",
    lifespan=lifespan,
)

# CORS must be first
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(RequestLoggerMiddleware)

# ========== ERROR ENVELOPES ==========

def _error(status_code: int, message: str, headers=None) -> JSONResponse:
    body = {"success": False, "error": message, "timestamp": datetime.now(timezone.utc)}
    return JSONResponse(status_code=status_code, content=jsonable_encoder(body), headers=headers)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return _error(exc.status_code, str(exc.detail), headers=getattr(exc, "headers", None))


@app.exception_handler(ConfigurationError)
async def configuration_exception_handler(request: Request, exc: ConfigurationError):
    return _error(503, str(exc))


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    messages = ["{}: {}".format(".".join(str(p) for p in e["loc"]), e["msg"]) for e in exc.errors()]
    return _error(400, "; ".join(messages))


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    log.exception("Unhandled error on %s %s", request.method, request.url.path)
    return _error(500, str(exc) or exc.__class__.__name__)


# ========== ROUTERS ==========
app.include_router(auth.router, prefix=settings.API_PREFIX)
app.include_router(market.router, prefix=settings.API_PREFIX)
app.include_router(news.router, prefix=settings.API_PREFIX)


# ========== ROOT ENDPOINTS ==========
@app.get("/")
async def root():
    return {
        "message": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "status": "running",
        "features": {
            "google_login": settings.google_oauth_enabled,
            "user_store": settings.USER_STORE,
            "news_sources": len(settings.NEWS_SOURCES),
        },
        "api_endpoints": {
            "auth": f"{settings.API_PREFIX}/auth/*",
            "market": f"{settings.API_PREFIX}/market/*",
            "news": f"{settings.API_PREFIX}/news/*",
            "docs": f"{settings.API_PREFIX}/docs",
        },
    }


@app.get("/health")
async def health_check():
    """Health check endpoint for monitoring"""
    return {"status": "healthy", "environment": settings.ENV, "timestamp": datetime.now(timezone.utc)}
