# backend/market_sum/routers/news.py
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query

from market_sum.api.deps import get_news_aggregator, rate_limit_api
from market_sum.logger import get_logger
from market_sum.schemas.api import ApiResponse
from market_sum.schemas.news import Article, SourceSpec
from market_sum.services.news_aggregator import NewsAggregator
from market_sum.utils.validators import require_text

log = get_logger(__name__)
router = APIRouter(prefix="/news", tags=["news"], dependencies=[Depends(rate_limit_api)])


@router.get("", response_model=ApiResponse[List[Article]], summary="Get latest financial news")
async def get_latest_news(
    limit: int = Query(20, ge=1, le=100, description="Number of articles to return"),
    news: NewsAggregator = Depends(get_news_aggregator),
):
    try:
        return ApiResponse.from_result(await news.latest(limit))
    except Exception as e:
        log.exception("latest news failed")
        raise HTTPException(status_code=500, detail=str(e) or "Failed to fetch news")


@router.get("/search", response_model=ApiResponse[List[Article]], summary="Search news articles")
async def search_news(
    query: str = Query("", description="Search term"),
    limit: int = Query(20, ge=1, le=100),
    news: NewsAggregator = Depends(get_news_aggregator),
):
    try:
        q = require_text(query, "Search query")
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    try:
        return ApiResponse.from_result(await news.search(q, limit))
    except Exception as e:
        log.exception("news search failed for %r", q)
        raise HTTPException(status_code=500, detail=str(e) or "Failed to search news")


@router.get(
    "/category/{category}",
    response_model=ApiResponse[List[Article]],
    summary="Get news by category (business, technology, markets, economy)",
)
async def get_news_by_category(
    category: str,
    limit: int = Query(20, ge=1, le=100),
    news: NewsAggregator = Depends(get_news_aggregator),
):
    try:
        c = require_text(category, "Category")
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    try:
        return ApiResponse.from_result(await news.by_category(c, limit))
    except Exception as e:
        log.exception("category news failed for %s", c)
        raise HTTPException(status_code=500, detail=str(e) or "Failed to fetch category news")


@router.get("/sources", response_model=ApiResponse[List[SourceSpec]], summary="List configured news feeds")
async def list_sources(news: NewsAggregator = Depends(get_news_aggregator)):
    return ApiResponse(data=news.sources)
