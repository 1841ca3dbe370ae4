# backend/market_sum/routers/market.py
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query

from market_sum.api.deps import get_news_aggregator, get_quote_service, rate_limit_api
from market_sum.logger import get_logger
from market_sum.schemas.api import ApiResponse
from market_sum.schemas.market import AustralianMarket, MarketIndex, MarketSummary, Quote
from market_sum.services.news_aggregator import NewsAggregator
from market_sum.services.quotes import QuoteService
from market_sum.utils.validators import validate_symbol

log = get_logger(__name__)
router = APIRouter(prefix="/market", tags=["market"], dependencies=[Depends(rate_limit_api)])


@router.get("/stock/{symbol}", response_model=ApiResponse[Quote], summary="Get stock price for a specific symbol")
async def get_stock_price(symbol: str, quotes: QuoteService = Depends(get_quote_service)):
    try:
        s = validate_symbol(symbol)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    try:
        return ApiResponse.from_result(await quotes.get_quote(s))
    except Exception as e:
        log.exception("stock price failed for %s", s)
        raise HTTPException(status_code=500, detail=str(e) or "Failed to fetch stock price")


@router.get("/indices", response_model=ApiResponse[List[MarketIndex]], summary="Get market indices data")
async def get_market_indices(quotes: QuoteService = Depends(get_quote_service)):
    try:
        return ApiResponse.from_result(await quotes.get_indices())
    except Exception as e:
        log.exception("market indices failed")
        raise HTTPException(status_code=500, detail=str(e) or "Failed to fetch market indices")


@router.get("/summary", response_model=ApiResponse[MarketSummary], summary="Get comprehensive market summary")
async def get_market_summary(
    limit: int = Query(5, ge=1, le=29, description="Number of items per list"),
    quotes: QuoteService = Depends(get_quote_service),
    news: NewsAggregator = Depends(get_news_aggregator),
):
    try:
        return ApiResponse.from_result(await quotes.get_summary(limit, news=news))
    except Exception as e:
        log.exception("market summary failed")
        raise HTTPException(status_code=500, detail=str(e) or "Failed to fetch market summary")


@router.get("/gainers", response_model=ApiResponse[List[Quote]], summary="Get top gaining stocks")
async def get_top_gainers(
    limit: int = Query(10, ge=1, le=29),
    quotes: QuoteService = Depends(get_quote_service),
):
    try:
        return ApiResponse.from_result(await quotes.get_top_gainers(limit))
    except Exception as e:
        log.exception("top gainers failed")
        raise HTTPException(status_code=500, detail=str(e) or "Failed to fetch top gainers")


@router.get("/losers", response_model=ApiResponse[List[Quote]], summary="Get top losing stocks")
async def get_top_losers(
    limit: int = Query(10, ge=1, le=29),
    quotes: QuoteService = Depends(get_quote_service),
):
    try:
        return ApiResponse.from_result(await quotes.get_top_losers(limit))
    except Exception as e:
        log.exception("top losers failed")
        raise HTTPException(status_code=500, detail=str(e) or "Failed to fetch top losers")


@router.get(
    "/australia",
    response_model=ApiResponse[AustralianMarket],
    summary="Get Australian market data including ASX indices and major stocks",
)
async def get_australian_market(quotes: QuoteService = Depends(get_quote_service)):
    try:
        return ApiResponse.from_result(await quotes.get_australian_market())
    except Exception as e:
        log.exception("australian market failed")
        raise HTTPException(status_code=500, detail=str(e) or "Failed to fetch Australian market data")
