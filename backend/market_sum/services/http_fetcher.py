# backend/market_sum/services/http_fetcher.py
from __future__ import annotations

from typing import Any

import httpx

from market_sum.exceptions import MalformedPayloadError, UpstreamError
from market_sum.logger import get_logger

log = get_logger(__name__)


async def _get(client: httpx.AsyncClient, url: str, timeout: float, user_agent: str) -> httpx.Response:
    try:
        r = await client.get(url, timeout=timeout, headers={"User-Agent": user_agent})
        r.raise_for_status()
    except httpx.TimeoutException as e:
        raise UpstreamError(url, f"timeout after {timeout}s") from e
    except httpx.HTTPStatusError as e:
        raise UpstreamError(url, f"status {e.response.status_code}") from e
    except httpx.HTTPError as e:
        raise UpstreamError(url, f"{e.__class__.__name__}: {e}") from e

    log.debug("GET %s -> %s (%d bytes)", url, r.status_code, len(r.content))
    return r


async def fetch_text(client: httpx.AsyncClient, url: str, *, timeout: float, user_agent: str) -> str:
    """
    GET `url` and return the body as text.
    Any transport problem or non-2xx status is raised as UpstreamError.
    """
    r = await _get(client, url, timeout, user_agent)
    return r.text


async def fetch_json(client: httpx.AsyncClient, url: str, *, timeout: float, user_agent: str) -> Any:
    r = await _get(client, url, timeout, user_agent)
    try:
        return r.json()
    except ValueError as e:
        raise MalformedPayloadError(url, "bad-json") from e
